import sys

import pytest
from click.testing import CliRunner

from text_maze import cli, main
from text_maze.maze_commands import print_maze


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def two_by_one_file(tmp_path):
    maze_file = tmp_path / "maze.txt"
    maze_file.write_text("#####\n#S E#\n#####\n")
    return maze_file


def test_print_maze(capsys):
    """Test that print_maze displays the maze correctly."""
    print_maze(["###", "#E#", "###"])

    captured = capsys.readouterr()
    assert captured.out == "###\n#E#\n###\nS = start, E = end, * = path\n"


def test_generate_command(runner):
    result = runner.invoke(cli, ["generate", "2", "1"])

    assert result.exit_code == 0
    assert "Generating a 2x1 maze..." in result.output
    assert "#S E#" in result.output
    assert "Solving maze" not in result.output


@pytest.mark.parametrize("args", [["0", "3"], ["3", "0"]])
def test_generate_command_invalid_size(runner, args):
    result = runner.invoke(cli, ["generate", *args])

    assert result.exit_code == 1
    assert "must be a positive integer" in result.output


def test_generate_command_save_and_solve(runner, tmp_path):
    maze_file = tmp_path / "generated.txt"
    result = runner.invoke(
        cli,
        ["generate", "4", "3", "--seed", "7", "-o", str(maze_file), "--solve", "--directions"],
    )

    assert result.exit_code == 0
    assert "Maze successfully saved to" in result.output
    assert "Solved Maze:" in result.output
    assert "Directions: " in result.output
    # The file holds the unsolved maze
    assert "*" not in maze_file.read_text()
    assert "S" in maze_file.read_text()


def test_generate_command_seed_from_environment(runner):
    first = runner.invoke(cli, ["generate", "6", "6"], env={"TEXT_MAZE_SEED": "5"})
    second = runner.invoke(cli, ["generate", "6", "6"], env={"TEXT_MAZE_SEED": "5"})

    assert first.exit_code == 0
    assert first.output == second.output


def test_generate_command_save_failure(runner, tmp_path):
    result = runner.invoke(
        cli, ["generate", "2", "2", "-o", str(tmp_path / "missing" / "maze.txt")]
    )

    assert result.exit_code == 1
    assert "Error saving maze to file" in result.output


def test_solve_command(runner, tmp_path, two_by_one_file):
    solved_file = tmp_path / "solved.txt"
    result = runner.invoke(
        cli, ["solve", str(two_by_one_file), "--directions", "-o", str(solved_file)]
    )

    assert result.exit_code == 0
    assert "Maze loaded successfully" in result.output
    assert "#S*E#" in result.output
    assert "Directions: right,right" in result.output
    assert solved_file.read_text() == "#####\n#S*E#\n#####\n"


def test_solve_command_missing_file(runner, tmp_path):
    result = runner.invoke(cli, ["solve", str(tmp_path / "nope.txt")])

    assert result.exit_code == 1
    assert "Error loading maze" in result.output


def test_solve_command_malformed_file(runner, tmp_path):
    maze_file = tmp_path / "ragged.txt"
    maze_file.write_text("###\n#####\n")

    result = runner.invoke(cli, ["solve", str(maze_file)])

    assert result.exit_code == 1
    assert "Inconsistent row length" in result.output


def test_solve_command_no_route(runner, tmp_path):
    maze_file = tmp_path / "blocked.txt"
    maze_file.write_text("#####\n#S#E#\n#####\n")

    result = runner.invoke(cli, ["solve", str(maze_file)])

    assert result.exit_code == 1
    assert "Could not find a solution path" in result.output


def test_interactive_generate_and_solve(runner):
    result = runner.invoke(cli, ["run-interactive"], input="X\ng\n2\n1\nn\ny\n")

    assert result.exit_code == 0
    assert "Invalid choice. Please enter G, L, or Q." in result.output
    assert "Generated Maze (2x1):" in result.output
    assert "#S*E#" in result.output


def test_interactive_rejects_non_positive_size(runner):
    result = runner.invoke(cli, ["run-interactive"], input="G\n0\n2\n1\nn\nn\n")

    assert result.exit_code == 0
    assert "Generated Maze (2x1):" in result.output
    assert "Okay, maze not solved." in result.output


def test_interactive_generate_and_save(runner, tmp_path):
    maze_file = tmp_path / "saved.txt"
    result = runner.invoke(
        cli, ["run-interactive"], input=f"G\n2\n1\ny\n{maze_file}\nn\n"
    )

    assert result.exit_code == 0
    assert maze_file.read_text() == "#####\n#S E#\n#####\n"


def test_interactive_load_error_then_quit(runner, tmp_path):
    result = runner.invoke(
        cli, ["run-interactive"], input=f"L\n{tmp_path / 'nope.txt'}\nQ\n"
    )

    assert result.exit_code == 0
    assert "Error loading maze" in result.output
    assert "Goodbye!" in result.output


def test_interactive_load_default_file(runner, two_by_one_file):
    result = runner.invoke(
        cli,
        ["run-interactive"],
        input="L\n\ny\n",
        env={"TEXT_MAZE_DEFAULT_FILE": str(two_by_one_file)},
    )

    assert result.exit_code == 0
    assert f"Maze loaded successfully from {two_by_one_file}" in result.output
    assert "#S*E#" in result.output


def test_console_script_entry_point(monkeypatch, capsys):
    """Test that the installed `text-maze` entry point runs the command group."""
    monkeypatch.setattr(sys, "argv", ["text-maze", "generate", "2", "1"])

    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 0
    assert "#S E#" in capsys.readouterr().out
