import sys

import click

from text_maze.errors import InvalidArgumentError, MazeError
from text_maze.maze import Maze, path_to_directions


def print_maze(maze_rows: list[str]):
    """Prints the maze rows to the console with a short legend."""
    for row in maze_rows:
        click.echo(row)
    click.echo("S = start, E = end, * = path")


def show_solution(maze: Maze, directions: bool = False) -> bool:
    """
    Solve ``maze`` in place and print the result.

    Returns
    -------
        bool: True if a path from S to E was found and printed.
    """
    click.echo("\nSolving maze...\n")
    if not maze.solve():
        click.echo(
            click.style(
                "Could not find a solution path from Start (S) to End (E).", fg="red"
            )
        )
        click.echo("Check if S and E are connected by passages.")
        return False

    click.echo(click.style("Solved Maze:", fg="green"))
    print_maze(maze.rows())
    if directions:
        moves = path_to_directions(maze.solution_path())
        click.echo(f"\nDirections: {','.join(moves)}")
    return True


def save_maze(maze: Maze, filename: str) -> bool:
    if maze.save_to_file(filename):
        click.echo(click.style(f"Maze successfully saved to {filename}", fg="green"))
        return True
    click.echo(click.style(f"Error saving maze to file {filename}", fg="red"))
    return False


@click.command(name="generate")
@click.argument("width", type=int)
@click.argument("height", type=int)
@click.option(
    "--seed",
    type=int,
    envvar="TEXT_MAZE_SEED",
    help="Random seed for reproducible maze generation",
)
@click.option(
    "--start-x", type=int, default=0, show_default=True, help="Logical start column"
)
@click.option(
    "--start-y", type=int, default=0, show_default=True, help="Logical start row"
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Save the generated maze to this file",
)
@click.option("--solve", "solve_maze", is_flag=True, help="Solve the maze after generating it")
@click.option(
    "--directions",
    is_flag=True,
    help="With --solve, also print the path as up/down/left/right moves",
)
def generate_command(width, height, seed, start_x, start_y, output, solve_maze, directions):
    """Generate a WIDTH x HEIGHT maze with start 'S' and end 'E'."""
    click.echo(f"\nGenerating a {width}x{height} maze...\n")
    try:
        maze = Maze.blank(width, height, seed=seed).generate(start_x, start_y)
    except InvalidArgumentError as e:
        sys.exit(f"Error generating maze: {e}")

    print_maze(maze.rows())

    if output and not save_maze(maze, output):
        sys.exit(1)

    if solve_maze and not show_solution(maze, directions):
        sys.exit(1)


@click.command(name="solve")
@click.argument("maze_file", type=click.Path(dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Save the solved maze to this file",
)
@click.option(
    "--directions",
    is_flag=True,
    help="Also print the path as up/down/left/right moves",
)
def solve_command(maze_file, output, directions):
    """Load a maze from MAZE_FILE and solve it."""
    try:
        maze = Maze.load_from_file(maze_file)
    except MazeError as e:
        sys.exit(f"Error loading maze: {e}")

    click.echo(f"\nMaze loaded successfully from {maze_file}:\n")
    print_maze(maze.rows())

    if not show_solution(maze, directions):
        sys.exit(1)

    if output and not save_maze(maze, output):
        sys.exit(1)
