import logging
import os

import click
from dotenv import load_dotenv

from text_maze.errors import MazeError
from text_maze.maze import Maze
from text_maze.maze_commands import print_maze, save_maze, show_solution

logger = logging.getLogger(__name__)

DEFAULT_MAZE_FILE = "maze.txt"


@click.command(name="run-interactive")
@click.option(
    "--seed",
    type=int,
    envvar="TEXT_MAZE_SEED",
    help="Random seed for reproducible maze generation",
)
def run_interactive_command(seed) -> None:
    """Generate or load a maze, then optionally save and solve it, step by step.

    The command loops over a short menu:

    1. ``G`` generates a new maze after asking for its width and height,
       displays it, and offers to save it to a file.
    2. ``L`` loads a maze from a file and displays it. Load errors (missing
       file, ragged rows, missing ``S``/``E`` ...) are reported and the menu
       is shown again.
    3. ``Q`` quits.

    Once a maze is available the user is asked whether to solve it. The
    default filename offered by the save/load prompts comes from
    ``TEXT_MAZE_DEFAULT_FILE`` (also read from a local ``.env`` file).
    """

    load_dotenv()
    default_file = os.getenv("TEXT_MAZE_DEFAULT_FILE", DEFAULT_MAZE_FILE)

    click.echo("Welcome to the Maze Generator and Solver!")
    click.echo("-----------------------------------------")

    try:
        maze = _choose_maze(seed, default_file)
        if maze is None:
            return

        # ------------------------------------------------------------------
        # Solving stage (only if a maze is available)
        # ------------------------------------------------------------------
        if not click.confirm("\nDo you want to solve this maze?", default=True):
            click.echo("Okay, maze not solved.")
            return

        try:
            show_solution(maze)
        except MazeError as e:
            click.echo(click.style(f"Error during solving: {e}", fg="red"))
    except Exception:
        logger.exception("Unexpected error in interactive maze session")
        raise


def _choose_maze(seed: int | None, default_file: str) -> Maze | None:
    """Show the G/L/Q menu until a maze is generated or loaded; None means quit."""
    while True:
        choice = click.prompt(
            "Choose action: [G]enerate new maze, [L]oad maze from file, [Q]uit",
            type=str,
        )
        choice = choice.strip().upper()

        if choice == "G":
            return _generate_maze(seed, default_file)
        if choice == "L":
            maze = _load_maze(default_file)
            if maze is not None:
                return maze
        elif choice == "Q":
            click.echo("Goodbye!")
            return None
        else:
            click.echo(
                click.style("Invalid choice. Please enter G, L, or Q.", fg="yellow")
            )


def _generate_maze(seed: int | None, default_file: str) -> Maze:
    width = click.prompt(
        "Enter maze width (number of cells, > 0)", type=click.IntRange(min=1)
    )
    height = click.prompt(
        "Enter maze height (number of cells, > 0)", type=click.IntRange(min=1)
    )

    maze = Maze.blank(width, height, seed=seed).generate()
    click.echo(f"\nGenerated Maze ({width}x{height}):")
    print_maze(maze.rows())

    if click.confirm("\nSave generated maze to file?", default=False):
        filename = click.prompt(
            "Enter filename to save maze", default=default_file, type=str
        )
        save_maze(maze, filename.strip())
    return maze


def _load_maze(default_file: str) -> Maze | None:
    filename = click.prompt(
        "Enter filename to load maze from", default=default_file, type=str
    ).strip()

    try:
        maze = Maze.load_from_file(filename)
    except MazeError as e:
        click.echo(click.style(f"Error loading maze: {e}", fg="red"))
        return None

    click.echo(f"\nMaze loaded successfully from {filename}:")
    print_maze(maze.rows())
    return maze
