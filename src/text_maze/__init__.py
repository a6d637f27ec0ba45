import logging

import click
from dotenv import load_dotenv

from text_maze.interactive_cli import run_interactive_command
from text_maze.maze import Maze, path_to_directions
from text_maze.maze_commands import generate_command, solve_command

__all__ = ["Maze", "cli", "main", "path_to_directions"]


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="TEXT_MAZE_LOG_LEVEL",
    show_default=True,
    help="Logging level for library messages",
)
def cli(log_level):
    """Text Maze - generate, save, load and solve ASCII mazes."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


cli.add_command(generate_command)
cli.add_command(solve_command)
cli.add_command(run_interactive_command)


def main():
    # Pick up TEXT_MAZE_* defaults from a local .env before click reads envvars.
    load_dotenv()
    cli()
