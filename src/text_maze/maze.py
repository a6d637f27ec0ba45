import logging
import random
from collections.abc import Iterable, Iterator
from pathlib import Path

from text_maze.errors import (
    DuplicateMarkerError,
    EmptyInputError,
    InvalidArgumentError,
    InvalidStateError,
    MalformedGridError,
    MazeIOError,
    MissingMarkerError,
)

logger = logging.getLogger(__name__)

# Characters for display and file format
WALL = "#"
PASSAGE = " "
START = "S"
END = "E"
PATH = "*"

CELL_CHARS = frozenset((WALL, PASSAGE, START, END, PATH))

# N, S, E, W as (dy, dx)
DIRECTIONS = [(-1, 0), (1, 0), (0, 1), (0, -1)]

DIRECTION_NAMES = {(-1, 0): "up", (1, 0): "down", (0, 1): "right", (0, -1): "left"}

Position = tuple[int, int]


class Maze:
    """
    A rectangular maze stored as a character grid with walls between cells.

    Logical cell (y, x) lives at grid position (2*y + 1, 2*x + 1); every
    even row and column holds wall slots. Use :meth:`blank` to start a maze
    for generation and :meth:`load_from_file` / :meth:`from_rows` to build
    one from an existing grid.
    """

    def __init__(
        self,
        grid: list[list[str]],
        width: int,
        height: int,
        start_pos: Position | None = None,
        end_pos: Position | None = None,
        logical_start: Position | None = None,
        logical_end: Position | None = None,
        rng: random.Random | None = None,
    ):
        self._grid = grid
        self.width = width
        self.height = height
        self.grid_height = len(grid)
        self.grid_width = len(grid[0]) if grid else 0
        self.start_pos = start_pos
        self.end_pos = end_pos
        self.logical_start = logical_start
        self.logical_end = logical_end
        self._rng = rng if rng is not None else random.Random()
        self._solution: list[Position] = []

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> "Maze":
        """
        Create an all-walls maze of ``width`` x ``height`` cells, ready for :meth:`generate`.

        Args:
            width: Number of cells along the horizontal axis, must be positive.
            height: Number of cells along the vertical axis, must be positive.
            seed: Seed for reproducible generation. Ignored when ``rng`` is given.
            rng: Random source to carve with. Defaults to ``random.Random(seed)``.

        Raises
        ------
            InvalidArgumentError: If either dimension is not a positive integer.
        """
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidArgumentError(
                    f"Maze {name} must be a positive integer, got {value!r}"
                )
        if rng is None:
            rng = random.Random(seed)
        return cls(_wall_grid(width, height), width, height, rng=rng)

    @classmethod
    def from_rows(cls, rows: Iterable[str], source: str = "<rows>") -> "Maze":
        """
        Parse a maze from its text rows, recovering the 'S' and 'E' markers.

        Logical dimensions are approximated as ``(grid_dim - 1) // 2``, which is
        exact for grids written by :meth:`save_to_file`.
        """
        lines = list(rows)
        if not lines:
            raise EmptyInputError(f"Maze input cannot be empty: {source}")

        grid_width = len(lines[0])
        grid = []
        start_pos = None
        end_pos = None

        for r, line in enumerate(lines):
            if len(line) != grid_width:
                raise MalformedGridError(
                    f"Inconsistent row length in {source}: row {r} has "
                    f"{len(line)} characters, expected {grid_width}"
                )
            for c, char in enumerate(line):
                if char not in CELL_CHARS:
                    raise MalformedGridError(
                        f"Unexpected character {char!r} at row {r}, column {c} in {source}"
                    )
                if char == START:
                    if start_pos is not None:
                        raise DuplicateMarkerError(
                            f"More than one start position 'S' in {source}: "
                            f"{start_pos} and {(r, c)}"
                        )
                    start_pos = (r, c)
                elif char == END:
                    if end_pos is not None:
                        raise DuplicateMarkerError(
                            f"More than one end position 'E' in {source}: "
                            f"{end_pos} and {(r, c)}"
                        )
                    end_pos = (r, c)
            grid.append(list(line))

        if start_pos is None:
            raise MissingMarkerError(f"Start position 'S' not found in {source}")
        if end_pos is None:
            raise MissingMarkerError(f"End position 'E' not found in {source}")

        return cls(
            grid,
            width=(grid_width - 1) // 2,
            height=(len(grid) - 1) // 2,
            start_pos=start_pos,
            end_pos=end_pos,
        )

    @classmethod
    def load_from_file(cls, path: str | Path) -> "Maze":
        """Load a maze previously written by :meth:`save_to_file` (or by hand)."""
        path = Path(path)
        try:
            text = path.read_text()
        except FileNotFoundError as exc:
            raise MazeIOError(
                f"Cannot open file or file does not exist: {path}"
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise MazeIOError(f"Cannot read maze file {path}: {exc}") from exc

        # read_text folds \r\n and \r into \n; nothing else ends a row.
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        maze = cls.from_rows(lines, source=str(path))
        logger.info(
            f"Loaded {maze.grid_width}x{maze.grid_height} maze grid from {path}"
        )
        return maze

    # --- Grid / coordinate mapping ---

    def logical_to_grid(self, y: int, x: int) -> Position:
        """Convert logical cell coordinates to grid coordinates, clamping out-of-range input."""
        y = min(max(y, 0), self.height - 1)
        x = min(max(x, 0), self.width - 1)
        return 2 * y + 1, 2 * x + 1

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.grid_height and 0 <= col < self.grid_width

    def cell(self, row: int, col: int) -> str:
        return self._grid[row][col]

    def rows(self) -> list[str]:
        """Return the grid as a list of strings (a copy, never the live grid)."""
        return ["".join(row) for row in self._grid]

    def display(self) -> str:
        return "\n".join(self.rows())

    def __str__(self) -> str:
        return self.display()

    def __repr__(self) -> str:
        return (
            f"Maze(width={self.width}, height={self.height}, "
            f"start_pos={self.start_pos}, end_pos={self.end_pos})"
        )

    # --- Maze Generation (Recursive Backtracker) ---

    def generate(self, start_x: int = 0, start_y: int = 0) -> "Maze":
        """
        Carve a perfect maze starting from logical cell (``start_y``, ``start_x``).

        Out-of-range start coordinates fall back to 0. The end is always the
        bottom-right cell. On a 1x1 maze start and end share the only cell and
        END wins, so the grid holds an 'E' but no 'S'.

        Returns
        -------
            Maze: ``self``, so calls can be chained after :meth:`blank`.
        """
        if self.width < 1 or self.height < 1:
            raise InvalidStateError(
                f"Cannot generate a maze with {self.width}x{self.height} cells"
            )
        if not 0 <= start_x < self.width:
            start_x = 0
        if not 0 <= start_y < self.height:
            start_y = 0

        self._grid = _wall_grid(self.width, self.height)
        self.grid_height = len(self._grid)
        self.grid_width = len(self._grid[0])
        self._solution = []

        self.logical_start = (start_y, start_x)
        self.logical_end = (self.height - 1, self.width - 1)

        self._carve_passages_from(start_y, start_x)

        self.start_pos = self.logical_to_grid(*self.logical_start)
        self.end_pos = self.logical_to_grid(*self.logical_end)
        start_row, start_col = self.start_pos
        end_row, end_col = self.end_pos
        self._grid[start_row][start_col] = START

        if (
            self.end_pos != self.start_pos
            and self._grid[end_row][end_col] != PASSAGE
        ):
            # The backtracker visits every cell, so this means a carving bug.
            logger.warning(
                f"End cell {self.end_pos} was not carved "
                f"(found {self._grid[end_row][end_col]!r}); forcing end marker"
            )
        self._grid[end_row][end_col] = END

        return self

    def _carve_passages_from(self, cy: int, cx: int) -> None:
        # Each frame keeps the directions it has not tried yet, so popping a
        # frame resumes its parent exactly where a recursive call would.
        self._carve(*self.logical_to_grid(cy, cx))
        stack = [(cy, cx, self._shuffled_directions())]

        while stack:
            cy, cx, directions = stack[-1]
            for dy, dx in directions:
                ny, nx = cy + dy, cx + dx
                if not (0 <= ny < self.height and 0 <= nx < self.width):
                    continue
                grid_ny, grid_nx = self.logical_to_grid(ny, nx)
                if self._grid[grid_ny][grid_nx] != WALL:
                    continue
                grid_y, grid_x = self.logical_to_grid(cy, cx)
                self._carve(grid_y + dy, grid_x + dx)
                self._carve(grid_ny, grid_nx)
                stack.append((ny, nx, self._shuffled_directions()))
                break
            else:
                stack.pop()  # Backtrack

    def _carve(self, row: int, col: int) -> None:
        self._grid[row][col] = PASSAGE

    def _shuffled_directions(self) -> Iterator[Position]:
        directions = list(DIRECTIONS)
        self._rng.shuffle(directions)
        return iter(directions)

    # --- Maze Saving ---

    def save_to_file(self, path: str | Path) -> bool:
        """
        Write the grid to ``path``, one newline-terminated line per row.

        Returns
        -------
            bool: True on success, False if there is no grid or the write failed.
        """
        if not self._grid:
            logger.error("Maze grid not available to save.")
            return False

        path = Path(path)
        try:
            path.write_text("".join(f"{row}\n" for row in self.rows()))
        except OSError as exc:
            logger.error(f"Error saving maze to file {path}: {exc}")
            return False

        logger.info(f"Maze successfully saved to {path}")
        return True

    # --- Maze Solving (Depth-First Search) ---

    def solve(self) -> bool:
        """
        Find a route from start to end and mark it with '*' in the grid.

        Path markers left by a previous solve are cleared first, so solving
        twice gives the same grid. When no route exists the grid is left
        without any path markers.

        Raises
        ------
            InvalidStateError: If the start or end marker is missing from the grid.
        """
        self._check_markers()

        for row in self._grid:
            for c, cell in enumerate(row):
                if cell == PATH:
                    row[c] = PASSAGE

        self._solution = self._search()

        if self.start_pos != self.end_pos:
            row, col = self.start_pos
            self._grid[row][col] = START

        return bool(self._solution)

    def solution_path(self) -> list[Position]:
        """Grid positions from start to end found by the last successful :meth:`solve`."""
        return list(self._solution)

    def _check_markers(self) -> None:
        if self.start_pos is None or not self.in_bounds(*self.start_pos):
            raise InvalidStateError(
                "Start position 'S' is missing or invalid in the maze grid."
            )
        if self.end_pos is None or not self.in_bounds(*self.end_pos):
            raise InvalidStateError(
                "End position 'E' is missing or invalid in the maze grid."
            )
        expected_start = END if self.start_pos == self.end_pos else START
        if self.cell(*self.start_pos) != expected_start:
            raise InvalidStateError(
                "Start position 'S' is missing or invalid in the maze grid."
            )
        if self.cell(*self.end_pos) != END:
            raise InvalidStateError(
                "End position 'E' is missing or invalid in the maze grid."
            )

    def _search(self) -> list[Position]:
        visited: set[Position] = set()
        if self.start_pos == self.end_pos:
            return [self.start_pos]

        stack = [self._enter(self.start_pos, visited)]
        while stack:
            pos, original, neighbours = stack[-1]
            for nxt in neighbours:
                if not self._can_step(nxt, visited):
                    continue
                if nxt == self.end_pos:
                    return [frame[0] for frame in stack] + [nxt]
                stack.append(self._enter(nxt, visited))
                break
            else:
                # Dead end: roll back the mark, but keep the cell visited.
                stack.pop()
                if pos != self.start_pos:
                    self._grid[pos[0]][pos[1]] = original
        return []

    def _can_step(self, pos: Position, visited: set[Position]) -> bool:
        return (
            self.in_bounds(*pos)
            and self.cell(*pos) != WALL
            and pos not in visited
        )

    def _enter(self, pos: Position, visited: set[Position]):
        visited.add(pos)
        row, col = pos
        original = self._grid[row][col]
        if pos != self.start_pos:
            self._grid[row][col] = PATH
        neighbours = ((row + dy, col + dx) for dy, dx in DIRECTIONS)
        return pos, original, neighbours


def path_to_directions(path: list[Position]) -> list[str]:
    """
    Convert a list of adjacent grid positions into "up"/"down"/"left"/"right" moves.

    Raises
    ------
        ValueError: If two consecutive positions are not orthogonal neighbours.
    """
    directions = []
    for (r0, c0), (r1, c1) in zip(path, path[1:]):
        try:
            directions.append(DIRECTION_NAMES[(r1 - r0, c1 - c0)])
        except KeyError:
            raise ValueError(
                f"Positions {(r0, c0)} and {(r1, c1)} are not adjacent"
            ) from None
    return directions


def _wall_grid(width: int, height: int) -> list[list[str]]:
    return [[WALL for _ in range(2 * width + 1)] for _ in range(2 * height + 1)]
