class MazeError(Exception):
    """Base class for every error raised by the maze core."""


class InvalidArgumentError(MazeError, ValueError):
    """Raised when a maze is requested with non-positive dimensions."""


class MazeIOError(MazeError, OSError):
    """Raised when a maze file cannot be found, opened or decoded."""


class MalformedInputError(MazeError, ValueError):
    """Raised when a maze file does not describe a rectangular grid."""


class EmptyInputError(MalformedInputError):
    pass


class MalformedGridError(MalformedInputError):
    pass


class DuplicateMarkerError(MalformedInputError):
    pass


class MissingMarkerError(MazeError, ValueError):
    """Raised when a loaded grid has no 'S' or no 'E'."""


class InvalidStateError(MazeError, RuntimeError):
    """Raised when solving a maze whose start/end markers are missing or corrupted."""
