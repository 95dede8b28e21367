"""
General utility functions for the CLI application.
"""

from pathlib import Path, PurePath
from rich.console import Console

console: Console = Console()


def debug(
    *values: object,
    sep: str = " ",
    end: str = "\n",
) -> None:
    """
    Print debug message with orange bold formatting.

    This utility function formats and prints debug messages to the console using
    Rich's styling capabilities. It's used by the watch loop in verbose mode to
    surface events that were filtered out.

    Args:
        *values: Variable number of objects to print. All values are converted to strings.
        sep: Separator string between values. Defaults to a single space.
        end: String appended after the last value. Defaults to newline.
    """
    if not values:
        print(end=end)
        return

    message = sep.join(str(v) for v in values)
    console.print(f"DEBUG: {message}", end=end, style="orange1")


def to_posix(path: PurePath | str) -> str:
    """
    Normalize a path to forward slashes regardless of the host separator.

    Args:
        path: A path object or a string that may contain backslashes.

    Returns:
        str: The same path using "/" as the only separator.
    """
    return str(path).replace("\\", "/")


def relative_posix(path: Path, root: Path) -> str:
    """
    Express `path` relative to `root` with forward slashes.

    Raises:
        ValueError: If `path` is not located under `root`.
    """
    return to_posix(path.relative_to(root))


def format_bytes(size: int) -> str:
    """
    Render a byte count the way the console reports it (B, KB or MB).

    Examples:
        >>> format_bytes(512)
        '512B'
        >>> format_bytes(2048)
        '2.0KB'
    """
    if size < 1024:
        return f"{size}B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f}KB"
    return f"{size / (1024 * 1024):.1f}MB"
