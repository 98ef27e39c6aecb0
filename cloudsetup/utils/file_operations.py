from pathlib import Path
from typing import Iterable, Optional


def find_line_with_prefix(text: str, prefix: str) -> Optional[str]:
    """Return the first line starting with the literal prefix, if any."""
    if not prefix:
        return None
    for line in text.splitlines():
        if line.startswith(prefix):
            return line
    return None


def contains_literal(text: str, needle: str) -> bool:
    return bool(needle) and needle in text


def line_to_append(existing: str, line: str) -> str:
    # Keep the new line on its own even if the file lacks a trailing newline
    separator = "\n" if existing and not existing.endswith("\n") else ""
    return f"{separator}{line}\n"


def directory_has_content(path: Path, ignore: Iterable[str] = ()) -> bool:
    """True if the directory holds at least one entry not named in ignore."""
    ignored = set(ignore)
    try:
        return any(entry.name not in ignored for entry in path.iterdir())
    except (FileNotFoundError, NotADirectoryError):
        return False


def path_is_occupied(path: Path) -> bool:
    """True for any filesystem object at path, including dangling symlinks."""
    return path.is_symlink() or path.exists()
