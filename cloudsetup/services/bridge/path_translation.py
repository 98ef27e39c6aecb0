"""Translation of foreign-host drive-letter paths into the local mount namespace."""

import re
from pathlib import PurePosixPath
from typing import Optional, Tuple

# C:\..., C:/..., /C:/..., \\?\C:\..., /??/C:/... and a bare "C:"
_DRIVE_PREFIX = re.compile(
    r"^(?:\\\\\?\\|//\?/|/\?\?/|\\\?\?\\)?[/\\]?(?P<drive>[A-Za-z]):(?P<rest>(?:[/\\].*)?)$"
)


def split_drive(foreign_path: str) -> Optional[Tuple[str, str]]:
    """
    Split a foreign path into (lower-case drive letter, remainder).

    The remainder keeps its text but uses forward slashes. Returns None when
    the path has no drive-letter prefix.
    """
    match = _DRIVE_PREFIX.match(foreign_path.strip())
    if not match:
        return None
    rest = match.group("rest").replace("\\", "/")
    return match.group("drive").lower(), rest


def drive_mount_point(drive: str, drive_mount_root: str) -> PurePosixPath:
    """Local directory reserved for a drive letter, e.g. C -> /mnt/c."""
    return PurePosixPath(drive_mount_root) / drive.lower()


def translate_foreign_path(foreign_path: str, drive_mount_root: str) -> PurePosixPath:
    """
    Map a drive-letter path onto the local mount namespace.

    >>> translate_foreign_path("C:/Users/me/Cloud", "/mnt")
    PurePosixPath('/mnt/c/Users/me/Cloud')

    Raises ValueError if foreign_path does not start with a drive letter.
    """
    parts = split_drive(foreign_path)
    if parts is None:
        raise ValueError(f"Not a drive-letter path: {foreign_path!r}")
    drive, rest = parts
    root = drive_mount_point(drive, drive_mount_root)
    rest = rest.lstrip("/")
    return root / rest if rest else root
