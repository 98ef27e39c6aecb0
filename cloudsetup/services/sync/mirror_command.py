from pathlib import Path
from typing import List

from ..system.command import format_argv


def build_mirror_argv(source: Path, destination: Path, reserved_dir: str) -> List[str]:
    """rsync invocation mirroring source into destination.

    --delete removes destination files that are gone from the source; the
    reserved directory is excluded, so it is neither compared nor deleted.
    """
    return [
        "rsync",
        "-a",
        "--delete",
        f"--exclude={reserved_dir}/",
        f"{str(source).rstrip('/')}/",
        f"{str(destination).rstrip('/')}/",
    ]


def mirror_command_text(argv: List[str]) -> str:
    """Shell text of the mirror command, identical on every run for the same paths."""
    return format_argv(argv)
