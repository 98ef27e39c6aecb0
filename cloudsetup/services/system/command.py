"""Synchronous command runner with consistent logging."""

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence


class CommandError(Exception):
    """Raised when a checked command exits non-zero or cannot be started."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(f"Command failed ({returncode}): {format_argv(argv)}{detail}")


@dataclass(frozen=True)
class CmdResult:
    argv: List[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_command(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Optional[Mapping[str, str]] = None,
    input_text: Optional[str] = None,
    capture: bool = True,
) -> CmdResult:
    """Run a command and wait for it.

    - Logs the command at DEBUG.
    - capture=False lets stdout reach the terminal (verbose mode); stderr is
      always captured so failures can be reported.
    - check=True raises CommandError on a non-zero exit.
    """
    argv_list = list(argv)
    logging.debug(f"CMD {format_argv(argv_list)}")

    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=subprocess.PIPE if capture else None,
            stderr=subprocess.PIPE,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError as e:
        if check:
            raise CommandError(argv_list, 127, str(e)) from e
        return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))

    stdout = p.stdout or ""
    stderr = p.stderr or ""
    if stdout:
        logging.debug(f"STDOUT {stdout.strip()}")
    if stderr:
        logging.debug(f"STDERR {stderr.strip()}")

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
