"""System Effector - the only place where the host is mutated."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ...core.exceptions import PrivilegeError
from ...utils.file_operations import line_to_append
from .command import CmdResult, CommandError, run_command


class SystemEffector(ABC):
    """Capability set used by the reconciliation logic.

    Read-only probes and mutations are kept together so that the managers can
    be exercised without real privilege, packages or mounts.
    """

    # Probes

    @abstractmethod
    def is_command_available(self, name: str) -> bool:
        pass

    @abstractmethod
    def is_mount_active(self, path: str) -> bool:
        pass

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def read_text(self, path: str, privileged: bool = False) -> str:
        """Return file contents, or an empty string if the file does not exist."""
        pass

    @abstractmethod
    def read_scheduled_jobs(self) -> str:
        """Return the invoking user's crontab, or an empty string if none exists.

        Raises CommandError if the crontab exists but cannot be read.
        """
        pass

    # Mutations

    @abstractmethod
    def validate_privileges(self) -> None:
        pass

    @abstractmethod
    def install_package(self, package: str, env: Optional[Mapping[str, str]] = None) -> None:
        pass

    @abstractmethod
    def set_debconf_selection(self, selection: str) -> None:
        pass

    @abstractmethod
    def add_user_to_group(self, user: str, group: str) -> None:
        pass

    @abstractmethod
    def write_protected_file(self, path: str, content: str) -> None:
        """Create or rewrite a file readable and writable by its owner only."""
        pass

    @abstractmethod
    def append_line(self, path: str, line: str, privileged: bool = False) -> None:
        pass

    @abstractmethod
    def make_directory(self, path: str, privileged: bool = False) -> None:
        pass

    @abstractmethod
    def mount_filesystem(
        self,
        target: str,
        source: Optional[str] = None,
        fs_type: Optional[str] = None,
        options: Optional[str] = None,
    ) -> None:
        pass

    @abstractmethod
    def reload_service_manager(self) -> None:
        pass

    @abstractmethod
    def register_scheduled_job(self, line: str) -> None:
        """Append one line to the invoking user's crontab."""
        pass

    @abstractmethod
    def run_mirror(self, argv: Sequence[str]) -> CmdResult:
        pass

    @abstractmethod
    def create_symlink(self, link_path: str, target: str) -> None:
        pass


class LocalSystemEffector(SystemEffector):
    """Effector backed by sudo, apt-get, mount, systemctl and crontab."""

    def __init__(self, verbose: bool = False):
        self._capture = not verbose

    def is_command_available(self, name: str) -> bool:
        # mount helpers live in /sbin, which is not always on a user's PATH
        for directory in os.environ.get("PATH", "").split(os.pathsep) + ["/sbin", "/usr/sbin"]:
            candidate = Path(directory) / name
            if directory and candidate.is_file() and os.access(candidate, os.X_OK):
                return True
        return False

    def is_mount_active(self, path: str) -> bool:
        return os.path.ismount(path)

    def file_exists(self, path: str) -> bool:
        return Path(path).is_file()

    def read_text(self, path: str, privileged: bool = False) -> str:
        if privileged:
            result = run_command(["sudo", "cat", path], check=False)
            return result.stdout if result.ok else ""
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

    def read_scheduled_jobs(self) -> str:
        result = run_command(["crontab", "-l"], check=False)
        if result.ok:
            return result.stdout
        # crontab -l exits 1 with "no crontab for <user>" when none exists yet
        if result.returncode == 1 and "no crontab for" in result.stderr:
            return ""
        raise CommandError(result.argv, result.returncode, result.stderr)

    def validate_privileges(self) -> None:
        try:
            run_command(["sudo", "-v"], capture=False)
        except CommandError as e:
            raise PrivilegeError(f"Sudo permissions required to continue: {e}") from e

    def install_package(self, package: str, env: Optional[Mapping[str, str]] = None) -> None:
        assignments = [f"{key}={value}" for key, value in (env or {}).items()]
        run_command(["sudo", *assignments, "apt-get", "install", "-y", package], capture=self._capture)

    def set_debconf_selection(self, selection: str) -> None:
        run_command(["sudo", "debconf-set-selections"], input_text=selection + "\n")

    def add_user_to_group(self, user: str, group: str) -> None:
        run_command(["sudo", "usermod", "-aG", group, user])

    def write_protected_file(self, path: str, content: str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        # mkstemp creates the file with mode 0600; the old file stays intact until replaced
        fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, target)
        except OSError:
            os.unlink(tmp_path)
            raise
        logging.debug(f"Wrote owner-only file {path}")

    def append_line(self, path: str, line: str, privileged: bool = False) -> None:
        text = line_to_append(self.read_text(path, privileged=privileged), line)
        if privileged:
            run_command(["sudo", "tee", "-a", path], input_text=text)
        else:
            with open(path, "a", encoding="utf-8") as f:
                f.write(text)

    def make_directory(self, path: str, privileged: bool = False) -> None:
        if privileged:
            run_command(["sudo", "mkdir", "-p", path])
        else:
            Path(path).mkdir(parents=True, exist_ok=True)

    def mount_filesystem(
        self,
        target: str,
        source: Optional[str] = None,
        fs_type: Optional[str] = None,
        options: Optional[str] = None,
    ) -> None:
        argv = ["sudo", "mount"]
        if fs_type:
            argv += ["-t", fs_type]
        if options:
            argv += ["-o", options]
        if source:
            argv.append(source)
        argv.append(target)
        run_command(argv, capture=self._capture)

    def reload_service_manager(self) -> None:
        run_command(["sudo", "systemctl", "daemon-reload"])

    def register_scheduled_job(self, line: str) -> None:
        current = self.read_scheduled_jobs()
        run_command(["crontab", "-"], input_text=current + line_to_append(current, line))

    def run_mirror(self, argv: Sequence[str]) -> CmdResult:
        return run_command(argv, check=False, capture=self._capture)

    def create_symlink(self, link_path: str, target: str) -> None:
        Path(link_path).parent.mkdir(parents=True, exist_ok=True)
        os.symlink(target, link_path)
