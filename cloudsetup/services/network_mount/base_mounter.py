"""Abstract Base Mount Manager - shared wiring and fstab reconciliation."""

import logging
from abc import ABC, abstractmethod
from typing import Mapping

from ...config import Settings
from ...core.exceptions import PersistenceError
from ...models import FstabEntry, MountKind, ProvisioningReport, StepOutcome
from ...utils.file_operations import find_line_with_prefix
from ..credentials import Prompter
from ..system import CommandError, PackageHooks, SystemEffector
from .mount_config import MountConfigHandler


class BaseMountManager(ABC):
    """Base class for the per-protocol mount managers."""

    kind: MountKind

    def __init__(
        self,
        settings: Settings,
        effector: SystemEffector,
        prompter: Prompter,
        package_hooks: Mapping[str, PackageHooks],
    ):
        self._settings = settings
        self._effector = effector
        self._prompter = prompter
        self._package_hooks = package_hooks
        self._config = MountConfigHandler(settings)

    @abstractmethod
    def reconcile(self, report: ProvisioningReport) -> StepOutcome:
        """Bring the mount to its desired state, recording each step in report."""
        pass

    @abstractmethod
    def get_kind_name(self) -> str:
        """Get protocol name for logging."""
        pass

    def fstab_has_source(self, source: str) -> bool:
        existing = find_line_with_prefix(self._effector.read_text(self._settings.fstab_path), source)
        if existing:
            logging.info(f"The source '{source}' already exists in the fstab ({self._settings.fstab_path}).")
            logging.debug(f"Existing fstab line: {existing}")
            return True
        return False

    def append_fstab_entry(self, entry: FstabEntry) -> None:
        try:
            self._effector.append_line(self._settings.fstab_path, entry.render(), privileged=True)
        except (CommandError, OSError) as e:
            raise PersistenceError(self._settings.fstab_path, str(e)) from e
        logging.info(f"Entry successfully added to fstab ({self._settings.fstab_path}).")
