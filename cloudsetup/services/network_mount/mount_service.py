"""Network Mount Service - orchestrates mounts, the symlink bridge and the mirror job."""

import logging
from typing import List, Mapping, Optional

from ...config import Settings
from ...core.exceptions import UserAbort
from ...models import ProvisioningReport, StepOutcome
from ..bridge import SymlinkBridgeResolver
from ..credentials import Prompter
from ..sync import SyncScheduler
from ..system import PackageHooks, SystemEffector
from .base_mounter import BaseMountManager
from .mounter_factory import MountManagerFactory


class NetworkMountService:
    """
    Runs the selected mount managers in order, then hands off to the symlink
    bridge and the sync scheduler once the foreign mount is live.

    Fatal ProvisioningErrors propagate to the caller unchanged. An operator
    declining one manager only skips that manager.
    """

    def __init__(
        self,
        settings: Settings,
        effector: SystemEffector,
        prompter: Prompter,
        package_hooks: Mapping[str, PackageHooks],
        factory: Optional[MountManagerFactory] = None,
    ):
        self._settings = settings
        self._effector = effector
        self._managers: List[BaseMountManager] = (factory or MountManagerFactory()).create_managers(
            settings, effector, prompter, package_hooks
        )
        self._bridge = SymlinkBridgeResolver(settings, effector)
        self._scheduler = SyncScheduler(settings, effector)

    @property
    def managers(self) -> List[BaseMountManager]:
        return list(self._managers)

    def run(self) -> ProvisioningReport:
        report = ProvisioningReport()

        for manager in self._managers:
            logging.info(f"Setting up {manager.get_kind_name()} mount...")
            try:
                manager.reconcile(report)
            except UserAbort as e:
                logging.info(str(e))
                report.record(f"{manager.kind.value}.mount", StepOutcome.SKIPPED, "declined by operator")

        foreign_mount = self._settings.foreign_mount_point
        if not self._effector.is_mount_active(foreign_mount):
            logging.warning(
                f"Foreign mount point {foreign_mount} is not mounted. Skipping symlink bridge and mirror job."
            )
            report.record("bridge", StepOutcome.SKIPPED, f"{foreign_mount} not mounted")
            report.record("sync", StepOutcome.SKIPPED, f"{foreign_mount} not mounted")
            return report

        bridge = self._bridge.resolve(report)
        report.bridge = bridge

        self._scheduler.schedule(bridge.resolved_target, report)
        return report
