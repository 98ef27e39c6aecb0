"""
Symlink Bridge Resolver.

The foreign host publishes the location of its cloud folder as a marker
symlink at a fixed path inside the foreign mount. The marker's target is a
path in the foreign host's own namespace (drive letters). This resolver
translates that target into the local mount namespace and links it at a
fixed local path.
"""

import logging
import os
from pathlib import Path

from ...config import Settings
from ...core.exceptions import BridgeError, MissingRemoteMarkerError
from ...models import ProvisioningReport, StepOutcome, SymlinkBridge
from ...utils.file_operations import path_is_occupied
from ..system import SystemEffector
from .path_translation import translate_foreign_path


class SymlinkBridgeResolver:
    def __init__(self, settings: Settings, effector: SystemEffector):
        self._settings = settings
        self._effector = effector

    def read_marker_target(self) -> str:
        """Return the literal link text of the remote marker symlink."""
        marker = self._settings.marker_path
        if not marker.is_symlink():
            reason = "is not a symbolic link" if marker.exists() else "does not exist"
            logging.error(f"Remote marker {marker} {reason}.")
            raise MissingRemoteMarkerError(str(marker), reason)

        target = os.readlink(marker)
        logging.debug(f"Remote marker {marker} points to {target}")
        return target

    def resolve_target(self) -> Path:
        marker_target = self.read_marker_target()
        try:
            local_target = translate_foreign_path(marker_target, self._settings.drive_mount_root)
        except ValueError as e:
            raise MissingRemoteMarkerError(
                str(self._settings.marker_path), f"has an untranslatable target ({e})"
            ) from e
        logging.info(f"Translated remote cloud root {marker_target} -> {local_target}")
        return Path(local_target)

    def resolve(self, report: ProvisioningReport) -> SymlinkBridge:
        """Create the bridging symlink unless something already occupies its path."""
        bridge = SymlinkBridge(
            local_path=Path(self._settings.bridge_link_path),
            resolved_target=self.resolve_target(),
        )

        if path_is_occupied(bridge.local_path):
            logging.info(f"{bridge.local_path} already exists. Leaving it unchanged.")
            report.record("bridge", StepOutcome.ALREADY_SATISFIED, str(bridge.local_path))
            return bridge

        try:
            self._effector.create_symlink(str(bridge.local_path), str(bridge.resolved_target))
        except OSError as e:
            logging.error(f"Failed to create symlink {bridge.local_path}: {e}")
            raise BridgeError(str(bridge.local_path), str(bridge.resolved_target), str(e)) from e

        logging.info(f"Created symlink {bridge.local_path} -> {bridge.resolved_target}")
        report.record("bridge", StepOutcome.APPLIED, str(bridge.local_path))
        return bridge
