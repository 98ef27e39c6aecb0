"""SMB/CIFS Mount Manager."""

import logging
from typing import Tuple

from pydantic import SecretStr

from ...core.exceptions import MountError, PersistenceError
from ...models import CredentialRecord, MountKind, MountSpec, ProvisioningReport, StepOutcome
from ..credentials import CredentialCollector, CredentialField
from ..system import CommandError, ensure_package
from .base_mounter import BaseMountManager

SMB_FIELDS = [
    CredentialField("host", "Host", hint="e.g. 192.168.1.10 or desktop.local"),
    CredentialField("share", "Share name", hint="e.g. C$ or Users"),
    CredentialField("mount_point", "Local mount point"),
    CredentialField("username", "Username"),
    CredentialField("password", "Password", secret=True),
]


class SMBMountManager(BaseMountManager):
    """
    Mounts a CIFS share and persists it to fstab once the mount succeeded.

    If the local mount point is already an active mount the whole manager is
    skipped, fstab included: an out-of-band mount gives no fstab guarantee.
    """

    kind = MountKind.SMB

    def get_kind_name(self) -> str:
        return "SMB"

    def reconcile(self, report: ProvisioningReport) -> StepOutcome:
        mount_point = self._settings.foreign_mount_point
        if self._effector.is_mount_active(mount_point):
            logging.info(f"{mount_point} is already mounted. Skipping SMB share setup.")
            report.record("smb.mount", StepOutcome.SKIPPED, f"{mount_point} already mounted")
            return StepOutcome.SKIPPED

        install = ensure_package(
            self._effector, "mount.cifs", "cifs-utils", self._settings.local_user, self._package_hooks
        )
        report.record("smb.client", install.outcome)
        report.notices.extend(install.notices)

        record, spec = self.collect_credentials()

        self.write_credentials_file(record, spec.credential_ref)
        report.record("smb.credentials", StepOutcome.APPLIED, spec.credential_ref)

        self.mount(spec)
        report.record("smb.mount", StepOutcome.APPLIED, spec.local_mount_point)

        outcome = self.ensure_fstab_entry(spec)
        report.record("smb.fstab", outcome, spec.source)
        return StepOutcome.APPLIED

    def collect_credentials(self) -> Tuple[CredentialRecord, MountSpec]:
        collector = CredentialCollector(
            self._prompter,
            SMB_FIELDS,
            assume_yes=self._settings.assume_yes,
            intro="To mount the remote SMB share, provide the following information:",
        )
        values = collector.collect(self._config.smb_seed())
        spec = self._config.smb_spec(values)
        record = CredentialRecord(
            subject=f"{spec.remote_address}/{spec.remote_share_path}",
            username=values["username"],
            secret=SecretStr(values["password"]),
        )
        return record, spec

    def write_credentials_file(self, record: CredentialRecord, path: str) -> None:
        try:
            self._effector.write_protected_file(path, record.smb_credentials_text())
        except (CommandError, OSError) as e:
            raise PersistenceError(path, str(e)) from e
        logging.info(f"SMB credentials written to {path}.")

    def mount(self, spec: MountSpec) -> None:
        try:
            self._effector.make_directory(spec.local_mount_point, privileged=True)
        except (CommandError, OSError) as e:
            raise MountError(spec.local_mount_point, f"cannot create mount point: {e}") from e

        try:
            self._effector.mount_filesystem(
                spec.local_mount_point,
                source=spec.source,
                fs_type="cifs",
                options=self._config.smb_mount_options(spec),
            )
        except CommandError as e:
            raise MountError(spec.local_mount_point, str(e)) from e

        logging.info(f"Mounted {spec.source} at {spec.local_mount_point}.")

    def ensure_fstab_entry(self, spec: MountSpec) -> StepOutcome:
        if self.fstab_has_source(spec.source):
            return StepOutcome.ALREADY_SATISFIED
        self.append_fstab_entry(self._config.smb_fstab_entry(spec))
        return StepOutcome.APPLIED
