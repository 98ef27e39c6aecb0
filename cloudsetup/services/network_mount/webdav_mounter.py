"""WebDAV Mount Manager (davfs2)."""

import logging
from typing import Tuple

from pydantic import SecretStr

from ...core.exceptions import MountError, PersistenceError, UserAbort
from ...models import CredentialRecord, MountKind, MountSpec, ProvisioningReport, StepOutcome
from ...utils.file_operations import find_line_with_prefix
from ..credentials import CredentialCollector, CredentialField
from ..system import CommandError, ensure_package
from .base_mounter import BaseMountManager

WEBDAV_FIELDS = [
    CredentialField("address", "Address", hint="e.g. cloud.domain.com"),
    CredentialField("username", "Username"),
    CredentialField("password", "Password", secret=True),
]


class WebDAVMountManager(BaseMountManager):
    """
    Reconciles a davfs2 mount in three steps:

    EnsureClientInstalled -> EnsureSecretEntry -> EnsureFstabEntryAndMount

    The fstab line is written before the mount is attempted because the mount
    is done by target path and davfs2 reads its source and options from fstab.
    A failed mount therefore leaves the fstab line in place.
    """

    kind = MountKind.WEBDAV

    def get_kind_name(self) -> str:
        return "WebDAV"

    def reconcile(self, report: ProvisioningReport) -> StepOutcome:
        install = ensure_package(
            self._effector, "mount.davfs", "davfs2", self._settings.local_user, self._package_hooks
        )
        report.record("webdav.client", install.outcome)
        report.notices.extend(install.notices)

        if not self._prompter.confirm(
            "Do you want to make a new entry to the WebDAV client (davfs2) configuration?",
            default=self._settings.assume_yes,
        ):
            raise UserAbort("Operation canceled. No changes were made to WebDAV client configuration.")

        record, spec = self.collect_credentials()

        outcome = self.ensure_secret_entry(record)
        report.record("webdav.secret", outcome, record.subject)

        outcome = self.ensure_fstab_entry_and_mount(spec)
        report.record("webdav.mount", outcome, spec.local_mount_point)
        return outcome

    def collect_credentials(self) -> Tuple[CredentialRecord, MountSpec]:
        collector = CredentialCollector(
            self._prompter,
            WEBDAV_FIELDS,
            assume_yes=self._settings.assume_yes,
            intro="To add a new WebDAV folder mount, provide the following information:",
            preview=lambda values: [
                ("URL", self._config.build_webdav_url(values.get("address", ""), values.get("username", "")))
            ],
        )
        values = collector.collect(self._config.webdav_seed())

        url = self._config.build_webdav_url(values["address"], values["username"])
        record = CredentialRecord(
            subject=url,
            username=values["username"],
            secret=SecretStr(values["password"]),
        )
        return record, self._config.webdav_spec(url)

    def ensure_secret_entry(self, record: CredentialRecord) -> StepOutcome:
        """Append "<url> <user> <secret>" to the secret store unless the URL is present."""
        secrets_path = self._settings.webdav_secrets_path
        self._prepare_secret_store()

        if find_line_with_prefix(self._effector.read_text(secrets_path), record.subject):
            logging.info(f"The URL '{record.subject}' already exists in the configuration file ({secrets_path}).")
            return StepOutcome.ALREADY_SATISFIED

        try:
            self._effector.append_line(secrets_path, record.secret_store_line())
        except (CommandError, OSError) as e:
            raise PersistenceError(secrets_path, str(e)) from e

        logging.info(f"Entry successfully added to configuration file ({secrets_path}).")
        return StepOutcome.APPLIED

    def ensure_fstab_entry_and_mount(self, spec: MountSpec) -> StepOutcome:
        if self.fstab_has_source(spec.source):
            return StepOutcome.ALREADY_SATISFIED

        try:
            self._effector.make_directory(spec.local_mount_point)
        except (CommandError, OSError) as e:
            raise MountError(spec.local_mount_point, f"cannot create mount point: {e}") from e

        self.append_fstab_entry(self._config.webdav_fstab_entry(spec))

        try:
            self._effector.reload_service_manager()
        except CommandError as e:
            logging.warning(f"Could not reload the systemd manager configuration: {e}")

        try:
            self._effector.mount_filesystem(spec.local_mount_point)
        except CommandError as e:
            logging.error(f"Mounting {spec.local_mount_point} failed; the fstab entry was kept.")
            raise MountError(spec.local_mount_point, str(e)) from e

        logging.info(f"Mounted {spec.source} at {spec.local_mount_point}.")
        return StepOutcome.APPLIED

    def _prepare_secret_store(self) -> None:
        """Create or rewrite the secret store with owner-only permissions."""
        secrets_path = self._settings.webdav_secrets_path
        try:
            if self._effector.file_exists(secrets_path):
                content = self._effector.read_text(secrets_path)
            else:
                logging.debug(f"Seeding {secrets_path} from {self._settings.webdav_secrets_template}")
                content = self._effector.read_text(self._settings.webdav_secrets_template, privileged=True)
            self._effector.write_protected_file(secrets_path, content)
        except (CommandError, OSError) as e:
            raise PersistenceError(secrets_path, str(e)) from e
