"""Mount Configuration Handler - turns resolved settings into mount specs and fstab entries."""

from typing import Dict, Mapping, Optional

from ...config import Settings
from ...models import FstabEntry, MountKind, MountSpec


class MountConfigHandler:
    """Derives pre-seeded prompt values, MountSpecs and FstabEntries from Settings."""

    def __init__(self, settings: Settings):
        self._settings = settings

    # WebDAV

    def webdav_seed(self) -> Dict[str, Optional[str]]:
        return {
            "address": self._settings.webdav_address,
            "username": self._settings.webdav_username,
        }

    def build_webdav_url(self, address: str, username: str) -> str:
        address = address.strip().removeprefix("https://").removeprefix("http://").rstrip("/")
        return self._settings.webdav_url_template.format(address=address, username=username)

    def webdav_spec(self, url: str) -> MountSpec:
        return MountSpec(
            kind=MountKind.WEBDAV,
            remote_address=url,
            local_mount_point=self._settings.webdav_mount_path,
            credential_ref=self._settings.webdav_secrets_path,
        )

    def webdav_fstab_entry(self, spec: MountSpec) -> FstabEntry:
        return FstabEntry(
            source=spec.source,
            target=spec.local_mount_point,
            fs_type="davfs",
            options=self._settings.webdav_fstab_options,
        )

    # SMB

    def smb_seed(self) -> Dict[str, Optional[str]]:
        return {
            "host": self._settings.smb_host,
            "share": self._settings.smb_share,
            "mount_point": self._settings.foreign_mount_point,
            "username": self._settings.smb_username,
        }

    def smb_spec(self, values: Mapping[str, str]) -> MountSpec:
        return MountSpec(
            kind=MountKind.SMB,
            remote_address=values["host"].strip().removeprefix("//").strip("/"),
            remote_share_path=values["share"].strip("/"),
            local_mount_point=values["mount_point"],
            credential_ref=self._settings.smb_credentials_path,
        )

    def smb_mount_options(self, spec: MountSpec) -> str:
        # Numeric uid/gid make the share's files appear owned by the invoking user
        return (
            f"credentials={spec.credential_ref},"
            f"vers={self._settings.smb_protocol_version},"
            f"uid={self._settings.local_uid},"
            f"gid={self._settings.local_gid}"
        )

    def smb_fstab_entry(self, spec: MountSpec) -> FstabEntry:
        return FstabEntry(
            source=spec.source,
            target=spec.local_mount_point,
            fs_type="cifs",
            options=self.smb_mount_options(spec),
        )
