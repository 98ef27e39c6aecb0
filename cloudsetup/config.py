import getpass
import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .models import MountKind
from .utils.host_config import find_default_override_file


class Settings(BaseSettings):
    # Run flags
    debug: bool = False
    verbose: bool = False
    assume_yes: bool = False  # Answer to every yes/no prompt left blank

    # Logging
    log_file_path: str = "~/.local/state/cloud-setup/cloud-setup.log"
    log_retention_days: int = 14

    # Which mount managers run, in order (comma separated: webdav,smb)
    mounts: str = "webdav,smb"

    # Invoking user
    local_user: str = Field(default_factory=getpass.getuser)
    local_uid: int = Field(default_factory=os.getuid)
    local_gid: int = Field(default_factory=os.getgid)

    # Local mount paths
    personal_mount_path: str = "~/cloud/personal"
    work_mount_path: str = "~/cloud/work"
    webdav_profile: Literal["personal", "work"] = "personal"

    # WebDAV
    webdav_address: Optional[str] = None
    webdav_username: Optional[str] = None
    webdav_url_template: str = "https://{address}/remote.php/dav/files/{username}"
    webdav_secrets_path: str = "~/.config/davfs2/secrets"
    webdav_secrets_template: str = "/etc/davfs2/secrets"
    webdav_fstab_options: str = "user,rw,auto"

    # SMB
    smb_host: Optional[str] = None
    smb_share: Optional[str] = None
    smb_username: Optional[str] = None
    smb_credentials_path: str = "~/.smbcredentials"
    smb_protocol_version: str = "3.0"

    # Foreign host namespace
    foreign_mount_point: str = "/mnt/c"
    drive_mount_root: str = "/mnt"
    foreign_marker_subpath: str = "Users/Public/cloud-root"
    foreign_marker_qualifier: Optional[Literal["personal", "work"]] = None
    bridge_link_path: str = "~/cloud/foreign"

    # Mirror job
    sync_source_path: Optional[str] = None  # Defaults to the WebDAV mount path
    sync_reserved_dir: str = ".recovery"
    sync_log_path: str = "~/.local/state/cloud-setup/mirror.log"
    sync_schedule: str = "0 * * * *"

    # System tables
    fstab_path: str = "/etc/fstab"

    model_config = SettingsConfigDict(
        extra="forbid", env_file_encoding="utf-8", validate_default=True
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # CLI flags (init kwargs) win over the override file; process env is never read
        return init_settings, dotenv_settings

    @field_validator(
        "webdav_address",
        "webdav_username",
        "smb_host",
        "smb_share",
        "smb_username",
        "sync_source_path",
        "foreign_marker_qualifier",
        mode="before",
    )
    @classmethod
    def _blank_is_unresolved(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator(
        "log_file_path",
        "personal_mount_path",
        "work_mount_path",
        "webdav_secrets_path",
        "smb_credentials_path",
        "foreign_mount_point",
        "drive_mount_root",
        "bridge_link_path",
        "sync_source_path",
        "sync_log_path",
        "fstab_path",
    )
    @classmethod
    def _expand_user(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return os.path.expanduser(value)

    @field_validator("mounts")
    @classmethod
    def _known_mount_kinds(cls, value: str) -> str:
        for name in _split_csv(value):
            MountKind(name)
        return value

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.debug else "INFO"

    @property
    def log_directory(self) -> Path:
        return Path(self.log_file_path).parent

    @property
    def selected_mounts(self) -> List[MountKind]:
        return [MountKind(name) for name in _split_csv(self.mounts)]

    @property
    def webdav_mount_path(self) -> str:
        if self.webdav_profile == "work":
            return self.work_mount_path
        return self.personal_mount_path

    @property
    def marker_path(self) -> Path:
        name = self.foreign_marker_subpath
        if self.foreign_marker_qualifier:
            name = f"{name}-{self.foreign_marker_qualifier}"
        return Path(self.foreign_mount_point) / name

    @property
    def mirror_source_path(self) -> str:
        return self.sync_source_path or self.webdav_mount_path


def _split_csv(value: str) -> List[str]:
    return [part.strip().lower() for part in value.split(",") if part.strip()]


def resolve_settings(
    config_path: Optional[str] = None,
    debug: bool = False,
    verbose: bool = False,
) -> Settings:
    """
    Merge built-in defaults, an optional override file and CLI flags.

    An override file that cannot be read or does not validate is reported as a
    warning and the run continues with defaults plus CLI flags.
    """
    flags = {}
    if debug:
        flags["debug"] = True
    if verbose:
        flags["verbose"] = True

    if config_path is None:
        default_file = find_default_override_file()
        if default_file:
            logging.debug(f"Using default override file: {default_file}")
            config_path = str(default_file)

    env_file = None
    if config_path:
        candidate = Path(config_path).expanduser()
        if not candidate.is_file() or not os.access(candidate, os.R_OK):
            logging.warning(f"Override file {candidate} is not readable, continuing with defaults")
        else:
            env_file = candidate

    if env_file is None:
        return Settings(_env_file=None, **flags)

    try:
        settings = Settings(_env_file=env_file, **flags)
        logging.debug(f"Loaded overrides from {env_file}")
        return settings
    except (ValidationError, SettingsError, OSError, UnicodeDecodeError) as e:
        logging.warning(f"Override file {env_file} is invalid, continuing with defaults: {e}")
        return Settings(_env_file=None, **flags)
