"""
Pytest configuration and shared fixtures.
"""

import pytest

from cloudsetup.config import Settings
from cloudsetup.core.error_handler import reset_error_handler
from cloudsetup.dependencies import reset_singletons
from cloudsetup.services.system import default_package_hooks

from fakes import FakePrompter, FakeSystemEffector


@pytest.fixture(autouse=True)
def clean_singletons():
    """Automatically reset shared instances and the excepthook around each test."""
    reset_singletons()
    yield
    reset_singletons()
    reset_error_handler()


@pytest.fixture(autouse=True)
def no_host_override_file(monkeypatch):
    """Never pick up override files from the real home directory."""
    monkeypatch.setattr("cloudsetup.config.find_default_override_file", lambda: None)


@pytest.fixture
def settings(tmp_path):
    """Settings with every path redirected into tmp_path."""
    (tmp_path / "etc").mkdir()
    (tmp_path / "etc" / "fstab").write_text("# /etc/fstab\nUUID=1234 / ext4 defaults 0 1\n")
    return Settings(
        _env_file=None,
        local_user="tester",
        local_uid=1000,
        local_gid=1000,
        log_file_path=str(tmp_path / "log" / "cloud-setup.log"),
        personal_mount_path=str(tmp_path / "cloud" / "personal"),
        work_mount_path=str(tmp_path / "cloud" / "work"),
        webdav_secrets_path=str(tmp_path / "davfs2" / "secrets"),
        webdav_secrets_template=str(tmp_path / "etc" / "davfs2-secrets"),
        smb_credentials_path=str(tmp_path / ".smbcredentials"),
        foreign_mount_point=str(tmp_path / "mnt" / "c"),
        drive_mount_root=str(tmp_path / "mnt"),
        bridge_link_path=str(tmp_path / "cloud" / "foreign"),
        sync_log_path=str(tmp_path / "log" / "mirror.log"),
        fstab_path=str(tmp_path / "etc" / "fstab"),
    )


@pytest.fixture
def effector():
    return FakeSystemEffector(available_commands={"mount.davfs", "mount.cifs"})


@pytest.fixture
def package_hooks():
    return default_package_hooks()


@pytest.fixture
def make_prompter():
    def _make(answers=(), confirms=()):
        return FakePrompter(answers=answers, confirms=confirms)

    return _make
