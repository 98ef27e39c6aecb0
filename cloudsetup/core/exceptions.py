# cloudsetup/core/exceptions.py

class ProvisioningError(Exception):
    """Base class for conditions that end a provisioning run."""

    exit_code = 1


class UserAbort(ProvisioningError):
    """Raised when the operator declines to continue. Not a failure."""

    exit_code = 0

    def __init__(self, message: str = "Operation canceled by operator"):
        super().__init__(message)


class PrivilegeError(ProvisioningError):
    """Raised when an elevated-privilege session cannot be obtained."""


class InstallationError(ProvisioningError):
    """Raised when a required client package cannot be installed."""

    def __init__(self, package: str, reason: str):
        self.package = package
        self.reason = reason
        super().__init__(f"Failed to install package '{package}': {reason}")


class PersistenceError(ProvisioningError):
    """Raised when a secret store, credentials file or system table cannot be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")


class MountError(ProvisioningError):
    """Raised when a mount point cannot be prepared or a mount call fails."""

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"Failed to mount {target}: {reason}")


class MissingRemoteMarkerError(ProvisioningError):
    """Raised when the foreign host has not been prepared with a cloud marker symlink."""

    def __init__(self, marker_path: str, reason: str):
        self.marker_path = marker_path
        self.reason = reason
        super().__init__(
            f"Remote host is not prepared: marker {marker_path} {reason}. "
            f"Create the marker symlink on the remote host and run again."
        )


class BridgeError(ProvisioningError):
    """Raised when the local bridging symlink cannot be created."""

    def __init__(self, link_path: str, target: str, reason: str):
        self.link_path = link_path
        self.target = target
        self.reason = reason
        super().__init__(f"Failed to create symlink {link_path} -> {target}: {reason}")
