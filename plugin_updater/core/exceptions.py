"""
Base exception hierarchy

Every failure inside the updater is raised as one of these types and
caught at the engine boundary, where it degrades to "no update".
"""


class UpdaterError(Exception):
    """
    Base exception for all updater errors

    Attributes:
        message: Error message
        component: Component that raised the error
        recovery_hint: Optional hint for recovery
    """

    def __init__(self, message: str, component: str = "", recovery_hint: str = ""):
        self.component = component
        self.recovery_hint = recovery_hint
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.component:
            msg = f"[{self.component}] {msg}"
        if self.recovery_hint:
            msg += f" (Recovery: {self.recovery_hint})"
        return msg


class ConfigurationError(UpdaterError):
    """Configuration-related errors"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(
            message,
            component="Configuration",
            recovery_hint=recovery_hint or "Check your .env file and PLUGIN_UPDATER_* variables",
        )


class ReleaseFetchError(UpdaterError):
    """Release metadata could not be retrieved or decoded"""

    def __init__(self, message: str, status_code: int | None = None, recovery_hint: str = ""):
        self.status_code = status_code
        super().__init__(
            message,
            component="Releases",
            recovery_hint=recovery_hint,
        )


class PackageRelocationError(UpdaterError):
    """Extracted package could not be moved into place"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(
            message,
            component="Filesystem",
            recovery_hint=recovery_hint or "Check permissions on the upgrade staging directory",
        )
