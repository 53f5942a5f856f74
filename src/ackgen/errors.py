"""ackgen exception hierarchy.

All ackgen-specific exceptions inherit from AckGenError,
enabling structured error handling and cleaner catch clauses.
"""


class AckGenError(Exception):
    """Base exception for all ackgen errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class ConfigError(AckGenError):
    """Invalid or missing configuration."""


class GitCommandError(AckGenError):
    """A git subprocess exited non-zero, timed out, or was cancelled."""

    def __init__(
        self,
        message: str = "",
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
        timed_out: bool = False,
        cancelled: bool = False,
    ) -> None:
        super().__init__(message, retryable=timed_out)
        self.command = list(command or [])
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out
        self.cancelled = cancelled


class RepositoryError(AckGenError):
    """Failure while synchronizing the local SDK repository."""

    @property
    def cancelled(self) -> bool:
        cause = self.__cause__
        return isinstance(cause, GitCommandError) and cause.cancelled


class CloneError(RepositoryError):
    """Cloning the upstream repository failed."""


class FetchTagsError(RepositoryError):
    """Fetching remote tags failed."""


class RepositoryLoadError(RepositoryError):
    """The local working tree could not be opened as a git repository."""


class CheckoutError(RepositoryError):
    """Checking out the resolved version tag failed."""


class NotWriteableError(AckGenError):
    """A directory required for synchronization is not writeable."""


class GoModParseError(AckGenError):
    """Malformed go.mod document."""

    def __init__(self, message: str = "", *, line: int = 0) -> None:
        super().__init__(message)
        self.line = line


class VersionNotDeterminableError(AckGenError):
    """No source yielded an aws-sdk-go version."""


class GeneratorConfigError(AckGenError):
    """Generator configuration document could not be loaded."""


class SDKModelError(AckGenError):
    """SDK API definition missing or malformed."""


class ServiceNotFoundError(AckGenError):
    """No SDK API definition matched the service alias."""

    def __init__(self, alias: str, message: str = "") -> None:
        super().__init__(message or f"service {alias} not found")
        self.alias = alias


class NoVersionsFoundError(AckGenError):
    """No generated API versions exist in the output tree."""
