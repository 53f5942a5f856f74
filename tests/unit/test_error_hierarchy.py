"""Tests for error hierarchy."""

from ackgen.errors import (
    AckGenError,
    CheckoutError,
    CloneError,
    FetchTagsError,
    GitCommandError,
    NoVersionsFoundError,
    NotWriteableError,
    RepositoryError,
    RepositoryLoadError,
    ServiceNotFoundError,
    VersionNotDeterminableError,
)


def test_hierarchy() -> None:
    for cls in (CloneError, FetchTagsError, CheckoutError, RepositoryLoadError):
        assert issubclass(cls, RepositoryError)
    for cls in (
        RepositoryError,
        NotWriteableError,
        VersionNotDeterminableError,
        ServiceNotFoundError,
        NoVersionsFoundError,
        GitCommandError,
    ):
        assert issubclass(cls, AckGenError)


def test_retryable_default() -> None:
    assert AckGenError("test").retryable is False
    assert CloneError("test").retryable is False
    assert CloneError("test", retryable=True).retryable is True


def test_git_command_error_timeout_is_retryable() -> None:
    err = GitCommandError("git clone: deadline exceeded", timed_out=True)
    assert err.retryable is True
    assert err.cancelled is False
    assert GitCommandError("git clone: cancelled", cancelled=True).retryable is False


def test_service_not_found_names_alias() -> None:
    err = ServiceNotFoundError("ecr")
    assert str(err) == "service ecr not found"
    assert err.alias == "ecr"


def test_catch_as_ackgen_error() -> None:
    try:
        raise CheckoutError("cannot checkout tag v1.0.0")
    except AckGenError as exc:
        assert "v1.0.0" in str(exc)
