"""Error taxonomy for group resolution and member fetching.

Each failure is its own exception class carrying the context needed to
render an actionable message. Wrapping errors are raised ``from`` the
failure they annotate, so the ``__cause__`` chain reads outermost
operation first.
"""
from __future__ import annotations

import traceback
from typing import Iterator, List, Optional


class EnmassError(RuntimeError):
    """Base class for every failure surfaced by the engine."""

    operation: str = "enmass"

    def __init__(self, message: str, *, group_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.group_name = group_name

    @property
    def cause(self) -> Optional[BaseException]:
        return self.__cause__


class TransportFailure(EnmassError):
    """A contacts-service call failed (listing, detail or batch fetch)."""

    def __init__(self, operation: str, cause: BaseException, *, group_name: Optional[str] = None) -> None:
        self.operation = operation
        if group_name is None:
            message = f"Could not {operation}: {cause}"
        else:
            message = f"Could not {operation} for group '{group_name}': {cause}"
        super().__init__(message, group_name=group_name)
        self.__cause__ = cause


class Cancelled(EnmassError):
    """The pipeline was cancelled before it completed."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cancelled before '{operation}' completed")


# ---------------------------------------------------------------------------
# Resolution phase
# ---------------------------------------------------------------------------


class ResolutionError(EnmassError):
    """Mapping a group name to exactly one group failed."""

    operation = "resolve group"


class NoGroupsExist(ResolutionError):
    def __init__(self) -> None:
        super().__init__("No contact groups exist")


class NoGroupsFoundByName(ResolutionError):
    def __init__(self, group_name: str, suggestion: Optional[str]) -> None:
        self.suggestion = suggestion
        message = f"No groups were found with the name '{group_name}'"
        if suggestion is not None:
            message += f", did you mean '{suggestion}'?"
        super().__init__(message, group_name=group_name)


class NonUniqueGroupName(ResolutionError):
    def __init__(self, group_name: str, count: int) -> None:
        self.count = count
        super().__init__(
            f"Found {count} contact groups with the name '{group_name}', "
            "there can only be one",
            group_name=group_name,
        )


class MissingResourceName(ResolutionError):
    def __init__(self, group_name: str) -> None:
        super().__init__(
            f"No resource name for contact group '{group_name}' exists",
            group_name=group_name,
        )


class GroupDetailFetchFailed(ResolutionError):
    operation = "get contact group"

    def __init__(self, group_name: str, cause: BaseException) -> None:
        super().__init__(
            f"Could not get contact group '{group_name}': {cause}",
            group_name=group_name,
        )
        self.__cause__ = cause


# ---------------------------------------------------------------------------
# Fetch phase
# ---------------------------------------------------------------------------


class FetchError(EnmassError):
    """The members of a resolved group could not be retrieved intact."""

    operation = "fetch members"


class NoMemberIds(FetchError):
    def __init__(self, group_name: str) -> None:
        super().__init__(
            f"No members were found in the group '{group_name}'",
            group_name=group_name,
        )


class IncompletePersonData(FetchError):
    def __init__(self, group_name: str, missing: int = 1) -> None:
        self.missing = missing
        super().__init__(
            f"Found a missing person in group '{group_name}'",
            group_name=group_name,
        )


# ---------------------------------------------------------------------------
# Annotations added while unwinding
# ---------------------------------------------------------------------------


class GetMembersFailed(EnmassError):
    operation = "get members"

    def __init__(self, group_name: str) -> None:
        super().__init__(
            f"Could not get members for group '{group_name}'", group_name=group_name
        )


class GetGroupEmailsFailed(EnmassError):
    operation = "get emails"

    def __init__(self, group_name: str) -> None:
        super().__init__(
            f"Could not get emails for group '{group_name}'", group_name=group_name
        )


class GetGroupPhonesFailed(EnmassError):
    operation = "get phones"

    def __init__(self, group_name: str) -> None:
        super().__init__(
            f"Could not get phones for group '{group_name}'", group_name=group_name
        )


def error_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` followed by each explicit cause."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _own_message(exc: BaseException) -> str:
    message = str(exc)
    cause = exc.__cause__
    # Leaf messages already embed their cause text; avoid printing it twice.
    if cause is not None and message.endswith(f": {cause}"):
        message = message[: -len(f": {cause}")]
    return message or type(exc).__name__


def render_error(exc: BaseException, *, backtrace: bool = False) -> str:
    """Render ``exc`` and its causes on one line, plus an optional traceback."""
    parts: List[str] = [_own_message(item) for item in error_chain(exc)]
    text = "Failed: " + ": ".join(parts)
    if backtrace:
        text += "\n" + "".join(traceback.format_exception(exc)).rstrip()
    return text
