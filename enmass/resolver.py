"""Resolve a typed group name to exactly one contact group."""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from rapidfuzz.distance import Levenshtein

from .auth import AuthError
from .errors import (
    GroupDetailFetchFailed,
    MissingResourceName,
    NoGroupsExist,
    NoGroupsFoundByName,
    NonUniqueGroupName,
    TransportFailure,
)
from .people import MAX_GROUP_MEMBERS, ContactGroup, PeopleError

logger = logging.getLogger(__name__)

# Failures of the contacts service that are wrapped rather than propagated raw.
TRANSPORT_ERRORS = (PeopleError, AuthError)


class GroupSource(Protocol):
    def list_groups(self) -> List[ContactGroup]: ...

    def get_group_detail(self, resource_name: str, max_members: int = ...) -> ContactGroup: ...


def closest_name(group_name: str, candidates: Sequence[str]) -> Optional[str]:
    """Return the candidate with the smallest edit distance to ``group_name``.

    Ties go to the earliest candidate. Returns None for an empty pool.
    """
    best: Optional[str] = None
    best_distance = 0
    for candidate in candidates:
        distance = Levenshtein.distance(group_name, candidate)
        if best is None or distance < best_distance:
            best, best_distance = candidate, distance
    return best


def find_group(group_name: str, all_groups: Sequence[ContactGroup]) -> ContactGroup:
    """Pick the one group whose display name equals ``group_name``.

    Matching is exact and case-sensitive. The returned group is the
    listing entry itself, so it has no members yet.

    Raises:
        NoGroupsExist: ``all_groups`` is empty.
        NoGroupsFoundByName: nothing matched; carries the closest name.
        NonUniqueGroupName: more than one group matched.
        MissingResourceName: the match has no resource name.
    """
    if not all_groups:
        raise NoGroupsExist()

    matches = [group for group in all_groups if group.display_name == group_name]

    if not matches:
        names = [group.display_name for group in all_groups if group.is_resolvable]
        raise NoGroupsFoundByName(group_name, closest_name(group_name, names))
    if len(matches) > 1:
        raise NonUniqueGroupName(group_name, len(matches))

    group = matches[0]
    if group.resource_id is None:
        raise MissingResourceName(group_name)
    return group


def resolve_group(
    group_name: str,
    source: GroupSource,
    *,
    max_members: int = MAX_GROUP_MEMBERS,
) -> ContactGroup:
    """List groups, pick the matching one, and fetch its full detail."""
    try:
        all_groups = source.list_groups()
    except TRANSPORT_ERRORS as exc:
        raise TransportFailure("get contact groups", exc, group_name=group_name) from exc

    match = find_group(group_name, all_groups)
    logger.debug("Resolved group '%s' to %s", group_name, match.resource_id)

    try:
        return source.get_group_detail(match.resource_id, max_members=max_members)
    except TRANSPORT_ERRORS as exc:
        raise GroupDetailFetchFailed(group_name, exc) from exc
