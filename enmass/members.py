"""Fetch the person records of a resolved group."""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from .errors import (
    IncompletePersonData,
    MissingResourceName,
    NoMemberIds,
    TransportFailure,
)
from .people import DEFAULT_PERSON_FIELDS, ContactGroup, Person, PersonResponse
from .resolver import TRANSPORT_ERRORS

logger = logging.getLogger(__name__)


class PeopleSource(Protocol):
    def batch_get_people(
        self, resource_names: Sequence[str], fields: Sequence[str] = ...
    ) -> List[PersonResponse]: ...


def fetch_members(
    group: ContactGroup,
    source: PeopleSource,
    *,
    group_name: Optional[str] = None,
    fields: Sequence[str] = DEFAULT_PERSON_FIELDS,
) -> List[Person]:
    """Return every member of ``group`` with one batch request.

    The whole fetch fails if any member comes back without a person
    record; a truncated member list is never returned.
    """
    name = group_name or group.display_name or group.resource_id or "<unnamed>"

    if group.resource_id is None:
        raise MissingResourceName(name)
    if not group.member_resource_ids:
        raise NoMemberIds(name)

    try:
        responses = source.batch_get_people(group.member_resource_ids, fields=fields)
    except TRANSPORT_ERRORS as exc:
        raise TransportFailure("batch-fetch people", exc, group_name=name) from exc

    # Members left out of the response count as missing too.
    missing = sum(1 for response in responses if response.person is None)
    missing += max(len(group.member_resource_ids) - len(responses), 0)
    if missing:
        raise IncompletePersonData(name, missing=missing)

    logger.debug("Fetched %d members of group '%s'", len(responses), name)
    return [response.person for response in responses]
