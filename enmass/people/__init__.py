"""Google People API integration.

Provides the contacts service used by the engine: listing contact groups,
fetching a group's members, and batch-fetching person records.
"""
from __future__ import annotations

from .types import ContactField, ContactGroup, Person, PersonResponse

from .google_people import (
    DEFAULT_PERSON_FIELDS,
    MAX_GROUP_MEMBERS,
    PeopleClient,
    PeopleError,
)

__all__ = [
    # Types
    "ContactField",
    "ContactGroup",
    "Person",
    "PersonResponse",
    # Client
    "DEFAULT_PERSON_FIELDS",
    "MAX_GROUP_MEMBERS",
    "PeopleClient",
    "PeopleError",
]
