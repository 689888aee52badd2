"""Shared fixtures."""
from __future__ import annotations

import pytest

from enmass.people import ContactGroup

from fakes import FakeContactsService, person


@pytest.fixture
def engineering_service() -> FakeContactsService:
    """Group "Engineering" with two members who both have an email."""
    listing = [
        ContactGroup(resource_id="contactGroups/friends", display_name="Friends"),
        ContactGroup(resource_id="contactGroups/eng", display_name="Engineering"),
    ]
    detail = ContactGroup(
        resource_id="contactGroups/eng",
        display_name="Engineering",
        member_resource_ids=["people/alice", "people/bob"],
        member_count=2,
    )
    return FakeContactsService(
        listing,
        details={"contactGroups/eng": detail},
        people={
            "people/alice": person("people/alice", emails=["alice@x.com"], phones=["555 0101"]),
            "people/bob": person("people/bob", emails=[" bob@x.com "], phones=["555 0102"]),
        },
    )
