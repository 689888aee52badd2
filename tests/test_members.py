"""Tests for member fetching."""
from __future__ import annotations

import pytest

from enmass.errors import (
    IncompletePersonData,
    MissingResourceName,
    NoMemberIds,
    TransportFailure,
)
from enmass.members import fetch_members
from enmass.people import ContactGroup, PeopleError, PersonResponse

from fakes import FakeContactsService, person


def _group(*member_ids):
    return ContactGroup(
        resource_id="contactGroups/eng",
        display_name="Engineering",
        member_resource_ids=list(member_ids) if member_ids else None,
    )


def test_fetches_all_members_in_one_batch():
    service = FakeContactsService(
        people={
            "people/1": person("people/1", emails=["one@x.com"]),
            "people/2": person("people/2", emails=["two@x.com"]),
        }
    )

    members = fetch_members(_group("people/1", "people/2"), service)

    assert [m.resource_id for m in members] == ["people/1", "people/2"]
    assert service.calls == [
        ("batch_get_people", ["people/1", "people/2"], ("emailAddresses", "phoneNumbers")),
    ]


def test_missing_member_ids_fail():
    with pytest.raises(NoMemberIds, match="No members were found in the group 'Engineering'"):
        fetch_members(_group(), FakeContactsService())


def test_empty_member_ids_fail():
    group = ContactGroup(resource_id="contactGroups/eng", display_name="Engineering",
                         member_resource_ids=[])

    with pytest.raises(NoMemberIds):
        fetch_members(group, FakeContactsService())


def test_absent_person_fails_whole_fetch():
    service = FakeContactsService(
        people={"people/1": person("people/1", emails=["one@x.com"]), "people/2": None}
    )

    with pytest.raises(IncompletePersonData) as excinfo:
        fetch_members(_group("people/1", "people/2"), service)

    assert excinfo.value.group_name == "Engineering"
    assert excinfo.value.missing == 1


def test_batch_failure_is_wrapped_with_group_name():
    cause = PeopleError("People API network error: timed out")
    service = FakeContactsService(batch_error=cause)

    with pytest.raises(TransportFailure) as excinfo:
        fetch_members(_group("people/1"), service, group_name="Eng")

    assert str(excinfo.value).startswith("Could not batch-fetch people for group 'Eng'")
    assert excinfo.value.__cause__ is cause


def test_response_order_is_kept():
    class ReversingService(FakeContactsService):
        def batch_get_people(self, resource_names, fields=()):
            return [
                PersonResponse(requested_resource_id=name, person=person(name))
                for name in reversed(list(resource_names))
            ]

    members = fetch_members(_group("people/1", "people/2", "people/3"), ReversingService())

    assert [m.resource_id for m in members] == ["people/3", "people/2", "people/1"]


@pytest.mark.parametrize("returned", [[], ["people/1"]])
def test_short_batch_response_fails_whole_fetch(returned):
    class ShortService(FakeContactsService):
        def batch_get_people(self, resource_names, fields=()):
            return [PersonResponse(requested_resource_id=name, person=person(name))
                    for name in returned]

    with pytest.raises(IncompletePersonData) as excinfo:
        fetch_members(_group("people/1", "people/2"), ShortService())

    assert excinfo.value.missing == 2 - len(returned)


def test_absent_and_left_out_members_are_both_counted():
    class ShortService(FakeContactsService):
        def batch_get_people(self, resource_names, fields=()):
            return [PersonResponse(requested_resource_id="people/1", person=None)]

    with pytest.raises(IncompletePersonData) as excinfo:
        fetch_members(_group("people/1", "people/2", "people/3"), ShortService())

    assert excinfo.value.missing == 3


def test_group_without_resource_name_is_not_fetched():
    group = ContactGroup(display_name="Engineering", member_resource_ids=["people/1"])
    service = FakeContactsService()

    with pytest.raises(MissingResourceName, match="Engineering"):
        fetch_members(group, service)

    assert service.calls == []
