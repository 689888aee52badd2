"""Contacts data types (Google People API v1 shapes)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class ContactField:
    """An email address or phone number entry on a person."""

    value: Optional[str] = None
    type: Optional[str] = None  # "home", "work", "mobile", ...

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "ContactField":
        return cls(value=item.get("value"), type=item.get("type"))


@dataclass(slots=True)
class ContactGroup:
    """A contact group (label).

    Listing returns abbreviated groups; ``member_resource_ids`` is only
    populated by a detail fetch.
    """

    resource_id: Optional[str] = None  # "contactGroups/abc123"
    display_name: Optional[str] = None
    member_resource_ids: Optional[List[str]] = None
    member_count: int = 0
    group_type: str = "USER_CONTACT_GROUP"  # or "SYSTEM_CONTACT_GROUP"

    @property
    def is_resolvable(self) -> bool:
        return self.display_name is not None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "ContactGroup":
        members = item.get("memberResourceNames")
        return cls(
            resource_id=item.get("resourceName"),
            display_name=item.get("name", item.get("formattedName")),
            member_resource_ids=list(members) if members is not None else None,
            member_count=int(item.get("memberCount", 0)),
            group_type=item.get("groupType", "USER_CONTACT_GROUP"),
        )


@dataclass(slots=True)
class Person:
    """A person record restricted to the requested contact fields."""

    resource_id: str
    email_addresses: Optional[List[ContactField]] = None
    phone_numbers: Optional[List[ContactField]] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "Person":
        def _fields(key: str) -> Optional[List[ContactField]]:
            raw = item.get(key)
            if raw is None:
                return None
            return [ContactField.from_api(entry) for entry in raw]

        return cls(
            resource_id=item.get("resourceName", ""),
            email_addresses=_fields("emailAddresses"),
            phone_numbers=_fields("phoneNumbers"),
        )


@dataclass(slots=True)
class PersonResponse:
    """One entry of a batch-get response; ``person`` may be absent."""

    requested_resource_id: Optional[str] = None
    person: Optional[Person] = None
    http_status: Optional[int] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "PersonResponse":
        person = item.get("person")
        return cls(
            requested_resource_id=item.get("requestedResourceName"),
            person=Person.from_api(person) if person is not None else None,
            http_status=item.get("httpStatusCode"),
        )
