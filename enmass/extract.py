"""Flatten people into plain email or phone strings."""
from __future__ import annotations

from enum import Enum
import logging
import re
from typing import Iterable, List

from .people import ContactField, Person

logger = logging.getLogger(__name__)

MISSING_VALUE = "<missing>"

_WHITESPACE = re.compile(r"\s+")


class ContactKind(str, Enum):
    EMAIL = "email"
    PHONE = "phone"


def _fields(person: Person, kind: ContactKind) -> List[ContactField]:
    if kind is ContactKind.EMAIL:
        return person.email_addresses or []
    return person.phone_numbers or []


def _clean(value: str, kind: ContactKind) -> str:
    # Phones lose all internal whitespace so they can be pasted into SMS tools.
    if kind is ContactKind.PHONE:
        return _WHITESPACE.sub("", value)
    return value.strip()


def extract(people: Iterable[Person], kind: ContactKind) -> List[str]:
    """Return the requested values in member order, then field order.

    A missing field list counts as empty. A field without a value becomes
    ``MISSING_VALUE`` and is logged. Values are not de-duplicated.
    """
    values: List[str] = []
    for person in people:
        for entry in _fields(person, kind):
            if entry.value is None:
                logger.warning(
                    "Person %s has a %s entry without a value", person.resource_id, kind.value
                )
                values.append(MISSING_VALUE)
                continue
            values.append(_clean(entry.value, kind))
    return values
