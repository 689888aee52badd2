"""Tests for contact value extraction."""
from __future__ import annotations

import logging

from enmass.extract import MISSING_VALUE, ContactKind, extract
from enmass.people import ContactField, Person

from fakes import person


def test_email_values_are_trimmed():
    people = [person("people/1", emails=[" a@b.com "])]

    assert extract(people, ContactKind.EMAIL) == ["a@b.com"]


def test_phone_values_lose_internal_spaces():
    people = [person("people/1", phones=["555 123 456"])]

    assert extract(people, ContactKind.PHONE) == ["555123456"]


def test_email_internal_text_is_untouched():
    people = [person("people/1", emails=["First Last <fl@x.com>"])]

    assert extract(people, ContactKind.EMAIL) == ["First Last <fl@x.com>"]


def test_values_flatten_person_then_field_order_without_dedup():
    people = [
        person("people/1", emails=["a@x.com", "b@x.com"]),
        person("people/2", emails=["a@x.com"]),
    ]

    assert extract(people, ContactKind.EMAIL) == ["a@x.com", "b@x.com", "a@x.com"]


def test_absent_field_lists_count_as_empty():
    people = [Person(resource_id="people/1"), person("people/2", phones=["1"])]

    assert extract(people, ContactKind.EMAIL) == []
    assert extract(people, ContactKind.PHONE) == ["1"]


def test_missing_value_uses_sentinel_and_warns(caplog):
    people = [
        Person(
            resource_id="people/1",
            email_addresses=[ContactField(value=None), ContactField(value="ok@x.com")],
        )
    ]

    with caplog.at_level(logging.WARNING, logger="enmass.extract"):
        values = extract(people, ContactKind.EMAIL)

    assert values == [MISSING_VALUE, "ok@x.com"]
    assert "people/1" in caplog.text
