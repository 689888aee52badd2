"""Group contacts engine: resolve a group, fetch members, extract values."""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from .auth import build_authenticator
from .cancel import CancelToken
from .config import Settings
from .errors import (
    Cancelled,
    EnmassError,
    GetGroupEmailsFailed,
    GetGroupPhonesFailed,
    GetMembersFailed,
)
from .extract import ContactKind, extract
from .members import PeopleSource, fetch_members
from .people import MAX_GROUP_MEMBERS, ContactGroup, PeopleClient, Person
from .resolver import GroupSource, resolve_group

logger = logging.getLogger(__name__)


class ContactsService(GroupSource, PeopleSource, Protocol):
    """Everything the engine needs from the contacts backend."""


_WRAPPERS = {
    ContactKind.EMAIL: GetGroupEmailsFailed,
    ContactKind.PHONE: GetGroupPhonesFailed,
}


class ContactsEngine:
    """Runs the lookup pipeline against a contacts service.

    Every step is a blocking call, issued in order. Failures are re-raised
    wrapped with the group name and the operation that was underway;
    cancellation propagates unwrapped.
    """

    def __init__(
        self,
        service: ContactsService,
        *,
        cancel_token: Optional[CancelToken] = None,
        max_members: int = MAX_GROUP_MEMBERS,
    ) -> None:
        self.service = service
        self.cancel_token = cancel_token or CancelToken()
        self.max_members = max_members

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        interactive: bool = True,
        cancel_token: Optional[CancelToken] = None,
    ) -> "ContactsEngine":
        cancel_token = cancel_token or CancelToken()
        tokens = build_authenticator(
            settings.secret(), settings.token_path, interactive=interactive
        )
        client = PeopleClient(tokens, cancel_token=cancel_token)
        return cls(client, cancel_token=cancel_token)

    def get_group(self, group_name: str) -> ContactGroup:
        self.cancel_token.raise_if_cancelled("resolve group")
        return resolve_group(group_name, self.service, max_members=self.max_members)

    def get_members(self, group_name: str) -> List[Person]:
        try:
            group = self.get_group(group_name)
            self.cancel_token.raise_if_cancelled("fetch members")
            return fetch_members(group, self.service, group_name=group_name)
        except Cancelled:
            raise
        except EnmassError as exc:
            raise GetMembersFailed(group_name) from exc

    def get_group_contacts(self, group_name: str, kind: ContactKind) -> List[str]:
        try:
            members = self.get_members(group_name)
        except Cancelled:
            raise
        except EnmassError as exc:
            raise _WRAPPERS[kind](group_name) from exc
        values = extract(members, kind)
        logger.info(
            "Extracted %d %s values from %d members of '%s'",
            len(values), kind.value, len(members), group_name,
        )
        return values

    def get_group_emails(self, group_name: str) -> List[str]:
        return self.get_group_contacts(group_name, ContactKind.EMAIL)

    def get_group_phones(self, group_name: str) -> List[str]:
        return self.get_group_contacts(group_name, ContactKind.PHONE)
