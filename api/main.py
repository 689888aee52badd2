"""FastAPI service exposing group contact lookups."""
from __future__ import annotations

import logging
from typing import List, Type

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from enmass.engine import ContactsEngine
from enmass.errors import (
    Cancelled,
    EnmassError,
    NoGroupsExist,
    NoGroupsFoundByName,
    NoMemberIds,
    NonUniqueGroupName,
    error_chain,
    render_error,
)
from enmass.extract import ContactKind

from api.dependencies import get_engine

logger = logging.getLogger(__name__)


app = FastAPI(
    title="enmass API",
    version="0.1.0",
    description="Look up the emails or phone numbers of a contact group.",
)

# A listed error anywhere in the cause chain decides the status; otherwise 502.
_STATUS_BY_ERROR: List[tuple[Type[EnmassError], int]] = [
    (NoGroupsExist, 404),
    (NoGroupsFoundByName, 404),
    (NoMemberIds, 404),
    (NonUniqueGroupName, 409),
    (Cancelled, 499),
]


class GroupContactsResponse(BaseModel):
    group: str
    kind: ContactKind
    values: List[str]
    joined: str


def _status_for(exc: EnmassError) -> int:
    for item in error_chain(exc):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(item, error_type):
                return status
    return 502


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}


@app.get("/")
@app.get("/hello")
def hello_world() -> str:
    return "hello, world!"


@app.get("/hello/{name}")
def hello_you(name: str) -> str:
    return f"hello, {name}"


@app.get("/groups/{group_name}/{kind}", response_model=GroupContactsResponse)
def get_group_contacts(
    group_name: str,
    kind: ContactKind,
    engine: ContactsEngine = Depends(get_engine),
) -> GroupContactsResponse:
    """Return the group's values for ``kind`` ("email" or "phone")."""
    try:
        values = engine.get_group_contacts(group_name, kind)
    except EnmassError as exc:
        status = _status_for(exc)
        logger.warning("Lookup for group '%s' failed (%s): %s", group_name, status, exc)
        raise HTTPException(status_code=status, detail=render_error(exc)) from exc
    return GroupContactsResponse(
        group=group_name, kind=kind, values=values, joined=";".join(values)
    )
