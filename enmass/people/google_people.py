"""Google People API client."""
from __future__ import annotations

import http.client
import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence
from urllib import error as urlerror
from urllib import parse as urlparse
from urllib import request as urlrequest

from ..cancel import CancelToken
from .types import ContactGroup, PersonResponse


PEOPLE_API_BASE = "https://people.googleapis.com/v1"
DEFAULT_PERSON_FIELDS = ("emailAddresses", "phoneNumbers")
MAX_GROUP_MEMBERS = 100
GROUP_PAGE_SIZE = 1000

logger = logging.getLogger(__name__)


class PeopleError(RuntimeError):
    """Raised when People API operations fail."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class TokenSource(Protocol):
    def access_token(self) -> str: ...


class PeopleClient:
    """Read-only wrapper over the contact group and people endpoints."""

    def __init__(
        self,
        tokens: TokenSource,
        *,
        timeout_seconds: int = 30,
        cancel_token: Optional[CancelToken] = None,
    ) -> None:
        self.tokens = tokens
        self.timeout_seconds = timeout_seconds
        self.cancel_token = cancel_token or CancelToken()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def list_groups(self) -> List[ContactGroup]:
        """Return every contact group (abbreviated, without members)."""
        groups: List[ContactGroup] = []
        page_token: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"pageSize": GROUP_PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            response = self._make_request("/contactGroups", params=params)
            groups.extend(
                ContactGroup.from_api(item) for item in response.get("contactGroups", [])
            )
            page_token = response.get("nextPageToken")
            if not page_token:
                return groups

    def get_group_detail(
        self, resource_name: str, max_members: int = MAX_GROUP_MEMBERS
    ) -> ContactGroup:
        """Return one group including up to ``max_members`` member resource names."""
        response = self._make_request(
            f"/{resource_name}", params={"maxMembers": max_members}
        )
        return ContactGroup.from_api(response)

    def batch_get_people(
        self,
        resource_names: Sequence[str],
        fields: Sequence[str] = DEFAULT_PERSON_FIELDS,
    ) -> List[PersonResponse]:
        """Fetch many people in one request, limited to ``fields``.

        Results keep the response order, which the API does not promise
        to match the request order.
        """
        if not resource_names:
            raise ValueError("batch_get_people requires at least one resource name")
        response = self._make_request(
            "/people:batchGet",
            params={
                "resourceNames": list(resource_names),
                "personFields": ",".join(fields),
            },
        )
        return [PersonResponse.from_api(item) for item in response.get("responses", [])]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _make_request(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make an authenticated GET request to the People API."""
        self.cancel_token.raise_if_cancelled(f"GET {endpoint}")
        access_token = self.tokens.access_token()

        url = f"{PEOPLE_API_BASE}{endpoint}"
        if params:
            url = f"{url}?{urlparse.urlencode(params, doseq=True)}"

        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        req = urlrequest.Request(url, headers=headers, method="GET")
        logger.debug("GET %s", url)

        try:
            with urlrequest.urlopen(req, timeout=self.timeout_seconds) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except urlerror.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise PeopleError(
                f"People API request failed ({exc.code}): {detail}", status=exc.code
            ) from exc
        except urlerror.URLError as exc:
            raise PeopleError(f"People API network error: {exc.reason}") from exc
        except (OSError, http.client.HTTPException) as exc:
            # Timeouts and dropped connections while reading the response.
            raise PeopleError(f"People API network error: {exc}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PeopleError(f"People API returned an unreadable body: {exc}") from exc
