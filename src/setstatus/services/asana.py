"""Asana tracker adapter.

Asana exposes vacation dates read-only, so the only thing this adapter can do
is report whether out-of-office is already set.
"""

from __future__ import annotations

import httpx

from setstatus.services.base import ServiceError
from setstatus.services.http import request_json

ASANA_API_BASE = "https://app.asana.com/api/1.0"


class AsanaTrackerService:
    service_id = "asana"

    def __init__(
        self,
        token: str,
        user_gid: str,
        client: httpx.Client,
        base_url: str = ASANA_API_BASE,
    ) -> None:
        self._token = token
        self._user_gid = user_gid
        self._client = client
        self._base_url = base_url.rstrip("/")

    def is_out_of_office_set(self) -> bool:
        url = "{0}/users/{1}/workspace_memberships?opt_fields=vacation_dates".format(
            self._base_url,
            self._user_gid,
        )
        payload = request_json(
            self._client,
            "GET",
            url,
            token=self._token,
            service=self.service_id,
            operation="Asana workspace_memberships",
        )
        memberships = payload.get("data")
        if not isinstance(memberships, list):
            raise ServiceError(
                "Asana workspace_memberships: missing data",
                service=self.service_id,
                method="workspace_memberships",
            )
        return any(
            isinstance(item, dict) and item.get("vacation_dates") is not None
            for item in memberships
        )
