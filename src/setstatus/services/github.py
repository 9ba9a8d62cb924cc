"""GitHub code-host adapter: user status via the GraphQL API."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx

from setstatus.services.base import ServiceError
from setstatus.services.http import request_json

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"

CHANGE_USER_STATUS_MUTATION = (
    "mutation($input: ChangeUserStatusInput!) "
    "{ changeUserStatus(input: $input) { status { message } } }"
)


class GitHubCodeHostService:
    service_id = "github"

    def __init__(self, token: str, client: httpx.Client, url: str = GITHUB_GRAPHQL_URL) -> None:
        self._token = token
        self._client = client
        self._url = url

    def _mutate(self, status_input: Dict[str, Any]) -> Dict[str, Any]:
        payload = request_json(
            self._client,
            "POST",
            self._url,
            token=self._token,
            service=self.service_id,
            operation="GitHub changeUserStatus",
            json_body={
                "query": CHANGE_USER_STATUS_MUTATION,
                "variables": {"input": status_input},
            },
        )
        errors = payload.get("errors")
        if errors:
            raise ServiceError(
                "GraphQL error: {0}".format(json.dumps(errors, ensure_ascii=True)),
                service=self.service_id,
                method="changeUserStatus",
            )
        return payload

    def set_limited_availability(
        self,
        message: str,
        icon: str,
        expires_at_iso: Optional[str],
        scope_id: Optional[str] = None,
    ) -> None:
        status_input: Dict[str, Any] = {
            "message": message,
            "emoji": icon,
            "limitedAvailability": True,
        }
        if expires_at_iso:
            status_input["expiresAt"] = expires_at_iso
        if scope_id:
            status_input["organizationId"] = scope_id
        self._mutate(status_input)

    def clear_status(self) -> None:
        # An empty input resets message, emoji, expiry and availability.
        self._mutate({})
