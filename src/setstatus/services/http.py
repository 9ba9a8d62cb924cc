"""Shared httpx plumbing for service adapters."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from setstatus.services.base import ServiceError, ServiceTransportError

USER_AGENT = "st-cli"
DEFAULT_TIMEOUT_SEC = 10.0


def build_client(timeout_sec: float = DEFAULT_TIMEOUT_SEC) -> httpx.Client:
    return httpx.Client(
        timeout=float(timeout_sec),
        headers={"User-Agent": USER_AGENT},
    )


def request_json(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    token: str,
    service: str,
    operation: str,
    json_body: Optional[Dict[str, Any]] = None,
    form: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Send one authenticated request and return the decoded JSON object."""

    headers = {"Authorization": "Bearer {0}".format(token)}
    try:
        response = client.request(
            method,
            url,
            headers=headers,
            json=json_body,
            data=form,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ServiceTransportError(
            "{0}: HTTP {1}".format(operation, exc.response.status_code),
            service=service,
            method=operation,
            status_code=exc.response.status_code,
        ) from exc
    except httpx.HTTPError as exc:
        raise ServiceTransportError(
            "{0}: {1}".format(operation, exc),
            service=service,
            method=operation,
        ) from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise ServiceError(
            "{0}: invalid JSON response".format(operation),
            service=service,
            method=operation,
        ) from exc
    if not isinstance(payload, dict):
        raise ServiceError(
            "{0}: unexpected response shape".format(operation),
            service=service,
            method=operation,
        )
    return payload
