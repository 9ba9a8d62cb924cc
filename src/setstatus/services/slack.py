"""Slack chat adapter: profile status and do-not-disturb snooze."""

from __future__ import annotations

import httpx

from setstatus.services.base import ServiceError
from setstatus.services.http import request_json

SLACK_API_BASE = "https://slack.com/api"
SNOOZE_NOT_ACTIVE = "snooze_not_active"


class SlackChatService:
    service_id = "slack"

    def __init__(self, token: str, client: httpx.Client, base_url: str = SLACK_API_BASE) -> None:
        self._token = token
        self._client = client
        self._base_url = base_url.rstrip("/")

    def _call(self, method: str, **kwargs) -> dict:
        return request_json(
            self._client,
            "POST",
            "{0}/{1}".format(self._base_url, method),
            token=self._token,
            service=self.service_id,
            operation="Slack {0}".format(method),
            **kwargs,
        )

    @staticmethod
    def _raise_for_error(method: str, payload: dict) -> None:
        if payload.get("ok"):
            return
        code = str(payload.get("error") or "")
        raise ServiceError(
            "Slack {0}: {1}".format(method, code),
            service="slack",
            method=method,
            code=code or None,
        )

    def set_profile(self, text: str, icon: str, expires_at_epoch: int) -> None:
        body = {
            "profile": {
                "status_text": text,
                "status_emoji": icon,
                "status_expiration": int(expires_at_epoch),
            }
        }
        payload = self._call("users.profile.set", json_body=body)
        self._raise_for_error("users.profile.set", payload)

    def set_snooze(self, minutes: int) -> None:
        payload = self._call("dnd.setSnooze", form={"num_minutes": str(int(minutes))})
        self._raise_for_error("dnd.setSnooze", payload)

    def end_snooze(self) -> None:
        payload = self._call("dnd.endSnooze", form={})
        if not payload.get("ok") and payload.get("error") == SNOOZE_NOT_ACTIVE:
            return
        self._raise_for_error("dnd.endSnooze", payload)
