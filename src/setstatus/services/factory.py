"""Service adapter factory driven by environment credentials and config."""

from __future__ import annotations

import os
from typing import Mapping, Optional

import httpx

from setstatus.config import StatusConfig
from setstatus.services.asana import AsanaTrackerService
from setstatus.services.base import MissingCredentialError
from setstatus.services.github import GitHubCodeHostService
from setstatus.services.http import build_client
from setstatus.services.slack import SlackChatService

SLACK_TOKEN_ENV = "SLACK_PAT"
GITHUB_TOKEN_ENV = "GITHUB_PAT"
ASANA_TOKEN_ENV = "ASANA_PAT"


class ServiceFactory:
    """Build service adapters lazily, sharing one HTTP client."""

    def __init__(
        self,
        config: StatusConfig,
        *,
        env: Optional[Mapping[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._config = config
        self._env = env if env is not None else os.environ
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = build_client(self._config.http_timeout)
        return self._client

    def _token(self, name: str, service: str) -> str:
        token = str(self._env.get(name) or "").strip()
        if not token:
            raise MissingCredentialError("{0} not set".format(name), service=service)
        return token

    def build_chat(self) -> SlackChatService:
        token = self._token(SLACK_TOKEN_ENV, "slack")
        return SlackChatService(token=token, client=self.client)

    def build_code_host(self) -> GitHubCodeHostService:
        token = self._token(GITHUB_TOKEN_ENV, "github")
        return GitHubCodeHostService(token=token, client=self.client)

    def build_tracker(self) -> AsanaTrackerService:
        token = self._token(ASANA_TOKEN_ENV, "asana")
        user_gid = self._config.asana_user_gid
        if not user_gid:
            raise MissingCredentialError("asana_user_gid not set in config", service="asana")
        return AsanaTrackerService(token=token, user_gid=user_gid, client=self.client)

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
        self._client = None
