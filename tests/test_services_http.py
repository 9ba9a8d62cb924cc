from __future__ import annotations

import json
from urllib.parse import parse_qs

import httpx
import pytest

from setstatus.config import StatusConfig
from setstatus.services.asana import AsanaTrackerService
from setstatus.services.base import (
    MissingCredentialError,
    ServiceError,
    ServiceTransportError,
    service_error_summary,
)
from setstatus.services.factory import ServiceFactory
from setstatus.services.github import CHANGE_USER_STATUS_MUTATION, GitHubCodeHostService
from setstatus.services.slack import SlackChatService


class Recorder:
    def __init__(self, responses):
        self.requests = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(200, json={"ok": True})
        return self._responses.pop(0)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


def test_slack_set_profile_sends_json_body_with_bearer_token():
    recorder = Recorder([httpx.Response(200, json={"ok": True})])
    service = SlackChatService(token="xoxp-test", client=recorder.client())

    service.set_profile("Vacation. Back Friday.", ":desert_island:", 1772780400)

    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://slack.com/api/users.profile.set"
    assert request.headers["Authorization"] == "Bearer xoxp-test"
    assert json.loads(request.content) == {
        "profile": {
            "status_text": "Vacation. Back Friday.",
            "status_emoji": ":desert_island:",
            "status_expiration": 1772780400,
        }
    }


def test_slack_set_snooze_sends_minutes_as_form():
    recorder = Recorder([httpx.Response(200, json={"ok": True})])
    SlackChatService(token="t", client=recorder.client()).set_snooze(75)

    request = recorder.requests[0]
    assert str(request.url).endswith("/dnd.setSnooze")
    assert parse_qs(request.content.decode("utf-8")) == {"num_minutes": ["75"]}


def test_slack_error_payload_raises_with_method_and_code():
    recorder = Recorder([httpx.Response(200, json={"ok": False, "error": "invalid_auth"})])
    service = SlackChatService(token="t", client=recorder.client())

    with pytest.raises(ServiceError) as excinfo:
        service.set_profile("x", ":x:", 0)
    assert str(excinfo.value) == "Slack users.profile.set: invalid_auth"
    assert excinfo.value.details["code"] == "invalid_auth"


def test_slack_end_snooze_tolerates_inactive_snooze():
    recorder = Recorder([httpx.Response(200, json={"ok": False, "error": "snooze_not_active"})])
    SlackChatService(token="t", client=recorder.client()).end_snooze()
    assert str(recorder.requests[0].url).endswith("/dnd.endSnooze")


def test_slack_end_snooze_other_errors_raise():
    recorder = Recorder([httpx.Response(200, json={"ok": False, "error": "ratelimited"})])
    with pytest.raises(ServiceError, match="Slack dnd.endSnooze: ratelimited"):
        SlackChatService(token="t", client=recorder.client()).end_snooze()


def test_http_status_error_becomes_transport_error():
    recorder = Recorder([httpx.Response(503, text="unavailable")])
    service = SlackChatService(token="t", client=recorder.client())

    with pytest.raises(ServiceTransportError) as excinfo:
        service.set_snooze(10)
    assert str(excinfo.value) == "Slack dnd.setSnooze: HTTP 503"
    assert excinfo.value.details["status_code"] == 503
    assert "status_code=503" in service_error_summary(excinfo.value)


def test_connect_error_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with pytest.raises(ServiceTransportError, match="connection refused"):
        SlackChatService(token="t", client=client).end_snooze()


def test_invalid_json_is_a_service_error():
    recorder = Recorder([httpx.Response(200, text="<html>")])
    with pytest.raises(ServiceError, match="invalid JSON response"):
        SlackChatService(token="t", client=recorder.client()).end_snooze()


def test_github_limited_availability_mutation():
    recorder = Recorder([httpx.Response(200, json={"data": {"changeUserStatus": {"status": {}}}})])
    service = GitHubCodeHostService(token="ghp_test", client=recorder.client())

    service.set_limited_availability("Vacation", ":desert_island:", "2026-03-06T12:00:00Z", "O_org")

    request = recorder.requests[0]
    assert str(request.url) == "https://api.github.com/graphql"
    assert request.headers["Authorization"] == "Bearer ghp_test"
    body = json.loads(request.content)
    assert body["query"] == CHANGE_USER_STATUS_MUTATION
    assert body["variables"] == {
        "input": {
            "message": "Vacation",
            "emoji": ":desert_island:",
            "limitedAvailability": True,
            "expiresAt": "2026-03-06T12:00:00Z",
            "organizationId": "O_org",
        }
    }


def test_github_omits_empty_expiry_and_scope():
    recorder = Recorder([httpx.Response(200, json={"data": {}})])
    GitHubCodeHostService(token="t", client=recorder.client()).set_limited_availability(
        "Out sick", ":face_with_thermometer:", None
    )

    status_input = json.loads(recorder.requests[0].content)["variables"]["input"]
    assert "expiresAt" not in status_input
    assert "organizationId" not in status_input


def test_github_clear_sends_empty_input():
    recorder = Recorder([httpx.Response(200, json={"data": {}})])
    GitHubCodeHostService(token="t", client=recorder.client()).clear_status()
    assert json.loads(recorder.requests[0].content)["variables"] == {"input": {}}


def test_github_graphql_errors_raise():
    recorder = Recorder([httpx.Response(200, json={"errors": [{"message": "Bad credentials"}]})])
    with pytest.raises(ServiceError, match="GraphQL error: .*Bad credentials"):
        GitHubCodeHostService(token="t", client=recorder.client()).clear_status()


@pytest.mark.parametrize(
    "memberships, expected",
    [
        ([{"gid": "1", "vacation_dates": None}], False),
        ([{"gid": "1", "vacation_dates": {"start_on": "2026-03-02", "end_on": None}}], True),
        ([], False),
    ],
)
def test_asana_reads_vacation_dates(memberships, expected):
    recorder = Recorder([httpx.Response(200, json={"data": memberships})])
    service = AsanaTrackerService(token="1/123", user_gid="42", client=recorder.client())

    assert service.is_out_of_office_set() is expected
    request = recorder.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/api/1.0/users/42/workspace_memberships"
    assert request.url.params["opt_fields"] == "vacation_dates"


def test_asana_missing_data_raises():
    recorder = Recorder([httpx.Response(200, json={"errors": []})])
    with pytest.raises(ServiceError, match="missing data"):
        AsanaTrackerService(token="t", user_gid="42", client=recorder.client()).is_out_of_office_set()


def test_factory_requires_tokens():
    factory = ServiceFactory(StatusConfig(), env={})

    with pytest.raises(MissingCredentialError, match="SLACK_PAT not set"):
        factory.build_chat()
    with pytest.raises(MissingCredentialError, match="GITHUB_PAT not set"):
        factory.build_code_host()
    with pytest.raises(MissingCredentialError, match="ASANA_PAT not set"):
        factory.build_tracker()


def test_factory_tracker_requires_user_gid():
    factory = ServiceFactory(StatusConfig(), env={"ASANA_PAT": "1/123"})
    with pytest.raises(MissingCredentialError, match="asana_user_gid"):
        factory.build_tracker()


def test_factory_shares_injected_client():
    recorder = Recorder([])
    client = recorder.client()
    factory = ServiceFactory(
        StatusConfig(asana_user_gid="42"),
        env={"SLACK_PAT": "xoxp-1", "GITHUB_PAT": "ghp_1", "ASANA_PAT": " 1/123 "},
        client=client,
    )

    assert isinstance(factory.build_chat(), SlackChatService)
    assert isinstance(factory.build_code_host(), GitHubCodeHostService)
    tracker = factory.build_tracker()
    assert isinstance(tracker, AsanaTrackerService)
    assert factory.client is client

    factory.close()
    assert not client.is_closed
