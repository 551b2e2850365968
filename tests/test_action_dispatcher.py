import pytest
import requests

from src.config.exception import AppException
from src.config.settings import Settings
from src.tools.action_dispatcher import (
    HttpActionDispatcher,
    SimulatedActionDispatcher,
    build_dispatcher,
)


class FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class FakeSession:
    def __init__(self, status_code=200):
        self.status_code = status_code
        self.posts = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.posts.append({"url": url, "data": data, "timeout": timeout})
        return FakeResponse(self.status_code)


def test_simulated_dispatcher_echoes_payload():
    dispatcher = SimulatedActionDispatcher()

    confirmation = dispatcher.send("/crm/create_ticket", {"sender": "jane@acme.com"})

    assert confirmation == 'Simulated /crm/create_ticket call. Data payload: {"sender": "jane@acme.com"}'


def test_simulated_dispatcher_keeps_no_history():
    dispatcher = SimulatedActionDispatcher()

    for index in range(3):
        dispatcher.send("/risk_alert/flag", {"id": index})

    assert vars(dispatcher) == {}


def test_http_dispatcher_posts_json():
    session = FakeSession(status_code=201)
    dispatcher = HttpActionDispatcher("http://actions.local/", timeout=3, session=session)

    confirmation = dispatcher.send("/crm/escalate", {"urgency": "high"})

    assert session.posts[0]["url"] == "http://actions.local/crm/escalate"
    assert session.posts[0]["data"] == '{"urgency": "high"}'
    assert session.posts[0]["timeout"] == 3
    assert confirmation.startswith("Sent /crm/escalate call (HTTP 201)")


def test_http_dispatcher_wraps_errors():
    dispatcher = HttpActionDispatcher("http://actions.local", session=FakeSession(status_code=503))

    with pytest.raises(AppException):
        dispatcher.send("/risk_alert", {})


def test_build_dispatcher_modes():
    assert isinstance(build_dispatcher(Settings()), SimulatedActionDispatcher)
    assert isinstance(build_dispatcher(Settings(action_dispatch_mode="carrier-pigeon")), SimulatedActionDispatcher)

    http = build_dispatcher(Settings(action_dispatch_mode="http", action_base_url="http://actions.local"))
    assert isinstance(http, HttpActionDispatcher)

    with pytest.raises(AppException):
        build_dispatcher(Settings(action_dispatch_mode="http"))
