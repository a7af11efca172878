from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

import pytest
from loguru import logger

from docksize.managers.registry.client import RegistryClient

REGISTRY_URI = "https://hub.example.io/v2"
REPOSITORY = "jetbrains/teamcity-agent"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def __repr__(self) -> str:
        return f"<FakeResponse [{self.status_code}]>"


class FakeSession:
    """Routes (method, url) pairs to canned responses and records every call."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def route(self, method: str, url: str, response: Any) -> None:
        self.routes[(method, url)] = response

    def get(self, url: str, timeout: Any = None, params: Any = None, headers: Any = None) -> FakeResponse:
        self.calls.append({"method": "get", "url": url, "params": params, "headers": headers or {}})
        return self._respond("get", url)

    def post(self, url: str, timeout: Any = None, json: Any = None) -> FakeResponse:
        self.calls.append({"method": "post", "url": url, "json": json, "headers": {}})
        return self._respond("post", url)

    def close(self) -> None:
        self.closed = True

    def _respond(self, method: str, url: str) -> FakeResponse:
        response = self.routes.get((method, url))
        if response is None:
            return FakeResponse(404, text="")
        if isinstance(response, Exception):
            raise response
        return response


def image_payload(
    os: str = "linux",
    size: Any = 1000,
    os_version: Any = None,
    architecture: str = "amd64",
    **extra: Any,
) -> Dict[str, Any]:
    payload = {"os": os, "size": size, "architecture": architecture, "os_version": os_version}
    payload.update(extra)
    return payload


def tag_payload(
    name: str,
    pushed: Optional[str],
    images: Optional[List[Dict[str, Any]]] = None,
    full_size: Any = 0,
    **extra: Any,
) -> Dict[str, Any]:
    payload = {"name": name, "tag_last_pushed": pushed, "images": images or [], "full_size": full_size}
    payload.update(extra)
    return payload


def tag_url(tag: str, repository: str = REPOSITORY) -> str:
    return f"{REGISTRY_URI}/repositories/{repository}/tags/{tag}"


def tags_url(repository: str = REPOSITORY) -> str:
    return f"{REGISTRY_URI}/repositories/{repository}/tags"


def login_url() -> str:
    return f"{REGISTRY_URI}/users/login"


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> RegistryClient:
    return RegistryClient(REGISTRY_URI, session=session)


@pytest.fixture
def log_messages():
    messages: List[str] = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG", format="{message}")
    yield messages
    logger.remove(handler_id)


ENV_VARS = (
    "DOCKSIZE_REGISTRY",
    "DOCKSIZE_THRESHOLD",
    "DOCKER_USERNAME",
    "DOCKER_PASSWORD",
    "DOCKER_PASSWORD_BUILDER",
)


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    # setenv first so that undo removes whatever .env loading adds
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
