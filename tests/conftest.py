"""Shared pytest fixtures for the image generation tests."""

from __future__ import annotations

import json
import threading
import time
from typing import Any, Callable, Dict, List, Optional

import pytest
import requests

from app.imagegen.clients.base import BaseGenerator, ProviderResult

ENV_VARS = [
    "GATEWAY_API_KEY",
    "GATEWAY_BASE_URL",
    "GATEWAY_MODEL",
    "GATEWAY_MAX_OUTPUT_TOKENS",
    "GOOGLE_AI_API_KEY",
    "REPLICATE_API_TOKEN",
    "REPLICATE_MODEL",
    "IMAGE_PROVIDERS",
    "IMAGE_READY_PROVIDERS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without any credentials in the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def gateway_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GATEWAY_API_KEY", "gw-test-key")
    monkeypatch.setenv("GATEWAY_BASE_URL", "https://gateway.test")


@pytest.fixture
def all_provider_env(monkeypatch: pytest.MonkeyPatch, gateway_env: None) -> None:
    monkeypatch.setenv("GOOGLE_AI_API_KEY", "google-test-key")
    monkeypatch.setenv("REPLICATE_API_TOKEN", "r8-test-token")


def make_response(status_code: int = 200, body: Any = None, text: Optional[str] = None) -> requests.Response:
    """Build a real requests.Response carrying a JSON or raw text body."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    if text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    return response


class RoutedTransport:
    """Stand-in for requests.post/get that answers by URL fragment and records calls."""

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def __call__(self, url: str, **kwargs: Any) -> requests.Response:
        with self._lock:
            self.calls.append({"url": url, **kwargs})
        for fragment, outcome in self.routes.items():
            if fragment in url:
                if isinstance(outcome, BaseException):
                    raise outcome
                if callable(outcome):
                    return outcome(url, **kwargs)
                return outcome
        raise AssertionError(f"Unexpected request to {url}")

    def urls(self) -> List[str]:
        return [call["url"] for call in self.calls]


GATEWAY_CHAT = "/api/gateway/llm/chat/complete"
GATEWAY_IMAGE = "/api/gateway/image/generate"
IMAGEN_PREDICT = "imagen-4.0-generate-001:predict"
REPLICATE_PREDICT = "api.replicate.com/v1/models/"


def imagen_ok(b64: str = "aW1hZ2U=", mime: Optional[str] = "image/png") -> requests.Response:
    prediction = {"bytesBase64Encoded": b64}
    if mime:
        prediction["mimeType"] = mime
    return make_response(200, {"predictions": [prediction]})


def seedream_ok(url: str = "https://cdn.test/seedream.png") -> requests.Response:
    return make_response(200, {"success": True, "images": [{"url": url}]})


def chat_ok(content: str = "A misty harbor at first light") -> requests.Response:
    return make_response(200, {"content": content})


class StubGenerator(BaseGenerator):
    """Generator returning a canned result, optionally after a delay or barrier."""

    def __init__(
        self,
        name: str,
        result: Optional[ProviderResult] = None,
        delay: float = 0.0,
        configured: bool = True,
        error: Optional[Exception] = None,
        barrier: Optional[threading.Barrier] = None,
        on_call: Optional[Callable[[str], None]] = None,
    ):
        self.name = name
        self.result = result
        self.delay = delay
        self.configured = configured
        self.error = error
        self.barrier = barrier
        self.on_call = on_call
        self.prompts: List[str] = []
        self.connected = True

    def is_configured(self) -> bool:
        return self.configured

    def get_missing_config(self) -> List[str]:
        return [] if self.configured else [f"{self.name.upper()}_KEY"]

    def _generate(self, prompt: str) -> ProviderResult:
        self.prompts.append(prompt)
        if self.on_call:
            self.on_call(self.name)
        if self.barrier:
            self.barrier.wait()
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return self.result

    def check_connection(self) -> bool:
        return self.configured and self.connected
