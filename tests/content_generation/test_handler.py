"""Tests for the single-product request handler and its HTTP wrapper."""

from __future__ import annotations

import json

import flask
import pytest

import main as deployment
from src.functions.content_generation.core.llm import ContentGenerationError
from src.functions.content_generation.functions import main as handler_module
from tests.content_generation.fixtures import make_content

PRODUCT = {
    "id": "tour-001",
    "category": "tour",
    "region": "Kemer",
    "name": "Kemer Boat Tour",
    "price": 850,
}


class FakeGenerator:
    """Stands in for OpenAIContentGenerator; fails for selected locales."""

    instances: list = []

    def __init__(self, *, api_key=None, model=None, options=None, logger=None, fail_locales=()):
        self.api_key = api_key
        self.model = model
        self.options = options
        self.fail_locales = set(fail_locales)
        self.calls: list = []
        FakeGenerator.instances.append(self)

    def generate(self, product, locale):
        self.calls.append(locale)
        if locale in self.fail_locales:
            raise ContentGenerationError(f"model refused {locale}")
        return make_content(product, locale)


@pytest.fixture
def fake_generator(monkeypatch):
    FakeGenerator.instances = []
    monkeypatch.setattr(handler_module, "OpenAIContentGenerator", FakeGenerator)
    monkeypatch.setattr(handler_module._generate_with_retry.retry, "sleep", lambda _: None)
    return FakeGenerator


def test_generates_each_requested_locale(fake_generator) -> None:
    result = handler_module.handle_request(
        {"product": PRODUCT, "locales": ["en", "de"], "llm": {"api_key": "sk-test", "model": "gpt-4o"}}
    )

    assert result["status"] == "success"
    assert [item["locale"] for item in result["content"]] == ["en", "de"]
    assert result["content"][0]["productId"] == "tour-001"
    assert "errors" not in result
    generator = fake_generator.instances[0]
    assert generator.api_key == "sk-test"
    assert generator.model == "gpt-4o"


def test_single_locale_field_is_accepted(fake_generator) -> None:
    result = handler_module.handle_request({"product": PRODUCT, "locale": "tr"})

    assert result["status"] == "success"
    assert len(result["content"]) == 1


def test_partial_failure_is_reported_per_locale(fake_generator, monkeypatch) -> None:
    monkeypatch.setattr(
        handler_module,
        "OpenAIContentGenerator",
        lambda **kwargs: FakeGenerator(fail_locales={"de"}, **kwargs),
    )

    result = handler_module.handle_request({"product": PRODUCT, "locales": "en,de"})

    assert result["status"] == "partial"
    assert [item["locale"] for item in result["content"]] == ["en"]
    assert result["errors"] == [{"locale": "de", "error": "model refused de"}]
    assert fake_generator.instances[0].calls == ["en", "de", "de", "de"]


def test_all_locales_failing_is_an_error(fake_generator, monkeypatch) -> None:
    monkeypatch.setattr(
        handler_module,
        "OpenAIContentGenerator",
        lambda **kwargs: FakeGenerator(fail_locales={"en"}, **kwargs),
    )

    result = handler_module.handle_request({"product": PRODUCT, "locale": "en"})

    assert result["status"] == "error"
    assert result["content"] == []


@pytest.mark.parametrize(
    ("request_body", "message"),
    [
        ({}, "'product' object"),
        ({"product": {**PRODUCT, "category": "cruise"}, "locale": "en"}, "category"),
        ({"product": PRODUCT}, "locale"),
        ({"product": PRODUCT, "locales": ["en", "es"]}, "Unsupported locale"),
        ([{"product": PRODUCT, "locale": "en"}], "JSON object"),
        ("en", "JSON object"),
    ],
)
def test_invalid_requests(fake_generator, request_body, message) -> None:
    result = handler_module.handle_request(request_body)

    assert result["status"] == "error"
    assert message in result["message"]
    assert fake_generator.instances == []


def test_missing_api_key_is_reported(monkeypatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    result = handler_module.handle_request({"product": PRODUCT, "locale": "en"})

    assert result["status"] == "error"
    assert "OPENAI_API_KEY" in result["message"]


def test_http_wrapper_status_codes(fake_generator) -> None:
    app = flask.Flask(__name__)

    with app.test_request_context(method="POST", json={"product": PRODUCT, "locale": "en"}):
        response = deployment.content_generation_handler(flask.request)
    assert response.status_code == 200
    assert json.loads(response.get_data(as_text=True))["status"] == "success"
    assert response.headers["Access-Control-Allow-Origin"] == "*"

    with app.test_request_context(method="POST", json={"locale": "en"}):
        assert deployment.content_generation_handler(flask.request).status_code == 400

    with app.test_request_context(method="GET"):
        assert deployment.content_generation_handler(flask.request).status_code == 405

    with app.test_request_context(method="OPTIONS"):
        assert deployment.content_generation_handler(flask.request).status_code == 204


def test_http_wrapper_unexpected_error(monkeypatch) -> None:
    def explode(_payload):
        raise RuntimeError("boom")

    monkeypatch.setattr(deployment, "handle_request", explode)
    app = flask.Flask(__name__)

    with app.test_request_context(method="POST", json={}):
        response = deployment.content_generation_handler(flask.request)

    assert response.status_code == 500
    assert "boom" in json.loads(response.get_data(as_text=True))["message"]


def test_http_wrapper_rejects_json_array_body(fake_generator) -> None:
    app = flask.Flask(__name__)

    with app.test_request_context(method="POST", json=[{"product": PRODUCT, "locale": "en"}]):
        response = deployment.content_generation_handler(flask.request)

    assert response.status_code == 400
    body = json.loads(response.get_data(as_text=True))
    assert body["status"] == "error"
    assert "JSON object" in body["message"]
    assert fake_generator.instances == []
