"""Tests for the explicit wizard client handle."""

import pytest

from conftest import FakeProvider
from gaswiz.llm.client import (
    ClientNotInitializedError,
    GenerationError,
    LLMRequest,
    WizardClient,
)


def _request(fmt="text"):
    return LLMRequest(system_instruction="sys", content="hello", response_format=fmt, stage="test")


def test_generate_before_init_fails_without_calling_provider():
    built = []
    client = WizardClient(provider_factory=lambda key, model: built.append(key))

    with pytest.raises(ClientNotInitializedError, match="not initialized"):
        client.generate(_request())
    assert built == []
    assert not client.is_initialized


@pytest.mark.parametrize("key", ["", "   ", None])
def test_init_with_blank_key(key):
    client = WizardClient(provider_factory=lambda k, m: FakeProvider(["x"]))
    assert client.init(key) is False
    assert not client.is_initialized


def test_blank_key_clears_previous_provider():
    client = WizardClient(provider_factory=lambda k, m: FakeProvider(["x"]))
    assert client.init("good")
    assert client.init("") is False
    with pytest.raises(ClientNotInitializedError):
        client.generate(_request())


def test_factory_error_leaves_client_uninitialized():
    def broken(key, model):
        raise RuntimeError("bad key format")

    client = WizardClient(provider_factory=broken)
    assert client.init("key") is False
    assert not client.is_initialized


def test_reinit_overwrites_provider():
    providers = {"first": FakeProvider(["from first"]), "second": FakeProvider(["from second"])}
    client = WizardClient(provider_factory=lambda key, model: providers[key])

    client.init("first")
    client.init("second")

    assert client.generate(_request()) == "from second"
    assert providers["first"].calls == []


def test_factory_receives_stripped_key_and_model():
    seen = []

    def factory(key, model):
        seen.append((key, model))
        return FakeProvider()

    WizardClient(model="gemini-x", provider_factory=factory).init("  abc  ")
    assert seen == [("abc", "gemini-x")]


def test_generate_passes_request_through():
    provider = FakeProvider(['{"a": 1}'])
    client = WizardClient(provider_factory=lambda k, m: provider)
    client.init("key")

    assert client.generate(_request("json")) == '{"a": 1}'
    assert provider.calls == [
        {"content": "hello", "system_instruction": "sys", "response_format": "json"}
    ]


def test_provider_failure_wrapped_once():
    provider = FakeProvider(error=ConnectionError("quota exceeded"))
    client = WizardClient(provider_factory=lambda k, m: provider)
    client.init("key")

    with pytest.raises(GenerationError, match="quota exceeded") as exc_info:
        client.generate(_request())
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert len(provider.calls) == 1
