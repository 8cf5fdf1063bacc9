"""Tests for the Claude client wrapper."""

from types import SimpleNamespace

import httpx
import pytest
from anthropic import APIConnectionError

from storyboarder.services.anthropic import AnthropicClient


def make_client(create, max_retries=2):
    client = AnthropicClient(api_key="test-key", model="test-model", max_retries=max_retries, retry_delay=0)
    client._client = SimpleNamespace(messages=SimpleNamespace(create=create))
    return client


def test_joins_text_blocks_and_disables_thinking():
    sent = {}

    def create(**kwargs):
        sent.update(kwargs)
        return SimpleNamespace(content=[
            SimpleNamespace(type="text", text='{"scenes": '),
            SimpleNamespace(type="tool_use", text="ignored"),
            SimpleNamespace(type="text", text="[]}"),
        ])

    text = make_client(create).create_message("pitch", system="be brief")

    assert text == '{"scenes": []}'
    assert sent["thinking"] == {"type": "disabled"}
    assert sent["system"] == "be brief"


def test_connection_error_raised_after_last_retry():
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        raise APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))

    with pytest.raises(APIConnectionError):
        make_client(create, max_retries=2).create_message("pitch")

    assert len(calls) == 2
