"""Unit tests for LLM reply parsing and provider retries."""

import pytest

from texfolio.utils.llm import (
    MAX_RETRIES,
    LLMProvider,
    LLMResponse,
    get_provider,
    parse_array_response,
    parse_object_response,
    strip_code_fences,
)


@pytest.mark.unit
def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences("plain") == "plain"


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        '{"atsScore": 80}',
        '```json\n{"atsScore": 80}\n```',
        'Sure! Here is the analysis:\n{"atsScore": 80}\nHope it helps.',
    ],
)
def test_parse_object_response(text):
    assert parse_object_response(text) == {"atsScore": 80}


@pytest.mark.unit
@pytest.mark.parametrize("text", ["no json here", "[1, 2]", "{broken"])
def test_parse_object_response_failures(text):
    assert parse_object_response(text) is None


@pytest.mark.unit
def test_parse_array_response():
    assert parse_array_response('["a", "b"]') == ["a", "b"]
    assert parse_array_response('Bullets:\n["a", "b"]') == ["a", "b"]


@pytest.mark.unit
def test_parse_array_response_line_fallback():
    text = "- Led a team\n- Shipped a product\n* Cut costs\n"
    assert parse_array_response(text, fallback_count=2) == ["Led a team", "Shipped a product"]


@pytest.mark.unit
def test_get_provider_rejects_unknown_name():
    with pytest.raises(ValueError, match="Unknown provider"):
        get_provider("groq")


@pytest.mark.unit
def test_get_provider_requires_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        get_provider("openai")


class FlakyProvider(LLMProvider):
    vendor = "flaky"
    transient_errors = (ConnectionError,)

    def __init__(self, failures, error=ConnectionError):
        super().__init__("test")
        self.failures = failures
        self.error = error
        self.calls = 0

    def _call_api(self, system_prompt, user_prompt, temperature):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error("boom")
        return LLMResponse("ok", self.model, 1, 1)


@pytest.mark.unit
def test_generate_retries_transient_errors(monkeypatch):
    monkeypatch.setattr("texfolio.utils.llm.time.sleep", lambda _: None)
    provider = FlakyProvider(failures=2)

    assert provider.generate("sys", "user").content == "ok"
    assert provider.calls == 3
    assert provider.name == "flaky/test"


@pytest.mark.unit
def test_generate_gives_up_after_max_retries(monkeypatch):
    monkeypatch.setattr("texfolio.utils.llm.time.sleep", lambda _: None)
    provider = FlakyProvider(failures=MAX_RETRIES)

    with pytest.raises(ConnectionError):
        provider.generate("sys", "user")
    assert provider.calls == MAX_RETRIES


@pytest.mark.unit
def test_generate_does_not_retry_other_errors():
    provider = FlakyProvider(failures=1, error=KeyError)

    with pytest.raises(KeyError):
        provider.generate("sys", "user")
    assert provider.calls == 1
