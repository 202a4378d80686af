# tests/test_llm_client.py
import pytest
from langchain_core.exceptions import OutputParserException
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.runnables import RunnableLambda

from app.llmsystem import llm_client as llm_client_module
from app.llmsystem.llm_client import LLMClient, with_format_instructions
from app.system_models.evolution_model.evolution_schemas import ReadingSuggestionList
from config.llmconfig import llm_settings

MESSAGES = [
    {"role": "system", "content": "Você é um infectologista."},
    {"role": "user", "content": "Caso: LLA."},
]


class _StructuredModel:
    """Stands in for a hosted chat model that supports with_structured_output."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    def with_structured_output(self, schema, **kwargs):
        self.calls.append((schema, kwargs))
        return RunnableLambda(lambda messages: self.result)


def _use_model(monkeypatch, provider, model):
    monkeypatch.setattr(llm_settings, "LLM_PROVIDER", provider)
    monkeypatch.setattr(llm_client_module, "get_llm_by_provider", lambda **kwargs: model)


async def test_generate_returns_plain_text(monkeypatch):
    _use_model(monkeypatch, "ollama", FakeListChatModel(responses=["EVOLUÇÃO"]))

    assert await LLMClient().generate(MESSAGES, max_tokens=100) == "EVOLUÇÃO"


async def test_generate_json_ollama_parses_fenced_reply(monkeypatch):
    reply = '```json\n{"suggestions": [{"title": "ECIL-8", "source": "Lancet Oncol", "summary": "NF"}]}\n```'
    _use_model(monkeypatch, "ollama", FakeListChatModel(responses=[reply]))

    result = await LLMClient().generate_json(MESSAGES, max_tokens=100, schema=ReadingSuggestionList)

    assert [s.title for s in result.suggestions] == ["ECIL-8"]


async def test_generate_json_ollama_rejects_invalid_reply(monkeypatch):
    _use_model(monkeypatch, "ollama", FakeListChatModel(responses=["sem JSON aqui"]))

    with pytest.raises(OutputParserException):
        await LLMClient().generate_json(MESSAGES, max_tokens=100, schema=ReadingSuggestionList)


async def test_generate_json_openai_uses_json_mode(monkeypatch):
    model = _StructuredModel(ReadingSuggestionList(suggestions=[]))
    _use_model(monkeypatch, "openai", model)

    result = await LLMClient().generate_json(MESSAGES, max_tokens=100, schema=ReadingSuggestionList)

    assert result.suggestions == []
    assert model.calls == [(ReadingSuggestionList, {"method": "json_mode"})]


async def test_generate_json_without_result_raises(monkeypatch):
    _use_model(monkeypatch, "claude", _StructuredModel(None))

    with pytest.raises(ValueError):
        await LLMClient().generate_json(MESSAGES, max_tokens=100, schema=ReadingSuggestionList)


def test_format_instructions_go_on_last_message():
    messages = with_format_instructions(MESSAGES, "Responda em JSON.")

    assert messages[-1]["content"] == "Caso: LLA.\n\nResponda em JSON."
    assert MESSAGES[-1]["content"] == "Caso: LLA."
