# app/llmsystem/llm_client.py
"""
LLM Client
One entry point for every text-generation call the service makes.
Messages are plain {"role", "content"} dicts; the provider is picked from llm_settings.

Plain text goes through StrOutputParser. Structured output uses
.with_structured_output() for hosted providers and PydanticOutputParser for Ollama.
"""
import logging
from typing import Dict, List, Protocol, Sequence, Type, TypeVar

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import PydanticOutputParser, StrOutputParser
from pydantic import BaseModel

from app.llmsystem.llm_providers import get_llm_by_provider
from config.llmconfig import llm_settings

logger = logging.getLogger(__name__)

ChatMessage = Dict[str, str]
SchemaT = TypeVar("SchemaT", bound=BaseModel)

_ROLE_TO_MESSAGE = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


class TextGenerator(Protocol):
    """What the note engine needs from a language model."""

    async def generate(self, messages: Sequence[ChatMessage], max_tokens: int) -> str:
        ...

    async def generate_json(
        self, messages: Sequence[ChatMessage], max_tokens: int, schema: Type[SchemaT]
    ) -> SchemaT:
        ...


def to_langchain_messages(messages: Sequence[ChatMessage]) -> List[BaseMessage]:
    converted = []
    for message in messages:
        try:
            message_cls = _ROLE_TO_MESSAGE[message["role"]]
        except KeyError:
            raise ValueError(f"Unsupported message role: {message.get('role')}")
        converted.append(message_cls(content=message["content"]))
    return converted


def with_format_instructions(messages: Sequence[ChatMessage], instructions: str) -> List[ChatMessage]:
    """Appends the parser's format instructions to the last message."""
    messages = [dict(message) for message in messages]
    messages[-1]["content"] = f"{messages[-1]['content']}\n\n{instructions}"
    return messages


class LLMClient:
    """LangChain-backed TextGenerator."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    async def generate(self, messages: Sequence[ChatMessage], max_tokens: int) -> str:
        llm = get_llm_by_provider(max_tokens=max_tokens)
        logger.info(
            f"🤖 {llm_settings.LLM_PROVIDER}:{llm_settings.current_llm_model} "
            f"({len(messages)} messages, max_tokens={max_tokens})"
        )
        chain = llm | StrOutputParser()
        text = await chain.ainvoke(to_langchain_messages(messages))
        logger.info(f"✓ Generation complete: {len(text)} characters")
        return text

    async def generate_json(
        self, messages: Sequence[ChatMessage], max_tokens: int, schema: Type[SchemaT]
    ) -> SchemaT:
        """
        Structured generation validated against `schema`.
        Raises OutputParserException / pydantic errors when the model output does not fit.
        """
        provider = llm_settings.LLM_PROVIDER
        logger.info(f"🤖 {provider}:{llm_settings.current_llm_model} structured output -> {schema.__name__}")

        if provider == "ollama":
            # Ollama doesn't support with_structured_output reliably
            llm = get_llm_by_provider(max_tokens=max_tokens, json_mode=True)
            parser = PydanticOutputParser(pydantic_object=schema)
            messages = with_format_instructions(messages, parser.get_format_instructions())
            chain = llm | parser
        elif provider == "openai":
            llm = get_llm_by_provider(max_tokens=max_tokens)
            chain = llm.with_structured_output(schema, method="json_mode")
        else:
            llm = get_llm_by_provider(max_tokens=max_tokens)
            chain = llm.with_structured_output(schema)

        result = await chain.ainvoke(to_langchain_messages(messages))
        if result is None:
            raise ValueError(f"{provider} returned no {schema.__name__}")
        logger.info(f"✓ Structured output parsed: {schema.__name__}")
        return result


# Global instance
llm_client = LLMClient()
