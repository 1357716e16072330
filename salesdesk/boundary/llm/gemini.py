"""
Gemini chat and embedding adapters.

The pipeline only needs "prompt in, text out" and "text in, vector out".
ChatModelGenerator narrows a LangChain chat model to the first; the
LangChain Embeddings interface already is the second.

Dependencies: langchain_core, langchain_google_genai
System role: Generative model access for identification, analysis, search and chat
"""

import logging
from typing import Protocol, Sequence

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAIEmbeddings

from salesdesk.configs.genai import GenAISettings
from salesdesk.core.exceptions import GenerationError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a prompt into generated text."""

    async def generate(self, prompt: str | Sequence[BaseMessage]) -> str:
        ...


def message_text(message: BaseMessage) -> str:
    """
    Flatten chat message content to plain text.

    Gemini may return content as a list of parts; only text parts are kept.

    Raises:
        GenerationError: When the message carries no text at all
    """
    content = message.content
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        if parts:
            return "".join(parts)
    raise GenerationError(f"Unexpected model response structure: {type(content).__name__}")


class ChatModelGenerator:
    """TextGenerator backed by a LangChain chat model."""

    def __init__(self, model: BaseChatModel, name: str = "chat") -> None:
        """
        Args:
            model: Chat model (ChatGoogleGenerativeAI in production)
            name: Label used in logs
        """
        self._model = model
        self._name = name

    async def generate(self, prompt: str | Sequence[BaseMessage]) -> str:
        """
        Run one model call.

        Args:
            prompt: Prompt text or a prepared message list

        Returns:
            str: Generated text

        Raises:
            GenerationError: On transport, quota or response-shape failures
        """
        messages = [HumanMessage(content=prompt)] if isinstance(prompt, str) else list(prompt)
        try:
            response = await self._model.ainvoke(messages)
        except Exception as e:
            logger.error(
                f"{__name__}:generate - Model call failed",
                extra={"generator": self._name, "error": str(e)},
            )
            raise GenerationError(f"Generative model call failed: {e}") from e

        if not isinstance(response, AIMessage):
            raise GenerationError(f"Unexpected model response type: {type(response).__name__}")
        return message_text(response)


def build_chat_model(settings: GenAISettings, temperature: float) -> ChatGoogleGenerativeAI:
    """Create a Gemini chat model with the given sampling temperature."""
    api_key = settings.api_key.get_secret_value() if settings.api_key else None
    return ChatGoogleGenerativeAI(
        model=settings.model_name,
        temperature=temperature,
        max_output_tokens=settings.max_output_tokens,
        google_api_key=api_key,
    )


def build_embeddings(settings: GenAISettings) -> Embeddings:
    """Create the Gemini embeddings client."""
    api_key = settings.api_key.get_secret_value() if settings.api_key else None
    return GoogleGenerativeAIEmbeddings(
        model=settings.embedding_model,
        google_api_key=api_key,
    )
