"""
Support chat service.

Answers support questions grounded in uploaded support documents.
Greetings and small talk skip retrieval; questions retrieve the closest
chunks and are answered from them, or from general knowledge with a
note when nothing relevant is stored.

Dependencies: langchain_core, sqlalchemy, salesdesk.core.retrieval
System role: Support AI chat orchestration
"""

import logging
import re
from typing import Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.application.prompts import (
    SUPPORT_CONVERSATIONAL_PROMPT,
    SUPPORT_FALLBACK_PROMPT,
    SUPPORT_RAG_PROMPT,
)
from salesdesk.boundary.llm.gemini import TextGenerator
from salesdesk.configs.retrieval import RetrievalSettings
from salesdesk.core.exceptions import GenerationError, ValidationError
from salesdesk.core.retrieval.retrieval_engine import ChunkMatch, RetrievalEngine
from salesdesk.models.chat import ChatResponse, ChatTurn

logger = logging.getLogger(__name__)

CONVERSATIONAL_PHRASES = (
    "hi",
    "hello",
    "hey",
    "good morning",
    "good afternoon",
    "good evening",
    "thanks",
    "thank you",
    "bye",
    "goodbye",
    "how are you",
    "who are you",
    "what can you do",
    "ok",
    "okay",
)

INQUIRY_KEYWORDS = frozenset(
    {
        "how", "what", "why", "when", "where", "which", "can", "does", "error",
        "issue", "problem", "help", "fix", "install", "setup", "configure",
        "reset", "password", "account", "refund", "warranty", "return", "order",
    }
)

APOLOGY_ANSWER = "Sorry, I could not generate an answer right now. Please try again in a moment."

_WORD = re.compile(r"[a-z']+")


def is_conversational(message: str) -> bool:
    """
    Whether a message is small talk rather than a support question.

    Short messages that start with a greeting or courtesy phrase count as
    small talk unless they also contain an inquiry keyword.
    """
    normalized = message.lower().strip(" \t\n!.?,")
    if normalized in CONVERSATIONAL_PHRASES:
        return True
    words = _WORD.findall(normalized)
    if len(words) > 6:
        return False
    starts_with_phrase = any(
        normalized == phrase or normalized.startswith(phrase + " ") for phrase in CONVERSATIONAL_PHRASES
    )
    if not starts_with_phrase:
        return False
    return normalized in ("how are you", "who are you", "what can you do") or not (
        INQUIRY_KEYWORDS & set(words)
    )


def format_snippets(chunks: Sequence[ChunkMatch]) -> str:
    return "\n\n".join(f"Snippet {index}:\n{chunk.content}" for index, chunk in enumerate(chunks, start=1))


class SupportChatService:
    """Document-grounded chat for the Support AI assistant."""

    def __init__(
        self,
        db: AsyncSession,
        retrieval_engine: RetrievalEngine,
        generator: TextGenerator,
        settings: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            db: AsyncSession for chunk retrieval
            retrieval_engine: Chunk search
            generator: Chat model adapter
            settings: Chat thresholds and history window
        """
        self.db = db
        self._engine = retrieval_engine
        self._generator = generator
        self._settings = settings or RetrievalSettings()

    def _history_messages(self, history: Sequence[ChatTurn]) -> list[BaseMessage]:
        window = self._settings.chat_history_window
        recent = list(history)[-window:] if window else []
        return [
            HumanMessage(content=turn.content) if turn.role == "user" else AIMessage(content=turn.content)
            for turn in recent
        ]

    async def reply(self, message: str, history: Sequence[ChatTurn] = ()) -> ChatResponse:
        """
        Answer one user message.

        Args:
            message: User message
            history: Earlier turns, oldest first

        Returns:
            ChatResponse: Answer, context chunks used, and any retrieval or generation error

        Raises:
            ValidationError: Blank message
        """
        if not message or not message.strip():
            raise ValidationError("Message is required", field="message")

        history_messages = self._history_messages(history)

        if is_conversational(message):
            prompt = SUPPORT_CONVERSATIONAL_PROMPT.format_messages(history=history_messages, question=message)
            return await self._answer(prompt, sources=[], used_retrieval=False)

        retrieval = await self._engine.search_chunks(
            self.db,
            message,
            match_count=self._settings.chat_match_count,
            threshold=self._settings.chat_threshold,
        )
        if retrieval.results:
            prompt = SUPPORT_RAG_PROMPT.format_messages(
                history=history_messages,
                context=format_snippets(retrieval.results),
                question=message,
            )
        else:
            prompt = SUPPORT_FALLBACK_PROMPT.format_messages(history=history_messages, question=message)

        logger.info(
            f"{__name__}:reply - Retrieved {len(retrieval.results)} chunks",
            extra={"strategy": retrieval.strategy.value, "retrieval_error": retrieval.error},
        )
        return await self._answer(
            prompt,
            sources=retrieval.results,
            used_retrieval=True,
            retrieval_error=retrieval.error,
        )

    async def _answer(
        self,
        prompt: list[BaseMessage],
        sources: list[ChunkMatch],
        used_retrieval: bool,
        retrieval_error: str | None = None,
    ) -> ChatResponse:
        try:
            answer = await self._generator.generate(prompt)
        except GenerationError as e:
            logger.error(f"{__name__}:_answer - {e}")
            return ChatResponse(
                answer=APOLOGY_ANSWER,
                sources=sources,
                used_retrieval=used_retrieval,
                error=e.message,
            )
        return ChatResponse(
            answer=answer.strip(),
            sources=sources,
            used_retrieval=used_retrieval,
            error=retrieval_error,
        )
