"""
Generative model boundary.
"""

from salesdesk.boundary.llm.gemini import (
    ChatModelGenerator,
    TextGenerator,
    build_chat_model,
    build_embeddings,
)

__all__ = ["ChatModelGenerator", "TextGenerator", "build_chat_model", "build_embeddings"]
