"""Natural-language query translators."""

from .base import QueryTranslator
from .openai_translator import OpenAITranslator

__all__ = [
    "QueryTranslator",
    "OpenAITranslator",
]
