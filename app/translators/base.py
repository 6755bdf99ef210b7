"""Abstract base class for query translators."""

from abc import ABC, abstractmethod


class QueryTranslator(ABC):
    """Base interface for natural-language to MongoDB query translators."""

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Return the model identifier."""
        pass

    @abstractmethod
    async def translate(self, prompt: str, collection_hint: str, current_time: str) -> str:
        """
        Translate free text into a MongoDB filter.

        Args:
            prompt: Free-text search string
            collection_hint: Target collection (users, events, dating)
            current_time: ISO-8601 server time, used for relative dates

        Returns:
            Raw model output, expected to be a single JSON object
        """
        pass

    async def close(self) -> None:
        """Release client resources."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model_id})"
