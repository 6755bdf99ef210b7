"""OpenAI chat-completion translator for MongoDB filters."""

import logging
from typing import Optional

from openai import AsyncOpenAI

from ..config import get_settings
from .base import QueryTranslator

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You convert a natural-language search prompt into ONE MongoDB filter object for a specific collection.
Return ONLY a JSON object. No explanation, no markdown, no code fences.

COLLECTIONS (CollectionHint → fields):
- "users": Name, Gender, Location, Occupation, DOB, Salary, email
- "events": Event_type, Event_location, Event_date, participant_ids
- "dating": Dating_location, Dating_Date, Male_id, Female_id

TEXT MATCHING:
- Every text match is a case-insensitive partial match: {"$regex": "<text>", "$options": "i"}
- Gender is an exact anchored match:
  "male", "man", "men", "guy" → {"Gender": {"$regex": "^male$", "$options": "i"}}
  "female", "woman", "women", "girl", "lady" → {"Gender": {"$regex": "^female$", "$options": "i"}}

DATES (Event_date, Dating_Date, DOB):
- Every date literal is written as {"$dateFromString": {"dateString": "YYYY-MM-DDTHH:mm:ssZ", "timezone": "UTC"}}
- Use $gte/$lte ranges only. Never use $expr, $month, $year or other aggregation operators.
- A day is start-of-day to end-of-day; a month is its first to last day; a year is Jan 1 to Dec 31.
- Relative expressions ("this month", "next month", "tomorrow") are computed from CurrentServerDate.
- Year inference when the year is omitted: month >= current month → current year, otherwise next year.
- Month names after "in" are dates, city names after "in" are locations.
- Age N means DOB <= CurrentServerDate - N years and DOB > CurrentServerDate - (N+1) years.

SPECIAL OUTPUTS:
- The prompt asks for everything in the collection (e.g. "all users") → {}
- The prompt is clearly about a different collection, or cannot match anything here → {"__no_match": true}
- The prompt is ambiguous → {"__ambiguous": true, "alternatives": [{...}, {...}]}
- For "users" only: people are described through their events or dates (e.g. "users attending tech meetups in Pune")
  → {"__lookup": {"collection": "events" | "dating", "criteria": {<filter for that collection>}}}

EXAMPLES (CurrentServerDate 2025-09-23):
CollectionHint "events", "tech meetup bengaluru"
→ {"Event_type": {"$regex": "tech meetup", "$options": "i"}, "Event_location": {"$regex": "bengaluru", "$options": "i"}}

CollectionHint "events", "events in november"
→ {"Event_date": {"$gte": {"$dateFromString": {"dateString": "2025-11-01T00:00:00Z", "timezone": "UTC"}}, "$lte": {"$dateFromString": {"dateString": "2025-11-30T23:59:59Z", "timezone": "UTC"}}}}

CollectionHint "dating", "datings in bengaluru next month"
→ {"Dating_location": {"$regex": "bengaluru", "$options": "i"}, "Dating_Date": {"$gte": {"$dateFromString": {"dateString": "2025-10-01T00:00:00Z", "timezone": "UTC"}}, "$lte": {"$dateFromString": {"dateString": "2025-10-31T23:59:59Z", "timezone": "UTC"}}}}

CollectionHint "users", "male born in 1995"
→ {"Gender": {"$regex": "^male$", "$options": "i"}, "DOB": {"$gte": {"$dateFromString": {"dateString": "1995-01-01T00:00:00Z", "timezone": "UTC"}}, "$lte": {"$dateFromString": {"dateString": "1995-12-31T23:59:59Z", "timezone": "UTC"}}}}

CollectionHint "users", "startup pitch events in november"
→ {"__no_match": true}"""

USER_PROMPT_TEMPLATE = """CurrentServerDate: {current_time}
CollectionHint: {collection_hint}
Prompt: {prompt}"""


class OpenAITranslator(QueryTranslator):
    """Translator backed by OpenAI chat completions (gpt-4o-mini by default)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        """
        Initialize OpenAI translator.

        Args:
            api_key: OpenAI API key (default from settings)
            model: Chat model to use (default from settings)
            timeout: Request timeout in seconds (default from settings)
            max_tokens: Completion token cap (default from settings)
        """
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_model
        self._max_tokens = max_tokens or settings.openai_max_tokens

        if not self._api_key:
            raise ValueError("OpenAI API key required for query translation")

        self._client = AsyncOpenAI(
            api_key=self._api_key,
            timeout=timeout or settings.openai_timeout,
        )

    @property
    def model_id(self) -> str:
        return self._model

    async def translate(self, prompt: str, collection_hint: str, current_time: str) -> str:
        """Ask the model for a MongoDB filter and return its raw text."""
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": USER_PROMPT_TEMPLATE.format(
                        current_time=current_time,
                        collection_hint=collection_hint,
                        prompt=prompt,
                    ),
                },
            ],
            temperature=0,
            max_tokens=self._max_tokens,
        )

        # Log token usage
        usage = response.usage
        if usage is not None:
            logger.info(
                f"Translator ({collection_hint}) - Prompt: {usage.prompt_tokens} tokens, "
                f"Completion: {usage.completion_tokens}, Total: {usage.total_tokens}"
            )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        await self._client.close()
