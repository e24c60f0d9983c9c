import json
import logging
from typing import Any, Protocol

import httpx
from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from ayah_player.core.config import settings
from ayah_player.core.errors import ConfigurationError, RangeParseError, RateLimitError
from ayah_player.core.ratelimit import RATE_LIMIT_MESSAGE, SESSION_HEADER
from ayah_player.models.schemas import PlaybackRange

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You turn requests for Quran recitation playback into a repeat configuration. "
    "Respond with a single JSON object with exactly these integer keys: "
    '"surah" (1-114), "startAyah", "endAyah", "repeatAyahCount" (times each ayah is played, at least 1) '
    'and "repeatRangeCount" (times the whole span is played, at least 1). '
    "Use 1 for any repeat count the request does not mention."
)


def build_user_prompt(text: str) -> str:
    return (
        "Take the following request for a surah/ayah repeat configuration and output an object representing it.\n\n"
        f"Request:\n{text}"
    )


class RangeParser(Protocol):
    async def parse_range(self, text: str) -> PlaybackRange: ...


class OpenAIRangeParser:
    """Asks an OpenAI chat model to turn free text into a PlaybackRange."""

    def __init__(self, client: Any | None = None, model: str | None = None, api_key: str | None = None) -> None:
        self.model = model or settings.range_model
        self._client = client
        self._api_key = api_key or settings.openai_api_key

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise ConfigurationError("OpenAI API key is not configured.", setting_name="openai_api_key")
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def parse_range(self, text: str) -> PlaybackRange:
        client = self.client
        logger.info("Parsing range request (%d chars) with %s", len(text), self.model)
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(text)},
                ],
                response_format={"type": "json_object"},
                temperature=1,
                top_p=1,
                max_tokens=2048,
            )
        except OpenAIError as exc:
            raise RangeParseError(f"Range model request failed: {exc}") from exc

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise RangeParseError("Range model returned no output.")

        try:
            return PlaybackRange.model_validate(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Range model returned an unusable object: %s", content)
            raise RangeParseError(f"Range model returned an invalid range: {exc}") from exc


class BackendRangeParser:
    """Calls this project's ``POST /parse-range`` as one caller identity."""

    def __init__(
        self,
        base_url: str,
        session_id: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session_id = session_id
        self._client = client
        self._timeout = timeout if timeout is not None else settings.http_timeout

    async def parse_range(self, text: str) -> PlaybackRange:
        url = f"{self.base_url}/parse-range"
        headers = {SESSION_HEADER: self.session_id} if self.session_id else {}
        body = {"input_as_text": text}
        try:
            if self._client is not None:
                response = await self._client.post(url, json=body, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, json=body, headers=headers)
        except httpx.RequestError as exc:
            raise RangeParseError(f"Range request failed: {exc}") from exc

        if response.status_code == 429:
            raise RateLimitError(self._error_message(response) or RATE_LIMIT_MESSAGE)
        if response.is_error:
            raise RangeParseError(
                self._error_message(response) or f"Range request failed with HTTP {response.status_code}"
            )

        try:
            return PlaybackRange.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise RangeParseError(f"Backend returned an invalid range: {exc}") from exc

    @staticmethod
    def _error_message(response: httpx.Response) -> str | None:
        try:
            payload = response.json()
        except ValueError:
            return None
        if isinstance(payload, dict):
            message = payload.get("error") or payload.get("detail")
            return str(message) if message else None
        return None
