import asyncio
import logging
from typing import Any, Protocol

import httpx

from ayah_player.core.config import settings
from ayah_player.core.errors import VerseFetchError
from ayah_player.models.schemas import VerseContent

logger = logging.getLogger(__name__)


class VerseTextProvider(Protocol):
    async def fetch_verse(self, surah: int, ayah: int) -> VerseContent: ...


class AlQuranCloudProvider:
    """Fetches Arabic text and an English translation from api.alquran.cloud.

    Both editions are requested concurrently. A response that lacks a field
    yields an empty string (or no verse count) rather than an error.
    """

    def __init__(
        self,
        base_url: str | None = None,
        translation_edition: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.quran_api_base).rstrip("/")
        self.translation_edition = translation_edition or settings.translation_edition
        self._client = client
        self._timeout = timeout if timeout is not None else settings.http_timeout

    async def fetch_verse(self, surah: int, ayah: int) -> VerseContent:
        reference = f"{surah}:{ayah}"
        arabic_url = f"{self.base_url}/ayah/{reference}"
        english_url = f"{self.base_url}/ayah/{reference}/{self.translation_edition}"
        logger.debug("Fetching verse %s", reference)

        try:
            if self._client is not None:
                arabic, english = await asyncio.gather(
                    self._get_json(self._client, arabic_url),
                    self._get_json(self._client, english_url),
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    arabic, english = await asyncio.gather(
                        self._get_json(client, arabic_url),
                        self._get_json(client, english_url),
                    )
        except httpx.HTTPStatusError as exc:
            raise VerseFetchError(
                f"Text provider returned HTTP {exc.response.status_code}", surah=surah, ayah=ayah
            ) from exc
        except (httpx.RequestError, ValueError) as exc:
            raise VerseFetchError(f"Text provider request failed: {exc}", surah=surah, ayah=ayah) from exc

        arabic_data = self._data(arabic)
        english_data = self._data(english)
        surah_info = arabic_data.get("surah") if isinstance(arabic_data.get("surah"), dict) else {}
        count = surah_info.get("numberOfAyahs")

        return VerseContent(
            arabic_text=str(arabic_data.get("text") or ""),
            english_text=str(english_data.get("text") or ""),
            surah_verse_count=count if isinstance(count, int) else None,
        )

    @staticmethod
    async def _get_json(client: httpx.AsyncClient, url: str) -> Any:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _data(payload: Any) -> dict:
        if not isinstance(payload, dict):
            return {}
        data = payload.get("data")
        return data if isinstance(data, dict) else {}


class BackendVerseProvider:
    """Reads verses through this project's own ``GET /verse/{surah}/{ayah}``."""

    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None, timeout: float | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout if timeout is not None else settings.http_timeout

    async def fetch_verse(self, surah: int, ayah: int) -> VerseContent:
        url = f"{self.base_url}/verse/{surah}/{ayah}"
        try:
            if self._client is not None:
                response = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise VerseFetchError(f"Backend returned HTTP {exc.response.status_code}", surah=surah, ayah=ayah) from exc
        except (httpx.RequestError, ValueError) as exc:
            raise VerseFetchError(f"Backend request failed: {exc}", surah=surah, ayah=ayah) from exc

        if not isinstance(payload, dict):
            raise VerseFetchError("Backend returned a malformed verse payload", surah=surah, ayah=ayah)
        count = payload.get("numberOfAyahs")
        return VerseContent(
            arabic_text=str(payload.get("arabic") or ""),
            english_text=str(payload.get("english") or ""),
            surah_verse_count=count if isinstance(count, int) else None,
        )
