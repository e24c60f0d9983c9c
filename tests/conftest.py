"""
Shared fakes and fixtures for the ayah player tests.
"""

import asyncio
from types import SimpleNamespace

import pytest

from ayah_player.core.errors import AudioStartError, VerseFetchError
from ayah_player.models.schemas import PlaybackRange, VerseContent
from ayah_player.services.audio_service import AudioTransport
from ayah_player.services.player import PlayerSession
from ayah_player.services.sequencer import PlaybackSequencer

BASMALA = "بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ"


class FakeProvider:
    """Returns predictable verse content; can fail or hold back chosen verses."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, int]] = []
        self.failing: set[tuple[int, int]] = set()
        self.gates: dict[tuple[int, int], asyncio.Event] = {}
        self.errors: dict[tuple[int, int], Exception] = {}

    async def fetch_verse(self, surah: int, ayah: int) -> VerseContent:
        self.calls.append((surah, ayah))
        gate = self.gates.get((surah, ayah))
        if gate is not None:
            await gate.wait()
        if (surah, ayah) in self.errors:
            raise self.errors[(surah, ayah)]
        if (surah, ayah) in self.failing:
            raise VerseFetchError("upstream unavailable", surah=surah, ayah=ayah)
        arabic = f"{BASMALA} arabic-{surah}:{ayah}" if ayah == 1 else f"arabic-{surah}:{ayah}"
        return VerseContent(arabic_text=arabic, english_text=f"english-{surah}:{ayah}", surah_verse_count=30)


class FakeTransport(AudioTransport):
    """Records what was played and lets the test finish the current resource."""

    def __init__(self, fail_starts: int = 0) -> None:
        self.played: list[str] = []
        self.fail_starts = fail_starts
        self.start_attempts = 0
        self.resumes = 0
        self._on_finished = None
        self._paused = False

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def loaded(self) -> bool:
        return self._on_finished is not None

    async def play(self, url, on_finished) -> None:
        self.start_attempts += 1
        if self.fail_starts:
            self.fail_starts -= 1
            raise AudioStartError("resource not found", url=url)
        self.played.append(url)
        self._on_finished = on_finished
        self._paused = False

    def finish(self, ok: bool = True) -> None:
        callback, self._on_finished = self._on_finished, None
        assert callback is not None, "nothing is playing"
        callback(ok)

    async def pause(self) -> None:
        if self._on_finished is not None:
            self._paused = True

    async def resume(self) -> None:
        self._paused = False
        self.resumes += 1

    async def stop(self) -> None:
        self._on_finished = None
        self._paused = False



def make_completion(content: str | None):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[dict] = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return make_completion(self.content)


def fake_openai_client(content: str | None = None, error: Exception | None = None):
    completions = FakeCompletions(content=content, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def make_session(provider, transport):
    """Build a PlayerSession over the fakes; must be called inside a running loop."""

    def _make(surah: int = 67, ayah: int = 1, **kwargs) -> PlayerSession:
        kwargs.setdefault("retry_base_delay", 0)
        kwargs.setdefault("max_retries", 2)
        return PlayerSession(
            PlaybackSequencer(surah, ayah),
            provider,
            transport,
            audio_host="https://audio.test/data",
            reciter="Tester",
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_range():
    return PlaybackRange(surah=67, start_ayah=2, end_ayah=4, repeat_ayah_count=2, repeat_range_count=2)


@pytest.fixture
def fake_openai():
    """Factory for a stand-in OpenAI client with canned chat completions."""
    return fake_openai_client
