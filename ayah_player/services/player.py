"""
Async driver that connects the sequencer to verse text and audio.

Every cue from the sequencer starts two independent jobs: fetching the verse
text and, when playing, starting the ayah audio. Both jobs are tagged with the
cue's generation and re-check the sequencer when they resume, so results
that arrive after the position has moved on are dropped.
"""

import asyncio
import logging

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt, wait_exponential

from ayah_player.core.config import settings
from ayah_player.core.errors import AudioStartError, AyahPlayerError
from ayah_player.core.worker import LatestTaskWorker
from ayah_player.models.schemas import PlaybackRange, SessionState, VerseContent
from ayah_player.services.audio_service import AudioTransport, ayah_audio_url
from ayah_player.services.sequencer import Cue, PlaybackSequencer
from ayah_player.services.text_normalizer import normalize_verse_text
from ayah_player.services.verse_service import VerseTextProvider

logger = logging.getLogger(__name__)


class PlayerSession:
    def __init__(
        self,
        sequencer: PlaybackSequencer,
        provider: VerseTextProvider,
        transport: AudioTransport,
        audio_host: str | None = None,
        reciter: str | None = None,
        max_retries: int | None = None,
        retry_base_delay: float | None = None,
    ) -> None:
        self.sequencer = sequencer
        self.provider = provider
        self.transport = transport
        self.audio_host = audio_host or settings.audio_host
        self.reciter = reciter or settings.reciter
        self.max_retries = settings.audio_start_retries if max_retries is None else max_retries
        self.retry_base_delay = settings.audio_retry_base_delay if retry_base_delay is None else retry_base_delay

        self.content = VerseContent()
        self.content_generation: int | None = None
        self.audio_generation: int | None = None
        self.stalled = False

        self._worker = LatestTaskWorker()
        self._audio_lock = asyncio.Lock()
        self.sequencer.subscribe(self._on_cue)

    # ---------- Commands ----------

    async def load(self) -> None:
        """Fetch the text for the current position without playing it."""
        self._on_cue(Cue(position=self.sequencer.position, generation=self.sequencer.generation, autoplay=False))

    async def start_range(self, playback_range: PlaybackRange) -> None:
        self.sequencer.start_range(playback_range)

    async def toggle_play(self) -> bool:
        playing = self.sequencer.toggle_play()
        if not playing:
            async with self._audio_lock:
                await self.transport.pause()
        return playing

    async def stop(self) -> None:
        self.sequencer.stop()
        async with self._audio_lock:
            self.audio_generation = None
            await self.transport.stop()

    async def step_next(self) -> None:
        self.sequencer.step_next()

    async def step_previous(self) -> None:
        self.sequencer.step_previous()

    async def wait_idle(self) -> None:
        await self._worker.drain()

    async def close(self) -> None:
        self._worker.cancel_all()
        await self._worker.drain()
        await self.transport.stop()

    def snapshot(self) -> SessionState:
        return SessionState(
            position=self.sequencer.position,
            playback_range=self.sequencer.playback_range,
            repeat=self.sequencer.repeat.model_copy(),
            playing=self.sequencer.playing,
            stalled=self.stalled,
            arabic_text=self.content.arabic_text,
            english_text=self.content.english_text,
            surah_verse_count=self.content.surah_verse_count,
        )

    # ---------- Cue handling ----------

    def _on_cue(self, cue: Cue) -> None:
        if cue.resume and self.transport.paused and self.audio_generation == cue.generation:
            self._worker.submit("audio", self._resume_audio)
            return

        self.stalled = False
        if not cue.resume or self.content_generation != cue.generation:
            self._worker.submit("text", lambda: self._load_text(cue))
        if cue.autoplay:
            self._worker.submit("audio", lambda: self._start_audio(cue))

    def _is_current(self, cue: Cue) -> bool:
        return cue.generation == self.sequencer.generation

    async def _load_text(self, cue: Cue) -> None:
        surah, ayah = cue.position.surah, cue.position.ayah
        try:
            content = await self.provider.fetch_verse(surah, ayah)
        except AyahPlayerError as exc:
            logger.warning("Keeping previous text, fetch for %s failed: %s", cue.position, exc)
            return
        except Exception:
            logger.exception("Keeping previous text, provider raised for %s", cue.position)
            return

        if not self._is_current(cue):
            logger.debug("Discarding text for superseded position %s", cue.position)
            return

        self.content = VerseContent(
            arabic_text=normalize_verse_text(content.arabic_text, surah, ayah),
            english_text=content.english_text,
            surah_verse_count=content.surah_verse_count,
        )
        self.content_generation = cue.generation

    async def _resume_audio(self) -> None:
        async with self._audio_lock:
            if self.sequencer.playing:
                await self.transport.resume()

    def _audio_retrier(self, failed_attempts: int) -> AsyncRetrying:
        # A series that continues after a failed playback first re-raises that
        # failure, so the backoff picks up where the previous series left off.
        carried = 1 if failed_attempts else 0
        return AsyncRetrying(
            retry=retry_if_exception_type(AudioStartError),
            stop=stop_after_attempt(self.max_retries + 1 - failed_attempts + carried),
            wait=wait_exponential(multiplier=self.retry_base_delay * 2 ** (failed_attempts - carried)),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.info(
            "Retrying audio in %.2fs after: %s",
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
            retry_state.outcome.exception() if retry_state.outcome else None,
        )

    async def _start_audio(self, cue: Cue, failed_attempts: int = 0) -> None:
        url = ayah_audio_url(cue.position.surah, cue.position.ayah, self.audio_host, self.reciter)
        carried = 1 if failed_attempts else 0
        try:
            async for attempt in self._audio_retrier(failed_attempts):
                with attempt:
                    number = attempt.retry_state.attempt_number
                    if number <= carried:
                        raise AudioStartError("Playback ended before the end of the ayah", url=url)
                    spent = failed_attempts + number - carried
                    async with self._audio_lock:
                        if not self._is_current(cue) or not self.sequencer.playing:
                            return
                        try:
                            await self.transport.play(url, lambda ok, n=spent: self._on_audio_finished(cue, ok, n))
                        except AudioStartError as exc:
                            logger.warning("Could not start %s: %s", url, exc)
                            raise
                        self.audio_generation = cue.generation
        except AudioStartError as exc:
            logger.warning("Giving up on %s after %d attempts: %s", url, self.max_retries + 1, exc)
            self._mark_stalled(cue)
        except Exception:
            logger.exception("Audio transport raised for %s", url)
            self._mark_stalled(cue)

    def _mark_stalled(self, cue: Cue) -> None:
        if self._is_current(cue):
            self.stalled = True
            self.audio_generation = None
            logger.error("Playback stalled at %s", cue.position)

    def _on_audio_finished(self, cue: Cue, ok: bool, attempts: int) -> None:
        if not self._is_current(cue) or not self.sequencer.playing:
            logger.debug("Ignoring completion for superseded position %s", cue.position)
            return
        self.audio_generation = None
        if ok:
            self.sequencer.on_audio_complete()
            return
        # Started but died before the end: counts as a failed attempt.
        self._worker.submit("audio", lambda: self._start_audio(cue, attempts))
