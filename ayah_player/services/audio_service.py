import asyncio
import logging
import shutil
import signal
from abc import ABC, abstractmethod
from typing import Callable

from ayah_player.core.config import settings
from ayah_player.core.errors import AudioStartError

logger = logging.getLogger(__name__)

FinishedCallback = Callable[[bool], None]


def ayah_audio_url(surah: int, ayah: int, host: str | None = None, reciter: str | None = None) -> str:
    base = (host or settings.audio_host).rstrip("/")
    return f"{base}/{reciter or settings.reciter}/{surah:03d}{ayah:03d}.mp3"


class AudioTransport(ABC):
    """Plays one audio resource at a time.

    ``play`` returns once playback has started and supersedes anything that
    was loaded before. When the resource ends on its own, ``on_finished`` is
    called with True; when it dies with an error, with False. A resource that
    is stopped or superseded never reports.
    """

    @property
    @abstractmethod
    def paused(self) -> bool: ...

    @abstractmethod
    async def play(self, url: str, on_finished: FinishedCallback) -> None: ...

    @abstractmethod
    async def pause(self) -> None: ...

    @abstractmethod
    async def resume(self) -> None: ...

    @abstractmethod
    async def stop(self) -> None: ...


class FfplayTransport(AudioTransport):
    """Streams ayah audio through an ``ffplay`` subprocess.

    Pause and resume suspend the process with SIGSTOP/SIGCONT, so this
    transport is POSIX only.
    """

    def __init__(self, binary: str = "ffplay") -> None:
        self.binary = binary
        self._proc: asyncio.subprocess.Process | None = None
        self._watcher: asyncio.Task | None = None
        self._paused = False

    @property
    def paused(self) -> bool:
        return self._paused

    async def play(self, url: str, on_finished: FinishedCallback) -> None:
        await self.stop()
        if shutil.which(self.binary) is None:
            raise AudioStartError(f"{self.binary} not found on PATH", url=url)

        cmd = [
            self.binary,
            "-nodisp",
            "-autoexit",
            "-loglevel",
            "error",
            url,
        ]
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise AudioStartError(f"Could not start {self.binary}: {exc}", url=url) from exc

        self._proc = proc
        self._paused = False
        self._watcher = asyncio.get_running_loop().create_task(self._watch(proc, url, on_finished))
        logger.debug("Playing %s (pid %s)", url, proc.pid)

    async def _watch(self, proc: asyncio.subprocess.Process, url: str, on_finished: FinishedCallback) -> None:
        _, stderr = await proc.communicate()
        if proc is not self._proc:
            return
        self._proc = None
        if proc.returncode == 0:
            on_finished(True)
            return
        detail = stderr.decode("utf-8", errors="replace").strip() if stderr else ""
        logger.warning("Playback of %s exited with code %s: %s", url, proc.returncode, detail)
        on_finished(False)

    async def pause(self) -> None:
        if self._proc and self._proc.returncode is None and not self._paused:
            self._proc.send_signal(signal.SIGSTOP)
            self._paused = True

    async def resume(self) -> None:
        if self._proc and self._proc.returncode is None and self._paused:
            self._proc.send_signal(signal.SIGCONT)
            self._paused = False

    async def stop(self) -> None:
        proc, self._proc = self._proc, None
        watcher, self._watcher = self._watcher, None
        self._paused = False
        if proc is None or proc.returncode is not None:
            return
        try:
            # A stopped process ignores SIGTERM until it is continued.
            proc.send_signal(signal.SIGCONT)
            proc.terminate()
        except ProcessLookupError:
            pass
        await proc.wait()
        if watcher is not None:
            await asyncio.gather(watcher, return_exceptions=True)
