"""
Playback sequencing: which ayah plays next, and how many times.

The sequencer is a plain synchronous state machine. It never performs I/O;
instead, every time the current ayah has to be (re)loaded it emits a ``Cue``
to its listeners. A cue is emitted on every position change and also when
the position is unchanged but the ayah must be played again (an ayah repeat,
or a range starting on the ayah already shown). Each such cue carries a new
``generation`` so that work started for an older cue can be recognised and
dropped.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from ayah_player.data.quran import next_verse, previous_verse
from ayah_player.models.schemas import PlaybackRange, Position, RepeatState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cue:
    position: Position
    generation: int
    autoplay: bool
    resume: bool = False


CueListener = Callable[[Cue], None]


class PlaybackSequencer:
    def __init__(self, surah: int = 1, ayah: int = 1) -> None:
        self.position = Position(surah=surah, ayah=ayah)
        self.playback_range: PlaybackRange | None = None
        self.repeat = RepeatState()
        self.playing = False
        self.generation = 0
        self._listeners: list[CueListener] = []

    @property
    def state(self) -> str:
        if not self.playing:
            return "idle"
        return "range" if self.playback_range else "sequential"

    def subscribe(self, listener: CueListener) -> None:
        self._listeners.append(listener)

    # ---------- Operations ----------

    def start_range(self, playback_range: PlaybackRange) -> Cue | None:
        self.playing = True
        self.playback_range = playback_range
        self.repeat = RepeatState()
        logger.info(
            "Starting range %s:%s-%s (ayah x%s, range x%s)",
            playback_range.surah,
            playback_range.start_ayah,
            playback_range.end_ayah,
            playback_range.repeat_ayah_count,
            playback_range.repeat_range_count,
        )
        # Always re-trigger, even if we are already on the start ayah.
        return self._move_to(Position(surah=playback_range.surah, ayah=playback_range.start_ayah), force=True)

    def toggle_play(self) -> bool:
        self.playing = not self.playing
        logger.debug("Playing set to %s at %s", self.playing, self.position)
        if self.playing:
            self._emit(Cue(position=self.position, generation=self.generation, autoplay=True, resume=True))
        return self.playing

    def stop(self) -> None:
        self.playing = False

    def step_next(self) -> Cue | None:
        self._leave_range()
        surah, ayah = next_verse(self.position.surah, self.position.ayah)
        return self._move_to(Position(surah=surah, ayah=ayah))

    def step_previous(self) -> Cue | None:
        self._leave_range()
        surah, ayah = previous_verse(self.position.surah, self.position.ayah)
        return self._move_to(Position(surah=surah, ayah=ayah))

    def on_audio_complete(self) -> Cue | None:
        """Advance after the current ayah finished playing.

        Returns the cue that was emitted, or None when nothing is playing
        (including the moment a range finishes its final pass without
        moving back to its start).
        """
        if not self.playing:
            return None

        rng = self.playback_range
        if rng is None:
            surah, ayah = next_verse(self.position.surah, self.position.ayah)
            return self._move_to(Position(surah=surah, ayah=ayah))

        if self.repeat.ayah_repeats_done < rng.repeat_ayah_count:
            self.repeat.ayah_repeats_done += 1
            return self._move_to(self.position, force=True)

        if self.position.ayah >= rng.end_ayah:
            if self.repeat.range_repeats_done < rng.repeat_range_count:
                self.repeat.ayah_repeats_done = 1
                self.repeat.range_repeats_done += 1
                return self._move_to(Position(surah=rng.surah, ayah=rng.start_ayah), force=True)

            logger.info("Range %s:%s-%s finished", rng.surah, rng.start_ayah, rng.end_ayah)
            self.playing = False
            self.repeat = RepeatState()
            return self._move_to(Position(surah=rng.surah, ayah=rng.start_ayah))

        self.repeat.ayah_repeats_done = 1
        return self._move_to(Position(surah=rng.surah, ayah=self.position.ayah + 1))

    # ---------- Internals ----------

    def _leave_range(self) -> None:
        if self.playback_range is not None:
            logger.info("Manual navigation, leaving range mode")
        self.playback_range = None
        self.repeat = RepeatState()

    def _move_to(self, position: Position, force: bool = False) -> Cue | None:
        if position == self.position and not force:
            return None
        self.position = position
        self.generation += 1
        cue = Cue(position=position, generation=self.generation, autoplay=self.playing)
        self._emit(cue)
        return cue

    def _emit(self, cue: Cue) -> None:
        for listener in list(self._listeners):
            listener(cue)
