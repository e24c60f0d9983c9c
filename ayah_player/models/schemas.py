from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ayah_player.data.quran import SURAH_COUNT, verse_count


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    surah: int = Field(ge=1, le=SURAH_COUNT)
    ayah: int = Field(ge=1)

    @model_validator(mode="after")
    def validate_ayah(self) -> "Position":
        if self.ayah > verse_count(self.surah):
            raise ValueError(f"Surah {self.surah} has only {verse_count(self.surah)} ayahs.")
        return self

    def __str__(self) -> str:
        return f"{self.surah}:{self.ayah}"


class PlaybackRange(BaseModel):
    """A span of ayahs in one surah with per-ayah and per-range repeat counts.

    Serialized with the camelCase keys the parse endpoint returns
    (``startAyah``, ``repeatAyahCount`` ...); snake_case names are accepted
    too.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    surah: int = Field(ge=1, le=SURAH_COUNT)
    start_ayah: int = Field(ge=1)
    end_ayah: int = Field(ge=1)
    repeat_ayah_count: int = Field(default=1, ge=1)
    repeat_range_count: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def validate_span(self) -> "PlaybackRange":
        if self.start_ayah > self.end_ayah:
            raise ValueError("startAyah must not be greater than endAyah.")
        if self.end_ayah > verse_count(self.surah):
            raise ValueError(f"Surah {self.surah} has only {verse_count(self.surah)} ayahs.")
        return self


class RepeatState(BaseModel):
    ayah_repeats_done: int = Field(default=1, ge=1)
    range_repeats_done: int = Field(default=1, ge=1)


class VerseContent(BaseModel):
    arabic_text: str = ""
    english_text: str = ""
    surah_verse_count: int | None = None


class ParseRangeRequest(BaseModel):
    input_as_text: str = Field(min_length=1)


class VerseResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    arabic: str
    english: str
    number_of_ayahs: int | None = Field(default=None, alias="numberOfAyahs")


class HealthResponse(BaseModel):
    status: str = "ok"


class SessionState(BaseModel):
    position: Position
    playback_range: PlaybackRange | None = None
    repeat: RepeatState
    playing: bool
    stalled: bool
    arabic_text: str
    english_text: str
    surah_verse_count: int | None = None
