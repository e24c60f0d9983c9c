from fastapi import APIRouter, HTTPException, Path

from ayah_player.core.errors import VerseFetchError
from ayah_player.data.quran import is_valid_verse, verse_count
from ayah_player.models.schemas import VerseResponse
from ayah_player.services.verse_service import AlQuranCloudProvider

router = APIRouter(tags=["verses"])
provider = AlQuranCloudProvider()


@router.get("/verse/{surah}/{ayah}", response_model=VerseResponse)
async def get_verse(
    surah: int = Path(ge=1, le=114),
    ayah: int = Path(ge=1),
) -> VerseResponse:
    if not is_valid_verse(surah, ayah):
        raise HTTPException(status_code=422, detail=f"Surah {surah} has {verse_count(surah)} ayahs, got {ayah}.")
    try:
        content = await provider.fetch_verse(surah, ayah)
    except VerseFetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return VerseResponse(
        arabic=content.arabic_text,
        english=content.english_text,
        number_of_ayahs=content.surah_verse_count,
    )
