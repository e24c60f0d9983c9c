from fastapi import APIRouter, Depends, HTTPException, Request

from ayah_player.core.config import settings
from ayah_player.core.errors import ConfigurationError, RangeParseError
from ayah_player.core.ratelimit import FixedWindowRateLimiter, caller_identity
from ayah_player.models.schemas import ParseRangeRequest, PlaybackRange
from ayah_player.services.range_parser import OpenAIRangeParser

router = APIRouter(tags=["ranges"])
parser = OpenAIRangeParser()
limiter = FixedWindowRateLimiter(settings.parse_rate_limit, settings.parse_rate_window_seconds)


def enforce_parse_rate_limit(request: Request) -> None:
    limiter.hit(caller_identity(request))


@router.post("/parse-range", response_model=PlaybackRange, dependencies=[Depends(enforce_parse_rate_limit)])
async def parse_range(payload: ParseRangeRequest) -> PlaybackRange:
    try:
        return await parser.parse_range(payload.input_as_text)
    except ConfigurationError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except RangeParseError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
