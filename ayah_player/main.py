import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ayah_player.api.routes import health, ranges, verses
from ayah_player.core.config import settings
from ayah_player.core.errors import RateLimitError
from ayah_player.core.log import configure_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="ayah-player", version="0.1.0")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

app.include_router(health.router)
app.include_router(ranges.router)
app.include_router(verses.router)


@app.exception_handler(RateLimitError)
async def rate_limited(request: Request, exc: RateLimitError) -> JSONResponse:
    logger.info("Rate limit hit on %s", request.url.path)
    headers = {"Retry-After": str(max(1, int(exc.retry_after)))} if exc.retry_after else None
    return JSONResponse(status_code=429, content={"error": exc.message}, headers=headers)


def run() -> None:
    import uvicorn

    configure_logging(settings.log_level)
    logger.info("Backend running on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
