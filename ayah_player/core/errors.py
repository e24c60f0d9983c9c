"""
Errors raised by the ayah player.

All of them derive from RuntimeError, so route handlers can keep catching
RuntimeError where they only need to turn a failure into an HTTP error.
"""

from typing import Any


class AyahPlayerError(RuntimeError):
    """Base exception carrying optional context for log lines."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class VerseFetchError(AyahPlayerError):
    """Raised when verse text cannot be fetched from the text provider."""

    def __init__(
        self,
        message: str,
        surah: int | None = None,
        ayah: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if surah is not None:
            ctx["surah"] = surah
        if ayah is not None:
            ctx["ayah"] = ayah
        super().__init__(message, ctx)
        self.surah = surah
        self.ayah = ayah


class RangeParseError(AyahPlayerError):
    """Raised when free text cannot be turned into a playback range."""


class RateLimitError(AyahPlayerError):
    """Raised when the range parser rejects a caller for exceeding its quota."""

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        ctx: dict[str, Any] = {}
        if retry_after is not None:
            ctx["retry_after"] = round(retry_after, 1)
        super().__init__(message, ctx)
        self.retry_after = retry_after


class AudioStartError(AyahPlayerError):
    """Raised by an audio transport that could not start playback."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message, {"url": url} if url else None)
        self.url = url


class ConfigurationError(AyahPlayerError):
    """Raised when a required setting is missing."""

    def __init__(self, message: str, setting_name: str | None = None) -> None:
        super().__init__(message, {"setting": setting_name} if setting_name else None)
        self.setting_name = setting_name
