#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import sys
import uuid

from ayah_player.core.config import settings
from ayah_player.core.errors import AyahPlayerError, RateLimitError
from ayah_player.core.log import configure_logging
from ayah_player.models.schemas import PlaybackRange, SessionState
from ayah_player.services.audio_service import FfplayTransport
from ayah_player.services.player import PlayerSession
from ayah_player.services.range_parser import BackendRangeParser, OpenAIRangeParser
from ayah_player.services.sequencer import PlaybackSequencer
from ayah_player.services.verse_service import AlQuranCloudProvider, BackendVerseProvider

COMMANDS = "[enter/p] play/pause  [n] next  [b] previous  [s] status  [q] quit"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Quran recitation ayah by ayah, optionally over a repeated range.")
    parser.add_argument("--surah", type=int, default=settings.starting_surah)
    parser.add_argument("--ayah", type=int, default=settings.starting_ayah)
    parser.add_argument("--start", type=int, help="First ayah of a range in --surah.")
    parser.add_argument("--end", type=int, help="Last ayah of a range in --surah (defaults to --start).")
    parser.add_argument("--repeat-ayah", type=int, default=1)
    parser.add_argument("--repeat-range", type=int, default=1)
    parser.add_argument("--request", type=str, help='Free-text range, e.g. "Al-Mulk 1 to 5, each ayah twice".')
    parser.add_argument("--backend", type=str, help="Base URL of a running ayah-player backend.")
    parser.add_argument("--reciter", type=str, default=settings.reciter)
    parser.add_argument("--paused", action="store_true", help="Load the first ayah without starting playback.")
    parser.add_argument("--log-level", type=str, default=settings.log_level)
    return parser


def render(state: SessionState) -> str:
    lines = [f"{state.position}  {'playing' if state.playing else 'paused'}"]
    if state.playback_range:
        rng = state.playback_range
        lines[0] += (
            f"  range {rng.surah}:{rng.start_ayah}-{rng.end_ayah}"
            f"  ayah {state.repeat.ayah_repeats_done}/{rng.repeat_ayah_count}"
            f"  pass {state.repeat.range_repeats_done}/{rng.repeat_range_count}"
        )
    if state.stalled:
        lines[0] += "  STALLED"
    if state.arabic_text:
        lines.append(state.arabic_text)
    if state.english_text:
        lines.append(state.english_text)
    return "\n".join(lines)


async def resolve_range(args: argparse.Namespace) -> PlaybackRange | None:
    if args.request:
        if args.backend:
            parser = BackendRangeParser(args.backend, session_id=str(uuid.uuid4()))
        else:
            parser = OpenAIRangeParser()
        return await parser.parse_range(args.request)
    if args.start is not None:
        return PlaybackRange(
            surah=args.surah,
            start_ayah=args.start,
            end_ayah=args.end if args.end is not None else args.start,
            repeat_ayah_count=args.repeat_ayah,
            repeat_range_count=args.repeat_range,
        )
    return None


async def read_commands(session: PlayerSession) -> None:
    print(COMMANDS)
    while True:
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line:
            return
        command = line.strip().lower()
        if command in ("", "p"):
            await session.toggle_play()
        elif command == "n":
            await session.step_next()
        elif command == "b":
            await session.step_previous()
        elif command == "q":
            return
        elif command != "s":
            print(COMMANDS)
            continue
        await session.wait_idle()
        print(render(session.snapshot()))


async def run(args: argparse.Namespace) -> int:
    try:
        playback_range = await resolve_range(args)
        if playback_range:
            sequencer = PlaybackSequencer(playback_range.surah, playback_range.start_ayah)
        else:
            sequencer = PlaybackSequencer(args.surah, args.ayah)
    except RateLimitError as exc:
        print(f"Rate limited: {exc.message}", file=sys.stderr)
        return 2
    except (AyahPlayerError, ValueError) as exc:
        print(f"Could not set up playback: {exc}", file=sys.stderr)
        return 1

    provider = BackendVerseProvider(args.backend) if args.backend else AlQuranCloudProvider()
    session = PlayerSession(sequencer, provider, FfplayTransport(), reciter=args.reciter)

    try:
        if playback_range:
            await session.start_range(playback_range)
        else:
            await session.load()
            if not args.paused:
                await session.toggle_play()
        await session.wait_idle()
        print(render(session.snapshot()))
        await read_commands(session)
    finally:
        await session.close()
    return 0


def main() -> None:
    args = build_parser().parse_args()
    configure_logging(args.log_level)
    try:
        code = asyncio.run(run(args))
    except KeyboardInterrupt:
        code = 130
    raise SystemExit(code)


if __name__ == "__main__":
    main()
