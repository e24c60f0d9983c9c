"""
Tests for the command-line player's argument handling.
"""

import asyncio
import importlib.util
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "play_range.py"


@pytest.fixture(scope="module")
def play_range():
    module_spec = importlib.util.spec_from_file_location("play_range", SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


class TestStartingPoint:
    @pytest.mark.parametrize("argv", [
        ["--surah", "1", "--ayah", "8"],
        ["--surah", "115", "--ayah", "1"],
        ["--surah", "1", "--start", "3", "--end", "9"],
    ])
    def test_out_of_range_position_exits_with_error(self, play_range, argv, capsys):
        args = play_range.build_parser().parse_args(argv)

        assert asyncio.run(play_range.run(args)) == 1
        assert "Could not set up playback" in capsys.readouterr().err
