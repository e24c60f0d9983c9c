"""
Unit tests for the static surah table and boundary crossing.
"""

import pytest

from ayah_player.data.quran import (
    SURAH_AYAH_COUNT,
    is_valid_verse,
    next_verse,
    previous_verse,
    verse_count,
)


class TestVerseCount:
    def test_table_covers_every_surah(self):
        assert len(SURAH_AYAH_COUNT) == 114
        assert sum(SURAH_AYAH_COUNT) == 6236

    @pytest.mark.parametrize("surah,expected", [(1, 7), (2, 286), (89, 30), (114, 6)])
    def test_known_counts(self, surah, expected):
        assert verse_count(surah) == expected

    @pytest.mark.parametrize("surah", [0, 115, -1])
    def test_invalid_surah(self, surah):
        with pytest.raises(ValueError):
            verse_count(surah)

    def test_is_valid_verse(self):
        assert is_valid_verse(1, 7)
        assert not is_valid_verse(1, 8)
        assert not is_valid_verse(115, 1)


class TestBoundaryCrossing:
    @pytest.mark.parametrize("current,expected", [
        ((2, 5), (2, 6)),
        ((1, 7), (2, 1)),
        ((89, 30), (90, 1)),
        ((114, 6), (1, 1)),
    ])
    def test_next_verse(self, current, expected):
        assert next_verse(*current) == expected

    @pytest.mark.parametrize("current,expected", [
        ((2, 6), (2, 5)),
        ((2, 1), (1, 7)),
        ((90, 1), (89, 30)),
        ((1, 1), (114, 6)),
    ])
    def test_previous_verse(self, current, expected):
        assert previous_verse(*current) == expected
