"""
Unit tests for verse text clean-up.
"""

import pytest

from ayah_player.services.text_normalizer import (
    MISCODED_CHARACTERS,
    fix_miscoded_characters,
    normalize_verse_text,
    strip_opening_invocation,
)

AYAH_WITH_BASMALA = "بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ تَبَارَكَ الَّذِي بِيَدِهِ الْمُلْكُ"


class TestStripOpeningInvocation:
    """Test removal of the basmala from first ayahs."""

    @pytest.mark.parametrize("surah", [2, 67, 89, 114])
    def test_removes_first_four_words(self, surah):
        result = strip_opening_invocation(AYAH_WITH_BASMALA, surah, 1)

        assert result == "تَبَارَكَ الَّذِي بِيَدِهِ الْمُلْكُ"
        assert result.split() == AYAH_WITH_BASMALA.split()[4:]

    def test_al_fatiha_keeps_basmala(self):
        assert strip_opening_invocation(AYAH_WITH_BASMALA, 1, 1) == AYAH_WITH_BASMALA

    @pytest.mark.parametrize("surah,ayah", [(2, 2), (67, 5), (1, 3)])
    def test_identity_after_first_ayah(self, surah, ayah):
        assert strip_opening_invocation(AYAH_WITH_BASMALA, surah, ayah) == AYAH_WITH_BASMALA

    def test_counts_words_not_graphemes(self):
        assert strip_opening_invocation("a b c d e f", 5, 1) == "e f"

    def test_short_text_becomes_empty(self):
        assert strip_opening_invocation("a b c", 5, 1) == ""


class TestFixMiscodedCharacters:
    """Test the substitution table for broken code points."""

    @pytest.mark.parametrize("pattern,replacement", MISCODED_CHARACTERS)
    def test_each_pattern_is_replaced(self, pattern, replacement):
        fixed = fix_miscoded_characters(f"x{pattern}y{pattern}")

        assert pattern not in fixed
        assert fixed == f"x{replacement}y{replacement}"

    def test_farsi_yeh(self):
        assert fix_miscoded_characters("\u06CC") == "\u064A"

    def test_alif_with_madda(self):
        assert fix_miscoded_characters("\u0627\u06E4") == "\u0622"

    def test_plain_text_untouched(self):
        assert fix_miscoded_characters("الرَّحْمَٰنِ") == "الرَّحْمَٰنِ"

    @pytest.mark.parametrize("text", [
        "".join(pattern for pattern, _ in MISCODED_CHARACTERS),
        "قُلْ هُوَ ٱللَّهُ أَحَدٌ ۟ ی نࣲ",
        "",
    ])
    def test_idempotent(self, text):
        once = fix_miscoded_characters(text)
        assert fix_miscoded_characters(once) == once


class TestNormalizeVerseText:
    def test_strips_then_fixes(self):
        text = "w1 w2 w3 w4 \u06CCx"
        assert normalize_verse_text(text, 67, 1) == "\u064Ax"

    def test_fixes_without_stripping(self):
        assert normalize_verse_text("w1 \u06CC", 67, 2) == "w1 \u064A"
