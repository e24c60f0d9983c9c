"""
Static Quran structure: verse counts per surah and boundary-crossing helpers.
"""

SURAH_COUNT = 114

# Ayahs per surah, 1-114
SURAH_AYAH_COUNT = [
    7, 286, 200, 176, 120, 165, 206, 75, 129, 109,
    123, 111, 43, 52, 99, 128, 111, 110, 98, 135,
    112, 78, 118, 64, 77, 227, 93, 88, 69, 60,
    34, 30, 73, 54, 45, 83, 182, 88, 75, 85,
    54, 53, 89, 59, 37, 35, 38, 29, 18, 45,
    60, 49, 62, 55, 78, 96, 29, 22, 24, 13,
    14, 11, 11, 18, 12, 12, 30, 52, 52, 44,
    28, 28, 20, 56, 40, 31, 50, 40, 46, 42,
    29, 19, 36, 25, 22, 17, 19, 26, 30, 20,
    15, 21, 11, 8, 8, 19, 5, 8, 8, 11,
    11, 8, 3, 9, 5, 4, 7, 3, 6, 3,
    5, 4, 5, 6,
]


def verse_count(surah: int) -> int:
    if surah < 1 or surah > SURAH_COUNT:
        raise ValueError(f"Surah number must be between 1 and {SURAH_COUNT}, got {surah}.")
    return SURAH_AYAH_COUNT[surah - 1]


def is_valid_verse(surah: int, ayah: int) -> bool:
    return 1 <= surah <= SURAH_COUNT and 1 <= ayah <= SURAH_AYAH_COUNT[surah - 1]


def next_verse(surah: int, ayah: int) -> tuple[int, int]:
    """Verse after (surah, ayah); the last verse of 114 wraps to 1:1."""
    if ayah < verse_count(surah):
        return surah, ayah + 1
    if surah == SURAH_COUNT:
        return 1, 1
    return surah + 1, 1


def previous_verse(surah: int, ayah: int) -> tuple[int, int]:
    """Verse before (surah, ayah); 1:1 wraps to the last verse of 114."""
    if ayah > 1:
        return surah, min(ayah - 1, verse_count(surah))
    if surah == 1:
        return SURAH_COUNT, verse_count(SURAH_COUNT)
    return surah - 1, verse_count(surah - 1)
