"""
Clean-up applied to Arabic verse text before it is displayed.

The upstream Uthmani text prefixes the first ayah of every surah with the
basmala and uses a handful of code points most Arabic fonts render badly.
"""

OPENING_SURAH = 1
INVOCATION_WORD_COUNT = 4

# (miscoded sequence, replacement). The patterns do not overlap.
# Still missing: dagger alifs and other letters carrying a maddah.
MISCODED_CHARACTERS: list[tuple[str, str]] = [
    ("\u06DF", "\u0652"),  # small high rounded zero -> sukun
    ("\u06CC", "\u064A"),  # farsi yeh -> arabic yeh
    ("\u0627\u06E4", "\u0622"),  # alif + small high madda -> alif with madda above
    ("\u0646\u08F2", "\u0646\u0656"),  # noon + open kasratan -> noon + subscript alef
    ("\u0645\u06E4", "\u0645\u0653"),  # meem + small high madda -> meem + maddah above
    ("\u0644\u06E4", "\u0644\u0653"),  # lam + small high madda -> lam + maddah above
]


def strip_opening_invocation(text: str, surah_number: int, ayah_number: int) -> str:
    """Drop the leading basmala (first four words) from ayah 1 of every surah but Al-Fatiha."""
    if ayah_number != 1 or surah_number == OPENING_SURAH:
        return text
    parts = text.split(maxsplit=INVOCATION_WORD_COUNT)
    return parts[INVOCATION_WORD_COUNT] if len(parts) > INVOCATION_WORD_COUNT else ""


def fix_miscoded_characters(text: str) -> str:
    for pattern, replacement in MISCODED_CHARACTERS:
        text = text.replace(pattern, replacement)
    return text


def normalize_verse_text(text: str, surah_number: int, ayah_number: int) -> str:
    text = strip_opening_invocation(text, surah_number, ayah_number)
    return fix_miscoded_characters(text)
