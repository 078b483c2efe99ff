import re
from functools import lru_cache

# Dash variants that show up in hand-typed stop names
DASH_VARIANTS = str.maketrans({"–": "-", "—": "-"})

# Punctuation dropped before comparing stop names
STRIPPED_PUNCTUATION = str.maketrans("", "", "(),.")

REPEATED_SPACES = re.compile(r" {2,}")

# Word separators for word-subset stop matching
STOP_WORD_SEPARATORS = re.compile(r"[ \-/]")


@lru_cache(maxsize=8192)
def normalize_stop_name(raw: str) -> str:
    """Canonicalize a stop name for comparison.

    Trims, lowercases, maps en/em dashes to "-", collapses repeated spaces
    and strips "(", ")", "," and ".".

    Examples:
        "  Mirpur–10 " -> "mirpur-10"
        "Gabtoli (Bus Stand)" -> "gabtoli bus stand"
    """
    text = raw.strip().lower()
    text = text.translate(DASH_VARIANTS)
    text = REPEATED_SPACES.sub(" ", text)
    text = text.translate(STRIPPED_PUNCTUATION)
    # Dropping punctuation can leave new double or edge spaces
    return REPEATED_SPACES.sub(" ", text).strip()


def split_stop_words(normalized: str) -> list[str]:
    """Split a normalized stop name on space, hyphen and slash.

    Empty fragments (e.g. from " - ") are dropped.
    """
    return [word for word in STOP_WORD_SEPARATORS.split(normalized) if word]


def clean_stop_label(raw: str) -> str:
    """Tidy a stop name for display without changing its case.

    Used to build the autocomplete universe, where labels are shown to users.
    """
    text = raw.strip().translate(DASH_VARIANTS)
    return REPEATED_SPACES.sub(" ", text)
