"""Ingredient name normalization.

Names go through three stages: punctuation and cooking-state words are dropped,
food tokens are kept, and each token is singularized. When a stage leaves
nothing behind the previous stage's text is used instead, so a non-empty name
never normalizes to an empty string.
"""

import re

_PUNCTUATION = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")

COOKING_STATE_WORDS = frozenset(
    {
        "baked",
        "blanched",
        "boiled",
        "boneless",
        "braised",
        "chopped",
        "cooked",
        "cubed",
        "diced",
        "fresh",
        "fried",
        "frozen",
        "grated",
        "grilled",
        "mashed",
        "minced",
        "poached",
        "raw",
        "roasted",
        "sauteed",
        "sautéed",
        "scrambled",
        "seared",
        "shredded",
        "skinless",
        "sliced",
        "smoked",
        "steamed",
        "toasted",
        "trimmed",
    }
)

# Cuts, parts and prep nouns kept as food tokens even when they are short.
FOOD_PART_WORDS = frozenset(
    {
        "breast",
        "brisket",
        "chop",
        "cutlet",
        "fillet",
        "filet",
        "flank",
        "ham",
        "leg",
        "loin",
        "mince",
        "patty",
        "rib",
        "ribeye",
        "roast",
        "shank",
        "sirloin",
        "steak",
        "strip",
        "tenderloin",
        "thigh",
        "wing",
    }
)

TOKEN_STOPWORDS = frozenset({"with", "from", "made", "fresh", "frozen"})

MIN_TOKEN_LENGTH = 4

_PLURAL_RULES: tuple[tuple[str, str], ...] = (
    ("ies", "y"),
    ("ves", "f"),
    ("oes", "o"),
    ("ches", "ch"),
    ("shes", "sh"),
    ("sses", "ss"),
)
_PLURAL_EXCEPTIONS = {
    "chives": "chive",
    "cloves": "clove",
    "molasses": "molasses",
    "olives": "olive",
}
_NO_TRAILING_S_STRIP = ("ss", "us", "is")


def normalize_name(raw: str) -> str:
    """Return the canonical singular form of an ingredient name."""
    lowered = raw.lower()
    cleaned = _first_nonempty(_strip_punctuation(lowered), lowered)
    uncooked = _first_nonempty(_drop_cooking_words(cleaned), cleaned)
    tokens = _first_nonempty(" ".join(_food_tokens(uncooked)), uncooked)
    return _first_nonempty(_singularize_words(tokens), tokens)


def extract_food_tokens(raw: str) -> list[str]:
    """Return distinct singular food tokens of a name, in order of appearance."""
    uncooked = _drop_cooking_words(_strip_punctuation(raw.lower()))
    singular = (_singularize(token) for token in _food_tokens(uncooked))
    return list(dict.fromkeys(singular))


def name_words(raw: str) -> list[str]:
    """Return every word of a name in singular form, cooking words removed.

    Unlike :func:`extract_food_tokens` short words are kept, so phrases such as
    "cod" or "egg yolk" can be looked up in a mapping table.
    """
    uncooked = _drop_cooking_words(_strip_punctuation(raw.lower()))
    return [singular_form(word) for word in uncooked.split()]


def singular_form(word: str) -> str:
    """Apply the plural-stripping rules to a single lowercase word."""
    if word in _PLURAL_EXCEPTIONS:
        return _PLURAL_EXCEPTIONS[word]
    for suffix, replacement in _PLURAL_RULES:
        if word.endswith(suffix):
            return word[: -len(suffix)] + replacement
    if word.endswith("s") and not word.endswith(_NO_TRAILING_S_STRIP):
        return word[:-1]
    return word


def is_food_token(word: str) -> bool:
    if word in FOOD_PART_WORDS:
        return True
    return (
        len(word) >= MIN_TOKEN_LENGTH
        and word not in TOKEN_STOPWORDS
        and word not in COOKING_STATE_WORDS
    )


def _singularize(word: str) -> str:
    # A stripped form that would be dropped as a token on a second pass is not
    # taken, which keeps normalize_name idempotent ("eggs" stays "eggs").
    singular = singular_form(word)
    if singular != word and not is_food_token(singular):
        return word
    return singular


def _singularize_words(text: str) -> str:
    return " ".join(_singularize(word) for word in text.split())


def _strip_punctuation(text: str) -> str:
    spaced = _PUNCTUATION.sub(" ", text)
    return _WHITESPACE.sub(" ", spaced).strip()


def _drop_cooking_words(text: str) -> str:
    return " ".join(word for word in text.split() if word not in COOKING_STATE_WORDS)


def _food_tokens(text: str) -> list[str]:
    return [word for word in text.split() if is_food_token(word)]


def _first_nonempty(value: str, fallback: str) -> str:
    return value if value else fallback
