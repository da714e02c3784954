import re

from core.normalizer import TEXT_COLUMNS

SEPARATOR = re.compile(r",\s*")
MISSING_TOKEN = "na"


def tokenize(value, seen=None):
    """
    Splits a multi-value field ("Rose, Jasmine, Musk") into lowercase tokens.
    Empty pieces and the literal 'na' are dropped.

    When `seen` is given, tokens already in it are skipped and the result is
    unique. `seen` itself is never modified.
    """
    if not isinstance(value, str):
        return []

    tokens = []
    skip = set(seen) if seen is not None else None

    for piece in SEPARATOR.split(value.lower()):
        token = piece.strip()
        if not token or token == MISSING_TOKEN:
            continue
        if skip is not None:
            if token in skip:
                continue
            skip.add(token)
        tokens.append(token)

    return tokens


def unique_ingredients(record, columns=TEXT_COLUMNS):
    """Set of distinct ingredient tokens of one perfume across all of its fields."""
    found = set()
    for col in columns:
        found.update(tokenize(record.get(col)))
    return found
