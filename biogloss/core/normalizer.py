"""
BioGloss Word Normalizer
Canonical lookup forms for word tokens
"""

import re

_EDGE_PATTERN = re.compile(r'^[^a-z0-9]+|[^a-z0-9]+$')
_NAME_PATTERN = re.compile(r'[A-Z][a-z]+')


def normalize(word: str) -> str:
    """
    Lower-case a word and strip leading/trailing characters that are not
    ASCII letters or digits. Internal punctuation ("don't") is kept.

    Returns an empty string when nothing remains.
    """
    return _EDGE_PATTERN.sub('', word.lower())


def looks_like_name(raw: str) -> bool:
    """
    True for capitalized name-shaped tokens such as "Paris".

    Checks the raw token, not its normalized form. Tokens containing "." or
    "@" (abbreviations, e-mail addresses) are never names.
    """
    if '.' in raw or '@' in raw:
        return False
    return _NAME_PATTERN.fullmatch(raw) is not None
