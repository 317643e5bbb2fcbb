"""
BioGloss Tokenizer
Lossless splitting of document text into whitespace, punctuation and word tokens
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List

PUNCTUATION = ',.;:!?()"\'[]{}'

# Whitespace runs, single punctuation characters, or runs of anything else
_TOKEN_PATTERN = re.compile(r'(\s+)|([' + re.escape(PUNCTUATION) + r'])|([^\s' + re.escape(PUNCTUATION) + r']+)')


class TokenKind(Enum):
    WHITESPACE = "whitespace"
    PUNCTUATION = "punctuation"
    WORD = "word"


@dataclass(frozen=True)
class Token:
    """An immutable slice of the original text"""
    text: str
    kind: TokenKind

    @property
    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD


def iter_tokens(text: str) -> Iterator[Token]:
    """
    Lazily split text into tokens

    Concatenating the text of every token yields the input exactly.
    Calling again restarts from the beginning.
    """
    for match in _TOKEN_PATTERN.finditer(text):
        whitespace, punctuation, word = match.groups()
        if whitespace is not None:
            yield Token(whitespace, TokenKind.WHITESPACE)
        elif punctuation is not None:
            yield Token(punctuation, TokenKind.PUNCTUATION)
        else:
            yield Token(word, TokenKind.WORD)


def tokenize(text: str) -> List[Token]:
    """Split text into an ordered list of tokens"""
    return list(iter_tokens(text))
