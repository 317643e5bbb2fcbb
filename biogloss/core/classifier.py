"""
BioGloss Token Classifier
Decides how each token is rendered: plain, catalog term, or remote lookup candidate
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .catalog import TermCatalog, default_catalog
from .config import AnnotationConfig
from .normalizer import looks_like_name
from .tokenizer import Token

# Common words never sent to the dictionary service
COMMON_WORDS = frozenset([
    "the", "a", "an", "and", "or", "but", "if", "then", "than", "when", "while", "of", "in",
    "on", "for", "to", "from", "by", "with", "at", "as", "is", "are", "was", "were", "be",
    "been", "being", "this", "that", "these", "those", "it", "its", "they", "them", "their",
    "he", "she", "his", "her", "we", "us", "our", "you", "your", "i", "me", "my",
    "can", "could", "will", "would", "shall", "should", "may", "might", "do", "does", "did",
    "have", "has", "had", "not", "no", "yes", "so", "such", "just", "very", "more", "most",
    "some", "any", "all", "many", "few", "much", "there", "here", "also", "only", "over",
    "into", "out", "up", "down", "about", "through", "between", "within", "without",
    "new", "high", "low", "large", "small", "big", "little", "long", "short", "old", "young",
    "use", "make", "made", "say", "says", "said", "show", "shows", "shown", "get", "got",
])


class DecisionKind(Enum):
    PASS_THROUGH = "pass_through"
    CATALOG_TERM = "catalog_term"
    SKIP = "skip"
    EXTERNAL_CANDIDATE = "external_candidate"


@dataclass(frozen=True)
class Decision:
    """Classification outcome for a single token"""
    kind: DecisionKind
    definition: Optional[str] = None
    source: Optional[str] = None


PASS_THROUGH = Decision(DecisionKind.PASS_THROUGH)
SKIP = Decision(DecisionKind.SKIP)
EXTERNAL_CANDIDATE = Decision(DecisionKind.EXTERNAL_CANDIDATE)


def classify(token: Token,
             normalized: str,
             config: AnnotationConfig,
             catalog: Optional[TermCatalog] = None) -> Decision:
    """
    Classify a token. Rules are checked in strict priority order:

    1. whitespace and punctuation pass through
    2. words that normalize to nothing pass through
    3. catalog terms of the active dictionary (scientific mode only)
    4. common words and name-shaped tokens are skipped
    5. anything else is a lookup candidate (simple-English mode only)
    6. otherwise pass through

    Catalog terms win over the stoplist so a domain word that is also a
    common or capitalized word still gets tagged.
    """
    if not token.is_word:
        return PASS_THROUGH

    if not normalized:
        return PASS_THROUGH

    if config.scientific_enabled:
        catalog = catalog or default_catalog()
        definition = catalog.for_mode(config.dictionary_mode).get(normalized)
        if definition is not None:
            return Decision(DecisionKind.CATALOG_TERM, definition=definition, source=config.dictionary_mode)

    if normalized in COMMON_WORDS or looks_like_name(token.text):
        return SKIP

    if config.simple_english_enabled:
        return EXTERNAL_CANDIDATE

    return PASS_THROUGH
