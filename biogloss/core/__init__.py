"""
BioGloss core annotation pipeline
"""

from .annotator import AnnotatedDocument, AnnotatedSpan, Annotator, SpanKind
from .cache import ABSENT, CacheEntry, DefinitionCache
from .catalog import TermCatalog, default_catalog
from .classifier import Decision, DecisionKind, classify
from .config import DICTIONARY_MODES, AnnotationConfig, APIConfig, BioGlossConfig
from .errors import (
    BioGlossError,
    DefinitionLookupError,
    ExtractionError,
    LookupTimeoutError,
    ResponseShapeError,
)
from .extract import extract_text
from .normalizer import looks_like_name, normalize
from .overlay import OverlayController, TooltipState, Viewport, compute_position
from .pipeline import AnnotationSession
from .resolver import DefinitionResolver, extract_first_definition
from .tokenizer import Token, TokenKind, iter_tokens, tokenize
