"""
BioGloss Annotator
Drives tokens through the classifier and assembles tagged HTML output
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from html import escape
from typing import Dict, List, Optional, Set, Union

from .catalog import TermCatalog, default_catalog
from .classifier import DecisionKind, classify
from .config import AnnotationConfig
from .errors import LookupTimeoutError
from .normalizer import normalize
from .resolver import DefinitionResolver
from .tokenizer import Token, iter_tokens

logger = logging.getLogger(__name__)

# Source label carried by terms defined through the dictionary service
SIMPLE_SOURCE = "simple"


def escape_attribute(value: str) -> str:
    """Escape & < > " ' for use inside a quoted attribute or tag content"""
    return escape(value, quote=True)


def escape_text(value: str) -> str:
    """Escape & < > so literal text displays exactly as written"""
    return escape(value, quote=False)


class SpanKind(Enum):
    SCIENTIFIC = "sci-term"
    SIMPLE = "simple-term"


@dataclass(frozen=True)
class AnnotatedSpan:
    """A tagged term in the annotated output"""
    raw: str
    term: str
    source: str
    kind: SpanKind
    # Inline for catalog terms; simple terms read the cache at display time
    definition: Optional[str] = None

    def to_html(self) -> str:
        if self.kind is SpanKind.SCIENTIFIC:
            return (
                f'<span class="{self.kind.value}" data-term="{escape_attribute(self.term)}" '
                f'data-definition="{escape_attribute(self.definition or "")}" '
                f'data-source="{escape_attribute(self.source)}">{escape_attribute(self.raw)}</span>'
            )
        return (
            f'<span class="{self.kind.value}" data-term="{escape_attribute(self.term)}">'
            f'{escape_attribute(self.raw)}</span>'
        )


Segment = Union[str, AnnotatedSpan]


@dataclass
class AnnotatedDocument:
    """Ordered output of one annotation run"""
    segments: List[Segment] = field(default_factory=list)

    @property
    def spans(self) -> List[AnnotatedSpan]:
        return [segment for segment in self.segments if isinstance(segment, AnnotatedSpan)]

    def terms(self) -> List[str]:
        """Normalized terms of every tagged unit, in document order"""
        return [span.term for span in self.spans]

    def plain_text(self) -> str:
        """The original text, rebuilt from the segments"""
        return "".join(
            segment.raw if isinstance(segment, AnnotatedSpan) else segment
            for segment in self.segments
        )

    def to_html(self) -> str:
        return "".join(
            segment.to_html() if isinstance(segment, AnnotatedSpan) else escape_text(segment)
            for segment in self.segments
        )

    def stats(self) -> Dict[str, int]:
        spans = self.spans
        scientific = sum(1 for span in spans if span.kind is SpanKind.SCIENTIFIC)
        return {
            'segments': len(self.segments),
            'scientific_terms': scientific,
            'simple_terms': len(spans) - scientific,
        }


class Annotator:
    """
    Annotates document text according to an AnnotationConfig
    """

    def __init__(self,
                 config: AnnotationConfig,
                 catalog: Optional[TermCatalog] = None,
                 resolver: Optional[DefinitionResolver] = None):
        """
        Initialize annotator

        Args:
            config: Dictionary mode and enabled annotation kinds
            catalog: Term catalog, the built-in one when omitted
            resolver: Dictionary service resolver, required for simple-English mode
        """
        self.config = config
        self.catalog = catalog or default_catalog()
        self.resolver = resolver

        if config.simple_english_enabled and resolver is None:
            logger.warning("Simple-English annotation enabled without a resolver; lookups are skipped")

    async def annotate(self, text: str) -> AnnotatedDocument:
        """
        Annotate text

        Tokens are processed strictly in order; each lookup is awaited
        before the next token is examined, so output order always matches
        input order. A word whose lookup timed out is treated as absent for
        the rest of the run without another request.

        Args:
            text: Plain document text

        Returns:
            AnnotatedDocument
        """
        document = AnnotatedDocument()
        timed_out: Set[str] = set()
        for token in iter_tokens(text):
            document.segments.append(await self._annotate_token(token, timed_out))

        logger.info(f"Annotated {len(text)} chars: {document.stats()}")
        return document

    async def _annotate_token(self, token: Token, timed_out: Set[str]) -> Segment:
        normalized = normalize(token.text) if token.is_word else ""
        decision = classify(token, normalized, self.config, self.catalog)

        if decision.kind is DecisionKind.CATALOG_TERM:
            return AnnotatedSpan(
                raw=token.text,
                term=normalized,
                source=decision.source,
                kind=SpanKind.SCIENTIFIC,
                definition=decision.definition,
            )

        if decision.kind is DecisionKind.EXTERNAL_CANDIDATE and self.resolver is not None:
            definition = await self._resolve(normalized, timed_out)
            if definition:
                return AnnotatedSpan(
                    raw=token.text,
                    term=normalized,
                    source=SIMPLE_SOURCE,
                    kind=SpanKind.SIMPLE,
                )

        return token.text

    async def _resolve(self, word: str, timed_out: Set[str]) -> Optional[str]:
        if word in timed_out:
            return None

        try:
            return await self.resolver.resolve(word)
        except LookupTimeoutError:
            timed_out.add(word)
        except Exception as e:
            logger.error(f"Error resolving '{word}': {str(e)}")
        return None
