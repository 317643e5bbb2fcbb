"""
BioGloss Annotation Session
Owns the session cache and runs documents through extraction and annotation
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

import aiohttp

from .annotator import AnnotatedDocument, Annotator
from .cache import DefinitionCache
from .catalog import TermCatalog, default_catalog
from .config import AnnotationConfig, BioGlossConfig
from .errors import ExtractionError, LookupTimeoutError
from .extract import extract_text
from .overlay import OverlayController, Viewport
from .resolver import DefinitionResolver

logger = logging.getLogger(__name__)

STATUS_READING = "Reading document…"
STATUS_ANNOTATING = "Extracting and annotating text…"
STATUS_SUCCESS = "Document processed successfully."
STATUS_FAILED = "Failed to extract text from document."


class AnnotationSession:
    """
    A single user session: one definition cache shared by every run, plus
    the currently displayed document and status message.

    Submitting a new document supersedes any run still in flight. The
    superseded run may keep filling the cache, but its output is never
    displayed.
    """

    def __init__(self,
                 config: Optional[BioGlossConfig] = None,
                 catalog: Optional[TermCatalog] = None,
                 http_session: Optional[aiohttp.ClientSession] = None,
                 extractor: Callable[[bytes, Optional[str]], str] = extract_text):
        """
        Initialize session

        Args:
            config: Session configuration
            catalog: Term catalog; loaded from config.catalog_path or the
                built-in dictionaries when omitted
            http_session: Optional shared HTTP session for dictionary lookups
            extractor: Document-to-text function
        """
        self.config = config or BioGlossConfig()

        if catalog is None:
            if self.config.catalog_path:
                catalog = TermCatalog.from_yaml_file(self.config.catalog_path)
            else:
                catalog = default_catalog()
        self.catalog = catalog

        self.cache = DefinitionCache()
        self.http_session = http_session
        self.extractor = extractor

        self.status: Tuple[str, str] = ("", "info")
        self.display: Optional[AnnotatedDocument] = None
        self.title: Optional[str] = None
        self._run_id = 0

    def _set_status(self, message: str, type: str = "info"):
        self.status = (message, type)
        log = logger.error if type == "error" else logger.info
        log(f"Status: {message}")

    def _is_current(self, run_id: int) -> bool:
        return run_id == self._run_id

    def make_resolver(self) -> DefinitionResolver:
        return DefinitionResolver(
            self.cache,
            endpoint=self.config.api.dict_endpoint,
            timeout=self.config.api.lookup_timeout,
            session=self.http_session,
        )

    async def annotate_text(self, text: str,
                            annotation: Optional[AnnotationConfig] = None) -> AnnotatedDocument:
        """Annotate plain text without touching the displayed document"""
        annotator = Annotator(
            annotation or self.config.annotation,
            catalog=self.catalog,
            resolver=self.make_resolver(),
        )
        return await annotator.annotate(text)

    async def annotate_document(self, data: bytes,
                                filename: Optional[str] = None,
                                annotation: Optional[AnnotationConfig] = None) -> Optional[AnnotatedDocument]:
        """
        Extract, annotate and display a document

        Args:
            data: Raw document bytes
            filename: Original file name
            annotation: Per-run classification settings, the session default when omitted

        Returns:
            The displayed AnnotatedDocument, or None if a newer run
            superseded this one

        Raises:
            ExtractionError: the document could not be read; nothing is displayed
        """
        run_id = self._start_run(filename)
        self._set_status(STATUS_READING)

        try:
            loop = asyncio.get_running_loop()
            text = await loop.run_in_executor(None, self.extractor, data, filename)
        except ExtractionError as e:
            if self._is_current(run_id):
                self._set_status(STATUS_FAILED, "error")
            logger.error(f"Extraction failed for {filename or 'document'}: {str(e)}")
            raise

        return await self._annotate_run(run_id, text, annotation)

    async def annotate_pasted_text(self, text: str,
                                   title: Optional[str] = None,
                                   annotation: Optional[AnnotationConfig] = None) -> Optional[AnnotatedDocument]:
        """Annotate and display text supplied directly, without extraction"""
        run_id = self._start_run(title)
        return await self._annotate_run(run_id, text, annotation)

    def _start_run(self, title: Optional[str]) -> int:
        self._run_id += 1
        self.title = title
        return self._run_id

    async def _annotate_run(self, run_id: int, text: str,
                            annotation: Optional[AnnotationConfig]) -> Optional[AnnotatedDocument]:
        if self._is_current(run_id):
            self._set_status(STATUS_ANNOTATING)

        document = await self.annotate_text(text, annotation)

        if not self._is_current(run_id):
            logger.info(f"Run {run_id} superseded by run {self._run_id}, discarding output")
            return None

        self.display = document
        self._set_status(STATUS_SUCCESS, "success")
        return document

    async def annotate_file(self, file_path: Union[str, Path],
                            annotation: Optional[AnnotationConfig] = None) -> Optional[AnnotatedDocument]:
        """Read a document from disk and annotate it"""
        file_path = Path(file_path)
        try:
            data = file_path.read_bytes()
        except OSError as e:
            self._set_status(STATUS_FAILED, "error")
            raise ExtractionError(f"Could not read {file_path}: {e}") from e

        return await self.annotate_document(data, file_path.name, annotation)

    async def define(self, word: str) -> Optional[str]:
        """Look up a single word through the session cache"""
        try:
            return await self.make_resolver().resolve(word)
        except LookupTimeoutError:
            return None

    def make_overlay(self, viewport: Viewport, size: Tuple[int, int] = (320, 120)) -> OverlayController:
        """Tooltip controller over the session cache, placed per the configured offset and margin"""
        return OverlayController(
            self.cache,
            viewport,
            size=size,
            offset=self.config.api.tooltip_offset,
            margin=self.config.api.tooltip_margin,
        )

    def definition_for(self, term: str) -> Optional[str]:
        """Cached definition of a simple-English term, for display"""
        return self.cache.definition_for(term)

    def reset(self):
        """Start a fresh session: empty cache, nothing displayed"""
        self._run_id += 1
        self.cache.clear()
        self.display = None
        self.title = None
        self.status = ("", "info")
