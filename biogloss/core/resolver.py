"""
BioGloss Definition Resolver
Asynchronous, memoized lookups against a remote dictionary service
"""

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from .cache import DefinitionCache
from .config import DICT_ENDPOINT
from .errors import DefinitionLookupError, LookupTimeoutError, ResponseShapeError

logger = logging.getLogger(__name__)


def extract_first_definition(payload: Any) -> Optional[str]:
    """
    Pull the first definition string out of a dictionary service response:
    first entry -> first meaning -> first definition -> "definition".

    Returns None when any link of that chain is missing.
    """
    if not isinstance(payload, list) or not payload:
        return None

    try:
        definition = payload[0]["meanings"][0]["definitions"][0]["definition"]
    except (KeyError, IndexError, TypeError):
        return None

    if isinstance(definition, str) and definition:
        return definition
    return None


class DefinitionResolver:
    """
    Resolves words to definitions through the dictionary service, storing
    every outcome in a shared DefinitionCache.

    At most one request per word is outstanding at any time: concurrent
    callers for the same word await the same lookup.
    """

    def __init__(self,
                 cache: DefinitionCache,
                 endpoint: str = DICT_ENDPOINT,
                 timeout: float = 5.0,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize resolver

        Args:
            cache: Session cache the results are written to
            endpoint: Base URL of the dictionary service
            timeout: Bounded wait per request in seconds
            session: Optional shared HTTP session; a short-lived session is
                opened per request when omitted
        """
        self.cache = cache
        self.endpoint = endpoint.rstrip('/')
        self.timeout = timeout
        self.session = session

    async def resolve(self, word: str) -> Optional[str]:
        """
        Resolve a word to its definition

        Args:
            word: Normalized word

        Returns:
            Definition text, or None when the word has no definition

        Raises:
            LookupTimeoutError: the service did not answer in time; nothing is cached
        """
        key = word.lower()
        if not key:
            return None

        entry = self.cache.lookup(key)
        if entry is not None:
            logger.debug(f"Cache hit for '{key}'")
            return entry.definition

        pending = self.cache.pending(key)
        if pending is None:
            pending = self.cache.track(key, asyncio.ensure_future(self._lookup(key)))
        else:
            logger.debug(f"Joining in-flight lookup for '{key}'")

        # Shielded so a cancelled caller does not cancel the shared lookup
        return await asyncio.shield(pending)

    async def _lookup(self, key: str) -> Optional[str]:
        """Run one request and store its outcome in the cache"""
        try:
            definition = await asyncio.wait_for(self._fetch(key), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            # Not cached: a later run may retry
            logger.warning(f"Lookup for '{key}' timed out after {self.timeout}s")
            raise LookupTimeoutError(f"No answer for '{key}' within {self.timeout}s") from e
        except (aiohttp.ClientError, OSError, DefinitionLookupError) as e:
            logger.warning(f"Lookup for '{key}' failed: {str(e)}")
            return self.cache.store(key, None).definition

        if definition is None:
            logger.debug(f"No definition found for '{key}'")
        return self.cache.store(key, definition).definition

    async def _fetch(self, key: str) -> Optional[str]:
        url = f"{self.endpoint}/{quote(key, safe='')}"

        if self.session is not None:
            return await self._get(self.session, url)

        async with aiohttp.ClientSession() as session:
            return await self._get(session, url)

    async def _get(self, session, url: str) -> Optional[str]:
        logger.debug(f"GET {url}")
        async with session.get(url) as response:
            if not 200 <= response.status < 300:
                return None
            try:
                payload = await response.json(content_type=None)
            except ValueError as e:
                raise ResponseShapeError(f"Invalid JSON from {url}: {e}") from e

        return extract_first_definition(payload)
