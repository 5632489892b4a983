"""Abstract interfaces for external enrichment services.

These ABCs define the contract that external implementations must fulfil.
The SDK ships one trivial backend, :class:`StaticCodeCatalog`, serving the
seed codes from ``routing.yaml``; deployments plug in their own (an LLM
prompt, a rating bureau API, ...).  Any of them may fail or time out, so
callers treat them as best-effort.

Typical integration flow::

    catalog = CachedCodeCatalog(MyBureauCatalog(...))
    codes = await catalog.fetch_codes()   # [] if the backend failed
    # ... offer codes as suggestions for the tag_list question ...

    lookup: EnrichmentLookup = MyBusinessLookup(...)
    summary = await lookup.lookup("Acme Roofing, Fresno CA")
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from riskcheck_rulesets.constants import CODE_CACHE_TTL_SECONDS
from riskcheck_rulesets.models.schema import ClassCode

logger = logging.getLogger(__name__)


class EnrichmentLookup(ABC):
    """Interface for free-text enrichment (business lookup, code description).

    Implementations receive the raw answer the respondent typed and return
    a short human-readable text.  Failures are raised to the caller; the
    engine never depends on the result.
    """

    @abstractmethod
    async def lookup(self, query: str) -> str:
        """Return enrichment text for ``query``.

        Parameters
        ----------
        query:
            Raw respondent input (business name, class code, ...).

        Returns
        -------
        str
            Description to display alongside the answer.
        """
        ...


class CodeCatalog(ABC):
    """Interface for the list of workers' compensation class codes."""

    @abstractmethod
    async def fetch_codes(self) -> list[ClassCode]:
        """Fetch the full catalog from the backing service."""
        ...


class StaticCodeCatalog(CodeCatalog):
    """A fixed in-memory catalog."""

    def __init__(self, codes: list[ClassCode]) -> None:
        self._codes = list(codes)

    async def fetch_codes(self) -> list[ClassCode]:
        return list(self._codes)


class CachedCodeCatalog(CodeCatalog):
    """TTL cache in front of another :class:`CodeCatalog`.

    A successful non-empty fetch is cached for ``ttl_seconds``.  A failing
    backend or an empty result yields ``[]`` and is not cached, so the next
    call retries.

    Args:
        backend: the catalog to fetch from on a cache miss
        ttl_seconds: freshness window (default ``CODE_CACHE_TTL_SECONDS``)
        clock: monotonic time source, injectable for tests
    """

    def __init__(
        self,
        backend: CodeCatalog,
        ttl_seconds: int = CODE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._backend = backend
        self._ttl = ttl_seconds
        self._clock = clock
        self._codes: Optional[list[ClassCode]] = None
        self._fetched_at = 0.0

    def invalidate(self) -> None:
        """Drop the cached catalog."""
        self._codes = None

    async def fetch_codes(self) -> list[ClassCode]:
        if self._codes is not None and self._clock() - self._fetched_at < self._ttl:
            return list(self._codes)

        try:
            codes = await self._backend.fetch_codes()
        except Exception:
            logger.exception("Class-code catalog fetch failed")
            return []

        if not codes:
            logger.warning("Class-code catalog returned no codes, not caching")
            return []

        self._codes = list(codes)
        self._fetched_at = self._clock()
        logger.info("Cached %d class codes", len(codes))
        return list(codes)
