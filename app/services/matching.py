"""
Master guest list name matching.

Guests rarely type their name exactly as it was seeded: honorifics, second
surnames and middle names come and go. The pipeline tries progressively looser
strategies and stops at the first one that yields an entry.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from app.core.exceptions import StoreQueryError
from app.services.stores import GuestStore, Row

logger = logging.getLogger(__name__)


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class MasterLookupResult:
    """Outcome of a master list lookup; keeps a backend failure apart from a miss"""

    status: LookupStatus
    entry: Optional[Row] = None
    strategy: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def found(self) -> bool:
        return self.status == LookupStatus.FOUND


class MatchStrategy(ABC):
    name: str = "base"

    @abstractmethod
    async def match(self, store: GuestStore, query: str) -> Optional[Row]:
        """Return the first matching master entry or None"""


class ExactMatchStrategy(MatchStrategy):
    """Case-insensitive equality, evaluated by the store"""

    name = "exact"

    async def match(self, store: GuestStore, query: str) -> Optional[Row]:
        return await store.find_master(query, partial=False)


class SubstringMatchStrategy(MatchStrategy):
    """Case-insensitive `%query%`, evaluated by the store"""

    name = "substring"

    async def match(self, store: GuestStore, query: str) -> Optional[Row]:
        return await store.find_master(query, partial=True)


class ContainmentScanStrategy(MatchStrategy):
    """Full scan: candidate contains the query or the query contains the candidate"""

    name = "containment"

    async def match(self, store: GuestStore, query: str) -> Optional[Row]:
        needle = query.strip().lower()
        for entry in await store.list_master():
            candidate = (entry.get("name") or "").strip().lower()
            if not candidate:
                continue
            if needle in candidate or candidate in needle:
                return entry
        return None


DEFAULT_STRATEGIES: Sequence[MatchStrategy] = (
    ExactMatchStrategy(),
    SubstringMatchStrategy(),
    ContainmentScanStrategy(),
)


class MatchPipeline:
    """Applies matching strategies in order"""

    def __init__(self, strategies: Optional[Sequence[MatchStrategy]] = None):
        self.strategies: List[MatchStrategy] = list(strategies or DEFAULT_STRATEGIES)

    async def run(self, store: GuestStore, name: str) -> MasterLookupResult:
        query = (name or "").strip()
        if not query:
            return MasterLookupResult(status=LookupStatus.NOT_FOUND)

        for strategy in self.strategies:
            try:
                entry = await strategy.match(store, query)
            except StoreQueryError as e:
                logger.error("Error searching master guest list (%s) for %r: %s", strategy.name, query, e)
                return MasterLookupResult(status=LookupStatus.ERROR, strategy=strategy.name, error=e)

            if entry:
                logger.debug("Master guest %r matched %r via %s", entry.get("name"), query, strategy.name)
                return MasterLookupResult(status=LookupStatus.FOUND, entry=entry, strategy=strategy.name)

        return MasterLookupResult(status=LookupStatus.NOT_FOUND)
