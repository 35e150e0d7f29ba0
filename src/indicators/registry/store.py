"""Indicator registry storage and management.

This module provides in-memory storage for indicator definitions keyed by
uuid. State lives for the life of the process; there is no persistence.
"""

import logging
import threading
import uuid as uuid_lib
from typing import Dict, List, Optional

from src.models.indicators import Indicator

logger = logging.getLogger(__name__)


class IndicatorRegistry:
    """Registry for managing indicator definitions.

    Entries are keyed by uuid, so the registry never holds two indicators
    with the same id. All operations take an internal lock; read operations
    return list snapshots that callers may iterate freely.
    """

    def __init__(self) -> None:
        """Initialize the indicator registry."""
        self._indicators: Dict[str, Indicator] = {}
        self._lock = threading.RLock()

    def save(self, indicator: Indicator) -> Indicator:
        """Save a new indicator.

        Indicators without a uuid get a fresh one and are inserted.
        Indicators that already have a uuid are returned unchanged and the
        stored collection is left as it is (create-only semantics).

        Args:
            indicator: The indicator to save.

        Returns:
            Indicator: The same indicator object, with its uuid set.
        """
        with self._lock:
            if indicator.uuid:
                logger.debug(
                    "Indicator '%s' already has uuid %s, not stored again",
                    indicator.name,
                    indicator.uuid,
                )
                return indicator

            indicator.uuid = str(uuid_lib.uuid4())
            self._indicators[indicator.uuid] = indicator

        logger.info("Saved indicator: %s (%s)", indicator.name, indicator.uuid)
        return indicator

    def purge(self, indicator: Indicator) -> None:
        """Remove the stored indicator with the same uuid.

        Purging an indicator that is not stored is a no-op.

        Args:
            indicator: The indicator to remove.
        """
        with self._lock:
            removed = self._indicators.pop(indicator.uuid, None) if indicator.uuid else None

        if removed is not None:
            logger.info("Purged indicator: %s (%s)", removed.name, removed.uuid)

    def get_by_uuid(self, uuid: str) -> Optional[Indicator]:
        """Get an indicator by uuid.

        Args:
            uuid: The indicator uuid.

        Returns:
            Optional[Indicator]: The indicator, or None if not found.
        """
        with self._lock:
            return self._indicators.get(uuid)

    def get_all(self, include_retired: bool = True) -> List[Indicator]:
        """List all stored indicators in insertion order.

        The ``include_retired`` flag is accepted for interface compatibility
        and currently ignored: retired indicators are always returned.

        Args:
            include_retired: Ignored.

        Returns:
            List[Indicator]: Snapshot of all stored indicators.
        """
        with self._lock:
            return list(self._indicators.values())

    def search(self, name: str, exact_match_only: bool = False) -> List[Indicator]:
        """Find indicators by name.

        Matching is case-sensitive. With ``exact_match_only`` the name must
        be equal, otherwise it must contain ``name``.

        Args:
            name: Name or name fragment to look for.
            exact_match_only: Require an exact match.

        Returns:
            List[Indicator]: Matching indicators in insertion order.
        """
        with self._lock:
            candidates = list(self._indicators.values())

        if exact_match_only:
            return [indicator for indicator in candidates if indicator.name == name]
        return [indicator for indicator in candidates if name in indicator.name]

    def exists(self, uuid: str) -> bool:
        """Check if an indicator with this uuid is stored.

        Args:
            uuid: The indicator uuid.

        Returns:
            bool: True if stored, False otherwise.
        """
        with self._lock:
            return uuid in self._indicators

    def __len__(self) -> int:
        with self._lock:
            return len(self._indicators)

    def clear(self) -> None:
        """Clear all stored indicators (primarily for testing)."""
        with self._lock:
            self._indicators.clear()
        logger.info("Cleared indicator registry")
