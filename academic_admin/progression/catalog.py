"""
Step catalog lookup.

The curriculum (Level rows) is loaded once into an immutable map from step
label to its owning level and reused across evaluations. A session that
flushes Level changes drops the cached copy at flush time and again when its
transaction commits or rolls back, so uncommitted rows never outlive the
transaction. Bulk writes must call invalidate_catalog() themselves.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from sqlalchemy import event
from sqlalchemy.orm import Session

from academic_admin.models import Level
from academic_admin.progression.steps import next_step_label

logger = logging.getLogger('progression')


@dataclass(frozen=True)
class StepCatalogEntry:
    level_code: str
    steps: Tuple[str, ...]
    clubs: frozenset
    is_parallel: bool


class StepCatalog:
    """Read-only view over the curriculum, keyed by step label."""

    def __init__(self, entries):
        self._levels = MappingProxyType({entry.level_code: entry for entry in entries})
        by_step = {}
        for entry in entries:
            for label in entry.steps:
                # First level (in sort order) owning a label wins
                by_step.setdefault(label, entry)
        self._by_step: Mapping[str, StepCatalogEntry] = MappingProxyType(by_step)

    @classmethod
    def from_levels(cls, levels):
        entries = [
            StepCatalogEntry(
                level_code=level.code,
                steps=tuple(level.steps or ()),
                clubs=frozenset(level.clubs or ()),
                is_parallel=bool(level.is_parallel),
            )
            for level in levels
        ]
        return cls(entries)

    def find_level_by_step_label(self, label: Optional[str]) -> Optional[StepCatalogEntry]:
        if not label:
            return None
        return self._by_step.get(label)

    def get_level(self, code: Optional[str]) -> Optional[StepCatalogEntry]:
        if not code:
            return None
        return self._levels.get(code)

    def successor(self, label: Optional[str]) -> Optional[Tuple[str, StepCatalogEntry]]:
        """Return (next label, its entry), or None when the curriculum ends here."""
        next_label = next_step_label(label)
        if next_label is None:
            return None
        entry = self.find_level_by_step_label(next_label)
        if entry is None:
            return None
        return next_label, entry

    def __len__(self):
        return len(self._levels)


_cache_lock = threading.Lock()
_cached_catalog: Optional[StepCatalog] = None


def load_catalog() -> StepCatalog:
    """Return the process-wide catalog, building it from the database if needed."""
    global _cached_catalog
    with _cache_lock:
        if _cached_catalog is None:
            levels = (
                Level.query
                .order_by(Level.sort_order.is_(None), Level.sort_order, Level.code)
                .all()
            )
            _cached_catalog = StepCatalog.from_levels(levels)
            logger.debug(f"Step catalog loaded with {len(_cached_catalog)} levels")
        return _cached_catalog


def invalidate_catalog():
    global _cached_catalog
    with _cache_lock:
        _cached_catalog = None


def find_level_by_step_label(label):
    return load_catalog().find_level_by_step_label(label)


_LEVELS_CHANGED = "catalog_levels_changed"


@event.listens_for(Session, "after_flush")
def _mark_level_changes(session, flush_context):
    if any(isinstance(obj, Level) for obj in (*session.new, *session.dirty, *session.deleted)):
        session.info[_LEVELS_CHANGED] = True
        invalidate_catalog()


@event.listens_for(Session, "after_commit")
@event.listens_for(Session, "after_soft_rollback")
def _invalidate_on_transaction_end(session, *args):
    if session.info.pop(_LEVELS_CHANGED, False):
        invalidate_catalog()


__all__ = [
    'StepCatalog',
    'StepCatalogEntry',
    'find_level_by_step_label',
    'invalidate_catalog',
    'load_catalog',
]
