"""Pattern persistence: read + create-or-increment upsert.

Each upsert runs read-existing → reconcile → write-back for one
(pattern_type, platform) group as a single unit: for SqlPatternStore a DB
transaction (SELECT ... FOR UPDATE where supported; on SQLite the engine
opens every transaction with BEGIN IMMEDIATE, see database.build_engine),
a mutex for InMemoryPatternStore.
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional, Protocol, Union

from sqlalchemy import or_
from sqlalchemy.orm import sessionmaker

from blogstyle.database import get_db_session
from blogstyle.errors import InputError
from blogstyle.models.learned_pattern import LearnedPattern
from blogstyle.models.pattern import PatternRecord, PatternType
from blogstyle.services.pattern_extractor import PatternExtractor

logger = logging.getLogger(__name__)


class PatternStore(Protocol):
    def get_patterns(
        self,
        pattern_type: Optional[Union[PatternType, str]] = None,
        platform: Optional[str] = None,
    ) -> list[PatternRecord]:
        """All records, optionally filtered.

        A platform filter returns that platform's records plus the global
        (platform_scope=None) ones.
        """
        ...

    def upsert_pattern(self, record: PatternRecord) -> PatternRecord:
        """Create the record or increment the matching one; returns the stored state."""
        ...


def _pattern_type(value) -> Optional[PatternType]:
    if value is None:
        return None
    try:
        return PatternType(value)
    except ValueError as e:
        raise InputError(f"Unknown pattern type: {value!r}") from e


def _sort_key(record: PatternRecord):
    return -record.usage_count, record.id or 0


def upsert_patterns(store: PatternStore, records: Iterable[PatternRecord]) -> list[PatternRecord]:
    return [store.upsert_pattern(record) for record in records]


class InMemoryPatternStore:
    """Process-local store, mainly for tests and hosts without a database."""

    def __init__(self, extractor: Optional[PatternExtractor] = None):
        self.extractor = extractor or PatternExtractor()
        self._records: list[PatternRecord] = []
        self._lock = threading.Lock()
        self._next_id = 1

    def get_patterns(self, pattern_type=None, platform=None) -> list[PatternRecord]:
        pattern_type = _pattern_type(pattern_type)
        with self._lock:
            records = [
                r for r in self._records
                if (pattern_type is None or r.pattern_type is pattern_type)
                and (platform is None or r.platform_scope in (platform, None))
            ]
        return sorted(records, key=_sort_key)

    def upsert_pattern(self, record: PatternRecord) -> PatternRecord:
        with self._lock:
            group = [r for r in self._records if r.group_key == record.group_key]
            updated = self.extractor.reconcile_one(record, group)
            if updated is None:
                return next(r for r in group if r.evidence_key == record.evidence_key)

            if updated.id is None:
                updated = replace(updated, id=self._next_id)
                self._next_id += 1
                self._records.append(updated)
                logger.info("Created new pattern: %s (%s)", updated.pattern_type.value, updated.platform_scope or "all")
            else:
                self._records = [updated if r.id == updated.id else r for r in self._records]
                logger.info(
                    "Updated pattern: %s (%s) x%d",
                    updated.pattern_type.value, updated.platform_scope or "all", updated.usage_count,
                )
            return updated


class SqlPatternStore:
    """successful_patterns 테이블 기반 저장소 (SQLAlchemy)"""

    def __init__(self, session_factory: Optional[sessionmaker] = None, extractor: Optional[PatternExtractor] = None):
        self.session_factory = session_factory
        self.extractor = extractor or PatternExtractor()

    def get_patterns(self, pattern_type=None, platform=None) -> list[PatternRecord]:
        pattern_type = _pattern_type(pattern_type)
        with get_db_session(self.session_factory) as db:
            query = db.query(LearnedPattern)
            if pattern_type is not None:
                query = query.filter(LearnedPattern.pattern_type == pattern_type.value)
            if platform is not None:
                query = query.filter(or_(
                    LearnedPattern.seo_platform == platform,
                    LearnedPattern.seo_platform.is_(None),
                ))
            rows = query.order_by(LearnedPattern.usage_count.desc(), LearnedPattern.id).all()
            return [row.to_record() for row in rows]

    def upsert_pattern(self, record: PatternRecord) -> PatternRecord:
        with get_db_session(self.session_factory) as db:
            query = db.query(LearnedPattern).filter(LearnedPattern.pattern_type == record.pattern_type.value)
            if record.platform_scope is None:
                query = query.filter(LearnedPattern.seo_platform.is_(None))
            else:
                query = query.filter(LearnedPattern.seo_platform == record.platform_scope)
            rows = query.with_for_update().all()

            group = [row.to_record() for row in rows]
            updated = self.extractor.reconcile_one(record, group)
            if updated is None:
                return next(r for r in group if r.evidence_key == record.evidence_key)

            if updated.id is None:
                row = LearnedPattern(created_at=datetime.utcnow())
                row.apply(updated)
                db.add(row)
                db.flush()
                logger.info("Created new pattern: %s (%s)", updated.pattern_type.value, updated.platform_scope or "all")
                return replace(updated, id=row.id)

            row = next(r for r in rows if r.id == updated.id)
            row.apply(updated)
            logger.info(
                "Updated pattern: %s (%s) x%d",
                updated.pattern_type.value, updated.platform_scope or "all", updated.usage_count,
            )
            return updated
