"""Learned pattern model for persisting reconciled style patterns."""

import json
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, Index

from blogstyle.database import Base
from blogstyle.models.pattern import PatternRecord, parse_pattern_data


class LearnedPattern(Base):
    """Style pattern observed across completed posts, with its usage counter."""

    __tablename__ = "successful_patterns"
    __table_args__ = (
        Index("ix_patterns_type_platform", "pattern_type", "seo_platform"),
    )

    id = Column(Integer, primary_key=True, index=True)
    pattern_type = Column(String(40), nullable=False)   # korean_ending_mix, heading_structure ...
    seo_platform = Column(String(40), nullable=True)    # None = 전체 플랫폼
    pattern_data = Column(Text, nullable=False)         # JSON: 패턴 형태
    usage_count = Column(Integer, nullable=False, default=1)
    sample_size = Column(Integer, nullable=False, default=0)
    evidence_key = Column(String(64), nullable=True)    # 마지막 반영 샘플 지문
    example_post_ids = Column(Text, nullable=True)      # JSON: 근거 글 id 목록
    created_at = Column(DateTime, default=datetime.utcnow)
    last_updated_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<LearnedPattern {self.pattern_type} ({self.seo_platform or 'all'}): x{self.usage_count}>"

    def to_record(self) -> PatternRecord:
        return PatternRecord(
            pattern_data=parse_pattern_data(json.loads(self.pattern_data)),
            platform_scope=self.seo_platform,
            usage_count=self.usage_count,
            sample_size=self.sample_size or 0,
            evidence_key=self.evidence_key,
            example_document_ids=tuple(json.loads(self.example_post_ids or "[]")),
            id=self.id,
        )

    def apply(self, record: PatternRecord):
        """Copy record fields onto this row."""
        self.pattern_type = record.pattern_type.value
        self.seo_platform = record.platform_scope
        self.pattern_data = json.dumps(record.pattern_data.model_dump(mode="json"), ensure_ascii=False)
        self.usage_count = record.usage_count
        self.sample_size = record.sample_size
        self.evidence_key = record.evidence_key
        self.example_post_ids = json.dumps(list(record.example_document_ids), ensure_ascii=False)
        self.last_updated_at = datetime.utcnow()
