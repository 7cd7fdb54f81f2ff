"""패턴 추출: 누적된 스타일 프로필에서 반복되는 스타일 패턴 학습"""

import hashlib
import json
import logging
from dataclasses import replace
from typing import Iterable, Optional

from blogstyle.config import StyleThresholds, DEFAULT_THRESHOLDS
from blogstyle.errors import InputError
from blogstyle.models.pattern import (
    EmojiUsagePattern,
    EngagementStylePattern,
    HeadingStructurePattern,
    KoreanEndingMixPattern,
    ParagraphLengthPattern,
    PatternRecord,
    PatternShape,
    PatternType,
)
from blogstyle.models.style_profile import StyleProfile
from blogstyle.services.style_merger import StyleMerger

logger = logging.getLogger(__name__)

# (profile, platform) or (profile, platform, document_id)
Observation = tuple[StyleProfile, Optional[str], Optional[str]]


def derive_shape(pattern_type: PatternType, style: StyleProfile) -> PatternShape:
    """Project the pattern-relevant sub-fields of a merged style."""
    if pattern_type is PatternType.KOREAN_ENDING_MIX:
        korean = style.korean_patterns
        if korean is None:
            raise InputError("korean_ending_mix needs a style with Korean patterns")
        return KoreanEndingMixPattern(
            formal_ratio=korean.ending_style.formal_ratio,
            conversational_ratio=korean.ending_style.conversational_ratio,
            dominant_ending=korean.ending_style.dominant_ending,
            formal_contexts=list(korean.usage_context.formal_contexts),
            conversational_contexts=list(korean.usage_context.conversational_contexts),
        )
    if pattern_type is PatternType.HEADING_STRUCTURE:
        return HeadingStructurePattern(
            uses_numbers=style.heading_style.uses_numbers,
            uses_emojis=style.heading_style.uses_emojis_in_headings,
            average_heading_length=style.heading_style.average_heading_length,
        )
    if pattern_type is PatternType.EMOJI_USAGE:
        return EmojiUsagePattern(
            frequency=style.emoji_usage.frequency,
            common_emojis=list(style.emoji_usage.common_emojis),
        )
    if pattern_type is PatternType.PARAGRAPH_LENGTH:
        return ParagraphLengthPattern(
            average_paragraph_length=round(style.structure_preferences.average_paragraph_length, 1),
            average_sentence_length=round(style.average_sentence_length, 1),
        )
    if pattern_type is PatternType.ENGAGEMENT_STYLE:
        return EngagementStylePattern(
            questions_per_section=round(style.engagement_style.questions_per_section, 1),
            uses_cta=style.engagement_style.has_cta,
            cta_type=style.engagement_style.cta_type,
        )
    raise InputError(f"Unknown pattern type: {pattern_type!r}")


def evidence_key(pattern_type: PatternType, platform: Optional[str], profiles: list[StyleProfile]) -> str:
    """Order-independent fingerprint of the profiles behind one extraction."""
    serialized = sorted(
        json.dumps(p.to_dict(), sort_keys=True, ensure_ascii=False) for p in profiles
    )
    payload = json.dumps([pattern_type.value, platform, serialized], ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class PatternExtractor:
    """(StyleProfile, platform[, document_id]) 목록 → PatternRecord 후보, 기존 패턴과 병합"""

    def __init__(self, thresholds: StyleThresholds = DEFAULT_THRESHOLDS, merger: Optional[StyleMerger] = None):
        self.thresholds = thresholds
        self.merger = merger or StyleMerger(thresholds)

    def extract(self, observations: Iterable[Observation]) -> list[PatternRecord]:
        """Derive one candidate record per (pattern_type, platform) group.

        Groups with fewer than min_pattern_sample contributing profiles are
        skipped; that is a normal outcome, not an error. Each record lists
        the ids of the documents that contributed to it, in input order.
        """
        groups: dict[Optional[str], list[tuple[StyleProfile, Optional[str]]]] = {}
        for observation in observations:
            profile, platform, document_id = self._validate(observation)
            groups.setdefault(platform, []).append((profile, document_id))

        records = []
        for platform, observed in groups.items():
            for pattern_type in PatternType:
                contributing = [
                    (profile, document_id) for profile, document_id in observed
                    if self._contributes(pattern_type, profile)
                ]
                if len(contributing) < self.thresholds.min_pattern_sample:
                    logger.debug(
                        "Skipping %s (%s): %d samples",
                        pattern_type.value, platform or "all", len(contributing),
                    )
                    continue

                profiles = [profile for profile, _ in contributing]
                merged = self.merger.merge(profiles)
                records.append(PatternRecord(
                    pattern_data=derive_shape(pattern_type, merged.style),
                    platform_scope=platform,
                    usage_count=1,
                    sample_size=len(profiles),
                    evidence_key=evidence_key(pattern_type, platform, profiles),
                    example_document_ids=tuple(d for _, d in contributing if d is not None),
                ))
        return records

    def reconcile_one(
        self, new_pattern: PatternRecord, existing: Iterable[PatternRecord]
    ) -> Optional[PatternRecord]:
        """Return the record to write for new_pattern, or None when nothing changes.

        - same evidence already applied to this group → None
        - a record in the group matches the shape → that record, usage_count + 1
        - otherwise → new record with usage_count = 1
        """
        _, updated = self._match(new_pattern, list(existing))
        return updated

    def reconcile(self, new_pattern: PatternRecord, existing: Iterable[PatternRecord]) -> list[PatternRecord]:
        """Upsert new_pattern into existing and return the resulting list."""
        records = list(existing)
        index, updated = self._match(new_pattern, records)
        if updated is None:
            return records

        if index is None:
            records.append(updated)
            logger.info("Created new pattern: %s (%s)", *self._label(updated))
        else:
            records[index] = updated
            logger.info("Updated pattern: %s (%s) x%d", *self._label(updated), updated.usage_count)
        return records

    def _match(
        self, new_pattern: PatternRecord, records: list[PatternRecord]
    ) -> tuple[Optional[int], Optional[PatternRecord]]:
        group = [(i, r) for i, r in enumerate(records) if r.group_key == new_pattern.group_key]

        if new_pattern.evidence_key and any(r.evidence_key == new_pattern.evidence_key for _, r in group):
            logger.debug("Pattern %s (%s) already reconciled", *self._label(new_pattern))
            return None, None

        for index, record in group:
            if record.pattern_data.matches(new_pattern.pattern_data, self.thresholds):
                return index, replace(
                    record,
                    pattern_data=new_pattern.pattern_data,
                    usage_count=record.usage_count + 1,
                    sample_size=new_pattern.sample_size,
                    evidence_key=new_pattern.evidence_key,
                    example_document_ids=new_pattern.example_document_ids,
                )

        return None, replace(new_pattern, usage_count=1, id=None)

    @staticmethod
    def _contributes(pattern_type: PatternType, profile: StyleProfile) -> bool:
        if pattern_type is PatternType.KOREAN_ENDING_MIX:
            return profile.korean_patterns is not None
        return True

    @staticmethod
    def _validate(observation) -> Observation:
        try:
            profile, platform, *rest = observation
        except (TypeError, ValueError) as e:
            raise InputError(f"Expected (StyleProfile, platform) pair, got {observation!r}") from e
        if len(rest) > 1:
            raise InputError(f"Expected at most (StyleProfile, platform, document_id), got {observation!r}")
        document_id = rest[0] if rest else None
        if not isinstance(profile, StyleProfile):
            raise InputError(f"Expected StyleProfile, got {type(profile).__name__}")
        if platform is not None and not isinstance(platform, str):
            raise InputError(f"platform must be str or None, got {type(platform).__name__}")
        if document_id is not None and not isinstance(document_id, str):
            raise InputError(f"document_id must be str or None, got {type(document_id).__name__}")
        return profile, platform, document_id

    @staticmethod
    def _label(record: PatternRecord) -> tuple[str, str]:
        return record.pattern_type.value, record.platform_scope or "all"
