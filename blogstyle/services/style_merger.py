"""Merge per-document style profiles into one representative guidance object.

Convention: profiles are supplied oldest-first, so the last profile is the most
recent one. Categorical ties go to the value whose latest occurrence is most
recent; numeric fields are plain means and do not depend on order.
"""

import copy
import logging
import math
from collections import Counter
from typing import Iterable, Optional, TypeVar

from blogstyle.config import StyleThresholds, DEFAULT_THRESHOLDS
from blogstyle.errors import InputError
from blogstyle.models.style_profile import (
    DetectedEndings,
    EmojiUsage,
    EndingSamples,
    EndingStyle,
    EngagementStyle,
    HeadingStyle,
    KoreanPatterns,
    MergedStyleGuidance,
    StructurePreferences,
    StyleProfile,
    UsageContext,
)
from blogstyle.services.korean_endings import dominant_ending

logger = logging.getLogger(__name__)

T = TypeVar("T")


def mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def plurality(values: list[T]) -> T:
    """Most frequent value; ties go to the most recently supplied one."""
    counts = Counter(values)
    last_seen = {value: index for index, value in enumerate(values)}
    return max(counts, key=lambda value: (counts[value], last_seen[value]))


def ranked_union(lists: Iterable[list[str]], limit: Optional[int] = None) -> list[str]:
    """Union of lists ranked by how many lists contain each item (first seen wins ties)."""
    counts = Counter()
    first_seen = {}
    for items in lists:
        for item in dict.fromkeys(items):
            counts[item] += 1
            first_seen.setdefault(item, len(first_seen))
    ranked = sorted(counts, key=lambda item: (-counts[item], first_seen[item]))
    return ranked[:limit] if limit is not None else ranked


class StyleMerger:
    """StyleProfile[] → MergedStyleGuidance."""

    def __init__(self, thresholds: StyleThresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    def merge(self, profiles: list[StyleProfile]) -> MergedStyleGuidance:
        profiles = list(profiles)
        if not profiles:
            raise InputError("merge() requires at least one profile")
        for profile in profiles:
            if not isinstance(profile, StyleProfile):
                raise InputError(f"merge() expects StyleProfile, got {type(profile).__name__}")

        korean = [p.korean_patterns for p in profiles if p.korean_patterns is not None]

        if len(profiles) == 1:
            return MergedStyleGuidance(
                style=copy.deepcopy(profiles[0]),
                sample_size=1,
                korean_sample_size=len(korean),
            )

        style = StyleProfile(
            tone=plurality([p.tone for p in profiles]),
            complexity=plurality([p.complexity for p in profiles]),
            perspective=plurality([p.perspective for p in profiles]),
            average_sentence_length=mean(p.average_sentence_length for p in profiles),
            vocabulary=plurality([p.vocabulary for p in profiles]),
            emoji_usage=self.merge_emoji_usage([p.emoji_usage for p in profiles]),
            korean_patterns=self.merge_korean_patterns(korean),
            heading_style=self.merge_heading_style([p.heading_style for p in profiles]),
            engagement_style=self.merge_engagement_style([p.engagement_style for p in profiles]),
            structure_preferences=self.merge_structure([p.structure_preferences for p in profiles]),
            common_phrases=ranked_union(
                (p.common_phrases for p in profiles), self.thresholds.merged_phrase_limit
            ),
        )
        logger.debug("Merged %d profiles (%d with Korean patterns)", len(profiles), len(korean))
        return MergedStyleGuidance(style=style, sample_size=len(profiles), korean_sample_size=len(korean))

    def merge_emoji_usage(self, usages: list[EmojiUsage]) -> EmojiUsage:
        return EmojiUsage(
            frequency=plurality([u.frequency for u in usages]),
            common_emojis=ranked_union((u.common_emojis for u in usages), self.thresholds.top_emoji_limit),
        )

    def merge_korean_patterns(self, patterns: list[KoreanPatterns]) -> Optional[KoreanPatterns]:
        """Only profiles with Korean content count toward these means."""
        if not patterns:
            return None

        formal_ratio = mean(k.ending_style.formal_ratio for k in patterns)
        conversational_ratio = mean(k.ending_style.conversational_ratio for k in patterns)
        limit = self.thresholds.top_ending_examples

        return KoreanPatterns(
            ending_style=EndingStyle(
                formal_ratio=formal_ratio,
                conversational_ratio=conversational_ratio,
                dominant_ending=dominant_ending(formal_ratio, conversational_ratio, self.thresholds.dominance),
            ),
            usage_context=UsageContext(
                formal_contexts=ranked_union(k.usage_context.formal_contexts for k in patterns),
                conversational_contexts=ranked_union(k.usage_context.conversational_contexts for k in patterns),
            ),
            detected_endings=DetectedEndings(
                formal=EndingSamples(
                    count=sum(k.detected_endings.formal.count for k in patterns),
                    examples=ranked_union((k.detected_endings.formal.examples for k in patterns), limit),
                ),
                conversational=EndingSamples(
                    count=sum(k.detected_endings.conversational.count for k in patterns),
                    examples=ranked_union((k.detected_endings.conversational.examples for k in patterns), limit),
                ),
            ),
            uses_jondaemal=formal_ratio > self.thresholds.legacy_flag,
            uses_gueo_chae=conversational_ratio > self.thresholds.legacy_flag,
            has_empathy=plurality([k.has_empathy for k in patterns]),
            common_korean_phrases=ranked_union(
                (k.common_korean_phrases for k in patterns), self.thresholds.merged_korean_phrase_limit
            ),
        )

    def merge_heading_style(self, styles: list[HeadingStyle]) -> HeadingStyle:
        return HeadingStyle(
            uses_numbers=plurality([h.uses_numbers for h in styles]),
            uses_emojis_in_headings=plurality([h.uses_emojis_in_headings for h in styles]),
            average_heading_length=round(mean(h.average_heading_length for h in styles)),
        )

    def merge_engagement_style(self, styles: list[EngagementStyle]) -> EngagementStyle:
        has_cta = plurality([e.has_cta for e in styles])
        cta_types = [e.cta_type for e in styles if e.cta_type is not None]
        return EngagementStyle(
            questions_per_section=mean(e.questions_per_section for e in styles),
            has_cta=has_cta,
            cta_type=plurality(cta_types) if has_cta and cta_types else None,
        )

    def merge_structure(self, structures: list[StructurePreferences]) -> StructurePreferences:
        return StructurePreferences(
            average_paragraph_length=mean(s.average_paragraph_length for s in structures),
            uses_bullet_points=plurality([s.uses_bullet_points for s in structures]),
            uses_numbered_lists=plurality([s.uses_numbered_lists for s in structures]),
            has_intro_greeting=plurality([s.has_intro_greeting for s in structures]),
            has_closing_remarks=plurality([s.has_closing_remarks for s in structures]),
        )


def merge_profiles(profiles: list[StyleProfile], thresholds: StyleThresholds = DEFAULT_THRESHOLDS) -> MergedStyleGuidance:
    return StyleMerger(thresholds).merge(profiles)
