"""Domain and database models."""

from blogstyle.models.document import Document
from blogstyle.models.learned_pattern import LearnedPattern
from blogstyle.models.pattern import (
    PatternRecord,
    PatternType,
    KoreanEndingMixPattern,
    HeadingStructurePattern,
    EmojiUsagePattern,
    ParagraphLengthPattern,
    EngagementStylePattern,
)
from blogstyle.models.style_profile import StyleProfile, MergedStyleGuidance

__all__ = [
    "Document",
    "LearnedPattern",
    "PatternRecord",
    "PatternType",
    "KoreanEndingMixPattern",
    "HeadingStructurePattern",
    "EmojiUsagePattern",
    "ParagraphLengthPattern",
    "EngagementStylePattern",
    "StyleProfile",
    "MergedStyleGuidance",
]
