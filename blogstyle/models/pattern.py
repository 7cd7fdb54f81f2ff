"""Learned pattern shapes.

Each pattern category carries its own typed payload; the payloads form a
discriminated union keyed by ``pattern_type`` so stored JSON round-trips into
the right class and consumers can match on the five categories exhaustively.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from blogstyle.config import StyleThresholds, DEFAULT_THRESHOLDS
from blogstyle.errors import InputError
from blogstyle.models.style_profile import CtaType, DominantEnding, EmojiFrequency


class PatternType(str, Enum):
    KOREAN_ENDING_MIX = "korean_ending_mix"
    HEADING_STRUCTURE = "heading_structure"
    EMOJI_USAGE = "emoji_usage"
    PARAGRAPH_LENGTH = "paragraph_length"
    ENGAGEMENT_STYLE = "engagement_style"


def _close(a: float, b: float, epsilon: float) -> bool:
    return abs(a - b) <= epsilon + 1e-9


class PatternShape(BaseModel, ABC):
    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def matches(self, other: "PatternShape", thresholds: StyleThresholds = DEFAULT_THRESHOLDS) -> bool:
        """True when other describes the same style shape within tolerance."""


class KoreanEndingMixPattern(PatternShape):
    pattern_type: Literal["korean_ending_mix"] = "korean_ending_mix"
    formal_ratio: float = Field(ge=0.0, le=1.0)
    conversational_ratio: float = Field(ge=0.0, le=1.0)
    dominant_ending: DominantEnding
    formal_contexts: list[str] = Field(default_factory=list)
    conversational_contexts: list[str] = Field(default_factory=list)

    def matches(self, other, thresholds=DEFAULT_THRESHOLDS):
        if not isinstance(other, KoreanEndingMixPattern):
            return False
        eps = thresholds.ratio_epsilon
        return (
            _close(self.formal_ratio, other.formal_ratio, eps)
            and _close(self.conversational_ratio, other.conversational_ratio, eps)
            and self.dominant_ending == other.dominant_ending
            and set(self.formal_contexts) == set(other.formal_contexts)
            and set(self.conversational_contexts) == set(other.conversational_contexts)
        )


class HeadingStructurePattern(PatternShape):
    pattern_type: Literal["heading_structure"] = "heading_structure"
    uses_numbers: bool
    uses_emojis: bool
    average_heading_length: int = Field(ge=0)

    def matches(self, other, thresholds=DEFAULT_THRESHOLDS):
        if not isinstance(other, HeadingStructurePattern):
            return False
        return (
            self.uses_numbers == other.uses_numbers
            and self.uses_emojis == other.uses_emojis
            and _close(self.average_heading_length, other.average_heading_length, thresholds.length_epsilon)
        )


class EmojiUsagePattern(PatternShape):
    pattern_type: Literal["emoji_usage"] = "emoji_usage"
    frequency: EmojiFrequency
    common_emojis: list[str] = Field(default_factory=list)

    def matches(self, other, thresholds=DEFAULT_THRESHOLDS):
        if not isinstance(other, EmojiUsagePattern):
            return False
        return self.frequency == other.frequency and set(self.common_emojis) == set(other.common_emojis)


class ParagraphLengthPattern(PatternShape):
    pattern_type: Literal["paragraph_length"] = "paragraph_length"
    average_paragraph_length: float = Field(ge=0.0)
    average_sentence_length: float = Field(ge=0.0)

    def matches(self, other, thresholds=DEFAULT_THRESHOLDS):
        if not isinstance(other, ParagraphLengthPattern):
            return False
        eps = thresholds.length_epsilon
        return (
            _close(self.average_paragraph_length, other.average_paragraph_length, eps)
            and _close(self.average_sentence_length, other.average_sentence_length, eps)
        )


class EngagementStylePattern(PatternShape):
    pattern_type: Literal["engagement_style"] = "engagement_style"
    questions_per_section: float = Field(ge=0.0)
    uses_cta: bool
    cta_type: Optional[CtaType] = None

    def matches(self, other, thresholds=DEFAULT_THRESHOLDS):
        if not isinstance(other, EngagementStylePattern):
            return False
        return (
            _close(self.questions_per_section, other.questions_per_section, thresholds.ratio_epsilon)
            and self.uses_cta == other.uses_cta
            and self.cta_type == other.cta_type
        )


PatternData = Annotated[
    Union[
        KoreanEndingMixPattern,
        HeadingStructurePattern,
        EmojiUsagePattern,
        ParagraphLengthPattern,
        EngagementStylePattern,
    ],
    Field(discriminator="pattern_type"),
]

_pattern_data_adapter = TypeAdapter(PatternData)


def parse_pattern_data(data: dict) -> PatternShape:
    """Stored JSON payload → typed pattern shape."""
    try:
        return _pattern_data_adapter.validate_python(data)
    except ValidationError as e:
        raise InputError(f"Invalid pattern data: {e}") from e


@dataclass(frozen=True)
class PatternRecord:
    """A learned style pattern for one (pattern_type, platform_scope) group.

    usage_count counts reconciliations of this shape, not documents;
    sample_size is the document count of the extraction pass that last
    touched the record, evidence_key fingerprints that pass's profiles and
    example_document_ids lists the documents behind it.
    """

    pattern_data: PatternShape
    platform_scope: Optional[str] = None
    usage_count: int = 1
    sample_size: int = 0
    evidence_key: Optional[str] = None
    example_document_ids: tuple[str, ...] = ()
    id: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "example_document_ids", tuple(self.example_document_ids))
        if not all(isinstance(i, str) for i in self.example_document_ids):
            raise InputError("example_document_ids must be strings")
        if not isinstance(self.pattern_data, PatternShape):
            raise InputError(f"pattern_data must be a PatternShape, got {type(self.pattern_data).__name__}")
        if self.usage_count < 1:
            raise InputError(f"usage_count must be >= 1, got {self.usage_count}")

    @property
    def pattern_type(self) -> PatternType:
        return PatternType(self.pattern_data.pattern_type)

    @property
    def group_key(self) -> tuple[PatternType, Optional[str]]:
        return self.pattern_type, self.platform_scope

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pattern_type": self.pattern_type.value,
            "platform_scope": self.platform_scope,
            "pattern_data": self.pattern_data.model_dump(mode="json"),
            "usage_count": self.usage_count,
            "sample_size": self.sample_size,
            "evidence_key": self.evidence_key,
            "example_document_ids": list(self.example_document_ids),
        }
