"""Style profile shapes produced by StyleAnalyzer and StyleMerger."""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional


class Tone(str, Enum):
    FORMAL = "formal"
    CASUAL = "casual"
    CONVERSATIONAL = "conversational"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    ADVANCED = "advanced"


class Perspective(str, Enum):
    FIRST_PERSON = "first-person"
    SECOND_PERSON = "second-person"
    THIRD_PERSON = "third-person"


class Vocabulary(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class EmojiFrequency(str, Enum):
    NONE = "none"
    RARE = "rare"
    MODERATE = "moderate"
    HEAVY = "heavy"


class DominantEnding(str, Enum):
    FORMAL = "formal"
    CONVERSATIONAL = "conversational"
    MIXED = "mixed"


class CtaType(str, Enum):
    COMMENT = "comment"
    SHARE = "share"
    SUBSCRIBE = "subscribe"
    QUESTION = "question"


# 종결어미 사용 맥락 태그 (정해진 순서 유지)
FORMAL_CONTEXTS = ("definitions", "explanations", "main_points")
CONVERSATIONAL_CONTEXTS = ("examples", "reassurance", "questions")


@dataclass
class EmojiUsage:
    frequency: EmojiFrequency = EmojiFrequency.NONE
    common_emojis: list[str] = field(default_factory=list)   # 최대 5개, 빈도순


@dataclass
class EndingStyle:
    """formal_ratio + conversational_ratio <= 1 (나머지는 미분류 문장)."""
    formal_ratio: float = 0.0
    conversational_ratio: float = 0.0
    dominant_ending: DominantEnding = DominantEnding.MIXED


@dataclass
class UsageContext:
    formal_contexts: list[str] = field(default_factory=list)
    conversational_contexts: list[str] = field(default_factory=list)


@dataclass
class EndingSamples:
    count: int = 0
    examples: list[str] = field(default_factory=list)


@dataclass
class DetectedEndings:
    formal: EndingSamples = field(default_factory=EndingSamples)
    conversational: EndingSamples = field(default_factory=EndingSamples)


@dataclass
class KoreanPatterns:
    """한국어 종결어미 분석 결과 (한글 문장이 있을 때만 생성)."""
    ending_style: EndingStyle = field(default_factory=EndingStyle)
    usage_context: UsageContext = field(default_factory=UsageContext)
    detected_endings: DetectedEndings = field(default_factory=DetectedEndings)
    # 하위 호환 플래그
    uses_jondaemal: bool = False    # 존댓말/문어체 비율 > 0.2
    uses_gueo_chae: bool = False    # 구어체 비율 > 0.2
    has_empathy: bool = False       # 공감 표현 (그쵸, 맞죠 ...)
    common_korean_phrases: list[str] = field(default_factory=list)


@dataclass
class HeadingStyle:
    uses_numbers: bool = False
    uses_emojis_in_headings: bool = False
    average_heading_length: int = 0


@dataclass
class EngagementStyle:
    questions_per_section: float = 0.0
    has_cta: bool = False
    cta_type: Optional[CtaType] = None


@dataclass
class StructurePreferences:
    average_paragraph_length: float = 0.0   # 문단당 문장 수
    uses_bullet_points: bool = False
    uses_numbered_lists: bool = False
    has_intro_greeting: bool = False
    has_closing_remarks: bool = False


@dataclass
class StyleProfile:
    """Analysis result for one document. Defaults are the empty-text profile."""

    tone: Tone = Tone.CASUAL
    complexity: Complexity = Complexity.SIMPLE
    perspective: Perspective = Perspective.THIRD_PERSON
    average_sentence_length: float = 0.0
    vocabulary: Vocabulary = Vocabulary.INTERMEDIATE
    emoji_usage: EmojiUsage = field(default_factory=EmojiUsage)
    korean_patterns: Optional[KoreanPatterns] = None
    heading_style: HeadingStyle = field(default_factory=HeadingStyle)
    engagement_style: EngagementStyle = field(default_factory=EngagementStyle)
    structure_preferences: StructurePreferences = field(default_factory=StructurePreferences)
    common_phrases: list[str] = field(default_factory=list)

    @classmethod
    def generation_default(cls) -> "StyleProfile":
        """Fallback style used when no sample documents exist."""
        return cls(
            tone=Tone.CONVERSATIONAL,
            complexity=Complexity.MEDIUM,
            perspective=Perspective.SECOND_PERSON,
            average_sentence_length=15.0,
            vocabulary=Vocabulary.INTERMEDIATE,
        )

    def to_dict(self) -> dict:
        """Plain JSON-ready dict (enums as their string values)."""
        return _plain(asdict(self))


@dataclass
class MergedStyleGuidance:
    """Representative style across sample_size profiles.

    korean_sample_size counts only the profiles that carried Korean patterns;
    sample_size == 0 means no documents were available and style is the
    generation default.
    """

    style: StyleProfile
    sample_size: int
    korean_sample_size: int = 0

    @property
    def is_default(self) -> bool:
        return self.sample_size == 0

    def to_dict(self) -> dict:
        return {
            "style": self.style.to_dict(),
            "sample_size": self.sample_size,
            "korean_sample_size": self.korean_sample_size,
        }


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
