"""GenerationGuidance: merged writing style + learned patterns, assembled once for prompt building.

Documents → StyleAnalyzer (parallel) → StyleMerger → GenerationGuidance → prompt assembly
                          └──────────→ PatternExtractor → PatternStore (learn)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Optional

from blogstyle.config import ANALYSIS_WORKERS, StyleThresholds, DEFAULT_THRESHOLDS
from blogstyle.errors import InputError
from blogstyle.models.document import Document
from blogstyle.models.pattern import PatternRecord
from blogstyle.models.style_profile import EmojiFrequency, MergedStyleGuidance, StyleProfile, Tone
from blogstyle.services.pattern_extractor import PatternExtractor
from blogstyle.services.pattern_store import PatternStore, upsert_patterns
from blogstyle.services.style_analyzer import StyleAnalyzer
from blogstyle.services.style_merger import StyleMerger

logger = logging.getLogger(__name__)

PATTERN_LABELS = {
    "korean_ending_mix": "종결어미 혼용",
    "heading_structure": "소제목 구조",
    "emoji_usage": "이모지 사용",
    "paragraph_length": "문단 길이",
    "engagement_style": "독자 참여",
}


def _quoted(items: list[str]) -> str:
    return ", ".join(f'"{item}"' for item in items)


@dataclass
class GenerationGuidance:
    """Style guidance handed to prompt assembly."""

    merged_style: MergedStyleGuidance
    patterns: list[PatternRecord] = field(default_factory=list)
    platform: Optional[str] = None

    @property
    def sample_size(self) -> int:
        return self.merged_style.sample_size

    def to_dict(self) -> dict:
        return {
            "merged_style": self.merged_style.to_dict(),
            "patterns": [p.to_dict() for p in self.patterns],
            "platform": self.platform,
        }

    def describe_style(self) -> str:
        """Merged style as descriptive bullet lines (not JSON)."""
        style = self.merged_style.style
        lines = [
            f"- 어조: {style.tone.value}, 시점: {style.perspective.value}, "
            f"난이도: {style.complexity.value} (문장당 평균 {style.average_sentence_length:.0f} 단어)",
            f"- 어휘 수준: {style.vocabulary.value}",
        ]

        emoji = style.emoji_usage
        emoji_line = f"- 이모지: {emoji.frequency.value}"
        if emoji.common_emojis:
            emoji_line += f" (자주 쓰는 이모지: {' '.join(emoji.common_emojis)})"
        lines.append(emoji_line)

        korean = style.korean_patterns
        if korean is not None:
            ending = korean.ending_style
            lines.append(
                f"- 종결어미: 문어체 {ending.formal_ratio:.0%} / 구어체 {ending.conversational_ratio:.0%} "
                f"({ending.dominant_ending.value})"
            )
            contexts = korean.usage_context
            if contexts.formal_contexts:
                lines.append(f"  - 문어체(~다) 사용 맥락: {', '.join(contexts.formal_contexts)}")
            if contexts.conversational_contexts:
                lines.append(f"  - 구어체(~요) 사용 맥락: {', '.join(contexts.conversational_contexts)}")
            if korean.has_empathy:
                lines.append("  - 공감 표현 사용 (그쵸?, 맞죠?)")
            if korean.common_korean_phrases:
                lines.append(f"  - 자주 쓰는 표현: {_quoted(korean.common_korean_phrases[:5])}")

        heading = style.heading_style
        heading_features = []
        if heading.uses_numbers:
            heading_features.append("번호 매김 (1. 2. 3.)")
        if heading.uses_emojis_in_headings:
            heading_features.append("소제목에 이모지")
        heading_features.append(f"평균 {heading.average_heading_length}자")
        lines.append(f"- 소제목: {', '.join(heading_features)}")

        engagement = style.engagement_style
        engagement_line = f"- 독자 참여: 섹션당 질문 {engagement.questions_per_section:.1f}개"
        if engagement.has_cta and engagement.cta_type is not None:
            engagement_line += f", {engagement.cta_type.value} CTA 사용"
        lines.append(engagement_line)

        structure = style.structure_preferences
        structure_parts = [f"문단당 {structure.average_paragraph_length:.1f}문장"]
        if structure.uses_bullet_points:
            structure_parts.append("글머리 기호 목록")
        if structure.uses_numbered_lists:
            structure_parts.append("번호 목록")
        if structure.has_intro_greeting:
            structure_parts.append("인사로 시작")
        if structure.has_closing_remarks:
            structure_parts.append("마무리 인사")
        lines.append(f"- 구조: {', '.join(structure_parts)}")

        if style.common_phrases:
            lines.append(f"- 반복 표현: {_quoted(style.common_phrases[:5])}")

        return "\n".join(lines)

    def describe_patterns(self) -> str:
        lines = []
        for record in self.patterns:
            data = record.pattern_data.model_dump(mode="json", exclude={"pattern_type"})
            details = ", ".join(f"{key}={value}" for key, value in data.items())
            label = PATTERN_LABELS.get(record.pattern_type.value, record.pattern_type.value)
            scope = record.platform_scope or "전체"
            lines.append(f"- {label} ({scope}, {record.usage_count}회 확인): {details}")
        return "\n".join(lines)

    def platform_guidance(self) -> str:
        """플랫폼별 조정 (naver / google)"""
        style = self.merged_style.style
        if self.platform == "naver":
            lines = [
                "- 원래 문체가 문어체여도 구어체(~요)를 섞어 친근하게 작성",
                "- 이모지 적극 사용" if style.emoji_usage.frequency is EmojiFrequency.HEAVY
                else "- 섹션마다 이모지 3~5개",
                "- 인사(안녕하세요)로 시작하고 댓글 유도 CTA로 마무리",
            ]
            if style.heading_style.uses_numbers:
                lines.append("- 번호 + 이모지 소제목 사용")
            return "\n".join(lines)
        if self.platform == "google":
            return "\n".join([
                "- 전문적이지만 대화하는 듯한 어조" if style.tone is not Tone.FORMAL
                else "- 격식 있는 어조 유지 (사용자 문체와 일치)",
                "- 수사적 질문과 부드러운 CTA 사용",
                "- 명확한 마크다운 소제목 구조",
            ])
        return ""

    def to_prompt_section(self) -> str:
        """Prompt block for the writer step."""
        size = self.merged_style.sample_size
        if size == 0:
            header = "## 문체 가이드 (샘플 없음: 기본 스타일)"
        else:
            header = f"## 문체 가이드 (내 글 {size}편 분석)"
        sections = [f"{header}\n{self.describe_style()}"]

        if self.patterns:
            sections.append(f"## 학습된 스타일 패턴\n{self.describe_patterns()}")

        platform_text = self.platform_guidance()
        if platform_text:
            sections.append(f"## 플랫폼 조정 ({self.platform})\n{platform_text}")

        return "\n\n".join(sections)


class GenerationGuidanceBuilder:
    """Documents (+ pattern store) → GenerationGuidance."""

    def __init__(
        self,
        pattern_store: Optional[PatternStore] = None,
        thresholds: StyleThresholds = DEFAULT_THRESHOLDS,
        max_workers: int = ANALYSIS_WORKERS,
    ):
        self.pattern_store = pattern_store
        self.thresholds = thresholds
        self.max_workers = max_workers
        self.analyzer = StyleAnalyzer(thresholds)
        self.merger = StyleMerger(thresholds)
        self.extractor = PatternExtractor(thresholds, self.merger)

    def analyze_documents(self, documents: Iterable[Document]) -> list[StyleProfile]:
        """Profiles in input order."""
        documents = self._validate(documents)
        if len(documents) <= 1 or self.max_workers <= 1:
            return [self.analyzer.analyze_document(d) for d in documents]
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self.analyzer.analyze_document, documents))

    def build_guidance(
        self,
        documents: Iterable[Document],
        platform: Optional[str] = None,
        learn: bool = False,
    ) -> GenerationGuidance:
        """Analyze → merge → (learn) → attach learned patterns.

        documents are expected oldest-first; the newest one breaks
        categorical ties in the merge. With no documents the guidance carries
        the default style and sample_size 0.
        """
        documents = self._validate(documents)
        profiles = self.analyze_documents(documents)

        if profiles:
            merged = self.merger.merge(profiles)
        else:
            merged = MergedStyleGuidance(style=StyleProfile.generation_default(), sample_size=0)

        candidates = self.extractor.extract(self._observations(documents, profiles, platform))

        if self.pattern_store is not None:
            if learn:
                upsert_patterns(self.pattern_store, candidates)
            patterns = self.pattern_store.get_patterns(platform=platform)
        else:
            patterns = [
                c for c in candidates
                if platform is None or c.platform_scope in (platform, None)
            ]

        logger.info(
            "Built guidance from %d documents, %d patterns (platform=%s)",
            merged.sample_size, len(patterns), platform or "all",
        )
        return GenerationGuidance(merged_style=merged, patterns=patterns, platform=platform)

    def learn_patterns(self, documents: Iterable[Document], platform: Optional[str] = None) -> list[PatternRecord]:
        """Feed accepted documents back into the pattern store; returns stored records."""
        if self.pattern_store is None:
            raise InputError("learn_patterns() requires a pattern store")
        documents = self._validate(documents)
        profiles = self.analyze_documents(documents)
        candidates = self.extractor.extract(self._observations(documents, profiles, platform))
        return upsert_patterns(self.pattern_store, candidates)

    @staticmethod
    def _observations(documents: list[Document], profiles: list[StyleProfile], platform: Optional[str]):
        return [
            (profile, document.platform or platform, document.id)
            for document, profile in zip(documents, profiles)
        ]

    @staticmethod
    def _validate(documents) -> list[Document]:
        if isinstance(documents, (str, bytes)) or documents is None:
            raise InputError("documents must be an iterable of Document")
        documents = list(documents)
        for document in documents:
            if not isinstance(document, Document):
                raise InputError(f"Expected Document, got {type(document).__name__}")
        return documents
