"""Style analyzer: deterministic writing-style profile from raw post text.

Every heuristic is a standalone function so it can be tuned or tested on its
own; StyleAnalyzer only wires them together. Nothing here raises for odd
content: sub-analyses fall back to zero/neutral values instead.
"""

import logging
import re
from collections import Counter

from blogstyle.config import StyleThresholds, DEFAULT_THRESHOLDS
from blogstyle.errors import InputError
from blogstyle.models.document import Document
from blogstyle.models.style_profile import (
    Complexity,
    CtaType,
    EmojiFrequency,
    EmojiUsage,
    EngagementStyle,
    HeadingStyle,
    Perspective,
    StructurePreferences,
    StyleProfile,
    Tone,
    Vocabulary,
)
from blogstyle.services.korean_endings import analyze_korean_patterns

logger = logging.getLogger(__name__)

SENTENCE_SPLIT = re.compile(r"[.!?。]")

# 인칭
FIRST_PERSON = re.compile(r"\b(I|we|me|us|my|our)\b", re.IGNORECASE)
SECOND_PERSON = re.compile(r"\b(you|your)\b", re.IGNORECASE)
KOREAN_FIRST_PERSON = re.compile(r"(저는|제가|저희|나는|내가)")
KOREAN_SECOND_PERSON = re.compile(r"(여러분|당신)")

# 어조
CASUAL_MARKERS = re.compile(r"\b(hey|cool|awesome|basically|kind of|sort of)\b", re.IGNORECASE)
FORMAL_MARKERS = re.compile(r"\b(furthermore|consequently|nevertheless|therefore)\b", re.IGNORECASE)

EMOJI = re.compile(r"[\U0001F300-\U0001F9FF\u2600-\u26FF\u2700-\u27BF]")

# 제목 판정: 마크다운 헤딩, 번호, 글머리 기호
HEADING = re.compile(r"^(#{1,6}\s|\d+\.\s|[●○■□]\s)")
HEADING_MARKER = re.compile(r"^(#{1,6}|\d+\.|[●○■□])\s+")
NUMBERED_HEADING = re.compile(r"^\d+\.")

QUESTION_MARK = re.compile(r"[?？]")

# CTA 키워드 그룹 (서로 겹치지 않음, 우선순위 순)
CTA_KEYWORDS = [
    (CtaType.COMMENT, re.compile(r"(댓글|코멘트|의견|알려주세요|\bcomments?\b)", re.IGNORECASE)),
    (CtaType.SHARE, re.compile(r"(공유|퍼가|\bshare\b)", re.IGNORECASE)),
    (CtaType.SUBSCRIBE, re.compile(r"(구독|팔로우|이웃추가|\bsubscribe\b|\bfollow\b)", re.IGNORECASE)),
    (CtaType.QUESTION, re.compile(r"(궁금한|질문|물어보|어떠세요|어떤가요|\bany questions\b)", re.IGNORECASE)),
]

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
BULLET_LIST = re.compile(r"^\s*[-*•]\s", re.MULTILINE)
NUMBERED_LIST = re.compile(r"^\s*\d+\.\s", re.MULTILINE)
INTRO_GREETING = re.compile(
    r"\A\s*(?:#{1,6}\s*)?(안녕하세요|여러분|반가워요|반갑습니다|오늘은|hello\b|hi\b|hey\b)",
    re.IGNORECASE,
)
CLOSING_REMARKS = re.compile(
    r"(화이팅|파이팅|궁금한 점|감사합니다|다음에|또\s*만나요|thanks for reading|see you)",
    re.IGNORECASE,
)


def split_sentences(text: str) -> list[str]:
    """Split on . ! ? 。 and drop empty fragments."""
    return [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]


def average_sentence_length(sentences: list[str]) -> float:
    """Mean words per sentence, unrounded."""
    if not sentences:
        return 0.0
    total_words = sum(len(s.split()) for s in sentences)
    return total_words / len(sentences)


def classify_complexity(avg_length: float, thresholds: StyleThresholds = DEFAULT_THRESHOLDS) -> Complexity:
    if avg_length > thresholds.medium_max_words:
        return Complexity.ADVANCED
    if avg_length >= thresholds.simple_max_words:
        return Complexity.MEDIUM
    return Complexity.SIMPLE


def classify_vocabulary(
    avg_length: float, sentence_count: int, thresholds: StyleThresholds = DEFAULT_THRESHOLDS
) -> Vocabulary:
    if sentence_count == 0:
        return Vocabulary.INTERMEDIATE
    if avg_length > thresholds.medium_max_words:
        return Vocabulary.ADVANCED
    if avg_length < thresholds.basic_vocab_max_words:
        return Vocabulary.BASIC
    return Vocabulary.INTERMEDIATE


def detect_perspective(text: str) -> Perspective:
    """2인칭 > 1인칭 > 3인칭"""
    if SECOND_PERSON.search(text) or KOREAN_SECOND_PERSON.search(text):
        return Perspective.SECOND_PERSON
    if FIRST_PERSON.search(text) or KOREAN_FIRST_PERSON.search(text):
        return Perspective.FIRST_PERSON
    return Perspective.THIRD_PERSON


def detect_tone(text: str) -> Tone:
    """casual marker > formal marker > default casual"""
    if CASUAL_MARKERS.search(text):
        return Tone.CONVERSATIONAL
    if FORMAL_MARKERS.search(text):
        return Tone.FORMAL
    return Tone.CASUAL


def emoji_frequency(density: float, thresholds: StyleThresholds = DEFAULT_THRESHOLDS) -> EmojiFrequency:
    """density = emojis per 100 characters"""
    if density <= 0:
        return EmojiFrequency.NONE
    if density < thresholds.emoji_rare_max:
        return EmojiFrequency.RARE
    if density < thresholds.emoji_moderate_max:
        return EmojiFrequency.MODERATE
    return EmojiFrequency.HEAVY


def analyze_emoji_usage(text: str, thresholds: StyleThresholds = DEFAULT_THRESHOLDS) -> EmojiUsage:
    emojis = EMOJI.findall(text)
    if not emojis:
        return EmojiUsage()

    density = len(emojis) / len(text) * 100
    counts = Counter(emojis)
    return EmojiUsage(
        frequency=emoji_frequency(density, thresholds),
        common_emojis=[emoji for emoji, _ in counts.most_common(thresholds.top_emoji_limit)],
    )


def find_headings(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if HEADING.match(line.strip())]


def analyze_heading_style(headings: list[str]) -> HeadingStyle:
    if not headings:
        return HeadingStyle()

    total_length = sum(len(HEADING_MARKER.sub("", h).strip()) for h in headings)
    return HeadingStyle(
        uses_numbers=any(NUMBERED_HEADING.match(h) for h in headings),
        uses_emojis_in_headings=any(EMOJI.search(h) for h in headings),
        average_heading_length=round(total_length / len(headings)),
    )


def detect_cta(text: str):
    """First matching keyword group wins (comment > share > subscribe > question)."""
    for cta_type, pattern in CTA_KEYWORDS:
        if pattern.search(text):
            return cta_type
    return None


def analyze_engagement_style(text: str, heading_count: int) -> EngagementStyle:
    sections = heading_count + 1
    questions = len(QUESTION_MARK.findall(text))
    cta_type = detect_cta(text)
    return EngagementStyle(
        questions_per_section=round(questions / sections, 1),
        has_cta=cta_type is not None,
        cta_type=cta_type,
    )


def analyze_structure(text: str, sentence_count: int) -> StructurePreferences:
    paragraphs = [p for p in PARAGRAPH_BREAK.split(text) if p.strip()]
    avg_paragraph = sentence_count / len(paragraphs) if paragraphs else 0.0
    return StructurePreferences(
        average_paragraph_length=round(avg_paragraph, 1),
        uses_bullet_points=bool(BULLET_LIST.search(text)),
        uses_numbered_lists=bool(NUMBERED_LIST.search(text)),
        has_intro_greeting=bool(INTRO_GREETING.search(text)),
        has_closing_remarks=bool(CLOSING_REMARKS.search(text)),
    )


def extract_common_phrases(text: str, limit: int) -> list[str]:
    """3-word sequences seen at least twice."""
    words = text.lower().split()
    counts = Counter()
    for i in range(len(words) - 2):
        phrase = f"{words[i]} {words[i + 1]} {words[i + 2]}"
        if len(phrase) > 10:
            counts[phrase] += 1
    return [phrase for phrase, count in counts.most_common() if count >= 2][:limit]


class StyleAnalyzer:
    """Raw text → StyleProfile. Stateless; safe to share across threads."""

    def __init__(self, thresholds: StyleThresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    def analyze(self, text: str) -> StyleProfile:
        if not isinstance(text, str):
            raise InputError(f"analyze() expects str, got {type(text).__name__}")

        if not text.strip():
            return StyleProfile()

        sentences = split_sentences(text)
        avg_length = average_sentence_length(sentences)
        headings = find_headings(text)

        profile = StyleProfile(
            tone=detect_tone(text),
            complexity=classify_complexity(avg_length, self.thresholds),
            perspective=detect_perspective(text),
            average_sentence_length=round(avg_length, 1),
            vocabulary=classify_vocabulary(avg_length, len(sentences), self.thresholds),
            emoji_usage=analyze_emoji_usage(text, self.thresholds),
            korean_patterns=analyze_korean_patterns(text, self.thresholds),
            heading_style=analyze_heading_style(headings),
            engagement_style=analyze_engagement_style(text, len(headings)),
            structure_preferences=analyze_structure(text, len(sentences)),
            common_phrases=extract_common_phrases(text, self.thresholds.top_phrase_limit),
        )
        logger.debug(
            "Analyzed %d chars: %d sentences, %d headings, tone=%s",
            len(text), len(sentences), len(headings), profile.tone.value,
        )
        return profile

    def analyze_document(self, document: Document) -> StyleProfile:
        return self.analyze(document.content)
