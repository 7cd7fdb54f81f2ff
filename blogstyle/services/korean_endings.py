"""한국어 종결어미 분석 (문어체 ~다 / 구어체 ~요 비율 기반)"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from blogstyle.config import StyleThresholds, DEFAULT_THRESHOLDS
from blogstyle.models.style_profile import (
    DetectedEndings,
    DominantEnding,
    EndingSamples,
    EndingStyle,
    KoreanPatterns,
    UsageContext,
    FORMAL_CONTEXTS,
    CONVERSATIONAL_CONTEXTS,
)

HANGUL = re.compile(r"[가-힣]")

# 종결부호를 포함한 문장 단위 (? 는 질문 맥락 판정에 필요해서 남겨둔다)
SENTENCE_WITH_TERMINATOR = re.compile(r"[^.!?。？]+[.!?。？]*")
TRAILING_TERMINATORS = re.compile(r"[.!?。？\s]+$")
TRAILING_NON_HANGUL = re.compile(r"[^가-힣]+$")

# 문어체: ~다, ~습니다, ~ㅂ니다
FORMAL_ENDING = re.compile(r"다$")
# ~ㅂ니까 / ~습니까 (받침 ㅂ + 니까). 연결어미 ~(으)니까 는 제외
FORMAL_QUESTION = re.compile(r"([가-힣])니까$")
BIEUP_FINAL = 17  # 종성 인덱스 ㅂ
# 구어체: ~요, ~어요, ~죠
CONVERSATIONAL_ENDING = re.compile(r"(?:요|죠)$")

ENDING_FRAGMENT = re.compile(r"[가-힣]{2,4}$")

# 맥락 단서
FORMAL_CONTEXT_CUES = {
    "definitions": re.compile(r"(이란|라는 것은|의미는|정의|설명하면)"),
    "explanations": re.compile(r"(때문|이유|따라서|그러므로|즉)"),
    "main_points": re.compile(r"(핵심|중요|포인트|전략|방법)"),
}
CONVERSATIONAL_CONTEXT_CUES = {
    "examples": re.compile(r"(예를 들어|예시|예컨대|보면)"),
    "reassurance": re.compile(r"(할 수 있|괜찮|걱정|충분|도움)"),
}
QUESTION_TAIL = re.compile(r"[?？]\s*$")

EMPATHY = re.compile(r"(그쵸|맞죠|그렇죠|죠\?|나요\?|가요\?|인가요\?)")
KOREAN_PHRASE = re.compile(r"[가-힣]+(?:\s+[가-힣]+){1,2}")


@dataclass
class ClassifiedSentences:
    formal: list[str] = field(default_factory=list)
    conversational: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.formal) + len(self.conversational)


def extract_korean_sentences(text: str) -> list[str]:
    """한글이 포함된 3자 초과 문장 (종결부호 유지)"""
    sentences = []
    for match in SENTENCE_WITH_TERMINATOR.finditer(text):
        sentence = match.group(0).strip()
        body = TRAILING_TERMINATORS.sub("", sentence)
        if HANGUL.search(body) and len(body) > 3:
            sentences.append(sentence)
    return sentences


def sentence_tail(sentence: str) -> str:
    """종결부호, 이모지 등 끝의 비한글 문자 제거"""
    return TRAILING_NON_HANGUL.sub("", sentence)


def _has_bieup_final(syllable: str) -> bool:
    return (ord(syllable) - 0xAC00) % 28 == BIEUP_FINAL


def _is_formal_question(tail: str) -> bool:
    match = FORMAL_QUESTION.search(tail)
    return match is not None and _has_bieup_final(match.group(1))


def classify_ending(sentence: str) -> Optional[str]:
    """"formal" / "conversational" / None (미분류)"""
    tail = sentence_tail(sentence)
    if FORMAL_ENDING.search(tail) or _is_formal_question(tail):
        return "formal"
    if CONVERSATIONAL_ENDING.search(tail):
        return "conversational"
    return None


def classify_sentences(sentences: list[str]) -> ClassifiedSentences:
    classified = ClassifiedSentences()
    for sentence in sentences:
        kind = classify_ending(sentence)
        if kind == "formal":
            classified.formal.append(sentence)
        elif kind == "conversational":
            classified.conversational.append(sentence)
    return classified


def dominant_ending(formal_ratio: float, conversational_ratio: float, threshold: float) -> DominantEnding:
    if formal_ratio >= threshold:
        return DominantEnding.FORMAL
    if conversational_ratio >= threshold:
        return DominantEnding.CONVERSATIONAL
    return DominantEnding.MIXED


def ending_style(classified: ClassifiedSentences, thresholds: StyleThresholds = DEFAULT_THRESHOLDS) -> EndingStyle:
    """미분류 문장은 분모에서 제외"""
    total = classified.total
    if total == 0:
        return EndingStyle()
    formal_ratio = len(classified.formal) / total
    conversational_ratio = len(classified.conversational) / total
    return EndingStyle(
        formal_ratio=formal_ratio,
        conversational_ratio=conversational_ratio,
        dominant_ending=dominant_ending(formal_ratio, conversational_ratio, thresholds.dominance),
    )


def tag_usage_context(classified: ClassifiedSentences) -> UsageContext:
    """어떤 맥락에서 각 어미가 쓰이는지. 한 문장이 여러 태그에 들어갈 수 있다."""
    formal_tags = set()
    for sentence in classified.formal:
        for tag, cue in FORMAL_CONTEXT_CUES.items():
            if cue.search(sentence):
                formal_tags.add(tag)

    conversational_tags = set()
    for sentence in classified.conversational:
        for tag, cue in CONVERSATIONAL_CONTEXT_CUES.items():
            if cue.search(sentence):
                conversational_tags.add(tag)
        if QUESTION_TAIL.search(sentence):
            conversational_tags.add("questions")

    return UsageContext(
        formal_contexts=[t for t in FORMAL_CONTEXTS if t in formal_tags],
        conversational_contexts=[t for t in CONVERSATIONAL_CONTEXTS if t in conversational_tags],
    )


def extract_ending_fragments(sentences: list[str], limit: int) -> list[str]:
    """문장 끝 2~4글자 (중복 제거, 등장 순서)"""
    endings = []
    for sentence in sentences:
        match = ENDING_FRAGMENT.search(sentence_tail(sentence))
        if match and match.group(0) not in endings:
            endings.append(match.group(0))
            if len(endings) >= limit:
                break
    return endings


def common_korean_phrases(text: str, limit: int) -> list[str]:
    """2회 이상 등장한 2~3어절 한글 표현"""
    counts = Counter(p for p in KOREAN_PHRASE.findall(text) if len(p) >= 4)
    return [phrase for phrase, count in counts.most_common() if count >= 2][:limit]


def analyze_korean_patterns(
    text: str, thresholds: StyleThresholds = DEFAULT_THRESHOLDS
) -> Optional[KoreanPatterns]:
    """한글 문장이 없으면 None"""
    sentences = extract_korean_sentences(text)
    if not sentences:
        return None

    classified = classify_sentences(sentences)
    style = ending_style(classified, thresholds)

    return KoreanPatterns(
        ending_style=style,
        usage_context=tag_usage_context(classified),
        detected_endings=DetectedEndings(
            formal=EndingSamples(
                count=len(classified.formal),
                examples=extract_ending_fragments(classified.formal, thresholds.top_ending_examples),
            ),
            conversational=EndingSamples(
                count=len(classified.conversational),
                examples=extract_ending_fragments(classified.conversational, thresholds.top_ending_examples),
            ),
        ),
        uses_jondaemal=style.formal_ratio > thresholds.legacy_flag,
        uses_gueo_chae=style.conversational_ratio > thresholds.legacy_flag,
        has_empathy=bool(EMPATHY.search(text)),
        common_korean_phrases=common_korean_phrases(text, thresholds.top_phrase_limit),
    )
