"""Tests for Korean sentence-ending analysis."""

import pytest

from blogstyle.config import StyleThresholds
from blogstyle.models.style_profile import DominantEnding
from blogstyle.services.korean_endings import (
    analyze_korean_patterns,
    classify_ending,
    classify_sentences,
    common_korean_phrases,
    dominant_ending,
    ending_style,
    extract_ending_fragments,
    extract_korean_sentences,
    tag_usage_context,
)

from conftest import KOREAN_POST, KOREAN_FORMAL_POST


class TestSentenceExtraction:
    """한글 문장 분리"""

    def test_keeps_terminator_and_drops_short_or_non_korean(self):
        sentences = extract_korean_sentences("안녕. 좋은 아침이에요! Hello world.")
        assert sentences == ["좋은 아침이에요!"]

    def test_question_mark_is_kept(self):
        sentences = extract_korean_sentences("이건 어떤가요? 정말 좋아요.")
        assert sentences == ["이건 어떤가요?", "정말 좋아요."]

    def test_no_hangul(self):
        assert extract_korean_sentences("Plain English only. Nothing else!") == []


class TestClassifyEnding:
    """문어체 / 구어체 / 미분류"""

    @pytest.mark.parametrize(
        "sentence", ["이것은 중요합니다.", "정말 맞습니까?", "결론은 간단하다.", "어디 갑니까?", "이것이 답입니까"]
    )
    def test_formal(self, sentence):
        assert classify_ending(sentence) == "formal"

    @pytest.mark.parametrize("sentence", ["정말 쉬워요!", "그렇죠? 😊", "같이 해봐요~"])
    def test_conversational(self, sentence):
        assert classify_ending(sentence) == "conversational"

    @pytest.mark.parametrize(
        "sentence", ["좋은 하루", "오늘의 결론", "three words here", "비가 오니까", "그러니까", "시간이 없으니까!"]
    )
    def test_unclassified(self, sentence):
        assert classify_ending(sentence) is None


class TestEndingStyle:
    """비율과 우세 어미"""

    def test_unclassified_sentences_leave_denominator(self):
        text = "이것은 문장입니다. 그냥 명사 하나."
        patterns = analyze_korean_patterns(text)
        assert patterns.ending_style.formal_ratio == 1.0
        assert patterns.ending_style.conversational_ratio == 0.0
        assert patterns.ending_style.dominant_ending is DominantEnding.FORMAL

    def test_seven_to_three_is_mixed(self):
        text = " ".join(["이것은 문장입니다."] * 7 + ["이것은 문장이에요."] * 3)
        patterns = analyze_korean_patterns(text)

        assert patterns.ending_style.formal_ratio == pytest.approx(0.7)
        assert patterns.ending_style.conversational_ratio == pytest.approx(0.3)
        assert patterns.ending_style.dominant_ending is DominantEnding.MIXED
        assert patterns.uses_jondaemal is True
        assert patterns.uses_gueo_chae is True
        assert patterns.detected_endings.formal.count == 7
        assert patterns.detected_endings.conversational.count == 3

    def test_ratios_never_exceed_one(self):
        for text in (KOREAN_POST, KOREAN_FORMAL_POST, "그냥 명사 하나. 또 다른 명사 둘."):
            style = analyze_korean_patterns(text).ending_style
            assert 0.0 <= style.formal_ratio <= 1.0
            assert 0.0 <= style.conversational_ratio <= 1.0
            assert style.formal_ratio + style.conversational_ratio <= 1.0 + 1e-9

    def test_all_unclassified(self):
        patterns = analyze_korean_patterns("그냥 명사 하나. 또 다른 명사 둘.")
        assert patterns is not None
        assert patterns.ending_style.formal_ratio == 0.0
        assert patterns.ending_style.conversational_ratio == 0.0
        assert patterns.ending_style.dominant_ending is DominantEnding.MIXED
        assert patterns.uses_jondaemal is False
        assert patterns.uses_gueo_chae is False

    @pytest.mark.parametrize(
        "formal, conversational, expected",
        [
            (0.8, 0.2, DominantEnding.FORMAL),
            (0.79, 0.21, DominantEnding.MIXED),
            (0.1, 0.85, DominantEnding.CONVERSATIONAL),
            (0.0, 0.0, DominantEnding.MIXED),
        ],
    )
    def test_dominance_threshold(self, formal, conversational, expected):
        assert dominant_ending(formal, conversational, 0.8) is expected

    def test_injected_threshold(self):
        classified = classify_sentences(["이것은 문장입니다."] * 7 + ["이것은 문장이에요."] * 3)
        style = ending_style(classified, StyleThresholds(dominance=0.6))
        assert style.dominant_ending is DominantEnding.FORMAL

    def test_no_korean_returns_none(self):
        assert analyze_korean_patterns("Hello world. Plain English text.") is None
        assert analyze_korean_patterns("") is None


class TestUsageContext:
    """어미별 사용 맥락 태그"""

    def test_tags_follow_fixed_order(self):
        classified = classify_sentences([
            "핵심은 꾸준함입니다.",
            "시간이 부족하기 때문입니다.",
            "예를 들어 매일 쓰면 돼요.",
            "걱정하지 않아도 괜찮아요.",
            "어렵지 않죠?",
        ])
        context = tag_usage_context(classified)

        assert context.formal_contexts == ["explanations", "main_points"]
        assert context.conversational_contexts == ["examples", "reassurance", "questions"]

    def test_question_tag_needs_question_mark(self):
        context = tag_usage_context(classify_sentences(["어렵지 않죠."]))
        assert "questions" not in context.conversational_contexts

    def test_sample_post(self):
        patterns = analyze_korean_patterns(KOREAN_POST)
        assert patterns.usage_context.formal_contexts == ["explanations", "main_points"]
        assert patterns.usage_context.conversational_contexts == ["examples", "reassurance", "questions"]
        assert patterns.has_empathy is True


class TestFragmentsAndPhrases:
    def test_ending_fragments_are_unique_and_ordered(self):
        fragments = extract_ending_fragments(
            ["정말 중요합니다.", "이건 좋습니다.", "정말 중요합니다."], limit=5
        )
        assert fragments == ["요합니다", "좋습니다"]

    def test_ending_fragments_limit(self):
        sentences = ["가나다.", "라마바.", "사아자.", "차카타."]
        assert extract_ending_fragments(sentences, limit=2) == ["가나다", "라마바"]

    def test_common_korean_phrases_need_two_occurrences(self):
        text = "정말 좋은 방법 입니다. 정말 좋은 방법 이에요. 한 번만 나온 표현"
        phrases = common_korean_phrases(text, limit=5)
        assert "정말 좋은 방법" in phrases
        assert all(len(p) >= 4 for p in phrases)
