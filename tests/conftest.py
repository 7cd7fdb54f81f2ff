"""
Pytest configuration and fixtures.
"""

import pytest

from blogstyle.config import StyleThresholds
from blogstyle.database import build_engine, build_session_factory, init_db
from blogstyle.models.document import Document
from blogstyle.models.style_profile import (
    DominantEnding,
    EndingStyle,
    KoreanPatterns,
    StyleProfile,
)
from blogstyle.services.pattern_store import InMemoryPatternStore, SqlPatternStore


KOREAN_POST = """안녕하세요 여러분! 오늘은 블로그 글쓰기 방법을 정리해볼게요 ✨

1. 주제 정하기 🎯
글쓰기의 핵심은 꾸준함입니다. 주제가 분명해야 독자가 머무르기 때문입니다. 예를 들어 하루에 한 가지 주제만 정해 보면 훨씬 쉬워요.

2. 초안 쓰기 📝
처음부터 완벽할 필요는 없어요. 걱정하지 않아도 괜찮아요. 어렵지 않죠?

- 짧게 쓰기
- 자주 쓰기

궁금한 점은 댓글로 남겨주세요. 감사합니다 😊
"""

KOREAN_FORMAL_POST = """# 검색 최적화 전략

검색 최적화란 검색 결과 상단에 노출되도록 글을 다듬는 작업입니다. 제목에 핵심 키워드를 넣는 것이 중요합니다.
본문은 짧은 문단으로 나누는 것이 좋습니다. 독자가 빠르게 읽기 때문입니다.

## 정리

꾸준히 발행하는 것이 가장 확실한 방법입니다. 다음에 더 자세히 다루겠습니다.
"""

ENGLISH_POST = """# Getting Started With Testing

Hey there! Today I want to show you how I write tests for small projects.
Basically, a test is a tiny program that checks your code.

## Why bother?

Tests catch regressions early. They also document how the code is meant to be used.
Do you write tests before the code or after?

Thanks for reading, and share this post if it helped!
"""


@pytest.fixture
def thresholds() -> StyleThresholds:
    """Default thresholds (explicit instance for injection)."""
    return StyleThresholds()


@pytest.fixture
def korean_doc() -> Document:
    return Document(id="ko-1", title="글쓰기 방법", content=KOREAN_POST)


@pytest.fixture
def korean_formal_doc() -> Document:
    return Document(id="ko-2", title="검색 최적화 전략", content=KOREAN_FORMAL_POST)


@pytest.fixture
def english_doc() -> Document:
    return Document(id="en-1", title="Getting Started With Testing", content=ENGLISH_POST)


def korean_profile(formal_ratio: float, conversational_ratio: float, **kwargs) -> StyleProfile:
    """StyleProfile carrying only the given Korean ending ratios."""
    if formal_ratio >= 0.8:
        dominant = DominantEnding.FORMAL
    elif conversational_ratio >= 0.8:
        dominant = DominantEnding.CONVERSATIONAL
    else:
        dominant = DominantEnding.MIXED
    return StyleProfile(
        korean_patterns=KoreanPatterns(
            ending_style=EndingStyle(
                formal_ratio=formal_ratio,
                conversational_ratio=conversational_ratio,
                dominant_ending=dominant,
            ),
        ),
        **kwargs,
    )


@pytest.fixture
def session_factory():
    """In-memory SQLite with the schema created (StaticPool)."""
    engine = build_engine("sqlite://")
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def pattern_store(request, session_factory):
    """Both store implementations behind the same contract."""
    if request.param == "memory":
        return InMemoryPatternStore()
    return SqlPatternStore(session_factory)


@pytest.fixture
def make_korean_profile():
    return korean_profile
