"""blogstyle: 내 블로그 글의 문체 분석 + 스타일 패턴 학습."""

from blogstyle.errors import InputError
from blogstyle.models import Document, MergedStyleGuidance, PatternRecord, PatternType, StyleProfile
from blogstyle.services import (
    GenerationGuidance,
    GenerationGuidanceBuilder,
    InMemoryPatternStore,
    MarkdownDocumentSource,
    PatternExtractor,
    SqlPatternStore,
    StyleAnalyzer,
    StyleMerger,
)

__version__ = "0.1.0"

__all__ = [
    "InputError",
    "Document",
    "MergedStyleGuidance",
    "PatternRecord",
    "PatternType",
    "StyleProfile",
    "GenerationGuidance",
    "GenerationGuidanceBuilder",
    "InMemoryPatternStore",
    "MarkdownDocumentSource",
    "PatternExtractor",
    "SqlPatternStore",
    "StyleAnalyzer",
    "StyleMerger",
]
