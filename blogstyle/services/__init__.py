"""Service layer: analysis, merging, pattern learning."""

from blogstyle.services.document_source import MarkdownDocumentSource
from blogstyle.services.guidance_builder import GenerationGuidance, GenerationGuidanceBuilder
from blogstyle.services.pattern_extractor import PatternExtractor
from blogstyle.services.pattern_store import InMemoryPatternStore, SqlPatternStore
from blogstyle.services.style_analyzer import StyleAnalyzer
from blogstyle.services.style_merger import StyleMerger

__all__ = [
    "MarkdownDocumentSource",
    "GenerationGuidance",
    "GenerationGuidanceBuilder",
    "PatternExtractor",
    "InMemoryPatternStore",
    "SqlPatternStore",
    "StyleAnalyzer",
    "StyleMerger",
]
