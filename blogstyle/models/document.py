"""Source document handed to the analyzer."""

from dataclasses import dataclass, field
from typing import Optional

from blogstyle.errors import InputError


@dataclass(frozen=True)
class Document:
    """Decoded blog post (markdown, PDF text, DB row ...) ready for analysis."""

    id: str
    title: str
    content: str
    source_type: str = "markdown"    # markdown | pdf | database | web
    platform: Optional[str] = None   # naver, google, ... (패턴 학습 범위)
    metadata: dict = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not isinstance(self.content, str):
            raise InputError(
                f"Document {self.id!r}: content must be str, got {type(self.content).__name__}"
            )

    def __repr__(self):
        return f"<Document {self.id}: {self.title[:30]}>"
