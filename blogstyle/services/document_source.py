"""내 글 로더 - 디렉토리의 마크다운/텍스트 포스트를 Document로 변환"""

import logging
import re
from pathlib import Path
from typing import Optional, Protocol

import yaml

from blogstyle.config import POSTS_DIR
from blogstyle.models.document import Document

logger = logging.getLogger(__name__)

FRONT_MATTER = re.compile(r"\A---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


class DocumentSource(Protocol):
    def list_documents(self, source_filter: Optional[str] = None) -> list[Document]:
        ...


def split_front_matter(text: str) -> tuple[dict, str]:
    """YAML front matter → (meta, body). 파싱 실패 시 빈 meta."""
    match = FRONT_MATTER.match(text)
    if not match:
        return {}, text

    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning("Invalid front matter ignored: %s", e)
        return {}, text[match.end():]

    if not isinstance(meta, dict):
        meta = {}
    return meta, text[match.end():]


def derive_title(body: str, fallback: str) -> str:
    """첫 번째 비어있지 않은 짧은 줄을 제목으로 사용"""
    for line in body.split("\n"):
        line = line.strip().lstrip("#").strip()
        if line:
            return line if len(line) < 100 else fallback
    return fallback


def document_id(path: Path) -> str:
    return re.sub(r"[^a-z0-9가-힣]+", "-", path.stem.lower()).strip("-")


class MarkdownDocumentSource:
    """Blog posts stored as *.md / *.txt files under one directory."""

    EXTENSIONS = {".md", ".markdown", ".txt"}

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory or POSTS_DIR)

    def list_documents(self, source_filter: Optional[str] = None) -> list[Document]:
        """Load every post; source_filter matches source type, category or platform."""
        if not self.directory.exists():
            logger.warning("Posts directory not found: %s", self.directory)
            return []

        documents = []
        for path in sorted(self.directory.rglob("*")):
            if path.suffix.lower() not in self.EXTENSIONS or not path.is_file():
                continue
            try:
                document = self.load(path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Failed to read post %s: %s", path, e)
                continue
            if self._matches(document, source_filter):
                documents.append(document)

        logger.info("Loaded %d posts from %s", len(documents), self.directory)
        return documents

    def load(self, path: Path) -> Document:
        text = path.read_text(encoding="utf-8")
        meta, body = split_front_matter(text)
        fallback_title = re.sub(r"[-_]", " ", path.stem)

        tags = meta.get("tags") or []
        if isinstance(tags, str):
            tags = [tags]

        return Document(
            id=str(meta.get("id") or document_id(path)),
            title=str(meta.get("title") or derive_title(body, fallback_title)),
            content=body,
            source_type="markdown" if path.suffix.lower() != ".txt" else "text",
            platform=str(meta["platform"]).lower() if meta.get("platform") else None,
            metadata={
                "category": meta.get("category"),
                "tags": tags,
                "path": str(path),
            },
        )

    @staticmethod
    def _matches(document: Document, source_filter: Optional[str]) -> bool:
        if not source_filter:
            return True
        needle = source_filter.lower()
        haystack = [document.source_type, document.platform or "", document.metadata.get("category") or ""]
        return any(needle in str(value).lower() for value in haystack)
