"""blogstyle CLI - 내 글 폴더 분석, 패턴 학습, 프롬프트 가이드 출력"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from blogstyle.config import DATABASE_URL, POSTS_DIR
from blogstyle.database import build_engine, build_session_factory, init_db
from blogstyle.services.document_source import MarkdownDocumentSource
from blogstyle.services.guidance_builder import GenerationGuidanceBuilder
from blogstyle.services.pattern_store import SqlPatternStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blogstyle", description="Blog writing-style analyzer")
    parser.add_argument("--posts", type=Path, default=POSTS_DIR, help="내 글 폴더 (*.md, *.txt)")
    parser.add_argument("--filter", dest="source_filter", help="source type / category / platform 필터")
    parser.add_argument("--db", default=DATABASE_URL, help="패턴 저장소 SQLAlchemy URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="DEBUG 로그 출력")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("analyze", help="병합된 문체 프로필을 JSON으로 출력")

    guidance = sub.add_parser("guidance", help="프롬프트용 문체 가이드 출력")
    guidance.add_argument("--platform", help="naver, google ...")
    guidance.add_argument("--learn", action="store_true", help="출력 전에 패턴 학습")

    learn = sub.add_parser("learn", help="패턴 학습 후 저장")
    learn.add_argument("--platform", help="front matter에 platform이 없는 글에 적용할 플랫폼")

    patterns = sub.add_parser("patterns", help="저장된 패턴 목록")
    patterns.add_argument("--platform")
    patterns.add_argument("--type", dest="pattern_type")

    return parser


def open_store(database_url: str) -> SqlPatternStore:
    engine = build_engine(database_url)
    init_db(engine)
    return SqlPatternStore(build_session_factory(engine))


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "patterns":
        records = open_store(args.db).get_patterns(pattern_type=args.pattern_type, platform=args.platform)
        print(json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2))
        return 0

    documents = MarkdownDocumentSource(args.posts).list_documents(args.source_filter)

    if args.command == "analyze":
        builder = GenerationGuidanceBuilder()
        guidance = builder.build_guidance(documents)
        print(json.dumps(guidance.merged_style.to_dict(), ensure_ascii=False, indent=2))
        return 0

    builder = GenerationGuidanceBuilder(pattern_store=open_store(args.db))

    if args.command == "learn":
        stored = builder.learn_patterns(documents, platform=args.platform)
        print(f"✓ {len(documents)}개 글에서 패턴 {len(stored)}개 반영")
        return 0

    guidance = builder.build_guidance(documents, platform=args.platform, learn=args.learn)
    print(guidance.to_prompt_section())
    return 0


if __name__ == "__main__":
    sys.exit(main())
