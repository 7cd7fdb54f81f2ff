"""Tests for the pattern stores (in-memory and SQLAlchemy)."""

import threading
from dataclasses import replace

import pytest

from blogstyle.database import build_engine, build_session_factory, get_db_session, init_db
from blogstyle.errors import InputError
from blogstyle.models.learned_pattern import LearnedPattern
from blogstyle.models.pattern import EmojiUsagePattern, ParagraphLengthPattern, PatternRecord, PatternType
from blogstyle.models.style_profile import EmojiFrequency
from blogstyle.services.pattern_store import InMemoryPatternStore, SqlPatternStore, upsert_patterns


def emoji_record(emojis, evidence, platform=None):
    return PatternRecord(
        pattern_data=EmojiUsagePattern(frequency=EmojiFrequency.MODERATE, common_emojis=emojis),
        platform_scope=platform,
        evidence_key=evidence,
    )


def paragraph_record(length, evidence, platform=None):
    return PatternRecord(
        pattern_data=ParagraphLengthPattern(average_paragraph_length=length, average_sentence_length=10.0),
        platform_scope=platform,
        evidence_key=evidence,
    )


class TestUpsert:
    """생성 / 증가 / 멱등"""

    def test_create_assigns_id(self, pattern_store):
        stored = pattern_store.upsert_pattern(emoji_record(["😊"], "e1"))
        assert stored.id is not None
        assert stored.usage_count == 1
        assert pattern_store.get_patterns() == [stored]

    def test_matching_shape_increments(self, pattern_store):
        first = pattern_store.upsert_pattern(emoji_record(["😊", "✨"], "e1"))
        second = pattern_store.upsert_pattern(emoji_record(["✨", "😊"], "e2"))

        assert second.id == first.id
        assert second.usage_count == 2
        assert len(pattern_store.get_patterns()) == 1

    def test_same_evidence_is_noop(self, pattern_store):
        first = pattern_store.upsert_pattern(emoji_record(["😊"], "e1"))
        again = pattern_store.upsert_pattern(emoji_record(["😊"], "e1"))

        assert again == first
        assert pattern_store.get_patterns()[0].usage_count == 1

    def test_different_shape_new_record(self, pattern_store):
        pattern_store.upsert_pattern(paragraph_record(2.0, "e1"))
        pattern_store.upsert_pattern(paragraph_record(6.0, "e2"))
        assert len(pattern_store.get_patterns(PatternType.PARAGRAPH_LENGTH)) == 2

    def test_upsert_many(self, pattern_store):
        stored = upsert_patterns(pattern_store, [emoji_record(["😊"], "e1"), paragraph_record(3.0, "e1")])
        assert [r.pattern_type for r in stored] == [PatternType.EMOJI_USAGE, PatternType.PARAGRAPH_LENGTH]


class TestGetPatterns:
    """유형 / 플랫폼 필터, 정렬"""

    @pytest.fixture
    def populated(self, pattern_store):
        pattern_store.upsert_pattern(emoji_record(["😊"], "n1", platform="naver"))
        pattern_store.upsert_pattern(emoji_record(["🚀"], "g1", platform="google"))
        pattern_store.upsert_pattern(paragraph_record(3.0, "a1"))
        pattern_store.upsert_pattern(paragraph_record(3.2, "a2"))
        return pattern_store

    def test_no_filter_returns_everything(self, populated):
        assert len(populated.get_patterns()) == 3

    def test_platform_includes_global_scope(self, populated):
        records = populated.get_patterns(platform="naver")
        assert {r.platform_scope for r in records} == {"naver", None}
        assert len(records) == 2

    def test_type_filter_accepts_string(self, populated):
        records = populated.get_patterns(pattern_type="emoji_usage")
        assert {r.pattern_type for r in records} == {PatternType.EMOJI_USAGE}
        assert len(records) == 2

    def test_sorted_by_usage(self, populated):
        records = populated.get_patterns()
        assert records[0].pattern_type is PatternType.PARAGRAPH_LENGTH
        assert records[0].usage_count == 2

    def test_unknown_type_rejected(self, populated):
        with pytest.raises(InputError):
            populated.get_patterns(pattern_type="word_count")


class TestSqlPatternStore:
    def test_row_round_trip(self, session_factory):
        store = SqlPatternStore(session_factory)
        stored = store.upsert_pattern(emoji_record(["😊"], "e1", platform="naver"))

        with get_db_session(session_factory) as db:
            row = db.query(LearnedPattern).one()
            assert row.pattern_type == "emoji_usage"
            assert row.seo_platform == "naver"
            assert "😊" in row.pattern_data
            assert row.to_record() == stored

    def test_document_ids_persisted(self, session_factory):
        store = SqlPatternStore(session_factory)
        record = replace(emoji_record(["😊"], "e1"), example_document_ids=("ko-1", "글-2"))
        stored = store.upsert_pattern(record)

        with get_db_session(session_factory) as db:
            row = db.query(LearnedPattern).one()
            assert "글-2" in row.example_post_ids
        assert store.get_patterns()[0].example_document_ids == ("ko-1", "글-2")
        assert stored.to_dict()["example_document_ids"] == ["ko-1", "글-2"]

    def test_failed_session_rolls_back(self, session_factory):
        with pytest.raises(RuntimeError):
            with get_db_session(session_factory) as db:
                row = LearnedPattern()
                row.apply(emoji_record(["😊"], "e1"))
                db.add(row)
                db.flush()
                raise RuntimeError("boom")

        assert SqlPatternStore(session_factory).get_patterns() == []


class TestInMemoryConcurrency:
    def test_parallel_upserts_are_serialized(self):
        store = InMemoryPatternStore()
        threads = [
            threading.Thread(target=store.upsert_pattern, args=(emoji_record(["😊"], f"e{i}"),))
            for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        records = store.get_patterns()
        assert len(records) == 1
        assert records[0].usage_count == 20


class TestSqlConcurrency:
    """파일 SQLite: 동시 upsert가 같은 그룹을 중복 생성하지 않음"""

    def test_parallel_upserts_share_one_record(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'patterns.db'}")
        init_db(engine)
        store = SqlPatternStore(build_session_factory(engine))
        workers = 16
        barrier = threading.Barrier(workers)
        errors = []

        def upsert(i):
            barrier.wait()
            try:
                store.upsert_pattern(emoji_record(["😊"], f"e{i}"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=upsert, args=(i,)) for i in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        try:
            assert errors == []
            records = store.get_patterns()
            assert len(records) == 1
            assert records[0].usage_count == workers
        finally:
            engine.dispose()
