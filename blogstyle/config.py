"""Style engine configuration."""

import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("BLOGSTYLE_DATA_DIR", str(BASE_DIR / "data")))
POSTS_DIR = Path(os.getenv("BLOGSTYLE_POSTS_DIR", str(DATA_DIR / "my-posts")))
DB_PATH = DATA_DIR / "patterns.db"

# Database
DATABASE_URL = os.getenv("BLOGSTYLE_DATABASE_URL", f"sqlite:///{DB_PATH}")
DB_ECHO = os.getenv("BLOGSTYLE_DB_ECHO", "false").lower() == "true"
SQLITE_BUSY_TIMEOUT = float(os.getenv("BLOGSTYLE_SQLITE_BUSY_TIMEOUT", "30"))  # 쓰기 잠금 대기 (초)

# 종결어미 판정
DOMINANCE_THRESHOLD = float(os.getenv("STYLE_DOMINANCE_THRESHOLD", "0.8"))
LEGACY_FLAG_THRESHOLD = float(os.getenv("STYLE_LEGACY_FLAG_THRESHOLD", "0.2"))

# 이모지 밀도 구간 (100자당)
EMOJI_RARE_MAX = float(os.getenv("STYLE_EMOJI_RARE_MAX", "0.5"))
EMOJI_MODERATE_MAX = float(os.getenv("STYLE_EMOJI_MODERATE_MAX", "1.5"))

# 문장 길이 구간 (단어 수)
SIMPLE_MAX_WORDS = float(os.getenv("STYLE_SIMPLE_MAX_WORDS", "15"))
MEDIUM_MAX_WORDS = float(os.getenv("STYLE_MEDIUM_MAX_WORDS", "20"))
BASIC_VOCAB_MAX_WORDS = float(os.getenv("STYLE_BASIC_VOCAB_MAX_WORDS", "8"))

# 상위 N개 제한
TOP_EMOJI_LIMIT = int(os.getenv("STYLE_TOP_EMOJI_LIMIT", "5"))
TOP_ENDING_EXAMPLES = int(os.getenv("STYLE_TOP_ENDING_EXAMPLES", "5"))
TOP_PHRASE_LIMIT = int(os.getenv("STYLE_TOP_PHRASE_LIMIT", "5"))
MERGED_PHRASE_LIMIT = int(os.getenv("STYLE_MERGED_PHRASE_LIMIT", "10"))
MERGED_KOREAN_PHRASE_LIMIT = int(os.getenv("STYLE_MERGED_KOREAN_PHRASE_LIMIT", "8"))

# 패턴 학습
MIN_PATTERN_SAMPLE = int(os.getenv("PATTERN_MIN_SAMPLE", "2"))
RATIO_EPSILON = float(os.getenv("PATTERN_RATIO_EPSILON", "0.1"))
LENGTH_EPSILON = float(os.getenv("PATTERN_LENGTH_EPSILON", "1.0"))

# Analysis worker pool
ANALYSIS_WORKERS = int(os.getenv("STYLE_ANALYSIS_WORKERS", "4"))


@dataclass(frozen=True)
class StyleThresholds:
    """Heuristic cutoffs shared by analyzer, merger and pattern extractor."""

    dominance: float = DOMINANCE_THRESHOLD
    legacy_flag: float = LEGACY_FLAG_THRESHOLD
    emoji_rare_max: float = EMOJI_RARE_MAX
    emoji_moderate_max: float = EMOJI_MODERATE_MAX
    simple_max_words: float = SIMPLE_MAX_WORDS
    medium_max_words: float = MEDIUM_MAX_WORDS
    basic_vocab_max_words: float = BASIC_VOCAB_MAX_WORDS
    top_emoji_limit: int = TOP_EMOJI_LIMIT
    top_ending_examples: int = TOP_ENDING_EXAMPLES
    top_phrase_limit: int = TOP_PHRASE_LIMIT
    merged_phrase_limit: int = MERGED_PHRASE_LIMIT
    merged_korean_phrase_limit: int = MERGED_KOREAN_PHRASE_LIMIT
    min_pattern_sample: int = MIN_PATTERN_SAMPLE
    ratio_epsilon: float = RATIO_EPSILON
    length_epsilon: float = LENGTH_EPSILON


DEFAULT_THRESHOLDS = StyleThresholds()
