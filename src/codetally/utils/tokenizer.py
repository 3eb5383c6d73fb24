# src/codetally/utils/tokenizer.py
from functools import lru_cache

import tiktoken

DEFAULT_ENCODING = "cl100k_base"
FALLBACK_ENCODING = "p50k_base"
CHARS_PER_TOKEN = 4


@lru_cache(maxsize=None)
def _load_encoding(name: str):
    return tiktoken.get_encoding(name)


class Tokenizer:
    """Token estimates reported next to the line counts (--tokens)."""
    encoding_name = DEFAULT_ENCODING

    @classmethod
    def get_encoding(cls):
        try:
            return _load_encoding(cls.encoding_name)
        except Exception:
            return _load_encoding(FALLBACK_ENCODING)

    @classmethod
    def count(cls, text: str) -> int:
        if not text:
            return 0
        try:
            # Source files may legitimately contain "<|endoftext|>" and friends
            return len(cls.get_encoding().encode(text, disallowed_special=()))
        except Exception:
            # Encoding files unavailable (offline): rough estimate
            return len(text) // CHARS_PER_TOKEN
