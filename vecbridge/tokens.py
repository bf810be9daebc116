"""Token counting.

Tokenization is delegated to tiktoken. Callers that need a different
tokenizer (or none, in tests) pass any ``str -> int`` callable.
"""

from collections.abc import Callable
from functools import lru_cache

import tiktoken

TokenCounter = Callable[[str], int]

DEFAULT_ENCODING = "cl100k_base"


@lru_cache
def _encoding(name: str) -> tiktoken.Encoding:
    return tiktoken.get_encoding(name)


def count_tokens(text: str, encoding: str = DEFAULT_ENCODING) -> int:
    """Count tokens in text, special tokens included.

    Args:
        text: Text to tokenize.
        encoding: tiktoken encoding name.

    Returns:
        Number of tokens.
    """
    return len(_encoding(encoding).encode(text, allowed_special="all"))
