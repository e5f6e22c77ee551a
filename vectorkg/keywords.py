# /vectorkg/keywords.py

import re
from collections import Counter
from typing import List, Tuple

from vectorkg.config import GraphConfig

# letters and digits; underscores and punctuation separate tokens
_TOKEN_RE = re.compile(r"[^\W_]+")


def normalize_keyword(keyword: str) -> str:
    return keyword.strip().casefold()


def tokenize(text: str) -> List[str]:
    """Split on non-alphanumeric boundaries and case-fold every token."""
    return [token.casefold() for token in _TOKEN_RE.findall(text)]


def keyword_counts(text: str, config: GraphConfig) -> List[Tuple[str, int]]:
    """
    Rank candidate keywords of a text by how often they occur.

    Tokens in the stopword set or shorter than ``config.min_token_length`` are
    dropped. The rest are ordered by frequency, descending, with ties broken by
    first occurrence, and at most ``config.max_keywords`` are returned together
    with their occurrence counts.
    """
    stopwords = set(config.stopwords)
    counts: Counter = Counter()
    first_seen = {}
    for position, token in enumerate(tokenize(text)):
        if len(token) < config.min_token_length or token in stopwords:
            continue
        counts[token] += 1
        first_seen.setdefault(token, position)

    ranked = sorted(counts.items(), key=lambda item: (-item[1], first_seen[item[0]]))
    return ranked[:config.max_keywords]


def extract_keywords(text: str, config: GraphConfig) -> List[str]:
    """Ordered, de-duplicated keywords of a text. Empty text gives an empty list."""
    return [keyword for keyword, _ in keyword_counts(text, config)]
