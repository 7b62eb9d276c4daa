"""Extraction of [[Term]] cross-reference markers from article text."""

import re
from typing import List

# A term is everything between "[[" and "]]" on one line, without nested markers
_CROSS_REFERENCE = re.compile(r"\[\[((?:(?!\[\[|\]\])[^\n])+)\]\]")


def extract_cross_references(text: str) -> List[str]:
    """Extract the topics referenced by an article.

    Terms are returned in order of first appearance, de-duplicated
    case-insensitively with the first-seen casing kept. Safe to call on
    partially streamed text: an unterminated marker is simply not matched.

    Args:
        text: Article text containing zero or more [[Term]] markers

    Returns:
        Ordered list of distinct referenced terms
    """
    terms = []
    seen = set()
    for match in _CROSS_REFERENCE.finditer(text):
        term = match.group(1).strip()
        if not term:
            continue
        key = term.casefold()
        if key in seen:
            continue
        seen.add(key)
        terms.append(term)
    return terms
