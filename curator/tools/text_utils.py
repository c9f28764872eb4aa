from __future__ import annotations

import re
from functools import lru_cache

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


def clean_content(text: str, max_length: int = 8000) -> str:
    """Collapse whitespace and trim to max length."""
    text = re.sub(r"\s+", " ", text).strip()
    if len(text) > max_length:
        text = text[:max_length] + "..."
    return text


def split_sentences(text: str) -> list[str]:
    cleaned = clean_content(text, max_length=len(text) + 1)
    if not cleaned:
        return []
    return [s.strip() for s in _SENTENCE_SPLIT.split(cleaned) if s.strip()]


def sentences_mentioning(text: str, term: str) -> list[str]:
    """Sentences containing `term`, case-insensitive, in document order."""
    needle = term.lower()
    return [s for s in split_sentences(text) if needle in s.lower()]


# Inflections a lexicon term or stem may carry ("recycl" -> "recycling", "sustainab" -> "sustainability").
_SUFFIXES = r"(?:s|es|d|ed|ing|e|er|ers|ly|le|ility|ity|able)?"


@lru_cache(maxsize=1024)
def term_pattern(term: str) -> re.Pattern[str]:
    """Case-insensitive whole-word match of `term`, allowing a short inflection."""
    # Boundaries only apply next to word characters, so terms like "C++" still match.
    head = r"\b" if re.match(r"\w", term[:1]) else ""
    tail = _SUFFIXES + r"\b" if re.match(r"\w", term[-1:]) else ""
    return re.compile(head + re.escape(term) + tail, re.IGNORECASE)


def count_term(text: str, term: str) -> int:
    return len(term_pattern(term.lower()).findall(text))


def distinct_hits(text: str, terms: list[str] | tuple[str, ...] | set[str]) -> set[str]:
    """Terms occurring in text as whole words (or inflections), case-insensitive."""
    return {t.lower() for t in terms if t and term_pattern(t.lower()).search(text)}


def dedupe_casefold(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        value = " ".join(item.split()).strip()
        if not value:
            continue
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(value)
    return out
