from __future__ import annotations

import json

import pytest

from curator.models.article import BusinessField
from curator.models.research import ResearchTask
from curator.services import streaming
from curator.tools.search_provider import StubContentProvider
from curator.tools.text_utils import (
    clean_content,
    dedupe_casefold,
    distinct_hits,
    sentences_mentioning,
    split_sentences,
    term_pattern,
)


def test_clean_content_collapses_whitespace_and_truncates():
    assert clean_content("  a \n\n b\tc  ") == "a b c"
    assert clean_content("abcdef", max_length=3) == "abc..."


def test_split_sentences():
    text = "First one. Second one!  Third?\nFourth"
    assert split_sentences(text) == ["First one.", "Second one!", "Third?", "Fourth"]
    assert split_sentences("   ") == []


def test_sentences_mentioning_is_case_insensitive():
    text = "Acme grew. Globex shrank. ACME hired."
    assert sentences_mentioning(text, "acme") == ["Acme grew.", "ACME hired."]


def test_distinct_hits_counts_each_term_once():
    assert distinct_hits("Chip chip CHIP cooling", ("chip", "cooling", "wafer", "")) == {"chip", "cooling"}


def test_dedupe_casefold_keeps_first_spelling():
    assert dedupe_casefold(["Grid", "grid ", "  ", "Battery  Storage", "battery storage"]) == [
        "Grid",
        "Battery Storage",
    ]


@pytest.mark.asyncio
async def test_stub_provider_is_deterministic():
    task = ResearchTask(id="task-hpc-1", business_field=BusinessField.HPC, keywords=["quantum"])
    provider = StubContentProvider(articles_per_task=3)

    first = await provider.search(task)
    second = await provider.search(task)

    assert [a.id for a in first] == [a.id for a in second]
    assert len({a.id for a in first}) == 3
    assert all(a.business_field == BusinessField.HPC for a in first)
    assert all("quantum" in a.content for a in first)


def test_task_status_event_formats_as_sse():
    task = ResearchTask(id="t1", business_field=BusinessField.BITCOIN).start().fail("timeout")

    event = streaming.task_status(task, batch=0)
    payload = event.format()

    assert payload.startswith("event: task_status\ndata: ")
    assert payload.endswith("\n\n")
    data = json.loads(payload.split("data: ", 1)[1])
    assert data == {
        "task_id": "t1",
        "business_field": "Bitcoin",
        "status": "failed",
        "batch": 0,
        "error": "timeout",
    }


@pytest.mark.parametrize(
    "text, term, expected",
    [
        ("Recycling plants", "recycl", True),
        ("sustainability goals", "sustainab", True),
        ("the project struggled", "struggl", True),
        ("ideal conditions", "deal", False),
        ("Windows update", "wind", False),
        ("rewind the tape", "wind", False),
        ("we tried again", "gain", False),
        ("glossy finish", "loss", False),
    ],
)
def test_term_pattern_matches_whole_words_and_inflections(text, term, expected):
    assert bool(term_pattern(term).search(text)) is expected
