#!/usr/bin/env python3
"""
Tests for pulling the evaluation JSON out of free-form model replies.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent
sys.path.insert(0, str(src_dir))

from controllers.errors import InvalidModelResponse
from utils.response_parser import extract_json_object, parse_evaluation


def test_extracts_object_after_preamble():
    reply = 'Here is the result: {"grade":"15/20","summary":"ok"}'
    assert extract_json_object(reply) == {"grade": "15/20", "summary": "ok"}


def test_extracts_object_from_markdown_fence():
    reply = '```json\n{"grade": "12/20", "summary": "fine", "strengths": ["a"]}\n```'
    assert extract_json_object(reply) == {
        "grade": "12/20",
        "summary": "fine",
        "strengths": ["a"],
    }


def test_nested_braces_and_trailing_text():
    reply = (
        'Result: {"grade": "14/20", "summary": "uses {braces}", '
        '"meta": {"a": 1}} Hope this helps {not json}'
    )
    assert extract_json_object(reply) == {
        "grade": "14/20",
        "summary": "uses {braces}",
        "meta": {"a": 1},
    }


@pytest.mark.parametrize(
    "reply",
    ["", "no json here", "{not: valid json}", "only an opening {"],
)
def test_invalid_replies(reply):
    with pytest.raises(InvalidModelResponse):
        extract_json_object(reply)


def test_parse_evaluation_keeps_extra_fields():
    reply = '{"score": 17, "feedback": "Strong work", "weaknesses": "citations", "rank": 2}'
    result = parse_evaluation(reply)

    dumped = result.model_dump(mode="json", exclude_unset=True)
    assert dumped == {
        "score": 17,
        "feedback": "Strong work",
        "weaknesses": ["citations"],
        "rank": 2,
    }


def test_parse_evaluation_with_corrections():
    reply = (
        '{"grade": "13/20", "summary": "ok", "detailed_corrections": '
        '[{"original": "teh", "correction": "the", "explanation": "typo"}]}'
    )
    result = parse_evaluation(reply)

    assert result.detailed_corrections[0].correction == "the"


def test_parse_evaluation_requires_mark():
    with pytest.raises(InvalidModelResponse):
        parse_evaluation('{"summary": "no grade given"}')


def test_parse_evaluation_requires_written_assessment():
    with pytest.raises(InvalidModelResponse):
        parse_evaluation('{"grade": "10/20", "strengths": []}')


def test_malformed_corrections_are_dropped(caplog):
    reply = (
        '{"grade": "13/20", "summary": "ok", "detailed_corrections": ['
        '{"original": "teh", "correction": "the"}, '
        '{"original": "no fix given"}, '
        '"just a string"]}'
    )
    with caplog.at_level(logging.WARNING):
        result = parse_evaluation(reply)

    assert [c.correction for c in result.detailed_corrections] == ["the"]
    assert "Dropping malformed correction" in caplog.text


def test_non_list_corrections_are_ignored():
    reply = '{"score": 9, "feedback": "fine", "detailed_corrections": "see margins"}'

    assert parse_evaluation(reply).detailed_corrections is None


def test_explicit_nulls_survive_the_dump():
    reply = '{"score": 11, "summary": "ok", "strengths": null, "reviewer": null}'
    dumped = parse_evaluation(reply).model_dump(mode="json", exclude_unset=True)

    assert dumped == {"score": 11, "summary": "ok", "strengths": None, "reviewer": None}
