import pytest

from utils.errors import ExtractionError, ParseError
from utils.extraction import bound_payload, extract_and_parse, strip_fences

PIPELINE_TEXT = '[{"$match": {"date": {"$gte": "01/%m/%Y"}}}, {"$group": {"_id": "$category"}}]'


def test_strip_fences_removes_json_markers():
    assert strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_bound_payload_ignores_fences_and_commentary():
    text = f"Here is your query:\n```json\n{PIPELINE_TEXT}\n```\nHope this helps!"
    assert bound_payload(text) == PIPELINE_TEXT


def test_bound_payload_object_uses_last_closing_brace():
    text = 'Sure! {"reason": {"$regex": "milk"}} -- let me know {if} anything else'
    assert bound_payload(text) == '{"reason": {"$regex": "milk"}} -- let me know {if}'


def test_extract_and_parse_is_lenient():
    text = "```\n{reason: {'$regex': 'milk', '$options': 'i'}, amount: 5,}\n```"
    assert extract_and_parse(text) == {"reason": {"$regex": "milk", "$options": "i"}, "amount": 5}


def test_extract_and_parse_trailing_comma_in_array():
    assert extract_and_parse('[{"$limit": 5},]') == [{"$limit": 5}]


def test_prose_without_structure_raises_extraction_error():
    with pytest.raises(ExtractionError):
        extract_and_parse("I'm sorry, I cannot answer that question.")


def test_unterminated_structure_raises_extraction_error():
    with pytest.raises(ExtractionError):
        extract_and_parse('{"amount": 5')


def test_garbage_inside_braces_raises_parse_error():
    with pytest.raises(ParseError):
        extract_and_parse("{ not: valid: json }")
