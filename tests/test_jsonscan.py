import pytest

from tunebridge.core.jsonscan import (
    extract_array,
    extract_bool,
    extract_int,
    extract_string,
)


def test_extract_string_with_and_without_space():
    assert extract_string('{"title":"Song"}', "title") == "Song"
    assert extract_string('{"title": "Song"}', "title") == "Song"


def test_extract_string_stops_at_unescaped_quote():
    doc = r'{"title":"Say \"hi\" now","artist":"X"}'
    assert extract_string(doc, "title") == r"Say \"hi\" now"
    assert extract_string(r'{"p":"C:\\"}', "p") == r"C:\\"


def test_extract_string_first_occurrence_wins():
    doc = '{"title":"First","nested":{"title":"Second"}}'
    assert extract_string(doc, "title") == "First"


@pytest.mark.parametrize(
    "doc",
    ["", "{}", '{"other":"x"}', '{"title":"unterminated', '{"title":42}', "not json at all"],
)
def test_extract_string_defaults_to_empty(doc):
    assert extract_string(doc, "title") == ""


def test_extract_int():
    assert extract_int('{"duration":180}', "duration") == 180
    assert extract_int('{"duration": 180,"x":1}', "duration") == 180
    assert extract_int('{"duration":-5}', "duration") == -5
    assert extract_int('{"duration":180.7}', "duration") == 180
    assert extract_int('{"count":12\n}', "count") == 12


@pytest.mark.parametrize(
    "doc",
    ["", '{"a":1}', '{"duration":"3:45"}', '{"duration":null}', '{"duration":180'],
)
def test_extract_int_defaults_to_zero(doc):
    assert extract_int(doc, "duration") == 0


def test_extract_bool_literals_and_strings():
    assert extract_bool('{"isVideo":true}', "isVideo") is True
    assert extract_bool('{"isVideo": true}', "isVideo") is True
    assert extract_bool('{"isVideo":false}', "isVideo") is False
    assert extract_bool('{"isVideo":"true"}', "isVideo") is True
    assert extract_bool('{"isVideo":"True"}', "isVideo") is True
    assert extract_bool('{"isVideo":"yes"}', "isVideo") is False


@pytest.mark.parametrize("doc", ["", "{}", '{"isVideo":1}', '{"isVideo":'])
def test_extract_bool_defaults_to_false(doc):
    assert extract_bool(doc, "isVideo") is False


def test_extract_array_splits_flat_objects():
    doc = '[{"videoId":"a","title":"One","duration":1}, {"videoId":"b","title":"Two"},{"videoId":"c","title":"Three"}]'
    items = extract_array(doc)
    assert items == [
        '{"videoId":"a","title":"One","duration":1}',
        '{"videoId":"b","title":"Two"}',
        '{"videoId":"c","title":"Three"}',
    ]
    assert [extract_string(i, "videoId") for i in items] == ["a", "b", "c"]
    assert extract_int(items[0], "duration") == 1


def test_extract_array_handles_pretty_printed_json():
    doc = '[\n  {\n    "playlistId": "PL1",\n    "count": 3\n  },\n  {\n    "playlistId": "PL2",\n    "count": 4\n  }\n]\n'
    items = extract_array(doc)
    assert len(items) == 2
    assert [extract_int(i, "count") for i in items] == [3, 4]


def test_extract_array_keeps_nested_object_as_one_item():
    items = extract_array('[{"a":{"b":1}},{"c":2}]')
    assert items == ['{"a":{"b":1}}', '{"c":2}']


@pytest.mark.parametrize("doc", ["", "[]", "{}", '{"detail":"x"}', "][", "[1, 2, 3]"])
def test_extract_array_without_objects(doc):
    assert extract_array(doc) == []


def test_extract_array_ignores_unbalanced_tail():
    assert extract_array('[{"a":1},{"b":2]') == ['{"a":1}']
