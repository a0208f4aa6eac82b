# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from restcore.errors import JsonReadError, PropertyNotFoundError
from restcore.json_reader import RawJsonSpan, read_items_and_next_link, read_status


def test_read_status_returns_string_value():
    assert read_status(b'{"status": "Running"}') == "Running"


def test_read_status_skips_unrelated_properties():
    body = b'{"id": 7, "meta": {"status": "nested", "tags": ["a", {"b": "}"}]}, "status": "Succeeded"}'
    assert read_status(body) == "Succeeded"


def test_read_status_decodes_escapes():
    assert read_status(b'{"status": "Run\\u006eing \\"now\\""}') == 'Running "now"'


def test_read_status_custom_property_name():
    assert read_status(b'{"state": "Failed"}', "state") == "Failed"


def test_read_status_matches_escaped_property_names():
    assert read_status(b'{"st\\u0061tus": "Succeeded"}') == "Succeeded"


def test_read_status_name_match_is_case_sensitive():
    with pytest.raises(PropertyNotFoundError) as excinfo:
        read_status(b'{"Status": "Succeeded"}')
    assert excinfo.value.property_name == "status"


def test_read_status_missing_property():
    with pytest.raises(PropertyNotFoundError):
        read_status(b'{"id": 1}')
    with pytest.raises(PropertyNotFoundError):
        read_status(b"{}")


@pytest.mark.parametrize(
    "body",
    [
        b'{"status": 1}',
        b'{"status": null}',
        b'["status", "Succeeded"]',
        b'"Succeeded"',
        b"",
        b'{"id": 1,',
        b'{"id" 1, "status": "x"}',
        b'{"id": tru, "status": "x"}',
    ],
)
def test_read_status_parse_errors(body):
    with pytest.raises(JsonReadError):
        read_status(body)


def test_read_items_captures_exact_spans():
    body = b'{"value": [{"a": 1}, [1, [2]], "s\\"x", 42, -1.5e3, true, null], "nextLink": "https://x/next"}'
    items, next_link = read_items_and_next_link(body)

    assert [bytes(item) for item in items] == [
        b'{"a": 1}',
        b"[1, [2]]",
        b'"s\\"x"',
        b"42",
        b"-1.5e3",
        b"true",
        b"null",
    ]
    assert next_link == "https://x/next"


def test_read_items_span_views_share_the_document():
    body = b'{"value": [{"a": 1}, {"a": 2}]}'
    items, _ = read_items_and_next_link(body)
    first = items[0]
    assert isinstance(first, RawJsonSpan)
    assert (first.start, first.length, first.end) == (11, 8, 19)
    assert first.to_memoryview().tobytes() == b'{"a": 1}'
    assert items[1].to_object() == {"a": 2}
    assert len(items[1]) == 8


def test_read_items_missing_property_is_none():
    items, next_link = read_items_and_next_link(b'{"nextLink": "https://x/2"}')
    assert items is None
    assert next_link == "https://x/2"


def test_read_items_null_or_missing_next_link():
    assert read_items_and_next_link(b'{"value": [], "nextLink": null}') == ([], None)
    assert read_items_and_next_link(b'{"value": [1]}')[1] is None


def test_read_items_skips_other_properties_whatever_their_shape():
    body = (
        b'{"@odata.context": "x", "count": 2, "extra": {"value": [9], "nextLink": "nope"},'
        b' "list": [[], {}, "]"], "value": [1, 2], "flag": false}'
    )
    items, next_link = read_items_and_next_link(body)
    assert [bytes(i) for i in items] == [b"1", b"2"]
    assert next_link is None


def test_read_items_custom_property_names():
    body = b'{"items": ["a"], "next": "https://x/3", "value": [1]}'
    items, next_link = read_items_and_next_link(body, "items", "next")
    assert [i.to_object() for i in items] == ["a"]
    assert next_link == "https://x/3"


@pytest.mark.parametrize(
    "body",
    [
        b'{"value": [1, 2}',
        b'{"value": [1,]}',
        b'{"value": {"a": 1}}',
        b'{"value": [1], "nextLink": 5}',
        b'{"value": [1]} trailing',
        b'[{"value": []}]',
        b"42",
        b'{"value": ["unterminated]}',
    ],
)
def test_read_items_parse_errors(body):
    with pytest.raises(JsonReadError):
        read_items_and_next_link(body)


def test_reader_accepts_memoryview_and_bytearray():
    assert read_status(memoryview(b'{"status": "Succeeded"}')) == "Succeeded"
    items, _ = read_items_and_next_link(bytearray(b'{"value": [true]}'))
    assert bytes(items[0]) == b"true"


def test_lone_surrogate_property_names_are_skipped():
    assert read_status(b'{"\\ud800": 1, "status": "Running"}') == "Running"
    items, next_link = read_items_and_next_link(b'{"\\udc00x": [], "value": [1], "nextLink": null}')
    assert [bytes(item) for item in items] == [b"1"]
    assert next_link is None


def test_escaped_surrogate_pair_name_matches_decoded_text():
    assert read_status(b'{"\\ud83d\\ude00": "ok"}', "\U0001f600") == "ok"


@pytest.mark.parametrize(
    "body",
    [
        b'{"status": "\xff"}',
        b'{"st\\u0061tus\xfe": 1}',
    ],
)
def test_invalid_utf8_in_strings_raises_read_error(body):
    with pytest.raises(JsonReadError):
        read_status(body)


def test_invalid_utf8_next_link_raises_read_error():
    with pytest.raises(JsonReadError) as excinfo:
        read_items_and_next_link(b'{"value": [], "nextLink": "https://x/\xc3"}')
    assert excinfo.value.position == 26


def test_deeply_nested_values_are_skipped():
    depth = 5000
    nested = b"[" * depth + b"]" * depth
    keyed = b'{"a":' * depth + b"1" + b"}" * depth
    assert read_status(b'{"x": ' + nested + b', "y": ' + keyed + b', "status": "Running"}') == "Running"

    items, _ = read_items_and_next_link(b'{"value": [' + nested + b", 2]}")
    assert [len(item) for item in items] == [2 * depth, 1]


def test_deeply_nested_malformed_value_raises_read_error():
    with pytest.raises(JsonReadError):
        read_status(b'{"x": ' + b"[" * 5000 + b"}" * 5000 + b', "status": "Running"}')


def test_duplicate_page_properties_keep_first_occurrence():
    body = b'{"value": [1], "nextLink": "https://x/a", "value": [2, 3], "nextLink": "https://x/b"}'
    items, next_link = read_items_and_next_link(body)
    assert [bytes(item) for item in items] == [b"1"]
    assert next_link == "https://x/a"
    assert read_status(b'{"status": "A", "status": "B"}') == "A"
