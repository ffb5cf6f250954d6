"""Tests for request body cleanup and debug formatting helpers."""

import logging
from dataclasses import dataclass

from bluefox_email.utils import (
    UNSET,
    format_debug,
    log_debug,
    redact_headers,
    strip_undefined_keys,
)


# =============================================================================
# strip_undefined_keys
# =============================================================================

def test_strip_removes_only_unset_values():
    body = {'a': 1, 'b': UNSET, 'c': None, 'd': 0, 'e': False, 'f': ''}

    assert strip_undefined_keys(body) == {'a': 1, 'c': None, 'd': 0, 'e': False, 'f': ''}


def test_strip_returns_copy():
    body = {'a': 1, 'b': UNSET}

    cleaned = strip_undefined_keys(body)

    assert 'b' in body
    assert cleaned is not body


def test_strip_leaves_lists_and_nested_values_untouched():
    assert strip_undefined_keys([1, UNSET]) == [1, UNSET]
    assert strip_undefined_keys({'nested': {'x': UNSET}}) == {'nested': {'x': UNSET}}


def test_unset_is_falsy_singleton():
    assert not UNSET
    assert repr(UNSET) == 'UNSET'
    assert type(UNSET)() is UNSET


# =============================================================================
# format_debug
# =============================================================================

def test_format_nested_containers():
    assert format_debug({'a': [1, 2], 'name': 'x'}) == "Object {a: Array(2) [1, 2], name: 'x'}"


def test_format_marks_circular_references():
    data = {}
    data['self'] = data

    assert format_debug(data) == "Object {self: [Circular]}"


def test_format_repeated_reference_is_not_circular():
    shared = [1]

    assert format_debug({'a': shared, 'b': shared}) == "Object {a: Array(1) [1], b: Array(1) [1]}"


def test_format_truncates_deep_nesting():
    assert format_debug({'a': {'b': 1}}, max_depth=1) == "Object {a: Object {b: [Truncated]}}"


def test_format_dataclass_exception_and_function():
    @dataclass
    class Point:
        x: int
        y: int

    def handler():
        pass

    assert format_debug(Point(1, 2)) == "Point {x: 1, y: 2}"
    assert format_debug(ValueError("bad")) == "Error(ValueError): bad"
    assert format_debug(handler) == "Function(handler)"


def test_log_debug_writes_labelled_line(caplog):
    with caplog.at_level(logging.DEBUG, logger='bluefox_email.utils'):
        log_debug("SubscriberAdd.Input", {'email': 'john@example.com'})

    assert "[SubscriberAdd.Input] - Object {email: 'john@example.com'}" in caplog.text


# =============================================================================
# redact_headers
# =============================================================================

def test_redact_headers_masks_authorization_case_insensitively():
    headers = {'authorization': 'Bearer secret', 'X-Trace': '1'}

    redacted = redact_headers(headers)

    assert redacted == {'authorization': 'Bearer [REDACTED]', 'X-Trace': '1'}
    assert headers['authorization'] == 'Bearer secret'
