"""Tests for the AI response sanitizer.

Coverage:
- Total-function contract (never raises, degrades to empty result)
- Code fence and JSON span extraction
- ms suffix and HTML entity repairs
- Segment coercion and filtering
- Round-trip and idempotence
"""

import json
import math

import pytest

from sponsor_detector.analyzer.sanitizer import (
    REPAIR_STEPS,
    coerce_seconds,
    extract_json_span,
    inspect_response,
    parse_float,
    repair_time_units,
    sanitize_response,
    strip_code_fences,
    unescape_html_entities,
)
from sponsor_detector.analyzer.schema import AdSegment, AnalysisResult


def segments_of(raw) -> list:
    return [seg.model_dump() for seg in sanitize_response(raw).ad_segments]


# =============================================================================
# Total-function contract
# =============================================================================


class TestNeverRaises:
    """Every input yields an AnalysisResult."""

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   \n\t ",
            "no json here at all",
            "I could not find any sponsors in this video.",
            "{",
            "}{",
            "{not: valid, json}",
            '{"adSegments": [}',
            "\x00\x01\xff garbage {\x02}",
            "{" * 5000 + "}" * 5000,
        ],
    )
    def test_non_json_text_yields_empty(self, raw):
        result = sanitize_response(raw)
        assert isinstance(result, AnalysisResult)
        assert result.ad_segments == []

    @pytest.mark.parametrize("raw", [None, 42, 3.5, b'{"adSegments": []}', ["a"], {"adSegments": []}])
    def test_non_string_input_yields_empty(self, raw):
        assert sanitize_response(raw).ad_segments == []
        assert inspect_response(raw).outcome == "not_text"

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_standard_number_literals_are_invalid_json(self, literal):
        raw = '{"adSegments":[{"start":1,"end":2,"text":"x"}],"confidence":' + literal + "}"

        report = inspect_response(raw)

        assert report.outcome == "invalid_json"
        assert report.result.ad_segments == []

    def test_deeply_nested_json_yields_empty(self):
        raw = '{"adSegments": ' + "[" * 100000 + "]" * 100000 + "}"
        assert sanitize_response(raw).ad_segments == []

    def test_ad_segments_not_a_list(self):
        report = inspect_response('{"adSegments": {"start": 1, "end": 2, "text": "x"}}')
        assert report.outcome == "bad_shape"
        assert report.result.ad_segments == []

    def test_missing_ad_segments_key(self):
        assert sanitize_response('{"segments": []}').ad_segments == []

    def test_empty_result_serializes_with_camel_case_key(self):
        assert sanitize_response("nothing").to_json() == {"adSegments": []}


# =============================================================================
# Individual pipeline steps
# =============================================================================


class TestStripCodeFences:

    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_mid_text_fence_untouched(self):
        text = 'Here you go ```json {"a": 1}``` done'
        assert strip_code_fences(text) == text


class TestExtractJsonSpan:

    def test_first_brace_to_last_brace(self):
        text = 'Sure! {"a": {"b": 1}} and also {"c": 2} thanks'
        assert extract_json_span(text) == '{"a": {"b": 1}} and also {"c": 2}'

    def test_multiline(self):
        assert extract_json_span('x\n{\n"a": 1\n}\ny') == '{\n"a": 1\n}'

    def test_no_span(self):
        assert extract_json_span("no braces") is None
        assert extract_json_span("} only closing then {") is None


class TestRepairTimeUnits:

    def test_ms_suffix_removed_from_start_and_end(self):
        span = '{"start": 12.5ms, "end": 20ms}'
        assert repair_time_units(span) == '{"start": 12.5, "end": 20}'

    def test_other_suffixes_untouched(self):
        span = '{"start": 12.5s, "end": 20sec}'
        assert repair_time_units(span) == span

    def test_other_fields_untouched(self):
        span = '{"duration": 12ms}'
        assert repair_time_units(span) == span


class TestUnescapeHtmlEntities:

    def test_single_entities(self):
        assert unescape_html_entities("it&amp;#39;s") == "it's"
        assert unescape_html_entities("say &amp;quot;hi&amp;quot;") == 'say "hi"'
        assert unescape_html_entities("salt &amp; pepper") == "salt & pepper"

    def test_repeated_entities(self):
        assert unescape_html_entities("we&amp;#39;re &amp;amp; they&amp;#39;re") == "we're &amp; they're"

    def test_triple_escaped_apostrophe_reduced_once(self):
        # Only the bare &amp; rule matches, and it runs a single pass
        assert unescape_html_entities("&amp;amp;#39;") == "&amp;#39;"

    def test_order_of_repairs(self):
        assert REPAIR_STEPS == (repair_time_units, unescape_html_entities)


class TestCoercion:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("12.5", 12.5),
            ("  7", 7.0),
            ("12.5ms", 12.5),
            ("1e2", 100.0),
            (".5", 0.5),
            ("-3", -3.0),
        ],
    )
    def test_parse_float_prefix(self, value, expected):
        assert parse_float(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", ".", "s12"])
    def test_parse_float_nan(self, value):
        assert math.isnan(parse_float(value))

    def test_coerce_rejects_non_numbers(self):
        assert math.isnan(coerce_seconds(None))
        assert math.isnan(coerce_seconds(True))
        assert math.isnan(coerce_seconds([1]))
        assert coerce_seconds(3) == 3.0


# =============================================================================
# Segment validation
# =============================================================================


class TestSegmentFiltering:

    def test_end_before_start_dropped(self):
        assert segments_of('{"adSegments":[{"start":10,"end":5,"text":"x"}]}') == []

    def test_end_equal_start_dropped(self):
        assert segments_of('{"adSegments":[{"start":10,"end":10,"text":"x"}]}') == []

    def test_negative_start_dropped(self):
        assert segments_of('{"adSegments":[{"start":-1,"end":5,"text":"x"}]}') == []

    def test_non_string_text_dropped(self):
        assert segments_of('{"adSegments":[{"start":1,"end":5,"text":42}]}') == []
        assert segments_of('{"adSegments":[{"start":1,"end":5}]}') == []

    def test_missing_numbers_dropped(self):
        assert segments_of('{"adSegments":[{"end":5,"text":"x"}]}') == []
        assert segments_of('{"adSegments":[{"start":"soon","end":5,"text":"x"}]}') == []

    def test_non_object_elements_dropped(self):
        raw = '{"adSegments":[null, 3, "x", {"start":1,"end":2,"text":"ok"}]}'
        assert segments_of(raw) == [{"start": 1.0, "end": 2.0, "text": "ok"}]

    def test_string_numbers_coerced(self):
        raw = '{"adSegments":[{"start":"12.5","end":"20","text":"Acme"}]}'
        assert segments_of(raw) == [{"start": 12.5, "end": 20.0, "text": "Acme"}]

    def test_ms_suffix_repaired_before_parse(self):
        raw = '{"adSegments":[{"start": 12.5ms, "end": 20ms, "text": "Acme"}]}'
        assert segments_of(raw) == [{"start": 12.5, "end": 20.0, "text": "Acme"}]

    def test_seconds_suffix_breaks_parse(self):
        raw = '{"adSegments":[{"start": 12.5s, "end": 20s, "text": "Acme"}]}'
        report = inspect_response(raw)
        assert report.outcome == "invalid_json"
        assert report.result.ad_segments == []

    def test_extra_fields_discarded(self):
        raw = '{"adSegments":[{"start":1,"end":2,"text":"x","confidence":0.9}]}'
        assert segments_of(raw) == [{"start": 1.0, "end": 2.0, "text": "x"}]

    def test_order_preserved_and_not_sorted(self):
        raw = json.dumps(
            {
                "adSegments": [
                    {"start": 300, "end": 360, "text": "second sponsor"},
                    {"start": 10, "end": 5, "text": "broken"},
                    {"start": 20, "end": 60, "text": "first sponsor"},
                ]
            }
        )
        report = inspect_response(raw)
        assert [seg.text for seg in report.result.ad_segments] == ["second sponsor", "first sponsor"]
        assert report.dropped == 1

    def test_infinite_values_dropped(self):
        assert segments_of('{"adSegments":[{"start":0,"end":"Infinity","text":"x"}]}') == []
        assert segments_of('{"adSegments":[{"start":0,"end":1e999,"text":"x"}]}') == []

    def test_html_entities_in_text(self):
        raw = '{"adSegments":[{"start":1,"end":2,"text":"it&amp;#39;s Acme &amp; co"}]}'
        assert segments_of(raw) == [{"start": 1.0, "end": 2.0, "text": "it's Acme & co"}]

    def test_escaped_quote_entity_breaks_json_string(self):
        # &amp;quot; becomes a raw quote inside the JSON string
        raw = '{"adSegments":[{"start":1,"end":2,"text":"say &amp;quot;hi&amp;quot;"}]}'
        assert inspect_response(raw).outcome == "invalid_json"


# =============================================================================
# Realistic model replies
# =============================================================================


class TestModelReplies:

    def test_fenced_reply_with_commentary(self):
        raw = (
            "```json\n"
            "{\n"
            '  "adSegments": [\n'
            '    {"start": 295.32, "end": 359.16, "text": "this video is sponsored by Acme"}\n'
            "  ]\n"
            "}\n"
            "```"
        )
        assert segments_of(raw) == [{"start": 295.32, "end": 359.16, "text": "this video is sponsored by Acme"}]

    def test_leading_prose_before_object(self):
        raw = 'Here is the analysis:\n{"adSegments": [{"start": 1, "end": 9, "text": "use code X"}]}'
        assert segments_of(raw) == [{"start": 1.0, "end": 9.0, "text": "use code X"}]

    def test_empty_list_reply(self):
        report = inspect_response('{"adSegments": []}')
        assert report.outcome == "ok"
        assert report.result.ad_segments == []


class TestRoundTrip:

    @pytest.fixture
    def known(self) -> AnalysisResult:
        return AnalysisResult(
            ad_segments=[
                AdSegment(start=12.5, end=40.0, text="this video is sponsored by Acme"),
                AdSegment(start=295.32, end=359.16, text="use code ACME"),
            ]
        )

    def test_serialized_result_parses_back(self, known):
        assert sanitize_response(json.dumps(known.to_json())) == known

    def test_fenced_serialized_result_parses_back(self, known):
        raw = "```json\n" + json.dumps(known.to_json(), indent=2) + "\n```"
        assert sanitize_response(raw) == known

    def test_idempotent(self):
        raw = '{"adSegments":[{"start":"3","end":9,"text":"a"},{"start":9,"end":3,"text":"b"}]}'
        once = sanitize_response(raw)
        twice = sanitize_response(json.dumps(once.to_json()))
        assert once == twice
        assert [seg.text for seg in twice.ad_segments] == ["a"]
