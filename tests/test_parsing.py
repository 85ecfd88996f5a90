"""
Tests for the text-facing components: sequence parser, matter parser, normalizer.

All deterministic — no network, no clock.

Run: pytest tests/ -v
"""

from __future__ import annotations

import copy

import pytest
from pydantic import ValidationError

from noticeboard.exceptions import MatterParseError, UpstreamFormatError
from noticeboard.matters import normalize_court, parse_matter, parse_matters
from noticeboard.models import Matter, UpstreamPayload, UpstreamRow
from noticeboard.normalizer import (
    board_order,
    build_ticker,
    clean_court_name,
    court_id_for,
    normalize,
    normalize_row,
    parse_current_item,
)
from noticeboard.sequence_parser import (
    DEFAULT_VOCABULARY,
    ONWARDS_CAP,
    SequenceVocabulary,
    clean_message,
    parse_sequence,
)


# ═══════════════════════════════════════════════════════════════════════
# SEQUENCE PARSER
# ═══════════════════════════════════════════════════════════════════════


class TestParseSequence:
    def test_ascending_range(self):
        assert parse_sequence("5 TO 8") == [5, 6, 7, 8]

    def test_descending_range(self):
        assert parse_sequence("5 TO 1") == [5, 4, 3, 2, 1]

    def test_descending_range_keeps_order_after_other_items(self):
        assert parse_sequence("2, 15 to 12") == [2, 15, 14, 13, 12]

    def test_single_item_range(self):
        assert parse_sequence("7 to 7") == [7]

    def test_onwards_expands_to_cap(self):
        result = parse_sequence("20 ONWARDS")
        assert result[0] == 20
        assert result[-1] == ONWARDS_CAP
        assert result == list(range(20, 5001))

    def test_onwards_above_cap_is_empty(self):
        assert parse_sequence("6000 onwards") == []

    def test_lone_numbers(self):
        assert parse_sequence("3 9 1") == [3, 9, 1]

    def test_empty_message(self):
        assert parse_sequence("") == []

    def test_none_message(self):
        assert parse_sequence(None) == []

    def test_words_only(self):
        assert parse_sequence("random words only") == []

    def test_noise_words_stripped(self):
        msg = "Sequence would be Item Nos. 10 to 12, thereafter 15 and 17"
        assert parse_sequence(msg) == [10, 11, 12, 15, 17]

    def test_fresh_and_passover_stripped(self):
        msg = "Fresh passover 4, 6 then pass over if any 2"
        assert parse_sequence(msg) == [4, 6, 2]

    def test_court_will_sit_at_phrase_removed_to_end_of_line(self):
        msg = "COURT WILL SIT AT 2:00 PM IN COURT 4\n8 TO 10"
        assert parse_sequence(msg) == [8, 9, 10]

    def test_punctuation_separates_numbers(self):
        assert parse_sequence("(1),[2];{3}|4/5\\6@7") == [1, 2, 3, 4, 5, 6, 7]

    def test_duplicates_keep_first_occurrence(self):
        assert parse_sequence("5 TO 8, 6, 2, 8 TO 3") == [5, 6, 7, 8, 2, 4, 3]

    def test_no_duplicates_in_output(self):
        result = parse_sequence("1 to 10, 5 to 15, 3, 3, 3")
        assert len(result) == len(set(result))

    def test_to_without_end_number_keeps_start_only(self):
        assert parse_sequence("5 TO LUNCH 9") == [5, 9]

    def test_hyphenated_range_is_not_a_range(self):
        # "-" is not a separator: "5-10" is a single non-numeric token
        assert parse_sequence("5-10, 12") == [12]

    def test_lowercase_keywords(self):
        assert parse_sequence("item nos 3 to 1 then 9 onwards")[:4] == [3, 2, 1, 9]

    def test_leading_zeros(self):
        assert parse_sequence("007, 08") == [7, 8]

    def test_pure_function(self):
        msg = "1 to 3, 7"
        assert parse_sequence(msg) == parse_sequence(msg)

    def test_overlong_digit_run_is_skipped(self):
        assert parse_sequence("1 " + "9" * 5000) == [1]

    def test_range_to_overlong_end_keeps_start_only(self):
        assert parse_sequence("5 TO " + "9" * 5000) == [5]

    def test_explicit_range_is_not_capped(self):
        result = parse_sequence("1 TO 6000")
        assert len(result) == 6000
        assert result[-1] == 6000


class TestVocabulary:
    def test_clean_message_collapses_whitespace(self):
        assert clean_message("  Item Nos.  5 ,  6  ") == "5 6"

    def test_extend_adds_noise_words(self):
        vocab = DEFAULT_VOCABULARY.extend(r"LUNCH")
        # With LUNCH stripped, "5 TO 9" becomes a range
        assert parse_sequence("5 TO LUNCH 9", vocab) == [5, 6, 7, 8, 9]
        assert clean_message("5 LUNCH 9", vocab) == "5 9"

    def test_custom_onwards_cap(self):
        small = SequenceVocabulary(onwards_cap=12)
        assert parse_sequence("10 onwards", small) == [10, 11, 12]


# ═══════════════════════════════════════════════════════════════════════
# TRACKED MATTERS
# ═══════════════════════════════════════════════════════════════════════


class TestParseMatters:
    def test_basic_pairs(self):
        assert parse_matters("1/12, 3/40") == [
            Matter(court="1", item=12),
            Matter(court="3", item=40),
        ]

    def test_newline_separated(self):
        assert parse_matters("1/12\n2/5") == [
            Matter(court="1", item=12),
            Matter(court="2", item=5),
        ]

    def test_c_prefix_stripped(self):
        assert parse_matters("C1/12, c4/2") == [
            Matter(court="1", item=12),
            Matter(court="4", item=2),
        ]

    def test_robing_chambers_survive(self):
        assert parse_matters("RC1/7, rc2/3") == [
            Matter(court="RC1", item=7),
            Matter(court="RC2", item=3),
        ]

    def test_leading_zeros_dropped(self):
        assert parse_matters("007/3") == [Matter(court="7", item=3)]

    def test_whitespace_around_parts(self):
        assert parse_matters("  1 / 12 ") == [Matter(court="1", item=12)]

    def test_invalid_entries_dropped(self):
        assert parse_matters("1/abc, 2, /5, 3/4") == [Matter(court="3", item=4)]

    def test_empty_input(self):
        assert parse_matters("") == []
        assert parse_matters(None) == []
        assert parse_matters(" , \n ,") == []

    def test_parse_matter_raises_on_missing_item(self):
        with pytest.raises(MatterParseError) as exc:
            parse_matter("12")
        assert exc.value.code == "MATTER_INVALID"

    def test_normalize_court(self):
        assert normalize_court("c07") == "7"
        assert normalize_court("Rc1") == "RC1"
        assert normalize_court("12") == "12"

    def test_overlong_item_dropped(self):
        assert parse_matters("1/" + "9" * 5000 + ", 2/3") == [Matter(court="2", item=3)]

    def test_parse_matter_raises_on_overlong_item(self):
        with pytest.raises(MatterParseError):
            parse_matter("1/" + "9" * 5000)

    def test_normalize_court_without_int_conversion(self):
        assert normalize_court("000") == "0"
        assert normalize_court("0" + "7" * 5000) == "7" * 5000

    def test_matter_str(self):
        assert str(Matter(court="RC1", item=7)) == "CRC1/7"


# ═══════════════════════════════════════════════════════════════════════
# NORMALIZER
# ═══════════════════════════════════════════════════════════════════════


class TestFieldHelpers:
    def test_court_id_remaps_robing_chambers(self):
        assert court_id_for("21") == "RC1"
        assert court_id_for("22") == "RC2"
        assert court_id_for("7") == "7"

    def test_clean_court_name_strips_html(self):
        assert clean_court_name("<b>Court <i>1</i></b> ") == "Court 1"
        assert clean_court_name(None) == ""

    def test_parse_current_item(self):
        assert parse_current_item("12") == 12
        assert parse_current_item(" 7 ") == 7
        assert parse_current_item(13) == 13
        assert parse_current_item("12A") == 12

    def test_parse_current_item_non_numeric(self):
        assert parse_current_item(None) is None
        assert parse_current_item("") is None
        assert parse_current_item("--") is None

    def test_parse_current_item_overlong(self):
        assert parse_current_item("9" * 5000) is None

    def test_board_order(self):
        assert sorted(["RC1", "10", "2", "RC2", "1"], key=board_order) == [
            "1", "2", "10", "RC1", "RC2",
        ]
        assert board_order("07") == board_order("RC1")


class TestNormalize:
    def test_courts_keyed_by_court_id(self, upstream_payload):
        board = normalize(upstream_payload)
        assert list(board.courts) == ["1", "2", "RC1", "RC2"]

    def test_court_record_fields(self, upstream_payload):
        record = normalize(upstream_payload).courts["1"]
        assert record.court_id == "1"
        assert record.name == "Court No. 1"
        assert record.current == 13
        assert record.status == "HEARING"
        assert record.sequence[:5] == (10, 11, 12, 13, 14)
        assert record.sequence[5] == 30
        assert record.sequence_text.startswith("Sequence would be")
        assert record.registration == "SLP(C) No. 1234/2024"
        assert record.petitioner == "ACME LTD"
        assert record.respondent == "UNION OF INDIA"

    def test_missing_item_is_none(self, upstream_payload):
        board = normalize(upstream_payload)
        assert board.courts["2"].current is None
        assert board.courts["RC2"].current is None

    def test_robing_chamber_sequence(self, upstream_payload):
        record = normalize(upstream_payload).courts["RC1"]
        assert record.sequence == (1, 2, 4, 7)
        assert record.current == 4

    def test_updated_at_from_payload(self, upstream_payload):
        assert normalize(upstream_payload).updated_at == "2024-08-29T12:55:00+05:30"

    def test_updated_at_defaults_to_now(self):
        board = normalize({"listedItemDetails": []})
        assert board.updated_at
        assert board.courts == {}

    def test_input_not_mutated(self, upstream_payload):
        before = copy.deepcopy(upstream_payload)
        normalize(upstream_payload)
        assert upstream_payload == before

    def test_null_rows(self):
        assert normalize({"listedItemDetails": None}).courts == {}
        assert normalize(None).courts == {}

    def test_row_without_court_number_skipped(self):
        board = normalize({"listedItemDetails": [{"item_no": "3"}, {"court_no": "5"}]})
        assert list(board.courts) == ["5"]

    def test_malformed_payload_raises_format_error(self):
        with pytest.raises(UpstreamFormatError) as exc:
            normalize({"listedItemDetails": "not a list"})
        assert exc.value.code == "UPSTREAM_FORMAT_INVALID"

    def test_records_are_immutable(self, upstream_payload):
        record = normalize(upstream_payload).courts["1"]
        with pytest.raises(ValidationError):
            record.current = 99  # type: ignore[misc]

    def test_board_serializes_with_camel_case(self, upstream_payload):
        data = normalize(upstream_payload).model_dump(by_alias=True)
        assert set(data) == {"updatedAt", "tickerText", "courts"}
        assert "sequenceText" in data["courts"]["1"]
        assert data["courts"]["RC1"]["courtId"] == "RC1"

    def test_normalize_row_directly(self):
        record = normalize_row(UpstreamRow(court_no="22", item_no="5", court_message="5 6"))
        assert record is not None
        assert record.court_id == "RC2"
        assert record.sequence == (5, 6)

    def test_overlong_current_item_is_none(self):
        board = normalize({"listedItemDetails": [{"court_no": "1", "item_no": "9" * 5000}]})
        assert board.courts["1"].current is None

    def test_numeric_courts_sorted_before_named(self):
        board = normalize({
            "listedItemDetails": [
                {"court_no": "21", "court_message": "1"},
                {"court_no": "10", "court_message": "2"},
                {"court_no": "2", "court_message": "3"},
                {"court_no": "22", "court_message": "4"},
            ]
        })
        assert list(board.courts) == ["2", "10", "RC1", "RC2"]
        assert board.ticker_text == (
            "Sequence — "
            "  |  Court C2: 3  |  Court C10: 2  |  Court CRC1: 1  |  Court CRC2: 4"
        )


class TestTicker:
    def test_ticker_segments(self, upstream_payload):
        ticker = normalize(upstream_payload).ticker_text
        assert ticker == (
            "Sequence — 29 Aug @ 12:55"
            "  |  Court C1: Sequence would be Item Nos. 10 to 14, thereafter 30 onwards"
            "  |  Court CRC1: Items 1, 2, 4 and 7"
            "  |  Court CRC2: COURT NOT IN SESSION"
        )

    def test_silent_courts_contribute_nothing(self, upstream_payload):
        assert "Court C2:" not in normalize(upstream_payload).ticker_text

    def test_falls_back_to_now_timestamp(self):
        board = normalize({"now": "12:00", "listedItemDetails": []})
        assert board.ticker_text == "Sequence — 12:00"

    def test_build_ticker_without_timestamp(self):
        assert build_ticker(UpstreamPayload(), {}) == "Sequence — "
