from datetime import datetime

import pytest

from jobboard_api.errors import InvalidInput
from jobboard_api.models import JobStatus
from jobboard_api.services.jobs import (
    coerce_bool,
    coerce_budget,
    coerce_deadline,
    coerce_status,
    normalize_tags,
)


class TestNormalizeTags:
    def test_comma_string_matches_pre_split_list(self):
        assert normalize_tags(" python ,fastapi,  sql ") == normalize_tags(["python", "fastapi", "sql"])

    def test_json_array_string(self):
        assert normalize_tags('["python", " sql "]') == ["python", "sql"]

    def test_dedupes_keeping_first_occurrence(self):
        assert normalize_tags("b, a, b, a") == ["b", "a"]

    def test_drops_empty_entries(self):
        assert normalize_tags("a,, ,b,") == ["a", "b"]

    def test_list_items_are_split_too(self):
        # a single form field holding a delimited string arrives as a one item list
        assert normalize_tags(["python, fastapi"]) == ["python", "fastapi"]

    def test_none_is_empty(self):
        assert normalize_tags(None) == []

    def test_malformed_json_array(self):
        with pytest.raises(InvalidInput):
            normalize_tags("[not json]")

    def test_json_nulls_are_skipped(self):
        assert normalize_tags('["a", null, "b"]') == ["a", "b"]

    def test_json_non_string_tags(self):
        with pytest.raises(InvalidInput):
            normalize_tags('["a", 3]')


class TestCoercion:
    @pytest.mark.parametrize("raw,expected", [("true", True), ("TRUE", True), ("1", True), ("false", False), ("", False), (None, False), (True, True)])
    def test_coerce_bool(self, raw, expected):
        assert coerce_bool(raw) is expected

    def test_coerce_bool_rejects_garbage(self):
        with pytest.raises(InvalidInput):
            coerce_bool("maybe")

    def test_coerce_budget(self):
        assert coerce_budget("1500.50") == 1500.5
        assert coerce_budget(None) is None
        assert coerce_budget("  ") is None
        with pytest.raises(InvalidInput):
            coerce_budget("lots")

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "Infinity", float("nan")])
    def test_coerce_budget_rejects_non_finite(self, raw):
        with pytest.raises(InvalidInput):
            coerce_budget(raw)

    def test_deadline_date_only_is_midnight_utc(self):
        assert coerce_deadline("2030-01-15") == datetime(2030, 1, 15)

    def test_deadline_with_offset_is_converted_to_utc(self):
        assert coerce_deadline("2030-01-15T10:00:00+10:00") == datetime(2030, 1, 15, 0, 0)

    def test_deadline_zulu_suffix(self):
        assert coerce_deadline("2030-01-15T10:00:00Z") == datetime(2030, 1, 15, 10, 0)

    def test_deadline_invalid(self):
        with pytest.raises(InvalidInput):
            coerce_deadline("next tuesday")
        with pytest.raises(InvalidInput):
            coerce_deadline("")

    def test_status(self):
        assert coerce_status("filled") is JobStatus.FILLED
        with pytest.raises(InvalidInput):
            coerce_status("archived")
