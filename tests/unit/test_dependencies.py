"""Unit tests for request-level helpers."""
import pytest

from reviewhub.dependencies import parse_review_id
from reviewhub.errors import InvalidIdentifier


class TestParseReviewId:
    @pytest.mark.parametrize("raw, expected", [("1", 1), ("42", 42), ("007", 7)])
    def test_digits(self, raw, expected):
        assert parse_review_id(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "", " 7 ", "1_000", "-3", "4.0", "７"])
    def test_rejected(self, raw):
        with pytest.raises(InvalidIdentifier):
            parse_review_id(raw)
