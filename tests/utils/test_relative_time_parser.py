"""Tests for the relative time parser"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from util.time_parsers import RelativeTimeParser, RelativeTimeToken
from util.time_parsers.relative import TOKEN_OFFSET, TOKEN_PRECISION


def resolve(text, now, is_start=True, tz=timezone.utc):
    parser = RelativeTimeParser()
    assert parser.parse(text), f"'{text}' should parse"
    return parser.get_datetime(is_start, tz, now)


class TestRelativeTimeParse:
    """Tests for RelativeTimeParser.parse"""

    @pytest.mark.parametrize(
        "text",
        ["now", "now-1h", "now+1h", "now/d", "now-7d/d", "now/w-1w", "now-30", "now-1M/M-1y"],
    )
    def test_valid_expressions(self, text):
        """Test accepted relative time expressions"""
        assert RelativeTimeParser().parse(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Now",
            "now-",
            "now/",
            "now-1x",
            "now-1.5h",
            "now 1h",
            "now -1h",
            "now//d",
            "now/dd",
            "yesterday",
            "2024-05-01",
            "now-１h",
            "now-1٠d",
            "now+٣",
        ],
    )
    def test_invalid_expressions(self, text):
        """Test rejected relative time expressions"""
        assert RelativeTimeParser().parse(text) is False

    def test_tokens(self):
        """Test the tokens of a parsed expression"""
        parser = RelativeTimeParser()
        parser.parse("now-30m/h+2")

        assert parser.tokens == [
            RelativeTimeToken(type=TOKEN_OFFSET, sign="-", value=30, suffix="m"),
            RelativeTimeToken(type=TOKEN_PRECISION, suffix="h"),
            RelativeTimeToken(type=TOKEN_OFFSET, sign="+", value=2, suffix="s"),
        ]

    def test_now_has_no_tokens(self):
        """Test that plain 'now' has no tokens"""
        parser = RelativeTimeParser()
        parser.parse("now")

        assert parser.tokens == []

    def test_sub_day_tokens(self):
        """Test sub-day detection of tokens"""
        parser = RelativeTimeParser()
        parser.parse("now-1d/h-1M")

        assert [token.is_sub_day for token in parser.tokens] == [False, True, False]


class TestRelativeTimeGetDatetime:
    """Tests for RelativeTimeParser.get_datetime"""

    def test_now(self, now):
        """Test that 'now' resolves to the reference time"""
        assert resolve("now", now) == now

    def test_now_drops_microseconds(self, now):
        """Test that resolution is one second"""
        assert resolve("now", now.replace(microsecond=123456)) == now

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("now-30", datetime(2024, 5, 15, 13, 45, 0, tzinfo=timezone.utc)),
            ("now-15m", datetime(2024, 5, 15, 13, 30, 30, tzinfo=timezone.utc)),
            ("now-1h", datetime(2024, 5, 15, 12, 45, 30, tzinfo=timezone.utc)),
            ("now+1h", datetime(2024, 5, 15, 14, 45, 30, tzinfo=timezone.utc)),
            ("now-7d", datetime(2024, 5, 8, 13, 45, 30, tzinfo=timezone.utc)),
            ("now-2w", datetime(2024, 5, 1, 13, 45, 30, tzinfo=timezone.utc)),
            ("now-1M", datetime(2024, 4, 15, 13, 45, 30, tzinfo=timezone.utc)),
            ("now-1y", datetime(2023, 5, 15, 13, 45, 30, tzinfo=timezone.utc)),
        ],
    )
    def test_offsets(self, now, text, expected):
        """Test offset tokens"""
        assert resolve(text, now) == expected

    @pytest.mark.parametrize(
        "text, start, end",
        [
            (
                "now/m",
                datetime(2024, 5, 15, 13, 45, 0, tzinfo=timezone.utc),
                datetime(2024, 5, 15, 13, 45, 59, tzinfo=timezone.utc),
            ),
            (
                "now/h",
                datetime(2024, 5, 15, 13, 0, 0, tzinfo=timezone.utc),
                datetime(2024, 5, 15, 13, 59, 59, tzinfo=timezone.utc),
            ),
            (
                "now/d",
                datetime(2024, 5, 15, tzinfo=timezone.utc),
                datetime(2024, 5, 15, 23, 59, 59, tzinfo=timezone.utc),
            ),
            (
                "now/w",
                datetime(2024, 5, 13, tzinfo=timezone.utc),
                datetime(2024, 5, 19, 23, 59, 59, tzinfo=timezone.utc),
            ),
            (
                "now/M",
                datetime(2024, 5, 1, tzinfo=timezone.utc),
                datetime(2024, 5, 31, 23, 59, 59, tzinfo=timezone.utc),
            ),
            (
                "now/y",
                datetime(2024, 1, 1, tzinfo=timezone.utc),
                datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
            ),
        ],
    )
    def test_precision(self, now, text, start, end):
        """Test rounding to the start and the end of a unit"""
        assert resolve(text, now, is_start=True) == start
        assert resolve(text, now, is_start=False) == end

    def test_tokens_apply_left_to_right(self, now):
        """Test combined offset and precision tokens"""
        assert resolve("now-7d/d", now) == datetime(2024, 5, 8, tzinfo=timezone.utc)
        assert resolve("now/w-1w", now) == datetime(2024, 5, 6, tzinfo=timezone.utc)
        assert resolve("now/y-1y", now) == datetime(2023, 1, 1, tzinfo=timezone.utc)

    def test_month_offset_clamps_to_month_end(self):
        """Test that month arithmetic stays within the target month"""
        now = datetime(2024, 3, 31, 10, 0, 0, tzinfo=timezone.utc)

        assert resolve("now-1M", now) == datetime(2024, 2, 29, 10, 0, 0, tzinfo=timezone.utc)

    def test_day_offset_follows_wall_clock_across_dst(self):
        """Test that day offsets keep the local time of day across a DST change"""
        riga = ZoneInfo("Europe/Riga")
        now = datetime(2024, 3, 31, 12, 0, 0, tzinfo=riga)

        assert resolve("now-1d", now, tz=riga) == datetime(2024, 3, 30, 12, 0, 0, tzinfo=riga)

    def test_hour_offset_follows_elapsed_time_across_dst(self):
        """Test that hour offsets move by elapsed time across a DST change"""
        riga = ZoneInfo("Europe/Riga")
        now = datetime(2024, 3, 31, 12, 0, 0, tzinfo=riga)

        resolved = resolve("now-24h", now, tz=riga)

        assert resolved == datetime(2024, 3, 30, 11, 0, 0, tzinfo=riga)
        assert now.timestamp() - resolved.timestamp() == 24 * 3600

    def test_default_reference_time(self):
        """Test that the current time is used without an explicit reference"""
        parser = RelativeTimeParser()
        parser.parse("now")

        before = datetime.now(timezone.utc).replace(microsecond=0)
        resolved = parser.get_datetime(True)
        after = datetime.now(timezone.utc)

        assert before <= resolved <= after

    @pytest.mark.parametrize(
        "text, error", [("now-9999y", ValueError), ("now-99999999999999h", OverflowError)]
    )
    def test_offset_out_of_range(self, now, text, error):
        """Test that offsets beyond the representable dates raise"""
        parser = RelativeTimeParser()
        assert parser.parse(text)

        with pytest.raises(error):
            parser.get_datetime(True, timezone.utc, now)

    def test_get_datetime_without_parse(self):
        """Test that get_datetime requires a successful parse"""
        with pytest.raises(ValueError) as exc_info:
            RelativeTimeParser().get_datetime(True)

        assert "No relative time expression has been parsed" in str(exc_info.value)
