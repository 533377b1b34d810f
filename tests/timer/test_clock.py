import unittest
from datetime import UTC, datetime, timedelta, timezone

from chess_timer.timer.clock import elapsed_seconds, format_duration, from_iso, round_half_up, to_iso


class ClockTests(unittest.TestCase):
    def test_elapsed_seconds_floors_milliseconds(self) -> None:
        start = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)
        self.assertEqual(0, elapsed_seconds(start, start + timedelta(milliseconds=999)))
        self.assertEqual(1, elapsed_seconds(start, start + timedelta(milliseconds=1000)))
        self.assertEqual(90_061, elapsed_seconds(start, start + timedelta(days=1, hours=1, minutes=1, seconds=1.5)))

    def test_iso_round_trip_normalises_to_utc(self) -> None:
        local = datetime(2026, 1, 1, 14, 30, 0, 123456, tzinfo=timezone(timedelta(hours=2)))
        text = to_iso(local)
        self.assertEqual("2026-01-01T12:30:00.123+00:00", text)
        self.assertEqual(datetime(2026, 1, 1, 12, 30, 0, 123000, tzinfo=UTC), from_iso(text))
        self.assertIsNone(from_iso(None))

    def test_naive_timestamps_are_read_as_utc(self) -> None:
        self.assertEqual(datetime(2026, 1, 1, tzinfo=UTC), from_iso("2026-01-01T00:00:00"))

    def test_format_duration(self) -> None:
        self.assertEqual("45 seconds", format_duration(45))
        self.assertEqual("1 minute", format_duration(60))
        self.assertEqual("1 minute", format_duration(89))
        self.assertEqual("2 minutes", format_duration(90))
        self.assertEqual("1 hour", format_duration(3600))
        self.assertEqual("2 hours", format_duration(7200))
        self.assertEqual("1h 30m", format_duration(5400))
        self.assertEqual("3 minutes", format_duration(150))

    def test_round_half_up(self) -> None:
        self.assertEqual(1, round_half_up(0.5))
        self.assertEqual(3, round_half_up(2.5))
        self.assertEqual(2, round_half_up(2.49))
        self.assertEqual(-12, round_half_up(-12.5))


if __name__ == "__main__":
    unittest.main()
