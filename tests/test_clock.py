from datetime import datetime, timezone

from moodbite.core.clock import describe_local_time, local_now


def test_describe_local_time_uses_twelve_hour_clock() -> None:
    assert describe_local_time(datetime(2026, 10, 19, 0, 5)) == "Monday 12:05 AM"
    assert describe_local_time(datetime(2026, 10, 18, 19, 30)) == "Sunday 7:30 PM"


def test_local_now_falls_back_to_utc_for_unknown_zone() -> None:
    assert local_now("Not/AZone").tzinfo == timezone.utc
    assert local_now("America/Los_Angeles").tzinfo is not None
