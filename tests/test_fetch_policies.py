"""Tests for date-range chunking and the degrading-limit retry policy."""

import asyncio
from datetime import date

import pytest

from netops.fetch.chunking import DateChunk, FetchError, date_chunks, fetch_chunked, parse_iso_date
from netops.fetch.degrade import DEFAULT_LIMITS, fetch_with_degrading_limit
from netops.remote.client import RemoteError
from netops.rpc import gis, traffic
from netops.rpc.common import FilterState


def _timeout():
    return RemoteError("canceling statement due to statement timeout", code="57014")


# ---------------------------------------------------------------------------
# Chunk planning
# ---------------------------------------------------------------------------

class TestDateChunks:
    def test_twenty_days_in_weeks(self):
        """A 20-day range splits into chunks of 7, 7 and 6 days."""
        chunks = date_chunks("2024-01-01", "2024-01-20", 7)
        assert [c.days for c in chunks] == [7, 7, 6]
        assert [c.as_iso() for c in chunks] == [
            ("2024-01-01", "2024-01-07"),
            ("2024-01-08", "2024-01-14"),
            ("2024-01-15", "2024-01-20"),
        ]

    def test_contiguous_cover(self):
        """Chunks cover the range exactly with no gap or overlap."""
        chunks = date_chunks("2024-02-25", "2024-03-31", 7)
        assert chunks[0].start == date(2024, 2, 25)
        assert chunks[-1].end == date(2024, 3, 31)
        for prev, nxt in zip(chunks, chunks[1:]):
            assert (nxt.start - prev.end).days == 1
        assert sum(c.days for c in chunks) == 36

    def test_single_day(self):
        assert date_chunks("2024-05-05", "2024-05-05") == [DateChunk(date(2024, 5, 5), date(2024, 5, 5))]

    @pytest.mark.parametrize("date_from, date_to", [
        (None, "2024-01-10"),
        ("2024-01-10", ""),
        ("2024-01-10", "2024-01-01"),
        ("not-a-date", "2024-01-10"),
    ])
    def test_missing_or_reversed_range(self, date_from, date_to):
        """Missing, unparseable or reversed bounds plan no chunks."""
        assert date_chunks(date_from, date_to) == []

    def test_rejects_zero_days(self):
        with pytest.raises(ValueError):
            date_chunks("2024-01-01", "2024-01-10", 0)

    def test_parse_iso_date_cuts_timestamps(self):
        assert parse_iso_date("2024-03-09T10:00:00Z") == date(2024, 3, 9)
        assert parse_iso_date("2024-13-01") is None


# ---------------------------------------------------------------------------
# Chunked fetch
# ---------------------------------------------------------------------------

def _args(start, end):
    return {"in_date_from": start, "in_date_to": end, "in_subregion": None}


class TestFetchChunked:
    def test_one_call_per_chunk_and_sorted_merge(self, remote):
        """Each chunk is one call; the merged rows come back in date order."""
        remote.script(
            "rpc_traffic_daily",
            [{"date": "2024-01-07"}, {"date": "2024-01-01"}],
            [{"date": "2024-01-14"}, {"date": "2024-01-08"}],
            [{"date": "2024-01-15"}],
        )
        rows = asyncio.run(fetch_chunked(remote, "rpc_traffic_daily", "2024-01-01", "2024-01-20", _args))

        assert [c["in_date_from"] for c in remote.calls_to("rpc_traffic_daily")] == [
            "2024-01-01", "2024-01-08", "2024-01-15",
        ]
        assert [r["date"] for r in rows] == [
            "2024-01-01", "2024-01-07", "2024-01-08", "2024-01-14", "2024-01-15",
        ]

    def test_missing_range_makes_no_call(self, remote):
        """Without a full range nothing is fetched."""
        assert asyncio.run(fetch_chunked(remote, "rpc_traffic_daily", None, "2024-01-20", _args)) == []
        assert remote.calls == []

    def test_failed_chunk_aborts(self, remote):
        """The first failing chunk raises FetchError and later chunks are not requested."""
        remote.script(
            "rpc_traffic_daily",
            [{"date": "2024-01-01"}],
            RemoteError("permission denied", code="42501"),
            [{"date": "2024-01-15"}],
        )
        with pytest.raises(FetchError) as exc_info:
            asyncio.run(fetch_chunked(remote, "rpc_traffic_daily", "2024-01-01", "2024-01-20", _args))

        assert str(exc_info.value) == "[42501] permission denied"
        assert exc_info.value.fn == "rpc_traffic_daily"
        assert len(remote.calls_to("rpc_traffic_daily")) == 2

    def test_traffic_daily_uses_chunks_and_defaults(self, remote):
        """Traffic rows default missing numbers to 0 and cut dates to YYYY-MM-DD."""
        remote.script(
            "rpc_traffic_daily",
            [{"date": "2024-01-02T00:00:00", "total_gb": "12.5", "voice_erl": None}],
        )
        rows = asyncio.run(traffic.fetch_traffic_daily(remote, "2024-01-01", "2024-01-03", "North-1"))

        assert remote.calls_to("rpc_traffic_daily") == [
            {"in_date_from": "2024-01-01", "in_date_to": "2024-01-03", "in_subregion": "North-1"}
        ]
        assert rows[0].date == "2024-01-02"
        assert rows[0].total_gb == 12.5
        assert rows[0].voice_erl == 0.0
        assert rows[0].data_4g_gb == 0.0


# ---------------------------------------------------------------------------
# Degrading limit
# ---------------------------------------------------------------------------

class _Attempts:
    """Scripted attempt function recording the caps it was called with."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.limits = []

    async def __call__(self, limit):
        self.limits.append(limit)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class TestDegradingLimit:
    def test_default_caps(self):
        assert DEFAULT_LIMITS == (1500, 200, 100)

    def test_first_cap_succeeds(self):
        attempt = _Attempts([{"id": 1}])
        assert asyncio.run(fetch_with_degrading_limit(attempt)) == [{"id": 1}]
        assert attempt.limits == [1500]

    def test_timeout_moves_to_smaller_cap(self):
        """A statement timeout retries with the next cap."""
        attempt = _Attempts(_timeout(), [{"id": 2}])
        assert asyncio.run(fetch_with_degrading_limit(attempt)) == [{"id": 2}]
        assert attempt.limits == [1500, 200]

    def test_all_caps_time_out(self):
        """Exhausting every cap yields an empty result, not an error."""
        attempt = _Attempts(_timeout(), _timeout(), _timeout())
        assert asyncio.run(fetch_with_degrading_limit(attempt)) == []
        assert attempt.limits == [1500, 200, 100]

    def test_other_error_stops_immediately(self):
        """A non-timeout error returns [] without trying smaller caps."""
        attempt = _Attempts(RemoteError("relation does not exist", code="42P01"), [{"id": 3}])
        assert asyncio.run(fetch_with_degrading_limit(attempt)) == []
        assert attempt.limits == [1500]

    def test_client_timeout_counts_as_timeout(self):
        attempt = _Attempts(RemoteError("timed out", code="TIMEOUT"), [])
        asyncio.run(fetch_with_degrading_limit(attempt))
        assert attempt.limits == [1500, 200]


class TestSslPoints:
    def test_degrades_and_defaults_subregion(self, remote):
        """Map points retry with smaller caps and default to sub-region North-1."""
        remote.script(
            "fetch_ssl_points",
            _timeout(),
            _timeout(),
            [{"site_id": 101, "latitude": 33.7, "longitude": 73.0}],
        )
        points = asyncio.run(gis.fetch_ssl_points(remote, FilterState()))

        calls = remote.calls_to("fetch_ssl_points")
        assert [c["_limit"] for c in calls] == [1500, 200, 100]
        assert all(c["_subregion"] == "North-1" for c in calls)
        assert points[0].site_id == "101"

    def test_explicit_subregion(self, remote):
        asyncio.run(gis.fetch_ssl_points(remote, FilterState(subregion="South-2")))
        assert remote.calls_to("fetch_ssl_points")[0]["_subregion"] == "South-2"
