import datetime as dt
import os
import tempfile
import unittest

from cwa_weather.config import AppSettings
from cwa_weather.errors import ConfigurationError, WriteChunkError
from cwa_weather.ingestion.storage import CONFLICT_KEYS, SqlWeatherStore, build_store, require_store


def _row(station_id: str, date: str, temp: float = 20.0, condition: str = "Sunny") -> dict:
    return {
        "station_id": station_id,
        "date": date,
        "avg_temp": temp,
        "min_temp": temp,
        "max_temp": temp,
        "precipitation": 0.0,
        "humidity": 60.0,
        "wind_speed": 1.5,
        "wind_dir": None,
        "pressure": 1012.0,
        "sunshine": 0.3,
        "condition": condition,
    }


def _hourly_dates(n: int, start: dt.datetime) -> list:
    tz = dt.timezone(dt.timedelta(hours=8))
    base = start.replace(tzinfo=tz)
    return [(base + dt.timedelta(hours=i)).isoformat() for i in range(n)]


class TestSqlWeatherStore(unittest.TestCase):
    def setUp(self) -> None:
        # Use a temporary sqlite file to avoid in-memory connection scoping issues
        self._tmpdir = tempfile.TemporaryDirectory()
        url = f"sqlite:///{os.path.join(self._tmpdir.name, 'test.db')}"
        self.store = SqlWeatherStore.from_url(url)

    def tearDown(self) -> None:
        self.store.engine.dispose()
        self._tmpdir.cleanup()

    def test_upsert_and_select_round_trip(self) -> None:
        n = self.store.upsert([_row("C0A520", "2026-02-23T01:00:00+08:00", 18.4)], CONFLICT_KEYS)
        self.assertEqual(n, 1)
        rows = self.store.select({}, order_by="date", descending=True, limit=10)
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["station_id"], "C0A520")
        self.assertEqual(rows[0]["date"], "2026-02-23T01:00:00+08:00")
        self.assertAlmostEqual(rows[0]["avg_temp"], 18.4, places=6)
        self.assertIsNone(rows[0]["wind_dir"])

    def test_reupsert_overwrites_same_key(self) -> None:
        date = "2026-02-23T01:00:00+08:00"
        self.store.upsert([_row("C0A520", date, 18.4), _row("466920", date, 15.0)], CONFLICT_KEYS)
        self.store.upsert([_row("C0A520", date, 25.0, condition="Rainy")], CONFLICT_KEYS)

        rows = self.store.select({"station_id": "C0A520"}, order_by="date", descending=True, limit=10)
        self.assertEqual(len(rows), 1)
        self.assertAlmostEqual(rows[0]["avg_temp"], 25.0, places=6)
        self.assertEqual(rows[0]["condition"], "Rainy")
        other = self.store.select({"station_id": "466920"}, order_by="date", descending=True, limit=10)
        self.assertAlmostEqual(other[0]["avg_temp"], 15.0, places=6)

    def test_select_filters_orders_and_limits(self) -> None:
        dates = _hourly_dates(250, dt.datetime(2026, 1, 1))
        for station in ["A", "B", "C", "D"]:
            rows = [_row(station, d) for d in dates]
            for start in range(0, len(rows), 100):
                self.store.upsert(rows[start:start + 100], CONFLICT_KEYS)

        out = self.store.select({}, order_by="date", descending=True, limit=720)
        self.assertEqual(len(out), 720)
        got = [r["date"] for r in out]
        self.assertListEqual(got, sorted(got, reverse=True))
        self.assertEqual(got[0], dates[-1])

        only_b = self.store.select({"station_id": "B"}, order_by="date", descending=True, limit=720)
        self.assertEqual(len(only_b), 250)
        self.assertTrue(all(r["station_id"] == "B" for r in only_b))

    def test_rejected_chunk_raises_write_chunk_error(self) -> None:
        bad = _row("C0A520", "2026-02-23T01:00:00+08:00")
        bad["condition"] = None
        with self.assertRaises(WriteChunkError) as ctx:
            self.store.upsert([bad, _row("C0A520", "2026-02-23T02:00:00+08:00")], CONFLICT_KEYS)
        self.assertEqual(ctx.exception.rows, 2)
        # whole chunk rolled back
        self.assertEqual(self.store.select({}, "date", True, 10), [])

    def test_empty_upsert_is_noop(self) -> None:
        self.assertEqual(self.store.upsert([], CONFLICT_KEYS), 0)


class TestBuildStore(unittest.TestCase):
    def test_unconfigured_settings_yield_no_store(self) -> None:
        self.assertIsNone(build_store(AppSettings(database_url=None)))
        self.assertIsNone(build_store(AppSettings(database_url="postgresql://YOUR_USER@host/db")))

    def test_require_store_raises_configuration_error(self) -> None:
        with self.assertRaises(ConfigurationError):
            require_store(None)

    def test_configured_settings_create_tables(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = build_store(AppSettings(database_url=f"sqlite:///{os.path.join(td, 'w.db')}"))
            self.assertIsInstance(store, SqlWeatherStore)
            self.assertEqual(store.select({}, "date", True, 5), [])
            store.engine.dispose()


if __name__ == "__main__":
    unittest.main()
