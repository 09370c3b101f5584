from cwa_weather.ingestion.normalize import Condition
from cwa_weather.ingestion.records import build_records, build_station_records, station_id_of


def test_stormy_hour_end_to_end(make_location, make_hour):
    block = make_location(
        "C0A520",
        [
            make_hour(
                "2026-02-23T02:00:00+08:00",
                Precipitation="12.5",
                RelativeHumidity="95",
                AirTemperature="21.3",
                WindDirection="東,E",
            )
        ],
    )
    rows = build_station_records(block, "C0A520")
    assert len(rows) == 1
    row = rows[0]
    assert row.station_id == "C0A520"
    assert row.date == "2026-02-23T02:00:00+08:00"
    assert row.condition is Condition.STORMY
    assert row.wind_dir == 90.0
    assert row.avg_temp == row.min_temp == row.max_temp == 21.3
    # elements not reported stay null rather than zero
    assert row.pressure is None
    assert row.sunshine is None
    assert row.wind_speed is None


def test_calm_wind_is_null(make_location, make_hour):
    block = make_location("C0A520", [make_hour("2026-02-23T03:00:00+08:00", WindDirection="X,X")])
    (row,) = build_station_records(block, "C0A520")
    assert row.wind_dir is None
    assert row.to_row()["wind_dir"] is None


def test_hours_without_time_or_elements_are_skipped(make_location, make_hour):
    hours = [
        {"weatherElements": {"AirTemperature": "20.0"}},
        {"DateTime": "", "weatherElements": {"AirTemperature": "20.0"}},
        {"DateTime": "2026-02-23T01:00:00+08:00"},
        make_hour("2026-02-23T02:00:00+08:00", AirTemperature="20.5"),
        make_hour("2026-02-23T03:00:00+08:00", AirTemperature="19.5"),
    ]
    rows = build_station_records(make_location("C0A520", hours), "C0A520")
    assert [r.date for r in rows] == ["2026-02-23T02:00:00+08:00", "2026-02-23T03:00:00+08:00"]
    assert [r.avg_temp for r in rows] == [20.5, 19.5]


def test_to_row_uses_storage_columns(cwa_payload):
    row = build_records(cwa_payload)[0].to_row()
    assert set(row) == {
        "station_id", "date", "avg_temp", "min_temp", "max_temp", "precipitation",
        "humidity", "wind_speed", "wind_dir", "pressure", "sunshine", "condition",
    }
    assert row["condition"] == "Cloudy"


def test_build_records_orders_by_location_then_hour(cwa_payload):
    rows = build_records(cwa_payload)
    assert [(r.station_id, r.date) for r in rows] == [
        ("C0A520", "2026-02-23T01:00:00+08:00"),
        ("C0A520", "2026-02-23T02:00:00+08:00"),
        ("466920", "2026-02-23T01:00:00+08:00"),
    ]
    # sentinel readings become null
    assert rows[1].sunshine is None
    assert rows[2].avg_temp is None
    assert rows[2].condition is Condition.RAINY


def test_station_id_resolution():
    assert station_id_of({"station": {"StationID": "C0A520"}}) == "C0A520"
    assert station_id_of({"stationId": "466920"}) == "466920"
    assert station_id_of({"station": {}, "stationId": "466920"}) == "466920"
    assert station_id_of({"station": {"StationName": "x"}}) is None


def test_locations_without_station_are_skipped(make_payload, make_location, make_hour):
    orphan = {"stationObsTimes": {"stationObsTime": [make_hour("2026-02-23T01:00:00+08:00")]}}
    payload = make_payload([orphan, make_location("C0A520", [make_hour("2026-02-23T01:00:00+08:00")])])
    rows = build_records(payload)
    assert [r.station_id for r in rows] == ["C0A520"]


def test_empty_payloads_build_nothing(make_payload):
    assert build_records(make_payload([])) == []
    assert build_records({}) == []
    assert build_records({"records": {}}) == []
