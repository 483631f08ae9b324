"""Tests for the USGS feed fetchers."""

from __future__ import annotations

import responses
from requests.exceptions import ConnectionError as RequestsConnectionError

from hazard_relay.fetchers.usgs import (
    fetch_earthquakes,
    fetch_tsunami_alerts,
    parse_earthquakes,
    parse_tsunami_alerts,
)
from hazard_relay.models import EarthquakeEvent

FEED_URL = "https://feed.test/all_day.geojson"


class TestParseEarthquakes:
    def test_sorted_newest_first(self, sample_features):
        result = parse_earthquakes(sample_features)
        times = [eq.time for eq in result]
        assert times == sorted(times, reverse=True)
        assert [eq.id for eq in result] == [
            "us7000aaaa",
            "us7000cccc",
            "ci40000001",
            "nc0000dddd",
            "us7000bbbb",
            "us7000eeee",
        ]

    def test_every_feature_mapped(self, sample_features):
        result = parse_earthquakes(sample_features)
        assert len(result) == len(sample_features)
        assert all(isinstance(eq, EarthquakeEvent) for eq in result)

    def test_fields_copied(self, sample_features):
        eq = next(e for e in parse_earthquakes(sample_features) if e.id == "ci40000001")
        assert eq.magnitude == 7.8
        assert eq.location == "offshore Bio-Bio, Chile"
        assert eq.depth == 25.0
        assert eq.latitude == -35.1
        assert eq.longitude == -72.5
        assert eq.tsunami is True
        assert eq.felt == 120
        assert eq.significance == 1100
        assert eq.url.endswith("ci40000001")

    def test_missing_fields_defaulted(self, sample_features):
        eq = next(e for e in parse_earthquakes(sample_features) if e.id == "nc0000dddd")
        assert eq.magnitude == 0
        assert eq.location == "Unknown location"
        assert eq.depth == 0
        assert eq.felt is None
        assert eq.significance == 0
        assert eq.url == ""
        assert eq.tsunami is False

    def test_zero_felt_reported_as_none(self, sample_features):
        eq = next(e for e in parse_earthquakes(sample_features) if e.id == "us7000cccc")
        assert eq.felt is None

    def test_empty_features_returns_empty(self):
        assert parse_earthquakes([]) == []


class TestParseTsunamiAlerts:
    def test_only_flagged_events(self, sample_features):
        result = parse_tsunami_alerts(sample_features)
        flagged = {f["id"] for f in sample_features if f["properties"]["tsunami"] == 1}
        assert {a.id for a in result} == flagged

    def test_sorted_newest_first(self, sample_features):
        result = parse_tsunami_alerts(sample_features)
        assert [a.id for a in result] == [
            "us7000cccc",
            "ci40000001",
            "us7000bbbb",
            "us7000eeee",
        ]

    def test_severity_and_wave_height(self, sample_features):
        by_id = {a.id: a for a in parse_tsunami_alerts(sample_features)}
        assert by_id["ci40000001"].severity == "warning"
        assert by_id["ci40000001"].wave_height == "3-10m"
        assert by_id["us7000bbbb"].severity == "watch"
        assert by_id["us7000bbbb"].wave_height == "1-3m"
        assert by_id["us7000cccc"].severity == "advisory"
        assert by_id["us7000cccc"].wave_height == "0.5-1m"
        assert by_id["us7000eeee"].severity == "information"
        assert by_id["us7000eeee"].wave_height == "0.5-1m"

    def test_alert_fields(self, sample_features):
        alert = next(a for a in parse_tsunami_alerts(sample_features) if a.id == "ci40000001")
        assert alert.event == "offshore Bio-Bio, Chile"
        assert alert.areas == ("offshore Bio-Bio, Chile",)
        assert alert.issue_time == 1700000300000
        assert alert.expires is None
        assert alert.message == "Earthquake of magnitude 7.8 detected. Tsunami possible."

    def test_missing_place_defaults(self):
        features = [
            {
                "id": "x1",
                "properties": {"mag": 7.0, "place": None, "time": 1, "tsunami": 1},
                "geometry": {"coordinates": [0, 0, 10]},
            }
        ]
        alert = parse_tsunami_alerts(features)[0]
        assert alert.event == "Tsunami Event"
        assert alert.areas == ("Unknown",)
        assert alert.url == ""
        assert alert.message == "Earthquake of magnitude 7 detected. Tsunami possible."


class TestFetchEarthquakes:
    @responses.activate
    def test_valid_response_returns_earthquakes(self, sample_feed):
        responses.add(responses.GET, FEED_URL, json=sample_feed, status=200)
        result = fetch_earthquakes(url=FEED_URL)
        assert len(result) == 6
        assert result[0].id == "us7000aaaa"

    @responses.activate
    def test_http_500_returns_empty(self):
        responses.add(responses.GET, FEED_URL, status=500)
        assert fetch_earthquakes(url=FEED_URL) == []

    @responses.activate
    def test_network_error_returns_empty(self):
        responses.add(
            responses.GET, FEED_URL, body=RequestsConnectionError("Connection refused")
        )
        assert fetch_earthquakes(url=FEED_URL) == []

    @responses.activate
    def test_malformed_json_returns_empty(self):
        responses.add(responses.GET, FEED_URL, json={"unexpected": "format"}, status=200)
        assert fetch_earthquakes(url=FEED_URL) == []

    @responses.activate
    def test_non_json_body_returns_empty(self):
        responses.add(responses.GET, FEED_URL, body="<html>maintenance</html>", status=200)
        assert fetch_earthquakes(url=FEED_URL) == []

    @responses.activate
    def test_timeout_passed_to_request(self, sample_feed):
        responses.add(responses.GET, FEED_URL, json=sample_feed, status=200)
        fetch_earthquakes(url=FEED_URL, timeout=7)
        assert responses.calls[0].request.req_kwargs["timeout"] == 7


class TestFetchTsunamiAlerts:
    @responses.activate
    def test_valid_response_returns_alerts(self, sample_feed):
        responses.add(responses.GET, FEED_URL, json=sample_feed, status=200)
        result = fetch_tsunami_alerts(url=FEED_URL)
        assert [a.severity for a in result] == ["advisory", "warning", "watch", "information"]

    @responses.activate
    def test_no_tsunami_events_returns_empty(self):
        responses.add(
            responses.GET,
            FEED_URL,
            json={
                "type": "FeatureCollection",
                "features": [
                    {
                        "id": "q1",
                        "properties": {"mag": 8.1, "time": 1, "tsunami": 0},
                        "geometry": {"coordinates": [0, 0, 10]},
                    }
                ],
            },
            status=200,
        )
        assert fetch_tsunami_alerts(url=FEED_URL) == []

    @responses.activate
    def test_network_error_returns_empty(self):
        responses.add(
            responses.GET, FEED_URL, body=RequestsConnectionError("Connection refused")
        )
        assert fetch_tsunami_alerts(url=FEED_URL) == []


class TestPartialCoordinates:
    def test_missing_depth_defaults_to_zero(self):
        features = [
            {
                "id": "a",
                "properties": {"mag": 5, "time": 1},
                "geometry": {"coordinates": [1.0, 2.0]},
            },
            {
                "id": "b",
                "properties": {"mag": 4, "time": 2},
                "geometry": {"coordinates": [3.0, 4.0, 12.5]},
            },
        ]
        result = parse_earthquakes(features)
        assert [eq.id for eq in result] == ["b", "a"]
        assert result[1].depth == 0
        assert result[1].latitude == 2.0
        assert result[1].longitude == 1.0
