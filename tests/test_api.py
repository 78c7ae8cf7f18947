"""
API tests for the dashboard endpoints.
"""
import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from transmitter_dashboard.core.models.sensor_enum import SensorStatus, SensorType
from transmitter_dashboard.core.service_manager import service_manager
from transmitter_dashboard.core.services.telemetry_source import TelemetrySourceError
from transmitter_dashboard.main import app

REF_LAT = 34.0522
REF_LNG = -118.2437


@pytest.fixture
def loaded(client, source, make_snapshot):
    """Client with one applied tick of three transmitters."""
    source.push([
        make_snapshot("TX-1", signal=40),
        make_snapshot("TX-2", signal=60, status=SensorStatus.ALERT, lat=REF_LAT + 0.002,
                      sensor_type=SensorType.ACOUSTIC),
        make_snapshot("TX-3", signal=80, lat=REF_LAT - 0.005, sensor_type=SensorType.ACOUSTIC),
    ])
    assert client.post("/api/feed/tick").json()["applied"] is True
    return client


class TestMeta:
    def test_root(self, client) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Rescue Operations Dashboard API"}

    def test_health(self, client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestFeedEndpoints:
    """Status indicator and manual tick"""

    def test_status_before_start(self, client) -> None:
        data = client.get("/api/status").json()
        assert data["running"] is False
        assert data["ticks_completed"] == 0
        assert data["transmitter_count"] == 0
        assert data["history_window"] == 20
        assert data["interval_seconds"] == 100.0

    def test_tick_applies(self, loaded) -> None:
        data = loaded.get("/api/status").json()
        assert data["ticks_completed"] == 1
        assert data["transmitter_count"] == 3
        assert data["history_length"] == 1
        assert data["last_tick_at"] is not None

    def test_failed_tick_is_reported(self, loaded, source) -> None:
        source.push(TelemetrySourceError("gateway down"))
        data = loaded.post("/api/feed/tick").json()
        assert data == {"applied": False, "transmitter_count": 3, "history_length": 1}
        assert loaded.get("/api/status").json()["ticks_skipped"] == 1


class TestTransmitterEndpoints:
    """List, selection and detail"""

    def test_list(self, loaded) -> None:
        rows = loaded.get("/api/transmitters").json()["list"]
        assert [r["id"] for r in rows] == ["TX-1", "TX-2", "TX-3"]
        assert rows[1]["status"] == "Alert"
        assert rows[1]["lat"] == round(REF_LAT + 0.002, 4)
        assert not any(r["selected"] for r in rows)

    def test_no_selection_returns_204(self, loaded) -> None:
        response = loaded.get("/api/transmitters/selected")
        assert response.status_code == 204

    def test_select_and_detail(self, loaded) -> None:
        response = loaded.put("/api/transmitters/TX-2/select")
        assert response.status_code == 200
        assert response.json() == {"selected_id": "TX-2"}

        detail = loaded.get("/api/transmitters/selected").json()
        assert detail["id"] == "TX-2"
        assert detail["stale"] is False
        assert detail["signal_strength"] == 60
        assert detail["sensor_type"] == "Acoustic"

        rows = loaded.get("/api/transmitters").json()["list"]
        assert [r["id"] for r in rows if r["selected"]] == ["TX-2"]

    def test_selection_survives_disappearance(self, loaded, source, make_snapshot) -> None:
        loaded.put("/api/transmitters/TX-3/select")
        source.push([make_snapshot("TX-1"), make_snapshot("TX-2")])
        loaded.post("/api/feed/tick")

        detail = loaded.get("/api/transmitters/selected").json()
        assert detail["id"] == "TX-3"
        assert detail["stale"] is True
        assert detail["signal_strength"] == 80
        assert not any(r["selected"] for r in loaded.get("/api/transmitters").json()["list"])

    def test_clear_selection(self, loaded) -> None:
        loaded.put("/api/transmitters/TX-1/select")
        response = loaded.delete("/api/transmitters/selected")
        assert response.json() == {"selected_id": None}
        assert loaded.get("/api/transmitters/selected").status_code == 204


class TestViewportEndpoints:
    """Pointer events, zoom buttons and reset"""

    def test_initial(self, client) -> None:
        data = client.get("/api/viewport").json()
        assert data == {
            "zoom": 1.0,
            "offset": {"x": 0.0, "y": 0.0},
            "state": "idle",
            "zoom_min": 0.5,
            "zoom_max": 5.0,
        }

    def test_drag_then_zoom(self, client) -> None:
        data = client.post("/api/viewport/pointer", json={"kind": "down", "x": 100, "y": 100}).json()
        assert data["applied"] is True
        assert data["state"] == "dragging"

        data = client.post("/api/viewport/pointer", json={"kind": "move", "x": 140, "y": 115}).json()
        assert data["offset"] == {"x": 40.0, "y": 15.0}

        data = client.post("/api/viewport/pointer", json={"kind": "up"}).json()
        assert data["state"] == "idle"

        data = client.post("/api/viewport/zoom/in").json()
        assert data["zoom"] == pytest.approx(1.2)
        assert data["offset"] == {"x": 40.0, "y": 15.0}

    def test_pointer_without_coordinates_is_ignored(self, client) -> None:
        response = client.post("/api/viewport/pointer", json={"kind": "down"})
        assert response.status_code == 200
        assert response.json()["applied"] is False
        assert response.json()["state"] == "idle"

    @pytest.mark.parametrize("x, y", [("abc", 10), (10, [1, 2]), ({"v": 1}, 0), ("nan", 5)])
    def test_malformed_coordinates_are_ignored(self, client, x, y) -> None:
        client.post("/api/viewport/pointer", json={"kind": "down", "x": 0, "y": 0})
        client.post("/api/viewport/pointer", json={"kind": "move", "x": 6, "y": 8})

        response = client.post("/api/viewport/pointer", json={"kind": "move", "x": x, "y": y})

        assert response.status_code == 200
        data = response.json()
        assert data["applied"] is False
        assert data["state"] == "dragging"
        assert data["offset"] == {"x": 6.0, "y": 8.0}

    def test_unknown_pointer_kind_rejected(self, client) -> None:
        response = client.post("/api/viewport/pointer", json={"kind": "wheel", "x": 1, "y": 1})
        assert response.status_code == 422

    def test_zoom_out_clamps(self, client) -> None:
        for _ in range(10):
            data = client.post("/api/viewport/zoom/out").json()
        assert data["zoom"] == 0.5

    def test_reset(self, client) -> None:
        client.post("/api/viewport/zoom/in")
        client.post("/api/viewport/pointer", json={"kind": "down", "x": 0, "y": 0})
        client.post("/api/viewport/pointer", json={"kind": "move", "x": 9, "y": 9})
        data = client.post("/api/viewport/reset").json()
        assert data["zoom"] == 1.0
        assert data["offset"] == {"x": 0.0, "y": 0.0}
        assert data["state"] == "idle"

    def test_geo_lookup(self, client) -> None:
        data = client.get("/api/viewport/geo", params={"x": 400, "y": 300}).json()
        assert data["lat"] == pytest.approx(REF_LAT)
        assert data["lng"] == pytest.approx(REF_LNG)

    def test_geo_requires_coordinates(self, client) -> None:
        assert client.get("/api/viewport/geo").status_code == 422


class TestMapEndpoints:
    """Marker layer, clicks and rendered image"""

    def test_markers(self, loaded) -> None:
        markers = loaded.get("/api/map/markers").json()["list"]
        assert [m["id"] for m in markers] == ["TX-1", "TX-2", "TX-3"]
        assert markers[0]["x"] == pytest.approx(400.0)
        assert markers[0]["y"] == pytest.approx(300.0)
        assert markers[1]["color"] == "#ef4444"
        assert markers[2]["color"] == "#3b82f6"

    def test_markers_follow_pan(self, loaded) -> None:
        loaded.post("/api/viewport/pointer", json={"kind": "down", "x": 0, "y": 0})
        loaded.post("/api/viewport/pointer", json={"kind": "move", "x": -20, "y": 10})
        loaded.post("/api/viewport/pointer", json={"kind": "leave"})
        marker = loaded.get("/api/map/markers").json()["list"][0]
        assert marker["x"] == pytest.approx(380.0)
        assert marker["y"] == pytest.approx(310.0)

    def test_click_selects_marker(self, loaded) -> None:
        data = loaded.post("/api/map/click", json={"x": 401, "y": 349}).json()
        assert data == {"hit": "TX-3", "selected_id": "TX-3"}
        assert loaded.get("/api/map/markers").json()["list"][2]["selected"] is True

    def test_click_on_empty_map_keeps_selection(self, loaded) -> None:
        loaded.put("/api/transmitters/TX-1/select")
        data = loaded.post("/api/map/click", json={"x": 5, "y": 5}).json()
        assert data == {"hit": None, "selected_id": "TX-1"}

    def test_image_png(self, loaded) -> None:
        loaded.put("/api/transmitters/TX-2/select")
        response = loaded.get("/api/map/image")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert "deployment_map.png" in response.headers["content-disposition"]
        image = Image.open(io.BytesIO(response.content))
        assert image.format == "PNG"
        assert image.size == (800, 600)

    def test_image_empty_map(self, client) -> None:
        response = client.get("/api/map/image")
        assert response.status_code == 200
        assert Image.open(io.BytesIO(response.content)).size == (800, 600)

    def test_image_base64(self, loaded) -> None:
        data = loaded.get("/api/map/image/base64").json()["data"]
        prefix = "data:image/png;base64,"
        assert data.startswith(prefix)
        image = Image.open(io.BytesIO(base64.b64decode(data[len(prefix):])))
        assert image.size == (800, 600)


class TestChartEndpoints:
    def test_signal_history(self, loaded, source, make_snapshot) -> None:
        source.push([make_snapshot("TX-1", signal=70)])
        loaded.post("/api/feed/tick")
        source.push([])
        loaded.post("/api/feed/tick")

        series = loaded.get("/api/charts/signal-history").json()["list"]
        assert [p["avgSignal"] for p in series] == [60.0, 70.0]
        assert all(set(p) == {"time", "avgSignal"} for p in series)

    def test_type_distribution(self, loaded) -> None:
        rows = loaded.get("/api/charts/type-distribution").json()["list"]
        assert rows == [
            {"type": "GPR", "count": 1},
            {"type": "Acoustic", "count": 2},
            {"type": "Ultrasound", "count": 0},
        ]

    def test_type_distribution_empty(self, client) -> None:
        rows = client.get("/api/charts/type-distribution").json()["list"]
        assert [r["count"] for r in rows] == [0, 0, 0]


class TestLifespan:
    """Startup starts the feed timer and shutdown removes it"""

    def test_feed_runs_for_app_lifetime(self) -> None:
        with TestClient(app) as client:
            status = client.get("/api/status").json()
            assert status["running"] is True
            assert status["transmitter_count"] > 0
            # The first load does not add a history point
            assert status["history_length"] == 0
            feed = service_manager.dashboard.feed

        assert feed.running is False
        assert feed.token.cancelled is True

    def test_second_lifespan_loads_new_snapshot_set(self) -> None:
        with TestClient(app) as client:
            assert client.get("/api/status").json()["running"] is True
            first = service_manager.dashboard.feed.snapshots

        with TestClient(app) as client:
            assert client.get("/api/status").json()["running"] is True
            second = service_manager.dashboard.feed.snapshots

        assert first is not second
        assert len(second) > 0
        assert service_manager.dashboard.feed.running is False
