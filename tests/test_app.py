import pytest

from color_journey.app import create_app

BODY = {
    "anchors": ["#F38020", "#667EEA"],
    "numColors": 5,
    "loop": "open",
    "dynamics": {"lightness": 0, "chroma": 1.0, "contrast": 0.05, "vibrancy": 0.5},
    "variation": {"mode": "off", "seed": 12345},
}


@pytest.fixture
def client():
    app = create_app({"TESTING": True, "BACKEND_PRELOAD": False, "RATE_LIMIT": 3})
    return app.test_client()


def test_generate_ok(client):
    resp = client.post("/color-journey", json=BODY)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert "fromCache" not in body
    data = body["data"]
    assert len(data["palette"]) == 5
    assert set(data["palette"][0]) == {"ok", "rgb", "hex"}
    assert data["config"]["numColors"] == 5
    assert data["diagnostics"]["traversalStrategy"] == "perceptual"


def test_second_identical_request_is_cached(client):
    first = client.post("/color-journey", json=BODY).get_json()
    second = client.post("/api/color-journey", json=BODY).get_json()
    assert second["fromCache"] is True
    assert second["data"] == first["data"]


def test_validation_errors_are_listed(client):
    bad = {"anchors": ["red"], "numColors": 0, "loop": "spiral", "dynamics": {"chroma": 5}}
    resp = client.post("/color-journey", json=bad)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"]
    assert len(body["details"]) == 4


def test_non_json_body(client):
    resp = client.post("/color-journey", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_max_colors_is_configurable():
    app = create_app({"BACKEND_PRELOAD": False, "MAX_COLORS": 8})
    resp = app.test_client().post("/color-journey", json={**BODY, "numColors": 9})
    assert resp.status_code == 400


def test_rate_limit(client):
    codes = [client.post("/color-journey", json=BODY).status_code for _ in range(4)]
    assert codes == [200, 200, 200, 429]
    body = client.post("/color-journey", json=BODY).get_json()
    assert body["success"] is False


def test_rate_limit_is_per_client(client):
    for _ in range(3):
        client.post("/color-journey", json=BODY, headers={"X-Forwarded-For": "10.0.0.1"})
    blocked = client.post("/color-journey", json=BODY, headers={"X-Forwarded-For": "10.0.0.1"})
    other = client.post("/color-journey", json=BODY, headers={"X-Forwarded-For": "10.0.0.2, 10.0.0.1"})
    assert blocked.status_code == 429
    assert other.status_code == 200


def test_status(client):
    body = client.get("/color-journey/status").get_json()
    assert set(body) == {"ready", "loading"}
    assert isinstance(body["ready"], bool)


def test_presets(client):
    body = client.get("/color-journey/presets").get_json()
    assert "Default" in body["journeys"]
    assert "warm" in body["biases"]


def test_presets_are_valid_requests(client):
    journeys = client.get("/color-journey/presets").get_json()["journeys"]
    for name, cfg in journeys.items():
        resp = client.post("/color-journey", json=cfg, headers={"X-Forwarded-For": name})
        assert resp.status_code == 200, name


def test_generation_failure_is_500(client, monkeypatch):
    import color_journey.app as app_module

    def boom(cfg):
        raise RuntimeError("boom")

    monkeypatch.setattr(app_module, "generate", boom)
    resp = client.post("/color-journey", json=BODY)
    assert resp.status_code == 500
    assert resp.get_json()["success"] is False
