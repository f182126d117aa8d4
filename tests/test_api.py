import psutil
import pytest
from fastapi.testclient import TestClient

from host_stats.api import create_app
from host_stats.sampler import StatsSampler


@pytest.fixture
def client(fake_host):
    return TestClient(create_app(StatsSampler()))


def test_stats_payload_shape(client):
    response = client.get("/stats")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    body = response.json()
    assert set(body) == {"cpu_usage", "ram", "storage"}
    for section in ("ram", "storage"):
        assert set(body[section]) == {"used", "total", "percentage"}
        assert all(isinstance(value, str) for value in body[section].values())
    assert isinstance(body["cpu_usage"], str)


def test_stats_values(client):
    body = client.get("/stats").json()

    assert body == {
        "cpu_usage": "12.50%",
        "ram": {"used": "8.00 GB", "total": "16.00 GB", "percentage": "50.00%"},
        "storage": {"used": "300.00 GB", "total": "500.00 GB", "percentage": "60.00%"},
    }


def test_each_request_resamples(client, fake_host):
    assert client.get("/stats").json()["cpu_usage"] == "12.50%"
    fake_host.cpu = 99.0
    assert client.get("/stats").json()["cpu_usage"] == "99.00%"


def test_only_stats_route_is_served(client):
    assert client.get("/health").status_code == 404
    assert client.post("/stats").status_code == 405


def test_poisoned_sampler_returns_server_error(client, fake_host, monkeypatch):
    def broken(path):
        raise RuntimeError("disk table corrupted")

    monkeypatch.setattr(psutil, "disk_usage", broken)
    first = client.get("/stats")
    assert first.status_code == 500
    assert "disk sampler is poisoned" in first.json()["detail"]

    monkeypatch.setattr(psutil, "disk_usage", fake_host.disk_usage)
    assert client.get("/stats").status_code == 500
