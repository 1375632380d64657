# tests/test_health.py
"""Smoke tests for the service root."""


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root(client) -> None:
    response = client.get("/")
    assert response.status_code == 200
