"""
Tests for the dashboard's API helpers.
"""

import requests

from streamlit_app import api


class FakeResponse:

    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        return self.payload


def test_fetch_public_stats_live(monkeypatch):
    live = {"totalCreditsIssued": 87, "totalCreditsRetired": 0, "totalProjects": 1, "projects": []}
    calls = []

    def fake_get(url, timeout):
        calls.append(url)
        return FakeResponse(live)

    monkeypatch.setattr(api.requests, "get", fake_get)

    stats, is_demo = api.fetch_public_stats("http://registry:8000/")

    assert stats == live
    assert not is_demo
    assert calls == ["http://registry:8000/public/stats"]


def test_fetch_public_stats_falls_back_to_demo(monkeypatch):
    def unreachable(url, timeout):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(api.requests, "get", unreachable)

    stats, is_demo = api.fetch_public_stats("http://registry:8000")

    assert is_demo
    assert stats is api.DEMO_STATS


def test_fetch_public_stats_http_error_falls_back(monkeypatch):
    monkeypatch.setattr(api.requests, "get", lambda url, timeout: FakeResponse({}, status_code=500))

    _, is_demo = api.fetch_public_stats("http://registry:8000")

    assert is_demo


def test_projects_frame():
    df = api.projects_frame(api.DEMO_STATS)

    assert len(df) == 3
    assert df.iloc[0]["Ecosystem"] == "Mangrove"
    assert df.iloc[2]["Ecosystem"] == "Coastal Wetland"
    assert df.iloc[1]["Status"] == "Mrv Submitted"
    assert df.iloc[0]["Registered"] == "2024-01-15"


def test_projects_frame_empty():
    df = api.projects_frame({"projects": []})

    assert df.empty
    assert "Name" in df.columns


def test_retirement_rate():
    assert api.retirement_rate({"totalCreditsIssued": 200, "totalCreditsRetired": 50}) == 25
    assert api.retirement_rate({"totalCreditsIssued": 0}) is None
