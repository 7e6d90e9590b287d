"""
API helpers for the public dashboard.

Kept free of Streamlit calls so the fetch and fallback behaviour can be
exercised directly.
"""

from typing import Any, Dict, Optional, Tuple

import pandas as pd
import requests

DEMO_STATS: Dict[str, Any] = {
    "totalCreditsIssued": 1250,
    "totalCreditsRetired": 340,
    "totalProjects": 3,
    "projects": [
        {
            "id": "project_demo_1",
            "name": "Sundarbans Mangrove Restoration",
            "location": "Sundarbans, West Bengal",
            "ecosystemType": "mangrove",
            "area": 2000,
            "status": "approved",
            "createdAt": "2024-01-15T00:00:00Z",
        },
        {
            "id": "project_demo_2",
            "name": "Chilika Seagrass Meadows",
            "location": "Chilika, Odisha",
            "ecosystemType": "seagrass",
            "area": 450,
            "status": "mrv_submitted",
            "createdAt": "2024-03-02T00:00:00Z",
        },
        {
            "id": "project_demo_3",
            "name": "Kerala Backwaters Coastal Wetland",
            "location": "Kerala Backwaters, Kerala",
            "ecosystemType": "coastal_wetland",
            "area": 800,
            "status": "registered",
            "createdAt": "2024-05-20T00:00:00Z",
        },
    ],
}


def fetch_public_stats(api_url: str, timeout: float = 10) -> Tuple[Dict[str, Any], bool]:
    """
    Fetch registry stats, falling back to the demo dataset.

    Returns:
        (stats, is_demo) - ``is_demo`` is True when the API could not be reached
    """
    try:
        response = requests.get(f"{api_url.rstrip('/')}/public/stats", timeout=timeout)
        response.raise_for_status()
        return response.json(), False
    except (requests.exceptions.RequestException, ValueError):
        return DEMO_STATS, True


def projects_frame(stats: Dict[str, Any]) -> pd.DataFrame:
    """Tabular view of the projects in a stats payload."""
    rows = [
        {
            "Name": p.get("name"),
            "Location": p.get("location"),
            "Ecosystem": (p.get("ecosystemType") or "").replace("_", " ").title(),
            "Area (ha)": p.get("area", 0),
            "Status": (p.get("status") or "").replace("_", " ").title(),
            "Registered": (p.get("createdAt") or "")[:10],
        }
        for p in stats.get("projects") or []
    ]
    return pd.DataFrame(rows, columns=["Name", "Location", "Ecosystem", "Area (ha)", "Status", "Registered"])


def retirement_rate(stats: Dict[str, Any]) -> Optional[float]:
    """Share of issued credits already retired, as a percentage."""
    issued = stats.get("totalCreditsIssued") or 0
    if not issued:
        return None
    return (stats.get("totalCreditsRetired") or 0) / issued * 100
