"""Platform-wide headline metrics."""

from __future__ import annotations

import asyncio
from typing import Any

from collabdb.actions.base import unwrap
from collabdb.client import Client


def _count_status(rows: list[dict[str, Any]], status: str) -> int:
    return sum(1 for row in rows if row.get("status") == status)


async def load_platform_analytics(client: Client, category: str | None = None) -> list[dict[str, Any]]:
    """Headline counts per category, optionally restricted to one category."""
    results = await asyncio.gather(
        client.from_("research_projects").select("id, status").execute(),
        client.from_("industry_challenges").select("id, status").execute(),
        client.from_("collaboration_requests").select("id, status").execute(),
        client.from_("agreements").select("id, status").execute(),
    )
    projects, challenges, requests, agreements = (
        unwrap(result, "Failed to load platform analytics") for result in results
    )

    metrics = [
        ("Active Research Projects", _count_status(projects, "active"), "projects"),
        ("Open Industry Challenges", _count_status(challenges, "open"), "challenges"),
        ("Collaboration Requests", len(requests), "requests"),
        ("Signed Agreements", _count_status(agreements, "signed"), "agreements"),
    ]
    rows = [
        {"metric_name": name, "metric_value": value, "metric_category": metric_category, "time_period": "all-time"}
        for name, value, metric_category in metrics
    ]

    category = (category or "").strip()
    if category:
        return [row for row in rows if row["metric_category"] == category]
    return rows
