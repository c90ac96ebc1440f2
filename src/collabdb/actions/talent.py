"""Talent pipeline actions."""

from __future__ import annotations

from typing import Any

from collabdb.actions.base import unwrap
from collabdb.client import Client


async def save_candidate_interest(
    client: Client,
    *,
    corporate_partner_id: int,
    student_profile_id: int,
    notes: str = "",
    interest_level: str = "medium",
) -> dict[str, Any]:
    """Save a candidate for a partner; saving the same pair again updates it."""
    query = client.from_("saved_candidates").upsert(
        {
            "corporate_partner_id": corporate_partner_id,
            "student_profile_id": student_profile_id,
            "notes": notes,
            "interest_level": interest_level,
        },
        on_conflict="corporate_partner_id,student_profile_id",
    )
    unwrap(await query.execute(), "Failed to save candidate interest")
    return {"success": True}
