"""Collaboration requests and their negotiation threads."""

from __future__ import annotations

from typing import Any

from collabdb.actions.base import unwrap
from collabdb.client import Client
from collabdb.scoring import to_number

REQUEST_COLUMNS = """
    id, project_brief, budget_proposed, timeline_proposed, status, created_at,
    corporate_partner_id, research_project_id, industry_challenge_id,
    corporate_partners(name, industry),
    research_projects(title, college_id, college_name, colleges(name, location)),
    industry_challenges(title)
"""


async def load_collaboration_requests(client: Client, status: str | None = None) -> list[dict[str, Any]]:
    """List collaboration requests, newest first."""
    query = client.from_("collaboration_requests").select(REQUEST_COLUMNS).order("created_at", ascending=False)
    status = (status or "").strip()
    if status:
        query = query.eq("status", status)

    rows = unwrap(await query.execute(), "Failed to load collaboration requests")

    requests = []
    for row in rows:
        partner = row.get("corporate_partners") or {}
        project = row.get("research_projects") or {}
        college = project.get("colleges") or {}
        requests.append({
            "id": row["id"],
            "project_brief": row.get("project_brief") or "",
            "budget_proposed": to_number(row.get("budget_proposed")),
            "timeline_proposed": row.get("timeline_proposed") or "",
            "status": row.get("status") or "pending",
            "created_at": row.get("created_at"),
            "company_name": partner.get("name") or "",
            "industry": partner.get("industry") or "",
            "project_title": project.get("title") or "",
            "project_id": row.get("research_project_id"),
            "college_name": project.get("college_name") or college.get("name") or "",
            "challenge_title": (row.get("industry_challenges") or {}).get("title") or "",
        })
    return requests


async def create_collaboration_request(
    client: Client,
    *,
    corporate_partner_id: int,
    research_project_id: int,
    industry_challenge_id: int | None = None,
    project_brief: str = "",
    budget_proposed: float = 0,
    timeline_proposed: str = "",
) -> dict[str, Any]:
    """Open a pending collaboration request and return its id."""
    query = (
        client.from_("collaboration_requests")
        .insert({
            "corporate_partner_id": corporate_partner_id,
            "research_project_id": research_project_id,
            "industry_challenge_id": industry_challenge_id,
            "project_brief": project_brief,
            "budget_proposed": budget_proposed,
            "timeline_proposed": timeline_proposed,
            "status": "pending",
        })
        .select("id")
        .single()
    )
    return unwrap(await query.execute(), "Failed to create collaboration request")


async def load_negotiation_thread(client: Client, collaboration_request_id: int | None) -> dict[str, Any] | None:
    """Messages and the latest scope proposal for a request, or None if it does not exist."""
    if not collaboration_request_id:
        return None

    request = unwrap(
        await client.from_("collaboration_requests")
        .select("id, project_brief")
        .eq("id", collaboration_request_id)
        .maybe_single()
        .execute(),
        "Failed to load collaboration request for negotiation",
    )
    if request is None:
        return None

    messages = unwrap(
        await client.from_("negotiation_messages")
        .select("id, sender_name, sender_organization, message_type, content, created_at")
        .eq("collaboration_request_id", collaboration_request_id)
        .order("created_at")
        .execute(),
        "Failed to load negotiation messages",
    )
    scopes = unwrap(
        await client.from_("project_scopes")
        .select("id, version_number, scope_description, deliverables, timeline, budget, created_by")
        .eq("collaboration_request_id", collaboration_request_id)
        .order("version_number", ascending=False)
        .limit(1)
        .execute(),
        "Failed to load project scopes",
    )

    return {
        "thread_id": collaboration_request_id,
        "collaboration_request_id": collaboration_request_id,
        "project_brief": request.get("project_brief"),
        "messages": messages,
        "current_scope": scopes[0] if scopes else None,
    }


async def create_negotiation_message(
    client: Client,
    *,
    collaboration_request_id: int,
    sender_name: str,
    sender_organization: str,
    content: str,
    message_type: str = "text",
) -> dict[str, Any]:
    query = (
        client.from_("negotiation_messages")
        .insert({
            "collaboration_request_id": collaboration_request_id,
            "sender_name": sender_name,
            "sender_organization": sender_organization,
            "message_type": message_type,
            "content": content,
        })
        .select("id")
        .single()
    )
    return unwrap(await query.execute(), "Failed to send negotiation message")
