"""Research project, matchmaking and active project actions."""

from __future__ import annotations

import asyncio
import math
from collections import defaultdict
from typing import Any

from collabdb.actions.base import unwrap
from collabdb.client import Client
from collabdb.relations import project_expertise_names
from collabdb.scoring import to_number
from collabdb.storage import Blob

DOCUMENTS_BUCKET = "project-documents"

RESEARCH_PROJECT_COLUMNS = """
    id, title, description, funding_needed, funding_allocated, budget_utilized,
    trl_level, status, team_lead, team_size, publications_count, college_id,
    college_name, start_date, end_date, created_at, trl_prediction,
    colleges(name, location)
"""

MATCHMAKING_COLUMNS = """
    id, compatibility_score, reasoning,
    research_projects(id, title, description, trl_level, colleges(name)),
    industry_challenges(id, title, description, required_expertise, corporate_partners(name))
"""


async def load_research_projects(client: Client, search_query: str | None = None) -> list[dict[str, Any]]:
    """List active research projects, newest first, optionally filtered by title."""
    query = (
        client.from_("research_projects")
        .select(RESEARCH_PROJECT_COLUMNS)
        .eq("status", "active")
        .order("created_at", ascending=False)
    )
    search_query = (search_query or "").strip()
    if search_query:
        query = query.ilike("title", f"%{search_query}%")

    rows = unwrap(await query.execute(), "Failed to load research projects")

    projects = []
    for row in rows:
        college = row.get("colleges") or {}
        projects.append({
            "id": row["id"],
            "title": row.get("title"),
            "description": row.get("description") or "",
            "funding_needed": to_number(row.get("funding_needed")),
            "funding_allocated": to_number(row.get("funding_allocated")),
            "budget_utilized": to_number(row.get("budget_utilized")),
            "trl_level": row.get("trl_level") or 0,
            "status": row.get("status") or "active",
            "team_lead": row.get("team_lead") or "",
            "team_size": row.get("team_size") or 0,
            "publications_count": row.get("publications_count") or 0,
            "college_name": row.get("college_name") or college.get("name") or "",
            "college_location": college.get("location") or "",
            "expertise_areas": project_expertise_names(client.store, row["id"]),
            "trl_prediction": row.get("trl_prediction"),
            "created_at": row.get("created_at"),
        })
    return projects


async def create_research_project(
    client: Client,
    *,
    college_id: int,
    title: str,
    description: str = "",
    funding_allocated: float = 0,
) -> dict[str, Any]:
    """Create an active research project and return its id."""
    today = client.config.clock().date().isoformat()
    query = (
        client.from_("research_projects")
        .insert({
            "title": title,
            "description": description,
            "college_id": college_id,
            "status": "active",
            "funding_allocated": funding_allocated,
            "budget_utilized": 0,
            "start_date": today,
        })
        .select("id")
        .single()
    )
    return unwrap(await query.execute(), "Failed to create research project")


async def load_matchmaking_scores(client: Client, min_score: float = 0) -> list[dict[str, Any]]:
    """Top 20 project/challenge pairings at or above min_score, best first."""
    query = (
        client.from_("matchmaking_scores")
        .select(MATCHMAKING_COLUMNS)
        .gte("compatibility_score", min_score)
        .order("compatibility_score", ascending=False)
        .limit(20)
    )
    rows = unwrap(await query.execute(), "Failed to load matchmaking scores")

    matches = []
    for row in rows:
        project = row.get("research_projects") or {}
        challenge = row.get("industry_challenges") or {}
        matches.append({
            "id": row["id"],
            "compatibility_score": to_number(row.get("compatibility_score")),
            "reasoning": row.get("reasoning") or "",
            "project_id": project.get("id"),
            "project_title": project.get("title") or "",
            "project_description": project.get("description") or "",
            "trl_level": project.get("trl_level") or 0,
            "college_name": (project.get("colleges") or {}).get("name") or "",
            "challenge_id": challenge.get("id"),
            "challenge_title": challenge.get("title") or "",
            "challenge_description": challenge.get("description") or "",
            "company_name": (challenge.get("corporate_partners") or {}).get("name") or "",
            "project_expertise": project_expertise_names(client.store, project.get("id")),
            "challenge_expertise": list(challenge.get("required_expertise") or []),
        })
    return matches


def _group_by(rows: list[dict[str, Any]], key: str) -> dict[Any, list[dict[str, Any]]]:
    groups: dict[Any, list[dict[str, Any]]] = defaultdict(list)
    for row in rows:
        groups[row.get(key)].append(row)
    return groups


async def load_active_projects(client: Client, status: str | None = None) -> list[dict[str, Any]]:
    """Active projects with milestone, team and budget summaries."""
    query = client.from_("active_projects").select("*").order("created_at", ascending=False)
    status = (status or "").strip()
    if status:
        query = query.eq("status", status)

    projects = unwrap(await query.execute(), "Failed to load active projects")
    if not projects:
        return []

    ids = [project["id"] for project in projects]
    milestones_result, team_result = await asyncio.gather(
        client.from_("project_milestones").select("*").in_("active_project_id", ids).execute(),
        client.from_("project_team_members").select("*").in_("active_project_id", ids).execute(),
    )
    milestones = _group_by(unwrap(milestones_result, "Failed to load project milestones"), "active_project_id")
    team = _group_by(unwrap(team_result, "Failed to load project team members"), "active_project_id")

    summaries = []
    for project in projects:
        project_milestones = milestones.get(project["id"], [])
        funding = to_number(project.get("funding_allocated"))
        utilized = to_number(project.get("budget_utilized"))
        percent = math.floor(utilized / funding * 10000 + 0.5) / 100 if funding else 0
        summaries.append({
            "id": project["id"],
            "project_name": project.get("project_name"),
            "description": project.get("description"),
            "funding_allocated": funding,
            "budget_utilized": utilized,
            "start_date": project.get("start_date"),
            "end_date": project.get("end_date"),
            "status": project.get("status"),
            "budget_utilization_percent": percent,
            "total_milestones": len(project_milestones),
            "completed_milestones": sum(1 for m in project_milestones if m.get("status") == "completed"),
            "team_size": len(team.get(project["id"], [])),
        })
    return summaries


async def _research_project_for(client: Client, active_project_id: int) -> int:
    """Map an active project to the research project behind its collaboration request."""
    active = (
        await client.from_("active_projects")
        .select("collaboration_request_id")
        .eq("id", active_project_id)
        .maybe_single()
        .execute()
    )
    request_id = (active.data or {}).get("collaboration_request_id")
    if request_id is None:
        return active_project_id

    request = (
        await client.from_("collaboration_requests")
        .select("research_project_id")
        .eq("id", request_id)
        .maybe_single()
        .execute()
    )
    research_project_id = (request.data or {}).get("research_project_id")
    return active_project_id if research_project_id is None else research_project_id


async def upload_project_document(
    client: Client,
    project_id: int,
    file_name: str,
    blob: Blob,
    *,
    description: str = "",
    uploaded_by: str = "",
) -> dict[str, Any]:
    """Store a document blob and record its metadata against the research project."""
    if not file_name or project_id is None:
        raise ValueError("Missing file or project ID")

    timestamp = int(client.config.clock().timestamp() * 1000)
    path = f"projects/{project_id}/{timestamp}_{file_name}"
    research_project_id = await _research_project_for(client, project_id)

    unwrap(await client.storage.from_(DOCUMENTS_BUCKET).upload(path, blob), "Failed to upload document")

    query = (
        client.from_("project_documents")
        .insert({
            "project_id": research_project_id,
            "file_name": file_name,
            "file_size": blob.size,
            "file_type": blob.content_type,
            "storage_path": path,
            "uploaded_by": uploaded_by or "Unknown User",
            "description": description,
        })
        .select()
        .single()
    )
    return unwrap(await query.execute(), "Failed to save project document record")
