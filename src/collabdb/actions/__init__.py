"""Async action functions the application layer calls against a client."""

from collabdb.actions.agreements import approve_agreement, sign_agreement, update_checklist_item
from collabdb.actions.analytics import load_platform_analytics
from collabdb.actions.collaboration import (
    create_collaboration_request,
    create_negotiation_message,
    load_collaboration_requests,
    load_negotiation_thread,
)
from collabdb.actions.projects import (
    create_research_project,
    load_active_projects,
    load_matchmaking_scores,
    load_research_projects,
    upload_project_document,
)
from collabdb.actions.talent import save_candidate_interest

__all__ = [
    "approve_agreement",
    "create_collaboration_request",
    "create_negotiation_message",
    "create_research_project",
    "load_active_projects",
    "load_collaboration_requests",
    "load_matchmaking_scores",
    "load_negotiation_thread",
    "load_platform_analytics",
    "load_research_projects",
    "save_candidate_interest",
    "sign_agreement",
    "update_checklist_item",
    "upload_project_document",
]
