"""Agreement signing, approval and checklist actions."""

from __future__ import annotations

from typing import Any

from collabdb.actions.base import check_role, unwrap
from collabdb.client import Client
from collabdb.tables import now_iso


async def sign_agreement(client: Client, agreement_id: int, signatory_name: str, role: str) -> list[dict[str, Any]]:
    """Record a signature for one side of an agreement."""
    check_role(role)
    timestamp = now_iso(client.config.clock)
    patch = {f"{role}_signed_at": timestamp, f"{role}_signatory": signatory_name}
    query = client.from_("agreements").update(patch).eq("id", agreement_id).select()
    return unwrap(await query.execute(), "Failed to sign agreement")


async def approve_agreement(client: Client, agreement_id: int, role: str) -> list[dict[str, Any]]:
    check_role(role)
    query = (
        client.from_("agreements")
        .update({f"{role}_approval_status": True})
        .eq("id", agreement_id)
        .select()
    )
    return unwrap(await query.execute(), "Failed to grant approval")


async def update_checklist_item(
    client: Client,
    agreement_id: int,
    item_key: str,
    is_checked: bool,
) -> list[dict[str, Any]]:
    """Tick or untick a checklist item; updated_at is stamped by the store."""
    query = (
        client.from_("agreement_checklist_items")
        .update({"is_checked": bool(is_checked)})
        .eq("agreement_id", agreement_id)
        .eq("item_key", item_key)
        .select()
    )
    return unwrap(await query.execute(), "Failed to update checklist item")
