# core/dashboard_stats.py
# -------------------------------------------------------------------
# Overview numbers for the dashboard landing page.
# All stats requests run concurrently and are joined; if any one of
# them fails the whole block falls back to zeros with success=False.
# -------------------------------------------------------------------
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from core.errors import ApiError
from core.resources import ResourceApi, record_id

logger = logging.getLogger(__name__)

# dashboard card key -> resource key
STAT_CARDS: Dict[str, str] = {
    "enquiryForms": "enquiry",
    "complaintsFeedback": "complaint_feedback",
    "newsEvents": "news_events",
    "publicNotices": "public_notice",
    "blogs": "blog",
    "results": "result",
}

ACTIVITY_SOURCES: Dict[str, str] = {
    "enquiry": "Enquiry Form",
    "complaint_feedback": "Complaint",
    "news_events": "News/Event",
}


@dataclass
class DashboardStats:
    success: bool
    counts: Dict[str, int] = field(default_factory=dict)


def _total(stats: Mapping[str, Any]) -> int:
    try:
        return int(stats.get("total") or 0)
    except (TypeError, ValueError):
        return 0


def fetch_all_stats(apis: Mapping[str, ResourceApi]) -> DashboardStats:
    zeros = {card: 0 for card in STAT_CARDS}
    with ThreadPoolExecutor(max_workers=len(STAT_CARDS)) as pool:
        futures = {card: pool.submit(apis[key].stats) for card, key in STAT_CARDS.items()}
        try:
            counts = {card: _total(f.result()) for card, f in futures.items()}
        except ApiError as e:
            logger.error("Error fetching dashboard stats: %s", e)
            return DashboardStats(success=False, counts=zeros)
    return DashboardStats(success=True, counts=counts)


def _parse_time(value: Any) -> datetime:
    if not value:
        return datetime.min
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return datetime.min
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def recent_activity(apis: Mapping[str, ResourceApi], per_resource: int = 2, limit: int = 4) -> List[Dict[str, Any]]:
    """Newest enquiries, complaints and news merged, newest first."""
    with ThreadPoolExecutor(max_workers=len(ACTIVITY_SOURCES)) as pool:
        futures = {
            key: pool.submit(apis[key].list, {"page": 1, "limit": per_resource})
            for key in ACTIVITY_SOURCES
        }
        pages = {key: f.result() for key, f in futures.items()}

    activity: List[Dict[str, Any]] = []
    for key, label in ACTIVITY_SOURCES.items():
        for item in pages[key].records[:per_resource]:
            activity.append({
                "id": record_id(item),
                "type": label,
                "name": item.get("name") or item.get("title") or "Anonymous",
                "email": item.get("email") or "",
                "time": item.get("createdAt") or "",
                "status": item.get("status") or ("published" if key == "news_events" else "pending"),
            })
    activity.sort(key=lambda a: _parse_time(a["time"]), reverse=True)
    return activity[:limit]
