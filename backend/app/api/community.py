"""Community reference data: statistics, resource search and upcoming events."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_store
from app.services.store import ConversationStore

router = APIRouter()


@router.get("/stats")
async def community_stats(store: ConversationStore = Depends(get_store)):
    stats = store.get_community_stats()
    return {
        "success": True,
        "stats": {
            s.stat_name: {
                "value": s.stat_value,
                "category": s.category,
                "updated_at": s.updated_at.isoformat(),
            }
            for s in stats
        },
        "last_updated": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/resources")
async def community_resources(
    query: str | None = None,
    category: str | None = None,
    store: ConversationStore = Depends(get_store),
):
    resources = store.search_resources(query=query, category=category)
    return {
        "success": True,
        "resources": [
            {
                "id": r.id,
                "title": r.title,
                "content": r.content,
                "category": r.category,
                "url": r.url,
                "organization": r.organization,
                "location": r.location,
            }
            for r in resources
        ],
        "count": len(resources),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/events")
async def upcoming_events(
    limit: int = Query(default=10, ge=1, le=100),
    store: ConversationStore = Depends(get_store),
):
    events = store.upcoming_events(limit=limit)
    return {
        "success": True,
        "events": [
            {
                "id": e.id,
                "title": e.title,
                "description": e.description,
                "event_date": e.event_date.isoformat(),
                "location": e.location,
                "event_type": e.event_type,
                "is_virtual": e.is_virtual,
                "max_attendees": e.max_attendees,
            }
            for e in events
        ],
        "count": len(events),
    }
