"""Reference data inserted on first start: community stats, resources and events."""

import logging
from datetime import timedelta

from sqlmodel import Session, select

from app.models.community import CommunityResource, CommunityStat, Event
from app.models.conversation import utcnow

logger = logging.getLogger(__name__)

COMMUNITY_STATS = [
    ("total_members", "12847", "membership"),
    ("active_discussions", "23", "engagement"),
    ("weekly_events", "5", "events"),
    ("mutual_aid_requests", "8", "community"),
    ("liberation_stories", "156", "content"),
    ("community_projects", "12", "projects"),
    ("growth_rate", "+15% this month", "analytics"),
    ("engagement_score", "8.7", "analytics"),
]

COMMUNITY_RESOURCES = [
    {
        "id": "resource_001",
        "title": "Mental Health Support for QTIPOC",
        "content": "Black Thrive BQC offers culturally competent mental health support specifically for Black queer and trans people in South London.",
        "category": "mental_health",
        "organization": "Black Thrive BQC",
        "location": "South London",
    },
    {
        "id": "resource_002",
        "title": "LGBTQ+ Housing Support",
        "content": "The Outside Project provides emergency accommodation and housing support specifically for LGBTQ+ people experiencing homelessness.",
        "category": "housing",
        "organization": "Outside Project",
        "location": "London",
    },
    {
        "id": "resource_003",
        "title": "Benefits and Welfare Rights",
        "content": "Citizens Advice offers free, confidential advice on benefits, debt, and legal issues. LGBT Foundation also provides welfare rights support.",
        "category": "financial",
        "organization": "Citizens Advice / LGBT Foundation",
        "location": "UK-wide",
    },
    {
        "id": "resource_004",
        "title": "Trans Healthcare Support",
        "content": "CliniQ offers sexual health services for trans and non-binary people with culturally competent care.",
        "category": "healthcare",
        "organization": "CliniQ",
        "location": "London",
    },
    {
        "id": "resource_005",
        "title": "Employment Rights Support",
        "content": "ACAS provides free employment advice including discrimination cases. LGBT Foundation offers workplace support.",
        "category": "employment",
        "organization": "ACAS / LGBT Foundation",
        "location": "UK-wide",
    },
]

# (id, title, description, days from seeding, hour, location, type, virtual)
COMMUNITY_EVENTS = [
    ("event_001", "QTIPOC Community Gathering",
     "Monthly community meeting for QTIPOC folks to connect, share experiences, and support each other.",
     14, 18, "Community Center, London", "community", False),
    ("event_002", "Mutual Aid Workshop",
     "Learn about organizing mutual aid in your community and building collective support networks.",
     21, 19, "Online", "workshop", True),
    ("event_003", "Black Trans History Month Event",
     "Celebrating Black trans history and current community leaders with talks and performances.",
     40, 16, "South London", "celebration", False),
]


def seed_reference_data(session: Session) -> None:
    """Insert each reference table's rows only when that table is empty."""
    if not session.exec(select(CommunityStat)).first():
        for name, value, category in COMMUNITY_STATS:
            session.add(CommunityStat(stat_name=name, stat_value=value, category=category))
        logger.info(f"Seeded {len(COMMUNITY_STATS)} community stats")

    if not session.exec(select(CommunityResource)).first():
        for data in COMMUNITY_RESOURCES:
            session.add(CommunityResource(**data))
        logger.info(f"Seeded {len(COMMUNITY_RESOURCES)} community resources")

    if not session.exec(select(Event)).first():
        today = utcnow().replace(minute=0, second=0, microsecond=0)
        for event_id, title, description, days, hour, location, event_type, virtual in COMMUNITY_EVENTS:
            session.add(Event(
                id=event_id,
                title=title,
                description=description,
                event_date=(today + timedelta(days=days)).replace(hour=hour),
                location=location,
                event_type=event_type,
                is_virtual=virtual,
            ))
        logger.info(f"Seeded {len(COMMUNITY_EVENTS)} community events")

    session.commit()
