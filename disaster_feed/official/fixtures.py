"""
Fixture official updates.

Served whenever live retrieval is disabled, fails, or comes back empty.
Publication times are stored as ages and materialised against the
current clock on every call, so the set always looks fresh.
"""

from datetime import datetime, timedelta, timezone

from disaster_feed.official.schemas import Severity, UpdateRecord

_FIXTURE_UPDATES: tuple[dict, ...] = (
    {
        "id": "1",
        "source": "FEMA",
        "title": "Emergency Shelter Locations Updated",
        "content": (
            "New emergency shelters have been opened in Manhattan and Brooklyn. "
            "Capacity for 500+ people available."
        ),
        "url": "https://fema.gov/disaster-updates",
        "age": timedelta(hours=4),
        "severity": Severity.HIGH,
        "category": "shelter",
        "contact": "1-800-621-3362",
    },
    {
        "id": "2",
        "source": "NYC Emergency Management",
        "title": "Water Distribution Points Active",
        "content": (
            "Water distribution is now active at Central Park and Prospect Park "
            "locations from 8 AM to 6 PM."
        ),
        "url": "https://nyc.gov/emergency",
        "age": timedelta(hours=2),
        "severity": Severity.MEDIUM,
        "category": "supplies",
        "contact": "311",
    },
    {
        "id": "3",
        "source": "Red Cross",
        "title": "Volunteer Registration Open",
        "content": (
            "Red Cross is accepting volunteer registrations for disaster relief "
            "efforts. Training provided."
        ),
        "url": "https://redcross.org/volunteer",
        "age": timedelta(hours=1),
        "severity": Severity.LOW,
        "category": "volunteer",
        "contact": "1-800-733-2767",
    },
    {
        "id": "4",
        "source": "National Weather Service",
        "title": "Severe Weather Alert Extended",
        "content": (
            "Severe weather conditions expected to continue through tomorrow "
            "evening. Stay indoors."
        ),
        "url": "https://weather.gov/alerts",
        "age": timedelta(minutes=30),
        "severity": Severity.HIGH,
        "category": "weather",
        "contact": "weather.gov",
    },
    {
        "id": "5",
        "source": "Salvation Army",
        "title": "Mobile Food Units Deployed",
        "content": (
            "Mobile food units are serving hot meals in affected areas. "
            "Check locations on our website."
        ),
        "url": "https://salvationarmy.org/disaster-relief",
        "age": timedelta(hours=6),
        "severity": Severity.MEDIUM,
        "category": "food",
        "contact": "1-800-725-2769",
    },
)


def fixture_updates(now: datetime | None = None) -> list[UpdateRecord]:
    """Materialise the full fixture set against ``now``."""
    now = now or datetime.now(timezone.utc)
    records = []
    for entry in _FIXTURE_UPDATES:
        fields = {k: v for k, v in entry.items() if k != "age"}
        records.append(UpdateRecord(published_at=now - entry["age"], **fields))
    return records
