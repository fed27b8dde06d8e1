"""Fixture social posts, the last link of the provider chain."""

from datetime import datetime, timedelta, timezone

from disaster_feed.social.schemas import Priority, SocialPost

_FIXTURE_POSTS: tuple[dict, ...] = (
    {
        "id": "1",
        "post": "#floodrelief Need food and water in Lower Manhattan. Families stranded!",
        "user": "citizen_helper1",
        "age": timedelta(hours=2),
        "priority": Priority.HIGH,
        "location": "Lower Manhattan, NYC",
        "hashtags": ["#floodrelief", "#emergency"],
    },
    {
        "id": "2",
        "post": "Offering shelter in Brooklyn Heights for flood victims. Contact me! #disasterhelp",
        "user": "brooklyn_resident",
        "age": timedelta(hours=1),
        "priority": Priority.MEDIUM,
        "location": "Brooklyn Heights, NYC",
        "hashtags": ["#disasterhelp", "#shelter"],
    },
    {
        "id": "3",
        "post": "URGENT: Medical supplies needed at evacuation center on 42nd Street #emergencyhelp",
        "user": "medical_volunteer",
        "age": timedelta(minutes=30),
        "priority": Priority.URGENT,
        "location": "42nd Street, NYC",
        "hashtags": ["#emergencyhelp", "#medical"],
    },
    {
        "id": "4",
        "post": "Earthquake felt in downtown area. Buildings shaking! #earthquake #help",
        "user": "downtown_witness",
        "age": timedelta(minutes=15),
        "priority": Priority.URGENT,
        "location": "Downtown",
        "hashtags": ["#earthquake", "#help"],
    },
    {
        "id": "5",
        "post": "Fire spreading near residential area. Evacuations needed! #fire #evacuate",
        "user": "safety_alert",
        "age": timedelta(minutes=45),
        "priority": Priority.URGENT,
        "location": "Residential District",
        "hashtags": ["#fire", "#evacuate"],
    },
    {
        "id": "6",
        "post": "Have extra blankets and warm clothes for disaster victims #donate #help",
        "user": "community_helper",
        "age": timedelta(hours=3),
        "priority": Priority.LOW,
        "location": "Community Center",
        "hashtags": ["#donate", "#help"],
    },
)


def fixture_posts(now: datetime | None = None) -> list[SocialPost]:
    """Materialise the fixture posts against ``now``."""
    now = now or datetime.now(timezone.utc)
    posts = []
    for entry in _FIXTURE_POSTS:
        fields = {k: v for k, v in entry.items() if k != "age"}
        posts.append(SocialPost(timestamp=now - entry["age"], verified=False, **fields))
    return posts
