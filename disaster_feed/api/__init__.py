"""
FastAPI disaster feed service.

Provides REST API and WebSocket stream for:
- Official agency updates (feed, sources, category, search)
- Social media crisis reports
"""

from disaster_feed.api.app import create_app

__all__ = ["create_app"]
