"""Disaster feed: official updates and social media crisis reports."""

__version__ = "0.1.0"
