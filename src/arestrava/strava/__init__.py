r"""Strava API client, models and authorization URLs."""

from __future__ import annotations

__all__ = [
    "Activity",
    "ActivityMap",
    "Athlete",
    "Platform",
    "StravaClient",
    "SummaryActivity",
    "TokenResponse",
    "build_authorization_url",
]

from arestrava.strava.auth import Platform, build_authorization_url
from arestrava.strava.client import StravaClient
from arestrava.strava.models import (
    Activity,
    ActivityMap,
    Athlete,
    SummaryActivity,
    TokenResponse,
)
