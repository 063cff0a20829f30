r"""Payloads returned by the Strava API.

Each model is built from the decoded JSON body through the typed
accessors of ``Document``. Optional fields fall back to a default when
absent or null. A field present with the wrong type, or a missing
required field, raises ``DocumentFieldError``.
"""

from __future__ import annotations

__all__ = [
    "Activity",
    "ActivityMap",
    "Athlete",
    "SummaryActivity",
    "TokenResponse",
    "parse_summary_activities",
]

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from arestrava.storage.documents import Document
from arestrava.tokens import Tokens


def _parse_datetime(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _latlng(document: Document, key: str) -> list[float]:
    return [float(x) for x in document.get_optional(key, "list", [])]


@dataclass
class Athlete:
    """Profile of the authenticated athlete."""

    id: int
    username: str | None = None
    resource_state: int = 0
    firstname: str = ""
    lastname: str = ""
    city: str | None = None
    state: str | None = None
    country: str | None = None
    sex: str | None = None

    @classmethod
    def from_dict(cls, payload: Any) -> Athlete:
        doc = Document(payload)
        return cls(
            id=doc.require_int("id"),
            username=doc.get_optional("username", "str"),
            resource_state=doc.get_optional("resource_state", "int", 0),
            firstname=doc.get_optional("firstname", "str", ""),
            lastname=doc.get_optional("lastname", "str", ""),
            city=doc.get_optional("city", "str"),
            state=doc.get_optional("state", "str"),
            country=doc.get_optional("country", "str"),
            sex=doc.get_optional("sex", "str"),
        )


@dataclass
class TokenResponse:
    """Payload of the authorization code exchange."""

    access_token: str
    refresh_token: str
    expires_at: int
    token_type: str = ""
    expires_in: int = 0
    athlete: Athlete | None = None

    @classmethod
    def from_dict(cls, payload: Any) -> TokenResponse:
        doc = Document(payload)
        athlete = doc.get_optional("athlete", "document")
        return cls(
            access_token=doc.require_str("access_token"),
            refresh_token=doc.require_str("refresh_token"),
            expires_at=doc.require_int("expires_at"),
            token_type=doc.get_optional("token_type", "str", ""),
            expires_in=doc.get_optional("expires_in", "int", 0),
            athlete=None if athlete is None else Athlete.from_dict(athlete),
        )

    @property
    def tokens(self) -> Tokens:
        return Tokens(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expires_at=self.expires_at,
        )


@dataclass
class ActivityMap:
    id: str = ""
    polyline: str | None = None
    summary_polyline: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> ActivityMap:
        doc = Document(payload)
        return cls(
            id=doc.get_optional("id", "str", ""),
            polyline=doc.get_optional("polyline", "str"),
            summary_polyline=doc.get_optional("summary_polyline", "str", ""),
        )


@dataclass
class SummaryActivity:
    """One item of the activity list of the athlete."""

    id: int
    name: str = ""
    athlete_id: int | None = None
    distance: float = 0.0
    moving_time: int = 0
    elapsed_time: int = 0
    type: str = ""
    sport_type: str = ""
    start_date: datetime | None = None
    start_date_local: datetime | None = None
    timezone: str = ""
    utc_offset: float = 0.0
    private: bool = False
    visibility: str = ""
    start_latlng: list[float] = field(default_factory=list)
    end_latlng: list[float] = field(default_factory=list)
    map: ActivityMap = field(default_factory=ActivityMap)

    @classmethod
    def from_dict(cls, payload: Any) -> SummaryActivity:
        doc = Document(payload)
        athlete = doc.get_optional("athlete", "document")
        activity_map = doc.get_optional("map", "document")
        return cls(
            id=doc.require_int("id"),
            name=doc.get_optional("name", "str", ""),
            athlete_id=None if athlete is None else athlete.get_optional("id", "int"),
            distance=doc.get_optional("distance", "float", 0.0),
            moving_time=doc.get_optional("moving_time", "int", 0),
            elapsed_time=doc.get_optional("elapsed_time", "int", 0),
            type=doc.get_optional("type", "str", ""),
            sport_type=doc.get_optional("sport_type", "str", ""),
            start_date=_parse_datetime(doc.get_optional("start_date", "str")),
            start_date_local=_parse_datetime(doc.get_optional("start_date_local", "str")),
            timezone=doc.get_optional("timezone", "str", ""),
            utc_offset=doc.get_optional("utc_offset", "float", 0.0),
            private=doc.get_optional("private", "bool", False),
            visibility=doc.get_optional("visibility", "str", ""),
            start_latlng=_latlng(doc, "start_latlng"),
            end_latlng=_latlng(doc, "end_latlng"),
            map=ActivityMap() if activity_map is None else ActivityMap.from_dict(activity_map),
        )


def parse_summary_activities(payload: Any) -> list[SummaryActivity]:
    """Decode the body of the activity list endpoint.

    Raises:
        TypeError: If the payload is not a list.
    """
    if not isinstance(payload, list):
        msg = f"expected a list of activities, got {type(payload).__name__}"
        raise TypeError(msg)
    return [SummaryActivity.from_dict(item) for item in payload]


@dataclass
class Activity:
    """Detailed representation of one activity."""

    id: int
    name: str = ""
    external_id: str | None = None
    upload_id: int | None = None
    description: str | None = None
    distance: float = 0.0
    moving_time: int = 0
    elapsed_time: int = 0
    type: str = ""
    start_date: datetime | None = None
    start_date_local: datetime | None = None
    timezone: str = ""
    start_latlng: list[float] = field(default_factory=list)
    end_latlng: list[float] = field(default_factory=list)
    location_city: str | None = None
    location_state: str | None = None
    location_country: str | None = None
    map: ActivityMap = field(default_factory=ActivityMap)

    @classmethod
    def from_dict(cls, payload: Any) -> Activity:
        doc = Document(payload)
        activity_map = doc.get_optional("map", "document")
        return cls(
            id=doc.require_int("id"),
            name=doc.get_optional("name", "str", ""),
            external_id=doc.get_optional("external_id", "str"),
            upload_id=doc.get_optional("upload_id", "int"),
            description=doc.get_optional("description", "str"),
            distance=doc.get_optional("distance", "float", 0.0),
            moving_time=doc.get_optional("moving_time", "int", 0),
            elapsed_time=doc.get_optional("elapsed_time", "int", 0),
            type=doc.get_optional("type", "str", ""),
            start_date=_parse_datetime(doc.get_optional("start_date", "str")),
            start_date_local=_parse_datetime(doc.get_optional("start_date_local", "str")),
            timezone=doc.get_optional("timezone", "str", ""),
            start_latlng=_latlng(doc, "start_latlng"),
            end_latlng=_latlng(doc, "end_latlng"),
            location_city=doc.get_optional("location_city", "str"),
            location_state=doc.get_optional("location_state", "str"),
            location_country=doc.get_optional("location_country", "str"),
            map=ActivityMap() if activity_map is None else ActivityMap.from_dict(activity_map),
        )
