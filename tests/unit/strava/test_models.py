from __future__ import annotations

from datetime import datetime, timezone

import pytest

from arestrava.exceptions import DocumentFieldError
from arestrava.strava.models import (
    Activity,
    ActivityMap,
    Athlete,
    SummaryActivity,
    TokenResponse,
    parse_summary_activities,
)
from arestrava.tokens import Tokens

SUMMARY_ACTIVITY = {
    "resource_state": 2,
    "athlete": {"id": 134815, "resource_state": 1},
    "name": "Happy Friday",
    "distance": 24931.4,
    "moving_time": 4500,
    "elapsed_time": 4500,
    "type": "Ride",
    "sport_type": "MountainBikeRide",
    "id": 154504250376823,
    "start_date": "2018-05-02T12:15:09Z",
    "start_date_local": "2018-05-02T05:15:09Z",
    "timezone": "(GMT-08:00) America/Los_Angeles",
    "utc_offset": -25200,
    "start_latlng": [37.83, -122.26],
    "end_latlng": [37.83, -122.26],
    "map": {
        "id": "a12345678908766",
        "polyline": None,
        "summary_polyline": "ki{eFvqfiVqAWQIGEEKAYJgBVqDJ{BHa@jAkNJw@Pw@V{APs@^aABQAOEQGK",
    },
    "private": False,
    "visibility": "everyone",
}

ACTIVITY = {
    "id": 12345678987654321,
    "resource_state": 3,
    "external_id": "garmin_push_12345678987654321",
    "upload_id": 98765432123456789,
    "athlete": {"id": 134815, "resource_state": 1},
    "name": "Happy Friday",
    "distance": 28099,
    "moving_time": 4207,
    "elapsed_time": 4410,
    "type": "Ride",
    "start_date": "2018-02-16T14:52:54Z",
    "start_date_local": "2018-02-16T06:52:54Z",
    "timezone": "(GMT-08:00) America/Los_Angeles",
    "start_latlng": [37.83, -122.26],
    "end_latlng": [37.83, -122.26],
    "location_city": None,
    "description": "",
    "map": {
        "id": "a1410355832",
        "polyline": "ki{eFvqfiVqAWQIGEEKAYJgBVqDJ{BHa@jAkNJw@Pw@V{APs@^aABQAOEQGK",
        "resource_state": 3,
        "summary_polyline": "ki{eFvqfiVsBmA`Feh@qG_H_@m@",
    },
}

TOKEN_RESPONSE = {
    "token_type": "Bearer",
    "expires_at": 1568775134,
    "expires_in": 21600,
    "refresh_token": "e5n567567",
    "access_token": "a4b945687g",
    "athlete": {
        "id": 1234567,
        "username": "ada",
        "resource_state": 2,
        "firstname": "Ada",
        "lastname": "Lovelace",
        "city": "London",
        "country": "United Kingdom",
        "sex": "F",
    },
}

#############################
#     Tests for Athlete     #
#############################


def test_athlete_from_dict() -> None:
    athlete = Athlete.from_dict(TOKEN_RESPONSE["athlete"])
    assert athlete == Athlete(
        id=1234567,
        username="ada",
        resource_state=2,
        firstname="Ada",
        lastname="Lovelace",
        city="London",
        state=None,
        country="United Kingdom",
        sex="F",
    )


def test_athlete_from_dict_minimal() -> None:
    assert Athlete.from_dict({"id": 1}) == Athlete(id=1)


def test_athlete_from_dict_missing_id() -> None:
    with pytest.raises(DocumentFieldError, match=r"'id'"):
        Athlete.from_dict({"firstname": "Ada"})


###################################
#     Tests for TokenResponse     #
###################################


def test_token_response_from_dict() -> None:
    response = TokenResponse.from_dict(TOKEN_RESPONSE)
    assert response.token_type == "Bearer"
    assert response.expires_in == 21600
    assert response.athlete is not None
    assert response.athlete.id == 1234567
    assert response.tokens == Tokens(
        access_token="a4b945687g", refresh_token="e5n567567", expires_at=1568775134
    )


def test_token_response_from_dict_without_athlete() -> None:
    payload = {key: value for key, value in TOKEN_RESPONSE.items() if key != "athlete"}
    assert TokenResponse.from_dict(payload).athlete is None


def test_token_response_from_dict_missing_token() -> None:
    with pytest.raises(DocumentFieldError, match=r"access_token"):
        TokenResponse.from_dict({"refresh_token": "r", "expires_at": 1})


#####################################
#     Tests for SummaryActivity     #
#####################################


def test_summary_activity_from_dict() -> None:
    activity = SummaryActivity.from_dict(SUMMARY_ACTIVITY)
    assert activity.id == 154504250376823
    assert activity.name == "Happy Friday"
    assert activity.athlete_id == 134815
    assert activity.distance == 24931.4
    assert activity.moving_time == 4500
    assert activity.sport_type == "MountainBikeRide"
    assert activity.start_date == datetime(2018, 5, 2, 12, 15, 9, tzinfo=timezone.utc)
    assert activity.utc_offset == -25200.0
    assert activity.start_latlng == [37.83, -122.26]
    assert activity.map.id == "a12345678908766"
    assert activity.map.polyline is None
    assert not activity.private
    assert activity.visibility == "everyone"


def test_summary_activity_from_dict_minimal() -> None:
    activity = SummaryActivity.from_dict({"id": 1})
    assert activity == SummaryActivity(id=1)
    assert activity.map == ActivityMap()
    assert activity.start_date is None
    assert activity.start_latlng == []


def test_summary_activity_integer_distance_is_widened() -> None:
    activity = SummaryActivity.from_dict({"id": 1, "distance": 1000})
    assert activity.distance == 1000.0
    assert isinstance(activity.distance, float)


##############################################
#     Tests for parse_summary_activities     #
##############################################


def test_parse_summary_activities() -> None:
    activities = parse_summary_activities([SUMMARY_ACTIVITY, {"id": 2, "name": "Lunch Run"}])
    assert [activity.id for activity in activities] == [154504250376823, 2]
    assert activities[1].name == "Lunch Run"


def test_parse_summary_activities_empty() -> None:
    assert parse_summary_activities([]) == []


def test_parse_summary_activities_not_a_list() -> None:
    with pytest.raises(TypeError, match=r"expected a list of activities, got dict"):
        parse_summary_activities({"id": 1})


##############################
#     Tests for Activity     #
##############################


def test_activity_from_dict() -> None:
    activity = Activity.from_dict(ACTIVITY)
    assert activity.id == 12345678987654321
    assert activity.external_id == "garmin_push_12345678987654321"
    assert activity.upload_id == 98765432123456789
    assert activity.distance == 28099.0
    assert activity.elapsed_time == 4410
    assert activity.start_date_local == datetime(2018, 2, 16, 6, 52, 54, tzinfo=timezone.utc)
    assert activity.location_city is None
    assert activity.description == ""
    assert activity.map.summary_polyline == "ki{eFvqfiVsBmA`Feh@qG_H_@m@"


def test_activity_from_dict_invalid_date() -> None:
    with pytest.raises(ValueError):
        Activity.from_dict({"id": 1, "start_date": "yesterday"})


#########################################
#     Tests for wrongly typed fields    #
#########################################


@pytest.mark.parametrize(
    ("payload", "key"),
    [
        ({"id": 1, "distance": "abc"}, "distance"),
        ({"id": 1, "name": 42}, "name"),
        ({"id": 1, "private": "no"}, "private"),
        ({"id": 1, "start_latlng": "37.83,-122.26"}, "start_latlng"),
        ({"id": 1, "map": "a123"}, "map"),
        ({"id": 1, "athlete": {"id": "134815"}}, "id"),
    ],
)
def test_summary_activity_wrong_type_raises(payload: dict, key: str) -> None:
    with pytest.raises(DocumentFieldError) as exc_info:
        SummaryActivity.from_dict(payload)
    assert exc_info.value.key == key


def test_summary_activity_null_fields_use_defaults() -> None:
    activity = SummaryActivity.from_dict(
        {"id": 1, "name": None, "distance": None, "start_date": None, "map": None}
    )
    assert activity == SummaryActivity(id=1)


def test_athlete_wrong_type_raises() -> None:
    with pytest.raises(DocumentFieldError, match=r"'firstname' is missing or is not a str"):
        Athlete.from_dict({"id": 1, "firstname": ["Ada"]})


def test_activity_wrong_type_raises() -> None:
    with pytest.raises(DocumentFieldError, match=r"'upload_id' is missing or is not a int"):
        Activity.from_dict({"id": 1, "upload_id": "98765"})
