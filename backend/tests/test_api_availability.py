"""HTTP surface of the availability ledger."""

import pytest

URL = "/api/v1/availability/"


@pytest.fixture
def roster(make_user, make_team):
    tank, healer = make_user("Tank#1"), make_user("Heals#2")
    team = make_team("Vivacity", members=[(tank, "tank"), (healer, "support")])
    return tank, healer, team


def _available(rows):
    return [(row["day"], row["time"]) for row in rows if row["available"]]


def test_read_defaults_to_session_identity(client, roster, auth_headers):
    tank, _, team = roster

    response = client.get(URL, headers=auth_headers(tank.id, team.id))

    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 14
    assert rows[0] == {"day": "Monday", "time": "19:00", "available": False}


def test_user_without_team_is_unauthorized(client, make_user, auth_headers):
    loner = make_user()

    response = client.get(URL, headers=auth_headers(loner.id))

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_put_sets_single_slot(client, roster, auth_headers):
    tank, _, team = roster
    headers = auth_headers(tank.id, team.id)

    response = client.put(
        URL,
        json={"user_id": tank.id, "day": "Wednesday", "time": "21:00", "available": True},
        headers=headers,
    )

    assert response.status_code == 200
    assert _available(response.json()) == [("Wednesday", "21:00")]

    response = client.put(
        URL,
        json={"user_id": tank.id, "day": "Wednesday", "time": "21:00", "available": False},
        headers=headers,
    )
    assert _available(response.json()) == []


def test_put_for_another_player_is_unauthorized(client, roster, auth_headers):
    tank, healer, team = roster

    response = client.put(
        URL,
        json={"user_id": healer.id, "day": "Monday", "time": "19:00", "available": True},
        headers=auth_headers(tank.id, team.id),
    )

    assert response.status_code == 401


def test_put_unknown_slot_is_bad_request(client, roster, auth_headers):
    tank, _, team = roster

    response = client.put(
        URL,
        json={"user_id": tank.id, "day": "Monday", "time": "04:30", "available": True},
        headers=auth_headers(tank.id, team.id),
    )

    assert response.status_code == 400


def test_post_replaces_selection(client, roster, auth_headers):
    tank, _, team = roster
    headers = auth_headers(tank.id, team.id)
    client.put(
        URL,
        json={"user_id": tank.id, "day": "Monday", "time": "19:00", "available": True},
        headers=headers,
    )

    response = client.post(
        URL,
        json={
            "selected_slots": [
                {"day": "Friday", "time": "19:00"},
                {"day": "Saturday", "time": "21:00"},
            ]
        },
        headers=headers,
    )

    assert response.status_code == 200
    assert _available(response.json()) == [("Friday", "19:00"), ("Saturday", "21:00")]


def test_post_requires_a_selection(client, roster, auth_headers):
    tank, _, team = roster
    response = client.post(URL, json={"selected_slots": []}, headers=auth_headers(tank.id, team.id))
    assert response.status_code == 400


def test_post_with_unknown_slot_changes_nothing(client, roster, auth_headers):
    tank, _, team = roster
    headers = auth_headers(tank.id, team.id)
    client.put(
        URL,
        json={"user_id": tank.id, "day": "Monday", "time": "19:00", "available": True},
        headers=headers,
    )

    response = client.post(
        URL,
        json={"selected_slots": [{"day": "Friday", "time": "19:00"}, {"day": "Friday", "time": "06:00"}]},
        headers=headers,
    )

    assert response.status_code == 400
    assert _available(client.get(URL, headers=headers).json()) == [("Monday", "19:00")]


def test_teammate_can_read_but_outsider_cannot(client, roster, make_user, auth_headers):
    tank, healer, team = roster
    outsider = make_user()
    client.put(
        URL,
        json={"user_id": healer.id, "day": "Sunday", "time": "19:00", "available": True},
        headers=auth_headers(healer.id, team.id),
    )

    response = client.get(
        URL,
        params={"user_id": healer.id, "team_id": team.id},
        headers=auth_headers(tank.id, team.id),
    )
    assert response.status_code == 200
    assert _available(response.json()) == [("Sunday", "19:00")]

    response = client.get(
        URL,
        params={"user_id": healer.id, "team_id": team.id},
        headers=auth_headers(outsider.id),
    )
    assert response.status_code == 401


def test_stale_token_team_is_rechecked(client, roster, session, auth_headers):
    from app.services import membership

    tank, _, team = roster
    headers = auth_headers(tank.id, team.id)
    membership.remove_member(session, team_id=team.id, user_id=tank.id)

    assert client.get(URL, headers=headers).status_code == 401
