"""Membership resolver, authorization guard and team membership CRUD."""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from app.core.errors import NotFound, Unauthorized, ValidationError
from app.models import TeamMember
from app.services import membership
from app.services.permissions import ensure_member, is_member


def test_current_team_is_none_without_membership(session, make_user):
    user = make_user()
    assert membership.current_team(session, user.id) is None


def test_current_team_returns_the_team(session, make_user, make_team):
    user = make_user()
    team = make_team("Vagrants", members=[(user, "tank")])
    assert membership.current_team(session, user.id) == team.id


def test_current_team_with_several_rows_warns_and_picks_oldest(
    session, make_user, make_team, caplog
):
    # Simulate a legacy database created before the single-team index existed
    session.connection().execute(text("DROP INDEX uq_team_members_user_id"))
    user = make_user()
    older = make_team("Kingpins")
    newer = make_team("Vivacity")
    joined = datetime(2024, 1, 1, tzinfo=timezone.utc)
    session.add(TeamMember(user_id=user.id, team_id=newer.id, joined_at=joined + timedelta(days=3)))
    session.add(TeamMember(user_id=user.id, team_id=older.id, joined_at=joined))
    session.commit()

    with caplog.at_level(logging.WARNING, logger="app.services.membership"):
        team_id = membership.current_team(session, user.id)

    assert team_id == older.id
    assert "Data integrity" in caplog.text


def test_is_member(session, make_user, make_team):
    member, outsider = make_user(), make_user()
    team = make_team(members=[(member, "dps")])

    assert is_member(session, member.id, team.id)
    assert not is_member(session, outsider.id, team.id)
    assert not is_member(session, member.id, None)
    assert not is_member(session, member.id, 999)


def test_ensure_member_hides_missing_teams(session, make_user):
    user = make_user()
    with pytest.raises(Unauthorized):
        ensure_member(session, user.id, 12345)


def test_add_member_enforces_single_team(session, make_user, make_team):
    user = make_user()
    first = make_team("Kingpins", members=[(user, "tank")])
    second = make_team("Vagrants")

    with pytest.raises(ValidationError):
        membership.add_member(session, team_id=second.id, user_id=user.id)
    with pytest.raises(ValidationError):
        membership.add_member(session, team_id=first.id, user_id=user.id)
    assert membership.current_team(session, user.id) == first.id


def test_add_member_requires_existing_user(session, make_team):
    team = make_team()
    with pytest.raises(NotFound):
        membership.add_member(session, team_id=team.id, user_id=31337)


def test_update_role_and_remove_member(session, make_user, make_team):
    user = make_user()
    team = make_team(members=[(user, "flex")])

    membership.update_role(session, team_id=team.id, user_id=user.id, role="support")
    [(member, _)] = membership.list_members(session, team.id)
    assert member.role == "support"

    membership.remove_member(session, team_id=team.id, user_id=user.id)
    assert membership.current_team(session, user.id) is None
    with pytest.raises(NotFound):
        membership.remove_member(session, team_id=team.id, user_id=user.id)
