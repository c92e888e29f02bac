"""Identity store and first-login reconciliation."""

import threading

import pytest
from sqlmodel import Session, func, select

from app.core.errors import ConflictError, IdentityCorruptionError, NotFound
from app.models import TeamMember, User
from app.services import identity
from app.services.reconciliation import (
    ExternalIdentity,
    ReconciledIdentity,
    reconcile,
)


def _user_count(session, external_id):
    return session.exec(
        select(func.count()).select_from(User).where(User.external_id == external_id)
    ).one()


def test_create_user_rejects_duplicate_external_id(session):
    identity.create_user(session, "bnet-1", "Tracer#1111")

    with pytest.raises(ConflictError):
        identity.create_user(session, "bnet-1", "Impostor#2222")

    # The failed insert was rolled back and the session is usable again
    assert _user_count(session, "bnet-1") == 1


def test_get_user_raises_not_found(session):
    with pytest.raises(NotFound):
        identity.get_user(session, 404)


def test_first_login_creates_user_without_team(session):
    resolved = reconcile(session, ExternalIdentity("bnet-42", "Ana#4242"))

    user = session.get(User, resolved.user_id)
    assert user.external_id == "bnet-42"
    assert user.display_name == "Ana#4242"
    assert resolved == ReconciledIdentity(user_id=user.id, team_id=None)


def test_reconcile_is_idempotent_and_refreshes_display_name(session):
    first = reconcile(session, ExternalIdentity("bnet-42", "Ana#4242"))
    second = reconcile(session, ExternalIdentity("bnet-42", "Ana#9999"))

    assert first.user_id == second.user_id
    assert _user_count(session, "bnet-42") == 1
    user = session.get(User, first.user_id)
    assert user.display_name == "Ana#9999"
    assert user.external_id == "bnet-42"
    assert user.updated_at >= user.created_at


def test_reconcile_reports_current_team(session, make_team):
    first = reconcile(session, ExternalIdentity("bnet-7", "Mercy#7777"))
    team = make_team("Kingpins")
    session.add(TeamMember(user_id=first.user_id, team_id=team.id, role="support"))
    session.commit()

    second = reconcile(session, ExternalIdentity("bnet-7", "Mercy#7777"))

    assert second.user_id == first.user_id
    assert second.team_id == team.id


def test_conflict_on_create_rereads_existing_user(session, make_user, monkeypatch):
    existing = make_user("Genji#1000", external_id="bnet-race")
    calls = []
    real_find = identity.find_by_external_id

    def find_missing_first(session, external_id):
        # The first lookup happens before the competing insert lands
        calls.append(external_id)
        if len(calls) == 1:
            return None
        return real_find(session, external_id)

    monkeypatch.setattr(identity, "find_by_external_id", find_missing_first)

    resolved = reconcile(session, ExternalIdentity("bnet-race", "Genji#1000"))

    assert resolved.user_id == existing.id
    assert len(calls) == 2
    assert _user_count(session, "bnet-race") == 1


def test_conflict_without_readable_row_is_corruption(session, monkeypatch):
    def conflict(session, external_id, display_name):
        raise ConflictError()

    monkeypatch.setattr(identity, "find_by_external_id", lambda session, external_id: None)
    monkeypatch.setattr(identity, "create_user", conflict)

    with pytest.raises(IdentityCorruptionError):
        reconcile(session, ExternalIdentity("bnet-ghost", "Ghost#0000"))


def test_concurrent_first_logins_create_one_user(file_engine):
    barrier = threading.Barrier(2)
    results, errors = [], []

    def login():
        barrier.wait()
        try:
            with Session(file_engine) as session:
                results.append(reconcile(session, ExternalIdentity("bnet-77", "Sombra#77")))
        except Exception as exc:  # surfaced through the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=login) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(results) == 2
    assert results[0].user_id == results[1].user_id
    with Session(file_engine) as session:
        assert _user_count(session, "bnet-77") == 1
