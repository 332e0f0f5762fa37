"""Tests for the relational refresh token store."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from socialapp.infra.sqlalchemy.sql_refresh_token_store import SQLRefreshTokenStore
from socialapp.models.refresh_token import RefreshToken
from socialapp.services._shared.errors import (
    AccountNotFoundError,
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
)
from tests.factories.user import UserFactory
from tests.helpers.utils import ManualClock, not_raises

TTL = timedelta(days=7)


def _rows(session, user_id=None) -> int:
    stmt = select(func.count()).select_from(RefreshToken)
    if user_id is not None:
        stmt = stmt.where(RefreshToken.user_id == user_id)
    return int(session.execute(stmt).scalar_one())


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def store(db, clock) -> SQLRefreshTokenStore:
    return SQLRefreshTokenStore(ttl=TTL, clock=clock)


class TestCreate:
    def test_create_persists_one_row(self, store, session, clock):
        user = UserFactory()

        token = store.create(user.id)

        assert token.account_id == user.id
        assert token.expires_at == clock() + TTL
        assert len(token.value) >= 64
        assert _rows(session, user.id) == 1

    def test_create_replaces_previous_token(self, store, session):
        user = UserFactory()
        first = store.create(user.id)
        second = store.create(user.id)

        assert first.value != second.value
        assert _rows(session, user.id) == 1
        with pytest.raises(RefreshTokenNotFoundError):
            store.find_by_value(first.value)
        assert store.find_by_value(second.value).id == second.id

    def test_create_leaves_other_accounts_alone(self, store, session):
        alice, bob = UserFactory(), UserFactory()
        alice_token = store.create(alice.id)
        store.create(bob.id)

        assert store.find_by_value(alice_token.value).account_id == alice.id
        assert _rows(session) == 2

    def test_create_for_unknown_account(self, store, session):
        with pytest.raises(AccountNotFoundError):
            store.create(999_999)
        assert _rows(session) == 0

    def test_values_are_unique(self, store):
        users = UserFactory.create_batch(5)
        values = {store.create(u.id).value for u in users}
        assert len(values) == 5

    def test_failure_after_delete_keeps_previous_token(self, store, session, clock):
        user = UserFactory()
        previous = store.create(user.id)

        def _exploding_value() -> str:
            raise RuntimeError("entropy source unavailable")

        broken = SQLRefreshTokenStore(ttl=TTL, clock=clock, value_factory=_exploding_value)
        with pytest.raises(RuntimeError):
            broken.create(user.id)

        assert _rows(session, user.id) == 1
        assert store.find_by_value(previous.value).id == previous.id

    def test_failed_insert_keeps_previous_token(self, store, session, clock):
        alice, bob = UserFactory(), UserFactory()
        taken = store.create(alice.id)
        previous = store.create(bob.id)

        colliding = SQLRefreshTokenStore(ttl=TTL, clock=clock, value_factory=lambda: taken.value)
        with pytest.raises(IntegrityError):
            colliding.create(bob.id)

        assert _rows(session, bob.id) == 1
        assert store.find_by_value(previous.value).account_id == bob.id


class TestFindAndExpiry:
    def test_find_unknown_value(self, store):
        with pytest.raises(RefreshTokenNotFoundError):
            store.find_by_value("never-issued")

    def test_verify_not_expired_returns_token(self, store, clock):
        token = store.create(UserFactory().id)
        clock.advance(days=6)
        assert store.verify_not_expired(store.find_by_value(token.value)) == token

    def test_token_valid_at_exact_expiry(self, store, clock):
        token = store.create(UserFactory().id)
        clock.advance(days=7)
        with not_raises(RefreshTokenExpiredError):
            store.verify_not_expired(token)

    def test_expired_token_is_deleted(self, store, session, clock):
        user = UserFactory()
        token = store.create(user.id)
        clock.advance(days=7, seconds=1)

        with pytest.raises(RefreshTokenExpiredError):
            store.verify_not_expired(store.find_by_value(token.value))

        assert _rows(session, user.id) == 0
        with pytest.raises(RefreshTokenNotFoundError):
            store.find_by_value(token.value)


class TestDelete:
    def test_delete_is_idempotent(self, store, session):
        token = store.create(UserFactory().id)
        store.delete(token.value)
        with not_raises(Exception):
            store.delete(token.value)
            store.delete("never-issued")
        assert _rows(session) == 0

    def test_delete_for_account(self, store, session):
        user = UserFactory()
        store.create(user.id)
        assert store.delete_for_account(user.id) == 1
        assert store.delete_for_account(user.id) == 0
        assert _rows(session) == 0

    def test_purge_expired(self, store, session, clock):
        old_user, fresh_user = UserFactory(), UserFactory()
        store.create(old_user.id)
        clock.advance(days=3)
        kept = store.create(fresh_user.id)
        clock.advance(days=5)

        assert store.purge_expired() == 1
        assert _rows(session) == 1
        assert store.find_by_value(kept.value).account_id == fresh_user.id
