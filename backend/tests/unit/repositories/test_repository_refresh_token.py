"""Unit tests for RefreshTokenRepository."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from socialapp.models.refresh_token import RefreshToken
from socialapp.repositories.refresh_token import RefreshTokenRepository
from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory


class TestRefreshTokenRepository:
    @pytest.fixture()
    def repo(self, session):
        return RefreshTokenRepository(session=session)

    def test_lookups(self, repo):
        user = UserFactory()
        token = RefreshTokenFactory(user=user)

        assert repo.get_by_value(token.value).id == token.id
        assert repo.get_by_value("missing") is None

    def test_delete_by_value_counts_rows(self, repo, session):
        value = RefreshTokenFactory().value
        assert repo.delete_by_value(value) == 1
        assert repo.delete_by_value(value) == 0
        session.commit()
        assert repo.get_by_value(value) is None

    def test_delete_then_insert_in_one_transaction(self, repo, session):
        user = UserFactory()
        RefreshTokenFactory(user=user)

        assert repo.delete_for_user(user.id) == 1
        repo.add(
            RefreshToken(
                value="replacement",
                user_id=user.id,
                expires_at=datetime.now(UTC) + timedelta(days=1),
            )
        )
        session.commit()
        assert repo.get_by_value("replacement").user_id == user.id

    def test_second_row_for_account_violates_constraint(self, repo, session):
        user = UserFactory()
        RefreshTokenFactory(user=user)

        with pytest.raises(IntegrityError):
            repo.add(
                RefreshToken(
                    value="duplicate-owner",
                    user_id=user.id,
                    expires_at=datetime.now(UTC) + timedelta(days=1),
                )
            )
        session.rollback()

    def test_delete_expired(self, repo, session):
        now = datetime.now(UTC)
        stale = RefreshTokenFactory(expires_at=now - timedelta(minutes=1)).value
        live = RefreshTokenFactory(expires_at=now + timedelta(minutes=1)).value

        assert repo.delete_expired(now) == 1
        session.commit()
        assert repo.get_by_value(stale) is None
        assert repo.get_by_value(live) is not None

    def test_repr_hides_value(self):
        token = RefreshToken(value="secret-value", user_id=1, expires_at=datetime.now(UTC))
        assert "secret-value" not in repr(token)
