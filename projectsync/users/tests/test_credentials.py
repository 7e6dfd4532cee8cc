from unittest import mock

import pytest
from django.contrib.auth.hashers import check_password
from rest_framework_simplejwt.tokens import AccessToken

from projectsync.core.exceptions import InvalidCredentials
from projectsync.store import UsernameTaken
from projectsync.store.memory import MemoryUserStore
from projectsync.users.credentials import CredentialStore


class TestCredentialStore:
    def setup_method(self):
        self.users = MemoryUserStore()
        self.credentials = CredentialStore(self.users)

    def test_first_login_registers_user(self, caplog):
        caplog.set_level("INFO", logger="projectsync.users.credentials")
        result = self.credentials.authenticate("alice", "secret123", "admin")
        assert "Registered user alice with role admin" in caplog.text
        assert result.user.to_dict() == {"id": 1, "username": "alice", "role": "admin"}
        stored = self.users.get_user("alice")
        assert stored.password != "secret123"  # noqa: S105
        assert check_password("secret123", stored.password)

    def test_token_carries_identity(self):
        result = self.credentials.authenticate("alice", "secret123", "admin")
        token = AccessToken(result.token)
        assert token["user_id"] == result.user.id
        assert token["username"] == "alice"
        assert token["role"] == "admin"
        assert token["exp"] - token["iat"] == 24 * 60 * 60

    def test_repeat_login_keeps_stored_role(self):
        self.credentials.authenticate("alice", "secret123", "admin")
        result = self.credentials.authenticate("alice", "secret123", "viewer")
        assert result.user.id == 1
        assert result.user.role == "admin"
        assert AccessToken(result.token)["role"] == "admin"

    def test_wrong_password(self):
        self.credentials.authenticate("alice", "secret123", "admin")
        with pytest.raises(InvalidCredentials) as exc_info:
            self.credentials.authenticate("alice", "wrongpass", "admin")
        assert str(exc_info.value.detail) == "Invalid credentials"

    def test_lost_registration_race_checks_winner(self):
        winner = MemoryUserStore()
        CredentialStore(winner).authenticate("alice", "secret123", "admin")
        racing = mock.Mock(wraps=winner)
        racing.get_user.side_effect = [None, winner.get_user("alice")]
        racing.add_user.side_effect = UsernameTaken("alice")
        credentials = CredentialStore(racing)

        result = credentials.authenticate("alice", "secret123", "viewer")
        assert result.user.role == "admin"
        racing.add_user.assert_called_once()

        racing.get_user.side_effect = [None, winner.get_user("alice")]
        with pytest.raises(InvalidCredentials):
            credentials.authenticate("alice", "other-pass", "viewer")
