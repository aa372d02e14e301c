from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest

from expense_tracker.application.use_cases.users.current_user import GetCurrentUserUseCase
from expense_tracker.application.use_cases.users.login_user import LoginUserUseCase
from expense_tracker.application.use_cases.users.register_user import RegisterUserUseCase
from expense_tracker.domain.users.entities import IssuedToken, NewUser, User
from expense_tracker.domain.users.exceptions import (
    InvalidCredentialsError,
    UnknownUserError,
    UserAlreadyExistsError,
)
from expense_tracker.domain.users.repositories import PasswordHasher, TokenService, UserRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def find_by_login(self, identifier: str) -> User | None:
        for user in self._users.values():
            if identifier in (user.username, user.email):
                return user
        return None

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def exists(self, *, username: str, email: str) -> bool:
        return any(u.username == username or u.email == email for u in self._users.values())

    def add(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def touch_last_login(self, user_id: str, at: datetime) -> None:
        self._users[user_id] = replace(self._users[user_id], last_login=at)


class CountingTokenService(TokenService):
    def __init__(self) -> None:
        self.issued: list[str] = []

    def issue(self, user_id: str) -> IssuedToken:
        self.issued.append(user_id)
        return IssuedToken(
            user_id=user_id,
            token=f"token-{user_id}-{len(self.issued)}",
            expires_at=datetime.now(UTC) + timedelta(hours=1),
        )

    def verify(self, token: str) -> str:
        return token.split("-", 1)[1].rsplit("-", 1)[0]


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.verify_calls = 0

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verify_calls += 1
        return hashed == f"hashed:{password}"


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def tokens() -> CountingTokenService:
    return CountingTokenService()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


def _alice() -> NewUser:
    return NewUser(username=" Alice ", email="Alice@Example.com", password="secret123")


def test_register_user_success(
    users: InMemoryUserRepository, tokens: CountingTokenService, hasher: DeterministicHasher
) -> None:
    use_case = RegisterUserUseCase(users=users, tokens=tokens, password_hasher=hasher)

    user, token = use_case.execute(_alice())

    assert user.username == "alice"
    assert user.email == "alice@example.com"
    assert user.display_name == "alice"
    assert user.password_hash == "hashed:secret123"
    assert token == f"token-{user.id}-1"
    assert users.find_by_id(user.id) == user


def test_register_user_duplicate_raises(
    users: InMemoryUserRepository, tokens: CountingTokenService, hasher: DeterministicHasher
) -> None:
    use_case = RegisterUserUseCase(users=users, tokens=tokens, password_hasher=hasher)
    use_case.execute(_alice())

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute(NewUser(username="ALICE", email="other@example.com", password="x12345"))
    with pytest.raises(UserAlreadyExistsError):
        use_case.execute(NewUser(username="bob", email="alice@example.com", password="x12345"))


def test_login_by_username_or_email(
    users: InMemoryUserRepository, tokens: CountingTokenService, hasher: DeterministicHasher
) -> None:
    RegisterUserUseCase(users=users, tokens=tokens, password_hasher=hasher).execute(_alice())
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher)

    by_name, _ = login.execute("ALICE", "secret123")
    by_email, _ = login.execute("alice@example.com", "secret123")

    assert by_name.id == by_email.id
    assert len(tokens.issued) == 3


def test_login_records_last_login(
    users: InMemoryUserRepository, tokens: CountingTokenService, hasher: DeterministicHasher
) -> None:
    user, _ = RegisterUserUseCase(
        users=users, tokens=tokens, password_hasher=hasher
    ).execute(_alice())
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher)

    first, _ = login.execute("alice", "secret123")
    second, _ = login.execute("alice", "secret123")

    assert first.last_login is None
    assert second.last_login is not None
    assert users.find_by_id(user.id).last_login is not None


def test_login_wrong_password_and_unknown_user_look_the_same(
    users: InMemoryUserRepository, tokens: CountingTokenService, hasher: DeterministicHasher
) -> None:
    RegisterUserUseCase(users=users, tokens=tokens, password_hasher=hasher).execute(_alice())
    login = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher)

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("alice", "wrong")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        login.execute("nobody", "wrong")

    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
    # Unknown users still cost one hash verification
    assert hasher.verify_calls == 2
    assert tokens.issued == [tokens.issued[0]]


def test_current_user_unknown_raises(users: InMemoryUserRepository) -> None:
    with pytest.raises(UnknownUserError):
        GetCurrentUserUseCase(users=users).execute("missing")
