from __future__ import annotations

import pytest

from expense_tracker.application.services.password_hashing import WerkzeugPasswordHasher


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher()


def test_verify_accepts_same_password(hasher: WerkzeugPasswordHasher) -> None:
    hashed = hasher.hash("secret123")

    assert hasher.verify("secret123", hashed) is True


def test_verify_rejects_other_password(hasher: WerkzeugPasswordHasher) -> None:
    hashed = hasher.hash("secret123")

    assert hasher.verify("secret124", hashed) is False


def test_hashes_are_salted(hasher: WerkzeugPasswordHasher) -> None:
    first = hasher.hash("secret123")
    second = hasher.hash("secret123")

    assert first != second
    assert "secret123" not in first
    assert hasher.verify("secret123", first)
    assert hasher.verify("secret123", second)


@pytest.mark.parametrize("stored", ["", "not-a-hash", "scrypt:broken$salt", "md5$$abc"])
def test_malformed_stored_hash_is_rejected(hasher: WerkzeugPasswordHasher, stored: str) -> None:
    assert hasher.verify("secret123", stored) is False


def test_blank_password_cannot_be_hashed(hasher: WerkzeugPasswordHasher) -> None:
    with pytest.raises(ValueError):
        hasher.hash("")
