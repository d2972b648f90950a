import pytest

from tasktracker.passwords import InvalidPasswordError, check_password, hash_password


def test_hash_and_check_round_trip():
    password = "password"
    hashed = hash_password(password)
    assert hashed.startswith("$2a$10$")
    assert password not in hashed
    assert check_password(password, hashed) is None


def test_wrong_password_is_rejected():
    hashed = hash_password("password")
    with pytest.raises(InvalidPasswordError):
        check_password("secret", hashed)


def test_hashes_are_salted():
    first = hash_password("password")
    second = hash_password("password")
    assert len(first) == 60
    assert len(second) == 60
    assert first[:29] != second[:29]
    assert check_password("password", first) is None
    assert check_password("password", second) is None


def test_malformed_hash_is_rejected():
    with pytest.raises(InvalidPasswordError):
        check_password("password", "placeholder")


def test_too_long_password_cannot_be_hashed():
    with pytest.raises(ValueError):
        hash_password("x" * 73)