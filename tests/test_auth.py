import time

import jwt
import pytest
from flask import Flask, jsonify, request

from tasktracker.auth import (
    AuthError,
    current_user_id,
    jwt_auth,
    jwt_auth_optional,
    parse_jwt_from_cookie,
    parse_token,
)


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "secret")


@pytest.fixture
def app():
    return Flask(__name__)


def _whoami():
    return jsonify({"user": current_user_id()})


def _token(claims, key="secret", algorithm="HS256"):
    return jwt.encode(claims, key, algorithm=algorithm)


def _cookie(token):
    return {"Cookie": f"access_token={token}"}


def test_parse_token_returns_claims():
    claims = parse_token(_token({"id": "user-1", "role": "admin"}))
    assert claims == {"id": "user-1", "role": "admin"}


@pytest.mark.parametrize("algorithm", ["HS384", "HS512"])
def test_parse_token_accepts_other_hmac(algorithm):
    key = "secret" * 11
    with pytest.MonkeyPatch.context() as patch:
        patch.setenv("JWT_SECRET", key)
        assert parse_token(_token({"id": "u"}, key=key, algorithm=algorithm))["id"] == "u"


def test_parse_token_rejects_wrong_key():
    with pytest.raises(AuthError, match="invalid token"):
        parse_token(_token({"id": "u"}, key="placeholder"))


def test_parse_token_rejects_unsigned():
    unsigned = jwt.encode({"id": "u"}, None, algorithm="none")
    with pytest.raises(AuthError, match="invalid token"):
        parse_token(unsigned)


def test_parse_token_rejects_expired():
    with pytest.raises(AuthError):
        parse_token(_token({"id": "u", "exp": int(time.time()) - 60}))


def test_parse_token_requires_secret(monkeypatch):
    token = _token({"id": "u"})
    monkeypatch.delenv("JWT_SECRET")
    with pytest.raises(AuthError, match="invalid token"):
        parse_token(token)


def test_parse_token_rejects_garbage():
    with pytest.raises(AuthError):
        parse_token("token")


def test_parse_jwt_from_cookie(app):
    with app.test_request_context(headers=_cookie(_token({"id": "abc"}))):
        assert parse_jwt_from_cookie(request)["id"] == "abc"


def test_parse_jwt_from_cookie_missing(app):
    with app.test_request_context():
        with pytest.raises(AuthError, match="missing auth token"):
            parse_jwt_from_cookie(request)


def test_jwt_auth_allows_valid_token(app):
    with app.test_request_context(headers=_cookie(_token({"id": "abc"}))):
        response = app.make_response(jwt_auth(_whoami)())
    assert response.status_code == 200
    assert response.get_json() == {"user": "abc"}


def test_jwt_auth_missing_cookie(app):
    with app.test_request_context():
        response = app.make_response(jwt_auth(_whoami)())
    assert response.status_code == 401
    assert response.get_json() == {"error": "missing auth token"}


def test_jwt_auth_invalid_token(app):
    with app.test_request_context(headers=_cookie("token")):
        response = app.make_response(jwt_auth(_whoami)())
    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid token"}


@pytest.mark.parametrize("claims", [{"sub": "abc"}, {"id": 42}])
def test_jwt_auth_requires_string_id(app, claims):
    with app.test_request_context(headers=_cookie(_token(claims))):
        response = app.make_response(jwt_auth(_whoami)())
    assert response.status_code == 401
    assert response.get_json() == {"error": "Invalid ID or userID in token"}


def test_optional_auth_sets_user(app):
    with app.test_request_context(headers=_cookie(_token({"id": "abc"}))):
        response = app.make_response(jwt_auth_optional(_whoami)())
    assert response.status_code == 200
    assert response.get_json() == {"user": "abc"}


def test_optional_auth_passes_without_token(app):
    with app.test_request_context():
        missing = app.make_response(jwt_auth_optional(_whoami)())
    assert missing.get_json() == {"user": None}
    with app.test_request_context(headers=_cookie("token")):
        bad = app.make_response(jwt_auth_optional(_whoami)())
    assert bad.status_code == 200
    assert bad.get_json() == {"user": None}