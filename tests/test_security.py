from datetime import datetime, timedelta, timezone

from jose import jwt

from storefront.config import Settings
from storefront.security import (
    create_access_token, decode_access_token, get_password_hash, verify_password,
)

SETTINGS = Settings(jwt_secret="unit-secret", access_token_expire_minutes=10)


def test_password_hash_is_salted_and_verifies():
    first = get_password_hash("password123")
    second = get_password_hash("password123")
    assert first != "password123"
    assert first != second
    assert verify_password("password123", first)
    assert not verify_password("wrong-password", first)


def test_verify_password_treats_unknown_hash_as_failure():
    assert verify_password("password123", "not-a-real-hash") is False


def test_token_round_trip_carries_subject_and_ten_minute_expiry():
    now = datetime.now(timezone.utc)
    token = create_access_token("user-1", SETTINGS, now=now)
    claims = decode_access_token(token, SETTINGS)
    assert claims["sub"] == "user-1"
    assert claims["exp"] - claims["iat"] == 600


def test_expired_token_is_rejected():
    issued = datetime.now(timezone.utc) - timedelta(minutes=11)
    token = create_access_token("user-1", SETTINGS, now=issued)
    assert decode_access_token(token, SETTINGS) is None


def test_token_signed_with_other_secret_is_rejected():
    other = Settings(jwt_secret="another-secret")
    token = create_access_token("user-1", other)
    assert decode_access_token(token, SETTINGS) is None


def test_tampered_token_is_rejected():
    token = create_access_token("user-1", SETTINGS)
    claims = jwt.get_unverified_claims(token)
    claims["sub"] = "user-2"
    forged = jwt.encode(claims, "guessed-secret", algorithm="HS256")
    assert decode_access_token(forged, SETTINGS) is None
    assert decode_access_token("garbage", SETTINGS) is None
