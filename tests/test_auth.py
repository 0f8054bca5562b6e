from datetime import timedelta

from app.core.auth import (
    create_access_token, decode_token, hash_password, verify_password
)


def test_password_hash_roundtrip():
    hashed = hash_password("S3cret!pass")
    assert hashed != "S3cret!pass"
    assert verify_password("S3cret!pass", hashed)
    assert not verify_password("wrong", hashed)


def test_password_hash_is_salted():
    assert hash_password("same") != hash_password("same")


def test_token_carries_account_and_role():
    token = create_access_token({"sub": "abc123", "role": "seeker"})
    payload = decode_token(token)
    assert payload["sub"] == "abc123"
    assert payload["role"] == "seeker"
    assert "exp" in payload


def test_token_valid_for_seven_days():
    token = create_access_token({"sub": "abc123"})
    payload = decode_token(token)
    token_days = create_access_token({"sub": "abc123"}, expires_delta=timedelta(days=7))
    assert abs(decode_token(token_days)["exp"] - payload["exp"]) <= 2


def test_expired_token_rejected():
    token = create_access_token({"sub": "abc123"}, expires_delta=timedelta(seconds=-1))
    assert decode_token(token) is None


def test_tampered_token_rejected():
    token = create_access_token({"sub": "abc123"})
    assert decode_token(token[:-2] + ("AA" if token[-2:] != "AA" else "BB")) is None
