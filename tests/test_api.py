"""
HTTP surface: status codes and response bodies.
"""
from datetime import timedelta

from bson import ObjectId

from app.core.auth import create_access_token
from app.services.mongo_service import utcnow

from conftest import FailingMailer


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


# ============================================================
# AUTH
# ============================================================

def test_request_otp(client, mailer):
    resp = client.post("/api/auth/request-otp", json={"email": "jane@example.com"})
    assert resp.status_code == 200
    body = resp.json()
    assert body == {"message": "OTP sent to email"}
    # the code only travels by mail
    code = mailer.last_code("jane@example.com")
    assert code not in resp.text


def test_request_otp_missing_email(client):
    resp = client.post("/api/auth/request-otp", json={})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Email is required"}


def test_request_otp_registered_email(client, register_account):
    register_account("jane@example.com")
    resp = client.post("/api/auth/request-otp", json={"email": "jane@example.com"})
    assert resp.status_code == 409
    assert resp.json() == {"message": "User already exists"}


def test_request_otp_mail_failure_is_server_error(client):
    from app.main import app
    from app.services.mail_service import get_mailer

    app.dependency_overrides[get_mailer] = lambda: FailingMailer()
    resp = client.post("/api/auth/request-otp", json={"email": "jane@example.com"})
    assert resp.status_code == 500
    assert resp.json() == {"message": "Server error"}


def test_register(client, mailer):
    client.post("/api/auth/request-otp", json={"email": "jane@example.com"})
    resp = client.post("/api/auth/register", json={
        "email": "jane@example.com",
        "password": "S3cret!pass",
        "role": "seeker",
        "userOtp": mailer.last_code("jane@example.com"),
    })
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "User registered successfully"
    assert body["token"]
    assert set(body["user"]) == {"id", "email", "role", "isProfileComplete"}
    assert body["user"]["email"] == "jane@example.com"
    assert body["user"]["role"] == "seeker"
    assert body["user"]["isProfileComplete"] is False


def test_register_missing_fields(client):
    resp = client.post("/api/auth/register", json={"email": "jane@example.com", "role": "seeker"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "All fields are required"}


def test_register_invalid_role(client, mailer):
    client.post("/api/auth/request-otp", json={"email": "jane@example.com"})
    resp = client.post("/api/auth/register", json={
        "email": "jane@example.com",
        "password": "pw",
        "role": "owner",
        "userOtp": mailer.last_code("jane@example.com"),
    })
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid role"}


def test_register_expired_otp(client, db, mailer):
    client.post("/api/auth/request-otp", json={"email": "jane@example.com"})
    db.otps.update_many(
        {"email": "jane@example.com"},
        {"$set": {"expires_at": utcnow() - timedelta(minutes=1)}}
    )
    resp = client.post("/api/auth/register", json={
        "email": "jane@example.com",
        "password": "pw",
        "role": "seeker",
        "userOtp": mailer.last_code("jane@example.com"),
    })
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid or expired OTP"}


def test_register_twice(client, db, register_account):
    register_account("jane@example.com")
    # a still-valid code for the email, as a racing request-otp could leave behind
    db.otps.insert_one({
        "email": "jane@example.com",
        "otp": "123456",
        "expires_at": utcnow() + timedelta(minutes=5),
        "created_at": utcnow(),
    })
    resp = client.post("/api/auth/register", json={
        "email": "jane@example.com",
        "password": "pw",
        "role": "seeker",
        "userOtp": "123456",
    })
    assert resp.status_code == 409
    assert resp.json() == {"message": "User already exists"}


def test_malformed_body(client):
    resp = client.post("/api/auth/register", json={"email": ["not", "a", "string"]})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid request body"}


# ============================================================
# PROFILE
# ============================================================

def test_profile_requires_token(client):
    resp = client.get("/api/profile/me")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Authorization token missing"}


def test_profile_rejects_bad_token(client):
    resp = client.get("/api/profile/me", headers=auth_header("not-a-jwt"))
    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid or expired token"}


def test_profile_rejects_expired_token(client, register_account):
    user = register_account()["user"]
    token = create_access_token({"sub": user["id"], "role": user["role"]}, expires_delta=timedelta(seconds=-10))
    resp = client.get("/api/profile/me", headers=auth_header(token))
    assert resp.status_code == 401


def test_profile_unknown_account(client):
    token = create_access_token({"sub": str(ObjectId()), "role": "seeker"})
    resp = client.get("/api/profile/me", headers=auth_header(token))
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


def test_profile_deactivated_account(client, db, register_account):
    registered = register_account()
    db.accounts.update_one({"email": "jane@example.com"}, {"$set": {"is_active": False}})
    resp = client.get("/api/profile/me", headers=auth_header(registered["token"]))
    assert resp.status_code == 401


def test_me_before_completion(client, register_account):
    registered = register_account()
    resp = client.get("/api/profile/me", headers=auth_header(registered["token"]))
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"] == registered["user"]
    assert body["profile"] is None


def test_complete_seeker_and_fetch(client, register_account):
    token = register_account()["token"]
    resp = client.post("/api/profile/complete", headers=auth_header(token), json={
        "fullName": "Jane Doe",
        "phone": "+1 555 0100",
        "education": "BSc",
        "experience": "3 years",
        "skills": "Go, Rust, , C++",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Profile completed successfully"
    assert body["profile"]["kind"] == "seeker"
    assert body["profile"]["fullName"] == "Jane Doe"
    assert body["profile"]["skills"] == ["Go", "Rust", "C++"]

    resp = client.get("/api/profile/me", headers=auth_header(token))
    body = resp.json()
    assert body["user"]["isProfileComplete"] is True
    assert body["profile"]["skills"] == ["Go", "Rust", "C++"]


def test_complete_recruiter(client, register_account):
    token = register_account("rec@example.com", role="recruiter")["token"]
    resp = client.post("/api/profile/complete", headers=auth_header(token), json={
        "companyName": "Acme",
        "location": "Berlin",
        "designation": "Talent Lead",
        "companyEmail": "jobs@acme.example.com",
    })
    assert resp.status_code == 200
    profile = resp.json()["profile"]
    assert profile["kind"] == "recruiter"
    assert profile["companyName"] == "Acme"
    assert profile["companyEmail"] == "jobs@acme.example.com"
    assert profile["companyWebsite"] is None


def test_complete_missing_fields(client, register_account):
    token = register_account()["token"]
    resp = client.post("/api/profile/complete", headers=auth_header(token), json={"fullName": "Jane"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Missing required fields"}


def test_admin_profile(client, register_account):
    token = register_account("root@example.com", role="admin")["token"]

    resp = client.post("/api/profile/complete", headers=auth_header(token), json={"fullName": "Root"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Admin profile is not required"}

    resp = client.get("/api/profile/me", headers=auth_header(token))
    assert resp.status_code == 200
    assert resp.json()["profile"] is None
    assert resp.json()["user"]["role"] == "admin"


# ============================================================
# MISC
# ============================================================

def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200


def test_unknown_route_uses_message_body(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "message" in resp.json()
