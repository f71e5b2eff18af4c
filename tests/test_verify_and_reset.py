import re
from datetime import timedelta

from conftest import USER, bearer, get_user
from utils.security import create_token

NEW_PASSWORD = "Difference1822"


def _reset_token_from(msg):
    html = msg.get_payload(decode=True).decode()
    match = re.search(r"/api/v1/auth/resetpassword/([^\"]+)\"", html)
    assert match, html
    return match.group(1)


def _request_reset(client, tokens, outbox):
    resp = client.post("/api/v1/auth/forgotpassword", headers=bearer(tokens["accessToken"]))
    assert resp.status_code == 200
    return _reset_token_from(outbox[-1])


def test_verify_email_marks_user_verified(app, client, registered):
    token = get_user(app).email_token
    resp = client.get(f"/api/v1/auth/verifyemail?token={token}")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Email Successfully Verified!"}

    user = get_user(app)
    assert user.is_verified is True
    assert user.email_token is None


def test_verify_email_token_is_single_use(app, client, registered):
    token = get_user(app).email_token
    assert client.get(f"/api/v1/auth/verifyemail?token={token}").status_code == 200

    resp = client.get(f"/api/v1/auth/verifyemail?token={token}")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Failed to Verify Email."


def test_verify_email_unknown_token(client, registered):
    resp = client.get("/api/v1/auth/verifyemail?token=deadbeef")
    assert resp.status_code == 401


def test_verify_email_missing_token(client):
    resp = client.get("/api/v1/auth/verifyemail")
    assert resp.status_code == 422


def test_forgot_password_sends_reset_email(client, verified, outbox):
    resp = client.post("/api/v1/auth/forgotpassword", headers=bearer(verified["accessToken"]))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == f"Reset password email sent to {USER['email']}!"

    msg = outbox[-1]
    assert msg["Subject"] == "Reset Password"
    assert msg["To"] == USER["email"]
    assert _reset_token_from(msg)


def test_forgot_password_requires_verified_email(client, registered):
    resp = client.post("/api/v1/auth/forgotpassword", headers=bearer(registered["accessToken"]))
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Email not verified"


def test_forgot_password_requires_login(client):
    resp = client.post("/api/v1/auth/forgotpassword")
    assert resp.status_code == 401


def test_reset_password_updates_hash(app, client, verified, outbox):
    token = _request_reset(client, verified, outbox)
    resp = client.patch(
        f"/api/v1/auth/resetpassword/{token}",
        json={"password": NEW_PASSWORD, "confirmPassword": NEW_PASSWORD},
    )
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Password Successfully Updated."

    old = client.post("/api/v1/auth/login", json={"email": USER["email"], "password": USER["password"]})
    assert old.status_code == 401
    new = client.post("/api/v1/auth/login", json={"email": USER["email"], "password": NEW_PASSWORD})
    assert new.status_code == 200


def test_reset_token_is_single_use(client, verified, outbox):
    token = _request_reset(client, verified, outbox)
    body = {"password": NEW_PASSWORD, "confirmPassword": NEW_PASSWORD}
    assert client.patch(f"/api/v1/auth/resetpassword/{token}", json=body).status_code == 200

    resp = client.patch(f"/api/v1/auth/resetpassword/{token}", json=body)
    assert resp.status_code == 401


def test_newer_reset_request_supersedes_older_link(client, verified, outbox):
    first = _request_reset(client, verified, outbox)
    second = _request_reset(client, verified, outbox)
    body = {"password": NEW_PASSWORD, "confirmPassword": NEW_PASSWORD}

    assert client.patch(f"/api/v1/auth/resetpassword/{first}", json=body).status_code == 401
    assert client.patch(f"/api/v1/auth/resetpassword/{second}", json=body).status_code == 200


def test_reset_password_mismatch(client, verified, outbox):
    token = _request_reset(client, verified, outbox)
    resp = client.patch(
        f"/api/v1/auth/resetpassword/{token}",
        json={"password": NEW_PASSWORD, "confirmPassword": "Something123"},
    )
    assert resp.status_code == 422
    assert "confirmPassword" in resp.get_json()["details"]


def test_reset_password_rejects_access_token(client, verified):
    body = {"password": NEW_PASSWORD, "confirmPassword": NEW_PASSWORD}
    resp = client.patch(f"/api/v1/auth/resetpassword/{verified['accessToken']}", json=body)
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Wrong token type"


def test_reset_password_expired_token(app, client, verified, redis_store):
    user = get_user(app)
    with app.test_request_context():
        token = create_token(user.id, "reset", timedelta(seconds=-5), jti="j1")
    redis_store.set(f"reset:{user.id}", "j1")

    body = {"password": NEW_PASSWORD, "confirmPassword": NEW_PASSWORD}
    resp = client.patch(f"/api/v1/auth/resetpassword/{token}", json=body)
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Token expired"


def test_reset_password_for_deleted_account(app, client, redis_store):
    with app.test_request_context():
        token = create_token("missing-user", "reset", timedelta(minutes=5), jti="j2")
    redis_store.set("reset:missing-user", "j2")

    body = {"password": NEW_PASSWORD, "confirmPassword": NEW_PASSWORD}
    resp = client.patch(f"/api/v1/auth/resetpassword/{token}", json=body)
    assert resp.status_code == 404
