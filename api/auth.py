"""
Authentication blueprint:
- POST   /auth/register
- POST   /auth/login
- POST   /auth/refreshtoken
- DELETE /auth/logout
- POST   /auth/forgotpassword
- GET    /auth/verifyemail?token=
- PATCH  /auth/resetpassword/<token>

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and long-lived refresh tokens (JWTs signed with HS256)
- Stores the refresh token in redis keyed by user id so it can be rotated and revoked
- Sends verification and reset links by email (utils.mailer)
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g, abort

from models import storage
from models.user import User
from models.schemas.user import (
    SignupSchema,
    LoginSchema,
    RefreshTokenSchema,
    ResetPasswordSchema,
)
from utils.decorators import email_verified_required
from utils.mailer import send_verification_email, send_reset_password_email
from utils.security import hash_password, generate_email_token
from utils.tokens import (
    issue_token_pair,
    verify_refresh_token,
    revoke_refresh_token,
    set_reset_password_token,
    verify_reset_password_token,
    consume_reset_password_token,
)

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

signup_schema = SignupSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
reset_password_schema = ResetPasswordSchema()


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


@bp.post("/auth/register")
def register():
    """
    Register a new user and send the verification email.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [name, email, password]
          properties:
            name: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK (returns accessToken and refreshToken)
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    data = signup_schema.load(_json_body())

    if storage.find_one(User, email=data["email"]):
        abort(409, description=f"{data['email']} has already been registered")

    user = User(
        name=data["name"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
        email_token=generate_email_token(),
        is_verified=False,
    )
    storage.new(user)
    storage.save()
    logger.info("Registered user %s", user.id)

    tokens = issue_token_pair(user.id)
    send_verification_email(user)

    return jsonify({"success": True, **tokens}), 200


@bp.post("/auth/login")
def login():
    """
    Login: return accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid Email or Password
      404:
        description: User Not found
      422:
        description: Validation error
    """
    data = login_schema.load(_json_body())

    user = storage.find_one(User, email=data["email"])
    if not user:
        abort(404, description="User Not found")
    if not user.is_valid_password(data["password"]):
        logger.info("Failed login for user %s", user.id)
        abort(401, description="Invalid Email or Password")

    logger.info("User %s logged in", user.id)
    return jsonify({"success": True, **issue_token_pair(user.id)}), 200


@bp.post("/auth/refreshtoken")
def refresh_token():
    """
    Exchange a refresh token for a new access/refresh pair (rotation)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refreshToken]
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns new tokens)
      401:
        description: Invalid, expired or superseded refresh token
      422:
        description: refreshToken missing
    """
    data = refresh_token_schema.load(_json_body())
    user_id = verify_refresh_token(data["refresh_token"])
    return jsonify({"success": True, **issue_token_pair(user_id)}), 200


@bp.delete("/auth/logout")
@email_verified_required()
def logout():
    """
    Logout: deletes the stored refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refreshToken]
           properties:
             refreshToken: { type: string }
    responses:
      204:
        description: Logged out
      401:
        description: Unauthorized
      422:
        description: refreshToken missing
    """
    data = refresh_token_schema.load(_json_body())
    user_id = verify_refresh_token(data["refresh_token"])
    if user_id != g.current_user.id:
        abort(401, description="Refresh token does not belong to this account")

    revoke_refresh_token(user_id)
    logger.info("User %s logged out", user_id)
    return ("", 204)


@bp.post("/auth/forgotpassword")
@email_verified_required()
def forgot_password():
    """
    Email a reset-password link to the logged in user
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Reset email sent
      401:
        description: Unauthorized
    """
    user = g.current_user
    token = set_reset_password_token(user.id)
    send_reset_password_email(user, token)
    logger.info("Password reset requested for user %s", user.id)

    return jsonify(
        {
            "success": True,
            "message": f"Reset password email sent to {user.email}!",
        }
    ), 200


@bp.get("/auth/verifyemail")
def verify_email():
    """
    Confirm an email address with the token sent at registration
    ---
    tags:
      - Auth
    parameters:
      - in: query
        name: token
        type: string
        required: true
    responses:
      200:
        description: Email Successfully Verified!
      401:
        description: Failed to Verify Email.
      422:
        description: token missing
    """
    token = request.args.get("token", "").strip()
    if not token:
        abort(422, description="token is required")

    user = storage.find_one(User, email_token=token)
    if not user:
        abort(401, description="Failed to Verify Email.")

    user.email_token = None
    user.is_verified = True
    user.save()
    logger.info("User %s verified email", user.id)

    return jsonify({"success": True, "message": "Email Successfully Verified!"}), 200


@bp.patch("/auth/resetpassword/<token>")
def reset_password(token: str):
    """
    Set a new password using the emailed reset token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: path
        name: token
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          required: [password, confirmPassword]
          properties:
            password: { type: string }
            confirmPassword: { type: string }
    responses:
      200:
        description: Password Successfully Updated.
      401:
        description: Invalid, expired or used reset token
      404:
        description: Account no longer exists
      422:
        description: Validation error
    """
    data = reset_password_schema.load(_json_body())
    user_id = verify_reset_password_token(token)

    user = storage.get(User, user_id)
    if not user:
        abort(404, description="Account Not Found")

    user.password_hash = hash_password(data["password"])
    user.save()
    consume_reset_password_token(user_id)
    logger.info("Password reset for user %s", user_id)

    return jsonify({"success": True, "message": "Password Successfully Updated."}), 200
