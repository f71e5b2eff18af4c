from marshmallow import Schema, EXCLUDE, fields, pre_load, validate, validates, validates_schema, ValidationError

from models.schemas.common import normalize_email, validate_password_strength


class _EmailNormalizingSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = normalize_email(data["email"])
        return data


class SignupSchema(_EmailNormalizingSchema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def strip_name(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("name"), str):
            data = dict(data)
            data["name"] = data["name"].strip()
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        validate_password_strength(value)


class LoginSchema(_EmailNormalizingSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class RefreshTokenSchema(Schema):
    """Body of /auth/refreshtoken and /auth/logout."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(required=True, data_key="refreshToken", validate=validate.Length(min=1))


class ResetPasswordSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    password = fields.String(required=True, load_only=True)
    confirm_password = fields.String(required=True, load_only=True, data_key="confirmPassword")

    @validates("password")
    def validate_password(self, value, **kwargs):
        validate_password_strength(value)

    @validates_schema
    def passwords_match(self, data, **kwargs):
        if data.get("password") != data.get("confirm_password"):
            raise ValidationError("Passwords do not match.", field_name="confirmPassword")


class UserOutSchema(Schema):
    id = fields.String(dump_only=True)
    name = fields.String()
    email = fields.String()
    is_verified = fields.Boolean(data_key="isVerified")
    created_at = fields.DateTime(data_key="createdAt")
