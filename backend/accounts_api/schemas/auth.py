"""Session-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

PASSWORD_LENGTH = validate.Length(min=6, max=128)


class LoginSchema(Schema):
    """Input payload for authenticating a user by username or email."""

    class Meta:
        unknown = EXCLUDE

    username = fields.String(load_default=None, validate=validate.Length(max=254))
    email = fields.String(load_default=None, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))

    @validates_schema
    def require_identifier(self, data: dict[str, Any], **_: Any) -> None:
        if not (data.get("username") or "").strip() and not (data.get("email") or "").strip():
            raise ValidationError("username or email is required", field_name="username")


class RefreshSchema(Schema):
    """Optional body carrying the refresh token when no cookie is sent."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(data_key="refreshToken", load_default=None)


class ChangePasswordSchema(Schema):
    """Input payload for changing the current user's password."""

    class Meta:
        unknown = EXCLUDE

    old_password = fields.String(data_key="oldPassword", required=True)
    new_password = fields.String(data_key="newPassword", required=True, validate=PASSWORD_LENGTH)


class TokenPairSchema(Schema):
    """Response payload with both tokens."""

    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)
