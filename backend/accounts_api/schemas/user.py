"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from accounts_api.schemas.auth import PASSWORD_LENGTH


class RegisterSchema(Schema):
    """Form fields of a registration request (files travel separately)."""

    class Meta:
        unknown = EXCLUDE

    username = fields.String(required=True, validate=validate.Length(min=1, max=50))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    full_name = fields.String(data_key="fullname", required=True, validate=validate.Length(min=1, max=100))
    password = fields.String(required=True, validate=PASSWORD_LENGTH)


class UpdateAccountSchema(Schema):
    """Payload for updating account details."""

    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(data_key="fullname", required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))


class UserSchema(Schema):
    """Public representation of a user. Credential fields are never dumped."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    full_name = fields.String(data_key="fullname")
    avatar_url = fields.String(data_key="avatar")
    cover_image_url = fields.String(data_key="coverImage")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
