"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class RegisterSchema(Schema):
    """Input payload for register-then-login."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    # Equality with ``password`` is a business rule (400), not a schema rule (422)
    confirm_password = fields.String(required=True, validate=validate.Length(max=128))
    full_name = fields.String(load_default=None, validate=validate.Length(max=100))


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    username = fields.String(required=True, validate=validate.Length(min=1, max=50))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class TokenResponseSchema(Schema):
    """Response payload containing an access token."""

    access_token = fields.String(required=True)
    token_type = fields.String(dump_default="Bearer")


class LoginResponseSchema(TokenResponseSchema):
    """Access token plus the identity it was issued for."""

    user_id = fields.Integer(required=True, attribute="account_id")
    role = fields.String(required=True)
    username = fields.String(required=True)


class RegistrationResponseSchema(TokenResponseSchema):
    """Created account plus the access token of its first session."""

    user_id = fields.Integer(required=True, attribute="account_id")
    email = fields.Email(required=True)
    username = fields.String(required=True)
    role = fields.String(required=True)


class WhoAmISchema(Schema):
    """Response payload exposing identity details for the authenticated user."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
    full_name = fields.String(allow_none=True)
    role = fields.String(required=True)
