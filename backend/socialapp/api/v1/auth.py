"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from socialapp.api.cookies import clear_refresh_cookie, refresh_cookie_name, set_refresh_cookie
from socialapp.api.deps import (
    current_account_id,
    get_auth_service,
    json_response,
    require_auth,
    service_errors,
    timing,
)
from socialapp.core.extensions import limiter
from socialapp.schemas import (
    LoginResponseSchema,
    LoginSchema,
    RegisterSchema,
    RegistrationResponseSchema,
    TokenResponseSchema,
    WhoAmISchema,
)
from socialapp.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
login_out_schema = LoginResponseSchema()
registration_out_schema = RegistrationResponseSchema()
token_schema = TokenResponseSchema()
whoami_schema = WhoAmISchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@timing
@service_errors
def register():
    """Register a member, log them in and return the access token."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    out = get_auth_service().register_and_login(RegisterIn(**payload))
    response = json_response({"data": registration_out_schema.dump(out)}, status=201)
    return set_refresh_cookie(response, out.refresh_token)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
@service_errors
def login():
    """Authenticate credentials; access token in the body, refresh token in the cookie."""

    data = login_schema.load(request.get_json(silent=True) or {})
    out = get_auth_service().login(LoginIn(username=data["username"], password=data["password"]))
    response = json_response({"data": login_out_schema.dump(out)})
    return set_refresh_cookie(response, out.refresh_token)


@bp.post("/refresh")
@timing
@service_errors
def refresh():
    """Rotate the refresh cookie and return a new access token."""

    pair = get_auth_service().refresh(RefreshIn(request.cookies.get(refresh_cookie_name())))
    response = json_response({"data": token_schema.dump(pair)})
    return set_refresh_cookie(response, pair.refresh_token)


@bp.post("/logout")
@timing
@service_errors
def logout():
    """End the refresh session (if any) and clear the cookie. Always 204."""

    get_auth_service().logout(LogoutIn(request.cookies.get(refresh_cookie_name())))
    response = current_app.response_class(status=204)
    return clear_refresh_cookie(response)


@bp.get("/me")
@require_auth
@timing
@service_errors
def me():
    """Return the account behind the bearer access token."""

    user = get_auth_service().current_account(current_account_id())
    return json_response({"data": whoami_schema.dump(user)})
