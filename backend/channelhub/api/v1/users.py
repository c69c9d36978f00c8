"""User account endpoints: session lifecycle, profile and social views."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, request

from channelhub.api.deps import (
    api_response,
    build_account_service,
    build_profile_service,
    build_token_service,
    clear_session_cookies,
    set_session_cookies,
    timing,
    upload_from_request,
)
from channelhub.api.session import current_user, require_session
from channelhub.schemas import (
    AccountUpdateSchema,
    ChannelProfileSchema,
    LoginResponseSchema,
    LoginSchema,
    PasswordChangeSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
    WatchHistoryItemSchema,
)
from channelhub.services._shared.errors import InvalidTokenError
from channelhub.services.accounts.dto import (
    AccountUpdateIn,
    LoginIn,
    PasswordChangeIn,
    RegisterIn,
)

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
password_schema = PasswordChangeSchema()
update_schema = AccountUpdateSchema()
user_schema = UserSchema()
login_response_schema = LoginResponseSchema()
token_pair_schema = TokenPairSchema()
channel_schema = ChannelProfileSchema()
history_schema = WatchHistoryItemSchema(many=True)


# ----------------------------- Session --------------------------------------


@bp.post("/register")
@timing
def register():
    """Create an account from a multipart form with avatar (and optional cover)."""

    data = register_schema.load(request.form.to_dict())
    user = build_account_service().register(
        RegisterIn(
            **data,
            avatar=upload_from_request("avatar"),
            cover_image=upload_from_request("coverImage"),
        )
    )
    return api_response(
        user_schema.dump(user),
        message="User registered successfully",
        status=int(HTTPStatus.CREATED),
    )


@bp.post("/login")
@timing
def login():
    """Verify credentials, set session cookies and return the tokens."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = build_account_service().login(LoginIn(**data))
    response = api_response(login_response_schema.dump(result), message="User logged in successfully")
    return set_session_cookies(
        response, access_token=result.access_token, refresh_token=result.refresh_token
    )


@bp.get("/logout")
@require_session
@timing
def logout():
    """Clear the stored refresh token and both cookies."""

    build_account_service().logout(current_user().id)
    return clear_session_cookies(api_response({}, message="User logged out"))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the session: refresh cookie first, then the JSON body."""

    token = request.cookies.get(current_app.config["REFRESH_TOKEN_COOKIE"])
    if not token:
        token = refresh_schema.load(request.get_json(silent=True) or {})["refresh_token"]
    if not token:
        raise InvalidTokenError("Refresh token is missing")

    pair = build_token_service().verify_and_rotate_refresh(token)
    response = api_response(token_pair_schema.dump(pair), message="Access token refreshed")
    return set_session_cookies(
        response, access_token=pair.access_token, refresh_token=pair.refresh_token
    )


# ----------------------------- Account --------------------------------------


@bp.post("/change-password")
@require_session
@timing
def change_password():
    data = password_schema.load(request.get_json(silent=True) or {})
    build_account_service().change_password(
        PasswordChangeIn(user_id=current_user().id, **data)
    )
    return api_response({}, message="Password changed successfully")


@bp.get("/current-user")
@require_session
@timing
def get_current_user():
    return api_response(user_schema.dump(current_user()), message="Current user fetched")


@bp.patch("/update-user")
@require_session
@timing
def update_user():
    data = update_schema.load(request.get_json(silent=True) or {})
    user = build_account_service().update_account(current_user().id, AccountUpdateIn(**data))
    return api_response(user_schema.dump(user), message="Account details updated")


@bp.patch("/update-avatar")
@require_session
@timing
def update_avatar():
    user = build_account_service().update_avatar(
        current_user().id, upload_from_request("avatar")
    )
    return api_response(user_schema.dump(user), message="Avatar updated")


@bp.patch("/update-cover-image")
@require_session
@timing
def update_cover_image():
    user = build_account_service().update_cover_image(
        current_user().id, upload_from_request("coverImage")
    )
    return api_response(user_schema.dump(user), message="Cover image updated")


# ----------------------------- Social views ---------------------------------


@bp.get("/channel/<string:username>")
@require_session
@timing
def channel_profile(username: str):
    """Channel card with subscriber counts for the given handle."""

    profile = build_profile_service().channel_profile(username, viewer_id=current_user().id)
    return api_response(channel_schema.dump(profile), message="Channel fetched")


@bp.get("/get-watch-history")
@require_session
@timing
def watch_history():
    items = build_profile_service().watch_history(current_user().id)
    return api_response(history_schema.dump(items), message="Watch history fetched")
