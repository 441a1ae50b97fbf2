"""Account and session endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from accounts_api.api.deps import (
    clear_token_cookies,
    current_user,
    get_identity_service,
    get_session_manager,
    require_auth,
    save_upload_to_temp,
    set_token_cookies,
    success_response,
    timing,
)
from accounts_api.schemas import (
    ChangePasswordSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UpdateAccountSchema,
    UserSchema,
)
from accounts_api.services import (
    ChangePasswordIn,
    LoginIn,
    RefreshIn,
    RegisterIn,
    UpdateAccountIn,
    staged_file,
)

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
change_password_schema = ChangePasswordSchema()
update_account_schema = UpdateAccountSchema()
user_schema = UserSchema()
token_pair_schema = TokenPairSchema()


def _body() -> dict:
    """JSON body when present, otherwise form fields."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


@bp.post("/register")
@timing
def register():
    """Create an account from multipart fields plus ``avatar``/``coverImage`` files."""

    avatar_path = save_upload_to_temp("avatar")
    cover_path = save_upload_to_temp("coverImage")
    with staged_file(avatar_path), staged_file(cover_path):
        data = register_schema.load(request.form.to_dict())
        user = get_identity_service().register(
            RegisterIn(**data),
            avatar_path=avatar_path,
            cover_image_path=cover_path,
        )
    return success_response(user_schema.dump(user), "User registered successfully", status=201)


@bp.post("/login")
@timing
def login():
    """Verify credentials, issue both tokens and set them as cookies."""

    data = login_schema.load(_body())
    result = get_session_manager().login(
        LoginIn(password=data["password"], username=data.get("username"), email=data.get("email"))
    )
    body = {
        "user": user_schema.dump(result.user),
        **token_pair_schema.dump(
            {"access_token": result.access_token.token, "refresh_token": result.refresh_token.token}
        ),
    }
    response = success_response(body, "User logged in successfully")
    return set_token_cookies(response, access=result.access_token, refresh=result.refresh_token)


@bp.post("/logout")
@require_auth
@timing
def logout():
    get_session_manager().logout(current_user().id)
    return clear_token_cookies(success_response({}, "User logged out"))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token taken from the cookie or the body."""

    cookie_name = current_app.config.get("REFRESH_TOKEN_COOKIE", "refreshToken")
    presented = request.cookies.get(cookie_name) or refresh_schema.load(_body()).get("refresh_token")
    pair = get_session_manager().refresh(RefreshIn(refresh_token=presented))
    body = token_pair_schema.dump(
        {"access_token": pair.access_token.token, "refresh_token": pair.refresh_token.token}
    )
    response = success_response(body, "Access token refreshed")
    return set_token_cookies(response, access=pair.access_token, refresh=pair.refresh_token)


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    data = change_password_schema.load(_body())
    get_session_manager().change_password(
        ChangePasswordIn(
            user_id=current_user().id,
            old_password=data["old_password"],
            new_password=data["new_password"],
        )
    )
    return success_response({}, "Password changed successfully")


@bp.get("/current-user")
@require_auth
@timing
def get_current_user():
    return success_response(user_schema.dump(current_user()), "User fetched successfully")


@bp.patch("/update-account")
@require_auth
@timing
def update_account():
    data = update_account_schema.load(_body())
    user = get_identity_service().update_account(
        UpdateAccountIn(user_id=current_user().id, full_name=data["full_name"], email=data["email"])
    )
    return success_response(user_schema.dump(user), "Account details updated successfully")


@bp.patch("/avatar")
@require_auth
@timing
def update_avatar():
    path = save_upload_to_temp("avatar")
    user = get_identity_service().update_avatar(current_user().id, path)
    return success_response(user_schema.dump(user), "Avatar image updated successfully")


@bp.patch("/cover-image")
@require_auth
@timing
def update_cover_image():
    path = save_upload_to_temp("coverImage")
    user = get_identity_service().update_cover_image(current_user().id, path)
    return success_response(user_schema.dump(user), "Cover image updated successfully")
