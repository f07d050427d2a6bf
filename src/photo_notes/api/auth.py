"""Verification of platform-signed user tokens on webview requests."""

from __future__ import annotations

import hashlib
import hmac
from typing import TYPE_CHECKING

from fastapi import Cookie, Depends, Header, Query, Request

if TYPE_CHECKING:
    from photo_notes.containers import AppContainer

TOKEN_QUERY_PARAM = "aos_signed_user_token"
TOKEN_COOKIE = "photo_notes_token"


def sign_user_token(user_id: str, secret: str) -> str:
    """Return `{user_id}.{signature}` for the given user."""
    signature = hmac.new(
        secret.encode(), user_id.encode(), hashlib.sha256
    ).hexdigest()
    return f"{user_id}.{signature}"


def verify_user_token(token: str, secret: str) -> str | None:
    """Return the user id carried by a valid token, else None."""
    user_id, sep, signature = token.rpartition(".")
    if not sep or not user_id or not signature:
        return None
    expected = sign_user_token(user_id, secret).rpartition(".")[2]
    if not hmac.compare_digest(expected, signature):
        return None
    return user_id


def request_token(
    aos_signed_user_token: str | None = Query(default=None),
    authorization: str | None = Header(default=None),
    photo_notes_token: str | None = Cookie(default=None),
) -> str | None:
    """Pick the user token from query, bearer header or cookie."""
    if aos_signed_user_token:
        return aos_signed_user_token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return photo_notes_token


def current_user_id(
    request: Request, token: str | None = Depends(request_token)
) -> str | None:
    """Return the authenticated user id, or None when unauthenticated."""
    if not token:
        return None
    container: AppContainer = request.app.state.container
    return verify_user_token(token, container.settings.platform_api_key)
