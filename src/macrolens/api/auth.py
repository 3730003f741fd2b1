"""Signup, login and session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, Field

from macrolens.api.dependencies import get_container, require_account, session_cookie
from macrolens.domain.accounts import Account  # noqa: TC001

if TYPE_CHECKING:
    from macrolens.containers import AppContainer


router = APIRouter(prefix="/api/auth", tags=["auth"])


class SignupRequest(BaseModel):
    """Signup payload."""

    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=1, max_length=128)
    name: str = Field(default="", max_length=120)


class LoginRequest(BaseModel):
    """Login payload."""

    email: str = Field(min_length=1, max_length=254)
    password: str = Field(min_length=1, max_length=128)


def _start_session(
    request: Request, response: Response, account_id: int
) -> None:
    container: AppContainer = get_container(request)
    settings = container.settings
    container.session_service.destroy(session_cookie(request))
    cookie_value = container.session_service.create(account_id)
    response.set_cookie(
        settings.session_cookie_name,
        cookie_value,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        path="/",
    )


@router.post("/signup")
def signup(
    payload: SignupRequest, request: Request, response: Response
) -> dict[str, object]:
    """Create an account and log it in."""
    container: AppContainer = get_container(request)
    account = container.account_service.signup(
        payload.email, payload.password, payload.name
    )
    _start_session(request, response, account.id)
    return account.summary()


@router.post("/login")
def login(
    payload: LoginRequest, request: Request, response: Response
) -> dict[str, object]:
    """Verify credentials and start a session."""
    container: AppContainer = get_container(request)
    account = container.account_service.login(payload.email, payload.password)
    _start_session(request, response, account.id)
    return account.summary()


@router.get("/me")
def me(account: Account = Depends(require_account)) -> dict[str, object]:
    """Return the logged-in account."""
    return account.summary()


@router.post("/logout")
def logout(request: Request, response: Response) -> dict[str, bool]:
    """Destroy the current session."""
    container: AppContainer = get_container(request)
    container.session_service.destroy(session_cookie(request))
    response.delete_cookie(
        container.settings.session_cookie_name,
        path="/",
        secure=container.settings.cookie_secure,
        httponly=True,
        samesite=container.settings.cookie_samesite,
    )
    return {"success": True}
