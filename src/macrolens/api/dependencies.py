"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from macrolens.domain.errors import UnauthorizedError

if TYPE_CHECKING:
    from macrolens.containers import AppContainer
    from macrolens.domain.accounts import Account


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the app."""
    return request.app.state.container


def session_cookie(request: Request) -> str | None:
    """Return the raw session cookie, if any."""
    container = get_container(request)
    return request.cookies.get(container.settings.session_cookie_name)


def require_account(request: Request) -> Account:
    """Resolve the session cookie to an account or fail with 401."""
    container = get_container(request)
    account_id = container.session_service.resolve(session_cookie(request))
    if account_id is None:
        raise UnauthorizedError
    account = container.account_service.get(account_id)
    if account is None:
        raise UnauthorizedError
    return account
