"""
Session bridge.

Carries a minted session to the client: as an HTTP-only cookie for
browsers and web views, and as a bearer value for native shells. Incoming
requests may present either; a bearer header wins over the cookie.
"""

from typing import Optional

from fastapi import Request, Response


class SessionBridge:
    """Writes and reads the session cookie."""

    def __init__(self, cookie_name: str, max_age: int, secure: bool):
        self._cookie_name = cookie_name
        self._max_age = max_age
        self._secure = secure

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    def attach(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self._cookie_name,
            value=token,
            max_age=self._max_age,
            httponly=True,
            secure=self._secure,
            samesite="lax",
            path="/",
        )

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            key=self._cookie_name,
            path="/",
            httponly=True,
            secure=self._secure,
            samesite="lax",
        )

    def extract(self, request: Request, bearer: Optional[str] = None) -> Optional[str]:
        return bearer or request.cookies.get(self._cookie_name)
