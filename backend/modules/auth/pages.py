"""
HTML pages served at the end of the external-browser mobile sign-in.

The system browser lands here after the OAuth redirect; the page bounces
into the native app through its deep-link scheme.
"""

from html import escape
from urllib.parse import urlencode

from .models import MobileHandoff

_PAGE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<meta http-equiv="refresh" content="0;url={url}">
</head>
<body style="font-family: sans-serif; text-align: center; padding: 40px;">
<h2>{heading}</h2>
<p>{body}</p>
<p><a href="{url}">Return to the app</a></p>
<script>window.location.href = {url_js};</script>
</body>
</html>
"""


def success_link(scheme: str, handoff: MobileHandoff) -> str:
    return f"{scheme}://auth-success?{urlencode({'token': handoff.token, 'userId': handoff.user_id})}"


def error_link(scheme: str, message: str) -> str:
    return f"{scheme}://auth-error?{urlencode({'error': message})}"


def _render(title: str, heading: str, body: str, url: str) -> str:
    # JSON-style string literal; escape characters that could end the script block.
    url_js = '"' + url.replace("\\", "\\\\").replace('"', '\\"').replace("<", "\\u003c") + '"'
    return _PAGE.format(
        title=escape(title),
        heading=escape(heading),
        body=escape(body),
        url=escape(url, quote=True),
        url_js=url_js,
    )


def render_success_page(scheme: str, handoff: MobileHandoff) -> str:
    return _render(
        "Signed in",
        "Sign-in successful",
        "Returning you to the app...",
        success_link(scheme, handoff),
    )


def render_error_page(scheme: str, message: str) -> str:
    return _render(
        "Sign-in failed",
        "Sign-in failed",
        message,
        error_link(scheme, message),
    )
