"""Minimal HTML emitted by the guards themselves.

Everything else on a page belongs to the dashboards.
"""

from html import escape
from typing import Optional

DENIAL_NOTICE = (
    '<div class="access-notice" role="alert">'
    "You don't have permission to access this feature."
    "</div>"
)


def page(title: str, body: str) -> str:
    return (
        "<!doctype html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{escape(title)}</title></head>"
        f"<body>{body}</body></html>"
    )


def loading_page(app_name: str, retry_after: int = 1) -> str:
    return (
        "<!doctype html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f'<meta http-equiv="refresh" content="{int(retry_after)}">'
        f"<title>{escape(app_name)}</title></head>"
        '<body><div class="loading" aria-busy="true">Loading...</div></body></html>'
    )


def unauthorized_page(app_name: str, dashboard_url: str, back_url: Optional[str] = None) -> str:
    back = escape(back_url or "javascript:history.back()", quote=True)
    body = (
        '<main class="unauthorized">'
        "<h1>Access Denied</h1>"
        "<p>You don't have permission to access this page.</p>"
        '<div class="alert" role="alert"><strong>Unauthorized Access</strong> '
        "Your current role doesn't have the necessary permissions to view this "
        "content. Please contact your administrator if you believe this is an error."
        "</div>"
        f'<nav><a class="go-back" href="{back}">Go Back</a> '
        f'<a class="go-dashboard" href="{escape(dashboard_url, quote=True)}">Go to Dashboard</a></nav>'
        "</main>"
    )
    return page(f"Access Denied | {app_name}", body)
