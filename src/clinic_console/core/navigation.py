"""
Tracks the current console location so the 401 handler knows whether a
redirect to the login screen is needed.
"""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"

# Paths where an unauthenticated response is expected and must not redirect
AUTH_PATH_MARKERS = ("/login", "/activate", "/signup")


class Navigator:
    """Holds the current path and records redirects."""

    def __init__(
        self,
        pathname: str = "/dashboard",
        on_redirect: Optional[Callable[[str], None]] = None
    ):
        self.pathname = pathname
        self.on_redirect = on_redirect
        self.history: List[str] = [pathname]

    def go(self, pathname: str):
        self.pathname = pathname
        self.history.append(pathname)

    def redirect(self, pathname: str):
        logger.info(f"Redirecting {self.pathname} -> {pathname}")
        self.go(pathname)
        if self.on_redirect:
            self.on_redirect(pathname)

    def is_on_auth_page(self) -> bool:
        return any(marker in self.pathname for marker in AUTH_PATH_MARKERS)
