"""
CORS policy for the browser frontend.

Allows localhost during development, every deployment on the hosting
platform's domain (preview builds get random subdomains) and an explicit
allow-list.
"""

from collections.abc import Iterable

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp

DEFAULT_ALLOWED_ORIGINS = ("https://hireflow-ai-alpha.vercel.app",)


def is_origin_allowed(
    origin: str | None,
    allowed_origins: Iterable[str] = DEFAULT_ALLOWED_ORIGINS,
    platform_domain: str = "vercel.app",
) -> bool:
    """Decide whether a request origin may call the API."""
    if not origin:
        return True
    if "localhost" in origin:
        return True
    if platform_domain and platform_domain in origin:
        return True
    return origin in {o for o in allowed_origins if o}


class HireFlowCORSMiddleware(CORSMiddleware):
    """CORSMiddleware with the origin check delegated to ``is_origin_allowed``."""

    def __init__(
        self,
        app: ASGIApp,
        allowed_origins: Iterable[str] = DEFAULT_ALLOWED_ORIGINS,
        platform_domain: str = "vercel.app",
    ) -> None:
        self._extra_origins = tuple(o for o in allowed_origins if o)
        self._platform_domain = platform_domain
        super().__init__(
            app,
            allow_origins=list(self._extra_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def is_allowed_origin(self, origin: str) -> bool:
        return is_origin_allowed(origin, self._extra_origins, self._platform_domain)
