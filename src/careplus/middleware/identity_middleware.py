"""Identity middleware to extract and validate X-User-ID / X-User-Role per request."""

import re

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..api.schemas.common import ErrorResponse
from ..core.structured_logger import get_logger

logger = get_logger(__name__)

USER_ID_HEADER = "X-User-ID"
USER_ROLE_HEADER = "X-User-Role"
VALID_ROLES = {"doctor", "patient"}


class IdentityMiddleware(BaseHTTPMiddleware):
    """Middleware to attach user_id and user_role to request.state.

    Authentication happens upstream; this only checks that the identity
    headers are present and well formed. The role is per request, so one
    account can act as a doctor on one call and as a patient on the next.
    """

    PUBLIC_PATHS = {
        "/",
        "/favicon.ico",
        "/docs",
        "/redoc",
        "/openapi.json",
        "/health",
        "/health/ready",
    }
    PUBLIC_PATH_PREFIXES = {
        "/docs",
        "/redoc",
        "/clinics",
    }

    def is_public_endpoint(self, path: str) -> bool:
        normalized_path = path.rstrip("/") or "/"
        if normalized_path in self.PUBLIC_PATHS:
            return True
        for prefix in self.PUBLIC_PATH_PREFIXES:
            if path.startswith(prefix + "/"):
                return True
        return False

    def _validate_user_id(self, user_id: str) -> bool:
        if not user_id or len(user_id) > 100:
            return False
        return bool(re.match(r"^[A-Za-z0-9_-]+$", user_id))

    def _reject(self, request: Request, status_code: int, error: str, message: str, details: dict) -> JSONResponse:
        body = ErrorResponse(
            error=error,
            message=message,
            request_id=getattr(request.state, "request_id", None) or "",
            details=details,
        )
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

    async def dispatch(self, request: Request, call_next):
        # Skip public endpoints and CORS preflight
        if request.method == "OPTIONS" or self.is_public_endpoint(request.url.path):
            return await call_next(request)

        user_id = request.headers.get(USER_ID_HEADER)
        if not user_id:
            logger.warning("Missing user header", method=request.method, path=request.url.path)
            return self._reject(
                request,
                401,
                "MISSING_USER_ID",
                f"{USER_ID_HEADER} header is required",
                {"path": request.url.path, "method": request.method},
            )

        if not self._validate_user_id(user_id):
            logger.warning("Invalid user_id format", user_id=user_id[:80])
            return self._reject(
                request,
                401,
                "INVALID_USER_ID",
                "user_id must be 1-100 chars, alphanumeric, hyphen or underscore",
                {"user_id": user_id[:80]},
            )

        role = (request.headers.get(USER_ROLE_HEADER) or "").strip().lower()
        if role not in VALID_ROLES:
            logger.warning("Invalid user role", user_id=user_id, role=role[:20])
            return self._reject(
                request,
                403,
                "INVALID_ROLE",
                f"{USER_ROLE_HEADER} header must be one of: {sorted(VALID_ROLES)}",
                {"role": role[:20]},
            )

        request.state.user_id = user_id
        request.state.user_role = role
        return await call_next(request)
