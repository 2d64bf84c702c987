"""Custom middleware for bearer-token authentication and JSON error rendering."""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model

from foodAnalytics.exceptions import ApiError, AuthError, error_response
from foodAnalytics.utils.tokens import extract_bearer_token, verify_token

logger = logging.getLogger(__name__)


class BearerTokenMiddleware:
    """Reject unauthenticated requests to the JSON API.

    Requests under ``API_AUTH_PREFIX`` must carry ``Authorization: Bearer <token>``
    unless their path is listed in ``API_AUTH_EXEMPT_PATHS``. On success the
    owning user and the raw token are attached as ``request.api_user`` and
    ``request.api_token``.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.protected_prefix = self._normalize(getattr(settings, "API_AUTH_PREFIX", "/api/"))
        self.exempt_paths = {
            self._normalize(value)
            for value in getattr(settings, "API_AUTH_EXEMPT_PATHS", [])
        }

    def __call__(self, request):
        request.api_user = None
        request.api_token = None

        if self._should_skip(request):
            return self.get_response(request)

        try:
            token = extract_bearer_token(request.headers.get("Authorization"))
            claims = verify_token(token)
            user = self._load_user(claims)
        except AuthError as exc:
            logger.info("Rejected %s %s: %s", request.method, request.path, exc.message)
            return error_response(exc)
        except Exception:
            logger.exception("Authentication lookup failed on %s", request.path)
            return error_response(ApiError("Internal server error"))

        request.api_user = user
        request.api_token = token
        return self.get_response(request)

    def _should_skip(self, request) -> bool:
        path = self._normalize(request.path)
        if not path.startswith(self.protected_prefix):
            return True
        return path.rstrip("/") in self.exempt_paths

    @staticmethod
    def _load_user(claims):
        User = get_user_model()
        user = User.objects.filter(pk=claims.get("id"), is_active=True).first()
        if user is None:
            raise AuthError("Not authorized, user not found")
        return user

    @staticmethod
    def _normalize(value: str) -> str:
        if not value:
            return ""
        return value if value.startswith("/") else f"/{value}"


class ApiExceptionMiddleware:
    """Render exceptions raised by API views as JSON responses."""

    def __init__(self, get_response):
        self.get_response = get_response
        self.api_prefix = getattr(settings, "API_AUTH_PREFIX", "/api/")

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, ApiError):
            if exception.status_code >= 500:
                logger.error("%s on %s: %s", type(exception).__name__, request.path, exception.message)
            return error_response(exception)

        if not request.path.startswith(self.api_prefix):
            return None

        logger.exception("Unhandled exception on %s", request.path)
        unexpected = ApiError("Internal server error")
        extra = None
        if settings.DEBUG:
            extra = {"detail": str(exception), "type": type(exception).__name__}
        return error_response(unexpected, extra=extra)
