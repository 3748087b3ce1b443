"""
Exception hierarchy shared by the services, the middleware and the controllers.

Controllers translate these into HTTP responses:

  ValidationError     -> 400
  UnauthorizedError   -> 401
  NotFoundError       -> 404
  anything else       -> 500 (message suppressed)

`TokenError` subclasses never reach a controller: the authentication
middleware turns every one of them into a generic 401.  `ConfigurationError`
is raised while the application is being assembled and is never caught.
"""


class StudyTrackError(Exception):
    """Base exception for all application errors."""


class ValidationError(StudyTrackError):
    """Raised when request input is malformed, unsafe or breaks a business rule."""


class UnauthorizedError(StudyTrackError):
    """Raised when the caller may not perform the requested operation.

    Used both for authentication failures and for ownership checks, e.g.
    renaming a directory that belongs to another user.
    """

    def __init__(self, message: str = "Unauthorized access") -> None:
        super().__init__(message)


class NotFoundError(StudyTrackError):
    """Raised when a referenced record does not exist."""


# ── Tokens ───────────────────────────────────────────────────────────────────


class TokenError(StudyTrackError):
    """Base class for bearer token verification failures."""


class MalformedTokenError(TokenError):
    """The token cannot be parsed or lacks the required claims."""


class InvalidSignatureError(TokenError):
    """The token signature does not verify under the server secret."""


class ExpiredTokenError(TokenError):
    """The token's expiry lies in the past."""


# ── Startup ──────────────────────────────────────────────────────────────────


class ConfigurationError(StudyTrackError):
    """Raised while assembling the application; fatal at startup."""


class DuplicateRouteError(ConfigurationError):
    """Raised when two routes resolve to the same method and path.

    Example:
        DuplicateRouteError("Duplicate route PATCH /directory/{id}/rename")
    """
