"""
Error taxonomy for the curtail link service.

Each error carries the HTTP status, the client error type and a short
user-facing description. The exception message itself may hold operator
detail and is only ever logged; responses use `description`.

| Error             | HTTP | client_error   |
|-------------------|------|----------------|
| EmptyTarget       | 400  | INVALID_PARAMS |
| TargetTooLong     | 413  | INVALID_PARAMS |
| BadProtocol       | 400  | INVALID_PARAMS |
| MalformedTarget   | 400  | INVALID_PARAMS |
| CapacityExceeded  | 500  | SERVICE_ERROR  |
| TooManyCollisions | 500  | SERVICE_ERROR  |
| StoreError        | 500  | SERVICE_ERROR  |
| NotFound          | 404  | LINK_NOT_FOUND |
"""

__all__ = [
    "LinkError",
    "InvalidTarget",
    "EmptyTarget",
    "TargetTooLong",
    "BadProtocol",
    "MalformedTarget",
    "CapacityExceeded",
    "TooManyCollisions",
    "StoreError",
    "NotFound",
]


class LinkError(Exception):
    """Base class for every error the link service surfaces to callers."""

    status_code = 500
    client_error = "SERVICE_ERROR"
    description = "Service error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.description)


class InvalidTarget(LinkError):
    """Client-caused validation failure on the target URL."""

    status_code = 400
    client_error = "INVALID_PARAMS"


class EmptyTarget(InvalidTarget):
    description = "target must not be empty"


class TargetTooLong(InvalidTarget):
    status_code = 413
    description = "target is too long"


class BadProtocol(InvalidTarget):
    description = "target must have http or https protocol"


class MalformedTarget(InvalidTarget):
    """Target holds characters that cannot be stored (lone surrogates, NUL)."""

    description = "target contains invalid characters"


class CapacityExceeded(LinkError):
    """Raised when the store holds too many links for the current code width."""


class TooManyCollisions(LinkError):
    """Raised when every allocation attempt collided on short_code."""


class StoreError(LinkError):
    """Any storage fault other than a handled short_code collision."""

    # Deliberately vague since it's shown to the user.
    description = "Database error"


class NotFound(LinkError):
    status_code = 404
    client_error = "LINK_NOT_FOUND"
    description = "Link not found"
