import logging

from graphql import GraphQLError

logger = logging.getLogger(__name__)


class DirectoryError(Exception):
    """
    Base class for errors whose message is safe to show to the caller
    """

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(DirectoryError):
    code = "UNAUTHENTICATED"


class AuthorizationError(DirectoryError):
    code = "FORBIDDEN"


class ConflictError(DirectoryError):
    code = "CONFLICT"


class NotFoundError(DirectoryError):
    code = "NOT_FOUND"


class ValidationError(DirectoryError):
    code = "BAD_USER_INPUT"


class InvalidTokenError(DirectoryError):
    code = "INVALID_TOKEN"


class RateLimitError(DirectoryError):
    code = "RATE_LIMITED"


def format_error(error: GraphQLError, debug: bool = False) -> dict:
    """
    ariadne error formatter: keep directory errors, hide everything else
    """
    formatted = error.formatted
    original = error.original_error

    if isinstance(original, DirectoryError):
        formatted["extensions"] = {"code": original.code}
        return formatted

    if original is not None:
        logger.error("Unhandled resolver error", exc_info=original)
        formatted["message"] = "Internal server error"
        formatted["extensions"] = {"code": "INTERNAL_SERVER_ERROR"}
        return formatted

    # Syntax and validation errors from graphql-core itself
    return formatted
