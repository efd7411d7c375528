from typing import List, Optional


class DressifyError(Exception):
    """Base class for errors rendered as ``{success: false, message, errors?}``."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[dict]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self):
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationFailed(DressifyError):
    status_code = 400
    default_message = "Validation failed"


class InvalidParameter(ValidationFailed):
    default_message = "Invalid parameter"


class Unauthorized(DressifyError):
    status_code = 401
    default_message = "Not authorized"


class Forbidden(DressifyError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(DressifyError):
    status_code = 404
    default_message = "Resource not found"


class DuplicateKey(DressifyError):
    status_code = 400
    default_message = "Duplicate key"


class ServerError(DressifyError):
    status_code = 500


def field_errors(pydantic_errors) -> List[dict]:
    """Flatten pydantic error dicts into ``[{field, message}]``."""
    result = []
    for error in pydantic_errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = error.get("msg", "Invalid value")
        # pydantic prefixes custom validator messages
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        result.append({"field": ".".join(loc) or None, "message": message})
    return result
