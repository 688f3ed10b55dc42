"""
Centralized custom exception definitions for the catalog application.

Each exception inherits from BaseAppError, which itself extends Werkzeug's
HTTPException, allowing clean integration with Flask's error system and
JSON-formatted API responses.

Domain Groups:
--------------
1. Validation Errors (400)
2. Lookup Errors (404-409)
3. Store Errors (503)
4. System Errors (500)
"""

from werkzeug.exceptions import HTTPException


class BaseAppError(HTTPException):
    """Root application error, base for all custom exceptions."""
    code = 500
    description = "Application error"

    def __init__(self, message=None, details=None, code=None):
        super().__init__(description=message or self.description)
        self.message = message or self.description
        self.details = details or {}
        if code:
            self.code = code

    def to_dict(self):
        """Serialize error info into a JSON-safe dictionary."""
        return {
            "status": "error",
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


# ==============================================================================
# 1. VALIDATION ERRORS (HTTP 400)
# ==============================================================================

class ValidationError(BaseAppError):
    code = 400
    description = "Validation error"


# ==============================================================================
# 2. LOOKUP ERRORS (HTTP 404-409)
# ==============================================================================

class RecordNotFoundError(BaseAppError):
    code = 404
    description = "Requested record not found"


class DuplicateKeyError(BaseAppError):
    code = 409
    description = "Duplicate record detected"


# ==============================================================================
# 3. STORE ERRORS (HTTP 503)
# ==============================================================================

class StoreError(BaseAppError):
    code = 503
    description = "Data store unavailable"


class StoreQueryFailure(StoreError):
    """A read against the store failed (connectivity, malformed query)."""
    description = "Failed to read from the data store"


class StoreWriteFailure(StoreError):
    description = "Failed to write to the data store"


# ==============================================================================
# 4. SYSTEM ERRORS (HTTP 500)
# ==============================================================================

class ConfigurationError(BaseAppError):
    code = 500
    description = "Configuration missing or invalid"
