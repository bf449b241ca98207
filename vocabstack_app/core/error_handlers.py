"""
Error Handlers for VocabStack

Provides:
- Custom exception classes for the engine's error taxonomy
- Consistent error response format
- Flask error handlers
"""

from flask import jsonify, current_app
from typing import Optional, Dict, Any


class VocabStackError(Exception):
    """Base exception class for VocabStack."""

    def __init__(
        self,
        message: str,
        code: str = 'UNKNOWN_ERROR',
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for JSON response."""
        return {
            'success': False,
            'message': self.message,
            'code': self.code,
            'details': self.details
        }


class NotFoundError(VocabStackError):
    """Referenced card, session, test or review state does not exist."""

    def __init__(self, message: str = 'Resource not found', resource: str = None):
        super().__init__(
            message=message,
            code='NOT_FOUND',
            status_code=404,
            details={'resource': resource} if resource else None
        )


class ValidationError(VocabStackError):
    """Input validation failed; raised before any write."""

    def __init__(self, message: str = 'Validation failed', errors: Dict = None):
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            status_code=400,
            details={'errors': errors} if errors else None
        )


class AuthorizationError(VocabStackError):
    """The user does not own the referenced entity."""

    def __init__(self, message: str = 'Access denied'):
        super().__init__(
            message=message,
            code='FORBIDDEN',
            status_code=403
        )


class ConcurrencyConflictError(VocabStackError):
    """An optimistic write kept losing the race after all retries."""

    def __init__(self, message: str = 'Concurrent update conflict', attempts: int = None):
        super().__init__(
            message=message,
            code='CONCURRENCY_CONFLICT',
            status_code=409,
            details={'attempts': attempts} if attempts else None
        )


class StoreUnavailableError(VocabStackError):
    """The underlying database could not be reached."""

    def __init__(self, message: str = 'Store unavailable'):
        super().__init__(
            message=message,
            code='STORE_UNAVAILABLE',
            status_code=503
        )


class SchemaMismatchError(RuntimeError):
    """Raised at startup when the database schema lags behind the models."""

    def __init__(self, missing: Dict[str, list]):
        self.missing = missing
        summary = ', '.join(f"{table}({', '.join(cols)})" for table, cols in sorted(missing.items()))
        super().__init__(f"Database schema is missing columns: {summary}")


def error_response(
    message: str,
    code: str = 'ERROR',
    status_code: int = 400,
    details: Dict = None
) -> tuple:
    """Create a standardized error response."""
    response = {
        'success': False,
        'message': message,
        'code': code
    }
    if details:
        response['details'] = details

    return jsonify(response), status_code


def register_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(VocabStackError)
    def handle_vocabstack_error(error):
        if isinstance(error, AuthorizationError):
            current_app.logger.warning(f"{error.code}: {error.message}")
        elif error.status_code >= 500:
            current_app.logger.error(f"{error.code}: {error.message}")
        else:
            current_app.logger.info(f"{error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error')
        return error_response('Internal server error', 'SERVER_ERROR', 500)
