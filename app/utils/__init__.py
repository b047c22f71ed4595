from .responses import ok, error, validation_error_response
from .auth import auth_required, role_required, current_user
from .validation import validate_schema, request_payload
from .db import transactional
from .money import to_money
from .jwt import (
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)

__all__ = [
    'ok',
    'error',
    'validation_error_response',
    'auth_required',
    'role_required',
    'current_user',
    'create_access_token',
    'create_refresh_token',
    'decode_token',
    'TokenError',
    'request_payload',
    'validate_schema',
    'transactional',
    'to_money',
]
