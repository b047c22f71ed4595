from functools import wraps
from flask import request
from pydantic import ValidationError
from .responses import validation_error_response


def request_payload() -> dict:
    """Request body as a dict, from form fields on multipart uploads, else JSON."""
    if request.mimetype == "multipart/form-data":
        return request.form.to_dict()
    return request.get_json(silent=True) or {}


def validate_schema(schema):
    """Decorator to validate the request body against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                obj = schema(**request_payload())
            except ValidationError as ve:
                return validation_error_response(ve.errors())
            request.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator
