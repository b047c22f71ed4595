from flask import jsonify


def ok(data=None, message="success", status=200):
    payload = {"status": "success", "message": message}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def error(message, status=400, code=None):
    return jsonify({
        "status": "error",
        "message": message,
        "code": code or status
    }), status


def validation_error_response(errors):
    """Render pydantic errors as ``[{"field": ..., "message": ...}]``."""
    details = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())),
            "message": err.get("msg", "Invalid value"),
        }
        for err in errors
    ]
    message = details[0]["message"] if details else "Invalid request"
    return jsonify({
        "status": "error",
        "message": message,
        "code": 400,
        "errors": details,
    }), 400
