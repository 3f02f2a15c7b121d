from flask import abort
from marshmallow import ValidationError


def validate_or_abort(schema, payload):
    """Load ``payload`` with ``schema``; abort with a 400 envelope on errors."""
    try:
        return schema.load(payload)
    except ValidationError as e:
        abort(
            400,
            description={
                "code": "VALIDATION_ERROR",
                "message": "Validation error",
                "errors": e.messages,
            },
        )
