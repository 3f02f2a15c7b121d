def swagger_template(app=None):
    title = "Biblioteca Voting API"
    version = "1.0.0"

    if app:
        title = app.config.get("SWAGGER_TITLE", title)
        version = app.config.get("SWAGGER_VERSION", version)

    return {
        "swagger": "2.0",
        "info": {
            "title": title,
            "version": version,
            "description": "Polls with one vote per user, time-boxed voting windows and live tallies.",
        },
        "securityDefinitions": {
            "BearerAuth": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "JWT Authorization header: Bearer <token>"
            }
        },
        "definitions": {
            "Poll": {
                "type": "object",
                "properties": {
                    "id": {"type": "string", "format": "uuid"},
                    "title": {"type": "string", "example": "Mejor Libro del Año"},
                    "description": {"type": "string"},
                    "options": {"type": "array", "items": {"type": "string"}, "example": ["X", "Y"]},
                    "end_time": {"type": "string", "format": "date-time"},
                    "active": {"type": "boolean"},
                    "state": {
                        "type": "string",
                        "enum": ["DRAFT_ACTIVE", "CLOSED_BY_TIME", "CLOSED_BY_ADMIN"],
                    },
                    "created_by": {"type": "string", "format": "uuid"},
                    "creator_name": {"type": "string", "x-nullable": True},
                    "created_at": {"type": "string", "format": "date-time"},
                    "updated_at": {"type": "string", "format": "date-time"},
                },
            },
            "ErrorResponse": {
                "type": "object",
                "properties": {
                    "success": {"type": "boolean", "example": False},
                    "error": {
                        "type": "object",
                        "properties": {
                            "code": {"type": "string", "example": "DUPLICATE_VOTE"},
                            "message": {"type": "string", "example": "You have already voted in this poll"},
                            "details": {"type": "object"}
                        }
                    },
                    "request_id": {"type": "string"}
                }
            }
        }
    }
