from flask import Blueprint, request
from flasgger import swag_from
from flask_jwt_extended import jwt_required

from ...schemas.poll import PollReadSchema
from ...services import get_poll_manager
from ...utils.principal import current_principal, ROLE_ADMIN
from ...utils.rbac import roles_required

polls_bp = Blueprint("polls", __name__)

poll_read_schema = PollReadSchema()
poll_read_many_schema = PollReadSchema(many=True)


POLL_BODY = {
    "in": "body",
    "name": "body",
    "required": True,
    "schema": {
        "type": "object",
        "properties": {
            "title": {"type": "string", "example": "Mejor Libro del Año"},
            "description": {"type": "string", "example": "Votación para elegir el mejor libro"},
            "options": {"type": "array", "items": {"type": "string"}, "example": ["Opción 1", "Opción 2"]},
            "end_time": {"type": "string", "format": "date-time", "example": "2030-12-31T23:59:59Z"},
        },
        "required": ["title", "options", "end_time"],
    },
}


@polls_bp.get("/")
@swag_from({
    "tags": ["Polls"],
    "summary": "List polls",
    "description": "All polls, newest first.",
    "responses": {200: {"description": "OK"}, 503: {"description": "Storage unavailable"}}
})
def list_polls():
    polls = get_poll_manager().list_polls()
    return {"polls": poll_read_many_schema.dump(polls), "total": len(polls)}, 200


@polls_bp.get("/<uuid:poll_id>")
@swag_from({
    "tags": ["Polls"],
    "summary": "Get a poll with its results",
    "responses": {200: {"description": "Poll, per-option counts and total"}, 404: {"description": "Poll not found"}}
})
def get_poll(poll_id):
    poll, tally = get_poll_manager().get_poll_with_results(poll_id)
    return {
        "poll": poll_read_schema.dump(poll),
        "results": tally.results,
        "total_votes": tally.total_votes,
    }, 200


@polls_bp.post("/")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Polls"],
    "summary": "Create a poll (admin only)",
    "security": [{"BearerAuth": []}],
    "parameters": [POLL_BODY],
    "responses": {
        201: {"description": "Created"},
        400: {"description": "Validation error"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
    }
})
def create_poll():
    payload = request.get_json(silent=True) or {}
    poll = get_poll_manager().create_poll(current_principal(), payload)
    return {"message": "Poll created successfully", "poll": poll_read_schema.dump(poll)}, 201


@polls_bp.put("/<uuid:poll_id>")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Polls"],
    "summary": "Update title, description, end time or active flag (admin only)",
    "description": "Options are fixed at creation and cannot be changed.",
    "security": [{"BearerAuth": []}],
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "title": {"type": "string"},
                "description": {"type": "string"},
                "end_time": {"type": "string", "format": "date-time"},
                "active": {"type": "boolean"},
            },
        },
    }],
    "responses": {200: {}, 400: {}, 401: {}, 403: {}, 404: {}}
})
def update_poll(poll_id):
    payload = request.get_json(silent=True) or {}
    poll = get_poll_manager().update_poll(current_principal(), poll_id, payload)
    return {"message": "Poll updated successfully", "poll": poll_read_schema.dump(poll)}, 200


@polls_bp.delete("/<uuid:poll_id>")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Polls"],
    "summary": "Delete a poll and all its votes (admin only)",
    "security": [{"BearerAuth": []}],
    "responses": {200: {}, 401: {}, 403: {}, 404: {}}
})
def delete_poll(poll_id):
    get_poll_manager().delete_poll(current_principal(), poll_id)
    return {"message": "Poll deleted successfully"}, 200
