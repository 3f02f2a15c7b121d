from flask import Blueprint, request
from flasgger import swag_from
from flask_jwt_extended import jwt_required

from ...schemas.vote import VoteSubmitSchema, VoteReadSchema, VoteStatusSchema
from ...services import get_poll_manager
from ...utils.principal import current_principal
from ...utils.validation import validate_or_abort

voting_bp = Blueprint("voting", __name__)
vote_submit_schema = VoteSubmitSchema()
vote_read_schema = VoteReadSchema()
vote_status_schema = VoteStatusSchema()


@voting_bp.post("/<uuid:poll_id>/vote")
@jwt_required()
@swag_from({
    "tags": ["Voting"],
    "summary": "Cast a vote (one per user per poll)",
    "security": [{"BearerAuth": []}],
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {"option": {"type": "string", "example": "Opción 1"}},
            "required": ["option"],
        },
    }],
    "responses": {
        201: {"description": "Vote recorded"},
        400: {"description": "Validation error / invalid option"},
        401: {"description": "Unauthorized"},
        404: {"description": "Poll not found"},
        409: {"description": "Duplicate vote, poll inactive or closed"},
        503: {"description": "Transient failure, safe to retry"},
    },
})
def cast_vote(poll_id):
    payload = request.get_json(silent=True) or {}
    payload = validate_or_abort(vote_submit_schema, payload)

    vote = get_poll_manager().cast_vote(current_principal(), poll_id, payload["option"])
    return {"message": "Vote recorded successfully", "vote": vote_read_schema.dump(vote)}, 201


@voting_bp.get("/<uuid:poll_id>/vote/status")
@jwt_required()
@swag_from({
    "tags": ["Voting"],
    "summary": "Check whether the current user has voted on a poll",
    "security": [{"BearerAuth": []}],
    "responses": {200: {"description": "OK"}, 401: {}, 404: {"description": "Poll not found"}},
})
def vote_status(poll_id):
    vote = get_poll_manager().vote_status(current_principal(), poll_id)
    return vote_status_schema.dump({"has_voted": vote is not None, "vote": vote}), 200
