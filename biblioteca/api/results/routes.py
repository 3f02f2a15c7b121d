from flask import Blueprint
from flasgger import swag_from

from ...schemas.results import PollResultsSchema
from ...services import get_poll_manager

results_bp = Blueprint("results", __name__)
poll_results_schema = PollResultsSchema()


@results_bp.get("/<uuid:poll_id>/results")
@swag_from({
    "tags": ["Results"],
    "summary": "Get poll results with percentages",
    "description": (
        "Every declared option is listed in declared order, including options with no votes.\n"
        "Percentages are rounded to two decimals (0 when nobody voted)."
    ),
    "responses": {
        200: {"description": "Results"},
        404: {"description": "Poll not found"},
        503: {"description": "Storage unavailable"},
    }
})
def poll_results(poll_id):
    manager = get_poll_manager()
    poll, tally = manager.get_poll_with_results(poll_id)

    return poll_results_schema.dump({
        "poll_id": poll.id,
        "state": manager.state_of(poll),
        "total_votes": tally.total_votes,
        "results": tally.breakdown(),
    }), 200
