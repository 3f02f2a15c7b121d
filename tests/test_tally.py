import uuid

import pytest

from biblioteca.extensions import db
from biblioteca.services.store import PollStore
from biblioteca.services.tally import Tally, compute_results
from biblioteca.utils.principal import Principal


def _voters(n):
    return [Principal(id=uuid.uuid4(), role="user") for _ in range(n)]


@pytest.fixture
def poll(manager, admin, poll_fields):
    return manager.create_poll(admin, poll_fields(options=["Rayuela", "Ficciones", "Pedro Páramo"]))


def test_every_option_present_in_declared_order(manager, poll):
    tally = compute_results(PollStore(db.session), poll)

    assert list(tally.results) == ["Rayuela", "Ficciones", "Pedro Páramo"]
    assert tally.results == {"Rayuela": 0, "Ficciones": 0, "Pedro Páramo": 0}
    assert tally.total_votes == 0


def test_counts_and_total_match_vote_rows(manager, poll):
    choices = ["Ficciones", "Rayuela", "Ficciones", "Ficciones"]
    for voter, option in zip(_voters(len(choices)), choices):
        manager.cast_vote(voter, poll.id, option)

    _, tally = manager.get_poll_with_results(poll.id)

    assert tally.results == {"Rayuela": 1, "Ficciones": 3, "Pedro Páramo": 0}
    assert sum(tally.results.values()) == tally.total_votes == len(manager.list_votes(poll.id))


def test_repeated_reads_are_stable(manager, poll):
    for voter in _voters(2):
        manager.cast_vote(voter, poll.id, "Rayuela")

    first = manager.get_poll_with_results(poll.id)[1]
    second = manager.get_poll_with_results(poll.id)[1]
    assert first == second


def test_breakdown_percentages():
    tally = Tally(results={"A": 1, "B": 2, "C": 0}, total_votes=3)

    assert tally.breakdown() == [
        {"option": "A", "votes": 1, "percentage": 33.33},
        {"option": "B", "votes": 2, "percentage": 66.67},
        {"option": "C", "votes": 0, "percentage": 0.0},
    ]


def test_breakdown_without_votes():
    tally = Tally(results={"A": 0, "B": 0}, total_votes=0)
    assert [row["percentage"] for row in tally.breakdown()] == [0.0, 0.0]
