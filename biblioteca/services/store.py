from sqlalchemy import delete, func, select
from sqlalchemy.orm import joinedload
from sqlalchemy.exc import IntegrityError

from ..models.polls import Poll
from ..models.vote import Vote
from ..utils.time import utcnow
from .exceptions import ConstraintViolation


class PollStore:
    """
    Persistence for polls and votes over a SQLAlchemy session.

    The store only adds/flushes; committing or rolling back is up to the
    caller that owns the transaction (see PollLifecycleManager).
    """

    def __init__(self, session):
        self.session = session

    # ---- polls ----

    def create_poll(self, fields: dict) -> Poll:
        poll = Poll(
            title=fields["title"],
            description=fields.get("description"),
            options=list(fields["options"]),
            end_time=fields["end_time"],
            active=fields.get("active", True),
            created_by=fields.get("created_by"),
        )
        self.session.add(poll)
        self._flush()
        return poll

    def get_poll(self, poll_id, for_update: bool = False) -> Poll | None:
        stmt = select(Poll).where(Poll.id == poll_id)
        if for_update:
            # Row lock held until the surrounding transaction ends (no-op on SQLite).
            # No outer join here: FOR UPDATE cannot lock the nullable side.
            stmt = stmt.with_for_update()
        else:
            stmt = stmt.options(joinedload(Poll.creator))
        return self.session.execute(stmt).scalar_one_or_none()

    def list_polls(self) -> list[Poll]:
        stmt = select(Poll).options(joinedload(Poll.creator)).order_by(Poll.created_at.desc())
        return list(self.session.execute(stmt).scalars())

    def update_poll(self, poll_id, fields: dict) -> Poll | None:
        poll = self.get_poll(poll_id, for_update=True)
        if poll is None:
            return None

        for name in Poll.MUTABLE_FIELDS:
            if name in fields:
                setattr(poll, name, fields[name])
        poll.updated_at = utcnow()

        self._flush()
        return poll

    def delete_poll(self, poll_id) -> bool:
        # Votes first, then the poll; both inside the caller's transaction
        self.session.execute(delete(Vote).where(Vote.poll_id == poll_id))
        result = self.session.execute(delete(Poll).where(Poll.id == poll_id))
        return result.rowcount > 0

    # ---- votes ----

    def list_votes(self, poll_id) -> list[Vote]:
        stmt = select(Vote).where(Vote.poll_id == poll_id).order_by(Vote.created_at.asc())
        return list(self.session.execute(stmt).scalars())

    def find_vote(self, poll_id, user_id) -> Vote | None:
        stmt = select(Vote).where(Vote.poll_id == poll_id, Vote.user_id == user_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def create_vote(self, poll_id, user_id, option: str) -> Vote:
        vote = Vote(poll_id=poll_id, user_id=user_id, option=option)
        self.session.add(vote)
        self._flush()
        return vote

    def count_votes_by_option(self, poll_id) -> dict[str, int]:
        rows = self.session.execute(
            select(Vote.option, func.count(Vote.id))
            .where(Vote.poll_id == poll_id)
            .group_by(Vote.option)
        ).all()
        return {option: int(count) for option, count in rows}

    def _flush(self) -> None:
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConstraintViolation(details={"constraint": _constraint_name(e)}) from e


def _constraint_name(error: IntegrityError) -> str | None:
    diag = getattr(getattr(error, "orig", None), "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name
    # SQLite reports columns instead of the constraint name
    if "votes.poll_id, votes.user_id" in str(error.orig):
        return "uq_votes_poll_user"
    return None
