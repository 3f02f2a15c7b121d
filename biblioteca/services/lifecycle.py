"""
Poll lifecycle: the state transitions of polls and votes.

Every write runs in exactly one transaction scope. Any failure inside the
scope rolls back everything the operation staged, so a vote or a delete is
either fully visible or not at all. Storage failures never escape as raw
SQLAlchemy errors; they are mapped onto the kinds in ``exceptions``.
"""
import logging
import uuid
from contextlib import contextmanager

from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from ..schemas.poll import PollCreateSchema, PollUpdateSchema
from ..utils.audit import audit_log
from ..utils.time import to_naive_utc, utcnow
from .exceptions import (
    ConstraintViolation,
    DuplicateVote,
    Forbidden,
    InvalidOption,
    NotFound,
    PollClosed,
    PollInactive,
    PollServiceError,
    Unavailable,
    ValidationError,
)
from .store import PollStore
from .tally import compute_results

poll_create_schema = PollCreateSchema()
poll_update_schema = PollUpdateSchema()


def _as_uuid(value) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFound() from None


class PollLifecycleManager:
    def __init__(self, session_factory, logger=None, tx_timeout_ms: int | None = None,
                 clock=utcnow, store_factory=PollStore):
        self.session_factory = session_factory
        self.log = logger or logging.getLogger(__name__)
        self.tx_timeout_ms = tx_timeout_ms
        self.clock = clock
        self.store_factory = store_factory

    # ---- transaction scopes ----

    @contextmanager
    def _transaction(self, operation: str):
        session = self.session_factory()
        try:
            self._apply_timeout(session)
            yield self.store_factory(session)
            session.commit()
        except PollServiceError:
            session.rollback()
            raise
        except IntegrityError as e:
            # Lost a race detected only at commit time
            session.rollback()
            self.log.warning("Constraint violation during %s: %s", operation, e.orig)
            raise ConstraintViolation() from e
        except OperationalError as e:
            # Timeouts, dropped connections, lock/serialization failures
            session.rollback()
            self.log.warning("Transient storage failure during %s: %s", operation, e.orig)
            raise Unavailable() from e
        except SQLAlchemyError as e:
            session.rollback()
            self.log.exception("Storage error during %s", operation)
            raise Unavailable() from e
        except Exception:
            session.rollback()
            raise

    @contextmanager
    def _reading(self, operation: str):
        session = self.session_factory()
        try:
            yield self.store_factory(session)
        except SQLAlchemyError as e:
            session.rollback()
            self.log.exception("Storage error during %s", operation)
            raise Unavailable() from e

    def _apply_timeout(self, session) -> None:
        if not self.tx_timeout_ms:
            return
        if session.get_bind().dialect.name == "postgresql":
            # Scoped to the current transaction only
            session.execute(text(f"SET LOCAL statement_timeout = {int(self.tx_timeout_ms)}"))

    # ---- guards ----

    @staticmethod
    def _require_admin(principal) -> None:
        if principal is None or not principal.is_admin:
            raise Forbidden()

    @staticmethod
    def _load(schema, fields) -> dict:
        try:
            data = schema.load(fields or {})
        except SchemaValidationError as e:
            raise ValidationError(details=e.messages) from None

        if data.get("end_time") is not None:
            data["end_time"] = to_naive_utc(data["end_time"])
        if "description" in data and not data["description"]:
            data["description"] = None
        return data

    # ---- reads ----

    def list_polls(self):
        with self._reading("list_polls") as store:
            return store.list_polls()

    def get_poll(self, poll_id):
        with self._reading("get_poll") as store:
            poll = store.get_poll(_as_uuid(poll_id))
            if poll is None:
                raise NotFound()
            return poll

    def get_poll_with_results(self, poll_id):
        with self._reading("get_poll_with_results") as store:
            poll = store.get_poll(_as_uuid(poll_id))
            if poll is None:
                raise NotFound()
            return poll, compute_results(store, poll)

    def list_votes(self, poll_id):
        with self._reading("list_votes") as store:
            return store.list_votes(_as_uuid(poll_id))

    def vote_status(self, principal, poll_id):
        """The caller's vote on ``poll_id``, or None if they have not voted."""
        poll_id = _as_uuid(poll_id)
        with self._reading("vote_status") as store:
            if store.get_poll(poll_id) is None:
                raise NotFound()
            return store.find_vote(poll_id, principal.id)

    # ---- writes ----

    def create_poll(self, principal, fields):
        self._require_admin(principal)
        data = self._load(poll_create_schema, fields)
        data["active"] = True
        data["created_by"] = principal.id

        with self._transaction("create_poll") as store:
            poll = store.create_poll(data)
            audit_log(
                action="POLL_CREATED",
                entity_type="POLL",
                entity_id=poll.id,
                details={"title": poll.title, "options": list(poll.options)},
                actor=principal,
                session=store.session,
            )

        self.log.info("Poll %s created by %s", poll.id, principal.id)
        return poll

    def update_poll(self, principal, poll_id, fields):
        self._require_admin(principal)
        poll_id = _as_uuid(poll_id)
        data = self._load(poll_update_schema, fields)

        with self._transaction("update_poll") as store:
            poll = store.update_poll(poll_id, data)
            if poll is None:
                raise NotFound()
            audit_log(
                action="POLL_UPDATED",
                entity_type="POLL",
                entity_id=poll.id,
                details={"updated_fields": sorted(data.keys())},
                actor=principal,
                session=store.session,
            )

        self.log.info("Poll %s updated by %s (%s)", poll_id, principal.id, ", ".join(sorted(data)))
        return poll

    def delete_poll(self, principal, poll_id) -> None:
        self._require_admin(principal)
        poll_id = _as_uuid(poll_id)

        with self._transaction("delete_poll") as store:
            if not store.delete_poll(poll_id):
                raise NotFound()
            audit_log(
                action="POLL_DELETED",
                entity_type="POLL",
                entity_id=poll_id,
                actor=principal,
                session=store.session,
            )

        self.log.info("Poll %s deleted by %s", poll_id, principal.id)

    def cast_vote(self, principal, poll_id, option):
        if not isinstance(option, str) or not option.strip():
            raise ValidationError(
                "An option must be selected to vote",
                details={"option": ["Missing data for required field."]},
            )
        poll_id = _as_uuid(poll_id)

        with self._transaction("cast_vote") as store:
            # Lock the poll row so the window check and the insert see the same poll
            poll = store.get_poll(poll_id, for_update=True)
            if poll is None:
                raise NotFound()

            now = self.clock()
            if now > poll.end_time:
                self.log.info("Vote rejected on poll %s: closed at %s", poll_id, poll.end_time)
                raise PollClosed()
            if not poll.active:
                self.log.info("Vote rejected on poll %s: inactive", poll_id)
                raise PollInactive()
            if not poll.has_option(option):
                raise InvalidOption(details={"options": list(poll.options)})
            if store.find_vote(poll_id, principal.id) is not None:
                raise DuplicateVote()

            try:
                vote = store.create_vote(poll_id, principal.id, option)
            except ConstraintViolation:
                self.log.warning("Concurrent duplicate vote on poll %s by %s", poll_id, principal.id)
                raise

            audit_log(
                action="VOTE_SUBMITTED",
                entity_type="VOTE",
                entity_id=vote.id,
                details={"poll_id": str(poll_id), "option": option},
                actor=principal,
                session=store.session,
            )

        self.log.info("Vote %s recorded on poll %s", vote.id, poll_id)
        return vote

    # ---- helpers ----

    def state_of(self, poll) -> str:
        return poll.state(self.clock())
