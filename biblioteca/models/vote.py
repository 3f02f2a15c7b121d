import uuid
from ..extensions import db
from ..utils.time import utcnow


class Vote(db.Model):
    __tablename__ = "votes"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)

    poll_id = db.Column(db.Uuid, db.ForeignKey("polls.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = db.Column(db.Uuid, nullable=False, index=True)

    # Label copied from Poll.options at cast time
    option = db.Column(db.String(200), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        # One vote per user per poll, checked by the database at flush/commit
        db.UniqueConstraint("poll_id", "user_id", name="uq_votes_poll_user"),
        db.Index("ix_votes_poll_option", "poll_id", "option"),
    )
