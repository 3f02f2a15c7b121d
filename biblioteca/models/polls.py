import uuid
from ..extensions import db
from ..utils.time import utcnow


class Poll(db.Model):
    __tablename__ = "polls"

    # Derived voting states (only `active` and `end_time` are stored)
    STATE_OPEN = "DRAFT_ACTIVE"
    STATE_CLOSED_BY_TIME = "CLOSED_BY_TIME"
    STATE_CLOSED_BY_ADMIN = "CLOSED_BY_ADMIN"

    # Fields an administrator may change after creation
    MUTABLE_FIELDS = ("title", "description", "end_time", "active")

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.String(1000), nullable=True)

    # Ordered list of option labels, fixed at creation
    options = db.Column(db.JSON, nullable=False)

    end_time = db.Column(db.DateTime, nullable=False, index=True)
    active = db.Column(db.Boolean, nullable=False, default=True)

    # Principal id from the auth layer; kept for audit, not enforced
    created_by = db.Column(db.Uuid, nullable=True, index=True)
    creator = db.relationship(
        "User",
        primaryjoin="foreign(Poll.created_by) == User.id",
        viewonly=True,
    )

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def state(self, now=None) -> str:
        now = now or utcnow()
        # An expired window wins over the admin flag
        if now > self.end_time:
            return self.STATE_CLOSED_BY_TIME
        if not self.active:
            return self.STATE_CLOSED_BY_ADMIN
        return self.STATE_OPEN

    def has_option(self, option: str) -> bool:
        return option in (self.options or [])
