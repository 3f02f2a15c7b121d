import uuid
from dataclasses import dataclass

from flask_jwt_extended import get_jwt, get_jwt_identity

ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    """Authenticated actor: only its id and role matter to the poll services."""
    id: uuid.UUID
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def current_principal() -> Principal:
    """
    Principal for the current request.
    Use inside a @jwt_required() endpoint.
    """
    claims = get_jwt() or {}
    return Principal(id=uuid.UUID(str(get_jwt_identity())), role=claims.get("role"))
