"""Role checks for privileged operations."""
import logging

from journal.exceptions import Forbidden
from journal.models.user import Role
from journal.schemas.auth import Claims

logger = logging.getLogger(__name__)


def require_role(claims: Claims, role: Role) -> None:
    """Allow only an exact role match; roles form no hierarchy."""
    if claims.role != role:
        logger.info("User %s with role %s denied %s access", claims.id, claims.role.value, role.value)
        raise Forbidden(f"{role.value.capitalize()} access required")
