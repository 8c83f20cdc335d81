"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity.
"""

from dataclasses import dataclass
from enum import Enum

from app.domain.exceptions import ForbiddenError


class Role(str, Enum):
    """Roles a caller can hold."""

    ADMIN = "admin"
    CLIENT = "client"

    @classmethod
    def from_claim(cls, claim: object) -> "Role":
        """Resolve a role from a token claim.

        The claim may be a single role name or a list of role names.
        Anything that does not name the admin role resolves to client.

        Args:
            claim: Raw claim value.

        Returns:
            Resolved role.
        """
        if isinstance(claim, str):
            names = {claim}
        elif isinstance(claim, (list, tuple, set)):
            names = {str(c) for c in claim}
        else:
            names = set()
        return cls.ADMIN if cls.ADMIN.value in names else cls.CLIENT


@dataclass(frozen=True)
class Principal:
    """Authenticated caller and the role it holds.

    Established once per request, before any catalog operation runs.
    """

    subject_id: str
    role: Role = Role.CLIENT

    @property
    def is_admin(self) -> bool:
        """Check whether the principal holds the admin role."""
        return self.role is Role.ADMIN

    def require_role(self, required: Role) -> None:
        """Ensure the principal holds a role.

        Args:
            required: Role the operation needs.

        Raises:
            ForbiddenError: If the principal holds a different role.
        """
        if self.role is not required:
            raise ForbiddenError(
                subject_id=self.subject_id,
                role=self.role.value,
                required_role=required.value,
            )
