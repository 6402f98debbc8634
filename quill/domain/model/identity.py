"""Authenticated caller identity.

Credentials are issued and checked elsewhere; the comment engine only sees
who the caller is and which role they hold.
"""

from quill.domain.model.common import DomainModel
from quill.domain.value import Role, UserId


class Identity(DomainModel):
    """An authenticated caller."""

    user_id: UserId
    role: Role = Role.USER

    @property
    def is_privileged(self) -> bool:
        """Whether the caller may moderate other users' comments."""
        return self.role.is_privileged
