"""
Access Policy

Single capability predicate for acting on resources owned by someone else.
"""

from typing import Iterable, Optional

DEFAULT_ELEVATED_ROLES = frozenset({"admin", "super_admin"})


class AccessPolicy:
    """
    Decides whether a role may act on another principal's files and links.

    The set of elevated roles is configuration, so adding a role never
    touches the managers. Nothing is granted beyond the configured set.
    """

    def __init__(self, elevated_roles: Optional[Iterable[str]] = None):
        if elevated_roles is None:
            self.elevated_roles = DEFAULT_ELEVATED_ROLES
        else:
            self.elevated_roles = frozenset(elevated_roles)

    def can_act_on_foreign_resource(self, role: Optional[str]) -> bool:
        if not role:
            return False
        return str(role) in self.elevated_roles

    def can_access(self, owner_id: str, requester_id: str, role: Optional[str]) -> bool:
        """Owner may always act; anybody else needs the elevated capability."""
        return owner_id == requester_id or self.can_act_on_foreign_resource(role)
