# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""The authenticated caller, as seen by every service."""

from dataclasses import dataclass

from school_portal.models.common import Role


@dataclass(frozen=True)
class IdentityContext:
    """Who is calling.

    Passed explicitly into every resolver and service call.

    Attributes:
        user_id: The users.id of the caller.
        role: One of the six portal roles.
        school_id: Home school; None only for the super-admin.
        is_active: Whether the account may act.
    """

    user_id: str
    role: Role
    school_id: str | None
    is_active: bool = True

    @property
    def is_super_admin(self) -> bool:
        return self.role is Role.SUPER_ADMIN
