# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access scope resolution.

Exports:
    RequestedFilters: Caller-supplied scope filters.
    EffectiveFilters: Validated scope applied by queries.
    resolve_scope: Pure scope decision.
    narrow_school_id: Pure school-id normalization.
    AccessScopeResolver: Async wrapper that loads taught sections and profiles.
"""

from school_portal.domains.access.resolver import AccessScopeResolver, load_taught_section_ids
from school_portal.domains.access.scope import (
    DEFAULT_MAX_PAGE_SIZE,
    EffectiveFilters,
    RequestedFilters,
    narrow_school_id,
    resolve_scope,
)

__all__ = [
    "DEFAULT_MAX_PAGE_SIZE",
    "AccessScopeResolver",
    "EffectiveFilters",
    "RequestedFilters",
    "load_taught_section_ids",
    "narrow_school_id",
    "resolve_scope",
]
