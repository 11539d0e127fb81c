# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""OpenEd partner API client.

Usage:
    from opened_catalog.services.partner import PartnerClient

    async with PartnerClient(settings.partner) as client:
        token = await client.get_token()
        groups = await client.list_standard_groups(token)
"""

from opened_catalog.services.partner.client import PartnerClient
from opened_catalog.services.partner.exceptions import PartnerAPIError
from opened_catalog.services.partner.models import (
    GradeGroup,
    GradeGroupList,
    PartnerResource,
    ResourceList,
    StandardGroup,
    StandardGroupList,
)

__all__ = [
    "PartnerClient",
    "PartnerAPIError",
    "PartnerResource",
    "ResourceList",
    "StandardGroup",
    "StandardGroupList",
    "GradeGroup",
    "GradeGroupList",
]
