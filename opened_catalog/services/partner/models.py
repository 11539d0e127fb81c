# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Response models for the OpenEd partner API.

Only the attributes the catalog tools use are declared; anything else
in the payload is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field


class PartnerModel(BaseModel):
    """Base model tolerating unknown fields and nulls."""

    model_config = ConfigDict(extra="ignore")


class PartnerResource(PartnerModel):
    """A resource as returned by /1/resources.json."""

    id: int
    title: str | None = None
    url: str | None = None
    publisher_id: int | None = None
    contribution_id: int | None = None
    description: str | None = None
    resource_type_id: int | None = None
    youtube_id: str | None = None
    use_rights_url: str | None = None


class ResourceList(PartnerModel):
    resources: list[PartnerResource] = Field(default_factory=list)


class StandardGroup(PartnerModel):
    """A top level standard group such as a state's math standards."""

    id: int
    title: str | None = None
    grades_range: str | None = None
    area_id: int | None = None


class StandardGroupList(PartnerModel):
    standard_groups: list[StandardGroup] = Field(default_factory=list)


class GradeGroup(PartnerModel):
    """A grade group such as "Elementary" within a standard group."""

    id: int
    title: str | None = None
    grades_range: str | None = None


class GradeGroupList(PartnerModel):
    grade_groups: list[GradeGroup] = Field(default_factory=list)
