"""Display row and page models for the resource table."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .resource import Resource


class GroupHeaderRow(BaseModel):
    """Header row introducing a group of resources."""

    kind: Literal["header"] = "header"
    key: str = Field(..., description="Group key (label value or 'Unassigned')")
    count: int = Field(..., ge=0, description="Number of resources in the group")
    is_collapsed: bool = False


class ResourceRow(BaseModel):
    """Row displaying a single resource."""

    kind: Literal["resource"] = "resource"
    resource: Resource


DisplayRow = Annotated[Union[GroupHeaderRow, ResourceRow], Field(discriminator="kind")]


class PageResult(BaseModel):
    """One page of the filtered, sorted, optionally grouped table."""

    rows: list[DisplayRow] = Field(default_factory=list)
    page: int = Field(1, ge=1, description="Effective 1-based page index")
    page_size: int = Field(..., ge=1)
    total_pages: int = Field(0, ge=0)
    total_items: int = Field(0, ge=0, description="Length of the flattened row sequence")
    filtered_count: int = Field(0, ge=0, description="Resources matching the filter")
