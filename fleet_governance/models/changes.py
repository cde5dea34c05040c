"""Label change records and preview results."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import StrategyKind


class AddChange(BaseModel):
    """A label key that will be created."""

    model_config = ConfigDict(frozen=True)

    type: Literal["ADD"] = "ADD"
    key: str
    value: str


class UpdateChange(BaseModel):
    """A label key whose value will change."""

    model_config = ConfigDict(frozen=True)

    type: Literal["UPDATE"] = "UPDATE"
    key: str
    old_value: str
    new_value: str


class DeleteChange(BaseModel):
    """A label key that will be removed."""

    model_config = ConfigDict(frozen=True)

    type: Literal["DELETE"] = "DELETE"
    key: str
    old_value: str


Change = Annotated[
    Union[AddChange, UpdateChange, DeleteChange],
    Field(discriminator="type"),
]


class ResourcePreview(BaseModel):
    """Proposed label mutation for one resource."""

    resource_id: str
    resource_name: str
    original: dict[str, str]
    new: dict[str, str]
    changes: list[Change]


class PreviewResult(BaseModel):
    """
    Preview of a label rule over a selection.

    Only resources with at least one change are present in ``items``;
    insertion order follows the selection order.
    """

    kind: StrategyKind
    items: dict[str, ResourcePreview] = Field(default_factory=dict)
    selected_count: int = 0

    @property
    def affected_count(self) -> int:
        """Number of resources that would change."""
        return len(self.items)

    @property
    def changes(self) -> dict[str, list[Change]]:
        """Change records keyed by resource id."""
        return {resource_id: item.changes for resource_id, item in self.items.items()}
