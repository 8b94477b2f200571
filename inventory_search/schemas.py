from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

# (start, end) character offsets, end inclusive
Range = tuple[int, int]


class InventoryItem(BaseModel):
    """
    A leaf record of the inventory tree.
    Field aliases are the keys used by the inventory API payload, so a raw
    snapshot row validates directly into this model.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    kind: Literal["item"] = "item"
    item_id: str = ""
    name: str = ""
    available: float = Field(default=0, alias="quantity")
    defective: float = 0
    unit: str = ""
    cost_per_unit: Decimal = Decimal("0")
    minimum_stock: float = Field(default=0, alias="stock_limit")
    # Field name -> highlight ranges, only ever set on the copies produced by
    # tree filtering. Holds the single field that gave the best score.
    matches: Optional[dict[str, list[Range]]] = None

    def highlights(self, field: str = "name") -> list[Range]:
        return (self.matches or {}).get(field, [])

    @computed_field
    @property
    def total_quantity(self) -> float:
        return self.available + self.defective

    @computed_field
    @property
    def total_cost(self) -> Decimal:
        return Decimal(str(self.available)) * self.cost_per_unit


class InventoryGroup(BaseModel):
    """A named container of items and nested subgroups."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    kind: Literal["group"] = "group"
    group_id: Optional[str] = None
    group_name: str = ""
    items: list[InventoryItem] = Field(default_factory=list)
    subgroups: list["InventoryGroup"] = Field(default_factory=list)
    matches: Optional[dict[str, list[Range]]] = None

    def highlights(self, field: str = "group_name") -> list[Range]:
        return (self.matches or {}).get(field, [])

    @property
    def key(self) -> str:
        """Identity among siblings: synthetic groups fall back to their name."""
        return self.group_id or self.group_name


TreeNode = Annotated[Union[InventoryGroup, InventoryItem], Field(discriminator="kind")]


class DocumentType(str, Enum):
    GROUP = "group"
    ITEM = "item"


class SearchDocument(BaseModel):
    """Flattened, searchable view of one group or item."""

    model_config = ConfigDict(frozen=True)

    doc_id: str
    doc_type: DocumentType
    # Searchable field name -> text, in priority order.
    texts: dict[str, str]
    source: TreeNode
    # Keys of the enclosing groups, root first. Never includes the node itself.
    path: tuple[str, ...] = ()


class MatchResult(BaseModel):
    doc_id: str
    score: int = Field(default=0, ge=0, le=100)
    field: Optional[str] = None
    ranges: list[Range] = Field(default_factory=list)


class FlattenedItem(BaseModel):
    """An item taken out of the tree, with its resolved quantities and ancestor context."""

    item_id: str = ""
    name: str = ""
    available: float = 0
    defective: float = 0
    unit: str = ""
    cost_per_unit: Decimal = Decimal("0")
    minimum_stock: float = 0
    main_group: str = ""
    subgroup: str = ""
    path: tuple[str, ...] = ()


class Alert(BaseModel):
    """
    A low-stock record. Aliases are the column headings used by the
    tabular alert view.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    item_id: str = Field(..., alias="Item ID")
    name: str = Field(..., alias="Material Name")
    available: float = Field(..., alias="Available Quantity")
    minimum_stock: float = Field(..., gt=0, alias="Minimum Stock Limit")
    shortage: float = Field(..., ge=0, alias="Shortage")
    shortage_percentage: float = Field(..., ge=0, alias="Shortage %")
    severity: str = Field(..., alias="Urgency Level")
    main_group: str = Field(default="", alias="Main Group")
    subgroup: str = Field(default="", alias="Subgroup")


class GroupSummary(BaseModel):
    """Per-group stock totals over the group's direct items."""

    group_key: str
    group_name: str
    group_path: str
    depth: int = Field(default=0, ge=0)
    item_count: int = 0
    total_quantity: float = 0
    total_defective: float = 0
    total_value: float = 0
    low_stock_count: int = 0
