from pydantic import BaseModel, Field

from enums.line_kind import LineKind
from models.bundle import BundleComponentDTO


class CartLineDTO(BaseModel):
    # Item id, bundle id, or "<bundle_id>_custom_<hex>" for a custom bundle instance
    id: str
    kind: LineKind
    name: str
    unit_price: float
    unit_cost: float | None = None
    quantity: int = Field(default=1, ge=1)
    # Ceiling captured when the line was created; increases re-check live stock
    original_stock: int = 0
    category_id: str | None = None
    bundle_id: str | None = None
    is_custom: bool = False
    components: list[BundleComponentDTO] = []

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class CartTotalsDTO(BaseModel):
    subtotal: float
    discount_code: str | None = None
    discount_amount: float = 0.0
    discount_applicable: bool = False
    total: float
    item_count: int = 0
    line_count: int = 0
