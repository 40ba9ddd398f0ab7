from typing import List, Optional
from pydantic import BaseModel, Field

from .utils.money import to_cents


class CartLine(BaseModel):
    """One row of the open cart panel"""
    name: str
    quantity: int = Field(ge=1)  # rows disappear instead of reaching 0
    unit_price: float

    @property
    def line_cents(self) -> int:
        return to_cents(self.unit_price) * self.quantity


class CartSnapshot(BaseModel):
    """Everything the open cart panel shows at one instant"""
    lines: List[CartLine] = []
    subtotal: float = 0.0
    count_open: int = 0

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def subtotal_cents(self) -> int:
        return to_cents(self.subtotal)

    @property
    def expected_subtotal_cents(self) -> int:
        return sum(line.line_cents for line in self.lines)

    def is_consistent(self) -> bool:
        """Subtotal and header count both agree with the lines"""
        return (
            self.subtotal_cents == self.expected_subtotal_cents
            and self.count_open == self.total_items
        )

    def is_empty(self) -> bool:
        return not self.lines and self.subtotal_cents == 0 and self.count_open == 0


class ScenarioResult(BaseModel):
    """Outcome of one named scenario run"""
    name: str
    passed: bool
    elapsed_s: float
    error: Optional[str] = None
