from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict

from common.amounts import to_amount

# Below this, leftover funds are too small to trigger a partial or remainder pass.
MINIMUM_AMOUNT = Decimal("0.001")
DECIMAL_PLACES = 2


@dataclass(frozen=True)
class AllocationPolicy:
    """Numeric knobs of the allocator, read from the ``allocator`` config section."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.minimum_amount < 0:
            raise ValueError(f"minimum_amount cannot be negative, got {self.minimum_amount}")
        if self.decimal_places < 0:
            raise ValueError(f"decimal_places cannot be negative, got {self.decimal_places}")

    @property
    def minimum_amount(self) -> Decimal:
        return to_amount(self.raw.get("minimum_amount", MINIMUM_AMOUNT))

    @property
    def decimal_places(self) -> int:
        return int(self.raw.get("decimal_places", DECIMAL_PLACES))
