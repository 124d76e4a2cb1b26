"""Domain models with Pydantic validation"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TrackedProduct(BaseModel):
    """A product whose price is re-checked on a schedule.

    Owned by the product store; the tracker only reads it and writes
    ``current_price`` / ``last_checked_at`` through the store.
    """

    id: Union[int, str]
    url: str = Field(..., min_length=1)
    name: str
    current_price: Decimal = Field(..., ge=0)
    owner_email: str
    owner_uid: Optional[str] = None
    last_checked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExtractionResult(BaseModel):
    """Name and price read from a rendered product page"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class ItemOutcome(BaseModel):
    """Settlement of one product within a tracking tick"""

    product_id: Union[int, str]
    status: Literal["success", "failure"]
    error_kind: Optional[str] = None
    price_dropped: bool = False
    notified: bool = False
    old_price: Optional[Decimal] = None
    new_price: Optional[Decimal] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


class TickSummary(BaseModel):
    """Aggregated result of one tracking tick"""

    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    outcomes: List[ItemOutcome] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.ok)

    @property
    def price_drops(self) -> int:
        return sum(1 for o in self.outcomes if o.price_dropped)

    @property
    def notifications_sent(self) -> int:
        return sum(1 for o in self.outcomes if o.notified)

    @property
    def duration_seconds(self) -> float:
        if not self.finished_at:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()
