"""Coupon models for the cart engine"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class CouponKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed-amount"


class CouponError(str, Enum):
    """Why an applied coupon did not produce a discount"""
    NOT_FOUND = "not-found"
    EXPIRED = "expired"
    MINIMUM_NOT_MET = "minimum-not-met"


class Coupon(BaseModel):
    """A named discount rule"""
    code: str
    kind: CouponKind
    # Percent for PERCENTAGE, smallest currency unit for FIXED_AMOUNT
    value: float = Field(gt=0)
    min_subtotal: int = Field(default=0, ge=0)
    max_discount: Optional[int] = Field(default=None, ge=0)
    expires_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_value(self) -> "Coupon":
        if self.kind == CouponKind.PERCENTAGE and self.value > 100:
            raise ValueError("percentage coupons cannot exceed 100")
        self.code = self.code.strip().upper()
        if self.expires_at is not None and self.expires_at.tzinfo is None:
            self.expires_at = self.expires_at.replace(tzinfo=timezone.utc)
        return self

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now >= self.expires_at
