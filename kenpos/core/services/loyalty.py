"""
Loyalty ledger.

Computes points redemption and accrual for a sale. Over-redemption is
clamped, never rejected. The walk-in customer never earns or redeems.
"""

import math
from dataclasses import dataclass

from kenpos.config.settings import LoyaltySettings
from kenpos.core.entities.customer import Customer
from kenpos.core.services.pricing import round_money, to_number

# Guards floor() against float noise such as 9.999999999
_FLOOR_EPSILON = 1e-9


@dataclass(frozen=True)
class LoyaltyOutcome:
    points_used: int = 0
    points_value: float = 0.0
    points_earned: int = 0
    balance_after: int | None = None


class LoyaltyLedger:
    """Points policy for one loyalty configuration."""

    def __init__(self, settings: LoyaltySettings):
        self._settings = settings

    def is_eligible(self, customer: Customer | None) -> bool:
        return (
            self._settings.enabled
            and customer is not None
            and customer.id != self._settings.default_customer_id
        )

    def max_redeemable_value(self, total: float, points: int) -> float:
        """Cap on the value of points that may be applied to a sale."""
        total = max(to_number(total), 0.0)
        by_percentage = total * self._settings.max_redemption_percentage / 100
        by_balance = max(points, 0) * self._settings.redemption_rate
        return min(by_percentage, by_balance)

    def redeem(
        self, customer: Customer | None, total: float, points_requested: int
    ) -> tuple[int, float]:
        """Return (points_used, points_value) after clamping the request."""
        requested = int(max(to_number(points_requested), 0))
        if not self.is_eligible(customer) or requested == 0:
            return 0, 0.0
        if requested < self._settings.min_redeemable_points:
            return 0, 0.0

        rate = self._settings.redemption_rate
        max_value = self.max_redeemable_value(total, customer.loyalty_points)
        points_cap = math.floor(max_value / rate + _FLOOR_EPSILON)
        points_used = max(min(requested, customer.loyalty_points, points_cap), 0)
        return points_used, round_money(points_used * rate)

    def points_earned(self, total: float, points_value: float = 0.0) -> int:
        net = to_number(total) - to_number(points_value)
        if net <= 0:
            return 0
        return math.floor(net / self._settings.points_per_currency_unit + _FLOOR_EPSILON)

    def settle(
        self, customer: Customer | None, total: float, points_requested: int = 0
    ) -> LoyaltyOutcome:
        """Redeem then accrue points for a sale of ``total`` (before points)."""
        if not self.is_eligible(customer):
            return LoyaltyOutcome(
                balance_after=customer.loyalty_points if customer else None
            )

        points_used, points_value = self.redeem(customer, total, points_requested)
        earned = self.points_earned(total, points_value)
        return LoyaltyOutcome(
            points_used=points_used,
            points_value=points_value,
            points_earned=earned,
            balance_after=customer.loyalty_points - points_used + earned,
        )
