"""Recommended price per player from a week's cost and the wallet pool balance.

Base price and price adjustment are each rounded half-up (halves go towards
positive infinity). The per-week pool share feeds the adjustment unrounded;
``balance_to_distribute`` only reports it, rounded the same way.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction


def round_half_up(numerator: int, denominator: int = 1) -> int:
    """Round ``numerator / denominator`` to the nearest integer, halves upwards."""
    return math.floor(Fraction(numerator, denominator) + Fraction(1, 2))


@dataclass(frozen=True, slots=True)
class PriceCalculation:
    weekly_cost: int
    base_price: int
    current_balance: int
    weeks_to_distribute: int
    players_per_week: int
    balance_to_distribute: int
    price_adjustment: int
    recommended_price: int


def calculate_price(
    weekly_cost: int,
    players_per_week: int,
    current_balance: int,
    weeks_to_distribute: int,
) -> PriceCalculation:
    if players_per_week <= 0:
        raise ValueError("players_per_week must be positive")
    if weeks_to_distribute <= 0:
        raise ValueError("weeks_to_distribute must be positive")

    base_price = round_half_up(weekly_cost, players_per_week)
    balance_to_distribute = round_half_up(current_balance, weeks_to_distribute)
    price_adjustment = round_half_up(current_balance, weeks_to_distribute * players_per_week)
    return PriceCalculation(
        weekly_cost=weekly_cost,
        base_price=base_price,
        current_balance=current_balance,
        weeks_to_distribute=weeks_to_distribute,
        players_per_week=players_per_week,
        balance_to_distribute=balance_to_distribute,
        price_adjustment=price_adjustment,
        recommended_price=base_price - price_adjustment,
    )
