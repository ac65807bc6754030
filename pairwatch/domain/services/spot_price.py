from __future__ import annotations

from decimal import Decimal, InvalidOperation

from pairwatch.domain.entities.pair import Reserves


def normalize_units(raw_amount: int, decimals: int) -> Decimal:
    if decimals < 0:
        raise ValueError("decimals must be non-negative.")
    return Decimal(raw_amount) / (Decimal("10") ** decimals)


def calculate_spot_price(reserves: Reserves, *, decimals0: int, decimals1: int) -> float:
    """Price of token0 expressed in token1, after decimal normalization.

    Returns 0.0 when either side has no liquidity or the decimals are unusable;
    callers treat zero as "no price".
    """
    if not reserves.has_liquidity():
        return 0.0
    try:
        reserve0 = normalize_units(reserves.reserve0, decimals0)
        reserve1 = normalize_units(reserves.reserve1, decimals1)
        return float(reserve1 / reserve0)
    except (ValueError, ArithmeticError, InvalidOperation):
        return 0.0
