"""Document-type scoped charges added on top of the balance due."""
from __future__ import annotations

from ..schemas import DocumentTypeConfig, GovernmentCharge, GovernmentChargeLine, GovernmentChargeResult


def charge_amount(charge: GovernmentCharge, subtotal: float) -> float:
    return subtotal * charge.amount / 100 if charge.percentage else charge.amount


def calculate_government_charges(config: DocumentTypeConfig, subtotal: float) -> GovernmentChargeResult:
    """Sum the enabled charges of ``config`` against the original subtotal.

    Disabled charges are left out of the breakdown entirely.
    """

    breakdown: list[GovernmentChargeLine] = []
    total = 0.0
    for charge in config.government_charges:
        if not charge.is_enabled:
            continue
        amount = charge_amount(charge, subtotal)
        breakdown.append(GovernmentChargeLine(name=charge.name, amount=amount))
        total += amount
    return GovernmentChargeResult(total=total, breakdown=breakdown)
