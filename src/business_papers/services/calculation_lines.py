"""Ordered adjustment lines applied to a document subtotal before tax."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from typing import Iterable

from ..models import CalculationLineType
from ..schemas import BreakdownLine, CalculationLine, ServiceItem

logger = logging.getLogger(__name__)


@dataclass
class ProcessedLines:
    running_total: float
    deposit_amount: float = 0.0
    lines: list[BreakdownLine] = field(default_factory=list)


def generate_line_id() -> str:
    return secrets.token_hex(8)


def create_calculation_line(
    line_type: CalculationLineType | str,
    label: str,
    value: float = 0.0,
    order: int = 0,
) -> CalculationLine:
    """Build a new line; the add/subtract direction is derived from its type."""

    return CalculationLine(
        id=generate_line_id(),
        type=CalculationLineType(line_type),
        label=label,
        value=value,
        order=order,
    )


def compute_subtotal(items: Iterable[ServiceItem]) -> float:
    return sum((item.amount for item in items), 0.0)


def sort_lines(lines: Iterable[CalculationLine]) -> list[CalculationLine]:
    # sorted() is stable, equal orders keep their insertion order
    return sorted(lines, key=lambda line: line.order)


def process_calculation_lines(subtotal: float, lines: Iterable[CalculationLine]) -> ProcessedLines:
    """Fold the adjustment lines into a pre-tax total.

    Percentage discounts are computed against the original ``subtotal``, never
    against the running total. Deposit lines are not folded in here: the
    amount is carried separately and applied after tax. When several deposit
    lines are present the last one in processing order wins.
    """

    result = ProcessedLines(running_total=subtotal)
    deposit_lines = 0

    for line in sort_lines(lines):
        if line.type == CalculationLineType.DEPOSIT:
            deposit_lines += 1
            result.deposit_amount = line.value
            continue

        if line.type == CalculationLineType.DISCOUNT_PERCENT:
            line_value = subtotal * line.value / 100
        else:
            line_value = line.value

        if line.is_subtraction:
            result.running_total -= line_value
        else:
            result.running_total += line_value

        result.lines.append(
            BreakdownLine(label=line.label, value=line_value, is_subtraction=line.is_subtraction)
        )

    if deposit_lines > 1:
        logger.warning(
            "%d deposit lines found, only the last one (%s) is applied",
            deposit_lines,
            result.deposit_amount,
        )
    return result
