"""Flat tax and deposit resolution."""
from __future__ import annotations

from typing import Iterable

from ..i18n import deposit_label
from ..models import Language
from ..schemas import BreakdownLine, CalculationLine, CalculationResult
from .calculation_lines import ProcessedLines, process_calculation_lines


def compute_tax(amount: float, tax_rate: float) -> float:
    return amount * tax_rate / 100 if tax_rate > 0 else 0.0


def resolve_tax_and_deposit(
    subtotal: float,
    processed: ProcessedLines,
    tax_rate: float,
    language: Language | str = Language.EN,
) -> CalculationResult:
    """Apply the tax rate to the adjusted amount, then subtract any deposit.

    ``balance_due`` is not clamped: a deposit larger than the total yields a
    negative balance.
    """

    tax = compute_tax(processed.running_total, tax_rate)
    total = processed.running_total + tax
    lines = list(processed.lines)
    balance_due = total

    if processed.deposit_amount > 0:
        balance_due = total - processed.deposit_amount
        lines.append(
            BreakdownLine(
                label=deposit_label(language),
                value=processed.deposit_amount,
                is_subtraction=True,
            )
        )

    return CalculationResult(
        subtotal=subtotal,
        lines=lines,
        tax=tax,
        total=total,
        balance_due=balance_due,
    )


def calculate_with_custom_lines(
    subtotal: float,
    tax_rate: float,
    lines: Iterable[CalculationLine],
    language: Language | str = Language.EN,
) -> CalculationResult:
    processed = process_calculation_lines(subtotal, lines)
    return resolve_tax_and_deposit(subtotal, processed, tax_rate, language)
