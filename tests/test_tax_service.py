from __future__ import annotations

from business_papers.models import Language
from business_papers.services.calculation_lines import ProcessedLines
from business_papers.services.tax import calculate_with_custom_lines, compute_tax, resolve_tax_and_deposit


def test_without_lines_balance_is_subtotal_plus_tax():
    for subtotal in (0.0, 1.0, 99.99, 1234.5, 1_000_000.0):
        result = calculate_with_custom_lines(subtotal, 19, [])
        assert result.balance_due == subtotal + compute_tax(subtotal, 19)
        assert result.lines == []


def test_discount_and_shipping_example(line):
    lines = [line("discount_percent", 10, order=0), line("shipping", 50, order=1)]

    result = calculate_with_custom_lines(1000.0, 19, lines)

    assert result.subtotal == 1000.0
    assert result.tax == 180.5
    assert result.total == 1130.5
    assert result.balance_due == 1130.5


def test_deposit_example_appends_deposit_last(line):
    lines = [
        line("deposit", 500, order=0),
        line("discount_percent", 10, order=1),
        line("shipping", 50, order=2),
    ]

    result = calculate_with_custom_lines(1000.0, 19, lines)

    assert result.total == 1130.5
    assert result.balance_due == 630.5
    last = result.lines[-1]
    assert (last.label, last.value, last.is_subtraction) == ("Deposit Paid", 500.0, True)


def test_deposit_label_follows_language(line):
    result = calculate_with_custom_lines(100.0, 0, [line("deposit", 20)], Language.FR)

    assert result.lines[-1].label == "Acompte versé"


def test_zero_or_negative_rate_means_no_tax():
    assert compute_tax(500.0, 0) == 0.0
    assert compute_tax(500.0, -5) == 0.0


def test_deposit_larger_than_total_is_not_clamped():
    processed = ProcessedLines(running_total=100.0, deposit_amount=150.0)

    result = resolve_tax_and_deposit(100.0, processed, 10)

    assert result.total == 110.0
    assert result.balance_due == -40.0


def test_zero_deposit_adds_no_line(line):
    result = calculate_with_custom_lines(100.0, 10, [line("deposit", 0)])

    assert result.lines == []
    assert result.balance_due == result.total
