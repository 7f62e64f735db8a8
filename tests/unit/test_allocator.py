"""
Split Allocator Unit Tests
Tests for core/allocation/allocator.py

Required behavior:
1. Entries always sum to total_cents (non-empty rules)
2. Rounding drift goes to the first entry only
3. Foreign-unit amounts are converted with the exchange rate
4. Half-away-from-zero rounding on the exact float product
5. Malformed input raises InputException before any allocation
"""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from core.allocation.allocator import (
    allocate,
    allocate_request,
    build_request,
    check_conservation,
    format_usdc,
    parse_split_rules,
    round_half_away,
    to_accounting_units,
)
from core.schemas.allocation import Currency, Ledger, LedgerEntry, SplitRule
from core.schemas.errors import (
    ErrorCodes,
    InputException,
    InvariantViolationException,
)

from fixtures.common import make_request, make_rules


THIRDS = [
    {"address": "A", "percent": 33.33},
    {"address": "B", "percent": 33.33},
    {"address": "C", "percent": 33.34},
]


class TestRoundHalfAway:

    @pytest.mark.parametrize(
        "value,expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (-0.5, -1), (-2.5, -3), (0.0, 0)],
    )
    def test_ties_away_from_zero(self, value, expected):
        assert round_half_away(value) == expected

    def test_uses_exact_float_value(self):
        # 1.005 * 100 is 100.49999999999999 in binary floating point
        assert round_half_away(1.005 * 100) == 100

    def test_non_finite_rejected(self):
        with pytest.raises(InputException):
            round_half_away(float("inf"))


class TestFormatUsdc:

    @pytest.mark.parametrize(
        "cents,expected",
        [(0, "0.00"), (5, "0.05"), (100, "1.00"), (12345, "123.45"), (-1, "-0.01")],
    )
    def test_two_fraction_digits(self, cents, expected):
        assert format_usdc(cents) == expected


class TestAllocate:

    def test_exact_split_needs_no_correction(self):
        ledger = allocate(100, "USDC", 1, THIRDS)
        assert ledger.total_cents == 10000
        assert [e.cents for e in ledger.entries] == [3333, 3333, 3334]
        assert ledger.rounding_correction == 0

    def test_shortfall_goes_to_first_entry(self):
        rules = [{"address": a, "percent": 33.33} for a in ("A", "B", "C")]
        ledger = allocate(100, "USDC", 1, rules)
        assert [e.cents for e in ledger.entries] == [3334, 3333, 3333]
        assert ledger.rounding_correction == 1
        assert ledger.has_rounding_issue

    def test_overshoot_taken_from_first_entry(self):
        # 50% of 1001 cents rounds up to 501 twice
        ledger = allocate(10.01, "USDC", 1, make_rules(50, 50))
        assert ledger.total_cents == 1001
        assert [e.cents for e in ledger.entries] == [500, 501]
        assert ledger.rounding_correction == -1
        assert ledger.entries[0].usdc == "5.00"
        assert ledger.entries[1].usdc == "5.01"

    def test_entries_sum_to_total(self):
        ledger = allocate(123.45, "USDC", 1, make_rules(17, 29, 54))
        assert ledger.is_balanced
        assert ledger.allocated_cents == ledger.total_cents == 12345

    def test_foreign_unit_converted(self):
        ledger = allocate(100, "USD", 0.98, make_rules(100))
        assert ledger.usdc_amount == pytest.approx(98.0)
        assert ledger.total_cents == 9800
        assert ledger.entries[0].usdc == "98.00"

    def test_accounting_unit_ignores_exchange_rate(self):
        ledger = allocate(100, Currency.ACCOUNTING_UNIT, 0.5, make_rules(100))
        assert ledger.total_cents == 10000

    def test_total_cents_from_float_product(self):
        ledger = allocate(1.005, "USDC", 1, make_rules(100))
        assert ledger.total_cents == 100

    def test_entries_keep_rule_order_and_percent(self):
        ledger = allocate(10, "USDC", 1, make_rules(20, 80))
        assert [e.address for e in ledger.entries] == [r.address for r in make_rules(20, 80)]
        assert [e.percent for e in ledger.entries] == [20.0, 80.0]

    def test_empty_rules_allocate_nothing(self):
        ledger = allocate(5, "USDC", 1, [])
        assert ledger.entries == []
        assert ledger.total_cents == 500
        assert ledger.rounding_correction == 500

    def test_zero_first_percent_can_go_negative(self):
        rules = [
            {"address": "A", "percent": 0},
            {"address": "B", "percent": 50},
            {"address": "C", "percent": 50},
        ]
        ledger = allocate(10.01, "USDC", 1, rules)
        assert [e.cents for e in ledger.entries] == [-1, 501, 501]
        assert ledger.is_balanced

    def test_percent_sum_not_100_still_balances(self):
        ledger = allocate(10, "USDC", 1, make_rules(10, 10))
        assert [e.cents for e in ledger.entries] == [900, 100]
        assert ledger.rounding_correction == 800

    def test_deterministic(self):
        a = allocate(77.77, "USD", 1.03, make_rules(50, 30, 20))
        b = allocate(77.77, "USD", 1.03, make_rules(50, 30, 20))
        assert a == b

    def test_rules_as_json_string(self):
        ledger = allocate(1, "USDC", 1, '[{"recipientAddress": "0xA", "percent": 100}]')
        assert ledger.entries[0].address == "0xA"
        assert ledger.entries[0].cents == 100

    def test_allocate_request_matches_allocate(self):
        request = make_request(amount=42.42, rules=make_rules(60, 40))
        assert allocate_request(request) == allocate(42.42, "USDC", 1, make_rules(60, 40))


class TestCorrectionLocality:

    def test_whole_percents_need_no_correction(self):
        rules = [
            {"address": "A", "percent": 33},
            {"address": "B", "percent": 33},
            {"address": "C", "percent": 34},
        ]
        ledger = allocate(10, "USDC", 1, rules)
        assert ledger.total_cents == 1000
        assert [e.cents for e in ledger.entries] == [330, 330, 340]
        assert ledger.rounding_correction == 0

    def test_thirds_on_999_cents(self):
        ledger = allocate(9.99, "USDC", 1, THIRDS)
        naive = [round_half_away((r["percent"] / 100) * 999) for r in THIRDS]

        assert ledger.total_cents == 999
        assert ledger.allocated_cents == 999
        assert ledger.rounding_correction == 999 - sum(naive)
        assert ledger.entries[0].cents == naive[0] + ledger.rounding_correction
        assert [e.cents for e in ledger.entries[1:]] == naive[1:]

    def test_ledger_is_immutable(self):
        ledger = allocate(10.01, "USDC", 1, make_rules(50, 50))
        with pytest.raises(ValidationError):
            ledger.entries[0].cents = 0
        with pytest.raises(ValidationError):
            ledger.rounding_correction = 0
        assert ledger.is_balanced


class TestLargeAmounts:

    def test_beyond_default_decimal_precision(self):
        ledger = allocate(1e27, "USDC", 1, make_rules(100))
        expected = int(Decimal(1e27 * 100))
        assert ledger.total_cents == expected
        assert ledger.entries[0].cents == expected
        assert ledger.entries[0].usdc == f"{str(expected)[:-2]}.{str(expected)[-2:]}"

    def test_split_of_huge_amount_balances(self):
        ledger = allocate(1e300, "USDC", 1, make_rules(50, 50))
        assert ledger.is_balanced

    def test_format_usdc_wide_values(self):
        assert format_usdc(10**30) == "1" + "0" * 28 + ".00"

    def test_overflow_to_infinity_is_input_error(self):
        with pytest.raises(InputException):
            allocate(1e307, "USDC", 1, make_rules(100))


class TestInputValidation:

    @pytest.mark.parametrize("amount", [0, -5, "abc", float("nan"), float("inf")])
    def test_bad_amount(self, amount):
        with pytest.raises(InputException) as exc_info:
            allocate(amount, "USDC", 1, make_rules(100))
        assert exc_info.value.code == ErrorCodes.INPUT_ERROR

    @pytest.mark.parametrize("rate", [0, -1, "fast", float("nan")])
    def test_bad_exchange_rate(self, rate):
        with pytest.raises(InputException):
            allocate(1, "USD", rate, make_rules(100))

    def test_unknown_currency(self):
        with pytest.raises(InputException):
            allocate(1, "EUR", 1, make_rules(100))

    def test_rules_not_json(self):
        with pytest.raises(InputException, match="not valid JSON"):
            parse_split_rules("[{oops")

    def test_rules_not_a_list(self):
        with pytest.raises(InputException, match="must be a list"):
            parse_split_rules('{"address": "A", "percent": 100}')

    def test_rule_missing_percent(self):
        with pytest.raises(InputException) as exc_info:
            parse_split_rules([{"address": "A"}])
        assert exc_info.value.details["field_path"] == "rules[0]"

    def test_negative_percent(self):
        with pytest.raises(InputException):
            parse_split_rules([{"address": "A", "percent": -5}])

    def test_blank_address(self):
        with pytest.raises(InputException):
            parse_split_rules([{"address": "   ", "percent": 100}])

    def test_accepts_split_rule_instances(self):
        rules = make_rules(100)
        assert parse_split_rules(rules) == rules

    def test_build_request_defaults(self):
        request = build_request("12.5", "USD", "1.02", [])
        assert request.amount == 12.5
        assert request.currency == Currency.FOREIGN_UNIT
        assert request.exchange_rate == 1.02


class TestConversion:

    def test_to_accounting_units(self):
        assert to_accounting_units(10.0, Currency.FOREIGN_UNIT, 2.0) == 20.0
        assert to_accounting_units(10.0, Currency.ACCOUNTING_UNIT, 2.0) == 10.0


class TestCheckConservation:

    def test_unbalanced_ledger_raises(self):
        ledger = Ledger(
            usdc_amount=1.0,
            total_cents=100,
            entries=[LedgerEntry(address="A", percent=100.0, cents=99, usdc="0.99")],
        )
        with pytest.raises(InvariantViolationException) as exc_info:
            check_conservation(ledger)
        assert exc_info.value.code == ErrorCodes.INVARIANT_VIOLATION
        assert exc_info.value.details == {"total_cents": 100, "allocated_cents": 99}

    def test_empty_ledger_exempt(self):
        check_conservation(Ledger(usdc_amount=1.0, total_cents=100))

    def test_report_shape(self):
        report = allocate(1, "USDC", 1, [SplitRule(address="A", percent=100)]).to_report()
        assert report == {
            "usdcAmount": 1,
            "totalCents": 100,
            "roundingCorrection": 0,
            "entries": [{"address": "A", "percent": 100.0, "cents": 100, "usdc": "1.00"}],
        }
