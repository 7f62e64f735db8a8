"""
Split Allocator

Turns a payment amount and a list of percentage split rules into a
ledger of integer cents that always sums exactly to the payment total.

Algorithm:
1. Convert the amount to the accounting unit (multiply by the exchange
   rate for foreign-unit amounts).
2. total_cents = round(usdc_amount * 100)
3. Each rule's share = round(percent / 100 * total_cents), in rule order.
4. diff = total_cents - sum(shares). A non-zero diff is added to the
   FIRST entry only; other entries keep their naively rounded share.
5. rounding_correction = diff

Rounding policy: half away from zero, applied to the exact binary value
of the float product. The float expressions are always evaluated in the
same order (amount * rate, then * 100; percent / 100, then * total_cents);
recorded ledgers depend on it, including products such as
1.005 * 100 == 100.49999999999999 -> 100.
"""

from __future__ import annotations

import json
import logging
import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Sequence, Union

from pydantic import ValidationError

from core.schemas.allocation import (
    AllocationRequest,
    Currency,
    Ledger,
    LedgerEntry,
    SplitRule,
)
from core.schemas.errors import InputException, InvariantViolationException


logger = logging.getLogger(__name__)

_ONE = Decimal(1)
_CENT = Decimal("0.01")

# Wide enough for the integer part of any finite float plus two fraction digits
_EXACT = Context(prec=400)

RulesInput = Union[str, Sequence[Union[SplitRule, dict[str, Any]]]]


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Example:
        >>> round_half_away(2.5), round_half_away(-2.5), round_half_away(2.4999)
        (3, -3, 2)
    """
    if not math.isfinite(value):
        raise InputException(f"Cannot round non-finite value: {value}")
    return int(Decimal(value).quantize(_ONE, rounding=ROUND_HALF_UP, context=_EXACT))


def format_usdc(cents: int) -> str:
    """Render integer cents as a decimal string with exactly 2 fractional digits."""
    return str(Decimal(cents).scaleb(-2, context=_EXACT).quantize(_CENT, context=_EXACT))


def _validation_details(exc: ValidationError) -> dict[str, Any]:
    return {
        "errors": [
            {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
            for err in exc.errors()
        ]
    }


def parse_split_rules(raw: RulesInput) -> list[SplitRule]:
    """
    Parse split rules from a JSON string or a sequence of dicts/SplitRules.

    Accepts both ``address`` and ``recipientAddress`` keys.

    Raises:
        InputException: If the input is not valid JSON, not a list,
            or any rule fails validation.
    """
    data: Any = raw
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InputException(
                f"Split rules are not valid JSON: {e.msg}",
                field_path="rules",
                details={"line": e.lineno, "column": e.colno},
            ) from e

    if not isinstance(data, (list, tuple)):
        raise InputException(
            f"Split rules must be a list, got {type(data).__name__}",
            field_path="rules",
        )

    rules: list[SplitRule] = []
    for i, item in enumerate(data):
        if isinstance(item, SplitRule):
            rules.append(item)
            continue
        try:
            rules.append(SplitRule.model_validate(item))
        except ValidationError as e:
            raise InputException(
                f"Invalid split rule at index {i}",
                field_path=f"rules[{i}]",
                details=_validation_details(e),
            ) from e
    return rules


def build_request(
    amount: Any,
    currency: Union[Currency, str],
    exchange_rate: Any,
    rules: RulesInput,
) -> AllocationRequest:
    """
    Validate raw allocation inputs into an AllocationRequest.

    Raises:
        InputException: On non-numeric, non-positive or non-finite
            amount/exchange rate, unknown currency, or malformed rules.
    """
    parsed_rules = parse_split_rules(rules)
    try:
        return AllocationRequest(
            amount=amount,
            currency=currency,
            exchange_rate=exchange_rate,
            rules=parsed_rules,
        )
    except ValidationError as e:
        raise InputException(
            "Invalid allocation request",
            details=_validation_details(e),
        ) from e


def to_accounting_units(amount: float, currency: Currency, exchange_rate: float) -> float:
    """Convert an amount into the accounting unit."""
    if currency == Currency.FOREIGN_UNIT:
        return amount * exchange_rate
    return amount


def check_conservation(ledger: Ledger) -> None:
    """
    Assert that ledger entries account for every cent.

    An empty ledger is exempt: with no recipients nothing is allocated.

    Raises:
        InvariantViolationException: If entries do not sum to total_cents.
    """
    if not ledger.entries:
        return
    if not ledger.is_balanced:
        raise InvariantViolationException(
            "Ledger entries do not sum to the payment total",
            details={
                "total_cents": ledger.total_cents,
                "allocated_cents": ledger.allocated_cents,
            },
        )


def allocate_request(request: AllocationRequest) -> Ledger:
    """Allocate a validated request into a reconciled ledger."""
    usdc_amount = to_accounting_units(request.amount, request.currency, request.exchange_rate)
    total_cents = round_half_away(usdc_amount * 100)

    entries: list[LedgerEntry] = []
    allocated = 0
    for rule in request.rules:
        share = round_half_away((rule.percent / 100) * total_cents)
        allocated += share
        entries.append(
            LedgerEntry(
                address=rule.address,
                percent=rule.percent,
                cents=share,
                usdc=format_usdc(share),
            )
        )

    diff = total_cents - allocated
    if diff != 0 and entries:
        first = entries[0]
        corrected = first.cents + diff
        entries[0] = first.model_copy(
            update={"cents": corrected, "usdc": format_usdc(corrected)}
        )
        logger.debug(
            f"Rounding correction of {diff} cents applied to {first.address}"
        )

    ledger = Ledger(
        usdc_amount=usdc_amount,
        total_cents=total_cents,
        entries=entries,
        rounding_correction=diff,
    )
    check_conservation(ledger)
    return ledger


def allocate(
    amount: Any,
    currency: Union[Currency, str],
    exchange_rate: Any,
    rules: RulesInput,
) -> Ledger:
    """
    Allocate a payment among split rules.

    Args:
        amount: Positive payment amount in `currency`
        currency: Currency.ACCOUNTING_UNIT ("USDC") or Currency.FOREIGN_UNIT ("USD")
        exchange_rate: Positive accounting units per foreign unit
        rules: Split rules (JSON string or sequence), in payout order

    Returns:
        Ledger whose entries sum to total_cents

    Raises:
        InputException: If any input is malformed (before any allocation)
        InvariantViolationException: If the ledger fails to balance

    Example:
        >>> ledger = allocate(100, "USDC", 1, [
        ...     {"address": "A", "percent": 33.33},
        ...     {"address": "B", "percent": 33.33},
        ...     {"address": "C", "percent": 33.34},
        ... ])
        >>> [e.cents for e in ledger.entries], ledger.rounding_correction
        ([3333, 3333, 3334], 0)
    """
    return allocate_request(build_request(amount, currency, exchange_rate, rules))
