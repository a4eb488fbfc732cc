"""
Transaction Normalization Module

Coerces loosely-typed YaYa Wallet transaction items into the internal
Transaction schema. Every field is resolved through an ordered list of
rules; the first rule yielding a usable (truthy) value wins, otherwise the
field default applies. FIELD_RULES is shared by the fetch and search paths.
"""

import logging
import math
import re
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from backend.app.schemas import Transaction, TransactionUser

logger = logging.getLogger(__name__)

# Leading numeric prefix, same acceptance as a lenient float parser ("12.5abc" -> 12.5)
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

Rule = Callable[[Dict[str, Any]], Any]


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a number out of an upstream value.

    Returns None when nothing numeric can be read (None, booleans,
    objects, non-numeric strings, NaN or infinite results).
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        match = _NUMBER_PREFIX.match(value.strip())
        if not match:
            return None
        try:
            number = float(match.group(0))
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def render_scalar(value: Any) -> Optional[str]:
    """Render a scalar upstream value as text; None for missing or non-scalar values."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return None


def is_truthy(value: Any) -> bool:
    """Loose truthiness: only None, False, 0, NaN and '' are false."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def _text(key: str) -> Rule:
    def rule(item):
        raw = item.get(key)
        if not is_truthy(raw):
            return None
        return render_scalar(raw)
    return rule


def _number(key: str) -> Rule:
    def rule(item):
        return parse_number(item.get(key))
    return rule


def _unix_seconds(key: str) -> Rule:
    def rule(item):
        number = parse_number(item.get(key))
        return int(number) if number else None
    return rule


def _flag(key: str) -> Rule:
    def rule(item):
        return True if is_truthy(item.get(key)) else None
    return rule


def _nested_text(parent: str, key: str) -> Rule:
    def rule(item):
        nested = item.get(parent)
        if not isinstance(nested, dict):
            return None
        raw = nested.get(key)
        if not is_truthy(raw):
            return None
        return render_scalar(raw)
    return rule


def _synthesized_amount_with_currency(item):
    # Built from the raw amount, not the parsed one
    raw_amount = item.get("amount")
    amount_text = render_scalar(raw_amount) if is_truthy(raw_amount) else None
    currency = _text("currency")(item) or "ETB"
    return f"{amount_text or 0}.00 {currency}"


def _now_seconds() -> int:
    return int(time.time())


# field -> (ordered rules, default value or default factory)
FIELD_RULES: Dict[str, Tuple[Sequence[Rule], Any]] = {
    "id": ([_text("id")], ""),
    "amount_with_currency": ([_text("amount_with_currency"), _synthesized_amount_with_currency], ""),
    "amount": ([_number("amount")], 0.0),
    "amount_in_base_currency": ([_number("amount_in_base_currency"), _number("amount")], 0.0),
    "fee": ([_number("fee")], 0.0),
    "currency": ([_text("currency")], "ETB"),
    "cause": ([_text("cause")], ""),
    "sender_caption": ([_text("sender_caption")], ""),
    "receiver_caption": ([_text("receiver_caption")], ""),
    "created_at_time": ([_unix_seconds("created_at_time")], _now_seconds),
    "is_topup": ([_flag("is_topup")], False),
    "is_outgoing_transfer": ([_flag("is_outgoing_transfer")], False),
    "fee_vat": ([_number("fee_vat")], 0.0),
    "fee_before_vat": ([_number("fee_before_vat")], 0.0),
}


def resolve_field(item: Dict[str, Any], rules: Sequence[Rule], default: Any) -> Any:
    """Apply rules left to right and stop at the first usable value."""
    for rule in rules:
        value = rule(item)
        if value:
            return value
    return default() if callable(default) else default


def _normalize_user(item: Dict[str, Any], parent: str) -> TransactionUser:
    return TransactionUser(
        name=resolve_field(item, [_nested_text(parent, "name")], ""),
        account=resolve_field(item, [_nested_text(parent, "account")], ""),
    )


def normalize_transaction(item: Any) -> Transaction:
    """
    Normalize a single upstream transaction item.

    Non-object items are treated as empty objects and come back
    fully defaulted.
    """
    if not isinstance(item, dict):
        logger.warning(f"Unexpected transaction item of type {type(item).__name__}, using defaults")
        item = {}

    values = {
        field: resolve_field(item, rules, default)
        for field, (rules, default) in FIELD_RULES.items()
    }
    values["sender"] = _normalize_user(item, "sender")
    values["receiver"] = _normalize_user(item, "receiver")

    return Transaction(**values)


def normalize_transactions(raw: Any) -> List[Transaction]:
    """
    Normalize an upstream transaction list.

    Args:
        raw: Whatever the upstream returned in the list position

    Returns:
        One Transaction per input element, in input order.
        Empty list when raw is not a list.
    """
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning(f"Expected a transaction list, got {type(raw).__name__}")
        return []

    return [normalize_transaction(item) for item in raw]
