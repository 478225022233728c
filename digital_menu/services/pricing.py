"""Special offer pricing rules"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Union

Number = Union[Decimal, int, float, str]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def discount_percent(original_price: Optional[Number], price: Number) -> int:
    """Whole-number discount of ``price`` relative to ``original_price``.

    Rounds half up, so 100 -> 75 gives 25 and 3 -> 2 gives 33. Returns 0 when
    there is no usable original price.
    """
    if original_price is None:
        return 0
    original = _to_decimal(original_price)
    if original <= 0:
        return 0
    ratio = (original - _to_decimal(price)) / original * 100
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def toggle_special_offer(fields: Dict[str, Any], enabled: bool) -> Dict[str, Any]:
    """Return a copy of ``fields`` with the special offer flag set.

    Turning the offer on without an original price copies the current price
    into ``original_price``. An existing original price is never replaced.
    """
    updated = dict(fields)
    updated["is_special_offer"] = enabled
    if enabled and not updated.get("original_price"):
        updated["original_price"] = updated.get("price")
    return updated
