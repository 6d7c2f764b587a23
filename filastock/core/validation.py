import math
import re
from typing import Optional

from .errors import ValidationError

COLOR_CODE_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def require_name(value: Optional[str], field: str = "name") -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationError(f"{field} is required", field=field)
    return name


def check_color_code(value: Optional[str], field: str = "color_code") -> Optional[str]:
    if value is None:
        return None
    code = value.strip()
    if not code:
        return None
    if not COLOR_CODE_RE.match(code):
        raise ValidationError("Invalid color format (expected #RRGGBB)", field=field)
    return code


def _finite(value, field: str) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field=field)
    if math.isnan(value) or math.isinf(value):
        raise ValidationError(f"{field} must be a finite number", field=field)
    return value


def check_total_weight(value) -> float:
    value = _finite(value, "total_weight")
    if value <= 0:
        raise ValidationError("Weight must be positive", field="total_weight")
    return value


def check_unit_price(value) -> float:
    value = _finite(value, "unit_price")
    if value < 0:
        raise ValidationError("Price cannot be negative", field="unit_price")
    return value


def check_remaining_weight(value, total_weight: float) -> float:
    value = _finite(value, "remaining_weight")
    if value < 0:
        raise ValidationError("Remaining weight cannot be negative", field="remaining_weight")
    if value > total_weight:
        raise ValidationError("Remaining weight cannot exceed total weight", field="remaining_weight")
    return value


def check_usage_amount(value) -> float:
    value = _finite(value, "amount")
    if value < 0:
        raise ValidationError("Usage amount cannot be negative", field="amount")
    return value
