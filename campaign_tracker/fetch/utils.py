import math
import re
import datetime as dt
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[int, float]

# "$186,576", "186,576.50", "$ 2500"
AMOUNT_PATTERN = r"(\d{1,3}(?:,\d{3})+|\d+)(?:\.(\d{2}))?"

def utc_now_iso() -> str:
    """Current UTC time as ISO 8601 with a trailing Z"""
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def parse_money(text) -> Optional[Number]:
    """
    Parse a money-looking string or number into a plain number.
    Examples: '$186,576' -> 186576, '1,250.50' -> 1250.5, 'n/a' -> None
    Integral amounts come back as int so they serialize without a trailing .0
    """
    if text is None or isinstance(text, bool):
        return None

    try:
        if isinstance(text, (int, float)):
            value = float(text)
        else:
            cleaned = re.sub(r"[^0-9.]", "", str(text))
            if not cleaned:
                return None
            value = float(cleaned)
    except (ValueError, OverflowError):
        # OverflowError: int too large for a float
        return None

    if not math.isfinite(value):
        return None
    if value.is_integer():
        return int(value)
    return value

def join_amount(whole: str, cents: Optional[str] = None) -> Optional[Number]:
    """Turn the two groups captured by AMOUNT_PATTERN back into a number"""
    if cents:
        return parse_money(f"{whole}.{cents}")
    return parse_money(whole)

def format_money(amount: Number, symbol: str = "$") -> str:
    """
    Whole-dollar display with thousands separators.
    Examples: 186576 -> '$186,576', 1250.5 -> '$1,251'
    """
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(int(rounded)):,}"

def progress_pct(total: Number, goal: Number) -> float:
    """Percentage of goal reached, rounded to 2 decimals"""
    if not goal:
        return 0.0
    return round(total / goal * 100, 2)

def normalize_text(s: str) -> str:
    s = re.sub(r"\u00a0", " ", s)
    s = re.sub(r"[ \t\x0b\x0c\r]+", " ", s)
    s = re.sub(r"\n\s*\n+", "\n\n", s)
    return s.strip()

def compact_text(s: str) -> str:
    """Collapse every whitespace run to a single space"""
    return re.sub(r"\s+", " ", s or "").strip()
