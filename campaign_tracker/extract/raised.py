"""
Raised-amount extraction for campaign pages.

The page is searched by an ordered chain of heuristics, from the most specific
("$186,576 RAISED" right in the text) to the least specific (largest dollar
figure anywhere on the page). The first heuristic that yields a positive
amount wins and tags the result with its method name.

Every stage picks among its candidates the same way, see select_best().
"""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup

from campaign_tracker.core.config import settings
from campaign_tracker.core.errors import ExtractionError
from campaign_tracker.fetch.utils import AMOUNT_PATTERN, Number, compact_text, join_amount, parse_money

# Keys in embedded JSON state that may hold the tracker figures
FUNDRAISING_KEY = re.compile(r"raised|donat|total|amount|progress|goal|sum|value", re.IGNORECASE)
MONEY_STRING = re.compile(r"^\$?\s*" + AMOUNT_PATTERN + r"$")
STATE_ASSIGNMENT = re.compile(
    r"(?:window\.)?(?:__[A-Za-z0-9_]+__|[A-Za-z_$][\w$]*(?:State|Data))\s*=\s*(?=[\[{])"
)
DOLLAR_AMOUNT = re.compile(r"\$\s*" + AMOUNT_PATTERN)

BOUNDED_WINDOW = 220
GOAL_WINDOW = 80


@dataclass(frozen=True)
class RaisedValue:
    value: Number
    method: str


@dataclass(frozen=True)
class ExtractionOptions:
    goal: Number
    min_value: Number = 1000
    case_sensitive: bool = False

    @property
    def flags(self) -> int:
        return 0 if self.case_sensitive else re.IGNORECASE


Strategy = Callable[[str, str, ExtractionOptions], Optional[RaisedValue]]


def _is_finite(value: Number) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def select_best(values: Iterable[Optional[Number]], goal: Number, exclude_goal: bool = False) -> Optional[Number]:
    """
    Pick the raised total out of a stage's candidates.

    Non-positive and non-finite values are dropped. Values above the goal are
    most likely the goal figure itself under a wrong label, so they are only
    used when nothing at or below the goal survives. The maximum wins.
    """
    candidates = [
        v for v in values
        if v is not None and _is_finite(v) and v > 0
    ]
    if exclude_goal:
        candidates = [v for v in candidates if v != goal]
    if not candidates:
        return None

    within_goal = [v for v in candidates if v <= goal]
    return max(within_goal or candidates)


def _amounts(pattern: re.Pattern, content: str) -> List[Number]:
    return [join_amount(m.group(1), m.group(2)) for m in pattern.finditer(content)]


def from_raised_pattern(html: str, text: str, opts: ExtractionOptions) -> Optional[RaisedValue]:
    """'$186,576 RAISED' in the visible text first, then in the raw markup."""
    pattern = re.compile(r"\$\s*" + AMOUNT_PATTERN + r"\s*RAISED\b", opts.flags)
    for content in (text, html):
        if not content:
            continue
        best = select_best(_amounts(pattern, content), opts.goal)
        if best is not None:
            return RaisedValue(best, "raised-pattern")
    return None


def _script_payloads(html: str) -> List[Any]:
    """JSON documents found in inline scripts, either whole-script JSON or state assignments."""
    soup = BeautifulSoup(html, "html.parser")
    decoder = json.JSONDecoder()
    payloads = []

    for script in soup.find_all("script"):
        content = (script.string or script.get_text() or "").strip()
        if not content:
            continue

        if content[0] in "{[":
            try:
                payloads.append(json.loads(content))
                continue
            except (ValueError, RecursionError):
                pass

        for match in STATE_ASSIGNMENT.finditer(content):
            try:
                obj, _ = decoder.raw_decode(content, match.end())
            except (ValueError, RecursionError):
                continue
            payloads.append(obj)

    return payloads


def _collect_amounts(root: Any, found: List[Number]) -> None:
    # Explicit stack; embedded state can nest deeper than the recursion limit
    stack = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            for key, value in node.items():
                if isinstance(value, (dict, list)):
                    stack.append(value)
                elif FUNDRAISING_KEY.search(str(key)):
                    amount = _as_amount(value)
                    if amount is not None:
                        found.append(amount)
        elif isinstance(node, list):
            stack.extend(node)


def _as_amount(value: Any) -> Optional[Number]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return parse_money(value)
    if isinstance(value, str) and MONEY_STRING.match(value.strip()):
        return parse_money(value)
    return None


def from_structured_data(html: str, text: str, opts: ExtractionOptions) -> Optional[RaisedValue]:
    """Fundraising-looking keys in JSON embedded in the page's scripts."""
    if not html:
        return None

    found: List[Number] = []
    for payload in _script_payloads(html):
        _collect_amounts(payload, found)

    plausible = [v for v in found if v >= opts.min_value]
    best = select_best(plausible, opts.goal, exclude_goal=True)
    if best is None:
        return None
    return RaisedValue(best, "structured-data")


def from_element_blocks(html: str, text: str, opts: ExtractionOptions) -> Optional[RaisedValue]:
    """
    Look at each rendered element whose text mentions RAISED.

    When some elements carry both RAISED and GOAL, they are the tracker widget
    or one of its ancestors; the shortest one sits closest to the widget and
    its '<amount> RAISED' figure is used. Otherwise the shortest RAISED block
    with any dollar amounts in it is used.
    """
    if not html:
        return None

    raised_token = re.compile(r"\bRAISED\b", opts.flags)
    goal_token = re.compile(r"\bGOAL\b", opts.flags)
    raised_amount = re.compile(r"\$?\s*" + AMOUNT_PATTERN + r"\s*RAISED\b", opts.flags)

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    root = soup.body or soup

    header_blocks: List[Tuple[int, Number]] = []
    raised_blocks: List[Tuple[int, str]] = []

    for element in root.find_all(True):
        block = compact_text(element.get_text(" "))
        if not block or not raised_token.search(block):
            continue
        if goal_token.search(block):
            best = select_best(_amounts(raised_amount, block), opts.goal)
            if best is not None:
                header_blocks.append((len(block), best))
        else:
            raised_blocks.append((len(block), block))

    if header_blocks:
        header_blocks.sort(key=lambda item: item[0])
        return RaisedValue(header_blocks[0][1], "header-block-raised-goal")

    raised_blocks.sort(key=lambda item: item[0])
    for _, block in raised_blocks:
        best = select_best(_amounts(DOLLAR_AMOUNT, block), opts.goal)
        if best is not None:
            return RaisedValue(best, "raised-block")

    return None


def from_bounded_pattern(html: str, text: str, opts: ExtractionOptions) -> Optional[RaisedValue]:
    """'<amount> RAISED ... GOAL <amount>' within a short window; only the RAISED side counts."""
    pattern = re.compile(
        r"\$?\s*" + AMOUNT_PATTERN
        + r"\s*RAISED[\s\S]{0,%d}?GOAL[\s\S]{0,%d}?\$?\s*(\d{1,3}(?:,\d{3})+|\d+)" % (BOUNDED_WINDOW, GOAL_WINDOW),
        opts.flags,
    )
    for content in (text, html):
        if not content:
            continue
        best = select_best(_amounts(pattern, compact_text(content)), opts.goal)
        if best is not None:
            return RaisedValue(best, "bounded-raised-goal-pattern")
    return None


def from_largest_dollar_amount(html: str, text: str, opts: ExtractionOptions) -> Optional[RaisedValue]:
    """Last resort: the biggest plausible dollar figure that isn't the goal."""
    values: List[Number] = []
    for content in (text, html):
        if content:
            values.extend(_amounts(DOLLAR_AMOUNT, content))

    plausible = [v for v in values if v is not None and v >= opts.min_value]
    best = select_best(plausible, opts.goal, exclude_goal=True)
    if best is None:
        return None
    return RaisedValue(best, "max-dollar-amount")


STRATEGIES: List[Tuple[str, Strategy]] = [
    ("raised-pattern", from_raised_pattern),
    ("structured-data", from_structured_data),
    ("element-blocks", from_element_blocks),
    ("bounded-pattern", from_bounded_pattern),
    ("max-dollar-amount", from_largest_dollar_amount),
]


def _options(goal: Optional[Number], min_value: Optional[Number], case_sensitive: Optional[bool]) -> ExtractionOptions:
    return ExtractionOptions(
        goal=settings.CAMPAIGN_GOAL if goal is None else goal,
        min_value=settings.MIN_PLAUSIBLE_AMOUNT if min_value is None else min_value,
        case_sensitive=settings.RAISED_CASE_SENSITIVE if case_sensitive is None else case_sensitive,
    )


def _viable(result: Optional[RaisedValue]) -> bool:
    return result is not None and _is_finite(result.value) and result.value > 0


def extract_raised(
    html: Optional[str] = None,
    text: Optional[str] = None,
    goal: Optional[Number] = None,
    min_value: Optional[Number] = None,
    case_sensitive: Optional[bool] = None,
) -> Optional[RaisedValue]:
    """Run the heuristics in priority order and return the first viable result."""
    opts = _options(goal, min_value, case_sensitive)
    html = html or ""
    text = text or ""

    for _, strategy in STRATEGIES:
        result = strategy(html, text, opts)
        if _viable(result):
            return result
    return None


def require_raised(html: Optional[str] = None, text: Optional[str] = None, **kwargs) -> RaisedValue:
    """Like extract_raised(), but a page with no usable amount is an ExtractionError."""
    result = extract_raised(html, text, **kwargs)
    if result is None:
        raise ExtractionError("Could not find a raised amount on the campaign page")
    return result


def explain_extraction(
    html: Optional[str] = None,
    text: Optional[str] = None,
    goal: Optional[Number] = None,
    min_value: Optional[Number] = None,
    case_sensitive: Optional[bool] = None,
) -> List[Dict[str, Any]]:
    """Outcome of every stage run on its own, for the debug endpoint."""
    opts = _options(goal, min_value, case_sensitive)
    report = []
    for name, strategy in STRATEGIES:
        result = strategy(html or "", text or "", opts)
        report.append({
            "stage": name,
            "value": result.value if result else None,
            "method": result.method if result else None,
        })
    return report
