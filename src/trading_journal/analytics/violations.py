"""Rule-violation catalog and impact analysis.

The catalog is an owned object: each journal session gets its own, seeded
with the built-in rules.  Custom rules are appended on demand and never
removed; they reach storage only by being attached to a trade's
``violations`` list.

``calculate_violation_stats`` partitions trades by whether any rule was
broken and compares the win rates of the two groups, alongside how often
each rule was broken.

Usage::

    catalog = ViolationCatalog()
    rule = catalog.add_custom("Moved stop")
    stats = calculate_violation_stats(trades)
    print(stats.most_broken_rule.rule, stats.win_rate_with_violations)
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Iterator

from trading_journal.core.clock import IClock, WallClock
from trading_journal.core.enums import ProfitFormula
from trading_journal.core.ids import custom_rule_id
from trading_journal.core.models import Trade, ViolationRule

from .profit import is_win, resolve_profit

logger = logging.getLogger(__name__)

DEFAULT_VIOLATION_RULES: tuple[ViolationRule, ...] = (
    ViolationRule(id="entered-early", label="Entered Early"),
    ViolationRule(id="no-stop-loss", label="No Stop Loss"),
    ViolationRule(id="overtraded", label="Overtraded"),
    ViolationRule(id="exited-emotionally", label="Exited Emotionally"),
    ViolationRule(id="chased-price", label="Chased Price"),
    ViolationRule(id="traded-during-news", label="Traded During News"),
)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ViolationCatalog:
    """Built-in plus session-scoped custom violation rules.

    Parameters
    ----------
    clock : IClock | None
        Source of the timestamp embedded in custom rule ids.
    """

    def __init__(self, *, clock: IClock | None = None) -> None:
        self._clock = clock or WallClock()
        self._rules: dict[str, ViolationRule] = {
            rule.id: rule for rule in DEFAULT_VIOLATION_RULES
        }

    def add_custom(self, label: str) -> ViolationRule:
        """Create and register a custom rule.

        Raises ``ValueError`` for a blank label.
        """
        label = label.strip()
        if not label:
            raise ValueError("Custom rule label must not be blank")

        rule_id = custom_rule_id(self._clock)
        base_id, n = rule_id, 1
        while rule_id in self._rules:
            rule_id = f"{base_id}-{n}"
            n += 1

        rule = ViolationRule(id=rule_id, label=label, is_custom=True)
        self._rules[rule_id] = rule
        logger.debug("Added custom violation rule %s (%s)", rule_id, label)
        return rule

    def get(self, rule_id: str) -> ViolationRule | None:
        return self._rules.get(rule_id)

    def rules(self) -> list[ViolationRule]:
        """All rules, built-ins first, custom rules in creation order."""
        return list(self._rules.values())

    def custom_rules(self) -> list[ViolationRule]:
        return [r for r in self._rules.values() if r.is_custom]

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[ViolationRule]:
        return iter(self.rules())

    def __len__(self) -> int:
        return len(self._rules)


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MostBrokenRule:
    rule: str = ""  # Label of the rule
    count: int = 0


@dataclass(frozen=True)
class ViolationFrequency:
    rule_id: str
    label: str
    count: int


@dataclass(frozen=True)
class ViolationStats:
    total_violations: int = 0
    most_broken_rule: MostBrokenRule = field(default_factory=MostBrokenRule)
    win_rate_with_violations: float = 0.0
    win_rate_without_violations: float = 0.0
    violation_frequency: list[ViolationFrequency] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _win_rate(wins: int, total: int) -> float:
    return wins / total * 100 if total else 0.0


def calculate_violation_stats(
    trades: Iterable[Trade],
    *,
    dedupe_per_trade: bool = False,
    formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC,
) -> ViolationStats:
    """Tally broken rules and compare win rates with and without them.

    Parameters
    ----------
    dedupe_per_trade : bool
        Count a rule at most once per trade even if it appears twice in
        that trade's list.  Off by default: duplicates are counted.
    """
    counts: dict[str, int] = {}
    labels: dict[str, str] = {}
    total_violations = 0
    with_total = with_wins = 0
    without_total = without_wins = 0

    for trade in trades:
        won = is_win(resolve_profit(trade, formula=formula))
        if not trade.violations:
            without_total += 1
            without_wins += won
            continue

        with_total += 1
        with_wins += won

        seen: set[str] = set()
        for violation in trade.violations:
            if dedupe_per_trade and violation.id in seen:
                continue
            seen.add(violation.id)
            labels.setdefault(violation.id, violation.label)
            counts[violation.id] = counts.get(violation.id, 0) + 1
            total_violations += 1

    most_broken = MostBrokenRule()
    for rule_id, count in counts.items():
        if count > most_broken.count:
            most_broken = MostBrokenRule(rule=labels[rule_id], count=count)

    frequency = sorted(
        (ViolationFrequency(rule_id, labels[rule_id], n) for rule_id, n in counts.items()),
        key=lambda f: f.count,
        reverse=True,
    )

    return ViolationStats(
        total_violations=total_violations,
        most_broken_rule=most_broken,
        win_rate_with_violations=_win_rate(with_wins, with_total),
        win_rate_without_violations=_win_rate(without_wins, without_total),
        violation_frequency=frequency,
    )
