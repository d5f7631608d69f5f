"""
Ruleset Module

Entry-readiness screening for watchlist rows. A rule set is a declarative
descriptor (predicate tables + score weights); a single evaluator interprets
every rule set, so a new version only needs a new RuleSet entry.

Condition groups:
    A  Foreign participation (short-term momentum)
    B  Bandar accumulation
    C  Mid-term confirmation (at least one member must pass)
    D  Continuity (foreign buy streak)
    E  Hard reject (distribution), forces entry_ready = False
    F  Acceleration (today's flow above its MA10)
"""
import logging
import math
import operator
from dataclasses import dataclass, fields, asdict
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockRecord:
    """One watchlist row. Numeric fields are finite floats or None (no data)."""
    symbol: str
    price: Optional[float] = None
    net_foreign_flow: Optional[float] = None
    net_foreign_flow_ma10: Optional[float] = None
    net_foreign_flow_ma20: Optional[float] = None
    one_week_foreign_flow: Optional[float] = None
    one_month_foreign_flow: Optional[float] = None
    foreign_buy_streak: Optional[float] = None
    accum_dist_index: Optional[float] = None
    flow_value: Optional[float] = None
    flow_value_ma10: Optional[float] = None
    flow_value_ma20: Optional[float] = None

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "StockRecord":
        """
        Build a record from a plain dict, ignoring unknown keys.

        Raises:
            ValueError: if a numeric field is not a finite number.
        """
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name == 'symbol':
                values['symbol'] = str(value or '').strip()
                continue
            if value is None:
                values[f.name] = None
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{f.name} must be a number or null, got {value!r}")
            try:
                number = float(value)
            except OverflowError:
                raise ValueError(f"{f.name} is out of range for a float") from None
            if not math.isfinite(number):
                raise ValueError(f"{f.name} must be finite, got {value!r}")
            values[f.name] = number
        values.setdefault('symbol', '')
        return cls(**values)


NUMERIC_FIELDS = tuple(f.name for f in fields(StockRecord) if f.name != 'symbol')


@dataclass(frozen=True)
class ConditionOutcome:
    code: str
    passed: bool
    description: str

    def label(self) -> str:
        return f"{self.code}: {self.description}"


@dataclass(frozen=True)
class ScoreItem:
    code: str
    description: str
    weight: int
    passed: bool


@dataclass(frozen=True)
class EvaluationResult:
    """
    Outcome of evaluating one record.

    `conditions` holds the classification predicates (groups A-F, hard rejects
    included). Score-only predicates are reported in `score_breakdown` (S codes)
    with their weights; `score` is the sum of the passed weights.
    """
    symbol: str
    ruleset_id: str
    entry_ready: bool
    score: int
    conditions: Tuple[ConditionOutcome, ...]
    record: StockRecord
    score_breakdown: Tuple[ScoreItem, ...] = ()
    hard_rejected: bool = False
    confirmation_passed: bool = False

    @property
    def passed_conditions(self) -> List[str]:
        return [c.label() for c in self.conditions if c.passed]

    @property
    def failed_conditions(self) -> List[str]:
        return [c.label() for c in self.conditions if not c.passed]

    def condition(self, code: str) -> Optional[ConditionOutcome]:
        for outcome in self.conditions:
            if outcome.code == code:
                return outcome
        return None

    def to_dict(self) -> Dict:
        return {
            'symbol': self.symbol,
            'ruleset_id': self.ruleset_id,
            'entry_ready': self.entry_ready,
            'score': self.score,
            'hard_rejected': self.hard_rejected,
            'confirmation_passed': self.confirmation_passed,
            'conditions': [asdict(c) for c in self.conditions],
            'score_breakdown': [asdict(s) for s in self.score_breakdown],
            'passed_conditions': self.passed_conditions,
            'failed_conditions': self.failed_conditions,
            'record': self.record.to_dict(),
        }


# --- Predicates ---

_OPERATORS = {
    '>': operator.gt,
    '>=': operator.ge,
    '<': operator.lt,
    '<=': operator.le,
    '==': operator.eq,
}


@dataclass(frozen=True)
class Clause:
    """`field <op> threshold`, or `field <op> other_field` when other_field is set."""
    field: str
    op: str
    threshold: float = 0.0
    other_field: Optional[str] = None

    def test(self, record: StockRecord) -> bool:
        left = getattr(record, self.field)
        right = getattr(record, self.other_field) if self.other_field else self.threshold
        if left is None or right is None:
            return False
        return _OPERATORS[self.op](left, right)

    @property
    def fields(self) -> Tuple[str, ...]:
        return (self.field, self.other_field) if self.other_field else (self.field,)


@dataclass(frozen=True)
class Predicate:
    """Conjunction of clauses. A None operand makes the predicate False."""
    code: str
    description: str
    clauses: Tuple[Clause, ...]

    def test(self, record: StockRecord) -> bool:
        return all(clause.test(record) for clause in self.clauses)

    @property
    def fields(self) -> Tuple[str, ...]:
        seen = []
        for clause in self.clauses:
            for name in clause.fields:
                if name not in seen:
                    seen.append(name)
        return tuple(seen)


def compare(code: str, description: str, field_name: str, op: str, threshold: float = 0.0) -> Predicate:
    return Predicate(code, description, (Clause(field_name, op, threshold),))


def compare_fields(code: str, description: str, left: str, op: str, right: str) -> Predicate:
    return Predicate(code, description, (Clause(left, op, other_field=right),))


@dataclass(frozen=True)
class ScoreWeight:
    predicate: Predicate
    weight: int


@dataclass(frozen=True)
class RuleSet:
    """
    Immutable rule-set descriptor.

    entry_ready = all(required) and any(confirmation) and all(confirmation_floors)
                  and not any(hard_rejects)
    """
    id: str
    name: str
    version: str
    description: str
    hard_rejects: Tuple[Predicate, ...]
    required: Tuple[Predicate, ...]
    confirmation: Tuple[Predicate, ...]
    confirmation_floors: Tuple[Predicate, ...] = ()
    score_weights: Tuple[ScoreWeight, ...] = ()

    @property
    def max_score(self) -> int:
        return sum(item.weight for item in self.score_weights)

    def predicates(self) -> Tuple[Predicate, ...]:
        """All classification predicates ordered by condition code."""
        combined = self.required + self.confirmation + self.confirmation_floors + self.hard_rejects
        return tuple(sorted(combined, key=lambda p: p.code))


# --- Shared predicates ---

E1_DISTRIBUTION = compare('E1', 'REJECT: Bandar Accum/Dist < 0', 'accum_dist_index', '<')
E2_FOREIGN_EXIT = Predicate(
    'E2',
    'REJECT: Net Foreign < 0 AND Streak = 0',
    (
        Clause('net_foreign_flow', '<'),
        Clause('foreign_buy_streak', '==', 0),
    ),
)

A1_NET_FOREIGN = compare('A1', 'Net Foreign > 0', 'net_foreign_flow', '>')
A2_NET_FOREIGN_MA10 = compare('A2', 'Net Foreign MA10 > 0', 'net_foreign_flow_ma10', '>')
A3_WEEK_FLOW = compare('A3', '1 Week Foreign Flow > 0', 'one_week_foreign_flow', '>')

B1_ACCUM_DIST = compare('B1', 'Bandar Accum/Dist > 0', 'accum_dist_index', '>')
B2_BANDAR_VALUE = compare('B2', 'Bandar Value > 0', 'flow_value', '>')
B3_BANDAR_VALUE_MA10 = compare('B3', 'Bandar Value MA10 > 0', 'flow_value_ma10', '>')

C1_FOREIGN_MA20 = compare('C1', 'Net Foreign MA20 > 0', 'net_foreign_flow_ma20', '>')
C2_BANDAR_MA20 = compare('C2', 'Bandar Value MA20 > 0', 'flow_value_ma20', '>')
C3_FOREIGN_MA20_FLOOR = compare('C3', 'Net Foreign MA20 >= 0', 'net_foreign_flow_ma20', '>=')
C4_BANDAR_MA20_FLOOR = compare('C4', 'Bandar Value MA20 >= 0', 'flow_value_ma20', '>=')

F1_ACCELERATION = compare_fields(
    'F1', 'Net Foreign > Net Foreign MA10 (acceleration)',
    'net_foreign_flow', '>', 'net_foreign_flow_ma10',
)


STANDARD = RuleSet(
    id='standard',
    name='Standard',
    version='2.0',
    description='Foreign participation + bandar accumulation, either MA20 confirms, streak >= 2.',
    hard_rejects=(E1_DISTRIBUTION, E2_FOREIGN_EXIT),
    required=(
        A1_NET_FOREIGN, A2_NET_FOREIGN_MA10, A3_WEEK_FLOW,
        B1_ACCUM_DIST, B2_BANDAR_VALUE,
        compare('D1', 'Net Foreign Streak >= 2', 'foreign_buy_streak', '>=', 2),
    ),
    confirmation=(C1_FOREIGN_MA20, C2_BANDAR_MA20),
    score_weights=(
        ScoreWeight(compare('S1', 'Bandar Value MA20 > 0', 'flow_value_ma20', '>'), 2),
        ScoreWeight(compare('S2', 'Net Foreign MA20 > 0', 'net_foreign_flow_ma20', '>'), 2),
        ScoreWeight(compare('S3', 'Net Foreign Streak >= 3', 'foreign_buy_streak', '>=', 3), 1),
        ScoreWeight(compare('S4', 'Bandar Value MA10 > 0', 'flow_value_ma10', '>'), 1),
    ),
)

STRICT = RuleSet(
    id='strict',
    name='Strict',
    version='3.0',
    description='Standard plus bandar MA10 accumulation, non-negative MA20s, '
                'streak >= 3 and accelerating foreign flow.',
    hard_rejects=(E1_DISTRIBUTION, E2_FOREIGN_EXIT),
    required=(
        A1_NET_FOREIGN, A2_NET_FOREIGN_MA10, A3_WEEK_FLOW,
        B1_ACCUM_DIST, B2_BANDAR_VALUE, B3_BANDAR_VALUE_MA10,
        compare('D1', 'Net Foreign Streak >= 3', 'foreign_buy_streak', '>=', 3),
        F1_ACCELERATION,
    ),
    confirmation=(C1_FOREIGN_MA20, C2_BANDAR_MA20),
    confirmation_floors=(C3_FOREIGN_MA20_FLOOR, C4_BANDAR_MA20_FLOOR),
    score_weights=(
        ScoreWeight(compare('S1', 'Bandar Value MA20 > 0', 'flow_value_ma20', '>'), 2),
        ScoreWeight(compare('S2', 'Net Foreign MA20 > 0', 'net_foreign_flow_ma20', '>'), 2),
        ScoreWeight(compare_fields(
            'S3', 'Net Foreign > MA10 (acceleration)',
            'net_foreign_flow', '>', 'net_foreign_flow_ma10',
        ), 2),
        ScoreWeight(compare('S4', 'Net Foreign Streak >= 5', 'foreign_buy_streak', '>=', 5), 1),
        ScoreWeight(compare('S5', 'Bandar Value MA10 > 0', 'flow_value_ma10', '>'), 1),
        ScoreWeight(compare_fields(
            'S6', '1 Week Flow > 1 Month Flow',
            'one_week_foreign_flow', '>', 'one_month_foreign_flow',
        ), 1),
    ),
)

RULESETS: Dict[str, RuleSet] = {rs.id: rs for rs in (STANDARD, STRICT)}
DEFAULT_RULESET_ID = STANDARD.id


def get_ruleset(ruleset_id: Optional[str]) -> RuleSet:
    """Resolve a rule-set id, falling back to the default for unknown ids."""
    if isinstance(ruleset_id, str):
        ruleset = RULESETS.get(ruleset_id.strip().lower())
        if ruleset is not None:
            return ruleset
    logger.debug(f"Unknown ruleset {ruleset_id!r}, using {DEFAULT_RULESET_ID}")
    return RULESETS[DEFAULT_RULESET_ID]


def list_rulesets() -> List[RuleSet]:
    return list(RULESETS.values())


def evaluate(record: StockRecord, ruleset_id: Optional[str] = DEFAULT_RULESET_ID) -> EvaluationResult:
    """
    Evaluate a record against a rule set.

    Every group is evaluated and reported even when a hard reject fires.
    Hard-reject conditions are reported as passed when they did NOT fire.
    """
    ruleset = get_ruleset(ruleset_id)

    fired = {p.code for p in ruleset.hard_rejects if p.test(record)}
    required_ok = {p.code: p.test(record) for p in ruleset.required}
    members_ok = {p.code: p.test(record) for p in ruleset.confirmation}
    floors_ok = {p.code: p.test(record) for p in ruleset.confirmation_floors}

    outcomes = {}
    outcomes.update(required_ok)
    outcomes.update(members_ok)
    outcomes.update(floors_ok)
    outcomes.update({p.code: p.code not in fired for p in ruleset.hard_rejects})

    conditions = tuple(
        ConditionOutcome(p.code, outcomes[p.code], p.description)
        for p in ruleset.predicates()
    )

    hard_rejected = bool(fired)
    confirmation_passed = any(members_ok.values()) and all(floors_ok.values())
    entry_ready = all(required_ok.values()) and confirmation_passed and not hard_rejected

    score_breakdown = tuple(
        ScoreItem(item.predicate.code, item.predicate.description, item.weight, item.predicate.test(record))
        for item in ruleset.score_weights
    )
    score = sum(item.weight for item in score_breakdown if item.passed)

    return EvaluationResult(
        symbol=record.symbol,
        ruleset_id=ruleset.id,
        entry_ready=entry_ready,
        score=score,
        conditions=conditions,
        record=record,
        score_breakdown=score_breakdown,
        hard_rejected=hard_rejected,
        confirmation_passed=confirmation_passed,
    )
