from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Deque, Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.constants import MINUTES_PER_DAY
from ..core.enums import DayChangePolicy, PairKind, PunchSource, PunchType
from .model import Punch

AUTO_LEAVE_SUFFIX = ":auto-leave"
AUTO_ARRIVE_SUFFIX = ":auto-arrive"


@dataclass(frozen=True)
class DayPunch:
    """A punch seen from the day being resolved: offset -1, 0 or +1 days."""

    punch: Punch
    offset: int

    @property
    def absolute(self) -> int:
        return self.offset * MINUTES_PER_DAY + self.punch.minutes


@dataclass(frozen=True)
class OvernightSpan:
    arrival: DayPunch
    departure: DayPunch
    inner: Tuple[DayPunch, ...] = ()


@dataclass(frozen=True)
class DayChangeResult:
    punches: Tuple[Punch, ...]
    # Punches created for this day or a neighbouring day that must be stored.
    synthesized: Tuple[Punch, ...] = ()


def _collect(day: date, punches_by_date: Mapping[date, Sequence[Punch]]) -> List[DayPunch]:
    out: List[DayPunch] = []
    for offset in (-1, 0, 1):
        for p in punches_by_date.get(day + timedelta(days=offset), ()):
            out.append(DayPunch(punch=p, offset=offset))
    return out


def find_overnight_spans(day: date, punches_by_date: Mapping[date, Sequence[Punch]]) -> List[OvernightSpan]:
    """FIFO-pair arrivals and departures over yesterday/today/tomorrow; keep pairs that cross midnight."""
    seen = _collect(day, punches_by_date)
    mains = sorted(
        (dp for dp in seen if dp.punch.kind == PairKind.MAIN),
        key=lambda dp: (dp.absolute, 1 if dp.punch.punch_type.is_start else 0, dp.punch.punch_id),
    )
    others = [dp for dp in seen if dp.punch.kind != PairKind.MAIN]

    queue: Deque[DayPunch] = deque()
    spans: List[OvernightSpan] = []
    for dp in mains:
        if dp.punch.punch_type == PunchType.ARRIVE:
            queue.append(dp)
            continue
        if not queue:
            continue
        arrival = queue.popleft()
        if abs(dp.offset - arrival.offset) != 1:
            continue
        inner = tuple(
            sorted(
                (o for o in others if arrival.absolute <= o.absolute <= dp.absolute),
                key=lambda o: (o.absolute, o.punch.punch_id),
            )
        )
        spans.append(OvernightSpan(arrival=arrival, departure=dp, inner=inner))
    return spans


def _without(own: Sequence[Punch], removed: List[Punch]) -> List[Punch]:
    ids = {p.punch_id for p in removed}
    return [p for p in own if p.punch_id not in ids]


@dataclass(frozen=True)
class SpanEffect:
    added: Tuple[Punch, ...] = ()
    removed: Tuple[Punch, ...] = ()
    synthesized: Tuple[Punch, ...] = ()


def _evaluate_come(day: date, span: OvernightSpan) -> SpanEffect:
    if span.arrival.offset == 0:
        moving = [span.departure] + [dp for dp in span.inner if dp.offset == 1]
        return SpanEffect(added=tuple(dp.punch.moved_to(day, MINUTES_PER_DAY) for dp in moving))
    removed = [span.departure.punch] + [dp.punch for dp in span.inner if dp.offset == 0]
    return SpanEffect(removed=tuple(removed))


def _evaluate_go(day: date, span: OvernightSpan) -> SpanEffect:
    if span.departure.offset == 0:
        moving = [span.arrival] + [dp for dp in span.inner if dp.offset == -1]
        return SpanEffect(added=tuple(dp.punch.moved_to(day, -MINUTES_PER_DAY) for dp in moving))
    removed = [span.arrival.punch] + [dp.punch for dp in span.inner if dp.offset == 0]
    return SpanEffect(removed=tuple(removed))


def synthesize_split(span: OvernightSpan) -> Tuple[Punch, Punch]:
    """Leave at 24:00 on the arrival date and arrive at 00:00 on the departure date."""
    arrival = span.arrival.punch
    departure = span.departure.punch
    leave = Punch(
        punch_id=f"{arrival.punch_id}{AUTO_LEAVE_SUFFIX}",
        employee_id=arrival.employee_id,
        punch_date=arrival.punch_date,
        punch_type=PunchType.LEAVE,
        original_minutes=MINUTES_PER_DAY,
        source=PunchSource.AUTO_COMPLETE,
    )
    arrive = Punch(
        punch_id=f"{arrival.punch_id}{AUTO_ARRIVE_SUFFIX}",
        employee_id=departure.employee_id,
        punch_date=departure.punch_date,
        punch_type=PunchType.ARRIVE,
        original_minutes=0,
        source=PunchSource.AUTO_COMPLETE,
    )
    return leave, arrive


def _auto_complete(day: date, span: OvernightSpan) -> SpanEffect:
    split = synthesize_split(span)
    return SpanEffect(added=tuple(p for p in split if p.punch_date == day), synthesized=split)


def _unchanged(day: date, span: OvernightSpan) -> SpanEffect:
    return SpanEffect()


_HANDLERS: Dict[DayChangePolicy, Callable[[date, OvernightSpan], SpanEffect]] = {
    DayChangePolicy.NONE: _unchanged,
    DayChangePolicy.EVALUATE_COME: _evaluate_come,
    DayChangePolicy.EVALUATE_GO: _evaluate_go,
    DayChangePolicy.AUTO_COMPLETE: _auto_complete,
}

if set(_HANDLERS) != set(DayChangePolicy):
    raise RuntimeError("day-change handler missing for some DayChangePolicy")


def resolve_day(
    day: date,
    punches_by_date: Mapping[date, Sequence[Punch]],
    policy: DayChangePolicy,
    *,
    previous_policy: Optional[DayChangePolicy] = None,
) -> DayChangeResult:
    """Return the punches that belong to `day` under the day-change policies.

    `punches_by_date` should hold the stored punches of the previous, current
    and next date. A span follows the policy of its arrival date: `policy`
    for spans arriving on `day`, `previous_policy` (default `policy`) for
    spans that arrived the day before. Data that was already split by
    auto-complete has no overnight pairs left, so resolving it again changes
    nothing.
    """
    if previous_policy is None:
        previous_policy = policy
    own = list(punches_by_date.get(day, ()))
    if policy == DayChangePolicy.NONE and previous_policy == DayChangePolicy.NONE:
        return DayChangeResult(punches=tuple(own))

    added: List[Punch] = []
    removed: List[Punch] = []
    synthesized: List[Punch] = []
    for span in find_overnight_spans(day, punches_by_date):
        span_policy = policy if span.arrival.offset == 0 else previous_policy
        effect = _HANDLERS[span_policy](day, span)
        added.extend(effect.added)
        removed.extend(effect.removed)
        synthesized.extend(effect.synthesized)
    return DayChangeResult(punches=tuple(_without(own, removed) + added), synthesized=tuple(synthesized))
