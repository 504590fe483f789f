from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from ..core.enums import ErrorCode, PairKind
from ..core.issues import CalcIssue, issue
from .model import Pair, PairingResult, Punch


def sort_punches(punches: Iterable[Punch]) -> List[Punch]:
    """Chronological order; at equal times end punches sort before start punches."""
    return sorted(punches, key=lambda p: (p.minutes, 1 if p.punch_type.is_start else 0, p.punch_id))


def pair_punches(punches: Sequence[Punch]) -> PairingResult:
    """Group one employee-day's punches into main/break/trip pairs.

    One pending start is kept per kind. A second start replaces the first
    (reported as unpaired); an end without a pending start is reported
    itself; starts still pending after the sweep are missing their end.
    """
    pending: Dict[PairKind, Punch] = {}
    pairs: List[Pair] = []
    issues: List[CalcIssue] = []
    unpaired: List[Punch] = []

    for punch in sort_punches(punches):
        kind = punch.kind
        if punch.punch_type.is_start:
            prior = pending.get(kind)
            if prior is not None:
                issues.append(issue(ErrorCode.UNPAIRED_BOOKING, punch_id=prior.punch_id))
                unpaired.append(prior)
            pending[kind] = punch
            continue

        start = pending.pop(kind, None)
        if start is None:
            issues.append(issue(ErrorCode.UNPAIRED_BOOKING, punch_id=punch.punch_id))
            unpaired.append(punch)
            continue
        pairs.append(Pair(kind=kind, start=start, end=punch))

    for kind in PairKind:
        start = pending.get(kind)
        if start is not None:
            issues.append(issue(ErrorCode.MISSING_END_BOOKING, punch_id=start.punch_id))
            unpaired.append(start)

    return PairingResult(pairs=tuple(pairs), issues=tuple(issues), unpaired=tuple(unpaired))
