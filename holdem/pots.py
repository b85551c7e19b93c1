from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Set

from .evaluator import HandValue
from .models import PotAward


def build_pots(contributions: Mapping[str, int], folded: Set[str], order: Sequence[str]) -> List[PotAward]:
    """Split what everyone put in this hand into a main pot and side pots.

    Each layer is capped by the smallest remaining contribution; folded
    players pay into layers but are never eligible. ``order`` fixes the seat
    order of the ``eligible`` lists.
    """
    remaining: Dict[str, int] = {pid: amount for pid, amount in contributions.items() if amount > 0}
    pots: List[PotAward] = []
    while remaining:
        layer = min(remaining.values())
        amount = 0
        for pid in list(remaining):
            amount += layer
            remaining[pid] -= layer
        contributors = set(remaining)
        remaining = {pid: left for pid, left in remaining.items() if left > 0}
        eligible = [pid for pid in order if pid in contributors and pid not in folded]
        if not eligible:
            # Only folded chips at this level; they ride with the pot below.
            if pots:
                pots[-1].amount += amount
                continue
            eligible = [pid for pid in order if pid in contributors]
        if pots and pots[-1].eligible == eligible:
            pots[-1].amount += amount
        else:
            pots.append(PotAward(amount=amount, eligible=eligible))
    return pots


def award_pots(pots: List[PotAward], hands: Mapping[str, HandValue], order: Sequence[str]) -> Dict[str, int]:
    """Pay each pot to its best eligible hand(s).

    Ties split evenly; leftover chips go one at a time to the tied winners
    in ``order`` (seat order starting left of the dealer).
    """
    payouts: Dict[str, int] = {}
    for pot in pots:
        contenders = [pid for pid in pot.eligible if pid in hands]
        if not contenders:
            contenders = list(pot.eligible)
            best = None
        else:
            best = max(hands[pid] for pid in contenders)
        winners = [pid for pid in order if pid in contenders and (best is None or hands[pid] == best)]
        share, remainder = divmod(pot.amount, len(winners))
        for idx, pid in enumerate(winners):
            payouts[pid] = payouts.get(pid, 0) + share + (1 if idx < remainder else 0)
        pot.winners = winners
    return payouts
