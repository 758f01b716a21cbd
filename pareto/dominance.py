"""
Dominance relationships for Pareto Evolve.

All comparisons read ``normalized_objectives``, where every objective is
already oriented so that higher is better.

- Pairwise dominance: A dominates B when A is at least as good in every
  objective and strictly better in one.
- Fast non-dominated sort (NSGA-II): ranks a population into fronts in
  O(M*N^2) for M objectives and N candidates.
- Crowding distance: density of a front along each objective, used to
  keep a trimmed front spread out.
- Epsilon-dominance: dominance with a tolerance for noisy measurements.
"""

import logging
import math
from typing import Dict, List, Sequence, Set

from pareto.interfaces import DEFAULT_EPSILON, Candidate, DominanceResult

logger = logging.getLogger(__name__)


class DominanceComparator:
    """Pairwise and population-wide dominance computations."""

    def compare(self, a: Candidate, b: Candidate) -> DominanceResult:
        """Compare two candidates; never raises.

        A candidate that has not been normalized cannot dominate or be
        dominated, so the result is NON_DOMINATED with a warning.
        """
        if a.normalized_objectives is None:
            logger.warning(
                f"Candidate {a.id} has no normalized objectives, treating as non-dominated"
            )
            return DominanceResult.NON_DOMINATED
        if b.normalized_objectives is None:
            logger.warning(
                f"Candidate {b.id} has no normalized objectives, treating as non-dominated"
            )
            return DominanceResult.NON_DOMINATED

        a_values = a.normalized_objectives
        b_values = b.normalized_objectives

        better = False
        worse = False
        for name in _objective_union(a_values, b_values):
            a_val = a_values.get(name, 0.0)
            b_val = b_values.get(name, 0.0)
            if a_val > b_val:
                better = True
            elif a_val < b_val:
                worse = True
            if better and worse:
                return DominanceResult.NON_DOMINATED

        if better:
            return DominanceResult.DOMINATES
        if worse:
            return DominanceResult.DOMINATED_BY
        return DominanceResult.NON_DOMINATED

    def dominates(self, a: Candidate, b: Candidate) -> bool:
        return self.compare(a, b) is DominanceResult.DOMINATES

    def epsilon_dominates(
        self, a: Candidate, b: Candidate, epsilon: float = DEFAULT_EPSILON
    ) -> bool:
        """
        True when A is within epsilon of B or better in every objective and
        better than B by more than epsilon in at least one.
        """
        if a.normalized_objectives is None or b.normalized_objectives is None:
            return False

        a_values = a.normalized_objectives
        b_values = b.normalized_objectives
        objectives = _objective_union(a_values, b_values)
        if not objectives:
            return False

        clearly_better = False
        for name in objectives:
            a_val = a_values.get(name, 0.0)
            b_val = b_values.get(name, 0.0)
            if a_val < b_val - epsilon:
                return False
            if a_val > b_val + epsilon:
                clearly_better = True
        return clearly_better

    def fast_non_dominated_sort(
        self, candidates: Sequence[Candidate]
    ) -> Dict[int, List[Candidate]]:
        """
        Rank candidates into Pareto fronts.

        Returns a mapping of front number (1 = non-dominated) to the
        candidates in that front, preserving input order within a front.
        """
        if not candidates:
            return {}

        by_id = {c.id: c for c in candidates}
        order = list(by_id)
        domination_count: Dict[str, int] = {cid: 0 for cid in order}
        dominated_set: Dict[str, List[str]] = {cid: [] for cid in order}

        for a_id in order:
            a = by_id[a_id]
            for b_id in order:
                if a_id == b_id:
                    continue
                if self.compare(a, by_id[b_id]) is DominanceResult.DOMINATES:
                    dominated_set[a_id].append(b_id)
                    domination_count[b_id] += 1

        fronts: Dict[int, List[Candidate]] = {}
        current = [cid for cid in order if domination_count[cid] == 0]
        rank = 1
        while current:
            fronts[rank] = [by_id[cid] for cid in current]
            released: Set[str] = set()
            for cid in current:
                for dominated_id in dominated_set[cid]:
                    domination_count[dominated_id] -= 1
                    if domination_count[dominated_id] == 0:
                        released.add(dominated_id)
            current = [cid for cid in order if cid in released]
            rank += 1

        logger.debug(
            f"Sorted {len(order)} candidates into {len(fronts)} fronts "
            f"(front 1: {len(fronts.get(1, []))})"
        )
        return fronts

    def crowding_distance(self, front: Sequence[Candidate]) -> Dict[str, float]:
        """
        Crowding distance per candidate id.

        Boundary members of each objective get ``math.inf``; a front of two
        or fewer members is all boundary. Every objective present on any
        member is measured, missing values counting as 0.0. Objectives whose
        values are all equal contribute nothing.
        """
        if not front:
            return {}
        if len(front) <= 2:
            return {c.id: math.inf for c in front}

        objectives: List[str] = []
        for member in front:
            for name in member.normalized_objectives or {}:
                if name not in objectives:
                    objectives.append(name)
        distances: Dict[str, float] = {c.id: 0.0 for c in front}
        if not objectives:
            return distances

        for objective in objectives:
            ranked = sorted(front, key=lambda c: _value(c, objective))
            low = _value(ranked[0], objective)
            high = _value(ranked[-1], objective)
            span = high - low
            if span == 0.0:
                continue

            distances[ranked[0].id] = math.inf
            distances[ranked[-1].id] = math.inf

            for position in range(1, len(ranked) - 1):
                member_id = ranked[position].id
                if distances[member_id] == math.inf:
                    continue
                gap = _value(ranked[position + 1], objective) - _value(
                    ranked[position - 1], objective
                )
                distances[member_id] += gap / span

        return distances


def _objective_union(a: Dict[str, float], b: Dict[str, float]) -> List[str]:
    names = list(a)
    names.extend(name for name in b if name not in a)
    return names


def _value(candidate: Candidate, objective: str) -> float:
    if candidate.normalized_objectives is None:
        return 0.0
    return candidate.normalized_objectives.get(objective, 0.0)
