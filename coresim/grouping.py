"""Grouping of programs by instruction similarity."""

from __future__ import annotations

import math
from collections.abc import Sequence


def jaccard_similarity(a: Sequence[str], b: Sequence[str]) -> float:
    """Jaccard index of the distinct lines of two programs (NaN if both empty)."""
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return math.nan
    return len(set_a & set_b) / len(union)


class JobGrouping:
    """Greedy clustering of programs whose similarity exceeds a threshold."""

    def __init__(self, threshold: float) -> None:
        self.threshold = threshold

    def cluster_programs(self, programs: Sequence[Sequence[str]]) -> list[list[int]]:
        clusters: list[list[int]] = []
        visited: set[int] = set()
        for i, program in enumerate(programs):
            if i in visited:
                continue
            cluster = [i]
            visited.add(i)
            for j in range(i + 1, len(programs)):
                if j not in visited and jaccard_similarity(program, programs[j]) > self.threshold:
                    cluster.append(j)
                    visited.add(j)
            clusters.append(cluster)
        return clusters