"""
Rank resolution service.
Maps cumulative points onto a configurable, ordered rank table.
"""
from typing import List, Optional, Sequence, Tuple

from jobtracker.constants import DEFAULT_RANKS
from jobtracker.domain import NextRank
from jobtracker.exceptions import RankTableException


class RankTable:
    """Ordered (name, threshold) pairs with strictly increasing thresholds"""

    def __init__(self, ranks: Sequence[Tuple[str, int]] = DEFAULT_RANKS):
        self.ranks: List[Tuple[str, int]] = [(name, int(threshold)) for name, threshold in ranks]
        self._validate()

    def _validate(self) -> None:
        if not self.ranks:
            raise RankTableException("at least one rank is required")
        if self.ranks[0][1] != 0:
            raise RankTableException("first rank must have threshold 0")

        names = [name for name, _ in self.ranks]
        if len(set(names)) != len(names):
            raise RankTableException("rank names must be unique")

        for (_, lower), (name, upper) in zip(self.ranks, self.ranks[1:]):
            if upper <= lower:
                raise RankTableException(
                    f"threshold for {name} ({upper}) must be greater than {lower}"
                )

    @property
    def first_rank(self) -> str:
        return self.ranks[0][0]

    @property
    def top_rank(self) -> str:
        return self.ranks[-1][0]

    def threshold_for(self, name: str) -> Optional[int]:
        """Threshold of a rank by name, None if the name is unknown"""
        for rank_name, threshold in self.ranks:
            if rank_name == name:
                return threshold
        return None

    def _index_for(self, points: int) -> int:
        # Negative totals clamp to the first rank
        points = max(0, points)
        for index in range(len(self.ranks) - 1, -1, -1):
            if points >= self.ranks[index][1]:
                return index
        return 0

    def rank_for(self, points: int) -> str:
        """Name of the highest rank whose threshold does not exceed points"""
        return self.ranks[self._index_for(points)][0]

    def next_rank(self, points: int) -> NextRank:
        """
        Next rank and the points still needed to reach it.

        Returns NextRank(name=None, points_needed=0) at the top rank.
        """
        index = self._index_for(points)
        if index == len(self.ranks) - 1:
            return NextRank(name=None, points_needed=0)

        name, threshold = self.ranks[index + 1]
        return NextRank(name=name, points_needed=max(0, threshold - max(0, points)))

    def progress(self, points: int) -> float:
        """
        Percentage of the way from the current rank to the next one.

        Always within [0, 100]; exactly 100 at the top rank.
        """
        index = self._index_for(points)
        if index == len(self.ranks) - 1:
            return 100.0

        current_threshold = self.ranks[index][1]
        next_threshold = self.ranks[index + 1][1]
        progress = (points - current_threshold) / (next_threshold - current_threshold) * 100
        return min(max(progress, 0.0), 100.0)


DEFAULT_RANK_TABLE = RankTable(DEFAULT_RANKS)
