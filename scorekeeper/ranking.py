from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Hashable, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class RankGroup(Generic[T]):
    rank: int
    members: list[T] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)


def competition_groups(items: Sequence[T], key: Callable[[T], Hashable]) -> list[RankGroup[T]]:
    """Group consecutive items sharing ``key`` and give each group its competition rank.

    ``items`` must already be sorted. The rank of a group is the 1-based position
    of its first member, so a two-way tie for 1st is followed by rank 3.
    """
    groups: list[RankGroup[T]] = []
    position = 0
    while position < len(items):
        current = key(items[position])
        group = RankGroup(rank=position + 1)
        while position < len(items) and key(items[position]) == current:
            group.members.append(items[position])
            position += 1
        groups.append(group)
    return groups


def split_points(table: Sequence[int], rank: int, size: int) -> int:
    """Average the table values for ranks ``rank .. rank + size - 1``, rounded down.

    Ranks past the end of the table are worth 0.
    """
    if size <= 0:
        return 0
    total = sum(table[r - 1] for r in range(rank, rank + size) if 1 <= r <= len(table))
    return total // size
