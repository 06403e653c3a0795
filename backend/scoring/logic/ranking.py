"""
Ranking resolution with manual tie-break overrides.

Rank 1 is the lowest total. Equal totals are ordered by the scope's
ranking override when it lists the tied players; the resolver does not
care which value the tie is at.
"""

from __future__ import annotations

from itertools import groupby
from typing import TYPE_CHECKING

from scoring.logic.types import RankingEntry

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from scoring.logic.models import OverrideStore


def _apply_override(group: list[tuple[str, int]], order: Sequence[str]) -> list[tuple[str, int]]:
    """
    Reorder one group of equal totals by the override order.

    Listed players are placed in override order into the slots the listed
    players occupy; unlisted players keep their slots. Any two listed
    players therefore follow the override, while the override does not
    impose a total order on the rest of the tie.
    """
    position = {player: i for i, player in enumerate(order)}
    listed_slots = [i for i, (player, _) in enumerate(group) if player in position]
    if len(listed_slots) < 2:  # noqa: PLR2004
        return group
    listed = sorted((group[i] for i in listed_slots), key=lambda item: position[item[0]])
    result = list(group)
    for slot, item in zip(listed_slots, listed, strict=True):
        result[slot] = item
    return result


def rank(
    totals: Mapping[str, int],
    overrides: OverrideStore | None = None,
    scope_key: str | None = None,
) -> list[RankingEntry]:
    """
    Sort totals ascending, breaking ties with the ranking override of scope_key.

    The sort is stable, so ties not covered by the override keep the
    input (roster) order. Override entries naming players absent from
    totals are ignored. The result is always a permutation of totals.
    """
    order: Sequence[str] = ()
    if overrides is not None and scope_key is not None:
        order = overrides.ranking_for(scope_key)

    ordered: list[tuple[str, int]] = []
    for _, group in groupby(sorted(totals.items(), key=lambda item: item[1]), key=lambda item: item[1]):
        ordered.extend(_apply_override(list(group), order))

    entries = []
    for i, (player, total) in enumerate(ordered):
        tied_prev = i > 0 and ordered[i - 1][1] == total
        tied_next = i < len(ordered) - 1 and ordered[i + 1][1] == total
        entries.append(RankingEntry(position=i + 1, player=player, total=total, is_tied=tied_prev or tied_next))
    return entries


def move_entry(order: Sequence[str], index: int, direction: int) -> list[str]:
    """
    Swap the player at index with its neighbour in direction (-1 up, +1 down).

    Moves that would leave the list are ignored.
    """
    result = list(order)
    target = index + direction
    if not (0 <= index < len(result)) or not (0 <= target < len(result)):
        return result
    result[index], result[target] = result[target], result[index]
    return result
