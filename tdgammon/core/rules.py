from __future__ import annotations

from dataclasses import dataclass
from math import comb
from typing import Dict, List, Sequence, Tuple

from .dice import Dice
from .state import (
    BAR,
    NUM_PIPS,
    ONGOING,
    OPPONENT_BAR,
    GameResult,
    GameState,
    Position,
    game_over,
    mcomb,
)

HOME_TOP = 6  # x's home board is points 1..6
OPPONENT_HOME_BOTTOM = 19  # the opponent's home board is points 19..24
NUM_SLOTS = 26  # off, points 1..24, bar


@dataclass(frozen=True)
class Hypergammon:
    """Hypergammon rules engine: backgammon with three checkers a side.

    Instances are immutable and always describe the board from the side to
    move. ``possible_positions`` returns successors already flipped, so the
    player who moves next is again "x" in every returned state.
    """

    pos: Position

    NUM_CHECKERS = 3

    @classmethod
    def new(cls) -> "Hypergammon":
        pips = [0] * NUM_PIPS
        for point in (22, 23, 24):
            pips[point] = 1
        for point in (1, 2, 3):
            pips[point] = -1
        return cls(Position(pips=tuple(pips)))

    @classmethod
    def from_position(cls, position: Position) -> "Hypergammon":
        x_total = position.x_off + sum(p for p in position.pips if p > 0)
        o_total = position.o_off - sum(p for p in position.pips if p < 0)
        if x_total != cls.NUM_CHECKERS or o_total != cls.NUM_CHECKERS:
            raise ValueError(
                f"Hypergammon needs {cls.NUM_CHECKERS} checkers a side, got {x_total} and {o_total}."
            )
        return cls(position)

    def position(self) -> Position:
        return self.pos

    def flip(self) -> "Hypergammon":
        return Hypergammon(self.pos.flip())

    # ------------------------------------------------------------------
    # Game status
    # ------------------------------------------------------------------
    def game_state(self) -> GameState:
        pos = self.pos
        if pos.o_off == self.NUM_CHECKERS:
            if pos.x_off > 0:
                return game_over(GameResult.LOSE_NORMAL)
            stuck = pos.x_bar > 0 or any(
                pos.pips[p] > 0 for p in range(OPPONENT_HOME_BOTTOM, BAR)
            )
            return game_over(GameResult.LOSE_BACKGAMMON if stuck else GameResult.LOSE_GAMMON)
        if pos.x_off == self.NUM_CHECKERS:
            if pos.o_off > 0:
                return game_over(GameResult.WIN_NORMAL)
            stuck = pos.o_bar > 0 or any(pos.pips[p] < 0 for p in range(1, HOME_TOP + 1))
            return game_over(GameResult.WIN_BACKGAMMON if stuck else GameResult.WIN_GAMMON)
        return ONGOING

    # ------------------------------------------------------------------
    # Move generation
    # ------------------------------------------------------------------
    def possible_positions(self, dice: Dice) -> List["Hypergammon"]:
        if dice.is_double:
            reached, _ = self._play_in_order((dice.big,) * 4)
        else:
            high, high_used = self._play_in_order((dice.big, dice.small))
            low, low_used = self._play_in_order((dice.small, dice.big))
            used = max(high_used, low_used)
            if used == 0:
                reached = [self]
            elif used == 1:
                # Only one die can be played: the larger one if possible.
                reached = high if high_used == 1 else low
            else:
                reached = (high if high_used == 2 else []) + (low if low_used == 2 else [])
        unique: Dict[Hypergammon, None] = dict.fromkeys(reached)
        return [state.flip() for state in unique]

    def _play_in_order(self, dice: Sequence[int]) -> Tuple[List["Hypergammon"], int]:
        """States reachable using as many of ``dice`` (in order) as possible."""
        if not dice:
            return [self], 0
        if self.pos.x_off == self.NUM_CHECKERS:
            # Bearing off the last checker uses up the rest of the roll.
            return [self], len(dice)
        best: List[Hypergammon] = [self]
        best_used = 0
        for nxt in self._single_die_moves(dice[0]):
            found, used = nxt._play_in_order(dice[1:])
            used += 1
            if used > best_used:
                best, best_used = list(found), used
            elif used == best_used:
                best.extend(found)
        return best, best_used

    def _single_die_moves(self, die: int) -> List["Hypergammon"]:
        pips = self.pos.pips
        if pips[BAR] > 0:
            dest = BAR - die
            return [self._moved(BAR, dest)] if pips[dest] >= -1 else []

        all_home = all(pips[p] <= 0 for p in range(HOME_TOP + 1, BAR))
        moves = []
        for src in range(BAR - 1, 0, -1):
            if pips[src] <= 0:
                continue
            dest = src - die
            if dest >= 1:
                if pips[dest] >= -1:
                    moves.append(self._moved(src, dest))
            elif all_home:
                highest = all(pips[p] <= 0 for p in range(src + 1, HOME_TOP + 1))
                if dest == 0 or highest:
                    moves.append(self._borne_off(src))
        return moves

    def _moved(self, src: int, dest: int) -> "Hypergammon":
        pips = list(self.pos.pips)
        pips[src] -= 1
        if pips[dest] == -1:
            pips[dest] = 0
            pips[OPPONENT_BAR] -= 1
        pips[dest] += 1
        return Hypergammon(Position(tuple(pips), self.pos.x_off, self.pos.o_off))

    def _borne_off(self, src: int) -> "Hypergammon":
        pips = list(self.pos.pips)
        pips[src] -= 1
        return Hypergammon(Position(tuple(pips), self.pos.x_off + 1, self.pos.o_off))

    # ------------------------------------------------------------------
    # Database indexing
    # ------------------------------------------------------------------
    def dbhash(self) -> int:
        per_side = mcomb(NUM_SLOTS, self.NUM_CHECKERS)
        return _side_rank(self.pos) * per_side + _side_rank(self.pos.flip())


def _side_rank(position: Position) -> int:
    """Rank of x's checker multiset (off=0, points 1..24, bar=25)."""
    slots = [0] * position.x_off
    for slot in range(1, NUM_SLOTS):
        slots.extend([slot] * max(position.pips[slot], 0))
    # Combinatorial number system over the strictly increasing slot + i.
    return sum(comb(slot + i, i + 1) for i, slot in enumerate(slots))


def database_size(num_checkers: int) -> int:
    """Number of records in a two-sided lookup table."""
    return mcomb(NUM_SLOTS, num_checkers) ** 2
