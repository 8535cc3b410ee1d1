from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .rules import generate_moves
from .state import GameState, Player


class TerminationReason(Enum):
    ONGOING = "ongoing"
    ELIMINATION = "elimination"
    REPETITION = "repetition"
    NO_LEGAL_MOVES = "no_legal_moves"
    DOUBLE_PASS = "double_pass"
    MAX_PLY = "max_ply"


@dataclass(frozen=True)
class Outcome:
    terminal: bool
    winner: Player = Player.NONE
    reason: TerminationReason = TerminationReason.ONGOING

    @property
    def score(self) -> float:
        return score_for_winner(self.winner)


ONGOING = Outcome(terminal=False)


def score_for_winner(winner: Player) -> float:
    if winner == Player.FIRST:
        return 1.0
    if winner == Player.SECOND:
        return -1.0
    return 0.0


def capture_counts(state: GameState) -> Dict[Player, int]:
    """Pieces each side has taken, inferred from the opponent's losses."""
    starting = state.config.starting_pieces
    return {
        Player.FIRST: starting - state.piece_count(Player.SECOND),
        Player.SECOND: starting - state.piece_count(Player.FIRST),
    }


def capture_leader(state: GameState) -> Player:
    counts = capture_counts(state)
    if counts[Player.FIRST] > counts[Player.SECOND]:
        return Player.FIRST
    if counts[Player.SECOND] > counts[Player.FIRST]:
        return Player.SECOND
    return Player.NONE


def evaluate_outcome(state: GameState) -> Outcome:
    """Decide whether the game is over and who won.

    Rules are checked in order and the first match wins: elimination,
    repetition, no legal move (immediate loss or a second consecutive
    pass, depending on the ruleset) and finally the optional ply cap.
    Repetition, double pass and the ply cap are settled by capture count.
    """
    first_pieces = state.piece_count(Player.FIRST)
    second_pieces = state.piece_count(Player.SECOND)
    if first_pieces == 0 and second_pieces == 0:
        return Outcome(True, Player.NONE, TerminationReason.ELIMINATION)
    if second_pieces == 0:
        return Outcome(True, Player.FIRST, TerminationReason.ELIMINATION)
    if first_pieces == 0:
        return Outcome(True, Player.SECOND, TerminationReason.ELIMINATION)

    config = state.config
    if state.repetitions.count(state.key()) >= config.repetition_limit:
        return Outcome(True, capture_leader(state), TerminationReason.REPETITION)

    if config.supports_pass:
        if state.consecutive_passes >= 2:
            return Outcome(True, capture_leader(state), TerminationReason.DOUBLE_PASS)
    elif not generate_moves(state.board, state.current_player):
        return Outcome(True, state.current_player.opponent, TerminationReason.NO_LEGAL_MOVES)

    if config.max_ply is not None and state.ply_count >= config.max_ply:
        return Outcome(True, capture_leader(state), TerminationReason.MAX_PLY)
    return ONGOING
