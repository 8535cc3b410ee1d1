from __future__ import annotations

from functools import lru_cache
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .notation import encode_action
from .state import Action, GameState, Player, RulesConfig

Direction = Tuple[int, int]


class IllegalActionError(ValueError):
    pass


class Move(NamedTuple):
    origin: int
    destination: int
    captured: Optional[int] = None

    @property
    def is_jump(self) -> bool:
        return self.captured is not None


@lru_cache(maxsize=None)
def directions_for(player: Player) -> Tuple[Direction, ...]:
    """(row, col) unit vectors a piece of ``player`` may move along.

    Order: forward, forward-left, forward-right, lateral-left, lateral-right.
    Steps use one vector, capturing jumps exactly two of the same vector.
    """
    if player not in (Player.FIRST, Player.SECOND):
        raise ValueError(f"No move directions for {player!r}.")
    forward = player.forward
    return ((forward, 0), (forward, -1), (forward, 1), (0, -1), (0, 1))


def rotate_index_180(index: int, board_size: int) -> int:
    return board_size * board_size - 1 - index


def initialize_game_state(config: Optional[RulesConfig] = None) -> GameState:
    config = config or RulesConfig()
    n = config.board_size
    board = np.zeros((n, n), dtype=np.int8)
    board[: config.home_rows, :] = Player.FIRST
    board[n - config.home_rows :, :] = Player.SECOND

    state = GameState(board=board, current_player=Player.FIRST, config=config)
    state.repetitions.record(state.key())
    return state


def enumerate_legal_actions(state: GameState, player: Optional[Player] = None) -> List[Action]:
    if player is None:
        player = state.current_player
    legal = [
        Action(encode_action(move.origin, move.destination, state.board_size), player)
        for move in generate_moves(state.board, player)
    ]
    if not legal and state.config.supports_pass:
        legal.append(Action(state.config.pass_action_id, player))
    return legal


def generate_moves(board: np.ndarray, player: Player) -> List[Move]:
    n = board.shape[0]
    opponent = player.opponent
    moves: List[Move] = []
    for origin in np.flatnonzero(board.reshape(-1) == int(player)):
        row, col = divmod(int(origin), n)
        for dr, dc in directions_for(player):
            step_row, step_col = row + dr, col + dc
            if not _in_bounds(step_row, step_col, n):
                continue
            if board[step_row, step_col] == Player.NONE:
                moves.append(Move(int(origin), step_row * n + step_col))

            jump_row, jump_col = row + 2 * dr, col + 2 * dc
            if not _in_bounds(jump_row, jump_col, n):
                continue
            if board[step_row, step_col] == opponent and board[jump_row, jump_col] == Player.NONE:
                moves.append(Move(int(origin), jump_row * n + jump_col, step_row * n + step_col))
    return moves


def validate_action(state: GameState, action: Action) -> Optional[Action]:
    """Return the action to apply in board coordinates, or None if illegal."""
    resolved = _resolve(state, action)
    return None if resolved is None else resolved[0]


def is_legal_action(state: GameState, action: Action) -> bool:
    return _resolve(state, action) is not None


def apply_action(state: GameState, action: Action, *, in_place: bool = False) -> GameState:
    target = state if in_place else state.copy()
    resolved = _resolve(target, action)
    if resolved is None:
        raise IllegalActionError(f"Illegal action {action.action_id} for {target.current_player.name}.")
    canonical, move = resolved

    mover = target.current_player
    if move is None:
        target.consecutive_passes += 1
    else:
        target.consecutive_passes = 0
        target.board.flat[move.origin] = Player.NONE
        if move.captured is not None:
            target.board.flat[move.captured] = Player.NONE
        target.board.flat[move.destination] = mover

    target.history.append(canonical)
    target.current_player = mover.opponent
    target.repetitions.record(target.key())
    return target


def _resolve(state: GameState, action: Action) -> Optional[Tuple[Action, Optional[Move]]]:
    mover = state.current_player
    if action.player is not None and action.player != mover:
        return None

    config = state.config
    if config.supports_pass and action.action_id == config.pass_action_id:
        if generate_moves(state.board, mover):
            return None
        return Action(action.action_id, mover), None

    if not 0 <= action.action_id < config.move_action_count:
        return None

    n = config.board_size
    origin, destination = divmod(action.action_id, config.board_area)
    move = _match_move(state.board, mover, origin, destination)
    if move is not None:
        return Action(action.action_id, mover), move

    # Second-player callers may encode moves from their own side of the board.
    if mover == Player.SECOND:
        origin, destination = rotate_index_180(origin, n), rotate_index_180(destination, n)
        move = _match_move(state.board, mover, origin, destination)
        if move is not None:
            return Action(encode_action(origin, destination, n), mover), move
    return None


def _match_move(board: np.ndarray, player: Player, origin: int, destination: int) -> Optional[Move]:
    if origin == destination:
        return None
    if board.flat[origin] != player or board.flat[destination] != Player.NONE:
        return None

    n = board.shape[0]
    from_row, from_col = divmod(origin, n)
    to_row, to_col = divmod(destination, n)
    delta = (to_row - from_row, to_col - from_col)
    for dr, dc in directions_for(player):
        if delta == (dr, dc):
            return Move(origin, destination)
        if delta == (2 * dr, 2 * dc):
            over = (from_row + dr) * n + (from_col + dc)
            if board.flat[over] == player.opponent:
                return Move(origin, destination, over)
            return None
    return None


def _in_bounds(row: int, col: int, board_size: int) -> bool:
    return 0 <= row < board_size and 0 <= col < board_size
