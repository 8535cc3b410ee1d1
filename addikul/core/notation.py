from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple, Union

from .state import INVALID_ACTION_ID, Action, Player, RulesConfig

PASS_TOKEN = "pass"

_PLAYER_TOKENS = {"b": Player.FIRST, "w": Player.SECOND}
_PACKED_RE = re.compile(r"(?:[A-Za-z]+\d+)+")
_COORD_RE = re.compile(r"[A-Za-z]+\d+")
_SINGLE_COORD_RE = re.compile(r"([A-Z])(\d+)")


def column_letter(col: int) -> str:
    letter = chr(ord("A") + col)
    if letter >= "I":
        letter = chr(ord(letter) + 1)
    return letter


def index_to_coordinate(index: int, board_size: int) -> str:
    if not 0 <= index < board_size * board_size:
        raise ValueError(f"Cell index {index} out of range.")
    row, col = divmod(index, board_size)
    return f"{column_letter(col)}{row + 1}"


def coordinate_to_index(text: str, board_size: int) -> int:
    """Return the cell index for a coordinate such as ``c4``, or -1."""
    match = _SINGLE_COORD_RE.fullmatch(text.strip().upper())
    if match is None:
        return -1
    letter, digits = match.groups()
    if letter == "I":
        return -1
    col = ord(letter) - ord("A")
    if letter > "I":
        col -= 1
    row = int(digits) - 1
    if not (0 <= col < board_size and 0 <= row < board_size):
        return -1
    return row * board_size + col


def encode_action(origin: int, destination: int, board_size: int) -> int:
    area = board_size * board_size
    if not (0 <= origin < area and 0 <= destination < area):
        raise ValueError(f"Cells ({origin}, {destination}) out of range for board size {board_size}.")
    return origin * area + destination


def decode_action(action_id: int, board_size: int) -> Tuple[int, int]:
    area = board_size * board_size
    if not 0 <= action_id < area * area:
        raise ValueError(f"Action id {action_id} out of range.")
    return divmod(action_id, area)


def player_from_token(token: str) -> Player:
    return _PLAYER_TOKENS.get(token.lower(), Player.INVALID)


def player_to_token(player: Player) -> str:
    for token, value in _PLAYER_TOKENS.items():
        if value == player:
            return token.upper()
    raise ValueError(f"Player {player!r} has no token.")


def parse_action(tokens: Union[str, Sequence[str]], config: RulesConfig) -> Action:
    """Parse ``[player] origin destination`` style move text.

    Accepted shapes are ``["b", "c3", "c4"]``, ``["b", "c3c4"]`` and
    ``["c3", "c4"]``/``["c3c4"]``; a missing player token leaves the
    acting player unset. Anything that does not yield exactly two board
    coordinates becomes an action carrying ``INVALID_ACTION_ID``.
    """
    args: List[str] = tokens.split() if isinstance(tokens, str) else [str(t) for t in tokens]
    player: Optional[Player] = None
    if args and len(args[0]) == 1 and args[0].isalpha():
        player = player_from_token(args[0])
        args = args[1:]

    if len(args) == 1 and args[0].lower() == PASS_TOKEN:
        pass_id = config.pass_action_id
        return Action(INVALID_ACTION_ID if pass_id is None else pass_id, player)

    coordinates: List[str] = []
    for arg in args:
        if not _PACKED_RE.fullmatch(arg):
            return Action(INVALID_ACTION_ID, player)
        coordinates.extend(_COORD_RE.findall(arg))
    if len(coordinates) != 2:
        return Action(INVALID_ACTION_ID, player)

    origin = coordinate_to_index(coordinates[0], config.board_size)
    destination = coordinate_to_index(coordinates[1], config.board_size)
    if origin < 0 or destination < 0:
        return Action(INVALID_ACTION_ID, player)
    return Action(encode_action(origin, destination, config.board_size), player)


def action_to_string(action_id: int, config: RulesConfig) -> str:
    if not 0 <= action_id < config.move_action_count:
        return PASS_TOKEN
    origin, destination = decode_action(action_id, config.board_size)
    text = index_to_coordinate(origin, config.board_size) + index_to_coordinate(destination, config.board_size)
    return text.lower()
