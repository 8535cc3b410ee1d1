from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum
from typing import Any, List, Mapping, Optional

import numpy as np
from numpy.typing import NDArray

from .repetition import RepetitionTable, state_key

BoardArray = NDArray[np.int8]

INVALID_ACTION_ID = -1


class Player(IntEnum):
    NONE = 0
    FIRST = 1
    SECOND = 2
    INVALID = 3

    @property
    def opponent(self) -> "Player":
        if self == Player.FIRST:
            return Player.SECOND
        if self == Player.SECOND:
            return Player.FIRST
        return self

    @property
    def forward(self) -> int:
        """Row delta pointing away from this player's home edge."""
        return 1 if self == Player.FIRST else -1


class NoMovePolicy(Enum):
    LOSS = "loss"
    FORCED_PASS = "forced_pass"


class ActionEncoding(Enum):
    JOINT = "joint"
    SPLIT = "split"


@dataclass(frozen=True)
class RulesConfig:
    board_size: int = 7
    home_rows: int = 3
    no_move_policy: NoMovePolicy = NoMovePolicy.FORCED_PASS
    repetition_limit: int = 3
    max_ply: Optional[int] = 512
    action_encoding: ActionEncoding = ActionEncoding.JOINT

    def __post_init__(self) -> None:
        if self.board_size < 3:
            raise ValueError(f"board_size must be at least 3, got {self.board_size}")
        if self.home_rows < 1 or 2 * self.home_rows >= self.board_size:
            raise ValueError(
                f"home_rows={self.home_rows} leaves no empty row on a {self.board_size}x{self.board_size} board"
            )
        if self.repetition_limit < 2:
            raise ValueError("repetition_limit must be at least 2")
        if self.max_ply is not None and self.max_ply <= 0:
            raise ValueError("max_ply must be positive or None")

    @property
    def board_area(self) -> int:
        return self.board_size * self.board_size

    @property
    def starting_pieces(self) -> int:
        return self.home_rows * self.board_size

    @property
    def supports_pass(self) -> bool:
        return self.no_move_policy == NoMovePolicy.FORCED_PASS

    @property
    def move_action_count(self) -> int:
        return self.board_area * self.board_area

    @property
    def pass_action_id(self) -> Optional[int]:
        return self.move_action_count if self.supports_pass else None

    @property
    def policy_size(self) -> int:
        return self.move_action_count + (1 if self.supports_pass else 0)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RulesConfig":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown rules config keys: {sorted(unknown)}")
        for name in _INT_FIELDS:
            if name in data and not (name == "max_ply" and data[name] is None):
                data[name] = _int_from_value(name, data[name])
        if "no_move_policy" in data and not isinstance(data["no_move_policy"], NoMovePolicy):
            data["no_move_policy"] = _enum_from_value(NoMovePolicy, data["no_move_policy"])
        if "action_encoding" in data and not isinstance(data["action_encoding"], ActionEncoding):
            data["action_encoding"] = _enum_from_value(ActionEncoding, data["action_encoding"])
        return cls(**data)


_INT_FIELDS = ("board_size", "home_rows", "repetition_limit", "max_ply")


def _int_from_value(name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if isinstance(raw, float) and value != raw:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    return value


def _enum_from_value(enum_cls, raw: Any):
    text = str(raw)
    for member in enum_cls:
        if text.lower() in (member.value, member.name.lower()):
            return member
    raise ValueError(f"Invalid {enum_cls.__name__}: {raw!r}")


@dataclass(frozen=True)
class Action:
    """A move identified by ``origin * area + destination``.

    ``player`` may be left unset, in which case the side to move is assumed
    when the action is validated.
    """

    action_id: int
    player: Optional[Player] = None

    def origin(self, board_area: int) -> int:
        return self.action_id // board_area

    def destination(self, board_area: int) -> int:
        return self.action_id % board_area

    def with_player(self, player: Player) -> "Action":
        return Action(self.action_id, player)


@dataclass
class GameState:
    board: BoardArray  # shape (N, N), dtype=np.int8, values Player.NONE/FIRST/SECOND
    current_player: Player
    config: RulesConfig
    history: List[Action] = field(default_factory=list)
    repetitions: RepetitionTable = field(default_factory=RepetitionTable)
    consecutive_passes: int = 0

    def copy(self) -> "GameState":
        return GameState(
            board=self.board.copy(),
            current_player=self.current_player,
            config=self.config,
            history=list(self.history),
            repetitions=self.repetitions.copy(),
            consecutive_passes=self.consecutive_passes,
        )

    @property
    def board_size(self) -> int:
        return self.config.board_size

    @property
    def ply_count(self) -> int:
        return len(self.history)

    def cell(self, index: int) -> Player:
        row, col = divmod(index, self.board_size)
        return Player(int(self.board[row, col]))

    def piece_count(self, player: Player) -> int:
        return int(np.count_nonzero(self.board == int(player)))

    def key(self) -> bytes:
        return state_key(self.board, self.current_player)

    def __repr__(self) -> str:
        board_str = "\n".join(" ".join(str(int(cell)) for cell in row) for row in self.board[::-1])
        return (
            f"GameState(current={self.current_player.name}, ply={self.ply_count})\n"
            f"{board_str}"
        )
