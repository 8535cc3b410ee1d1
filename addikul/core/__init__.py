"""Core game logic for AddiKul."""

from .state import (
    INVALID_ACTION_ID,
    Action,
    ActionEncoding,
    GameState,
    NoMovePolicy,
    Player,
    RulesConfig,
)
from .repetition import RepetitionTable, state_key
from .notation import (
    PASS_TOKEN,
    action_to_string,
    coordinate_to_index,
    decode_action,
    encode_action,
    index_to_coordinate,
    parse_action,
    player_from_token,
    player_to_token,
)
from .rules import (
    IllegalActionError,
    Move,
    apply_action,
    directions_for,
    enumerate_legal_actions,
    generate_moves,
    initialize_game_state,
    is_legal_action,
    rotate_index_180,
    validate_action,
)
from .outcome import (
    Outcome,
    TerminationReason,
    capture_counts,
    capture_leader,
    evaluate_outcome,
    score_for_winner,
)

__all__ = [
    "INVALID_ACTION_ID",
    "PASS_TOKEN",
    "Action",
    "ActionEncoding",
    "GameState",
    "IllegalActionError",
    "Move",
    "NoMovePolicy",
    "Outcome",
    "Player",
    "RepetitionTable",
    "RulesConfig",
    "TerminationReason",
    "action_to_string",
    "apply_action",
    "capture_counts",
    "capture_leader",
    "coordinate_to_index",
    "decode_action",
    "directions_for",
    "encode_action",
    "enumerate_legal_actions",
    "evaluate_outcome",
    "generate_moves",
    "index_to_coordinate",
    "initialize_game_state",
    "is_legal_action",
    "parse_action",
    "player_from_token",
    "player_to_token",
    "rotate_index_180",
    "score_for_winner",
    "state_key",
    "validate_action",
]
