import numpy as np
import pytest

from addikul.core import (
    Action,
    GameState,
    IllegalActionError,
    NoMovePolicy,
    Player,
    RulesConfig,
    apply_action,
    coordinate_to_index,
    directions_for,
    encode_action,
    enumerate_legal_actions,
    initialize_game_state,
    is_legal_action,
    validate_action,
)


def empty_state(config: RulesConfig = RulesConfig(), player: Player = Player.FIRST) -> GameState:
    state = initialize_game_state(config)
    state.board[:, :] = Player.NONE
    state.current_player = player
    state.repetitions.clear()
    state.repetitions.record(state.key())
    return state


def cell(name: str) -> int:
    return coordinate_to_index(name, 7)


def move(origin: str, destination: str, player=None) -> Action:
    return Action(encode_action(cell(origin), cell(destination), 7), player)


def place(state: GameState, name: str, player: Player) -> None:
    state.board.flat[cell(name)] = player


def legal_ids(state: GameState) -> set:
    return {action.action_id for action in enumerate_legal_actions(state)}


def test_directions_are_mirrored_between_players() -> None:
    first = directions_for(Player.FIRST)
    second = directions_for(Player.SECOND)
    assert len(first) == 5
    assert first[0] == (1, 0)
    assert second[0] == (-1, 0)
    assert {(-dr, dc) for dr, dc in first} == set(second)


def test_initial_position_only_steps_into_middle_row() -> None:
    state = initialize_game_state()
    legal = enumerate_legal_actions(state)

    # 7 forward + 6 forward-left + 6 forward-right, all from row 3 into row 4
    assert len(legal) == 19
    for action in legal:
        origin, destination = divmod(action.action_id, 49)
        assert origin // 7 == 2
        assert destination // 7 == 3
        assert abs(destination % 7 - origin % 7) <= 1
        assert action.player == Player.FIRST


def test_jump_over_opponent_captures() -> None:
    state = empty_state()
    place(state, "d3", Player.FIRST)
    place(state, "d4", Player.SECOND)
    place(state, "a7", Player.SECOND)

    jump = move("d3", "d5")
    assert jump.action_id in legal_ids(state)
    assert is_legal_action(state, jump)

    next_state = apply_action(state, jump)
    assert next_state.cell(cell("d3")) == Player.NONE
    assert next_state.cell(cell("d4")) == Player.NONE
    assert next_state.cell(cell("d5")) == Player.FIRST
    assert next_state.piece_count(Player.SECOND) == 1
    assert next_state.current_player == Player.SECOND
    # the source state is untouched unless in_place is requested
    assert state.cell(cell("d4")) == Player.SECOND


@pytest.mark.parametrize("middle", [Player.NONE, Player.FIRST])
def test_jump_without_opponent_in_between_is_illegal(middle: Player) -> None:
    state = empty_state()
    place(state, "d3", Player.FIRST)
    place(state, "a7", Player.SECOND)
    if middle != Player.NONE:
        place(state, "d4", middle)

    jump = move("d3", "d5")
    assert not is_legal_action(state, jump)
    assert jump.action_id not in legal_ids(state)


def test_diagonal_and_lateral_jumps() -> None:
    state = empty_state()
    place(state, "d3", Player.FIRST)
    place(state, "e4", Player.SECOND)
    place(state, "c3", Player.SECOND)

    legal = enumerate_legal_actions(state)
    assert move("d3", "f5", Player.FIRST) in legal
    assert move("d3", "b3", Player.FIRST) in legal
    assert move("d3", "d5", Player.FIRST) not in legal

    next_state = apply_action(state, move("d3", "b3"))
    assert next_state.cell(cell("c3")) == Player.NONE
    assert next_state.cell(cell("b3")) == Player.FIRST


def test_backward_moves_are_illegal() -> None:
    state = empty_state()
    place(state, "d4", Player.FIRST)
    place(state, "d5", Player.SECOND)
    place(state, "d2", Player.SECOND)

    assert not is_legal_action(state, move("d4", "d3"))
    assert not is_legal_action(state, move("d4", "c3"))
    # capture backwards over d3 is not allowed either
    place(state, "d3", Player.SECOND)
    assert not is_legal_action(state, move("d4", "d2"))


def test_action_for_wrong_player_is_rejected() -> None:
    state = initialize_game_state()
    assert is_legal_action(state, move("c3", "c4"))
    assert is_legal_action(state, move("c3", "c4", Player.FIRST))
    assert not is_legal_action(state, move("c3", "c4", Player.SECOND))
    assert not is_legal_action(state, move("c3", "c4", Player.INVALID))


def test_out_of_range_ids_are_rejected() -> None:
    state = initialize_game_state()
    assert not is_legal_action(state, Action(-1))
    assert not is_legal_action(state, Action(49 * 49 + 1))
    assert not is_legal_action(state, Action(10**9))


def test_second_player_move_from_rotated_view_is_canonicalised() -> None:
    state = apply_action(initialize_game_state(), move("c3", "c4"))
    assert state.current_player == Player.SECOND

    # d3->d4 is d5->d4 seen from the second player's side of the board
    mirrored = move("d3", "d4")
    canonical = validate_action(state, mirrored)
    assert canonical == move("d5", "d4", Player.SECOND)

    next_state = apply_action(state, mirrored)
    assert next_state.cell(cell("d5")) == Player.NONE
    assert next_state.cell(cell("d4")) == Player.SECOND
    assert next_state.history[-1] == canonical


def test_first_player_gets_no_rotated_retry() -> None:
    state = initialize_game_state()
    # e5->e4 is c3->c4 rotated by 180 degrees
    assert not is_legal_action(state, move("e5", "e4"))


def test_generator_and_validator_agree_on_random_playouts() -> None:
    rng = np.random.default_rng(7)
    state = initialize_game_state()
    for _ in range(24):
        legal = enumerate_legal_actions(state)
        ids = {action.action_id for action in legal}
        for action in legal:
            assert is_legal_action(state, action)
        for action_id in range(state.config.policy_size):
            canonical = validate_action(state, Action(action_id))
            if canonical is not None:
                assert canonical.action_id in ids
        state = apply_action(state, legal[int(rng.integers(len(legal)))])


def test_apply_illegal_action_raises_and_keeps_state() -> None:
    state = initialize_game_state()
    board_before = state.board.copy()

    with pytest.raises(IllegalActionError):
        apply_action(state, move("c3", "c5"), in_place=True)

    np.testing.assert_array_equal(state.board, board_before)
    assert state.current_player == Player.FIRST
    assert state.history == []


def stuck_first_player_state(config: RulesConfig) -> GameState:
    state = empty_state(config)
    place(state, "a7", Player.FIRST)
    place(state, "b7", Player.SECOND)
    place(state, "c7", Player.SECOND)
    return state


def test_pass_is_the_only_action_without_moves() -> None:
    state = stuck_first_player_state(RulesConfig())
    pass_action = Action(RulesConfig().pass_action_id)

    assert enumerate_legal_actions(state) == [Action(pass_action.action_id, Player.FIRST)]
    assert is_legal_action(state, pass_action)

    next_state = apply_action(state, pass_action)
    assert next_state.current_player == Player.SECOND
    assert next_state.consecutive_passes == 1
    np.testing.assert_array_equal(next_state.board, state.board)

    # pass is illegal whenever a move exists
    assert not is_legal_action(initialize_game_state(), pass_action)


def test_loss_policy_has_no_pass_action() -> None:
    config = RulesConfig(no_move_policy=NoMovePolicy.LOSS)
    state = stuck_first_player_state(config)

    assert config.pass_action_id is None
    assert config.policy_size == 49 * 49
    assert enumerate_legal_actions(state) == []
    assert not is_legal_action(state, Action(49 * 49))


def test_smaller_board_layout() -> None:
    config = RulesConfig(board_size=5, home_rows=2)
    state = initialize_game_state(config)
    assert state.board.shape == (5, 5)
    assert state.piece_count(Player.FIRST) == 10
    assert state.piece_count(Player.SECOND) == 10
    assert np.all(state.board[2] == Player.NONE)
    assert len(enumerate_legal_actions(state)) == 5 + 4 + 4


def test_rules_config_rejects_board_without_empty_row() -> None:
    with pytest.raises(ValueError):
        RulesConfig(board_size=6, home_rows=3)
