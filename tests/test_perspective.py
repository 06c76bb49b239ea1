from tdgammon.core import BAR, NUM_PIPS, Dice, GameResult, Hypergammon, PerspectiveState, Position


def finished_position() -> Position:
    # The side to move has lost a gammon.
    pips = [0] * NUM_PIPS
    pips[10] = 3
    return Position(tuple(pips), x_off=0, o_off=3)


def test_new_starts_with_first_player():
    state = PerspectiveState.new(Hypergammon)
    assert state.turn
    assert state.resolved_state() == state.state
    assert state.NUM_CHECKERS == 3
    assert not state.game_state().is_over


def test_successors_switch_turn():
    state = PerspectiveState.new(Hypergammon)
    successors = state.possible_positions(Dice(4, 2))
    assert successors
    assert all(not succ.turn for succ in successors)
    assert all(succ.turn for succ in successors[0].possible_positions(Dice(3, 1)))


def test_resolved_game_state_is_from_first_player():
    raw = Hypergammon(finished_position())

    first_to_move = PerspectiveState(raw, True)
    assert first_to_move.raw_game_state().result == GameResult.LOSE_GAMMON
    assert first_to_move.resolved_game_state().result == GameResult.LOSE_GAMMON

    second_to_move = PerspectiveState(raw, False)
    assert second_to_move.raw_game_state().result == GameResult.LOSE_GAMMON
    assert second_to_move.resolved_game_state().result == GameResult.WIN_GAMMON
    assert second_to_move.resolved_state() == raw.flip()


def test_flip_switches_turn_and_board():
    state = PerspectiveState(Hypergammon(finished_position()), True)
    flipped = state.flip()
    assert not flipped.turn
    assert flipped.state == state.state.flip()
    assert flipped.position().pips[BAR - 10] == -3
    assert flipped.dbhash() == state.state.flip().dbhash()
