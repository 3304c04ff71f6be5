"""Tests for tick results and status transitions."""

import pytest

from sheet_games.state import (
    GameEvent,
    InvalidTransitionError,
    LifeStatus,
    Outcome,
    SnakeStatus,
    TetrosStatus,
    TickResult,
    transition,
)


class TestTickResult:
    def test_no_change(self):
        result = TickResult.no_change()
        assert result.outcome is Outcome.NO_CHANGE
        assert not result.changed
        assert not result.ended

    def test_updated(self):
        result = TickResult.updated()
        assert result.changed
        assert not result.ended

    def test_terminal_results_carry_messages(self):
        assert TickResult.game_over().message == "Game Over!"
        assert TickResult.win().message == "You win!"
        assert TickResult.game_over().ended
        assert TickResult.win().changed

    def test_to_dict(self):
        assert TickResult.win().to_dict() == {
            "outcome": "win", "message": "You win!",
        }


class TestLifeTransitions:
    def test_start_and_stop_toggle(self):
        assert transition(LifeStatus.STOPPED, GameEvent.START) is LifeStatus.RUNNING
        assert transition(LifeStatus.RUNNING, GameEvent.STOP) is LifeStatus.STOPPED

    def test_idempotent(self):
        assert transition(LifeStatus.RUNNING, GameEvent.START) is LifeStatus.RUNNING
        assert transition(LifeStatus.STOPPED, GameEvent.STOP) is LifeStatus.STOPPED


class TestSnakeTransitions:
    def test_terminal_states_only_from_running(self):
        assert transition(SnakeStatus.RUNNING, GameEvent.COLLIDE) is SnakeStatus.GAME_OVER
        assert transition(SnakeStatus.RUNNING, GameEvent.FILL) is SnakeStatus.WIN
        with pytest.raises(InvalidTransitionError):
            transition(SnakeStatus.NOT_STARTED, GameEvent.COLLIDE)
        with pytest.raises(InvalidTransitionError):
            transition(SnakeStatus.GAME_OVER, GameEvent.FILL)

    def test_restart_after_game_over(self):
        assert transition(SnakeStatus.GAME_OVER, GameEvent.START) is SnakeStatus.RUNNING
        assert transition(SnakeStatus.WIN, GameEvent.START) is SnakeStatus.RUNNING


class TestTetrosTransitions:
    def test_land_then_spawn(self):
        landed = transition(TetrosStatus.FALLING, GameEvent.LAND)
        assert landed is TetrosStatus.LANDED
        assert transition(landed, GameEvent.SPAWN) is TetrosStatus.FALLING
        assert transition(landed, GameEvent.BLOCK) is TetrosStatus.GAME_OVER

    def test_start_passes_through_landed(self):
        assert transition(TetrosStatus.NOT_STARTED, GameEvent.START) is TetrosStatus.LANDED

    def test_cannot_land_before_start(self):
        with pytest.raises(InvalidTransitionError, match="land"):
            transition(TetrosStatus.NOT_STARTED, GameEvent.LAND)

    def test_error_is_runtime_error(self):
        assert issubclass(InvalidTransitionError, RuntimeError)
