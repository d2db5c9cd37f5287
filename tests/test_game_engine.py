"""Tests for the turn engine.

Tests cover:
1. Game construction and configuration errors
2. Move application (single, double, pass) and ticket bookkeeping
3. Spectator event order, including the visibility of Mr X's moves
4. Rotation flow, game over and contract violations
5. Integration tests for complete games
"""

import pytest

from core.board import BoardGraph
from core.constants import Colour, Ticket, Transport, HIDDEN_LOCATION
from core.moves import DoubleMove, PassMove, TicketMove
from core.player import PlayerConfiguration
from data.loader import load_default_board, load_default_game_config
from engine.agents import Agent, DeferredAgent, FirstMoveAgent, RandomAgent
from engine.game_engine import GameEngine, InvalidMoveError
from engine.setup import GameConfigError
from engine.spectators import RecordingSpectator, Spectator
from engine.turn_machine import TurnPhase
from engine.win_conditions import Winner


def tickets(taxi=0, bus=0, underground=0, double=0, secret=0) -> dict[Ticket, int]:
    return {
        Ticket.TAXI: taxi,
        Ticket.BUS: bus,
        Ticket.UNDERGROUND: underground,
        Ticket.DOUBLE: double,
        Ticket.SECRET: secret,
    }


class ScriptedAgent(Agent):
    """Plays the given moves in order."""

    def __init__(self, *moves):
        self.moves = list(moves)
        self.offered = []

    def make_move(self, view, location, moves, callback):
        self.offered.append(moves)
        callback(self.moves.pop(0))


class CallbackKeeper(Agent):
    """Keeps every callback without answering."""

    def __init__(self):
        self.callbacks = []
        self.moves = frozenset()

    def make_move(self, view, location, moves, callback):
        self.moves = moves
        self.callbacks.append(callback)


class LocationSpy(Spectator):
    """Records Mr X's public location at every move event."""

    def __init__(self):
        self.locations = []

    def on_move_made(self, view, move):
        self.locations.append(view.get_player_location(Colour.BLACK))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def line_board() -> BoardGraph:
    """
    1 -taxi- 2 -taxi- 3 -taxi- 4 -taxi- 5 -taxi- 6
             2 -bus-- 4
    """
    return BoardGraph.from_edges([
        (1, 2, Transport.TAXI),
        (2, 3, Transport.TAXI),
        (3, 4, Transport.TAXI),
        (4, 5, Transport.TAXI),
        (5, 6, Transport.TAXI),
        (2, 4, Transport.BUS),
    ])


@pytest.fixture
def deferred_game(line_board):
    """Three players answering through DeferredAgents; hidden, revealed, hidden."""
    agents = {colour: DeferredAgent() for colour in (Colour.BLACK, Colour.BLUE, Colour.RED)}
    engine = GameEngine(
        (False, True, False, False),
        line_board,
        PlayerConfiguration(Colour.BLACK, 3, tickets(taxi=4, bus=2, double=1, secret=1), agents[Colour.BLACK]),
        PlayerConfiguration(Colour.BLUE, 1, tickets(taxi=3, bus=1), agents[Colour.BLUE]),
        PlayerConfiguration(Colour.RED, 6, tickets(taxi=3), agents[Colour.RED]),
    )
    recorder = RecordingSpectator()
    engine.register_spectator(recorder)
    return engine, agents, recorder


# =============================================================================
# Construction Tests
# =============================================================================


class TestGameEngineConstruction:
    """Test game construction."""

    def test_initial_state(self, deferred_game):
        engine, _, _ = deferred_game

        assert engine.get_current_round() == 0
        assert engine.get_current_player() is Colour.BLACK
        assert engine.get_players() == (Colour.BLACK, Colour.BLUE, Colour.RED)
        assert engine.get_player_location(Colour.BLACK) == HIDDEN_LOCATION
        assert engine.get_player_location(Colour.BLUE) == 1
        assert not engine.is_game_over()
        assert not engine.is_round_started()
        assert engine.phase is TurnPhase.AWAITING_MOVE

    def test_empty_rounds_rejected(self, line_board):
        with pytest.raises(GameConfigError) as exc_info:
            GameEngine(
                (),
                line_board,
                PlayerConfiguration(Colour.BLACK, 1, tickets(taxi=1)),
                PlayerConfiguration(Colour.BLUE, 2, tickets(taxi=1)),
            )
        assert "Empty rounds" in exc_info.value.errors

    def test_duplicate_location_rejected(self, line_board):
        with pytest.raises(GameConfigError):
            GameEngine(
                (True,),
                line_board,
                PlayerConfiguration(Colour.BLACK, 1, tickets(taxi=1)),
                PlayerConfiguration(Colour.BLUE, 1, tickets(taxi=1)),
            )

    def test_detective_with_secret_rejected(self, line_board):
        with pytest.raises(ValueError):
            GameEngine(
                (True,),
                line_board,
                PlayerConfiguration(Colour.BLACK, 1, tickets(taxi=1)),
                PlayerConfiguration(Colour.BLUE, 2, tickets(secret=1)),
            )


# =============================================================================
# Move Application Tests
# =============================================================================


class TestMoveApplication:
    """Test state changes for each move variant."""

    def test_agent_receives_current_location_and_legal_moves(self, deferred_game):
        engine, agents, _ = deferred_game
        engine.start_rotate()

        mrx_agent = agents[Colour.BLACK]
        assert mrx_agent.is_waiting
        assert mrx_agent.location == 3
        assert mrx_agent.moves == engine.get_valid_moves()
        assert TicketMove(Colour.BLACK, Ticket.TAXI, 2) in mrx_agent.moves

    def test_mrx_single_move(self, deferred_game):
        engine, agents, _ = deferred_game
        engine.start_rotate()
        agents[Colour.BLACK].submit(TicketMove(Colour.BLACK, Ticket.TAXI, 4))

        state = engine.state
        assert state.mrx.location == 4
        assert state.mrx.tickets[Ticket.TAXI] == 3
        assert state.current_round == 1
        assert engine.get_current_player() is Colour.BLUE
        # Round 0 is hidden
        assert engine.get_player_location(Colour.BLACK) == HIDDEN_LOCATION

    def test_detective_ticket_goes_to_mrx(self, deferred_game):
        engine, agents, _ = deferred_game
        engine.start_rotate()
        agents[Colour.BLACK].submit(TicketMove(Colour.BLACK, Ticket.TAXI, 4))

        before = engine.state
        agents[Colour.BLUE].submit(TicketMove(Colour.BLUE, Ticket.TAXI, 2))
        after = engine.state

        assert after.get_player(Colour.BLUE).location == 2
        assert after.get_player(Colour.BLUE).tickets[Ticket.TAXI] == (
            before.get_player(Colour.BLUE).tickets[Ticket.TAXI] - 1
        )
        assert after.mrx.tickets[Ticket.TAXI] == before.mrx.tickets[Ticket.TAXI] + 1
        total_before = sum(p.total_tickets() for p in before.players)
        total_after = sum(p.total_tickets() for p in after.players)
        assert total_before == total_after
        # Detective moves never advance the round
        assert after.current_round == before.current_round

    def test_double_move(self, deferred_game):
        engine, agents, _ = deferred_game
        engine.start_rotate()
        move = DoubleMove.of(Colour.BLACK, Ticket.TAXI, 4, Ticket.BUS, 2)
        agents[Colour.BLACK].submit(move)

        state = engine.state
        assert state.mrx.location == 2
        assert state.mrx.tickets[Ticket.DOUBLE] == 0
        assert state.mrx.tickets[Ticket.TAXI] == 3
        assert state.mrx.tickets[Ticket.BUS] == 1
        assert state.current_round == 2
        # Leg two was played in the revealed round
        assert engine.get_player_location(Colour.BLACK) == 2

    def test_pass_changes_nothing(self, line_board):
        engine = GameEngine(
            (False, False),
            line_board,
            PlayerConfiguration(Colour.BLACK, 3, tickets(taxi=2), FirstMoveAgent()),
            PlayerConfiguration(Colour.BLUE, 6, tickets(bus=1), FirstMoveAgent()),
        )
        recorder = RecordingSpectator()
        engine.register_spectator(recorder)
        engine.start_rotate()

        assert PassMove(Colour.BLUE) in recorder.moves()
        assert engine.state.get_player(Colour.BLUE).location == 6


# =============================================================================
# Event Order Tests
# =============================================================================


class TestEventOrder:
    """Test the spectator event sequence."""

    def test_rotation_events(self, deferred_game):
        engine, agents, recorder = deferred_game
        engine.start_rotate()
        agents[Colour.BLACK].submit(TicketMove(Colour.BLACK, Ticket.TAXI, 4))
        agents[Colour.BLUE].submit(TicketMove(Colour.BLUE, Ticket.TAXI, 2))
        agents[Colour.RED].submit(TicketMove(Colour.RED, Ticket.TAXI, 5))

        assert recorder.event_names() == [
            "move_made",
            "round_started",
            "move_made",
            "move_made",
            "rotation_complete",
        ]
        # Hidden round: reported at the last seen location
        assert recorder.moves()[0] == TicketMove(Colour.BLACK, Ticket.TAXI, HIDDEN_LOCATION)
        assert recorder.events[1] == ("round_started", 0)
        assert engine.phase is TurnPhase.AWAITING_MOVE

    def test_double_move_events(self, deferred_game):
        engine, agents, recorder = deferred_game
        engine.start_rotate()
        agents[Colour.BLACK].submit(DoubleMove.of(Colour.BLACK, Ticket.TAXI, 4, Ticket.BUS, 2))

        assert recorder.event_names() == ["move_made", "move_made", "round_started", "move_made"]
        announced, first, _, second = [payload for _, payload in recorder.events]
        assert announced == DoubleMove.of(Colour.BLACK, Ticket.TAXI, HIDDEN_LOCATION, Ticket.BUS, 2)
        assert first == announced.first_move
        assert second == announced.second_move
        assert recorder.events[2] == ("round_started", 0)

    def test_revealed_location_updates_after_reveal_round(self, deferred_game):
        engine, agents, recorder = deferred_game
        spy = LocationSpy()
        engine.register_spectator(spy)

        engine.start_rotate()
        agents[Colour.BLACK].submit(TicketMove(Colour.BLACK, Ticket.TAXI, 4))
        agents[Colour.BLUE].submit(TicketMove(Colour.BLUE, Ticket.TAXI, 2))
        agents[Colour.RED].submit(TicketMove(Colour.RED, Ticket.TAXI, 5))
        engine.start_rotate()
        agents[Colour.BLACK].submit(TicketMove(Colour.BLACK, Ticket.TAXI, 3))

        assert recorder.moves()[-1] == TicketMove(Colour.BLACK, Ticket.TAXI, 3)
        assert recorder.events[-1] == ("round_started", 1)
        assert spy.locations == [HIDDEN_LOCATION, HIDDEN_LOCATION, HIDDEN_LOCATION, 3]


# =============================================================================
# Contract Violation Tests
# =============================================================================


class TestContractViolations:
    """Test runtime programming errors."""

    def test_accept_illegal_move(self, deferred_game):
        engine, _, _ = deferred_game
        engine.start_rotate()
        with pytest.raises(InvalidMoveError):
            engine.accept(TicketMove(Colour.BLACK, Ticket.TAXI, 6))

    def test_accept_none(self, deferred_game):
        engine, _, _ = deferred_game
        engine.start_rotate()
        with pytest.raises(InvalidMoveError):
            engine.accept(None)

    def test_accept_before_any_request(self, deferred_game):
        engine, _, _ = deferred_game
        with pytest.raises(InvalidMoveError):
            engine.accept(TicketMove(Colour.BLACK, Ticket.TAXI, 2))

    def test_callback_is_single_use(self, line_board):
        keeper = CallbackKeeper()
        engine = GameEngine(
            (False, False),
            line_board,
            PlayerConfiguration(Colour.BLACK, 3, tickets(taxi=2), keeper),
            PlayerConfiguration(Colour.BLUE, 6, tickets(taxi=1), FirstMoveAgent()),
        )
        engine.start_rotate()
        move = TicketMove(Colour.BLACK, Ticket.TAXI, 2)
        keeper.callbacks[0](move)

        with pytest.raises(RuntimeError):
            keeper.callbacks[0](move)

    def test_invalid_submission_keeps_callback_usable(self, line_board):
        keeper = CallbackKeeper()
        engine = GameEngine(
            (False, False),
            line_board,
            PlayerConfiguration(Colour.BLACK, 3, tickets(taxi=2), keeper),
            PlayerConfiguration(Colour.BLUE, 6, tickets(taxi=1), FirstMoveAgent()),
        )
        engine.start_rotate()

        with pytest.raises(InvalidMoveError):
            keeper.callbacks[0](TicketMove(Colour.BLACK, Ticket.BUS, 4))
        keeper.callbacks[0](TicketMove(Colour.BLACK, Ticket.TAXI, 2))

        assert engine.get_current_round() == 1

    def test_start_rotate_after_game_over(self, line_board):
        engine = GameEngine(
            (True,),
            line_board,
            PlayerConfiguration(Colour.BLACK, 1, tickets(taxi=1, bus=1), FirstMoveAgent()),
            PlayerConfiguration(Colour.BLUE, 6, tickets(taxi=1), FirstMoveAgent()),
        )
        engine.start_rotate()

        assert engine.is_game_over()
        with pytest.raises(RuntimeError):
            engine.start_rotate()

    def test_start_rotate_without_agent(self, line_board):
        engine = GameEngine(
            (False, False),
            line_board,
            PlayerConfiguration(Colour.BLACK, 3, tickets(taxi=2)),
            PlayerConfiguration(Colour.BLUE, 6, tickets(taxi=1)),
        )
        with pytest.raises(RuntimeError, match="No agent configured for black"):
            engine.start_rotate()

        assert engine.state.get_player(Colour.BLACK).location == 3
        assert engine.get_current_round() == 0

    def test_duplicate_spectator(self, deferred_game):
        engine, _, recorder = deferred_game
        with pytest.raises(ValueError):
            engine.register_spectator(recorder)

    def test_unregister_unknown_spectator(self, deferred_game):
        engine, _, _ = deferred_game
        with pytest.raises(ValueError):
            engine.unregister_spectator(RecordingSpectator())


# =============================================================================
# Game Over Tests
# =============================================================================


class TestGameOver:
    """Test game end detection and reporting."""

    def test_capture_reported_at_rotation_end(self, deferred_game):
        engine, agents, recorder = deferred_game
        engine.start_rotate()
        agents[Colour.BLACK].submit(TicketMove(Colour.BLACK, Ticket.TAXI, 2))
        agents[Colour.BLUE].submit(TicketMove(Colour.BLUE, Ticket.TAXI, 2))

        assert "game_over" not in recorder.event_names()
        assert agents[Colour.RED].is_waiting

        agents[Colour.RED].submit(TicketMove(Colour.RED, Ticket.TAXI, 5))

        assert recorder.events[-1] == ("game_over", frozenset({Colour.BLUE, Colour.RED}))
        assert engine.winner() is Winner.DETECTIVES
        assert engine.phase is TurnPhase.GAME_OVER
        assert engine.get_winning_players() == frozenset({Colour.BLUE, Colour.RED})
        assert engine.view.is_game_over()

    def test_no_winners_while_running(self, deferred_game):
        engine, _, _ = deferred_game
        assert engine.get_winning_players() == frozenset()
        assert engine.winner() is None

    def test_detectives_without_tickets_lose_before_play(self, line_board):
        engine = GameEngine(
            (False, False),
            line_board,
            PlayerConfiguration(Colour.BLACK, 1, tickets(taxi=2), FirstMoveAgent()),
            PlayerConfiguration(Colour.BLUE, 5, tickets(), FirstMoveAgent()),
        )

        assert engine.is_game_over()
        assert engine.winner() is Winner.MRX
        assert engine.get_winning_players() == frozenset({Colour.BLACK})
        with pytest.raises(RuntimeError, match="game is over"):
            engine.start_rotate()


# =============================================================================
# Queries
# =============================================================================


class TestQueries:
    """Test read-only queries."""

    def test_state_is_a_copy(self, deferred_game):
        engine, _, _ = deferred_game
        state = engine.state
        state.mrx.location = 1
        assert engine.state.mrx.location == 3

    def test_summary_hides_mrx(self, deferred_game):
        engine, agents, _ = deferred_game
        engine.start_rotate()
        agents[Colour.BLACK].submit(TicketMove(Colour.BLACK, Ticket.TAXI, 4))

        summary = engine.get_game_summary()
        assert summary["players"][0]["colour"] == "black"
        assert summary["players"][0]["location"] == HIDDEN_LOCATION
        assert summary["round"] == 1
        assert not summary["game_over"]

    def test_view_ticket_counts(self, deferred_game):
        engine, _, _ = deferred_game
        view = engine.view
        assert view.get_player_tickets(Colour.BLUE, Ticket.BUS) == 1
        assert view.get_player_tickets(Colour.YELLOW, Ticket.BUS) is None
        assert view.get_player_location(Colour.YELLOW) is None

    def test_view_reveal_round(self, deferred_game):
        engine, agents, _ = deferred_game
        assert not engine.view.is_reveal_round()
        engine.start_rotate()
        agents[Colour.BLACK].submit(TicketMove(Colour.BLACK, Ticket.TAXI, 4))
        assert engine.view.is_reveal_round()


# =============================================================================
# End-to-End Scenarios
# =============================================================================


class TestScenarios:
    """Complete games with known outcomes."""

    def test_mrx_survives_single_revealed_round(self):
        """Mr X rides to C on a revealed round; the detective has no usable ticket and passes."""
        board = BoardGraph.from_edges([
            (1, 2, Transport.TAXI),  # A - C
            (2, 3, Transport.BUS),
            (5, 6, Transport.TAXI),  # B, disjoint from A
        ])
        engine = GameEngine(
            (True,),
            board,
            PlayerConfiguration(Colour.BLACK, 1, tickets(taxi=1, bus=1), FirstMoveAgent()),
            PlayerConfiguration(Colour.BLUE, 5, tickets(bus=1), FirstMoveAgent()),
        )
        recorder = RecordingSpectator()
        engine.register_spectator(recorder)

        engine.start_rotate()

        assert recorder.events == [
            ("move_made", TicketMove(Colour.BLACK, Ticket.TAXI, 2)),
            ("round_started", 0),
            ("move_made", PassMove(Colour.BLUE)),
            ("game_over", frozenset({Colour.BLACK})),
        ]
        assert engine.winner() is Winner.MRX

    def test_double_move_across_hidden_and_revealed_rounds(self):
        """Leg one is concealed, leg two is revealed."""
        board = BoardGraph.from_edges([
            (1, 2, Transport.TAXI),  # X = 2
            (2, 3, Transport.TAXI),  # Y = 3
            (10, 11, Transport.TAXI),
        ])
        double = DoubleMove.of(Colour.BLACK, Ticket.TAXI, 2, Ticket.TAXI, 3)
        engine = GameEngine(
            (False, True),
            board,
            PlayerConfiguration(Colour.BLACK, 1, tickets(taxi=2, double=1), ScriptedAgent(double)),
            PlayerConfiguration(Colour.BLUE, 10, tickets(taxi=1), FirstMoveAgent()),
        )
        recorder = RecordingSpectator()
        spy = LocationSpy()
        engine.register_spectator(recorder)
        engine.register_spectator(spy)

        engine.start_rotate()

        announced = recorder.moves()[0]
        assert announced.first_move.destination == HIDDEN_LOCATION
        assert announced.second_move.destination == 3
        assert recorder.moves()[1].destination == HIDDEN_LOCATION
        assert recorder.moves()[2].destination == 3
        assert engine.get_current_round() == 2
        # Disclosed location only changes with leg two
        assert spy.locations[:3] == [HIDDEN_LOCATION, HIDDEN_LOCATION, 3]
        assert engine.get_player_location(Colour.BLACK) == 3

    def test_stuck_mrx_on_final_round(self):
        """Mr X boxed in by detectives loses even with the schedule exhausted."""
        board = BoardGraph.from_edges([
            (1, 2, Transport.TAXI),
            (2, 3, Transport.TAXI),
            (3, 4, Transport.TAXI),
            (4, 5, Transport.TAXI),
        ])
        engine = GameEngine(
            (False,),
            board,
            PlayerConfiguration(
                Colour.BLACK, 3, tickets(taxi=2),
                ScriptedAgent(TicketMove(Colour.BLACK, Ticket.TAXI, 4)),
            ),
            PlayerConfiguration(Colour.BLUE, 5, tickets(bus=1), FirstMoveAgent()),
            PlayerConfiguration(
                Colour.RED, 2, tickets(taxi=1),
                ScriptedAgent(TicketMove(Colour.RED, Ticket.TAXI, 3)),
            ),
        )
        engine.start_rotate()

        state = engine.state
        assert state.current_round == len(state.rounds)
        assert state.round_finished
        assert engine.winner() is Winner.DETECTIVES

    def test_random_game_terminates(self):
        board = load_default_board()
        game = load_default_game_config().with_agents(lambda colour: RandomAgent(seed=3))
        engine = GameEngine(game.rounds, board, *game.configurations())
        recorder = RecordingSpectator()
        engine.register_spectator(recorder)

        rotations = 0
        while not engine.is_game_over():
            engine.start_rotate()
            rotations += 1

        assert rotations <= len(game.rounds)
        assert recorder.event_names()[-1] == "game_over"
        assert engine.get_winning_players()
        assert engine.phase is TurnPhase.GAME_OVER
