"""Turn engine for the pursuit game.

The GameEngine is the rules authority. It provides:
- start_rotate(): ask each player in turn for a move, Mr X first
- accept(): apply a chosen move (the callback handed to agents)
- get_valid_moves(), is_game_over(), get_winning_players() and other queries

Play is synchronous and re-entrant: start_rotate asks an agent for a move,
the agent calls back into accept, and accept asks the next agent, until the
rotation completes. Move legality is enforced; an illegal move is a
programming error and raises immediately.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from core.board import BoardGraph, NodeId
from core.constants import Colour, Ticket, NOT_STARTED
from core.game_state import GameState
from core.moves import DoubleMove, Move, PassMove, TicketMove
from core.player import Player, PlayerConfiguration

from .move_generator import legal_moves
from .setup import GameConfigError, validate_game_config
from .spectators import Spectator, SpectatorRegistry
from .turn_machine import TurnMachine, TurnPhase
from .view import GameView
from .visibility import next_revealed_location, shown_double_move, shown_ticket_move
from .win_conditions import Winner, evaluate_winner, winning_colours


logger = logging.getLogger(__name__)


class InvalidMoveError(ValueError):
    """Raised when a submitted move is not in the current legal set."""


class GameEngine:
    """Rules engine for one game of hidden-movement pursuit.

    Usage:
        engine = GameEngine(rounds, board, mrx_config, detective_config)
        engine.register_spectator(spectator)

        while not engine.is_game_over():
            engine.start_rotate()  # agents call engine.accept via callbacks
    """

    def __init__(
        self,
        rounds: Sequence[bool],
        board: BoardGraph,
        mrx: PlayerConfiguration,
        first_detective: PlayerConfiguration,
        *rest_of_detectives: PlayerConfiguration,
    ):
        """Create a game.

        Args:
            rounds: Reveal schedule, one entry per Mr X move.
            board: The transport graph (read-only).
            mrx: Mr X's configuration.
            first_detective: The first detective's configuration.
            rest_of_detectives: Any further detectives, in turn order.

        Raises:
            GameConfigError: If the configuration is malformed.
        """
        configurations = [mrx, first_detective, *rest_of_detectives]
        errors = validate_game_config(rounds, board, configurations)
        if errors:
            raise GameConfigError(errors)

        self._state = GameState(
            rounds=tuple(bool(r) for r in rounds),
            board=board,
            players=[Player.from_configuration(c) for c in configurations],
        )
        self._spectators = SpectatorRegistry()
        self._machine = TurnMachine()
        self._valid_moves: frozenset[Move] = frozenset()
        self._view = GameView(self)

        logger.debug(
            "Created game with %d rounds and %d detectives",
            len(self._state.rounds),
            len(self._state.detectives),
        )

    # -------------------------------------------------------------------------
    # Spectators
    # -------------------------------------------------------------------------

    def register_spectator(self, spectator: Spectator) -> None:
        self._spectators.register(spectator)

    def unregister_spectator(self, spectator: Spectator) -> None:
        self._spectators.unregister(spectator)

    @property
    def spectators(self) -> tuple[Spectator, ...]:
        return self._spectators.as_tuple()

    # -------------------------------------------------------------------------
    # Turn flow
    # -------------------------------------------------------------------------

    def start_rotate(self) -> None:
        """Start a rotation by asking the current player for a move.

        Raises:
            RuntimeError: If the game is over.
        """
        if self.is_game_over():
            raise RuntimeError("Cannot start a rotation when the game is over")

        self._valid_moves = legal_moves(self._state, self._state.get_current_player())
        self._request_move()

    def accept(self, move: Optional[Move]) -> None:
        """Apply a move chosen by the current player's agent.

        Args:
            move: A member of the legal set most recently offered.

        Raises:
            InvalidMoveError: If the move is None or not currently legal.
        """
        if move is None or move not in self._valid_moves:
            raise InvalidMoveError(f"Invalid move: {move}")

        self._valid_moves = frozenset()
        self._transition(TurnPhase.APPLYING)
        logger.debug("Applying %s in round %d", move, self._state.current_round)

        match move:
            case TicketMove():
                self._play_ticket_move(move)
            case DoubleMove():
                self._play_double_move(move)
            case PassMove():
                self._spectators.move_made(self._view, move)

        self._transition(TurnPhase.ROUND_ADVANCING)
        self._advance_player()

        state = self._state
        self._valid_moves = legal_moves(state, state.get_current_player())

        if not state.round_finished:
            self._transition(TurnPhase.AWAITING_MOVE)
            self._request_move()
            return

        winner = evaluate_winner(state)
        if winner is not None:
            self._valid_moves = frozenset()
            self._transition(TurnPhase.GAME_OVER)
            colours = winning_colours(state, winner)
            logger.info("Game over after round %d: %s win", state.current_round, winner.value)
            self._spectators.game_over(self._view, colours)
        else:
            self._transition(TurnPhase.AWAITING_MOVE)
            self._spectators.rotation_complete(self._view)

    def _request_move(self) -> None:
        player = self._state.get_current_player()
        moves = self._valid_moves
        used = False

        def callback(move: Move) -> None:
            nonlocal used
            if used:
                raise RuntimeError(f"{player.colour.value} has already submitted a move")
            if move is None or move not in moves:
                raise InvalidMoveError(f"Invalid move: {move}")
            used = True
            self.accept(move)

        if player.agent is None:
            raise RuntimeError(f"No agent configured for {player.colour.value}")
        player.agent.make_move(self._view, player.location, moves, callback)

    def _transition(self, phase: TurnPhase) -> None:
        result = self._machine.transition_to(phase)
        if not result.success:
            raise RuntimeError(result.reason)

    def _advance_player(self) -> None:
        state = self._state
        state.current_player_idx = (state.current_player_idx + 1) % len(state.players)
        state.round_finished = state.current_player_idx == 0

    # -------------------------------------------------------------------------
    # Move application
    # -------------------------------------------------------------------------

    def _play_ticket_move(self, move: TicketMove) -> None:
        state = self._state
        player = state.get_player(move.colour)

        if player.is_detective():
            player.remove_ticket(move.ticket)
            player.location = move.destination
            # Spent detective tickets go to Mr X
            state.mrx.add_ticket(move.ticket)
            self._spectators.move_made(self._view, move)
            return

        played_round = state.current_round
        shown = shown_ticket_move(move, state.rounds, played_round, state.revealed_location)
        self._move_mrx(player, move)
        self._spectators.move_made(self._view, shown)
        self._spectators.round_started(self._view, played_round)

    def _play_double_move(self, move: DoubleMove) -> None:
        state = self._state
        player = state.get_player(move.colour)
        first_round = state.current_round

        shown = shown_double_move(move, state.rounds, first_round, state.revealed_location)
        player.remove_ticket(Ticket.DOUBLE)
        self._spectators.move_made(self._view, shown)

        self._move_mrx(player, move.first_move)
        self._spectators.move_made(self._view, shown.first_move)
        self._spectators.round_started(self._view, first_round)

        self._move_mrx(player, move.second_move)
        self._spectators.move_made(self._view, shown.second_move)

    def _move_mrx(self, player: Player, move: TicketMove) -> None:
        state = self._state
        player.remove_ticket(move.ticket)
        player.location = move.destination
        state.revealed_location = next_revealed_location(
            state.rounds, state.current_round, state.revealed_location, move.destination
        )
        state.current_round += 1

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def view(self) -> GameView:
        return self._view

    @property
    def state(self) -> GameState:
        """A copy of the full (unfiltered) game state."""
        return self._state.clone()

    @property
    def phase(self) -> TurnPhase:
        return self._machine.phase

    def get_valid_moves(self) -> frozenset[Move]:
        """The legal set most recently offered to the current player."""
        return self._valid_moves

    def winner(self) -> Optional[Winner]:
        return evaluate_winner(self._state)

    def is_game_over(self) -> bool:
        return self.winner() is not None

    def get_winning_players(self) -> frozenset[Colour]:
        return winning_colours(self._state, self.winner())

    def get_current_player(self) -> Colour:
        return self._state.get_current_player().colour

    def get_current_round(self) -> int:
        return self._state.current_round

    def get_rounds(self) -> tuple[bool, ...]:
        return self._state.rounds

    def get_players(self) -> tuple[Colour, ...]:
        return tuple(self._state.colours())

    def get_board(self) -> BoardGraph:
        return self._state.board

    def get_player_location(self, colour: Colour) -> Optional[NodeId]:
        return self._view.get_player_location(colour)

    def get_player_tickets(self, colour: Colour, ticket: Ticket) -> Optional[int]:
        return self._view.get_player_tickets(colour, ticket)

    def is_round_started(self) -> bool:
        return self._state.current_round != NOT_STARTED

    def get_game_summary(self) -> dict:
        """Get a spectator-safe summary of the current game."""
        state = self._state
        return {
            "round": state.current_round,
            "rounds_total": len(state.rounds),
            "current_player": state.get_current_player().colour.value,
            "mrx_last_seen": state.revealed_location,
            "players": [
                {
                    "colour": p.colour.value,
                    "location": self.get_player_location(p.colour),
                    "tickets": {t.value: n for t, n in p.tickets.items()},
                }
                for p in state.players
            ],
            "game_over": self.is_game_over(),
            "winners": sorted(c.value for c in self.get_winning_players()),
        }

    def __str__(self) -> str:
        return (
            f"GameEngine(round={self._state.current_round}/{len(self._state.rounds)}, "
            f"phase={self._machine.phase.value})"
        )
