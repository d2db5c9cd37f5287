"""Tests for rl/action_space.py - action index mapping and masking."""

import numpy as np
import pytest

from core.board import BoardGraph
from core.constants import Colour, Ticket, Transport
from core.moves import DoubleMove, PassMove, TicketMove
from rl.action_space import ActionMapping
from rl.config import ActionSpaceConfig, DEFAULT_ACTION_CONFIG


@pytest.fixture
def board():
    """Nodes 10, 20, 30 so indices differ from node ids."""
    return BoardGraph.from_edges([
        (10, 20, Transport.TAXI),
        (20, 30, Transport.BUS),
    ])


@pytest.fixture
def mapping(board):
    return ActionMapping(board, ActionSpaceConfig(MAX_NODES=5))


class TestIndexLayout:
    """Tests for the index layout."""

    def test_total_actions(self, mapping):
        assert mapping.total_actions == 1 + 20 + 400

    def test_pass(self, mapping):
        assert mapping.move_to_index(PassMove(Colour.BLUE)) == 0
        assert mapping.index_to_move(0, Colour.RED) == PassMove(Colour.RED)

    def test_single_index(self, mapping):
        # BUS is leg ticket 1, node 30 is the third node
        move = TicketMove(Colour.BLACK, Ticket.BUS, 30)
        assert mapping.move_to_index(move) == 1 + 1 * 5 + 2

    def test_double_index(self, mapping):
        move = DoubleMove.of(Colour.BLACK, Ticket.TAXI, 20, Ticket.SECRET, 10)
        first = 0 * 5 + 1
        second = 3 * 5 + 0
        assert mapping.move_to_index(move) == 21 + first * 20 + second

    def test_decoding_uses_given_colour(self, mapping):
        idx = mapping.move_to_index(TicketMove(Colour.BLUE, Ticket.TAXI, 20))
        assert mapping.index_to_move(idx, Colour.GREEN) == TicketMove(Colour.GREEN, Ticket.TAXI, 20)

    def test_decodes_double(self, mapping):
        move = DoubleMove.of(Colour.BLACK, Ticket.UNDERGROUND, 30, Ticket.BUS, 20)
        assert mapping.index_to_move(mapping.move_to_index(move), Colour.BLACK) == move


class TestInvalidIndices:
    """Tests for indices with no move."""

    @pytest.mark.parametrize("idx", [-1, 421, 10_000])
    def test_out_of_range(self, mapping, idx):
        with pytest.raises(ValueError, match="out of range"):
            mapping.index_to_move(idx, Colour.BLACK)

    def test_unused_node_slot(self, mapping):
        # Node slot 4 is beyond this three-node board
        with pytest.raises(ValueError):
            mapping.index_to_move(1 + 4, Colour.BLACK)

    def test_unknown_destination(self, mapping):
        with pytest.raises(ValueError):
            mapping.move_to_index(TicketMove(Colour.BLACK, Ticket.TAXI, 99))

    def test_double_ticket_has_no_leg(self, mapping):
        with pytest.raises(ValueError):
            mapping.move_to_index(TicketMove(Colour.BLACK, Ticket.DOUBLE, 20))

    def test_board_too_large(self, board):
        with pytest.raises(ValueError, match="only supports 2"):
            ActionMapping(board, ActionSpaceConfig(MAX_NODES=2))


class TestActionMask:
    """Tests for action masks."""

    def test_mask_marks_each_move(self, mapping):
        moves = frozenset({
            TicketMove(Colour.BLACK, Ticket.TAXI, 10),
            TicketMove(Colour.BLACK, Ticket.SECRET, 10),
            DoubleMove.of(Colour.BLACK, Ticket.TAXI, 10, Ticket.TAXI, 20),
        })
        mask = mapping.action_mask(moves)

        assert mask.dtype == np.bool_
        assert mask.shape == (mapping.total_actions,)
        assert mask.sum() == 3
        valid = mapping.get_valid_action_indices(mask)
        assert {mapping.index_to_move(int(i), Colour.BLACK) for i in valid} == moves

    def test_pass_mask(self, mapping):
        mask = mapping.action_mask([PassMove(Colour.BLUE)])
        assert list(mapping.get_valid_action_indices(mask)) == [0]

    def test_unmappable_move(self, mapping):
        with pytest.raises(RuntimeError):
            mapping.action_mask([TicketMove(Colour.BLACK, Ticket.TAXI, 99)])

    def test_default_config(self, board):
        assert ActionMapping(board).total_actions == DEFAULT_ACTION_CONFIG.total_actions
