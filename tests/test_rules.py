"""
Unit tests for move generation.

Covers the per-piece dispatch, slider blocking, the promotion-offer rule,
drops with the one-pawn-per-file restriction, and candidate ordering.
"""

import unittest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shogi_core.board import Position, place
from shogi_core.game import GameState, create_initial_state
from shogi_core.piece import Piece
from shogi_core.rules import (
    BoardMove, DropMove, PROMOTION_ZONE, can_drop, drop_moves, generate_moves,
    has_unpromoted_pawn_in_file, piece_moves, with_promotion
)
from shogi_core.utils import BLACK, WHITE


def state_with(pieces, turn=BLACK, black_hand=(), white_hand=()):
    return GameState(place(pieces), turn, (tuple(black_hand), tuple(white_hand)))


def destinations(moves):
    return [(m.to.row, m.to.col) for m in moves]


class TestPieceMoves(unittest.TestCase):
    """Test per-piece move generation on sparse boards"""

    def moves_for(self, pieces, at):
        board = place(pieces)
        return piece_moves(board, Position(*at), board[at[0]][at[1]])

    def test_king_in_center(self):
        moves = self.moves_for({(4, 4): Piece('K', BLACK)}, (4, 4))
        self.assertEqual(sorted(destinations(moves)),
                         [(3, 3), (3, 4), (3, 5), (4, 3), (4, 5), (5, 3), (5, 4), (5, 5)])

    def test_gold_black_and_white(self):
        black = self.moves_for({(4, 4): Piece('G', BLACK)}, (4, 4))
        self.assertEqual(sorted(destinations(black)),
                         [(3, 3), (3, 4), (3, 5), (4, 3), (4, 5), (5, 4)])
        white = self.moves_for({(4, 4): Piece('G', WHITE)}, (4, 4))
        self.assertEqual(sorted(destinations(white)),
                         [(3, 4), (4, 3), (4, 5), (5, 3), (5, 4), (5, 5)])

    def test_silver(self):
        moves = self.moves_for({(4, 4): Piece('S', WHITE)}, (4, 4))
        self.assertEqual(sorted(destinations(moves)),
                         [(3, 3), (3, 5), (5, 3), (5, 4), (5, 5)])

    def test_promoted_minor_pieces_move_like_gold(self):
        for kind in ('P', 'L', 'N', 'S'):
            moves = self.moves_for({(4, 4): Piece(kind, BLACK, True)}, (4, 4))
            self.assertEqual(sorted(destinations(moves)),
                             [(3, 3), (3, 4), (3, 5), (4, 3), (4, 5), (5, 4)], kind)

    def test_knight_jumps_over_pieces(self):
        pieces = {
            (6, 4): Piece('N', BLACK),
            (5, 4): Piece('P', BLACK),
            (5, 3): Piece('P', WHITE),
            (5, 5): Piece('P', WHITE),
        }
        moves = self.moves_for(pieces, (6, 4))
        self.assertEqual(sorted(destinations(moves)), [(4, 3), (4, 5)])

    def test_knight_on_last_ranks_has_no_moves(self):
        # 行き所のない駒でも成りは強制しない (ここでは手自体がない)
        self.assertEqual(self.moves_for({(1, 4): Piece('N', BLACK)}, (1, 4)), [])
        self.assertEqual(self.moves_for({(7, 4): Piece('N', WHITE)}, (7, 4)), [])

    def test_pawn_white_moves_down(self):
        moves = self.moves_for({(3, 4): Piece('P', WHITE)}, (3, 4))
        self.assertEqual(destinations(moves), [(4, 4)])

    def test_lance_slides_forward_only(self):
        pieces = {(6, 0): Piece('L', BLACK), (2, 0): Piece('P', WHITE)}
        moves = self.moves_for(pieces, (6, 0))
        # 成り域 (2,0) の取りは成・不成の二通り
        self.assertEqual(destinations(moves), [(5, 0), (4, 0), (3, 0), (2, 0), (2, 0)])

    def test_rook_stops_at_capture(self):
        pieces = {(4, 4): Piece('R', BLACK), (4, 7): Piece('P', WHITE)}
        moves = self.moves_for(pieces, (4, 4))
        right = [m for m in moves if m.to.row == 4 and m.to.col > 4]
        self.assertEqual(destinations(right), [(4, 5), (4, 6), (4, 7)])
        self.assertEqual(right[-1].captured, Piece('P', WHITE))
        self.assertNotIn((4, 8), destinations(moves))

    def test_rook_stops_before_own_piece(self):
        pieces = {(4, 4): Piece('R', BLACK), (4, 6): Piece('G', BLACK)}
        moves = self.moves_for(pieces, (4, 4))
        self.assertIn((4, 5), destinations(moves))
        self.assertNotIn((4, 6), destinations(moves))
        self.assertNotIn((4, 7), destinations(moves))

    def test_unpromoted_rook_on_empty_board(self):
        moves = self.moves_for({(4, 4): Piece('R', BLACK)}, (4, 4))
        # 16 マス + 成り域 (行0〜2) への3マス分の成り
        self.assertEqual(len(moves), 19)
        self.assertEqual(sum(1 for m in moves if m.promote), 3)

    def test_dragon_adds_diagonal_steps(self):
        moves = self.moves_for({(4, 4): Piece('R', BLACK, True)}, (4, 4))
        self.assertEqual(len(moves), 20)
        for sq in [(3, 3), (3, 5), (5, 3), (5, 5)]:
            self.assertIn(sq, destinations(moves))
        self.assertFalse(any(m.promote for m in moves))

    def test_horse_adds_orthogonal_steps(self):
        pieces = {(4, 4): Piece('B', WHITE, True), (6, 6): Piece('P', BLACK)}
        moves = self.moves_for(pieces, (4, 4))
        for sq in [(3, 4), (5, 4), (4, 3), (4, 5)]:
            self.assertIn(sq, destinations(moves))
        self.assertIn((6, 6), destinations(moves))
        self.assertNotIn((7, 7), destinations(moves))

    def test_slider_runs_are_contiguous(self):
        pieces = {
            (4, 4): Piece('B', BLACK),
            (2, 2): Piece('S', WHITE),
            (6, 6): Piece('G', BLACK),
        }
        moves = self.moves_for(pieces, (4, 4))
        dests = set(destinations(moves))
        self.assertIn((3, 3), dests)
        self.assertIn((2, 2), dests)
        self.assertNotIn((1, 1), dests)
        self.assertIn((5, 5), dests)
        self.assertNotIn((6, 6), dests)
        self.assertNotIn((7, 7), dests)


class TestPromotion(unittest.TestCase):
    """Test the promotion-offer rule"""

    def test_promotion_zones(self):
        self.assertEqual(list(PROMOTION_ZONE[BLACK]), [0, 1, 2])
        self.assertEqual(list(PROMOTION_ZONE[WHITE]), [6, 7, 8])

    def test_silver_entering_zone_offers_both(self):
        board = place({(3, 3): Piece('S', BLACK)})
        moves = piece_moves(board, Position(3, 3), board[3][3])
        for dest in [(2, 2), (2, 3), (2, 4)]:
            variants = [m for m in moves if (m.to.row, m.to.col) == dest]
            self.assertEqual(len(variants), 2)
            self.assertEqual(sorted(m.promote for m in variants), [False, True])
        for dest in [(4, 2), (4, 4)]:
            variants = [m for m in moves if (m.to.row, m.to.col) == dest]
            self.assertEqual(len(variants), 1)
            self.assertFalse(variants[0].promote)

    def test_leaving_zone_offers_promotion(self):
        moves = with_promotion(Position(2, 4), Position(3, 3), Piece('S', BLACK))
        self.assertEqual([m.promote for m in moves], [False, True])

    def test_opponent_zone_does_not_count(self):
        # 先手の駒が後手の成り域 (行6〜8) にいても成れない
        moves = with_promotion(Position(7, 4), Position(6, 4), Piece('S', BLACK))
        self.assertEqual(len(moves), 1)

    def test_white_zone(self):
        moves = with_promotion(Position(5, 4), Position(6, 4), Piece('P', WHITE))
        self.assertEqual([m.promote for m in moves], [False, True])

    def test_non_promotable_or_promoted(self):
        self.assertEqual(len(with_promotion(Position(3, 4), Position(2, 4), Piece('G', BLACK))), 1)
        self.assertEqual(len(with_promotion(Position(3, 4), Position(2, 4), Piece('K', BLACK))), 1)
        self.assertEqual(len(with_promotion(Position(3, 4), Position(2, 4), Piece('S', BLACK, True))), 1)

    def test_promotion_never_forced(self):
        board = place({(1, 4): Piece('P', BLACK)})
        moves = piece_moves(board, Position(1, 4), board[1][4])
        self.assertEqual([m.promote for m in moves], [False, True])


class TestDrops(unittest.TestCase):
    """Test drop generation"""

    def test_nifu(self):
        board = place({
            (6, 4): Piece('P', BLACK),
            (5, 3): Piece('P', BLACK, True),
            (2, 2): Piece('P', WHITE),
        })
        self.assertTrue(has_unpromoted_pawn_in_file(board, 4, BLACK))
        self.assertFalse(has_unpromoted_pawn_in_file(board, 3, BLACK))
        self.assertFalse(has_unpromoted_pawn_in_file(board, 2, BLACK))
        self.assertTrue(has_unpromoted_pawn_in_file(board, 2, WHITE))

        moves = drop_moves(board, BLACK, ['P'])
        cols = {m.to.col for m in moves}
        self.assertNotIn(4, cols)
        self.assertIn(3, cols)
        self.assertIn(2, cols)
        # 空きマスのみ, 4筋を除く
        self.assertEqual(len(moves), 81 - 3 - 8)

    def test_other_kinds_drop_anywhere_empty(self):
        board = place({(6, 4): Piece('P', BLACK)})
        self.assertTrue(can_drop(board, BLACK, 'G', Position(5, 4)))
        self.assertFalse(can_drop(board, BLACK, 'G', Position(6, 4)))
        # 行き所のない駒の打ちも禁止しない
        self.assertTrue(can_drop(board, BLACK, 'N', Position(0, 0)))

    def test_duplicate_kinds_generate_once(self):
        board = place({(8, 4): Piece('K', BLACK)})
        moves = drop_moves(board, BLACK, ['G', 'P', 'G'])
        self.assertEqual(len(moves), 80 * 2)
        self.assertEqual([m.drop for m in moves[:1]], ['G'])
        self.assertEqual(moves[-1].drop, 'P')

    def test_drop_move_shape(self):
        moves = drop_moves(place({}), WHITE, ['S'])
        self.assertEqual(moves[0], DropMove(Position(0, 0), Piece('S', WHITE), 'S'))


class TestGenerateMoves(unittest.TestCase):
    """Test the aggregate candidate set"""

    def test_initial_black_pawn(self):
        state = create_initial_state()
        moves = [m for m in generate_moves(state, BLACK)
                 if isinstance(m, BoardMove) and m.from_pos == Position(6, 4)]
        self.assertEqual(moves, [BoardMove(Position(6, 4), Position(5, 4), Piece('P', BLACK))])
        self.assertFalse(moves[0].promote)

    def test_initial_move_count(self):
        state = create_initial_state()
        self.assertEqual(len(generate_moves(state, BLACK)), 30)
        self.assertEqual(len(generate_moves(state, WHITE)), 30)

    def test_no_move_targets_own_piece(self):
        state = create_initial_state()
        for player in (BLACK, WHITE):
            for m in generate_moves(state, player):
                target = state.board[m.to.row][m.to.col]
                self.assertTrue(target is None or target.owner != player)

    def test_board_moves_before_drops(self):
        state = state_with({(8, 4): Piece('K', BLACK), (0, 4): Piece('K', WHITE)},
                           black_hand=['P'])
        moves = generate_moves(state, BLACK)
        kinds = [isinstance(m, DropMove) for m in moves]
        self.assertEqual(kinds, sorted(kinds))
        self.assertEqual(sum(kinds), 79)

    def test_only_acting_players_hand(self):
        state = state_with({(8, 4): Piece('K', BLACK)}, white_hand=['R'])
        self.assertFalse(any(isinstance(m, DropMove) for m in generate_moves(state, BLACK)))
        self.assertEqual(len(generate_moves(state, WHITE)), 80)

    def test_deterministic(self):
        state = create_initial_state()
        self.assertEqual(generate_moves(state, BLACK), generate_moves(state, BLACK))


if __name__ == '__main__':
    unittest.main(verbosity=2)
