"""
Shogi Core Package

A simplified Shogi (Japanese Chess) rule engine with a pygame front end.
The game is won by capturing the opposing king.

Modules:
- piece: Piece value type, movement vector tables, labels
- board: Position, immutable board, initial setups
- rules: Move types and move generation (including drops)
- game: Game state, state transitions, CPU policies, match driver
- utils: Constants and configuration
- main: pygame entry point
"""

from .piece import Piece, piece_label
from .board import Position, standard_setup
from .rules import BoardMove, DropMove, Move, generate_moves
from .game import (
    GameState, Match, RandomPolicy, CapturePolicy,
    create_initial_state, apply_move, no_moves_for, is_terminal
)
from .utils import BLACK, WHITE

__version__ = "1.0.0"
__all__ = [
    'Piece', 'piece_label', 'Position', 'standard_setup',
    'BoardMove', 'DropMove', 'Move', 'generate_moves',
    'GameState', 'Match', 'RandomPolicy', 'CapturePolicy',
    'create_initial_state', 'apply_move', 'no_moves_for', 'is_terminal',
    'BLACK', 'WHITE',
]
