"""
Board representation and setup for the Shogi engine.

This module provides:
- Position and the immutable Board type
- Initial board setup (standard and handicap games)
- Clone-on-write helpers used by state transitions
"""

from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from .piece import Piece
from .utils import BOARD_SIZE, BLACK, WHITE, HANDICAPS


class Position(NamedTuple):
    row: int
    col: int


# 型エイリアス (行優先, board[row][col])
Row = Tuple[Optional[Piece], ...]
Board = Tuple[Row, ...]


def empty_board() -> Board:
    """空の盤面"""
    return tuple(tuple(None for _ in range(BOARD_SIZE)) for __ in range(BOARD_SIZE))


def freeze(rows: List[List[Optional[Piece]]]) -> Board:
    """可変な二次元リストを盤面に変換"""
    return tuple(tuple(row) for row in rows)


def standard_setup() -> Board:
    """標準的な初期配置を作成"""
    rows: List[List[Optional[Piece]]] = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    back = ['L', 'N', 'S', 'G', 'K', 'G', 'S', 'N', 'L']

    # 後手配置
    for c, k in enumerate(back):
        rows[0][c] = Piece(k, WHITE)
    rows[1][1], rows[1][7] = Piece('B', WHITE), Piece('R', WHITE)
    for c in range(BOARD_SIZE):
        rows[2][c] = Piece('P', WHITE)

    # 先手配置
    for c in range(BOARD_SIZE):
        rows[6][c] = Piece('P', BLACK)
    rows[7][1], rows[7][7] = Piece('R', BLACK), Piece('B', BLACK)
    for c, k in enumerate(back):
        rows[8][c] = Piece(k, BLACK)

    return freeze(rows)


def handicap_positions(board: Board, remove_kinds: List[str]) -> List[Position]:
    """指定された種類の駒を後手(上手)から取り除く位置リストを返す。
    駒種ごとに盤を行優先で走査し、最初に見つかった後手駒を対象とする。
    """
    positions: List[Position] = []
    for kind in remove_kinds:
        for pos, p in iter_pieces(board, WHITE):
            if p.kind == kind and pos not in positions:
                positions.append(pos)
                break
    return positions


def handicap_setup(handicap: str) -> Board:
    """駒落ちの初期配置 (未知の名前は平手)"""
    board = standard_setup()
    removed = handicap_positions(board, HANDICAPS.get(handicap, []))
    return with_squares(board, {pos: None for pos in removed})


def piece_at(board: Board, pos: Position) -> Optional[Piece]:
    return board[pos.row][pos.col]


def with_squares(board: Board, changes: Dict[Position, Optional[Piece]]) -> Board:
    """変更のあった行だけを作り直した新しい盤面を返す"""
    if not changes:
        return board
    rows = list(board)
    for pos, piece in changes.items():
        row = list(rows[pos.row])
        row[pos.col] = piece
        rows[pos.row] = tuple(row)
    return tuple(rows)


def place(pieces: Dict[Tuple[int, int], Piece], board: Optional[Board] = None) -> Board:
    """{(row, col): Piece} から盤面を作る (局面作成・テスト用)"""
    base = empty_board() if board is None else board
    return with_squares(base, {Position(r, c): p for (r, c), p in pieces.items()})


def iter_pieces(board: Board, owner: Optional[int] = None) -> Iterator[Tuple[Position, Piece]]:
    """盤上の駒を行優先で列挙"""
    for r, row in enumerate(board):
        for c, p in enumerate(row):
            if p is not None and (owner is None or p.owner == owner):
                yield Position(r, c), p


def count_pieces(board: Board) -> int:
    return sum(1 for _ in iter_pieces(board))
