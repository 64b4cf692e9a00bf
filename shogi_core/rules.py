"""
Move types and move generation for the Shogi engine.

This module provides:
- BoardMove and DropMove, the two kinds of candidate move
- Step and slider move builders with the promotion-offer rule
- Per-piece dispatch to the right vector table and builder
- Drop generation with the one-pawn-per-file restriction
- generate_moves, the full candidate set for one side

The ruleset is deliberately simplified: there is no check detection, moves
that leave one's own king capturable are allowed, promotion is never forced,
and pawn drops that mate are not forbidden.
"""

from typing import Iterable, List, NamedTuple, Optional, Union

from .board import Board, Position, iter_pieces
from .piece import (
    Piece, Vector, PROMOTABLE, GOLD_LIKE, STEP_MOVES, SLIDER_DIRS,
    GOLD_VECTORS, KING_VECTORS, ORTHOGONAL_VECTORS, DIAGONAL_VECTORS, oriented
)
from .utils import BOARD_SIZE, BLACK, WHITE, in_bounds


class BoardMove(NamedTuple):
    """盤上の駒を動かす手"""
    from_pos: Position
    to: Position
    piece: Piece
    promote: bool = False
    captured: Optional[Piece] = None


class DropMove(NamedTuple):
    """持ち駒を打つ手"""
    to: Position
    piece: Piece
    drop: str


Move = Union[BoardMove, DropMove]

# 成り域の定義
PROMOTION_ZONE = {BLACK: range(0, 3), WHITE: range(6, 9)}


def in_promotion_zone(owner: int, row: int) -> bool:
    return row in PROMOTION_ZONE[owner]


def can_promote(piece: Piece, from_pos: Position, to: Position) -> bool:
    """任意成りの判定"""
    if piece.kind not in PROMOTABLE or piece.promoted:
        return False
    return (in_promotion_zone(piece.owner, from_pos.row) or
            in_promotion_zone(piece.owner, to.row))


def with_promotion(from_pos: Position, to: Position, piece: Piece,
                   target: Optional[Piece] = None) -> List[BoardMove]:
    """成り・不成の候補を展開する。

    成れる未成の駒が自陣の成り域から出る・入る場合は、不成と成りの二通りを返す。
    それ以外は不成の一手のみ。成りを強制することはない。
    """
    base = BoardMove(from_pos, to, piece, captured=target)
    if not can_promote(piece, from_pos, to):
        return [base]
    return [base, base._replace(promote=True)]


def step_moves(board: Board, from_pos: Position, piece: Piece,
               vectors: Iterable[Vector]) -> List[BoardMove]:
    """ステップ移動の手を生成"""
    moves: List[BoardMove] = []
    for dr, dc in vectors:
        r, c = from_pos.row + dr, from_pos.col + dc
        if not in_bounds(r, c):
            continue
        target = board[r][c]
        if target is not None and target.owner == piece.owner:
            continue
        moves.extend(with_promotion(from_pos, Position(r, c), piece, target))
    return moves


def ray_moves(board: Board, from_pos: Position, piece: Piece,
              vectors: Iterable[Vector]) -> List[BoardMove]:
    """スライド移動の手を生成 (自駒の手前で止まり、敵駒は取って止まる)"""
    moves: List[BoardMove] = []
    for dr, dc in vectors:
        r, c = from_pos.row + dr, from_pos.col + dc
        while in_bounds(r, c):
            target = board[r][c]
            if target is not None and target.owner == piece.owner:
                break
            moves.extend(with_promotion(from_pos, Position(r, c), piece, target))
            if target is not None:
                break
            r, c = r + dr, c + dc
    return moves


def piece_moves(board: Board, from_pos: Position, piece: Piece) -> List[BoardMove]:
    """駒の種類・成りに応じて移動手を生成"""
    owner = piece.owner
    if piece.kind == 'K':
        return step_moves(board, from_pos, piece, KING_VECTORS)
    if piece.kind == 'G' or (piece.promoted and piece.kind in GOLD_LIKE):
        return step_moves(board, from_pos, piece, oriented(GOLD_VECTORS, owner))
    if piece.kind in STEP_MOVES:
        return step_moves(board, from_pos, piece, oriented(STEP_MOVES[piece.kind], owner))
    if piece.kind == 'L':
        return ray_moves(board, from_pos, piece, oriented(SLIDER_DIRS['L'], owner))

    # 飛車・角 (龍・馬は斜め/縦横に一マス追加)
    moves = ray_moves(board, from_pos, piece, SLIDER_DIRS[piece.kind])
    if piece.promoted:
        extra = DIAGONAL_VECTORS if piece.kind == 'R' else ORTHOGONAL_VECTORS
        moves.extend(step_moves(board, from_pos, piece, extra))
    return moves


def has_unpromoted_pawn_in_file(board: Board, col: int, owner: int) -> bool:
    """指定筋に既に自分の歩があるかチェック（二歩禁止）"""
    for r in range(BOARD_SIZE):
        p = board[r][col]
        if p is not None and p.owner == owner and p.kind == 'P' and not p.promoted:
            return True
    return False


def can_drop(board: Board, owner: int, kind: str, pos: Position) -> bool:
    """打つ手が有効かチェック (空きマスと二歩のみ)"""
    if board[pos.row][pos.col] is not None:
        return False
    if kind == 'P' and has_unpromoted_pawn_in_file(board, pos.col, owner):
        return False
    return True


def drop_moves(board: Board, owner: int, hand: Iterable[str]) -> List[DropMove]:
    """持ち駒の打つ手を生成 (同種の駒は一度だけ、持ち駒順 × 行優先)"""
    moves: List[DropMove] = []
    seen = set()
    for kind in hand:
        if kind in seen:
            continue
        seen.add(kind)
        piece = Piece(kind, owner)
        for r in range(BOARD_SIZE):
            for c in range(BOARD_SIZE):
                pos = Position(r, c)
                if can_drop(board, owner, kind, pos):
                    moves.append(DropMove(pos, piece, kind))
    return moves


def generate_moves(state, player: int) -> List[Move]:
    """player の全候補手 (盤上の手を行優先で、続いて打つ手)"""
    board = state.board
    moves: List[Move] = []
    for pos, p in iter_pieces(board, player):
        moves.extend(piece_moves(board, pos, p))
    moves.extend(drop_moves(board, player, state.captured[player]))
    return moves
