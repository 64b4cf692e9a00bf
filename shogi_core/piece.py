"""
Piece value type, movement vector tables, and piece-related constants.

This module defines:
- Piece, an immutable (kind, owner, promoted) value
- Promotable and gold-like piece sets
- Step and slide vector tables for every piece kind
- Display and kifu labels for pieces
"""

from typing import List, NamedTuple, Tuple

from .utils import BLACK

Vector = Tuple[int, int]  # (drow, dcol)

# 成れる駒
PROMOTABLE = frozenset({'R', 'B', 'S', 'N', 'L', 'P'})

# 成ると金と同じ動きになる駒
GOLD_LIKE = frozenset({'P', 'L', 'N', 'S'})

# 持ち駒の表示順
HAND_ORDER = ('R', 'B', 'G', 'S', 'N', 'L', 'P')


class Piece(NamedTuple):
    """盤上の駒 (不変値)。"""
    kind: str
    owner: int
    promoted: bool = False

    def promote(self) -> 'Piece':
        # 成れない駒・成り済みの駒はそのまま
        if self.promoted or self.kind not in PROMOTABLE:
            return self
        return self._replace(promoted=True)

    def demoted(self) -> 'Piece':
        return self._replace(promoted=False)

    def __repr__(self) -> str:
        return f"{'+' if self.promoted else ''}{self.kind}{'S' if self.owner == BLACK else 'G'}"


# 移動ベクトル (先手から見た向き: 前 = row-1)
KING_VECTORS: List[Vector] = [
    (1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (1, -1), (-1, 1), (-1, -1),
]
GOLD_VECTORS: List[Vector] = [(-1, 0), (-1, 1), (-1, -1), (0, 1), (0, -1), (1, 0)]
SILVER_VECTORS: List[Vector] = [(-1, 0), (-1, 1), (-1, -1), (1, 1), (1, -1)]
KNIGHT_VECTORS: List[Vector] = [(-2, 1), (-2, -1)]
PAWN_VECTORS: List[Vector] = [(-1, 0)]
LANCE_VECTORS: List[Vector] = [(-1, 0)]
ORTHOGONAL_VECTORS: List[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONAL_VECTORS: List[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]

STEP_MOVES = {
    'K': KING_VECTORS,
    'G': GOLD_VECTORS,
    'S': SILVER_VECTORS,
    'N': KNIGHT_VECTORS,
    'P': PAWN_VECTORS,
}

SLIDER_DIRS = {
    'L': LANCE_VECTORS,
    'R': ORTHOGONAL_VECTORS,
    'B': DIAGONAL_VECTORS,
}


def sign_for_owner(owner: int) -> int:
    """プレイヤーの向きに応じた符号を返す"""
    return 1 if owner == BLACK else -1


def oriented(vectors: List[Vector], owner: int) -> List[Vector]:
    """先手基準のベクトルを owner の向きに変換"""
    sign = sign_for_owner(owner)
    return [(dr * sign, dc) for dr, dc in vectors]


def kind_label(kind: str) -> str:
    """駒種の表示名"""
    if kind == 'K':
        return '王'
    elif kind == 'R':
        return '飛'
    elif kind == 'B':
        return '角'
    elif kind == 'G':
        return '金'
    elif kind == 'S':
        return '銀'
    elif kind == 'N':
        return '桂'
    elif kind == 'L':
        return '香'
    elif kind == 'P':
        return '歩'
    raise ValueError(f"unknown piece kind: {kind!r}")


def piece_label(piece: Piece) -> str:
    """駒の表示名 (成り駒は「成」を前置)"""
    label = kind_label(piece.kind)
    return f"成{label}" if piece.promoted else label


# 棋譜で使う成り駒の名前
PROMOTED_KIFU_NAMES = {
    'R': '龍', 'B': '馬', 'S': '成銀', 'N': '成桂', 'L': '成香', 'P': 'と',
}


def kifu_label(piece: Piece) -> str:
    """棋譜用の駒名 (龍・馬・と など)"""
    if piece.promoted:
        return PROMOTED_KIFU_NAMES[piece.kind]
    return kind_label(piece.kind)
