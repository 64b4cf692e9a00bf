"""
Game state, state transitions, CPU policies, and the match driver.

This module provides:
- GameState, the immutable snapshot of a position
- create_initial_state / apply_move / no_moves_for, the pure transitions
- CPU move-selection policies with an injectable random source
- Kifu (move record) notation
- Match, the driver that owns history and enforces the end-of-game contract

The win condition is literal capture of the opposing king. Once a state has
a winner it is terminal: apply_move and generate_moves do not refuse such a
state, so callers must stop there. Match does this for its users.
"""

import random
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple, TypedDict

from .board import Board, Position, handicap_setup, piece_at, with_squares
from .piece import Piece, kifu_label, kind_label
from .rules import BoardMove, DropMove, Move, can_promote, generate_moves
from .utils import BLACK, WHITE, JAPANESE_TURN_SYMBOL, coords_to_kifu, opponent

Hand = Tuple[str, ...]
Policy = Callable[['GameState'], Optional[Move]]


class GameState(NamedTuple):
    """局面 (不変値)。captured は手番ごとの持ち駒 (captured[BLACK] など)。"""
    board: Board
    turn: int
    captured: Tuple[Hand, Hand]
    winner: Optional[int] = None


def create_initial_state(handicap: str = '平手') -> GameState:
    """初期局面を作成 (先手番, 持ち駒なし)"""
    return GameState(handicap_setup(handicap), BLACK, ((), ()))


def is_terminal(state: GameState) -> bool:
    return state.winner is not None


def _with_hand(captured: Tuple[Hand, Hand], player: int, hand: Hand) -> Tuple[Hand, Hand]:
    return (hand, captured[WHITE]) if player == BLACK else (captured[BLACK], hand)


def apply_move(state: GameState, move: Move) -> GameState:
    """手を適用した新しい局面を返す (入力の局面は変更しない)"""
    turn = state.turn
    hand = list(state.captured[turn])

    if isinstance(move, DropMove):
        board = with_squares(state.board, {move.to: Piece(move.drop, turn)})
        if move.drop in hand:
            hand.remove(move.drop)
        return GameState(board, opponent(turn), _with_hand(state.captured, turn, tuple(hand)))

    moving = piece_at(state.board, move.from_pos)
    if moving is None:
        return state

    target = piece_at(state.board, move.to)
    king_taken = False
    if target is not None and target.owner != turn:
        if target.kind == 'K':
            king_taken = True
        else:
            # 取った駒は成りを戻して持ち駒へ
            hand.append(target.demoted().kind)

    placed = moving.promote() if move.promote else moving
    board = with_squares(state.board, {move.from_pos: None, move.to: placed})
    captured = _with_hand(state.captured, turn, tuple(hand))

    if king_taken:
        return GameState(board, turn, captured, winner=turn)
    return GameState(board, opponent(turn), captured)


def no_moves_for(state: GameState) -> GameState:
    """手番側に指し手がない (または投了した) ときの終局局面"""
    return state._replace(winner=opponent(state.turn))


# ========================================
# CPU 指し手選択
# ========================================

class RandomPolicy:
    """入門レベル: 候補手から一様にランダム"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def candidates(self, state: GameState) -> List[Move]:
        return generate_moves(state, state.turn)

    def __call__(self, state: GameState) -> Optional[Move]:
        moves = self.candidates(state)
        return self.rng.choice(moves) if moves else None


class CapturePolicy(RandomPolicy):
    """初級レベル: 取れる駒があれば優先"""

    def candidates(self, state: GameState) -> List[Move]:
        moves = generate_moves(state, state.turn)
        capture_moves = [m for m in moves if isinstance(m, BoardMove) and m.captured is not None]
        return capture_moves or moves


CPU_POLICIES: Dict[str, Callable[..., Policy]] = {
    'beginner': RandomPolicy,
    'easy': CapturePolicy,
}


def make_policy(difficulty: str, rng: Optional[random.Random] = None) -> Policy:
    """難易度名から CPU を作る"""
    try:
        factory = CPU_POLICIES[difficulty]
    except KeyError:
        raise ValueError(f"unknown CPU difficulty: {difficulty!r}")
    return factory(rng)


# ========================================
# 棋譜
# ========================================

def move_to_kifu(turn: int, move: Move, last_target: Optional[Position] = None) -> str:
    """指し手を棋譜文字列に変換 (例: ▲7六歩, △同角成, ▲5五歩打)"""
    symbol = JAPANESE_TURN_SYMBOL[turn]
    if isinstance(move, DropMove):
        return f"{symbol}{coords_to_kifu(*move.to)}{kind_label(move.drop)}打"

    dest = "同" if last_target == move.to else coords_to_kifu(*move.to)
    text = f"{symbol}{dest}{kifu_label(move.piece)}"
    if move.promote:
        text += "成"
    elif can_promote(move.piece, move.from_pos, move.to):
        text += "不成"
    return text


class HistoryItem(TypedDict):
    """待った用のスナップショット"""
    state: GameState
    last_move_target: Optional[Position]
    kifu_len: int


class Match:
    """一局を管理するクラス。

    policies に CPU (Policy) を渡した側は step() で自動的に指し、None の側は人間が
    play() で指す。終局後の着手はここで拒否する。
    """

    def __init__(self, black: Optional[Policy] = None, white: Optional[Policy] = None,
                 handicap: str = '平手'):
        self.policies: Dict[int, Optional[Policy]] = {BLACK: black, WHITE: white}
        self.handicap = handicap
        self.state = create_initial_state(handicap)
        self.history: List[HistoryItem] = []
        self.kifu: List[str] = []
        self.last_move_target: Optional[Position] = None

    @property
    def game_over(self) -> bool:
        return is_terminal(self.state)

    @property
    def winner(self) -> Optional[int]:
        return self.state.winner

    def is_cpu_turn(self) -> bool:
        return not self.game_over and self.policies[self.state.turn] is not None

    def legal_moves(self, from_pos: Optional[Position] = None,
                    drop: Optional[str] = None) -> List[Move]:
        """手番側の候補手 (from_pos / drop で絞り込み可)。終局後は空。"""
        if self.game_over:
            return []
        moves = generate_moves(self.state, self.state.turn)
        if from_pos is not None:
            moves = [m for m in moves if isinstance(m, BoardMove) and m.from_pos == from_pos]
        if drop is not None:
            moves = [m for m in moves if isinstance(m, DropMove) and m.drop == drop]
        return moves

    def _save_history(self) -> None:
        self.history.append({
            'state': self.state,
            'last_move_target': self.last_move_target,
            'kifu_len': len(self.kifu),
        })

    def play(self, move: Move) -> GameState:
        """候補手の中から選ばれた手を指す"""
        if self.game_over:
            raise ValueError("game is already over")
        if move not in self.legal_moves():
            raise ValueError(f"not a legal move: {move!r}")
        self._save_history()
        self.kifu.append(move_to_kifu(self.state.turn, move, self.last_move_target))
        self.state = apply_move(self.state, move)
        self.last_move_target = move.to
        return self.state

    def resign(self) -> GameState:
        """手番側の投了"""
        if self.game_over:
            raise ValueError("game is already over")
        self._save_history()
        self.kifu.append(f"{JAPANESE_TURN_SYMBOL[self.state.turn]}投了")
        self.state = no_moves_for(self.state)
        return self.state

    def step(self) -> Optional[Move]:
        """CPU の手番なら一手指す。指し手がなければ CPU の負けとする。"""
        if not self.is_cpu_turn():
            return None
        policy = self.policies[self.state.turn]
        move = policy(self.state)
        if move is None:
            self.resign()
            return None
        self.play(move)
        return move

    def run(self, max_plies: int = 1000) -> GameState:
        """CPU 同士で終局 (または max_plies) まで進める"""
        plies = 0
        while plies < max_plies and self.is_cpu_turn():
            self.step()
            plies += 1
        return self.state

    def undo(self, steps: int = 1) -> bool:
        """待った: steps 手分だけ局面を戻す (履歴が足りなければ初手まで)"""
        if steps < 1 or not self.history:
            return False
        item = self.history.pop()
        for _ in range(steps - 1):
            if not self.history:
                break
            item = self.history.pop()
        self.state = item['state']
        self.last_move_target = item['last_move_target']
        del self.kifu[item['kifu_len']:]
        return True
