
"""Game controller: session state machine, drop timer, end rules"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from balance_board import Board, PlacementReport
from balance_config import GameConfig
from balance_piece import SHAPES, Kind, Piece, Shape
from balance_rng import LCGRandom

logger = logging.getLogger(__name__)

STACK_TOO_HIGH = "stack too high"
BALANCE_OUT_OF_RANGE = "balance out of range"
TIME_LIMIT_EXCEEDED = "time limit exceeded"


class State(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


class BalanceRule:
    """Percentage balance: the game ends the moment it leaves the band."""
    clears_rows = False
    soft_drop = False

    def __init__(self, config: GameConfig):
        self.config = config
        self.balance = float(config.start_balance)

    def reset(self):
        self.balance = float(self.config.start_balance)

    def after_place(self, game: "Game", report: PlacementReport) -> Optional[str]:
        self.balance = min(100.0, max(0.0, self.balance + report.balance_delta))
        lo, hi = self.config.balance_band
        if self.balance < lo or self.balance > hi:
            return BALANCE_OUT_OF_RANGE
        return None

    def on_tick(self, game: "Game") -> Optional[str]:
        return None


class ZoneRule:
    """Stack position: once a solid layer exists, the top of the stack gets
    ``warning_duration_ms`` to return to the safe band before the game ends.
    """
    clears_rows = True
    soft_drop = True

    def __init__(self, config: GameConfig):
        self.config = config
        self.reset()

    def reset(self):
        self.deadline: Optional[float] = None
        self.has_safe_layer = False
        self._layer_seen = False
        self.excess_touches = 0
        self.overdraft_touches = 0

    def after_place(self, game: "Game", report: PlacementReport) -> Optional[str]:
        # solid rows are cleared right after placement, so remember the layer here
        if game.board.has_solid_row_above(self.config.overdraft_row):
            self._layer_seen = True
        if report.touched_above_excess_line:
            self.excess_touches += 1
        if report.touched_below_overdraft_line:
            self.overdraft_touches += 1
        return None

    def out_of_band(self, top_y: float) -> bool:
        return top_y > self.config.overdraft_y or top_y < self.config.excess_y

    def on_tick(self, game: "Game") -> Optional[str]:
        self.has_safe_layer = self._layer_seen or game.board.has_solid_row_above(self.config.overdraft_row)
        if not self.has_safe_layer:
            return None
        top = game.board.top_occupied_row_pixel_y()
        if top is None:
            return None
        now = game.elapsed_ms
        if not self.out_of_band(top):
            if self.deadline is not None:
                logger.info("stack back in the safe band, warning cleared")
            self.deadline = None
            return None
        if self.deadline is None:
            self.deadline = now + self.config.warning_duration_ms
            logger.warning("stack top at y=%d outside the safe band, %d ms to recover",
                           top, self.config.warning_duration_ms)
            return None
        if now >= self.deadline:
            return TIME_LIMIT_EXCEEDED
        return None

    def remaining_ms(self, now: float) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - now)


def make_rule(config: GameConfig):
    return BalanceRule(config) if config.is_balance_variant else ZoneRule(config)


@dataclass(frozen=True)
class PieceView:
    shape: Shape
    kind: Kind
    x: int
    y: int
    rotation: int
    cells: Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class GameSnapshot:
    state: State
    cause: Optional[str]
    grid: Tuple[Tuple[Optional[Kind], ...], ...]
    piece: Optional[PieceView]
    elapsed_ms: float
    balance: Optional[float]
    blocks_placed: int
    rows_cleared: int
    deadline: Optional[float]
    warning_remaining_ms: Optional[float]
    has_safe_layer: bool
    excess_touches: int = 0
    overdraft_touches: int = 0


class Game:
    def __init__(self, config: Optional[GameConfig] = None, rng=None, seed: Optional[int] = None):
        self.config = (config or GameConfig()).validate(SHAPES)
        self.rng = rng if rng is not None else LCGRandom(seed)
        self.rule = make_rule(self.config)
        self.state = State.IDLE
        self._new_session()

    # ---------- lifecycle ----------
    def _new_session(self):
        self.board = Board(self.config)
        self.rule.reset()
        self.piece: Optional[Piece] = None
        self.cause: Optional[str] = None
        self.elapsed_ms = self.drop_timer = 0.0
        self.soft_drop = False
        self.blocks_placed = self.rows_cleared = 0

    def start(self):
        self._new_session()
        self.state = State.RUNNING
        logger.info("session started (%s rules)", type(self.rule).__name__)
        self._spawn()

    def reset(self):
        self._new_session()
        self.state = State.IDLE

    def end(self, cause: str):
        if self.state is not State.RUNNING:
            return
        self.state = State.ENDED
        self.cause = cause
        logger.info("game over: %s after %.1fs, %d blocks", cause, self.elapsed_ms / 1000, self.blocks_placed)

    @property
    def running(self) -> bool:
        return self.state is State.RUNNING

    @property
    def balance(self) -> Optional[float]:
        return getattr(self.rule, "balance", None)

    def drop_interval(self) -> int:
        if self.soft_drop and self.rule.soft_drop:
            return self.config.fast_drop_ms
        return self.config.normal_drop_ms

    # ---------- input ----------
    def move(self, dx: int) -> bool:
        if not self.running or self.piece is None:
            return False
        return self.piece.move(self.board, dx)

    def rotate(self) -> bool:
        if not self.running or self.piece is None:
            return False
        return self.piece.rotate(self.board)

    def set_soft_drop(self, held: bool):
        if self.running:
            self.soft_drop = bool(held)

    # ---------- frame update ----------
    def tick(self, delta_ms: float):
        if not self.running:
            return
        self.elapsed_ms += delta_ms
        self.drop_timer += delta_ms
        if self.drop_timer >= self.drop_interval():
            self.drop_timer = 0.0
            if self.piece is not None:
                if self.board.is_landed(self.piece):
                    self._land()
                else:
                    self.piece.drop()
        if self.running:
            cause = self.rule.on_tick(self)
            if cause:
                self.end(cause)

    def _land(self):
        report = self.board.place(self.piece, self.blocks_placed)
        self.blocks_placed += 1
        self.piece = None
        cause = self.rule.after_place(self, report)
        if cause:
            self.end(cause)
            return
        if self.rule.clears_rows:
            self.rows_cleared += self.board.clear_solid_rows()
        self._spawn()

    def _spawn(self):
        self.piece = Piece.spawn(self.rng, self.config.board_cols, self.config.cell_size)
        logger.debug("spawned %s %s at column %d", self.piece.kind.value, self.piece.shape, self.piece.x)
        if self.piece.collides(self.board):
            self.end(STACK_TOO_HIGH)

    # ---------- queries ----------
    def snapshot(self) -> GameSnapshot:
        p = self.piece
        view = None
        if p is not None:
            view = PieceView(p.rotated_shape(), p.kind, p.x, p.y, p.rotation, tuple(p.cells()))
        return GameSnapshot(
            state=self.state,
            cause=self.cause,
            grid=self.board.snapshot(),
            piece=view,
            elapsed_ms=self.elapsed_ms,
            balance=self.balance,
            blocks_placed=self.blocks_placed,
            rows_cleared=self.rows_cleared,
            deadline=getattr(self.rule, "deadline", None),
            warning_remaining_ms=self.rule.remaining_ms(self.elapsed_ms) if isinstance(self.rule, ZoneRule) else None,
            has_safe_layer=getattr(self.rule, "has_safe_layer", False),
            excess_touches=getattr(self.rule, "excess_touches", 0),
            overdraft_touches=getattr(self.rule, "overdraft_touches", 0),
        )
