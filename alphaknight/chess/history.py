"""
Game history: the ordered moves of a game together with the position each of them produced.

Built from the provenance chain of a Position (every Position remembers the position and move it came from), so the
history can never disagree with the position it belongs to. Append-only by construction: a new move yields a new
Position, hence a longer history; older histories stay valid.
"""

from dataclasses import dataclass
from typing import Iterator, Self

from alphaknight.chess.castling import CastlingRights, derive_castling_rights
from alphaknight.chess.moves import Move
from alphaknight.chess.position import Position
from alphaknight.core.exceptions import GameStateError


@dataclass(frozen=True)
class HistoryEntry:
    move: Move
    position: Position


@dataclass(frozen=True)
class GameHistory:
    start: Position
    entries: tuple[HistoryEntry, ...] = ()

    @classmethod
    def of(cls, position: Position) -> Self:
        """Walk the provenance chain back to the position the game started from"""
        entries: list[HistoryEntry] = []
        current = position
        while current.previous is not None and current.last_move is not None:
            entries.append(HistoryEntry(current.last_move, current))
            current = current.previous
        entries.reverse()
        return cls(start=current, entries=tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self.entries)

    @property
    def moves(self) -> list[Move]:
        return [entry.move for entry in self.entries]

    @property
    def positions(self) -> list[Position]:
        """All positions of the game, the starting one included"""
        return [self.start] + [entry.position for entry in self.entries]

    @property
    def current(self) -> Position:
        return self.entries[-1].position if self.entries else self.start

    def position_at(self, ply: int) -> Position:
        """Navigation view: the position after `ply` moves (0 is the start). Nothing is removed from the history."""
        if not 0 <= ply <= len(self.entries):
            raise GameStateError(f"No position after {ply} moves in a game of {len(self.entries)} moves")
        return self.positions[ply]

    def castling_rights(self) -> CastlingRights:
        """Derive the castling rights from the moves played (rather than trusting the flags stored on the positions)"""
        return derive_castling_rights(self.moves, initial=self.start.castling_rights)

    def to_uci(self) -> list[str]:
        return [move.to_uci() for move in self.moves]
