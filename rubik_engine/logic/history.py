# rubik_engine/logic/history.py
from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from rubik_engine.logic.moves import Move


class MoveHistory:
    """Registro ordenado (solo agregar) de los giros ejecutados.

    Se usa únicamente para Assemble: reproducir todo el historial al revés con
    giros invertidos.
    """

    def __init__(self) -> None:
        self._moves: List[Move] = []

    def record(self, move: Move) -> None:
        self._moves.append(move)

    def clear(self) -> None:
        self._moves.clear()

    def pop(self) -> Optional[Move]:
        """Quita y retorna el último giro (None si está vacío)."""
        if not self._moves:
            return None
        return self._moves.pop()

    def moves(self) -> Tuple[Move, ...]:
        return tuple(self._moves)

    def __len__(self) -> int:
        return len(self._moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(list(self._moves))

    def inverse_steps(self) -> Iterator[Tuple[Move, bool]]:
        """Genera los pasos de Assemble de forma perezosa.

        Cada paso saca el último giro del historial en el momento en que se
        pide, y produce su inverso con `record=False`. Termina cuando el
        historial queda vacío.

        Yields:
            Tuplas (giro inverso, False).
        """
        while self._moves:
            yield self._moves.pop().inverse(), False
