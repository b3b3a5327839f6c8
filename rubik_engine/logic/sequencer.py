# rubik_engine/logic/sequencer.py
from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional, Tuple

from rubik_engine.core.turn_engine import PendingTurn, TurnEngine
from rubik_engine.logic.moves import Move

logger = logging.getLogger(__name__)

Step = Tuple[Move, bool]
Animator = Callable[[PendingTurn], None]


class TurnSequencer:
    """Emite giros de a uno, esperando que cada uno termine antes del siguiente.

    - Sin animador: cada giro se completa de inmediato (modo headless/tests).
    - Con animador: se le entrega el `PendingTurn` y se espera la notificación
      de fin del motor (el render llama a `TurnEngine.complete_turn`).

    Los pasos se piden de forma perezosa, así Assemble saca el historial de a
    un giro por vez.
    """

    def __init__(self, engine: TurnEngine, animator: Optional[Animator] = None) -> None:
        self.engine: TurnEngine = engine
        self.animator: Optional[Animator] = animator

        self._steps: Optional[Iterator[Step]] = None
        self._on_done: Optional[Callable[[], None]] = None
        self._waiting: bool = False
        self._dispatching: bool = False

        engine.add_listener(self._on_turn_complete)

    @property
    def busy(self) -> bool:
        return self._steps is not None

    def run(self, steps: Iterable[Step], on_done: Optional[Callable[[], None]] = None) -> bool:
        """Ejecuta una secuencia de pasos (giro, record).

        Args:
            steps: Pasos a ejecutar, en orden.
            on_done: Callback opcional al terminar la secuencia.

        Returns:
            False si ya había una secuencia o un giro en curso.
        """
        if self.busy or self.engine.turning:
            logger.debug("Secuencia rechazada: hay otra en curso")
            return False

        self._steps = iter(steps)
        self._on_done = on_done
        self._advance()
        return True

    def _advance(self) -> None:
        try:
            while self._steps is not None:
                step = next(self._steps, None)
                if step is None:
                    self._finish()
                    return

                move, record = step
                pending = self.engine.begin_turn(move, record)
                if pending is None:
                    continue

                if self.animator is None:
                    self.engine.complete_turn()
                    continue

                self._waiting = True
                self._dispatching = True
                try:
                    self.animator(pending)
                finally:
                    self._dispatching = False
                if self._waiting:
                    return
        except Exception:
            self.abort()
            raise

    def abort(self) -> None:
        """Descarta la secuencia en curso sin llamar a `on_done`."""
        self._steps = None
        self._on_done = None
        self._waiting = False

    def _on_turn_complete(self, move: Move, record: bool) -> None:
        if not self._waiting:
            return
        self._waiting = False
        # Si el animador completó el giro dentro de su propia llamada, el bucle
        # de _advance continúa solo.
        if not self._dispatching:
            self._advance()

    def _finish(self) -> None:
        on_done = self._on_done
        self._steps = None
        self._on_done = None
        if on_done is not None:
            on_done()
