# rubik_engine/core/session.py
from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence, Tuple

from rubik_engine.config import SCRAMBLE_LENGTH
from rubik_engine.core.closeness import compute_closeness
from rubik_engine.core.cubelets import CubeletRegistry
from rubik_engine.core.errors import CubeConsistencyError
from rubik_engine.core.rotations import Axis
from rubik_engine.core.state import Mode, SessionState
from rubik_engine.core.turn_engine import TurnEngine, TurnListener
from rubik_engine.logic.gesture import GestureTranslator
from rubik_engine.logic.moves import Move, parse_sequence
from rubik_engine.logic.scramble import generate_scramble
from rubik_engine.logic.sequencer import Animator, TurnSequencer

logger = logging.getLogger(__name__)


class CubeSession:
    """Fachada del núcleo: lo que ven la entrada (gestos/botones) y la salida (UI).

    Coordina:
    - El registro de cubelets (`CubeletRegistry`)
    - El estado de sesión (modo, contador de setup, historial)
    - El motor de giros (`TurnEngine`) y el secuenciador (`TurnSequencer`)
    - El traductor de gestos (`GestureTranslator`)

    Todos los comandos se rechazan (retornan False) mientras hay un giro o una
    secuencia en curso.
    """

    def __init__(self, strict: Optional[bool] = None, animator: Optional[Animator] = None) -> None:
        """Crea una sesión con el cubo resuelto.

        Args:
            strict: Modo estricto del motor (ver `TurnEngine`).
            animator: Callback opcional que anima cada `PendingTurn`; si se usa,
                el animador debe llamar a `finish_turn()` al terminar.
        """
        self.registry: CubeletRegistry = CubeletRegistry()
        self.state: SessionState = SessionState()
        self.engine: TurnEngine = TurnEngine(self.registry, self.state, strict)
        self.sequencer: TurnSequencer = TurnSequencer(self.engine, animator)
        self.gestures: GestureTranslator = GestureTranslator()

    # -------------------
    # Colaboradores externos
    # -------------------
    def set_animator(self, animator: Optional[Animator]) -> None:
        self.sequencer.animator = animator

    def finish_turn(self) -> Optional[Move]:
        """El render avisa que terminó la animación del giro en curso.

        Raises:
            CubeConsistencyError: En modo estricto; la secuencia en curso se descarta.
        """
        try:
            return self.engine.complete_turn()
        except CubeConsistencyError:
            self.sequencer.abort()
            raise

    def add_turn_listener(self, callback: TurnListener) -> None:
        self.engine.add_listener(callback)

    # -------------------
    # Entrada -> núcleo
    # -------------------
    def turn_intent(self, axis: Axis, sign: int, clockwise: bool, quarters: int = 1) -> bool:
        """Solicita un giro interactivo (se registra en el historial).

        Returns:
            True si el giro fue aceptado.
        """
        return self.request_turn(Move(axis, sign, clockwise, quarters))

    def request_turn(self, move: Move) -> bool:
        if not move.is_valid():
            logger.debug("Intento de giro inválido: %r", move)
            return False
        return self.sequencer.run([(move, True)])

    def pick(
        self,
        world_point: Sequence[float],
        world_normal: Sequence[float],
        cubelet_id: Optional[int] = None,
    ) -> bool:
        """Inicia un drag sobre un sticker (ignorado mientras se gira)."""
        if self.is_busy():
            return False
        self.gestures.pick(world_point, world_normal, cubelet_id)
        return True

    def release(self, world_point: Sequence[float]) -> Optional[Move]:
        """Termina el drag; si resulta en un giro, lo solicita.

        Returns:
            El giro aceptado, o None (click, drag sin pick o giro rechazado).
        """
        move = self.gestures.release(world_point)
        if move is None or not self.request_turn(move):
            return None
        return move

    def double_activate(self, world_normal: Sequence[float]) -> Optional[Move]:
        """Doble click sobre una cara: medio giro de esa cara."""
        if self.is_busy():
            return None
        move = self.gestures.double_activate(world_normal)
        return move if self.request_turn(move) else None

    # -------------------
    # Comandos
    # -------------------
    def scramble(
        self,
        count: int = SCRAMBLE_LENGTH,
        seed: Optional[int] = None,
        moves: Optional[Iterable[Move]] = None,
        on_done: Optional[Callable[[], None]] = None,
    ) -> bool:
        """Mezcla el cubo con `count` giros aleatorios (o con `moves` si se da).

        El historial se limpia antes de empezar; los giros de la mezcla se registran.
        """
        if self.is_busy():
            return False

        seq = list(moves) if moves is not None else generate_scramble(count, seed)
        self.state.history.clear()
        logger.info("Scramble de %d giros", len(seq))
        return self.sequencer.run(((m, True) for m in seq), on_done)

    def apply_sequence(self, text: str, on_done: Optional[Callable[[], None]] = None) -> bool:
        """Aplica una secuencia en notación (ej: "R U R' U'").

        Raises:
            ValueError: Si algún token es inválido.
        """
        moves = parse_sequence(text)
        if not moves or self.is_busy():
            return False
        return self.sequencer.run(((m, True) for m in moves), on_done)

    def reset(self) -> bool:
        """Reconstruye el cubo resuelto y limpia historial y contador de setup."""
        if self.is_busy():
            return False

        self.registry.create_solved()
        self.state.history.clear()
        self.state.reset_setup()
        logger.info("Cubo reiniciado")
        return True

    def assemble(self, on_done: Optional[Callable[[], None]] = None) -> bool:
        """Deshace todo el historial aplicando los giros inversos en orden inverso.

        Con el historial vacío no hace nada. Pasa al modo `play` para que la barra
        de cercanía refleje el progreso.
        """
        if self.is_busy() or not len(self.state.history):
            return False

        self.state.mode = "play"
        logger.info("Assemble de %d giros", len(self.state.history))
        return self.sequencer.run(self.state.history.inverse_steps(), on_done)

    def start_setup(self) -> bool:
        if self.is_busy():
            return False
        self.state.mode = "setup"
        self.state.reset_setup()
        self.state.history.clear()
        return True

    def stop_setup(self) -> bool:
        if self.is_busy():
            return False
        self.state.mode = "idle"
        return True

    def toggle_setup(self) -> bool:
        if self.state.mode == "setup":
            return self.stop_setup()
        return self.start_setup()

    def play(self) -> bool:
        if self.is_busy():
            return False
        self.state.mode = "play"
        return True

    # -------------------
    # Núcleo -> salida
    # -------------------
    def is_turning(self) -> bool:
        return self.engine.turning

    def is_busy(self) -> bool:
        return self.engine.turning or self.sequencer.busy

    def closeness(self) -> float:
        return compute_closeness(self.registry)

    def progress(self) -> float:
        """Valor de la barra de progreso: cercanía en modo `play`, 0 en otro caso."""
        return self.closeness() if self.state.mode == "play" else 0.0

    def setup_count(self) -> int:
        return self.state.setup_count

    def mode(self) -> Mode:
        return self.state.mode

    def history(self) -> Tuple[Move, ...]:
        return self.state.history.moves()

    def is_solved(self) -> bool:
        return self.registry.is_solved()
