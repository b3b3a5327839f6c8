# rubik_engine/core/turn_engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from rubik_engine.config import SNAP_TOLERANCE, STRICT_CONSISTENCY
from rubik_engine.core.cubelets import CubeletRegistry, select_layer
from rubik_engine.core.errors import CubeConsistencyError
from rubik_engine.core.rotations import (
    LATTICE,
    Axis,
    axis_angle_matrix,
    mat_mul,
    mat_vec,
    snap_rotation,
    snap_vector,
)
from rubik_engine.core.state import SessionState
from rubik_engine.logic.moves import Move

logger = logging.getLogger(__name__)

TurnListener = Callable[[Move, bool], None]

LAYER_SIZE = 9


@dataclass(frozen=True)
class PendingTurn:
    """Giro en curso: lo que un render necesita para animarlo.

    Attributes:
        move: Giro solicitado.
        record: Si se registrará en el historial al completarse.
        cubelet_ids: Ids de los cubelets de la capa seleccionada.
        axis: Eje positivo del mundo alrededor del cual se gira.
        angle_deg: Ángulo total con signo (regla de la mano derecha).
    """

    move: Move
    record: bool
    cubelet_ids: Tuple[int, ...]
    axis: Axis
    angle_deg: float


class TurnEngine:
    """Máquina de estados de giros: `idle` <-> `turning`.

    Solo un giro puede estar en curso. Las solicitudes mientras se gira se
    rechazan (no se encolan). El giro se divide en dos fases para que un render
    pueda animarlo:

    - `begin_turn`: valida, selecciona la capa y pasa a `turning`.
    - `complete_turn`: rota posición y orientación, ajusta a la red, registra,
      vuelve a `idle` y notifica a los listeners.

    `apply_turn` ejecuta ambas fases de forma sincrónica.
    """

    def __init__(
        self,
        registry: CubeletRegistry,
        state: SessionState,
        strict: Optional[bool] = None,
    ) -> None:
        """Crea el motor.

        Args:
            registry: Registro de cubelets (el motor es su único mutador).
            state: Estado de sesión donde se registran los giros.
            strict: Si True, las fallas de consistencia lanzan excepción.
                Por defecto usa `config.STRICT_CONSISTENCY`.
        """
        self.registry: CubeletRegistry = registry
        self.state: SessionState = state
        self.strict: bool = STRICT_CONSISTENCY if strict is None else strict

        self._pending: Optional[PendingTurn] = None
        self._listeners: List[TurnListener] = []

    # --------------------------
    # Estado
    # --------------------------
    @property
    def turning(self) -> bool:
        return self._pending is not None

    @property
    def pending(self) -> Optional[PendingTurn]:
        return self._pending

    def add_listener(self, callback: TurnListener) -> None:
        """Registra `callback(move, record)`, llamado al completar cada giro."""
        self._listeners.append(callback)

    def remove_listener(self, callback: TurnListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    # --------------------------
    # Giros
    # --------------------------
    def apply_turn(self, move: Move, record: bool = True) -> bool:
        """Aplica un giro completo de forma sincrónica.

        Args:
            move: Giro a aplicar.
            record: Si True, se agrega al historial.

        Returns:
            True si el giro se aplicó; False si fue rechazado.
        """
        if self.begin_turn(move, record) is None:
            return False
        self.complete_turn()
        return True

    def begin_turn(self, move: Move, record: bool = True) -> Optional[PendingTurn]:
        """Inicia un giro: rechaza si hay otro en curso o si es inválido.

        Args:
            move: Giro solicitado.
            record: Si True, se registrará al completarse.

        Returns:
            El `PendingTurn` creado, o None si la solicitud fue rechazada.
        """
        if self._pending is not None:
            logger.debug("Giro rechazado (ya hay uno en curso): %r", move)
            return None
        if not move.is_valid():
            logger.debug("Giro inválido rechazado: %r", move)
            return None

        layer = select_layer(self.registry, move.axis, move.sign)
        if len(layer) != LAYER_SIZE:
            self._fault(
                f"La capa {move.axis}={move.sign} tiene {len(layer)} cubelets (se esperaban {LAYER_SIZE})"
            )

        self._pending = PendingTurn(
            move=move,
            record=record,
            cubelet_ids=tuple(c.id for c in layer),
            axis=move.axis,
            angle_deg=move.angle_deg(),
        )
        return self._pending

    def complete_turn(self) -> Optional[Move]:
        """Termina el giro en curso (si existe) y notifica a los listeners.

        Una vez iniciado, el giro siempre se completa y se ajusta a la red.

        Returns:
            El giro aplicado, o None si no había ninguno en curso.

        Raises:
            CubeConsistencyError: En modo estricto, si el estado quedó inconsistente.
        """
        pending = self._pending
        if pending is None:
            return None

        try:
            self._rotate_layer(pending)
        except CubeConsistencyError:
            self._pending = None
            raise

        if pending.record:
            self.state.record(pending.move)

        self._pending = None
        logger.debug("Giro aplicado: %s (record=%s)", pending.move, pending.record)

        for cb in list(self._listeners):
            cb(pending.move, pending.record)
        return pending.move

    def _rotate_layer(self, pending: PendingTurn) -> None:
        """Rota posición y orientación de la capa y ajusta todo a la red entera."""
        rot = axis_angle_matrix(pending.axis, pending.angle_deg)

        for cid in pending.cubelet_ids:
            c = self.registry.get(cid)

            pos_f = mat_vec(rot, c.position)
            pos = snap_vector(pos_f)
            orient, residual = snap_rotation(mat_mul(rot, c.orientation))

            drift = max(abs(a - b) for a, b in zip(pos, pos_f))
            if drift > SNAP_TOLERANCE or residual > SNAP_TOLERANCE:
                self._fault(f"Cubelet {cid} fuera de la red tras el giro: {pos_f}")
            if any(v not in LATTICE for v in pos):
                self._fault(f"Cubelet {cid} fuera de {{-1,0,1}}³: {pos}")
                pos = tuple(max(-1, min(1, v)) for v in pos)  # type: ignore[assignment]

            c._reseat(pos, orient)

        problems = self.registry.check_invariants()
        if problems:
            self._fault("; ".join(problems))

    def _fault(self, msg: str) -> None:
        if self.strict:
            raise CubeConsistencyError(msg)
        logger.error("Falla de consistencia interna: %s", msg)
