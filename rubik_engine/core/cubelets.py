# rubik_engine/core/cubelets.py
from __future__ import annotations

import logging
from collections import Counter
from typing import Callable, Iterator, List, Optional, Tuple

from rubik_engine.core.rotations import (
    AXIS_INDEX,
    IDENTITY,
    LATTICE,
    Axis,
    Matrix3,
    Vec3i,
    is_cube_rotation,
    mat_vec,
    snap_scalar,
)

logger = logging.getLogger(__name__)

CORE_HOME: Vec3i = (0, 0, 0)
StateSnapshot = Tuple[Tuple[int, Vec3i, Matrix3], ...]


class Cubelet:
    """Uno de los 27 sub-cubos del puzzle.

    Atributos (solo lectura fuera del motor de giros):
        - `id`: índice 0..26 en orden de creación.
        - `home`: coordenada entera asignada al crearlo; no cambia nunca.
        - `position`: coordenada entera actual en {-1,0,1}³.
        - `orientation`: matriz entera 3x3; sus columnas son los ejes
          intrínsecos del cubelet expresados en el mundo.
    """

    __slots__ = ("_id", "_home", "_position", "_orientation")

    def __init__(self, cubelet_id: int, home: Vec3i) -> None:
        self._id: int = cubelet_id
        self._home: Vec3i = home
        self._position: Vec3i = home
        self._orientation: Matrix3 = IDENTITY

    @property
    def id(self) -> int:
        return self._id

    @property
    def home(self) -> Vec3i:
        return self._home

    @property
    def position(self) -> Vec3i:
        return self._position

    @property
    def orientation(self) -> Matrix3:
        return self._orientation

    @property
    def is_core(self) -> bool:
        return self._home == CORE_HOME

    def _reseat(self, position: Vec3i, orientation: Matrix3) -> None:
        # Solo TurnEngine y CubeletRegistry llaman a este método.
        self._position = position
        self._orientation = orientation

    def visible_faces(self) -> List[Vec3i]:
        """Normales intrínsecas de las caras que llevan sticker.

        Una cara lleva sticker si la coordenada `home` en ese eje es ±1.

        Returns:
            Lista de normales (en coordenadas locales del cubelet).
        """
        out: List[Vec3i] = []
        for i in range(3):
            if self._home[i] != 0:
                n = [0, 0, 0]
                n[i] = self._home[i]
                out.append((n[0], n[1], n[2]))
        return out

    def world_normal(self, local_normal: Vec3i) -> Vec3i:
        """Transforma una normal intrínseca al espacio del mundo."""
        return mat_vec(self._orientation, local_normal)  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Cubelet(id={self._id}, home={self._home}, position={self._position})"


class CubeletRegistry:
    """Dueño de los 27 cubelets y de su identidad.

    La mutación de posición/orientación está reservada al motor de giros.
    Los colaboradores externos (render) pueden registrar callbacks de limpieza
    con `on_dispose`, que se ejecutan antes de cada reconstrucción.
    """

    def __init__(self) -> None:
        self._cubelets: List[Cubelet] = []
        self._dispose_hooks: List[Callable[[List[Cubelet]], None]] = []
        self.create_solved()

    # --------------------------
    # Ciclo de vida
    # --------------------------
    def create_solved(self) -> None:
        """Reconstruye los 27 cubelets en estado resuelto (posición = home, identidad)."""
        if self._cubelets:
            self.dispose()

        cubelets: List[Cubelet] = []
        for x in LATTICE:
            for y in LATTICE:
                for z in LATTICE:
                    cubelets.append(Cubelet(len(cubelets), (x, y, z)))
        self._cubelets = cubelets

    def on_dispose(self, callback: Callable[[List[Cubelet]], None]) -> None:
        """Registra un callback que libera recursos asociados a los cubelets."""
        self._dispose_hooks.append(callback)

    def dispose(self) -> None:
        """Ejecuta los callbacks de limpieza registrados."""
        for hook in list(self._dispose_hooks):
            hook(list(self._cubelets))

    # --------------------------
    # Consultas
    # --------------------------
    def all(self) -> Iterator[Cubelet]:
        return iter(self._cubelets)

    def __iter__(self) -> Iterator[Cubelet]:
        return iter(self._cubelets)

    def __len__(self) -> int:
        return len(self._cubelets)

    def get(self, cubelet_id: int) -> Cubelet:
        return self._cubelets[cubelet_id]

    def at(self, position: Vec3i) -> Optional[Cubelet]:
        """Cubelet que ocupa actualmente `position` (o None)."""
        for c in self._cubelets:
            if c.position == position:
                return c
        return None

    def is_solved(self) -> bool:
        """True si todo cubelet está en su home con orientación identidad."""
        return all(c.position == c.home and c.orientation == IDENTITY for c in self._cubelets)

    def snapshot(self) -> StateSnapshot:
        """Estado inmutable y hasheable (id, posición, orientación) por cubelet."""
        return tuple((c.id, c.position, c.orientation) for c in self._cubelets)

    def check_invariants(self) -> List[str]:
        """Verifica que las posiciones sean una permutación de la red y las
        orientaciones rotaciones válidas.

        Returns:
            Lista de problemas encontrados (vacía si el estado es consistente).
        """
        problems: List[str] = []
        expected = Counter((x, y, z) for x in LATTICE for y in LATTICE for z in LATTICE)
        actual = Counter(c.position for c in self._cubelets)
        if actual != expected:
            problems.append(f"Posiciones no forman una permutación: {sorted(actual - expected)}")

        for c in self._cubelets:
            if not is_cube_rotation(c.orientation):
                problems.append(f"Orientación inválida en cubelet {c.id}: {c.orientation}")
        return problems


def select_layer(cubelets: CubeletRegistry, axis: Axis, sign: int) -> List[Cubelet]:
    """Selecciona los cubelets de una capa según su posición actual.

    Las coordenadas se redondean al entero más cercano para tolerar ruido de
    una animación previa. Si alguna de las tres cae fuera de {-1,0,1}, el
    cubelet se excluye (de cualquier capa) y se registra como falla de consistencia.

    Args:
        cubelets: Registro de cubelets.
        axis: Eje ('x', 'y', 'z').
        sign: Índice de capa (-1, 0 o 1).

    Returns:
        Lista de cubelets en la capa.
    """
    idx = AXIS_INDEX[axis]
    selected: List[Cubelet] = []
    for c in cubelets:
        snapped = [snap_scalar(v) for v in c.position]
        if any(v not in LATTICE for v in snapped):
            logger.error("Cubelet %d fuera de la red: %s", c.id, c.position)
            continue
        if snapped[idx] == sign:
            selected.append(c)
    return selected

