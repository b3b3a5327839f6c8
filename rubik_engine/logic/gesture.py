# rubik_engine/logic/gesture.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from rubik_engine.config import DRAG_THRESHOLD
from rubik_engine.core.rotations import AXIS_INDEX, Axis, Vec3f
from rubik_engine.logic.moves import Move

WORLD_UP: Vec3f = (0.0, 1.0, 0.0)
WORLD_RIGHT: Vec3f = (1.0, 0.0, 0.0)


def cross(a: Sequence[float], b: Sequence[float]) -> Vec3f:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def sub(a: Sequence[float], b: Sequence[float]) -> Vec3f:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def normalize(v: Sequence[float]) -> Vec3f:
    n = math.sqrt(dot(v, v))
    if n == 0.0:
        return (0.0, 0.0, 0.0)
    return (v[0] / n, v[1] / n, v[2] / n)


def axis_of_vector(v: Sequence[float]) -> Axis:
    """Eje de coordenadas más alineado con `v` (los empates van a 'z')."""
    ax, ay, az = abs(v[0]), abs(v[1]), abs(v[2])
    if ax > ay and ax > az:
        return "x"
    if ay > ax and ay > az:
        return "y"
    return "z"


def sign_of_axis(v: Sequence[float], axis: Axis) -> int:
    """Signo de `v` sobre `axis`; un cero se toma como +1."""
    c = v[AXIS_INDEX[axis]]
    return -1 if c < 0 else 1


def compute_face_basis(normal: Sequence[float]) -> Tuple[Vec3f, Vec3f]:
    """Base ortonormal (u derecha, v arriba) del plano de una cara.

    Args:
        normal: Normal exterior de la cara en el mundo.

    Returns:
        (u, v) con u = up × n (o right × n si n es paralela a up) y v = n × u.
    """
    u = cross(WORLD_UP, normal)
    if dot(u, u) < 1e-6:
        u = cross(WORLD_RIGHT, normal)
    u = normalize(u)
    v = normalize(cross(normal, u))
    return u, v


def move_from_drag(
    normal: Sequence[float],
    drag: Sequence[float],
    threshold: float = DRAG_THRESHOLD,
) -> Optional[Move]:
    """Traduce un drag sobre una cara a un giro de esa cara.

    - Eje y capa: los de la normal de la cara.
    - Si domina la componente u: horario si u > 0.
    - Si domina la componente v: horario si v < 0 (arrastrar hacia arriba es antihorario).
    - Si ambas componentes están bajo el umbral, es un click: no hay giro.

    Args:
        normal: Normal exterior de la cara (mundo).
        drag: Vector de arrastre en el mundo (se proyecta sobre u y v).
        threshold: Magnitud mínima para considerar el drag.

    Returns:
        `Move` de un cuarto de vuelta, o None si no hubo giro.
    """
    axis = axis_of_vector(normal)
    sign = sign_of_axis(normal, axis)
    u, v = compute_face_basis(normal)

    du = dot(drag, u)
    dv = dot(drag, v)
    adu, adv = abs(du), abs(dv)
    if max(adu, adv) < threshold:
        return None

    if adu >= adv:
        clockwise = du > 0
    else:
        clockwise = dv < 0
    return Move(axis, sign, clockwise, 1)


def half_turn_for_face(normal: Sequence[float]) -> Move:
    """Medio giro de la cara con esa normal (doble click); el sentido es irrelevante."""
    axis = axis_of_vector(normal)
    return Move(axis, sign_of_axis(normal, axis), True, 2)


@dataclass(frozen=True)
class DragInfo:
    """Datos capturados al iniciar un drag sobre un sticker."""

    normal: Vec3f
    axis: Axis
    sign: int
    start_point: Vec3f
    cubelet_id: Optional[int]


class GestureTranslator:
    """Convierte gestos de puntero (pick + release, doble click) en giros.

    Es el único lugar donde se encuentran la geometría de pantalla/mundo y la
    semántica discreta de los giros.
    """

    def __init__(self, threshold: float = DRAG_THRESHOLD) -> None:
        self.threshold: float = threshold
        self._drag: Optional[DragInfo] = None

    @property
    def dragging(self) -> bool:
        return self._drag is not None

    @property
    def drag_info(self) -> Optional[DragInfo]:
        return self._drag

    def pick(
        self,
        world_point: Sequence[float],
        world_normal: Sequence[float],
        cubelet_id: Optional[int] = None,
    ) -> DragInfo:
        """Inicia un drag en un punto de una cara.

        Args:
            world_point: Punto tocado (en el plano de la cara).
            world_normal: Normal exterior de la cara tocada.
            cubelet_id: Cubelet tocado (informativo).

        Returns:
            La información del drag iniciado.
        """
        normal = normalize(world_normal)
        axis = axis_of_vector(normal)
        self._drag = DragInfo(
            normal=normal,
            axis=axis,
            sign=sign_of_axis(normal, axis),
            start_point=(float(world_point[0]), float(world_point[1]), float(world_point[2])),
            cubelet_id=cubelet_id,
        )
        return self._drag

    def release(self, world_point: Sequence[float]) -> Optional[Move]:
        """Termina el drag y decide el giro (None si fue un click o no había drag)."""
        drag = self._drag
        self._drag = None
        if drag is None:
            return None
        return move_from_drag(drag.normal, sub(world_point, drag.start_point), self.threshold)

    def cancel(self) -> None:
        self._drag = None

    def double_activate(self, world_normal: Sequence[float]) -> Move:
        self._drag = None
        return half_turn_for_face(normalize(world_normal))
