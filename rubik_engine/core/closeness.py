# rubik_engine/core/closeness.py
from __future__ import annotations

from typing import Iterable, Optional

from rubik_engine.config import CLOSENESS_REQUIRE_IDENTITY
from rubik_engine.core.cubelets import Cubelet
from rubik_engine.core.rotations import IDENTITY, rotation_maps_axes_to_axes


def is_cubelet_correct(c: Cubelet, require_identity: bool = CLOSENESS_REQUIRE_IDENTITY) -> bool:
    """Indica si un cubelet está en su home y alineado con los ejes del mundo.

    Args:
        c: Cubelet a evaluar.
        require_identity: Si True, exige además orientación identidad.

    Returns:
        True si cuenta como "correcto" para la cercanía.
    """
    if c.position != c.home:
        return False
    if require_identity:
        return c.orientation == IDENTITY
    return rotation_maps_axes_to_axes(c.orientation)


def compute_closeness(
    cubelets: Iterable[Cubelet],
    require_identity: Optional[bool] = None,
) -> float:
    """Fracción de cubelets no-núcleo en su posición y orientación de origen.

    Función pura del estado actual; devuelve 1.0 si no hay cubelets que evaluar.

    Args:
        cubelets: Cubelets del cubo.
        require_identity: Criterio de orientación (por defecto el de config).

    Returns:
        Valor en [0, 1].
    """
    if require_identity is None:
        require_identity = CLOSENESS_REQUIRE_IDENTITY

    correct = 0
    total = 0
    for c in cubelets:
        if c.is_core:
            continue
        total += 1
        if is_cubelet_correct(c, require_identity):
            correct += 1

    if total == 0:
        return 1.0
    return max(0.0, min(1.0, correct / total))
