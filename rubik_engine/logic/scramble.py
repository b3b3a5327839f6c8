# rubik_engine/logic/scramble.py
from __future__ import annotations

import random
from typing import List, Optional, Tuple

from rubik_engine.config import SCRAMBLE_LENGTH
from rubik_engine.core.rotations import Axis
from rubik_engine.logic.moves import Move

FACES: List[Tuple[Axis, int]] = [
    ("x", 1), ("x", -1),
    ("y", 1), ("y", -1),
    ("z", 1), ("z", -1),
]


def generate_scramble(n: int = SCRAMBLE_LENGTH, seed: Optional[int] = None) -> List[Move]:
    """Genera una secuencia de mezcla (scramble) aleatoria para el cubo.

    Cada movimiento elige una de las 6 caras exteriores y un sentido al azar
    (cuarto de vuelta). No se restringen repeticiones ni caras consecutivas.

    Args:
        n: Cantidad de movimientos a generar.
        seed: Semilla opcional para obtener resultados reproducibles. Si es None,
            el scramble será distinto en cada ejecución.

    Returns:
        Lista de `Move` con `quarters = 1`.

    Raises:
        ValueError: Si `n` es menor o igual a 0.
    """
    if n <= 0:
        raise ValueError("n debe ser mayor que 0.")

    rng = random.Random(seed)

    seq: List[Move] = []
    for _ in range(n):
        axis, sign = rng.choice(FACES)
        seq.append(Move(axis, sign, rng.random() < 0.5, 1))
    return seq
