# rubik_engine/core/rotations.py
from __future__ import annotations

import itertools
import math
from typing import Dict, List, Literal, Sequence, Tuple

Axis = Literal["x", "y", "z"]
Vec3i = Tuple[int, int, int]
Vec3f = Tuple[float, float, float]
Matrix3 = Tuple[Vec3i, Vec3i, Vec3i]
Matrix3f = Tuple[Vec3f, Vec3f, Vec3f]

AXES: Tuple[Axis, Axis, Axis] = ("x", "y", "z")
AXIS_INDEX: Dict[str, int] = {"x": 0, "y": 1, "z": 2}
LATTICE: Tuple[int, int, int] = (-1, 0, 1)

IDENTITY: Matrix3 = ((1, 0, 0), (0, 1, 0), (0, 0, 1))


def axis_vector(axis: Axis, sign: int = 1) -> Vec3i:
    """Vector unitario del eje `axis` multiplicado por `sign`."""
    i = AXIS_INDEX[axis]
    return tuple(sign if k == i else 0 for k in range(3))  # type: ignore[return-value]


def det3(m: Sequence[Sequence[float]]) -> float:
    (a, b, c), (d, e, f), (g, h, i) = m
    return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)


def mat_mul(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> tuple:
    """Producto de matrices 3x3 (enteras o flotantes)."""
    return tuple(
        tuple(sum(a[r][k] * b[k][c] for k in range(3)) for c in range(3))
        for r in range(3)
    )


def mat_vec(m: Sequence[Sequence[float]], v: Sequence[float]) -> tuple:
    """Aplica una matriz 3x3 a un vector."""
    return tuple(m[r][0] * v[0] + m[r][1] * v[1] + m[r][2] * v[2] for r in range(3))


def transpose(m: Sequence[Sequence[float]]) -> tuple:
    return tuple(tuple(m[r][c] for r in range(3)) for c in range(3))


def axis_angle_matrix(axis: Axis, angle_deg: float) -> Matrix3f:
    """Matriz de rotación (flotante) alrededor de un eje del mundo.

    Usa la regla de la mano derecha: un ángulo positivo gira en sentido
    antihorario visto desde la punta del eje.

    Args:
        axis: Eje de rotación ('x', 'y' o 'z').
        angle_deg: Ángulo en grados.

    Returns:
        Matriz 3x3 como tupla de filas.
    """
    a = math.radians(angle_deg)
    c = math.cos(a)
    s = math.sin(a)

    if axis == "x":
        return ((1.0, 0.0, 0.0), (0.0, c, -s), (0.0, s, c))
    if axis == "y":
        return ((c, 0.0, s), (0.0, 1.0, 0.0), (-s, 0.0, c))
    if axis == "z":
        return ((c, -s, 0.0), (s, c, 0.0), (0.0, 0.0, 1.0))
    raise ValueError(f"Eje no soportado: {axis}")


def generate_cube_rotations() -> List[Matrix3]:
    """Genera las 24 rotaciones propias del cubo.

    Son las matrices de permutación con signo (un único ±1 por fila y columna)
    con determinante +1.

    Returns:
        Lista ordenada lexicográficamente de 24 matrices enteras.
    """
    basis = [(1, 0, 0), (0, 1, 0), (0, 0, 1)]
    mats: List[Matrix3] = []

    for perm in itertools.permutations(basis, 3):
        for signs in itertools.product((1, -1), repeat=3):
            rows = tuple(
                tuple(signs[r] * perm[r][k] for k in range(3)) for r in range(3)
            )
            if det3(rows) == 1:
                mats.append(rows)  # type: ignore[arg-type]

    uniq = sorted(set(mats))
    if len(uniq) != 24:
        raise AssertionError(f"Se esperaban 24 rotaciones, se obtuvieron {len(uniq)}")
    return uniq


CUBE_ROTATIONS: List[Matrix3] = generate_cube_rotations()
_ROTATION_SET = frozenset(CUBE_ROTATIONS)


def is_cube_rotation(m: Matrix3) -> bool:
    """Indica si `m` es exactamente una de las 24 rotaciones del cubo."""
    return m in _ROTATION_SET


def snap_scalar(x: float) -> int:
    return int(round(x))


def snap_vector(v: Sequence[float]) -> Vec3i:
    """Redondea cada componente al entero más cercano."""
    return (snap_scalar(v[0]), snap_scalar(v[1]), snap_scalar(v[2]))


def snap_rotation(m: Sequence[Sequence[float]]) -> Tuple[Matrix3, float]:
    """Ajusta una matriz flotante a la rotación del cubo más cercana.

    La más cercana es la que maximiza traza(Rᵀ·M) (equivalente a minimizar la
    distancia de Frobenius).

    Args:
        m: Matriz 3x3 (posiblemente con ruido de punto flotante).

    Returns:
        (rotación exacta, residuo máximo por componente).
    """
    best = CUBE_ROTATIONS[0]
    best_score = -math.inf
    for r in CUBE_ROTATIONS:
        score = sum(r[i][j] * m[i][j] for i in range(3) for j in range(3))
        if score > best_score:
            best, best_score = r, score

    residual = max(abs(best[i][j] - m[i][j]) for i in range(3) for j in range(3))
    return best, residual


def rotation_maps_axes_to_axes(m: Sequence[Sequence[float]], tol: float = 1e-3) -> bool:
    """Comprueba que cada eje intrínseco rotado cae sobre un eje del mundo.

    Args:
        m: Orientación (columnas = ejes intrínsecos en coordenadas del mundo).
        tol: Tolerancia.

    Returns:
        True si cada columna tiene una componente de magnitud 1.
    """
    for col in transpose(m):
        if not any(abs(abs(c) - 1.0) < tol for c in col):
            return False
    return True
