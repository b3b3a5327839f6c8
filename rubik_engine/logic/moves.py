# rubik_engine/logic/moves.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

from rubik_engine.core.rotations import Axis

VALID_AXES: Set[str] = {"x", "y", "z"}
VALID_SIGNS: Set[int] = {-1, 1}
VALID_QUARTERS: Set[int] = {1, 2}

VALID_FACES: Set[str] = {"U", "D", "L", "R", "F", "B"}
VALID_SUFFIX: Set[str] = {"", "'", "2"}

# Cara -> (eje, capa). "Horario" = visto desde fuera de la cara.
FACE_TO_LAYER: Dict[str, Tuple[Axis, int]] = {
    "R": ("x", 1),
    "L": ("x", -1),
    "U": ("y", 1),
    "D": ("y", -1),
    "F": ("z", 1),
    "B": ("z", -1),
}
LAYER_TO_FACE: Dict[Tuple[str, int], str] = {v: k for k, v in FACE_TO_LAYER.items()}


@dataclass(frozen=True)
class Move:
    """Giro discreto de una capa exterior.

    Attributes:
        axis: Eje del mundo ('x', 'y', 'z').
        sign: Capa a girar (+1 o -1); también es el sentido de la normal exterior.
        clockwise: Sentido horario visto desde fuera de la cara (a lo largo de +sign·axis).
        quarters: Cantidad de cuartos de vuelta (1 o 2).
    """

    axis: Axis
    sign: int
    clockwise: bool
    quarters: int = 1

    def is_valid(self) -> bool:
        return (
            self.axis in VALID_AXES
            and self.sign in VALID_SIGNS
            and self.quarters in VALID_QUARTERS
        )

    def inverse(self) -> "Move":
        """Giro inverso: mismo eje, capa y cuartos, sentido opuesto.

        Para un medio giro el sentido es irrelevante (180° es su propio inverso).
        """
        return Move(self.axis, self.sign, not self.clockwise, self.quarters)

    def angle_deg(self) -> float:
        """Ángulo con signo alrededor del eje positivo del mundo.

        Horario visto desde fuera equivale a -90° por cuarto alrededor de la
        normal exterior (+sign·axis); alrededor del eje positivo se multiplica por `sign`.
        """
        per_quarter = -90.0 if self.clockwise else 90.0
        return self.sign * per_quarter * self.quarters

    def notation(self) -> str:
        """Notación de cara (ej: "R", "U'", "F2")."""
        face = LAYER_TO_FACE[(self.axis, self.sign)]
        if self.quarters == 2:
            return face + "2"
        return face if self.clockwise else face + "'"

    def __str__(self) -> str:
        return self.notation() if self.is_valid() else repr(self)


def normalize_token(tok: str) -> str:
    """Normaliza un token de movimiento a un formato estándar.

    Reglas principales:
    - Elimina espacios y convierte comilla tipográfica (’ o ‘) a comilla simple (').
    - Acepta notación de una cara con sufijo opcional: "", "'" o "2".
    - Corrige el caso típico "D2'" -> "D2" (ya que el inverso de un 180° es el mismo).

    Args:
        tok: Token de movimiento (por ejemplo: "R", "U'", "F2", "D2'").

    Returns:
        Token normalizado.

    Raises:
        ValueError: Si la cara no es válida o si el sufijo no es válido.
    """
    tok = tok.strip().replace("’", "'").replace("‘", "'")
    if not tok:
        return ""

    base = tok[0].upper()
    suf = tok[1:]

    if base not in VALID_FACES:
        raise ValueError(f"Movimiento inválido: {tok}")

    if suf == "2'":
        suf = "2"

    if suf not in VALID_SUFFIX:
        raise ValueError(f"Sufijo inválido en: {tok}")

    return base + suf


def parse_move(tok: str) -> Move:
    """Convierte un token de notación en un `Move`.

    Args:
        tok: Token como "R", "U'" o "F2".

    Returns:
        El `Move` equivalente.

    Raises:
        ValueError: Si el token es vacío o inválido.
    """
    norm = normalize_token(tok)
    if not norm:
        raise ValueError("Movimiento vacío")

    axis, sign = FACE_TO_LAYER[norm[0]]
    suf = norm[1:]
    if suf == "2":
        return Move(axis, sign, True, 2)
    return Move(axis, sign, suf != "'", 1)


def parse_sequence(text: str) -> List[Move]:
    """Convierte una secuencia escrita como texto en una lista de movimientos.

    La entrada debe separar movimientos por espacios. Por ejemplo:
        "R U R' U'" -> [R, U, R', U']

    Args:
        text: Secuencia de movimientos escrita como string.

    Returns:
        Lista de `Move`, en el mismo orden.

    Raises:
        ValueError: Si algún token es inválido.
    """
    return [parse_move(t) for t in text.split() if t.strip()]


def format_sequence(moves: List[Move]) -> str:
    return " ".join(m.notation() for m in moves)
