# rubik_engine/core/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from rubik_engine.logic.history import MoveHistory
from rubik_engine.logic.moves import Move

Mode = Literal["idle", "setup", "play"]


@dataclass
class SessionState:
    """Estado de sesión: modo, contador de setup e historial.

    Se crea al iniciar, se reinicia con Reset / inicio de Setup y lo leen las
    consultas de la UI.
    """

    mode: Mode = "idle"
    setup_count: int = 0
    setup_sequence: List[Move] = field(default_factory=list)
    history: MoveHistory = field(default_factory=MoveHistory)

    def record(self, move: Move) -> None:
        """Registra un giro completado (y lo cuenta si estamos en setup)."""
        self.history.record(move)
        if self.mode == "setup":
            self.setup_count += 1
            self.setup_sequence.append(move)

    def reset_setup(self) -> None:
        self.setup_count = 0
        self.setup_sequence.clear()
