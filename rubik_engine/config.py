# rubik_engine/config.py
"""
Constantes de configuración del motor del cubo y de su interfaz.
"""
from __future__ import annotations

import os

# Gestos: distancia mínima (unidades de mundo) para que un drag cuente como giro
DRAG_THRESHOLD: float = 0.18

# Scramble por defecto
SCRAMBLE_LENGTH: int = 20

# Animación
QUARTER_TURN_MS: int = 180   # duración de un cuarto de vuelta
ANIM_TICK_MS: int = 16       # ~60fps
ANIM_STEP_DEG: float = 90.0 * ANIM_TICK_MS / QUARTER_TURN_MS

# Tolerancia al redondear posiciones/orientaciones tras un giro
SNAP_TOLERANCE: float = 1e-3

# Si es True, una falla de consistencia interna lanza CubeConsistencyError;
# si es False, se registra en el log y se re-ajusta el estado.
STRICT_CONSISTENCY: bool = os.environ.get("RUBIK_ENGINE_STRICT", "0") not in ("", "0", "false", "False")

# Cercanía: exigir orientación identidad además de posición (ver DESIGN.md)
CLOSENESS_REQUIRE_IDENTITY: bool = False
