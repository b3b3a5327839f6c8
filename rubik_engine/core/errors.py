# rubik_engine/core/errors.py
from __future__ import annotations


class CubeConsistencyError(AssertionError):
    """Estado interno inconsistente del cubo (bug lógico o de precisión).

    Se lanza solo en modo estricto; en producción el motor lo registra en el log
    y re-ajusta el estado para no dejar el cubo congelado.
    """
