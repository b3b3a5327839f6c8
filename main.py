# main.py
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional

from PySide6.QtWidgets import QApplication

from rubik_engine.app.main_window import MainWindow


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="rubik-engine", description="Cubo de Rubik 3x3x3 interactivo")
    parser.add_argument("--log-level", default="INFO", help="Nivel de logging (DEBUG, INFO, WARNING...)")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Lanza CubeConsistencyError ante estados inconsistentes",
    )
    return parser.parse_known_args(argv)[0]


def main() -> NoReturn:
    """Punto de entrada de la aplicación.

    Lee las opciones de línea de comandos, configura el logging y levanta la
    ventana principal. Los argumentos no reconocidos quedan para Qt.

    Returns:
        No retorna (finaliza el proceso con `sys.exit`).
    """
    args = parse_args(sys.argv[1:])
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("rubik-engine")
    window = MainWindow(strict=args.strict)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
