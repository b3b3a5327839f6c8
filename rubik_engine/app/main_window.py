# rubik_engine/app/main_window.py
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from rubik_engine.config import SCRAMBLE_LENGTH
from rubik_engine.core.session import CubeSession
from rubik_engine.logic.moves import Move
from rubik_engine.render.cube_gl_widget import CubeGLWidget

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Ventana principal de la aplicación (UI) del cubo Rubik de cubelets.

    Esta clase coordina:
    - La sesión del núcleo (`CubeSession`): giros, historial, modo y cercanía
    - La visualización y animación 3D (`CubeGLWidget`)
    - Los comandos Reset / Scramble / Assemble / Setup / Play
    """

    def __init__(self, strict: Optional[bool] = None) -> None:
        """Inicializa la ventana principal, crea la UI y conecta señales.

        Args:
            strict: Modo estricto del motor de giros (None = valor de config).
        """
        super().__init__()
        self.setWindowTitle("Rubik 3D - cubelets")

        # --- Núcleo + render ---
        self.session: CubeSession = CubeSession(strict=strict)
        self.gl_widget: CubeGLWidget = CubeGLWidget(self.session, self)

        # --- UI ---
        root = QWidget()
        root_layout = QHBoxLayout(root)
        root_layout.addWidget(self.gl_widget, 1)

        panel = QWidget()
        panel_layout = QVBoxLayout(panel)
        panel.setFixedWidth(320)

        self.lbl_state = QLabel("")
        panel_layout.addWidget(self.lbl_state)

        # Botones principales
        row_main = QHBoxLayout()
        self.btn_reset = QPushButton("Reset")
        self.btn_assemble = QPushButton("Assemble")
        row_main.addWidget(self.btn_reset)
        row_main.addWidget(self.btn_assemble)
        panel_layout.addLayout(row_main)

        # Scramble
        panel_layout.addWidget(QLabel("Scramble (mezclar)"))
        row_scr = QHBoxLayout()
        self.spin_scramble = QSpinBox()
        self.spin_scramble.setRange(1, 200)
        self.spin_scramble.setValue(SCRAMBLE_LENGTH)
        self.btn_scramble = QPushButton("Scramble")
        row_scr.addWidget(self.spin_scramble, 1)
        row_scr.addWidget(self.btn_scramble, 1)
        panel_layout.addLayout(row_scr)

        # Aplicar secuencia
        panel_layout.addWidget(QLabel("Aplicar secuencia (ej: R U R' U')"))
        self.txt_seq = QLineEdit()
        self.txt_seq.setPlaceholderText("Ej: R U R' U'")
        panel_layout.addWidget(self.txt_seq)
        self.btn_apply = QPushButton("Aplicar")
        panel_layout.addWidget(self.btn_apply)

        # Modos
        panel_layout.addWidget(QLabel("Modo"))
        row_mode = QHBoxLayout()
        self.btn_setup = QPushButton("Start")
        self.btn_play = QPushButton("Play")
        row_mode.addWidget(self.btn_setup)
        row_mode.addWidget(self.btn_play)
        panel_layout.addLayout(row_mode)

        self.lbl_setup = QLabel("")
        panel_layout.addWidget(self.lbl_setup)

        # Cercanía al estado resuelto
        panel_layout.addWidget(QLabel("Cercanía"))
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(0)
        panel_layout.addWidget(self.progress_bar)

        # Historial (movimientos)
        panel_layout.addWidget(QLabel("Historial de movimientos"))
        self.list_history = QListWidget()
        panel_layout.addWidget(self.list_history, 1)

        root_layout.addWidget(panel)
        self.setCentralWidget(root)

        # --- Conexiones ---
        self.btn_reset.clicked.connect(self.on_reset)
        self.btn_scramble.clicked.connect(self.on_scramble)
        self.btn_assemble.clicked.connect(self.on_assemble)
        self.btn_apply.clicked.connect(self.on_apply_sequence)
        self.btn_setup.clicked.connect(self.on_toggle_setup)
        self.btn_play.clicked.connect(self.on_play)

        # Señal desde OpenGL: giro aplicado al final de la animación
        self.gl_widget.move_applied.connect(self.on_move_applied)
        self.gl_widget.turn_aborted.connect(self.on_turn_aborted)

        # Atajos
        self.btn_reset.setShortcut("Ctrl+R")
        self.btn_assemble.setShortcut("Ctrl+Z")

        self._refresh()

    # -------------------
    # Helpers UI
    # -------------------
    def _refresh(self) -> None:
        """Actualiza estado, contador de setup, barra de progreso y botones."""
        self.lbl_state.setText(
            "Estado: resuelto ✅" if self.session.is_solved() else "Estado: mezclado 🔄"
        )

        if self.session.mode() == "setup":
            self.lbl_setup.setText(f"Setup moves: {self.session.setup_count()}")
            self.btn_setup.setText("Stop")
        else:
            self.lbl_setup.setText("")
            self.btn_setup.setText("Start")

        self.progress_bar.setValue(round(self.session.progress() * 100))
        self._set_controls_enabled(not self.session.is_busy())

    def _refresh_history(self) -> None:
        self.list_history.clear()
        for mv in self.session.history():
            self.list_history.addItem(mv.notation())
        self.list_history.scrollToBottom()

    def _set_controls_enabled(self, enabled: bool) -> None:
        """Habilita o deshabilita los controles principales.

        Args:
            enabled: True para habilitar; False para deshabilitar (por ejemplo durante animación).
        """
        self.btn_reset.setEnabled(enabled)
        self.btn_scramble.setEnabled(enabled)
        self.btn_apply.setEnabled(enabled)
        self.txt_seq.setEnabled(enabled)
        self.spin_scramble.setEnabled(enabled)
        self.btn_setup.setEnabled(enabled)
        self.btn_play.setEnabled(enabled)
        self.btn_assemble.setEnabled(enabled and len(self.session.history()) > 0)

    # -------------------
    # Giro aplicado (desde GL)
    # -------------------
    def on_move_applied(self, move: Move, record: bool) -> None:
        """Callback cuando el GL widget confirma que un giro terminó de aplicarse.

        Args:
            move: Giro aplicado.
            record: Si quedó registrado en el historial (False durante Assemble).
        """
        self._refresh_history()
        self._refresh()

    def on_turn_aborted(self, msg: str) -> None:
        """La secuencia se descartó por una falla de consistencia (modo estricto)."""
        QMessageBox.warning(self, "Estado inconsistente", msg)
        self._refresh_history()
        self._refresh()

    def _on_sequence_done(self) -> None:
        self._refresh_history()
        self._refresh()

    # -------------------
    # Botones
    # -------------------
    def on_reset(self) -> None:
        """Reconstruye el cubo resuelto y limpia historial y contador de setup."""
        if not self.session.reset():
            return
        self.gl_widget.update()
        self._refresh_history()
        self._refresh()

    def on_scramble(self) -> None:
        """Mezcla el cubo aplicando N giros aleatorios."""
        n = int(self.spin_scramble.value())
        if self.session.scramble(n, on_done=self._on_sequence_done):
            self._refresh_history()
            self._refresh()

    def on_assemble(self) -> None:
        """Deshace el historial completo con giros inversos."""
        if self.session.assemble(on_done=self._on_sequence_done):
            self._refresh()

    def on_apply_sequence(self) -> None:
        """Aplica una secuencia ingresada por el usuario (ej: 'R U R' U'')."""
        seq = self.txt_seq.text().strip()
        if not seq:
            return

        try:
            started = self.session.apply_sequence(seq, on_done=self._on_sequence_done)
        except ValueError as exc:
            QMessageBox.warning(self, "Secuencia inválida", str(exc))
            return

        if started:
            self._refresh()

    def on_toggle_setup(self) -> None:
        """Inicia/termina el modo setup (reinicia el contador al iniciar)."""
        if self.session.toggle_setup():
            self._refresh_history()
            self._refresh()

    def on_play(self) -> None:
        """Pasa al modo play y muestra la cercanía."""
        if self.session.play():
            self._refresh()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Evento de cierre de ventana: completa el giro en curso para no dejar estado a medias.

        Args:
            event: Evento de cierre de Qt.
        """
        self.gl_widget.skip_animation()
        logger.info("Cerrando (historial: %d giros)", len(self.session.history()))
        event.accept()
