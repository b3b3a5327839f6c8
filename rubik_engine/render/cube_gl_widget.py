# rubik_engine/render/cube_gl_widget.py
from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Tuple

from PySide6.QtCore import QPoint, QTimer, Qt, Signal
from PySide6.QtGui import QMouseEvent, QWheelEvent
from PySide6.QtOpenGLWidgets import QOpenGLWidget

from OpenGL.GL import (
    glBegin,
    glClear,
    glClearColor,
    glColor3f,
    glDisable,
    glEnable,
    glEnd,
    glFlush,
    glLoadIdentity,
    glMatrixMode,
    glReadPixels,
    glRotatef,
    glTranslatef,
    glVertex3f,
    glViewport,
    GL_BLEND,
    GL_COLOR_BUFFER_BIT,
    GL_DEPTH_BUFFER_BIT,
    GL_DEPTH_TEST,
    GL_DITHER,
    GL_MODELVIEW,
    GL_PROJECTION,
    GL_QUADS,
    GL_RGB,
    GL_UNSIGNED_BYTE,
)
from OpenGL.GLU import gluPerspective

from rubik_engine.config import ANIM_STEP_DEG, ANIM_TICK_MS
from rubik_engine.core.cubelets import Cubelet
from rubik_engine.core.errors import CubeConsistencyError
from rubik_engine.core.rotations import Axis, Vec3f, Vec3i
from rubik_engine.core.session import CubeSession
from rubik_engine.core.turn_engine import PendingTurn
from rubik_engine.logic.moves import LAYER_TO_FACE, Move

logger = logging.getLogger(__name__)

StickerKey = Tuple[int, Vec3i]  # (id de cubelet, normal local)

FOV_DEG: float = 45.0

# Color por cara de origen (letras de la paleta clásica W/Y/O/R/G/B)
FACE_COLOR: Dict[str, str] = {
    "U": "W",
    "D": "Y",
    "L": "O",
    "R": "R",
    "F": "G",
    "B": "B",
}


class CubeGLWidget(QOpenGLWidget):
    """Widget OpenGL que dibuja los cubelets e interactúa con la sesión.

    Características:
    - Render OpenGL clásico (sin shaders): cuerpo plástico + stickers por cubelet.
    - Picking por color (funciona con HiDPI): cada sticker tiene un id.
    - Drag "camera-aware": el arrastre en pantalla se lleva al espacio del cubo y
      se entrega al traductor de gestos de la sesión.
    - Doble click: medio giro de la cara.
    - Animación suave del `PendingTurn` con QTimer; al terminar llama a
      `session.finish_turn()`.
    """

    move_applied = Signal(object, bool)  # (Move, record)
    turn_aborted = Signal(str)  # mensaje de la falla de consistencia

    def __init__(self, session: CubeSession, parent=None) -> None:
        """Crea el widget y lo engancha como animador de la sesión.

        Args:
            session: Sesión del cubo (núcleo).
            parent: Widget padre (Qt), opcional.
        """
        super().__init__(parent)
        self.session: CubeSession = session

        # Cámara / orbit
        self.yaw: float = 35.0
        self.pitch: float = -25.0
        self.distance: float = 9.0

        self._last_mouse_pos: QPoint = QPoint()
        self._orbiting: bool = False

        # Cubelets / stickers
        self.cubelet_size: float = 0.98
        self.sticker_margin: float = 0.06
        self.sticker_offset: float = 0.005

        # Selección
        self.selected: Optional[StickerKey] = None
        self._pick_map: Dict[int, Tuple[StickerKey, Vec3f, Vec3f]] = {}

        # Drag
        self._dragging_left: bool = False
        self._drag_start: QPoint = QPoint()

        # Animación
        self.anim_turn: Optional[PendingTurn] = None
        self.anim_angle: float = 0.0
        self._anim_layer: frozenset = frozenset()
        self._anim_timer: QTimer = QTimer(self)
        self._anim_timer.setInterval(ANIM_TICK_MS)
        self._anim_timer.timeout.connect(self._on_anim_tick)

        session.set_animator(self.start_turn_animation)
        session.add_turn_listener(self._on_turn_complete)
        session.registry.on_dispose(self._on_cubelets_disposed)

        self.setFocusPolicy(Qt.ClickFocus)

    @property
    def animating(self) -> bool:
        return self.anim_turn is not None

    # --------------------------
    # OpenGL lifecycle
    # --------------------------
    def initializeGL(self) -> None:
        """Inicializa parámetros OpenGL (clear color y depth test)."""
        glClearColor(0.04, 0.06, 0.11, 1.0)
        glEnable(GL_DEPTH_TEST)

    def resizeGL(self, w: int, h: int) -> None:
        """Ajusta viewport y proyección cuando cambia el tamaño del widget.

        Args:
            w: Ancho lógico del widget (Qt).
            h: Alto lógico del widget (Qt).
        """
        if h == 0:
            h = 1

        dpr = self.devicePixelRatioF()
        fb_w = int(w * dpr)
        fb_h = int(h * dpr)

        glViewport(0, 0, fb_w, fb_h)

        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(FOV_DEG, fb_w / float(fb_h), 0.1, 100.0)

        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()

    def paintGL(self) -> None:
        """Dibuja el frame actual (cubelets, con la capa animada rotada)."""
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        self._apply_camera()

        glBegin(GL_QUADS)
        for c in self.session.registry.all():
            if c.is_core:
                continue
            self._draw_cubelet(c)
        glEnd()

    def _apply_camera(self) -> None:
        """Aplica la transformación de cámara (orbit) al modelo."""
        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()
        glTranslatef(0.0, 0.0, -self.distance)
        glRotatef(self.pitch, 1.0, 0.0, 0.0)
        glRotatef(self.yaw, 0.0, 1.0, 0.0)

    # --------------------------
    # Interacción
    # --------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Botón derecho para orbitar; botón izquierdo para iniciar un drag sobre un sticker.

        Args:
            event: Evento de mouse de Qt.
        """
        if event.button() == Qt.RightButton:
            # Sin orbit mientras una capa está girando
            if not self.session.is_turning():
                self._orbiting = True
                self._last_mouse_pos = event.pos()
            event.accept()
            return

        if event.button() == Qt.LeftButton:
            hit = self.pick_sticker(event.pos().x(), event.pos().y())
            self.selected = hit[0] if hit else None

            if hit and self.session.pick(hit[1], hit[2], hit[0][0]):
                self._dragging_left = True
                self._drag_start = event.pos()
                self._show_status(f"Seleccionado: cubelet {hit[0][0]}, normal {hit[2]}")

            self.update()
            event.accept()
            return

        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """Orbit con el botón derecho.

        Args:
            event: Evento de mouse de Qt.
        """
        if self._orbiting:
            if self.session.is_turning():
                self._orbiting = False
                return

            dx = event.position().x() - self._last_mouse_pos.x()
            dy = event.position().y() - self._last_mouse_pos.y()
            self._last_mouse_pos = event.pos()

            sens = 0.4
            self.yaw += dx * sens
            self.pitch += dy * sens
            self.pitch = max(-89.0, min(89.0, self.pitch))

            self.update()
            event.accept()
            return

        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Termina el orbit, o el drag (que se traduce a un giro).

        Args:
            event: Evento de mouse de Qt.
        """
        if event.button() == Qt.RightButton and self._orbiting:
            self._orbiting = False
            event.accept()
            return

        if event.button() == Qt.LeftButton and self._dragging_left:
            self._dragging_left = False
            drag = self.session.gestures.drag_info

            if drag is not None:
                dx = event.position().x() - self._drag_start.x()
                dy = event.position().y() - self._drag_start.y()
                d = self._screen_drag_to_cube(dx, dy)
                end = (
                    drag.start_point[0] + d[0],
                    drag.start_point[1] + d[1],
                    drag.start_point[2] + d[2],
                )
                move = self.session.release(end)
                if move is not None:
                    self._show_status(f"Move: {move}")

            event.accept()
            return

        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:
        """Doble click sobre un sticker: medio giro de esa cara."""
        if event.button() != Qt.LeftButton:
            super().mouseDoubleClickEvent(event)
            return

        self._dragging_left = False
        self.session.gestures.cancel()
        hit = self.pick_sticker(event.pos().x(), event.pos().y())
        if hit:
            move = self.session.double_activate(hit[2])
            if move is not None:
                self._show_status(f"Move: {move}")
        event.accept()

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Zoom in/out con la rueda del mouse.

        Args:
            event: Evento de rueda de Qt.
        """
        delta = event.angleDelta().y() / 120.0
        self.distance -= delta * 0.4
        self.distance = max(4.0, min(30.0, self.distance))
        self.update()
        event.accept()

    def keyPressEvent(self, event) -> None:
        """Espacio: adelantar la animación del giro en curso."""
        if event.key() == Qt.Key_Space and self.animating:
            self.skip_animation()
            event.accept()
            return
        super().keyPressEvent(event)

    def _show_status(self, msg: str) -> None:
        w = self.window()
        if hasattr(w, "statusBar") and w.statusBar():
            w.statusBar().showMessage(msg, 1500)

    def _screen_drag_to_cube(self, dx: float, dy: float) -> Vec3f:
        """Lleva un delta de pantalla (píxeles) al espacio del cubo.

        Invierte la rotación de la cámara y escala píxeles a unidades de mundo a la
        distancia actual de la cámara.

        Args:
            dx: Delta X del drag en pantalla.
            dy: Delta Y del drag en pantalla.

        Returns:
            Vector de arrastre en coordenadas del cubo.
        """
        h = max(1, self.height())
        world_per_px = 2.0 * self.distance * math.tan(math.radians(FOV_DEG) / 2.0) / h

        # pantalla => mundo (y de pantalla hacia abajo)
        x0, y0, z0 = dx * world_per_px, -dy * world_per_px, 0.0

        # mundo -> cubo (inversa de la cámara)
        pitch = math.radians(self.pitch)
        cx = math.cos(-pitch)
        sx = math.sin(-pitch)
        x1, y1, z1 = x0, cx * y0 - sx * z0, sx * y0 + cx * z0

        yaw = math.radians(self.yaw)
        cy = math.cos(-yaw)
        sy = math.sin(-yaw)
        return (cy * x1 + sy * z1, y1, -sy * x1 + cy * z1)

    # --------------------------
    # Picking (color picking)
    # --------------------------
    def pick_sticker(self, x: int, y: int) -> Optional[Tuple[StickerKey, Vec3f, Vec3f]]:
        """Detecta qué sticker se encuentra bajo el cursor usando color picking.

        Args:
            x: Coordenada X en píxeles (Qt, coordenadas del widget).
            y: Coordenada Y en píxeles (Qt, coordenadas del widget).

        Returns:
            ((cubelet_id, normal_local), centro_mundo, normal_mundo) o None.
        """
        if self.animating:
            return None

        dpr = self.devicePixelRatioF()
        gl_x = int(x * dpr)
        gl_y = int((self.height() - y - 1) * dpr)

        self.makeCurrent()

        glDisable(GL_DITHER)
        glDisable(GL_BLEND)

        glClearColor(0.0, 0.0, 0.0, 1.0)
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        self._apply_camera()
        self._pick_map = self._draw_all_stickers_pick()

        glFlush()

        pixel = glReadPixels(gl_x, gl_y, 1, 1, GL_RGB, GL_UNSIGNED_BYTE)

        glClearColor(0.04, 0.06, 0.11, 1.0)

        if pixel is None:
            return None

        if isinstance(pixel, (bytes, bytearray)):
            r, g, b = pixel[0], pixel[1], pixel[2]
        else:
            try:
                r, g, b = int(pixel[0]), int(pixel[1]), int(pixel[2])
            except (TypeError, ValueError, IndexError):
                return None

        pick_id = r + (g << 8) + (b << 16)
        return self._pick_map.get(pick_id)

    def _encode_id_color(self, pick_id: int) -> Vec3f:
        """Codifica un ID entero a un color RGB (0..1) para picking."""
        r = (pick_id & 0xFF) / 255.0
        g = ((pick_id >> 8) & 0xFF) / 255.0
        b = ((pick_id >> 16) & 0xFF) / 255.0
        return (r, g, b)

    def _draw_all_stickers_pick(self) -> Dict[int, Tuple[StickerKey, Vec3f, Vec3f]]:
        """Dibuja todos los stickers con colores codificados y retorna el mapa ID->sticker."""
        mapping: Dict[int, Tuple[StickerKey, Vec3f, Vec3f]] = {}
        pick_id = 1

        glBegin(GL_QUADS)
        for c in self.session.registry.all():
            for local_n in c.visible_faces():
                n = c.world_normal(local_n)
                p = c.position
                center: Vec3f = (
                    p[0] + 0.5 * n[0],
                    p[1] + 0.5 * n[1],
                    p[2] + 0.5 * n[2],
                )
                normal: Vec3f = (float(n[0]), float(n[1]), float(n[2]))
                mapping[pick_id] = ((c.id, local_n), center, normal)

                glColor3f(*self._encode_id_color(pick_id))
                for v in self._face_quad(p, n, self.sticker_margin * 0.5, self.sticker_offset):
                    glVertex3f(*v)
                pick_id += 1
        glEnd()
        return mapping

    def _on_cubelets_disposed(self, cubelets: List[Cubelet]) -> None:
        # Los ids siguen existiendo tras reconstruir, pero la geometría ya no vale.
        self._pick_map.clear()
        self.selected = None
        self.update()

    # --------------------------
    # Animación
    # --------------------------
    def start_turn_animation(self, pending: PendingTurn) -> None:
        """Comienza a animar un giro entregado por el secuenciador de la sesión.

        Args:
            pending: Giro en curso (capa, eje y ángulo total).
        """
        self.anim_turn = pending
        self.anim_angle = 0.0
        self._anim_layer = frozenset(pending.cubelet_ids)
        self._orbiting = False
        self._anim_timer.start()

    def _on_anim_tick(self) -> None:
        """Tick del timer: avanza la animación hasta completar el ángulo objetivo."""
        turn = self.anim_turn
        if turn is None:
            self._anim_timer.stop()
            return

        self.anim_angle += ANIM_STEP_DEG
        if self.anim_angle >= abs(turn.angle_deg):
            self._finish_turn_animation()
            return

        self.update()

    def _finish_turn_animation(self) -> None:
        """Finaliza la animación y pide al núcleo que complete el giro."""
        self._anim_timer.stop()
        self.anim_turn = None
        self.anim_angle = 0.0
        self._anim_layer = frozenset()

        # Puede iniciar el siguiente giro de la secuencia (start_turn_animation).
        try:
            self.session.finish_turn()
        except CubeConsistencyError as exc:
            logger.error("Giro abortado: %s", exc)
            self._show_status("Estado inconsistente: use Reset")
            self.turn_aborted.emit(str(exc))
        self.update()

    def skip_animation(self) -> None:
        """Adelanta el giro en curso: el estado del cubo se completa igual."""
        if self.animating:
            self._finish_turn_animation()

    def _on_turn_complete(self, move: Move, record: bool) -> None:
        self.move_applied.emit(move, record)

    def _current_anim_angle(self) -> float:
        turn = self.anim_turn
        if turn is None:
            return 0.0
        return math.copysign(self.anim_angle, turn.angle_deg)

    # --------------------------
    # Render helpers
    # --------------------------
    def _rot_point(self, p: Vec3f, axis: Axis, angle_deg: float) -> Vec3f:
        """Rota un punto alrededor de un eje por un ángulo en grados.

        Args:
            p: Punto (x, y, z).
            axis: Eje de rotación ('x', 'y', 'z').
            angle_deg: Ángulo en grados.

        Returns:
            Punto rotado (x, y, z).
        """
        x, y, z = p
        a = math.radians(angle_deg)
        c = math.cos(a)
        s = math.sin(a)

        if axis == "x":
            return (x, y * c - z * s, y * s + z * c)
        if axis == "y":
            return (x * c + z * s, y, -x * s + z * c)
        if axis == "z":
            return (x * c - y * s, x * s + y * c, z)
        return p

    def _face_quad(self, p: Vec3i, n: Vec3i, margin: float, offset: float) -> List[Vec3f]:
        """Los 4 vértices de la cara de normal `n` del cubelet en `p`.

        Args:
            p: Posición del cubelet.
            n: Normal de la cara (mundo, unitaria sobre un eje).
            margin: Margen interno (reduce el quad).
            offset: Separación hacia afuera respecto a la superficie del cubelet.

        Returns:
            Lista de 4 vértices en orden para GL_QUADS.
        """
        i = next(k for k in range(3) if n[k] != 0)
        a, b = [k for k in range(3) if k != i]
        half = self.cubelet_size / 2.0
        h = half - margin

        out: List[Vec3f] = []
        for sa, sb in ((-1, -1), (1, -1), (1, 1), (-1, 1)):
            v = [float(p[0]), float(p[1]), float(p[2])]
            v[i] += n[i] * (half + offset)
            v[a] += sa * h
            v[b] += sb * h
            out.append((v[0], v[1], v[2]))
        return out

    def _draw_cubelet(self, c: Cubelet) -> None:
        """Dibuja el cuerpo plástico y los stickers de un cubelet (rotados si está en la capa animada)."""
        turn = self.anim_turn
        rotate = turn is not None and c.id in self._anim_layer
        angle = self._current_anim_angle()

        def emit(quad: List[Vec3f]) -> None:
            for v in quad:
                if rotate:
                    v = self._rot_point(v, turn.axis, angle)  # type: ignore[union-attr]
                glVertex3f(*v)

        # Cuerpo plástico
        glColor3f(0.05, 0.05, 0.06)
        for i in range(3):
            for s in (-1, 1):
                n = [0, 0, 0]
                n[i] = s
                emit(self._face_quad(c.position, (n[0], n[1], n[2]), 0.0, 0.0))

        for local_n in c.visible_faces():
            n = c.world_normal(local_n)
            i = next(k for k in range(3) if local_n[k] != 0)
            face = LAYER_TO_FACE[("xyz"[i], local_n[i])]

            if self.selected == (c.id, local_n):
                glColor3f(0.10, 0.95, 0.85)  # calipso
                emit(self._face_quad(c.position, n, self.sticker_margin * 0.35, self.sticker_offset * 0.5))

            glColor3f(*self._color_rgb(FACE_COLOR[face]))
            emit(self._face_quad(c.position, n, self.sticker_margin, self.sticker_offset))

    # --------------------------
    # Color map
    # --------------------------
    def _color_rgb(self, c: str) -> Vec3f:
        """Convierte la letra de color a RGB.

        Args:
            c: Letra de color (por ejemplo: "W", "Y", "O", "R", "G", "B").

        Returns:
            Tupla (r, g, b) en rango [0, 1]. Si no existe el color, retorna gris.
        """
        palette: Dict[str, Vec3f] = {
            "W": (1.0, 1.0, 1.0),
            "Y": (1.0, 1.0, 0.0),
            "O": (1.0, 0.5, 0.0),
            "R": (1.0, 0.0, 0.0),
            "G": (0.0, 0.85, 0.0),
            "B": (0.0, 0.35, 1.0),
        }
        return palette.get(c, (0.8, 0.8, 0.8))
