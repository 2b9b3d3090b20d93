# -*- coding: utf-8 -*-
"""
SEGWHEEL: Segmented Color Wheel Picker
Copyright (c) 2025 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""
import logging
import math
from typing import Callable, Optional

from PySide6.QtWidgets import (QWidget, QGraphicsScene, QGraphicsPixmapItem,
                               QGraphicsDropShadowEffect)
from PySide6.QtGui import (QPainter, QImage, QPixmap, QColor, QPen, QBrush,
                           QPainterPath, QMouseEvent, QPaintEvent, QTransform)
from PySide6.QtCore import Qt, Signal, Property, QPointF, QRectF

from colorwheelengine import (PALETTE, OUTLINE_COLOR, OUTLINE_WIDTH, Rgba, ArcSegment,
                              WedgePath, WedgeSelection, outer_radius, wedge_path,
                              wedge_span, hit_test, selection_for_color)

__all__ = ["to_qcolor", "wedge_to_qpainterpath", "add_wedge",
           "create_color_wheel_image", "WedgeColorWheel"]

logger = logging.getLogger(__name__)

OUTLINE_SHADOW_BLUR = 5.0
# A 2 point CoreGraphics blur; Qt radii spread about a third as far
IMAGE_SHADOW_BLUR = 6.0


def to_qcolor(color: Rgba) -> QColor:
    """Converts a normalized palette color to an 8 bit QColor."""
    return QColor(*color.to_rgb255())


def _arc_to(path: QPainterPath, arc: ArcSegment) -> None:
    """Appends ``arc`` to ``path``.

    Qt measures arc angles counter-clockwise on screen, the engine measures
    them clockwise, so both the start angle and the sweep change sign.
    """
    cx, cy = arc.center
    rect = QRectF(cx - arc.radius, cy - arc.radius, 2 * arc.radius, 2 * arc.radius)
    path.arcTo(rect, -math.degrees(arc.start_angle), -math.degrees(arc.sweep))


def wedge_to_qpainterpath(wedge: WedgePath) -> QPainterPath:
    """Builds the closed QPainterPath for a wedge description."""
    path = QPainterPath()
    path.moveTo(QPointF(*wedge.inner_start))
    path.lineTo(QPointF(*wedge.outer_start))
    _arc_to(path, wedge.outer_arc)
    path.lineTo(QPointF(*wedge.inner_end))
    _arc_to(path, wedge.inner_arc)
    path.closeSubpath()
    return path


def add_wedge(painter: QPainter, wedge: WedgePath, color: QColor, fill: bool) -> None:
    """Draws one wedge onto the painter's device.

    Args:
        painter (QPainter): Active painter of the target image.
        wedge (WedgePath): Geometry from :func:`colorwheelengine.wedge_path`.
        color (QColor): Fill or stroke color.
        fill (bool): Solid wedge if True, otherwise a fat outline.
    """
    path = wedge_to_qpainterpath(wedge)
    painter.save()
    if fill:
        painter.fillPath(path, QBrush(color))
    else:
        pen = QPen(color, OUTLINE_WIDTH)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(path)
    painter.restore()


def _blank_image(size: int) -> QImage:
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    return img


def _with_drop_shadow(image: QImage, blur_radius: float) -> QImage:
    """Returns ``image`` redrawn on a fresh canvas with a soft black shadow behind it.

    The shadow has no offset, so it only shows around the opaque edges.
    """
    scene = QGraphicsScene()
    item = QGraphicsPixmapItem(QPixmap.fromImage(image))
    effect = QGraphicsDropShadowEffect()
    effect.setBlurRadius(blur_radius)
    effect.setOffset(0, 0)
    effect.setColor(QColor(0, 0, 0))
    item.setGraphicsEffect(effect)
    scene.addItem(item)

    result = _blank_image(image.width())
    painter = QPainter(result)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    bounds = QRectF(0, 0, image.width(), image.height())
    scene.render(painter, bounds, bounds)
    painter.end()
    return result


def create_color_wheel_image(size: int, with_shadow: bool,
                             selection: Optional[WedgeSelection] = None) -> QImage:
    """Renders the full wheel into a ``size`` x ``size`` image.

    Needs a running QApplication (shadows go through QGraphicsScene).

    Args:
        size (int): Side of the square canvas in pixels.
        with_shadow (bool): Redraw the composed wheel with a soft shadow
            around it. Meant for static button icons, not the live wheel.
        selection (WedgeSelection, optional): Wedge to outline. An index
            outside the palette draws no outline.

    Returns:
        QImage: The rendered wheel, transparent outside the wedges.

    Raises:
        ValueError: If ``size`` is not positive.
    """
    size = int(size)
    if size <= 0:
        raise ValueError(f"Wheel size must be positive, got {size}")

    radius = outer_radius(size)
    count = len(PALETTE)

    image = _blank_image(size)
    painter = QPainter(image)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    for index, color in enumerate(PALETTE):
        start, end = wedge_span(index, count)
        add_wedge(painter, wedge_path(start, end, size, radius), to_qcolor(color), fill=True)
    painter.end()

    if selection is not None:
        if selection.is_valid(count):
            # The outline gets its own layer so the shadow falls behind the stroke only
            outline = _blank_image(size)
            painter = QPainter(outline)
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            start, end = wedge_span(selection.index, count)
            add_wedge(painter, wedge_path(start, end, size, radius),
                      to_qcolor(OUTLINE_COLOR), fill=False)
            painter.end()
            outline = _with_drop_shadow(outline, OUTLINE_SHADOW_BLUR)

            painter = QPainter(image)
            painter.drawImage(0, 0, outline)
            painter.end()
        else:
            logger.warning("Selected wedge %d outside palette of %d colors, no outline drawn",
                           selection.index, count)

    if with_shadow:
        image = _with_drop_shadow(image, IMAGE_SHADOW_BLUR)

    logger.debug("Rendered color wheel: size=%d shadow=%s selection=%s",
                 size, with_shadow, selection)
    return image


class WedgeColorWheel(QWidget):
    """Interactive wedge wheel; a press picks the wedge under the pointer.

    The wheel is drawn through a painter transform built from the
    ``wheelScale``, ``wheelRotation`` and ``wheelOpacity`` properties, so the
    host can animate it in and out.
    """
    colorSelected = Signal(object, object)  # (wheel, Rgba)

    SHADOW_OPACITY = 0.8
    SHADOW_BLUR = 10.0

    def __init__(self, size: int, selected_color: Rgba,
                 on_select: Optional[Callable[["WedgeColorWheel", Rgba], None]] = None,
                 parent: Optional[QWidget] = None):
        """Initializes the wheel.

        Args:
            size (int): Side of the (square) widget in pixels.
            selected_color (Rgba): Color to highlight initially. Colors not in
                the palette highlight the first wedge.
            on_select (callable, optional): Called with ``(wheel, color)``
                whenever a wedge is picked.
            parent (QWidget, optional): Parent widget.
        """
        super().__init__(parent)
        self.wheel_size = int(size)
        self.setFixedSize(self.wheel_size, self.wheel_size)

        self._scale = 1.0
        self._rotation = 0.0
        self._opacity = 1.0

        self.selection = selection_for_color(selected_color)
        self._image = create_color_wheel_image(self.wheel_size, False, self.selection)

        if on_select is not None:
            self.colorSelected.connect(on_select)

        shadow = QGraphicsDropShadowEffect(self)
        shadow_color = QColor(0, 0, 0)
        shadow_color.setAlphaF(self.SHADOW_OPACITY)
        shadow.setColor(shadow_color)
        shadow.setBlurRadius(self.SHADOW_BLUR)
        shadow.setOffset(0, 0)
        self.setGraphicsEffect(shadow)

    # --- Animatable properties ---

    def _get_scale(self) -> float:
        return self._scale

    def _set_scale(self, value: float):
        self._scale = value
        self.update()

    def _get_rotation(self) -> float:
        return self._rotation

    def _set_rotation(self, value: float):
        self._rotation = value
        self.update()

    def _get_opacity(self) -> float:
        return self._opacity

    def _set_opacity(self, value: float):
        self._opacity = value
        self.update()

    wheelScale = Property(float, _get_scale, _set_scale)
    wheelRotation = Property(float, _get_rotation, _set_rotation)
    wheelOpacity = Property(float, _get_opacity, _set_opacity)

    # --- State ---

    @property
    def image(self) -> QImage:
        return self._image

    def selected_color(self) -> Rgba:
        return PALETTE[self.selection.index]

    def _paint_transform(self) -> QTransform:
        """Maps wheel image coordinates to widget coordinates."""
        cx, cy = self.width() / 2, self.height() / 2
        t = QTransform()
        t.translate(cx, cy)
        t.scale(self._scale, self._scale)
        t.rotate(self._rotation)
        t.translate(-cx, -cy)
        return t

    def wedge_at(self, x: float, y: float) -> Optional[int]:
        """Returns the painted wedge under widget position ``(x, y)``.

        The point is taken back through the current scale and rotation, so a
        half spun wheel picks what it shows. Returns None outside the painted
        disc, or while the wheel is collapsed to nothing.
        """
        inverse, invertible = self._paint_transform().inverted()
        if not invertible:
            return None
        p = inverse.map(QPointF(x, y))
        dx, dy = p.x() - self.width() / 2, p.y() - self.height() / 2
        if math.hypot(dx, dy) > outer_radius(self.wheel_size):
            return None
        return hit_test(p.x(), p.y(), self.width(), self.height(), len(PALETTE))

    def select_at(self, x: float, y: float) -> Optional[Rgba]:
        """Selects the wedge under ``(x, y)``, re-renders and emits ``colorSelected``.

        Args:
            x (float): Horizontal position in widget coordinates.
            y (float): Vertical position in widget coordinates.

        Returns:
            Rgba: The picked palette color, or None if the point misses the wheel.
        """
        index = self.wedge_at(x, y)
        if index is None:
            logger.debug("Press at (%.1f, %.1f) misses the wheel", x, y)
            return None

        self.selection = WedgeSelection(index)
        self._image = create_color_wheel_image(self.wheel_size, False, self.selection)
        self.update()

        color = PALETTE[index]
        logger.debug("Wedge %d picked at (%.1f, %.1f)", index, x, y)
        self.colorSelected.emit(self, color)
        return color

    # --- Events ---

    def mousePressEvent(self, e: QMouseEvent):
        """Picks the wedge under the pointer; misses go on to the parent."""
        if e.button() == Qt.MouseButton.LeftButton:
            pos = e.position()
            if self.select_at(pos.x(), pos.y()) is None:
                e.ignore()
            else:
                e.accept()
        else:
            super().mousePressEvent(e)

    def paintEvent(self, e: QPaintEvent):
        """Draws the cached wheel image through the animation transform."""
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)
        p.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        p.setOpacity(self._opacity)
        p.setTransform(self._paint_transform())
        p.drawImage(QRectF(0, 0, self.width(), self.height()), self._image)
        p.end()
