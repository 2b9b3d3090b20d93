# -*- coding: utf-8 -*-
"""
SEGWHEEL: Segmented Color Wheel Picker
Copyright (c) 2025 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""
import sys
import logging
from typing import Optional

from PySide6.QtWidgets import (QApplication, QWidget, QVBoxLayout, QPushButton,
                               QGraphicsDropShadowEffect)
from PySide6.QtGui import QPainter, QColor, QBrush, QPixmap, QIcon, QMouseEvent
from PySide6.QtCore import (Qt, Signal, Slot, QPoint, QSize, QRectF, QPropertyAnimation,
                            QParallelAnimationGroup, QAbstractAnimation, QEasingCurve)

from colorwheelengine import Rgba
from qt_colorwheel import WedgeColorWheel, create_color_wheel_image, to_qcolor

logger = logging.getLogger(__name__)


class ColorSwatch(QWidget):
    """Rounded color patch showing the current pick.

    Carries a small drop shadow so a white swatch stays visible on a white
    background.
    """
    colorChanged = Signal(object)

    def __init__(self, color: Rgba = Rgba(0.0, 0.0, 0.0), parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._color = Rgba(*color)
        self.setFixedSize(64, 32)

        shadow = QGraphicsDropShadowEffect(self)
        shadow_color = QColor(0, 0, 0)
        shadow_color.setAlphaF(0.75)
        shadow.setColor(shadow_color)
        shadow.setBlurRadius(3)
        shadow.setOffset(2, 2)
        self.setGraphicsEffect(shadow)

    def color(self) -> Rgba:
        return self._color

    def set_color(self, color: Rgba):
        self._color = Rgba(*color)
        self.colorChanged.emit(self._color)
        self.update()

    def paintEvent(self, e):
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(QBrush(to_qcolor(self._color)))
        p.drawRoundedRect(QRectF(self.rect()), 2, 2)


class ColorWheelDemo(QWidget):
    """Demo screen: a wheel button, a swatch, and the pop-up wheel.

    Pressing the button spins a wheel up from the button row into the middle
    of the screen. Picking a wedge colors the swatch and fades the wheel out;
    so does pressing anywhere else on the screen.
    """

    WHEEL_SIZE = 250
    BUTTON_SIZE = 64
    ANIMATION_MS = 200
    START_SCALE = 0.1
    START_ROTATION = 180.0

    BUTTON_STYLE = """
        QPushButton {
            background-color: transparent;
            border: none;
            padding: 0px;
        }
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle("Color Wheel")
        self.resize(400, 500)

        self.color_wheel: Optional[WedgeColorWheel] = None
        self._animation = None
        self._dismissing = False

        self.init_ui()

    def init_ui(self):
        """Builds the button and the swatch."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(16)

        self.btn_wheel = QPushButton("")
        self.btn_wheel.setFixedSize(self.BUTTON_SIZE, self.BUTTON_SIZE)
        self.btn_wheel.setStyleSheet(self.BUTTON_STYLE)
        self.btn_wheel.setCursor(Qt.CursorShape.PointingHandCursor)
        self.btn_wheel.setToolTip("Pick a color")

        # Same image for enabled and disabled, the button only greys out its action
        pix = QPixmap.fromImage(create_color_wheel_image(self.BUTTON_SIZE, with_shadow=True))
        icon = QIcon()
        icon.addPixmap(pix, QIcon.Mode.Normal)
        icon.addPixmap(pix, QIcon.Mode.Disabled)
        self.btn_wheel.setIcon(icon)
        self.btn_wheel.setIconSize(QSize(self.BUTTON_SIZE, self.BUTTON_SIZE))

        self.swatch = ColorSwatch(Rgba(0.0, 0.0, 0.0))

        layout.addWidget(self.btn_wheel, alignment=Qt.AlignmentFlag.AlignHCenter)
        layout.addWidget(self.swatch, alignment=Qt.AlignmentFlag.AlignHCenter)
        layout.addStretch()

        self.btn_wheel.clicked.connect(self.show_color_wheel)

    @Slot()
    def show_color_wheel(self):
        """Pops up a wheel seeded with the swatch color and animates it in."""
        if self.color_wheel is not None:
            return
        self.btn_wheel.setEnabled(False)

        size = self.WHEEL_SIZE
        end_pos = QPoint((self.width() - size) // 2, (self.height() - size) // 2)

        wheel = WedgeColorWheel(size, self.swatch.color(), self._on_wheel_selected, parent=self)
        self.color_wheel = wheel
        self._dismissing = False

        # Spin up from the button's row
        button_y = self.btn_wheel.mapTo(self, QPoint(0, 0)).y()
        start_pos = QPoint(end_pos.x(),
                           int(button_y - (size - self.btn_wheel.height()) / 2))

        wheel.wheelScale = self.START_SCALE
        wheel.wheelRotation = self.START_ROTATION
        wheel.wheelOpacity = 0.0
        wheel.move(start_pos)
        wheel.show()
        wheel.raise_()

        group = QParallelAnimationGroup(self)
        for prop, start, end in ((b"wheelScale", self.START_SCALE, 1.0),
                                 (b"wheelRotation", self.START_ROTATION, 0.0),
                                 (b"wheelOpacity", 0.0, 1.0),
                                 (b"pos", start_pos, end_pos)):
            anim = QPropertyAnimation(wheel, prop, group)
            anim.setDuration(self.ANIMATION_MS)
            anim.setStartValue(start)
            anim.setEndValue(end)
            anim.setEasingCurve(QEasingCurve.Type.InOutCubic)
            group.addAnimation(anim)
        group.finished.connect(self._on_show_finished)
        self._animation = group
        group.start(QAbstractAnimation.DeletionPolicy.DeleteWhenStopped)
        logger.debug("Color wheel shown with selection %s", wheel.selection)

    @Slot()
    def _on_show_finished(self):
        self._animation = None

    def _on_wheel_selected(self, wheel: WedgeColorWheel, color: Rgba):
        """Applies the picked color to the swatch and dismisses the wheel."""
        self.swatch.set_color(color)
        self.dismiss_color_wheel()

    def dismiss_color_wheel(self):
        """Fades the wheel out, removes it and re-enables the button."""
        wheel = self.color_wheel
        if wheel is None or self._dismissing:
            return
        self._dismissing = True

        if self._animation is not None:
            # Deletes the spin-up group
            self._animation.stop()
            self._animation = None

        anim = QPropertyAnimation(wheel, b"wheelOpacity", self)
        anim.setDuration(self.ANIMATION_MS)
        anim.setStartValue(wheel.wheelOpacity)
        anim.setEndValue(0.0)

        def _remove_wheel():
            wheel.hide()
            wheel.deleteLater()
            self.color_wheel = None
            self._animation = None
            self._dismissing = False
            self.btn_wheel.setEnabled(True)
            logger.debug("Color wheel dismissed")

        anim.finished.connect(_remove_wheel)
        self._animation = anim
        anim.start(QAbstractAnimation.DeletionPolicy.DeleteWhenStopped)

    def mousePressEvent(self, event: QMouseEvent):
        """Dismisses a visible wheel on any press the wheel itself did not take."""
        if self.color_wheel is not None:
            self.dismiss_color_wheel()
            event.accept()
        else:
            super().mousePressEvent(event)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = QApplication.instance() or QApplication(sys.argv)

    demo = ColorWheelDemo()
    demo.show()

    sys.exit(app.exec())
