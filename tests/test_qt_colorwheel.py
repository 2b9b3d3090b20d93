"""
Test the Qt wheel renderer and the interactive wheel widget
"""

import logging
import math

import pytest
from PySide6.QtCore import Qt, QPoint, QPointF
from PySide6.QtGui import QImage

import colorwheelengine as cwe
from colorwheelengine import PALETTE, Rgba, WedgeSelection
from qt_colorwheel import (WedgeColorWheel, create_color_wheel_image, to_qcolor,
                           wedge_to_qpainterpath)


SIZE = 200
CENTER = SIZE / 2
MID_RADIUS = 64  # between the hole (33.3) and the rim (95)


def pixel_rgba(image: QImage, x: float, y: float):
    c = image.pixelColor(int(x), int(y))
    return c.red(), c.green(), c.blue(), c.alpha()


def polar_pixel(image, angle, r):
    return pixel_rgba(image, CENTER + r * math.cos(angle), CENTER + r * math.sin(angle))


def expected_rgba(color: Rgba):
    q = to_qcolor(color)
    return q.red(), q.green(), q.blue(), q.alpha()


def close_to(actual, expected, tol=3):
    return all(abs(a - b) <= tol for a, b in zip(actual, expected))


@pytest.fixture
def plain_wheel(qapp):
    return create_color_wheel_image(SIZE, False)


class TestRenderer:
    """Test create_color_wheel_image."""

    def test_image_geometry(self, plain_wheel):
        assert plain_wheel.width() == SIZE
        assert plain_wheel.height() == SIZE
        assert plain_wheel.format() == QImage.Format.Format_ARGB32_Premultiplied

    def test_corners_and_hole_are_transparent(self, plain_wheel):
        for x, y in [(0, 0), (SIZE - 1, 0), (0, SIZE - 1), (SIZE - 1, SIZE - 1)]:
            assert pixel_rgba(plain_wheel, x, y)[3] == 0
        assert pixel_rgba(plain_wheel, CENTER, CENTER)[3] == 0

    @pytest.mark.parametrize("index", range(11))
    def test_each_wedge_has_its_palette_color(self, plain_wheel, index):
        angle = (index + 0.5) * cwe.angle_step()
        assert close_to(polar_pixel(plain_wheel, angle, MID_RADIUS),
                        expected_rgba(PALETTE[index]), tol=0)

    def test_wedge_colors_match_hit_test(self, plain_wheel):
        index_map = cwe.wedge_index_map(SIZE)
        step = cwe.angle_step()
        for index in range(11):
            for frac in (0.2, 0.5, 0.8):
                angle = (index + frac) * step
                x = int(CENTER + 70 * math.cos(angle))
                y = int(CENTER + 70 * math.sin(angle))
                assert pixel_rgba(plain_wheel, x, y) == expected_rgba(PALETTE[index_map[y, x]])

    def test_rejects_non_positive_size(self, qapp):
        with pytest.raises(ValueError):
            create_color_wheel_image(0, False)
        with pytest.raises(ValueError):
            create_color_wheel_image(-10, True)

    def test_selection_outline_spans_the_selected_wedge(self, qapp):
        img = create_color_wheel_image(SIZE, False, WedgeSelection(3))
        step = cwe.angle_step()
        outline = expected_rgba(cwe.OUTLINE_COLOR)

        # Both straight edges and the rim of wedge 3 carry the outline
        assert close_to(polar_pixel(img, 3 * step, MID_RADIUS), outline)
        assert close_to(polar_pixel(img, 4 * step, MID_RADIUS), outline)
        assert close_to(polar_pixel(img, 3.5 * step, cwe.outer_radius(SIZE) - 1), outline)

        # The inside of the wedge keeps its fill
        assert close_to(polar_pixel(img, 3.5 * step, MID_RADIUS), expected_rgba(PALETTE[3]), tol=0)

        # Other edges are untouched
        assert not close_to(polar_pixel(img, 6 * step, MID_RADIUS), outline, tol=20)
        assert not close_to(polar_pixel(img, 8.5 * step, cwe.outer_radius(SIZE) - 1),
                            outline, tol=20)

    @pytest.mark.parametrize("index", [-1, 11, 500])
    def test_out_of_range_selection_draws_no_outline(self, plain_wheel, caplog, index):
        with caplog.at_level(logging.WARNING, logger="qt_colorwheel"):
            img = create_color_wheel_image(SIZE, False, WedgeSelection(index))

        assert img == plain_wheel
        assert "outside palette" in caplog.text

    def test_whole_image_shadow(self, qapp, plain_wheel):
        shadowed = create_color_wheel_image(SIZE, True)
        rim = cwe.outer_radius(SIZE)

        # First fully transparent pixel right of the rim
        edge_x = next(x for x in range(int(CENTER + MID_RADIUS), SIZE)
                      if pixel_rgba(plain_wheel, x, CENTER)[3] == 0)
        assert pixel_rgba(shadowed, edge_x, CENTER)[3] > 0

        def alpha_outside(image):
            return sum(polar_pixel(image, k * math.pi / 18, r)[3]
                       for k in range(36) for r in (rim + 1, rim + 2, rim + 3))

        assert alpha_outside(shadowed) > alpha_outside(plain_wheel)
        assert pixel_rgba(shadowed, 0, 0)[3] == 0

        angle = 4.5 * cwe.angle_step()
        assert close_to(polar_pixel(shadowed, angle, MID_RADIUS), expected_rgba(PALETTE[4]))

    @pytest.mark.parametrize("with_shadow,selection", [
        (False, None),
        (True, None),
        (False, WedgeSelection(7)),
        (True, WedgeSelection(0)),
    ])
    def test_rendering_is_idempotent(self, qapp, with_shadow, selection):
        first = create_color_wheel_image(SIZE, with_shadow, selection)
        second = create_color_wheel_image(SIZE, with_shadow, selection)
        assert first == second

    def test_qpainterpath_matches_description(self, qapp):
        start, end = cwe.wedge_span(2)
        wedge = cwe.wedge_path(start, end, SIZE, cwe.outer_radius(SIZE))
        path = wedge_to_qpainterpath(wedge)

        mid = (start + end) / 2
        inside = (CENTER + MID_RADIUS * math.cos(mid), CENTER + MID_RADIUS * math.sin(mid))
        assert path.contains(QPointF(*inside))
        assert not path.contains(QPointF(CENTER, CENTER))

        other = (CENTER + MID_RADIUS * math.cos(mid + math.pi),
                 CENTER + MID_RADIUS * math.sin(mid + math.pi))
        assert not path.contains(QPointF(*other))


class TestWedgeColorWheel:
    """Test the interactive wheel widget."""

    def test_initial_selection_from_palette(self, qtbot):
        wheel = WedgeColorWheel(SIZE, PALETTE[5])
        qtbot.addWidget(wheel)

        assert wheel.selection == WedgeSelection(5)
        assert wheel.selected_color() == PALETTE[5]
        assert wheel.size().width() == SIZE
        assert wheel.image == create_color_wheel_image(SIZE, False, WedgeSelection(5))

    def test_unknown_color_selects_first_wedge(self, qtbot):
        wheel = WedgeColorWheel(SIZE, Rgba(0.3, 0.3, 0.3))
        qtbot.addWidget(wheel)
        assert wheel.selection == WedgeSelection(0)

    def test_click_picks_wedge(self, qtbot, wedge_point):
        picked = []
        wheel = WedgeColorWheel(SIZE, PALETTE[0], lambda w, c: picked.append((w, c)))
        qtbot.addWidget(wheel)

        x, y = wedge_point(6, SIZE)
        with qtbot.waitSignal(wheel.colorSelected, timeout=1000) as blocker:
            qtbot.mouseClick(wheel, Qt.MouseButton.LeftButton, pos=QPoint(int(x), int(y)))

        assert blocker.args[0] is wheel
        assert blocker.args[1] == PALETTE[6]
        assert picked == [(wheel, PALETTE[6])]
        assert wheel.selection == WedgeSelection(6)
        assert wheel.image == create_color_wheel_image(SIZE, False, WedgeSelection(6))

    @pytest.mark.parametrize("index", range(11))
    def test_select_at_every_wedge(self, qtbot, wedge_point, index):
        wheel = WedgeColorWheel(SIZE, PALETTE[0])
        qtbot.addWidget(wheel)

        x, y = wedge_point(index, SIZE, 0.4)
        assert wheel.select_at(x, y) == PALETTE[index]
        assert wheel.selection.index == index

    @pytest.mark.parametrize("rotation", [90.0, 180.0, 270.0])
    @pytest.mark.parametrize("index", [0, 4])
    def test_click_picks_the_painted_wedge_when_rotated(self, qtbot, angle_point,
                                                        rotation, index):
        wheel = WedgeColorWheel(SIZE, PALETTE[5])
        qtbot.addWidget(wheel)
        wheel.wheelRotation = rotation

        painted = (index + 0.5) * cwe.angle_step() + math.radians(rotation)
        x, y = angle_point(painted, 60, SIZE)
        with qtbot.waitSignal(wheel.colorSelected, timeout=1000) as blocker:
            qtbot.mouseClick(wheel, Qt.MouseButton.LeftButton, pos=QPoint(round(x), round(y)))

        assert blocker.args[1] == PALETTE[index]
        assert wheel.selection == WedgeSelection(index)

    def test_click_picks_the_painted_wedge_when_scaled(self, qtbot, wedge_point):
        wheel = WedgeColorWheel(SIZE, PALETTE[5])
        qtbot.addWidget(wheel)
        wheel.wheelScale = 0.5

        # 0.15 * SIZE on screen is 0.3 * SIZE on the unscaled wheel
        x, y = wedge_point(3, SIZE, 0.15)
        assert wheel.wedge_at(x, y) == 3
        assert wheel.select_at(x, y) == PALETTE[3]

    def test_click_outside_the_painted_disc_is_ignored(self, qtbot, wedge_point):
        wheel = WedgeColorWheel(SIZE, PALETTE[2])
        qtbot.addWidget(wheel)
        wheel.wheelScale = 0.1

        # Mid radius of the full size wheel, far outside the shrunken one
        x, y = wedge_point(7, SIZE)
        with qtbot.assertNotEmitted(wheel.colorSelected):
            qtbot.mouseClick(wheel, Qt.MouseButton.LeftButton, pos=QPoint(int(x), int(y)))
        assert wheel.selection == WedgeSelection(2)
        assert wheel.select_at(x, y) is None

    def test_corner_of_widget_misses_the_wheel(self, qtbot):
        wheel = WedgeColorWheel(SIZE, PALETTE[2])
        qtbot.addWidget(wheel)

        assert wheel.wedge_at(2, 2) is None
        assert wheel.wedge_at(CENTER + 60, CENTER) is not None

    def test_collapsed_wheel_picks_nothing(self, qtbot):
        wheel = WedgeColorWheel(SIZE, PALETTE[2])
        qtbot.addWidget(wheel)
        wheel.wheelScale = 0.0

        assert wheel.wedge_at(CENTER, CENTER) is None

    def test_right_click_is_ignored(self, qtbot, wedge_point):
        wheel = WedgeColorWheel(SIZE, PALETTE[2])
        qtbot.addWidget(wheel)

        x, y = wedge_point(9, SIZE)
        with qtbot.assertNotEmitted(wheel.colorSelected):
            qtbot.mouseClick(wheel, Qt.MouseButton.RightButton, pos=QPoint(int(x), int(y)))
        assert wheel.selection == WedgeSelection(2)

    def test_animation_properties(self, qtbot):
        wheel = WedgeColorWheel(SIZE, PALETTE[0])
        qtbot.addWidget(wheel)

        assert (wheel.wheelScale, wheel.wheelRotation, wheel.wheelOpacity) == (1.0, 0.0, 1.0)
        wheel.wheelScale = 0.1
        wheel.wheelRotation = 180.0
        wheel.wheelOpacity = 0.5
        assert wheel.property("wheelScale") == pytest.approx(0.1)
        assert wheel.property("wheelRotation") == pytest.approx(180.0)
        assert wheel.property("wheelOpacity") == pytest.approx(0.5)

    def test_paints_while_transformed(self, qtbot):
        wheel = WedgeColorWheel(SIZE, PALETTE[0])
        qtbot.addWidget(wheel)
        wheel.wheelScale = 0.5
        wheel.wheelRotation = 90.0

        pix = wheel.grab()
        assert not pix.isNull()
        assert pix.width() >= SIZE
