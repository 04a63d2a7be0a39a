import pytest
from PySide6.QtCore import QEvent, QPoint, QPointF, Qt
from PySide6.QtGui import QMouseEvent
from PySide6.QtWidgets import QLabel, QWidget

from clippy.core.errors import InvalidStructureError
from clippy.core.geometry import Rectangle
from clippy.core.states.clip_lifecycle import ClipState
from clippy.ui.bounds import measure
from clippy.ui.clippy_widget import ClippyWidget


def _make_target(width=200, height=100) -> QWidget:
    target = QWidget()
    target.setFixedSize(width, height)
    return target


@pytest.fixture
def clippy(qtbot):
    widget = ClippyWidget(_make_target())
    qtbot.addWidget(widget)
    widget.show()
    qtbot.waitExposed(widget)
    return widget


def _click_overlay(qtbot, widget, x, y):
    qtbot.mouseClick(widget.overlay, Qt.LeftButton, pos=QPoint(x, y))


def test_measure_unshown_widget_is_empty(qtbot):
    target = _make_target()
    qtbot.addWidget(target)
    assert measure(target) == Rectangle.empty()
    assert measure(None) == Rectangle.empty()


def test_bounds_follow_child_after_show(clippy):
    bounds = clippy.controller.bounds
    assert bounds.width == 200
    assert bounds.height == 100
    origin = clippy.child.mapTo(clippy.window(), QPoint(0, 0))
    assert (bounds.left, bounds.top) == (origin.x(), origin.y())
    assert clippy.overlay.geometry() == clippy.child.geometry()


def test_button_label_cycles(qtbot, clippy):
    labels = [clippy.toggle_button.text()]
    for _ in range(3):
        qtbot.mouseClick(clippy.toggle_button, Qt.LeftButton)
        labels.append(clippy.toggle_button.text())
    assert labels == ["Begin clipping", "Stop clipping", "Restart clipping", "Begin clipping"]


def test_clicks_build_polygon_and_complete(qtbot, clippy):
    clippy.toggle()
    _click_overlay(qtbot, clippy, 1, 1)
    _click_overlay(qtbot, clippy, 199, 99)
    assert len(clippy.controller.handles) == 3

    expected = "0.00% 0.00%,0.50% 1.00%,99.50% 99.00%,0.00% 0.00%"
    assert clippy.overlay_polygon_value() == f"polygon({expected})"

    with qtbot.waitSignal(clippy.clipCompleted, timeout=1000) as blocker:
        qtbot.mouseClick(clippy.toggle_button, Qt.LeftButton)
    assert blocker.args == [expected]
    assert clippy.readout.text() == f"clip-path: polygon({expected});"
    assert clippy.controller.state is ClipState.COMPLETE


def test_restart_clears_readout_and_handles(qtbot, clippy):
    clippy.toggle()
    _click_overlay(qtbot, clippy, 50, 50)
    clippy.toggle()
    assert clippy.readout.text()

    clippy.toggle()
    assert clippy.readout.text() == ""
    assert len(clippy.controller.handles) == 1
    assert clippy.overlay_polygon_value() == "polygon(0.00% 0.00%)"


def test_clicks_ignored_outside_clipping(qtbot, clippy):
    _click_overlay(qtbot, clippy, 20, 20)
    assert len(clippy.controller.handles) == 1

    clippy.toggle()
    clippy.toggle()
    _click_overlay(qtbot, clippy, 20, 20)
    assert len(clippy.controller.handles) == 1


def test_overlay_mouse_transparency_follows_state(clippy):
    assert clippy.overlay.testAttribute(Qt.WA_TransparentForMouseEvents)
    clippy.toggle()
    assert not clippy.overlay.testAttribute(Qt.WA_TransparentForMouseEvents)
    clippy.toggle()
    assert clippy.overlay.testAttribute(Qt.WA_TransparentForMouseEvents)


def test_signals_report_state_and_handles(qtbot, clippy):
    with qtbot.waitSignal(clippy.stateChanged, timeout=1000) as state_blocker:
        clippy.toggle()
    assert state_blocker.args == ["clipping"]

    with qtbot.waitSignal(clippy.handlesChanged, timeout=1000) as handles_blocker:
        _click_overlay(qtbot, clippy, 100, 50)
    assert handles_blocker.args == [2]


def test_resize_rescales_existing_vertices(qtbot, clippy):
    clippy.toggle()
    _click_overlay(qtbot, clippy, 100, 50)
    path_before = clippy.controller.live_path

    clippy.child.setFixedSize(400, 200)
    qtbot.waitUntil(lambda: clippy.controller.bounds.width == 400, timeout=1000)
    assert clippy.controller.live_path == path_before

    _click_overlay(qtbot, clippy, 100, 50)
    assert clippy.controller.handles.get(3).css() == "25.00% 25.00%"


def test_copy_clip_path_requires_completion(qtbot, clippy):
    assert clippy.copy_clip_path() is False
    clippy.toggle()
    clippy.toggle()
    assert clippy.copy_clip_path() is True


@pytest.mark.parametrize("child", [
    None,
    "not a widget",
    [],
])
def test_rejects_non_widget_children(qtbot, child):
    with pytest.raises(InvalidStructureError):
        ClippyWidget(child)


def test_rejects_more_than_one_child(qtbot):
    with pytest.raises(InvalidStructureError):
        ClippyWidget([QLabel("a"), QLabel("b")])


def test_single_item_sequence_is_accepted(qtbot):
    label = QLabel("only")
    widget = ClippyWidget([label])
    qtbot.addWidget(widget)
    assert widget.child is label


def test_set_child_twice_raises(qtbot, clippy):
    with pytest.raises(InvalidStructureError):
        clippy.set_child(QLabel("second"))


def test_click_on_child_origin_maps_to_corner(clippy):
    clippy.toggle()
    bounds = clippy.controller.bounds
    clippy.add_point(bounds.left, bounds.top)
    clippy.add_point(bounds.right, bounds.bottom)
    clippy.toggle()
    assert clippy.controller.finalized_path == "0.00% 0.00%,0.00% 0.00%,100.00% 100.00%,0.00% 0.00%"


def test_sub_pixel_press_keeps_fraction(clippy):
    clippy.toggle()
    local = QPointF(50.5, 25.25)
    event = QMouseEvent(QEvent.MouseButtonPress, local, clippy.overlay.mapToGlobal(local),
                        Qt.LeftButton, Qt.LeftButton, Qt.NoModifier)
    clippy.overlay.mousePressEvent(event)
    assert clippy.controller.handles.get(2).css() == "25.25% 25.25%"


def test_markers_drawn_once_per_handle(qtbot, clippy):
    clippy.toggle()
    _click_overlay(qtbot, clippy, 100, 10)
    _click_overlay(qtbot, clippy, 100, 90)
    assert len(clippy.controller.live_path.split(",")) == 4

    markers = clippy.overlay.handle_points()
    assert len(markers) == 3
    assert (markers[0].x(), markers[0].y()) == (0.0, 0.0)
    assert markers[1].x() == pytest.approx(100.0)
    assert markers[1].y() == pytest.approx(10.0)


def test_custom_bounds_provider(qtbot):
    class FixedBounds:
        def __init__(self):
            self.measured = []

        def measure(self, element):
            self.measured.append(element)
            return Rectangle.from_origin_size(10, 20, 400, 200)

    provider = FixedBounds()
    target = _make_target()
    widget = ClippyWidget(target, bounds_provider=provider)
    qtbot.addWidget(widget)

    widget.remeasure()
    assert provider.measured[-1] is target
    assert widget.controller.bounds == Rectangle.from_origin_size(10, 20, 400, 200)

    widget.toggle()
    widget.add_point(210, 120)
    assert widget.controller.handles.get(2).css() == "50.00% 50.00%"
