from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class StatusField:
    """
    A labelled value shown in the status bar.

    :ivar label: The label/name of the status field.
    :ivar fmt: Format string used when no formatter is given.
    :ivar formatter: Callable turning the value into display text.
    :ivar value: Current value.
    :ivar visible: Whether the field gets a status bar label.
    """
    label: str
    fmt: str = "{}"
    formatter: Callable[[Any], str] = None
    value: Any = 0
    visible: bool = True

    def __post_init__(self):
        if self.formatter is None:
            self.formatter = lambda v, fmt = self.fmt: fmt.format(v)

    def text(self) -> str:
        return f"{self.label}: {self.formatter(self.value)}"


def format_size(size: tuple[float, float]) -> str:
    """Format a (width, height) pair; unmeasured sizes show a dash."""
    width, height = size
    if width <= 0 or height <= 0:
        return "-"
    return f"{width:g} x {height:g}"


# To add a value, add a field here and update it from MainWindow.
STATUS_FIELDS = {
    "state": StatusField(label="State", value="idle"),
    "handles": StatusField(label="Handles", fmt="{:d}", value=1),
    "area": StatusField(label="Area", fmt="{:.1f}%", value=0.0),
    "size": StatusField(label="Size", formatter=format_size, value=(0.0, 0.0)),
}
