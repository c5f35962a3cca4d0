"""Rich table rendering of cached servo telemetry."""

from typing import Optional, Sequence

from rich import box
from rich.table import Table
from rich.text import Text

from sts3215.models import ServoInfo
from sts3215.tables import MAX_POSITION


def _make_bar(value: Optional[float], max_value: float = 1.0, width: int = 20) -> str:
    """Render a simple ASCII progress bar for a value in [0, max_value]."""
    if value is None:
        return "[" + " " * width + "]"
    ratio = max(0.0, min(1.0, float(value) / float(max_value)))
    filled = int(round(ratio * width))
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def build_servo_table(
    infos: Sequence[ServoInfo],
    selected_index: Optional[int] = None,
    title: str = "Servo Status",
) -> Table:
    """
    Build a table with one row per servo.

    Args:
        infos: Telemetry snapshot, in display order
        selected_index: Row to highlight, or None
        title: Table title

    Returns:
        A rich Table ready to print or to hand to Live
    """
    table = Table(title=title, box=box.SIMPLE_HEAVY, header_style="bold yellow", expand=False)
    table.add_column("ID", justify="right", no_wrap=True)
    table.add_column("Position", no_wrap=True)
    table.add_column("Goal", justify="right", style="cyan", no_wrap=True)
    table.add_column("Speed", justify="right", style="magenta", no_wrap=True)
    table.add_column("Temp (°C)", justify="right", no_wrap=True)
    table.add_column("Load", justify="right", no_wrap=True)
    table.add_column("Voltage", justify="right", no_wrap=True)
    table.add_column("Current", justify="right", no_wrap=True)
    table.add_column("Moving", no_wrap=True)
    table.add_column("Error", no_wrap=True)

    for index, info in enumerate(infos):
        load = info.signed_load
        if abs(load) > 800:
            load_style = "bold red"
        elif abs(load) > 400:
            load_style = "yellow"
        else:
            load_style = "green"

        table.add_row(
            str(info.id),
            f"{_make_bar(info.position, max_value=MAX_POSITION, width=12)} {info.position}",
            str(info.goal_position),
            str(info.signed_speed),
            Text(str(info.temperature), style="red" if info.temperature >= 70 else "white"),
            Text(str(load), style=load_style),
            f"{info.voltage_volts:.1f} V",
            str(info.current),
            Text("Yes", style="green") if info.is_moving else Text("No", style="dim"),
            Text("Yes", style="bold red") if info.has_error else Text("No", style="green"),
            style="on grey23" if index == selected_index else None,
        )

    return table
