"""Calibration and MRTG presentation.

MRTG external scripts print four lines: the "in" value, the "out" value,
the system uptime and the name of the target. Values that could not be
read are printed as UNKNOWN.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional, Tuple

from .config import RuntimeOptions
from .models import INVALID_VALUE, SensorReadings, SensorSlot

logger = logging.getLogger(__name__)

UNKNOWN = "UNKNOWN"
PROC_UPTIME = Path("/proc/uptime")

# (unit, seconds per unit, separator after the unit)
_TIME_UNITS = (
    ("week", 7 * 24 * 60 * 60, ", "),
    ("day", 24 * 60 * 60, ", "),
    ("hour", 60 * 60, ", "),
    ("minute", 60, " and "),
)


def fahrenheit(celsius: float) -> float:
    return celsius * (9.0 / 5.0) + 32.0


def present_value(
    value: float,
    calibration: float = 0.0,
    precision: int = 0,
    use_fahrenheit: bool = False,
    slot: Optional[SensorSlot] = None,
) -> str:
    """Apply unit conversion and calibration, then format one value.

    Args:
        value: Reading from SensorReadings (may be INVALID_VALUE)
        calibration: Offset added after unit conversion
        precision: Decimal places
        use_fahrenheit: Convert temperatures to Fahrenheit
        slot: Slot the value came from; humidity is never converted

    Returns:
        Formatted value, or UNKNOWN for invalid readings
    """
    if value <= INVALID_VALUE:
        return UNKNOWN
    if use_fahrenheit and (slot is None or slot.is_temperature):
        value = fahrenheit(value)
    value += calibration
    return f"{value:.{precision}f}"


def format_values(readings: SensorReadings, options: RuntimeOptions) -> Tuple[str, str]:
    """Format the "in" and "out" values selected in ``options``.

    A slot left unset in ``options`` is reported as UNKNOWN.
    """
    def _present(slot: Optional[SensorSlot], calibration: float) -> str:
        if slot is None:
            return UNKNOWN
        return present_value(
            readings[slot],
            calibration=calibration,
            precision=options.precision,
            use_fahrenheit=options.fahrenheit,
            slot=slot,
        )

    return (
        _present(options.in_sensor, options.calibration_in),
        _present(options.out_sensor, options.calibration_out),
    )


def get_uptime() -> int:
    """System uptime in whole seconds, 0 if unavailable."""
    try:
        return int(float(PROC_UPTIME.read_text().split()[0]))
    except (OSError, ValueError, IndexError) as e:
        logger.debug(f"Uptime unavailable: {e}")
        return 0


def _format_unit(value: int, unit: str, separator: str, always: bool = False) -> str:
    if value == 0 and not always:
        return ""
    plural = "" if value == 1 else "s"
    return f"{value} {unit}{plural}{separator}"


def pretty_print_time(seconds: int) -> str:
    """Render seconds like '1 week, 2 days, 3 hours, 4 minutes and 5 seconds'.

    Units that are zero are left out, except seconds.
    """
    parts: List[str] = []
    for unit, unit_seconds, separator in _TIME_UNITS:
        count, seconds = divmod(seconds, unit_seconds)
        parts.append(_format_unit(count, unit, separator))
    parts.append(_format_unit(seconds, "second", "", always=True))
    return "".join(parts)


def timestamp(now: Optional[float] = None) -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(now))


def signature_lines(program: str, version: str, error: str = "", uptime: Optional[int] = None) -> List[str]:
    """Lines 3 and 4 of the MRTG output."""
    if uptime is None:
        uptime = get_uptime()
    line3 = pretty_print_time(uptime) if uptime > 0 else timestamp()
    line4 = f"{program} {version} ({error})" if error else f"{program} {version}"
    return [line3, line4]


def render_values(
    in_text: str,
    out_text: str,
    program: str,
    version: str,
    uptime: Optional[int] = None,
) -> str:
    """Full MRTG output for a successful run."""
    lines = [in_text, out_text] + signature_lines(program, version, uptime=uptime)
    return "\n".join(lines) + "\n"


def render_error(error: str, program: str, version: str, uptime: Optional[int] = None) -> str:
    """Full MRTG output for a failed run."""
    lines = [UNKNOWN, UNKNOWN] + signature_lines(program, version, error=error, uptime=uptime)
    return "\n".join(lines) + "\n"
