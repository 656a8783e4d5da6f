"""Command line entry point: read one TEMPer sensor and print MRTG output."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from . import __version__
from .config import RuntimeOptions
from .device import SensorNotFoundError, TemperSensor, find_single_sensor
from .errors import TemperError
from .models import ConversionRule, SensorSlot
from .mrtg import format_values, render_error, render_values
from .selftest import run_self_test

logger = logging.getLogger(__name__)

PROGRAM_NAME = "tempersensor"

SENSOR_HELP = (
    "it = internal temperature, et = external temperature, "
    "ih = internal humidity, eh = external humidity"
)


def _calibration(text: str) -> float:
    if "," in text:
        raise argparse.ArgumentTypeError(f"'{text}' must not contain ','.")
    try:
        return float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{text}' is not a float.")


def _sensor(text: str) -> SensorSlot:
    try:
        return SensorSlot.from_code(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid value '{text}' ({SENSOR_HELP})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Report TEMPer USB sensor values in MRTG format.",
    )
    parser.add_argument("--calibration-in", type=_calibration, default=0.0,
                        metavar="[-]n.n", help="modify result for IN")
    parser.add_argument("--calibration-out", type=_calibration, default=0.0,
                        metavar="[-]n.n", help="modify result for OUT")
    parser.add_argument("--conversion-method", type=int, choices=[1, 2],
                        help="override conversion from response values: "
                             "1 = two's complement with 4 bits used for fraction, "
                             "2 = two's complement with 16 bits, value multiplied by 100")
    parser.add_argument("-d", "--debug", action="store_true", help="show debug output")
    parser.add_argument("-f", "--fahrenheit", action="store_true",
                        help="report temperatures in Fahrenheit")
    parser.add_argument("-p", "--precision", type=int, default=0, metavar="LEN",
                        help="amount of decimal places (default=0)")
    parser.add_argument("--report-in", type=_sensor, metavar="SENSOR",
                        help=f"report sensor SENSOR as IN value ({SENSOR_HELP})")
    parser.add_argument("--report-out", type=_sensor, metavar="SENSOR",
                        help=f"report sensor SENSOR as OUT value ({SENSOR_HELP})")
    parser.add_argument("-t", "--test", action="store_true",
                        help="run tests for temperature calculation")
    parser.add_argument("-V", "--version", action="version",
                        version=f"{PROGRAM_NAME} version {__version__}",
                        help="display version information")
    return parser


def options_from_args(args: argparse.Namespace) -> RuntimeOptions:
    conversion_rule = None
    if args.conversion_method is not None:
        conversion_rule = ConversionRule(args.conversion_method)
    return RuntimeOptions(
        precision=args.precision,
        fahrenheit=args.fahrenheit,
        in_sensor=args.report_in,
        out_sensor=args.report_out,
        calibration_in=args.calibration_in,
        calibration_out=args.calibration_out,
        conversion_rule=conversion_rule,
        debug=args.debug,
    )


def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        stream=sys.stderr,
    )


def run(options: RuntimeOptions, out: Optional[TextIO] = None) -> int:
    """Find, identify and read the sensor; print MRTG output.

    Returns:
        Process exit status
    """
    out = out or sys.stdout
    try:
        info = find_single_sensor()
        with TemperSensor(info, options) as sensor:
            readings = sensor.read()
            in_text, out_text = format_values(readings, sensor.options)
    except (TemperError, SensorNotFoundError) as e:
        reason = getattr(e, "reason", str(e))
        logger.debug(reason)
        out.write(render_error(reason, PROGRAM_NAME, __version__))
        return 1

    out.write(render_values(in_text, out_text, PROGRAM_NAME, __version__))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.precision < 0:
        parser.error(f"'{args.precision}' is not a valid precision")

    if args.test:
        setup_logging(debug=True)
        failures = run_self_test()
        return 1 if failures else 0

    options = options_from_args(args)
    setup_logging(options.debug)
    return run(options)
