#!/usr/bin/env python3
"""
check a servo's limits and print them as a servo profile

usage:
  - scripts/calibrate_servo.py
  - scripts/calibrate_servo.py -s S2 --min-pulse 600 --max-pulse 2300

The servo is moved to its minimum, center and maximum position. Adjust
the pulse widths until the servo reaches both end stops without
straining against them.
"""

import argparse
import logging
import sys
import time

import colorama
import coloredlogs
import yaml

from feeph.fezhat import FezHat, ServoLimits, export_servo_limits

LH = logging.getLogger("main")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(prog="calibrate_servo", description="check servo limits")
    parser.add_argument("-s", "--servo", choices=["S1", "S2"], default="S1")
    parser.add_argument("--min-pulse", type=int, default=500, help="pulse width (in µs) for the minimum angle")
    parser.add_argument("--max-pulse", type=int, default=2400, help="pulse width (in µs) for the maximum angle")
    parser.add_argument("--min-angle", type=float, default=0)
    parser.add_argument("--max-angle", type=float, default=180)
    parser.add_argument("-d", "--delay", type=float, default=1.0, help="seconds to wait at each position")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    if args.verbose:
        verbosity = "DEBUG"
    else:
        verbosity = "INFO"

    colorama.init()
    coloredlogs.install(level=verbosity, fmt="%(levelname).1s: %(message)s")

    limits = ServoLimits(minimum_pulse_width=args.min_pulse, maximum_pulse_width=args.max_pulse, minimum_angle=args.min_angle, maximum_angle=args.max_angle)
    with FezHat() as hat:
        servo = hat.s1 if args.servo == "S1" else hat.s2
        try:
            servo.apply_limits(limits)
            center = (limits.minimum_angle + limits.maximum_angle) / 2
            for angle in [limits.minimum_angle, center, limits.maximum_angle, center]:
                LH.info("Moving %s to %.1f°.", args.servo, angle)
                servo.set_position(angle)
                time.sleep(args.delay)
        except (RuntimeError, ValueError) as e:
            LH.error("Unable to drive servo %s: %s", args.servo, e)
            sys.exit(1)

    data = export_servo_limits(limits)
    print("---")
    print(yaml.dump(data, indent=4))
    sys.exit(0)
