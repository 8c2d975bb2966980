#!/usr/bin/env python3
"""
conversion-related functions
"""

# PCA9685 (datasheet section 7.3.5)
OSCILLATOR_FREQUENCY = 25_000_000  # internal oscillator, 25MHz
TICKS_PER_PERIOD = 4096            # 12-bit counter
PRESCALE_MIN = 0x03                # values below 3 are forced to 3 by the chip
PRESCALE_MAX = 0xFF


def convert_frequency2prescale(frequency: int) -> int:
    """
    calculate the PCA9685 prescaler for the provided frequency
    (50Hz -> 121, 1500Hz -> 3)

    values outside the prescaler's range are clamped to the nearest
    available frequency
    """
    if frequency > 0:
        prescale = round(OSCILLATOR_FREQUENCY / (TICKS_PER_PERIOD * frequency)) - 1
        return min(max(prescale, PRESCALE_MIN), PRESCALE_MAX)
    else:
        raise ValueError(f"provided frequency {frequency} is out of range (0 < x)")


def convert_prescale2frequency(prescale: int) -> float:
    """
    calculate the effective output frequency for the provided prescaler
    """
    return OSCILLATOR_FREQUENCY / (TICKS_PER_PERIOD * (prescale + 1))


def convert_dutycycle2ticks(value: float) -> int:
    """
    convert a duty cycle (0.0 ≤ x ≤ 1.0) to the PCA9685's off tick
    (0.0 -> 0, 0.5 -> 2048, 1.0 -> 4095)
    """
    if 0.0 <= value <= 1.0:
        return round(value * (TICKS_PER_PERIOD - 1))
    else:
        raise ValueError(f"provided duty cycle {value} is out of range (0.0 ≤ x ≤ 1.0)")


def convert_pulsewidth2ticks(pulse_width: float, frequency: int) -> int:
    """
    convert a pulse width in µs to the number of ticks it lasts at the
    provided frequency (500µs @ 50Hz -> 102)

    partial ticks are truncated
    """
    period = 1_000_000 / frequency
    return int(pulse_width / period * TICKS_PER_PERIOD)


def convert_bytes2acceleration(msb: int, lsb: int) -> float:
    """
    convert the MMA8453's 10-bit two's complement reading to g
    (0x4B + 0x00 -> 1.171875, 0x96 + 0x00 -> -1.65625)

    the reading is left-justified: 8 bits in the MSB, 2 bits in the
    upper part of the LSB
    """
    value = (msb << 2) | (lsb >> 6)
    if value > 511:
        value -= 1024
    return value / 256


def convert_voltage2temperature(value: float) -> float:
    """
    convert the normalized reading of the onboard temperature sensor
    (19.5mV/°C, 450mV offset, 3.3V reference) to °C
    """
    return (value * 3300.0 - 450.0) / 19.5
