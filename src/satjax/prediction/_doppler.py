"""
Doppler correction of radio frequencies from the satellite range-rate.
"""

from __future__ import annotations

from satjax.constants import SPEED_OF_LIGHT


def downlink_frequency(frequency: int, range_rate: float) -> int:
    """Frequency received on the ground for a satellite transmitter.

    Args:
        frequency: Transmitted frequency [Hz].
        range_rate: Rate of change of the range [km/s], positive receding.

    Returns:
        Doppler-shifted frequency, truncated to whole Hz.
    """
    return int(frequency * (SPEED_OF_LIGHT - range_rate * 1000.0) / SPEED_OF_LIGHT)


def uplink_frequency(frequency: int, range_rate: float) -> int:
    """Frequency to transmit so the satellite receives ``frequency``.

    Args:
        frequency: Frequency wanted at the satellite [Hz].
        range_rate: Rate of change of the range [km/s], positive receding.

    Returns:
        Doppler-corrected frequency, truncated to whole Hz.
    """
    return int(frequency * (SPEED_OF_LIGHT + range_rate * 1000.0) / SPEED_OF_LIGHT)
