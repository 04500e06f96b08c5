"""
Observation of a propagated satellite from a ground station.

Combines the propagator output with the topocentric look angles, the
geodetic sub-satellite point and the eclipse test into a :class:`SatPos`.
"""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple

import jax
from jax import Array
from jax.typing import ArrayLike

from satjax.coordinates import above_horizon, look_angles, position_eci_to_geodetic
from satjax.illumination import eclipse, sun_position
from satjax.prediction._types import SatPos
from satjax.sgp4 import Satellite
from satjax.station import GroundStation
from satjax.time import as_utc, julian_date_utc


class _Observation(NamedTuple):
    azimuth: Array
    elevation: Array
    range: Array
    range_rate: Array
    latitude: Array
    longitude: Array
    altitude: Array
    theta: Array
    eclipsed: Array
    eclipse_depth: Array
    above_horizon: Array


@jax.jit
def _observe_state(
    position: ArrayLike,
    velocity: ArrayLike,
    jd: ArrayLike,
    latitude: ArrayLike,
    longitude: ArrayLike,
    height: ArrayLike,
    horizon_mask: ArrayLike,
) -> _Observation:
    angles = look_angles(position, velocity, latitude, longitude, height, jd)
    point = position_eci_to_geodetic(position, jd)
    shadow = eclipse(position, sun_position(jd))
    return _Observation(
        azimuth=angles.azimuth,
        elevation=angles.elevation,
        range=angles.range,
        range_rate=angles.range_rate,
        latitude=point.latitude,
        longitude=point.longitude,
        altitude=point.altitude,
        theta=point.theta,
        eclipsed=shadow.eclipsed,
        eclipse_depth=shadow.depth,
        above_horizon=above_horizon(angles.azimuth, angles.elevation, horizon_mask),
    )


def observe(satellite: Satellite, station: GroundStation, when: datetime) -> SatPos:
    """Observe a satellite from a ground station at a given instant.

    Args:
        satellite: Satellite to propagate.
        station: Observing ground station.
        when: Civil instant (naive datetimes are UTC).

    Returns:
        :class:`SatPos` with look angles, sub-satellite point, phase and
        eclipse state.

    Raises:
        ValueError: If ``satellite`` or ``station`` is ``None``.

    Examples:
        ```python
        from datetime import datetime, UTC
        from satjax.prediction import observe

        pos = observe(sat, GroundStation(52.4670, -2.022, 200.0),
                      datetime(2009, 4, 17, 6, 57, 32, tzinfo=UTC))
        pos.azimuth  # 3.2421950...
        ```
    """
    if satellite is None:
        raise ValueError("Satellite has not been set")
    if station is None:
        raise ValueError("Ground station has not been set")

    when = as_utc(when)
    jd = julian_date_utc(when)
    state = satellite.state_at(when)

    obs, phase = jax.device_get(
        (
            _observe_state(
                state.position,
                state.velocity,
                jd,
                station.latitude,
                station.longitude,
                station.height,
                station.horizon_elevations,
            ),
            state.phase,
        )
    )

    return SatPos(
        azimuth=float(obs.azimuth),
        elevation=float(obs.elevation),
        range=float(obs.range),
        range_rate=float(obs.range_rate),
        latitude=float(obs.latitude),
        longitude=float(obs.longitude),
        altitude=float(obs.altitude),
        theta=float(obs.theta),
        phase=float(phase),
        eclipsed=bool(obs.eclipsed),
        eclipse_depth=float(obs.eclipse_depth),
        above_horizon=bool(obs.above_horizon),
        time=when,
    )
