"""High-level satellite class for SGP4/SDP4 propagation.

Provides :class:`Satellite`, a wrapper that selects the near-earth or
deep-space model once from the element set, owns the deep-space resonance
integrator state, and converts civil time to minutes since epoch.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import datetime
from functools import partial
from typing import TYPE_CHECKING, NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.constants import DEG2RAD, EARTH_RADIUS_KM, MINS_PER_DAY
from satjax.coordinates import GeodeticPoint, position_eci_to_geodetic
from satjax.sgp4._deep_space import deep_space_init, initial_resonance_state
from satjax.sgp4._propagation import near_earth_init, sgp4_propagate
from satjax.sgp4._tle import parse_tle
from satjax.sgp4._types import OrbitalElements, PropagationState, ResonanceState
from satjax.time import julian_date_utc

if TYPE_CHECKING:
    from satjax.station import GroundStation

logger = logging.getLogger(__name__)

# Below this mean motion the object is treated as never visible [rev/day]
_MIN_MEAN_MOTION = 1.0e-8


@partial(jax.jit, static_argnames=("method",))
def _propagate_jit(
    params: NamedTuple,
    tsince: ArrayLike,
    method: str,
    resonance: ResonanceState | None,
) -> tuple[PropagationState, ResonanceState | None]:
    return sgp4_propagate(params, tsince, method, resonance)


_geodetic_jit = jax.jit(position_eci_to_geodetic)


class Satellite:
    """An element set bound to its SGP4 or SDP4 propagator.

    The propagator is chosen at construction from the deep-space
    classification of the elements: ``'n'`` for periods below 225 minutes,
    ``'d'`` otherwise. A deep-space satellite keeps the resonance
    integrator state between calls so that queries moving away from epoch
    resume where the previous one stopped. Results depend only on the
    query time.

    Instances are not safe to share between threads while propagating.

    Examples:
        ```python
        from datetime import datetime, UTC
        from satjax.sgp4 import Satellite

        sat = Satellite.from_tle([
            "AO-51 [+]",
            "1 28375U 04025K   09105.66391970  .00000003  00000-0  13761-4 0  3643",
            "2 28375 098.0551 118.9086 0084159 315.8041 043.6444 14.40638450251959",
        ])
        r_km, v_kms = sat.propagate(60.0)
        point = sat.ground_track(datetime(2009, 4, 17, 6, 57, 32, tzinfo=UTC))
        ```

    Args:
        elements: Pre-processed orbital elements.

    Raises:
        ValueError: If ``elements`` is ``None``.
    """

    def __init__(self, elements: OrbitalElements) -> None:
        if elements is None:
            raise ValueError("Orbital elements have not been set")

        self._elements = elements
        self._resonance: ResonanceState | None = None
        if elements.deepspace:
            self._method = "d"
            self._params = deep_space_init(elements)
            self._resonance = initial_resonance_state(self._params)
        else:
            self._method = "n"
            self._params = near_earth_init(elements)

        logger.debug(
            "Satellite %s (%d) uses the %s propagator",
            elements.name,
            elements.catnum,
            "deep-space" if elements.deepspace else "near-earth",
        )

    @classmethod
    def from_tle(cls, lines: Sequence[str], strict: bool = False) -> Satellite:
        """Parse a two- or three-line element set and build a satellite."""
        return cls(parse_tle(lines, strict=strict))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def elements(self) -> OrbitalElements:
        """The orbital elements the satellite was built from."""
        return self._elements

    @property
    def name(self) -> str:
        return self._elements.name

    @property
    def catnum(self) -> int:
        return self._elements.catnum

    @property
    def method(self) -> str:
        """Propagation method: ``'n'`` (near-earth) or ``'d'`` (deep-space)."""
        return self._method

    @property
    def is_deepspace(self) -> bool:
        return self._method == "d"

    @property
    def params(self) -> NamedTuple:
        """Propagator coefficients (for advanced use)."""
        return self._params

    @property
    def resonance(self) -> ResonanceState | None:
        """Deep-space integrator state after the last call, ``None`` for near-earth."""
        return self._resonance

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------

    def tsince(self, when: datetime) -> float:
        """Minutes from the element set epoch to ``when``."""
        return (julian_date_utc(when) - self._elements.julian_epoch) * MINS_PER_DAY

    def propagate_state(self, tsince_min: float | ArrayLike) -> PropagationState:
        """Propagate to a time since epoch.

        Args:
            tsince_min: Time since epoch [min], a scalar.

        Returns:
            Position [km], velocity [km/s] and orbital phase [rad].
        """
        state, self._resonance = _propagate_jit(
            self._params, jnp.asarray(tsince_min), self._method, self._resonance
        )
        return state

    def propagate(self, tsince_min: float | ArrayLike) -> tuple[Array, Array]:
        """Propagate and return raw output.

        Args:
            tsince_min: Time since epoch in **minutes**.

        Returns:
            Tuple ``(r_km, v_kms)``: position [km] and velocity [km/s] in
            the TEME frame.
        """
        state = self.propagate_state(tsince_min)
        return state.position, state.velocity

    def state_at(self, when: datetime) -> PropagationState:
        """Propagate to a civil instant (naive datetimes are UTC)."""
        return self.propagate_state(self.tsince(when))

    def ground_track(self, when: datetime) -> GeodeticPoint:
        """Sub-satellite latitude, longitude and altitude at ``when``.

        Args:
            when: Civil instant (naive datetimes are UTC).

        Returns:
            :class:`~satjax.coordinates.GeodeticPoint` with angles in
            radians and altitude in km.
        """
        jd = julian_date_utc(when)
        state = self.propagate_state((jd - self._elements.julian_epoch) * MINS_PER_DAY)
        return _geodetic_jit(state.position, jd)

    def will_be_seen(self, station: GroundStation) -> bool:
        """Whether the satellite can ever rise above the station's horizon.

        Compares the horizon angle from apogee plus the orbit inclination
        with the station latitude. Objects with a mean motion below
        ``1e-8`` rev/day are never seen.
        """
        e = self._elements
        if e.meanmo < _MIN_MEAN_MOTION:
            return False

        lin = e.incl
        if lin >= 90.0:
            lin = 180.0 - lin

        sma = 331.25 * math.exp(math.log(1440.0 / e.meanmo) * (2.0 / 3.0))
        apogee = sma * (1.0 + e.eccn) - EARTH_RADIUS_KM

        return (
            math.acos(EARTH_RADIUS_KM / (apogee + EARTH_RADIUS_KM)) + lin * DEG2RAD
            > abs(station.latitude * DEG2RAD)
        )

    def __repr__(self) -> str:
        return (
            f"Satellite(name={self.name!r}, catnum={self.catnum}, "
            f"meanmo={self._elements.meanmo:.8f} rev/day, method={self._method!r})"
        )
