"""
Ground station description used by the observation model and pass search.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

# Ten-degree azimuth sectors starting at north
HORIZON_SECTORS = 36


@dataclass(frozen=True)
class GroundStation:
    """Position and local horizon of a ground observer.

    Attributes:
        latitude: Geodetic latitude, positive north [deg].
        longitude: Longitude, positive east [deg].
        height: Height above mean sea level [m].
        name: Optional station name.
        horizon_elevations: Minimum usable elevation for each of the 36
            ten-degree azimuth sectors, starting at north [deg].

    Raises:
        ValueError: If ``horizon_elevations`` does not hold 36 values.

    Examples:
        ```python
        from satjax.station import GroundStation

        station = GroundStation(52.4670, -2.022, 200.0, name="G4DPZ")
        station.horizon_elevation(0)  # 0
        ```
    """

    latitude: float
    longitude: float
    height: float
    name: str = ""
    horizon_elevations: tuple[int, ...] = field(default=(0,) * HORIZON_SECTORS)

    def __post_init__(self):
        mask = tuple(int(e) for e in self.horizon_elevations)
        if len(mask) != HORIZON_SECTORS:
            raise ValueError(
                f"Expected {HORIZON_SECTORS} horizon elevations, got {len(mask)}"
            )
        object.__setattr__(self, "horizon_elevations", mask)

    @classmethod
    def with_horizon(
        cls,
        latitude: float,
        longitude: float,
        height: float,
        horizon_elevations: Sequence[int],
        name: str = "",
    ) -> GroundStation:
        """Build a station with a horizon elevation mask."""
        return cls(latitude, longitude, height, name, tuple(horizon_elevations))

    def horizon_elevation(self, sector: int) -> int:
        """Minimum elevation of a ten-degree azimuth sector [deg]."""
        return self.horizon_elevations[sector]

    def __str__(self) -> str:
        return self.name or f"({self.latitude:.4f}, {self.longitude:.4f}, {self.height:.0f} m)"
