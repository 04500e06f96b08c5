# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "satjax"]
#
# [tool.uv.sources]
# satjax = { path = ".." }
# ///
"""Predict satellite passes over a ground station.

Reads three-line element sets from a file (or uses a built-in AO-51 set),
finds every pass over the station in the requested window, and prints AOS,
LOS, maximum elevation, pole crossings and Doppler-shifted frequencies.

Requires satjax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/predict_passes.py [OPTIONS]

Examples:
    # Built-in AO-51 element set over the default station
    uv run examples/predict_passes.py --start 2009-01-05T00:00:00 --hours 24

    # Every satellite in a TLE file, with a horizon mask applied
    uv run examples/predict_passes.py --tle-file amateur.txt --hours 12 --min-elevation 5

    # Current observation with Doppler at 145.8 / 436.8 MHz
    uv run examples/predict_passes.py --now --uplink 145800000 --downlink 436800000
"""

import logging
import sys
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import jax.numpy as jnp
import typer

from satjax import set_dtype
from satjax.prediction import PassPredictor, PolePassed, SatelliteNotVisibleError
from satjax.sgp4 import parse_tle, read_tles
from satjax.station import HORIZON_SECTORS, GroundStation

set_dtype(jnp.float64)

_AO_51 = [
    "AO-51 [+]",
    "1 28375U 04025K   09105.66391970  .00000003  00000-0  13761-4 0  3643",
    "2 28375 098.0551 118.9086 0084159 315.8041 043.6444 14.40638450251959",
]


def _parse_time(value: str) -> datetime:
    when = datetime.fromisoformat(value)
    return when if when.tzinfo else when.replace(tzinfo=UTC)


def main(
    tle_file: Annotated[
        Path | None, typer.Option(help="Three-line element file (default: built-in AO-51)")
    ] = None,
    latitude: Annotated[float, typer.Option(help="Station latitude [deg, north]")] = 52.4670,
    longitude: Annotated[float, typer.Option(help="Station longitude [deg, east]")] = -2.022,
    height: Annotated[float, typer.Option(help="Station height above sea level [m]")] = 200.0,
    min_elevation: Annotated[
        int, typer.Option(help="Flat horizon mask applied to every sector [deg]")
    ] = 0,
    start: Annotated[
        str, typer.Option(help="Search start, ISO 8601 (naive times are UTC)")
    ] = "2009-01-05T00:00:00",
    now: Annotated[bool, typer.Option(help="Start the search at the current time")] = False,
    hours: Annotated[int, typer.Option(help="Length of the search window [h]")] = 24,
    wind_back: Annotated[
        bool, typer.Option(help="Report a pass already in progress from its rise")
    ] = False,
    uplink: Annotated[int | None, typer.Option(help="Uplink frequency to correct [Hz]")] = None,
    downlink: Annotated[
        int | None, typer.Option(help="Downlink frequency to correct [Hz]")
    ] = None,
    verbose: Annotated[bool, typer.Option(help="Log the pass search")] = False,
) -> None:
    """Predict passes of one or more satellites over a ground station."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    station = GroundStation(
        latitude,
        longitude,
        height,
        name="station",
        horizon_elevations=(min_elevation,) * HORIZON_SECTORS,
    )
    search_start = datetime.now(UTC) if now else _parse_time(start)

    # ── Stage 1: Load element sets ───────────────────────────────────────
    if tle_file is None:
        elements = [parse_tle(_AO_51)]
    else:
        with tle_file.open() as stream:
            elements = read_tles(stream)
    print(f"Loaded {len(elements)} element sets")
    print(f"Station: {station.latitude:.4f}, {station.longitude:.4f}, {station.height:.0f} m")

    # ── Stage 2: Pass search ─────────────────────────────────────────────
    for element_set in elements:
        print(f"\n── {element_set.name or element_set.catnum} ──")
        try:
            predictor = PassPredictor(element_set, station)
        except SatelliteNotVisibleError as exc:
            print(f"  {exc}")
            continue

        t0 = time.perf_counter()
        passes = predictor.get_passes(search_start, hours, wind_back=wind_back)
        elapsed = time.perf_counter() - t0

        for sat_pass in passes:
            pole = "" if sat_pass.pole_passed is PolePassed.NONE else f", via {sat_pass.pole_passed}"
            print(
                f"  AOS {sat_pass.start_time:%Y-%m-%d %H:%M:%S} az {sat_pass.aos_azimuth:3d}"
                f"  LOS {sat_pass.end_time:%H:%M:%S} az {sat_pass.los_azimuth:3d}"
                f"  max el {sat_pass.max_elevation:5.1f} at {sat_pass.tca:%H:%M:%S}{pole}"
            )
            if downlink is not None:
                aos = predictor.get_downlink_freq(downlink, sat_pass.start_time)
                los = predictor.get_downlink_freq(downlink, sat_pass.end_time)
                print(f"    downlink {aos} Hz at AOS, {los} Hz at LOS")
            if uplink is not None:
                aos = predictor.get_uplink_freq(uplink, sat_pass.start_time)
                los = predictor.get_uplink_freq(uplink, sat_pass.end_time)
                print(f"    uplink   {aos} Hz at AOS, {los} Hz at LOS")

        print(
            f"  {len(passes)} passes, {predictor.iteration_count} positions "
            f"evaluated in {elapsed:.1f}s"
        )

    if not elements:
        print("ERROR: No element sets found. Exiting.")
        sys.exit(1)


if __name__ == "__main__":
    typer.run(main)
