"""Shared fixtures for the earth-journey test suite."""

import pytest

from animations import globe_flight_lines, london_to_shenzhen
from models import (
    CameraPose,
    FlightConfig,
    FlightLine,
    FlightSegment,
    GlobeCamera,
    GlobeLineConfig,
    Location,
)


@pytest.fixture
def london():
    return Location(lat=51.5214, lon=-0.1448, name="London", name_zh="伦敦")


@pytest.fixture
def shenzhen():
    return Location(lat=22.6815, lon=113.839, name="Shenzhen", name_zh="深圳")


@pytest.fixture
def flight_project():
    """London -> Shenzhen: 5 segments, 22 s at 60 fps."""
    return london_to_shenzhen()


@pytest.fixture
def flight_config(flight_project):
    return flight_project.config


@pytest.fixture
def globe_project():
    return globe_flight_lines()


@pytest.fixture
def globe_config(globe_project):
    return globe_project.config


@pytest.fixture
def simple_flight():
    """Two segments: a straight climb, then a move east."""
    return FlightConfig(
        fps=10,
        start_position=CameraPose(10.0, 20.0, 1_000.0, 0.0, -90.0),
        segments=(
            FlightSegment("climb", 2, CameraPose(10.0, 20.0, 100_000.0, 0.0, -90.0)),
            FlightSegment("cruise", 2, CameraPose(30.0, 25.0, 200_000.0, 10.0, -60.0)),
        ),
    )


@pytest.fixture
def follow_config(london, shenzhen):
    return GlobeLineConfig(
        fps=30,
        camera=GlobeCamera(lon=0, lat=0, alt=20_000_000, follow_line=True),
        total_duration=10,
        lines=(FlightLine(start=london, end=shenzhen, duration=5, color="#ff0000", delay=1),),
    )
