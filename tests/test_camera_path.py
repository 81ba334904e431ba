"""Tests for the keyframed flight animator.

Tests cover:
- exact start/end poses and boundary snapping
- continuity of per-frame deltas, shrinking with fps
- vertical segments keeping lon/lat fixed under both policies
- London -> Shenzhen end-to-end scenario
- cloud opacity curve
- config validation and policy selection
"""

from dataclasses import replace

import pytest

from camera_path import (
    END_SEGMENT,
    POLICIES,
    CatmullRomPolicy,
    FlightAnimator,
    HermitePolicy,
    cloud_opacity,
    resolve_policy,
)
from models import CameraPose, FlightConfig, FlightSegment


@pytest.fixture(params=sorted(POLICIES))
def policy(request):
    return request.param


def _max_deltas(animator):
    poses = [fp.pose for _, fp in animator.iter_frames()]
    lon = max(abs(b.lon - a.lon) for a, b in zip(poses, poses[1:]))
    lat = max(abs(b.lat - a.lat) for a, b in zip(poses, poses[1:]))
    return lon, lat


# ---------------------------------------------------------------------------
# Boundaries
# ---------------------------------------------------------------------------

class TestBoundaries:
    def test_first_frame_is_start_pose(self, flight_config, policy):
        animator = FlightAnimator(flight_config, policy=policy)
        framed = animator.position_at_frame(0)
        assert framed.pose == flight_config.start_position
        assert framed.segment == "pullout-london"

    def test_last_frame_is_final_keyframe(self, flight_config, policy):
        animator = FlightAnimator(flight_config, policy=policy)
        framed = animator.position_at_frame(animator.total_frames - 1)
        assert framed.pose == flight_config.segments[-1].to
        assert framed.segment == END_SEGMENT

    def test_short_path_ends_on_final_keyframe(self, simple_flight, policy):
        """40 frames never reach the 0.999 snap window; the last frame still lands exactly."""
        animator = FlightAnimator(simple_flight, policy=policy)
        framed = animator.position_at_frame(animator.total_frames - 1)
        assert framed.pose == simple_flight.segments[-1].to
        assert framed.segment == END_SEGMENT
        assert animator.position_at_frame(0).pose == simple_flight.start_position

    def test_out_of_range_frames_clamp(self, flight_config, policy):
        animator = FlightAnimator(flight_config, policy=policy)
        assert animator.position_at_frame(-10).pose == flight_config.start_position
        assert animator.position_at_frame(10_000).pose == flight_config.segments[-1].to

    def test_seeking_is_stateless(self, flight_config, policy):
        animator = FlightAnimator(flight_config, policy=policy)
        first = animator.position_at_frame(700)
        animator.position_at_frame(10)
        animator.position_at_frame(1200)
        assert animator.position_at_frame(700) == first

    def test_iter_frames_covers_timeline(self, simple_flight, policy):
        animator = FlightAnimator(simple_flight, policy=policy)
        frames = list(animator.iter_frames())
        assert len(frames) == 40
        assert frames[0][0] == 0
        assert frames[-1][0] == 39


# ---------------------------------------------------------------------------
# Continuity
# ---------------------------------------------------------------------------

class TestContinuity:
    def test_per_frame_deltas_are_bounded(self, flight_config, policy):
        lon, lat = _max_deltas(FlightAnimator(flight_config, policy=policy))
        assert lon < 1.0
        assert lat < 1.0

    def test_deltas_shrink_with_fps(self, flight_config, policy):
        slow = FlightAnimator(replace(flight_config, fps=30), policy=policy)
        fast = FlightAnimator(replace(flight_config, fps=120), policy=policy)
        slow_lon, slow_lat = _max_deltas(slow)
        fast_lon, fast_lat = _max_deltas(fast)
        assert fast_lon < slow_lon
        assert fast_lat < slow_lat


# ---------------------------------------------------------------------------
# Vertical segments
# ---------------------------------------------------------------------------

class TestVerticalSegments:
    def test_pullout_keeps_lon_lat(self, flight_config, policy):
        animator = FlightAnimator(flight_config, policy=policy)
        start = flight_config.start_position
        for frame in range(0, 240):
            framed = animator.position_at_frame(frame)
            if framed.segment != "pullout-london":
                continue
            assert framed.lon == start.lon
            assert framed.lat == start.lat

    def test_dive_keeps_lon_lat(self, flight_config, policy):
        animator = FlightAnimator(flight_config, policy=policy)
        end = flight_config.segments[-1].to
        dive_frames = [
            animator.position_at_frame(f)
            for f in range(1080, animator.total_frames)
        ]
        dive_frames = [fp for fp in dive_frames if fp.segment in ("dive-shenzhen", END_SEGMENT)]
        assert dive_frames
        for framed in dive_frames:
            assert framed.lon == end.lon
            assert framed.lat == end.lat

    def test_interior_vertical_segment_keeps_lon_lat(self, policy):
        config = FlightConfig(
            fps=10,
            start_position=CameraPose(0.0, 0.0, 1_000.0, 0.0, -90.0),
            segments=(
                FlightSegment("east", 2, CameraPose(10.0, 5.0, 500_000.0, 0.0, -90.0)),
                FlightSegment("climb", 2, CameraPose(20.0, 10.0, 2_000_000.0, 0.0, -90.0)),
                FlightSegment("descend", 2, CameraPose(20.0, 10.0, 200_000.0, 0.0, -90.0)),
                FlightSegment("approach", 2, CameraPose(30.0, 15.0, 800_000.0, 0.0, -90.0)),
                FlightSegment("land", 2, CameraPose(40.0, 20.0, 1_000.0, 0.0, -90.0)),
            ),
        )
        animator = FlightAnimator(config, policy=policy)
        descend = [fp for _, fp in animator.iter_frames() if fp.segment == "descend"]
        assert descend
        for framed in descend:
            assert framed.lon == 20.0
            assert framed.lat == 10.0

    def test_catmull_rom_treats_interior_vertical_as_linear(self):
        config = FlightConfig(
            fps=10,
            start_position=CameraPose(0.0, 0.0, 1_000.0, 0.0, -90.0),
            segments=(
                FlightSegment("a", 1, CameraPose(10.0, 5.0, 5_000.0, 0.0, -90.0)),
                FlightSegment("b", 1, CameraPose(20.0, 10.0, 9_000.0, 0.0, -90.0)),
                FlightSegment("c", 1, CameraPose(20.0, 10.0, 3_000.0, 0.0, -90.0)),
                FlightSegment("d", 1, CameraPose(30.0, 15.0, 4_000.0, 0.0, -90.0)),
                FlightSegment("e", 1, CameraPose(40.0, 20.0, 1_000.0, 0.0, -90.0)),
            ),
        )
        policy = FlightAnimator(config, policy="catmull-rom").policy
        assert policy.linear_segments == frozenset({0, 2, 3, 4})

    def test_coincident_interior_keyframes(self, policy):
        p = CameraPose(5.0, 45.0, 2_000.0, 0.0, -90.0)
        q = CameraPose(15.0, 50.0, 80_000.0, 0.0, -90.0)
        config = FlightConfig(
            fps=10,
            start_position=p,
            segments=(
                FlightSegment("out", 1, q),
                FlightSegment("hold", 1, q),
                FlightSegment("back", 1, p),
            ),
        )
        animator = FlightAnimator(config, policy=policy)
        hold = [fp for _, fp in animator.iter_frames() if fp.segment == "hold"]
        assert hold
        for framed in hold:
            assert framed.lon == q.lon
            assert framed.lat == q.lat
            assert framed.heading == q.heading
            assert framed.pitch == q.pitch
            assert framed.alt == pytest.approx(q.alt)

    def test_climb_altitude_is_monotonic(self, simple_flight, policy):
        animator = FlightAnimator(simple_flight, policy=policy)
        alts = [animator.position_at_frame(f).alt for f in range(0, 20)]
        assert alts == sorted(alts)


# ---------------------------------------------------------------------------
# London -> Shenzhen
# ---------------------------------------------------------------------------

class TestLondonToShenzhen:
    def test_total_frames(self, flight_config):
        assert FlightAnimator(flight_config).total_frames == 1320

    def test_starts_over_london(self, flight_config, policy):
        framed = FlightAnimator(flight_config, policy=policy).position_at_frame(0)
        assert framed.lon == -0.1448
        assert framed.lat == 51.5214
        assert framed.alt == 500
        assert framed.pitch == -90

    def test_lands_on_shenzhen(self, flight_config, policy):
        framed = FlightAnimator(flight_config, policy=policy).position_at_frame(1319)
        assert framed.lon == 113.839
        assert framed.lat == 22.6815
        assert framed.alt == 500
        assert framed.pitch == -90

    def test_midpoint_is_high_above_asia(self, flight_config, policy):
        framed = FlightAnimator(flight_config, policy=policy).position_at_frame(660)
        assert framed.alt > 1_000_000
        assert 60.0 <= framed.lon <= 104.2
        assert cloud_opacity(framed.alt) == 0.0
        assert framed.segment == "approach-china"

    def test_hermite_altitude_is_log_blended(self, flight_config):
        framed = FlightAnimator(flight_config, policy="hermite").position_at_frame(660)
        # 1 s into the 4 s approach-china segment: 12,000 km -> 6,000 km.
        assert framed.alt == pytest.approx(12_000_000 * 0.5 ** 0.25)


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

class TestPolicies:
    def test_resolve_by_name(self):
        assert resolve_policy("hermite") is HermitePolicy
        assert resolve_policy("Catmull-Rom") is CatmullRomPolicy
        assert resolve_policy(CatmullRomPolicy) is CatmullRomPolicy

    def test_unknown_policy(self, flight_config):
        with pytest.raises(ValueError, match="Unknown interpolation policy"):
            FlightAnimator(flight_config, policy="bezier")

    def test_default_is_hermite(self, flight_config):
        assert FlightAnimator(flight_config).policy.name == "hermite"

    def test_catmull_rom_linear_segments(self, flight_config):
        policy = FlightAnimator(flight_config, policy="catmull-rom").policy
        assert policy.linear_segments == frozenset({0, 3, 4})

    def test_catmull_rom_ease(self):
        ease = CatmullRomPolicy.ease
        assert ease(0.0) == 0.0
        assert ease(1.0) == pytest.approx(1.0)
        assert ease(0.5) == 0.5
        assert ease(0.04) == pytest.approx(0.04)
        assert ease(0.01) < 0.01

    def test_hermite_tangents_zeroed_next_to_vertical(self, flight_config):
        policy = FlightAnimator(flight_config, policy="hermite").policy
        for idx in (0, 1, 4, 5):
            assert policy.tangents[idx].lon == 0.0
            assert policy.tangents[idx].lat == 0.0
        assert policy.tangents[2].lon > 0.0

    def test_policy_needs_two_keyframes(self):
        with pytest.raises(ValueError):
            HermitePolicy([CameraPose(0, 0, 1, 0, -90)], [0.0])


# ---------------------------------------------------------------------------
# Config validation
# ---------------------------------------------------------------------------

class TestFlightConfigValidation:
    def test_needs_a_segment(self):
        with pytest.raises(ValueError, match="at least one segment"):
            FlightConfig(fps=60, start_position=CameraPose(0, 0, 500, 0, -90), segments=())

    def test_rejects_non_positive_duration(self):
        with pytest.raises(ValueError, match="non-positive duration"):
            FlightConfig(
                fps=60,
                start_position=CameraPose(0, 0, 500, 0, -90),
                segments=(FlightSegment("bad", 0, CameraPose(0, 0, 1_000, 0, -90)),),
            )

    @pytest.mark.parametrize("fps", [0, -30, 29.97])
    def test_rejects_bad_fps(self, fps):
        with pytest.raises(ValueError, match="fps"):
            FlightConfig(
                fps=fps,
                start_position=CameraPose(0, 0, 500, 0, -90),
                segments=(FlightSegment("up", 1, CameraPose(0, 0, 1_000, 0, -90)),),
            )

    def test_keyframes_and_duration(self, flight_config):
        assert len(flight_config.keyframes) == 6
        assert flight_config.total_duration == 22


# ---------------------------------------------------------------------------
# Cloud opacity
# ---------------------------------------------------------------------------

class TestCloudOpacity:
    @pytest.mark.parametrize(
        "alt, expected",
        [
            (500, 0.0),
            (1_000, 0.0),
            (2_000, 0.5),
            (3_000, 1.0),
            (4_000, 1.0),
            (6_000, 1.0),
            (10_000, 0.5556),
            (15_000, 0.0),
            (20_000, 0.0),
        ],
    )
    def test_curve(self, alt, expected):
        assert cloud_opacity(alt) == pytest.approx(expected, abs=1e-4)

    def test_static_accessor(self):
        assert FlightAnimator.cloud_opacity(2_000) == cloud_opacity(2_000)
