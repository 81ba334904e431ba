from dataclasses import replace

import pytest

from models import CameraPose
from path_analysis import build_path_analysis, segment_metrics, summarize_motion
from scene import build_scene


class TestSegmentMetrics:
    def test_london_to_shenzhen(self, flight_config):
        metrics = segment_metrics(flight_config)
        assert [m["name"] for m in metrics] == [s.name for s in flight_config.segments]

        pullout = metrics[0]
        assert pullout["vertical"] is True
        assert pullout["ground_distance_m"] == 0.0
        assert pullout["vertical_distance_m"] == 1_999_500
        assert pullout["speed_mps"] == pytest.approx(1_999_500 / 4)
        assert pullout["zoom_ratio"] == pytest.approx(4_000)

        assert metrics[1]["vertical"] is False
        assert metrics[1]["ground_distance_m"] > 0
        assert metrics[-1]["t_end"] == 22

    def test_zero_altitude_has_no_zoom_ratio(self, simple_flight):
        grounded = replace(simple_flight, start_position=CameraPose(10.0, 20.0, 0.0, 0.0, -90.0))
        assert segment_metrics(grounded)[0]["zoom_ratio"] is None


class TestSummarizeMotion:
    def test_flight(self, flight_project):
        motion = summarize_motion(build_scene(flight_project))
        assert motion["total_frames"] == 1320
        assert motion["duration_sec"] == 22
        assert motion["min_altitude_m"] == 500
        assert motion["max_altitude_m"] == pytest.approx(12_000_000, rel=1e-6)
        assert motion["cloud_frames"] > 0

    def test_globe_has_no_clouds(self, globe_project):
        motion = summarize_motion(build_scene(globe_project))
        assert motion["cloud_frames"] == 0
        assert motion["avg_altitude_m"] == 20_000_000


class TestBuildPathAnalysis:
    def test_flight(self, flight_project):
        analysis = build_path_analysis(flight_project, build_scene(flight_project, policy="catmull-rom"))
        assert analysis["policy"] == "catmull-rom"
        assert len(analysis["segments"]) == 5
        assert analysis["project"]["id"] == "01-london-to-shenzhen"

    def test_globe(self, globe_project):
        analysis = build_path_analysis(globe_project, build_scene(globe_project))
        assert "policy" not in analysis
        line = analysis["lines"][0]
        assert line["delay"] == 2
        assert 9_400 < line["distance_km"] < 9_800
