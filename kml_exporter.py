from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from xml.dom import minidom

from interpolation import clamp
from models import AnimationProject, CameraPose
from scene import FlightScene, GlobeLineScene

GX = "http://www.google.com/kml/ext/2.2"
KML_NS = "http://www.opengis.net/kml/2.2"


def pitch_to_tilt(pitch_deg: float) -> float:
    """Cesium pitch (-90 looks straight down) to KML tilt (0 looks straight down)."""
    return clamp(90.0 + pitch_deg, 0.0, 180.0)


def _sample_tour(scene: FlightScene | GlobeLineScene, fps: int) -> list[tuple[CameraPose, float]]:
    total = scene.total_frames
    if total <= 0:
        return [(scene.start_position, 0.0)]

    interval = 1.0 / max(fps, 1)
    step = max(scene.fps / max(fps, 1), 1.0)
    samples: list[tuple[CameraPose, float]] = []

    pos = 0.0
    while pos < total:
        frame = int(pos)
        samples.append((scene.frame_state(frame).pose, interval))
        pos += step

    last = scene.frame_state(total - 1).pose
    if samples[-1][0] != last:
        samples.append((last, interval))
    samples[0] = (samples[0][0], 0.0)
    return samples


def export_kml(
    project: AnimationProject,
    scene: FlightScene | GlobeLineScene,
    output_path: Path,
    *,
    fps: int = 2,
) -> int:
    """Write the sampled camera trajectory as a KML tour. Returns the FlyTo count.

    Lower fps gives smaller files; Google Earth smooths between FlyTo entries.
    """
    ET.register_namespace("", KML_NS)
    ET.register_namespace("gx", GX)

    kml = ET.Element(f"{{{KML_NS}}}kml")

    doc = ET.SubElement(kml, "Document")
    ET.SubElement(doc, "name").text = project.name
    ET.SubElement(doc, "description").text = project.description

    for marker in scene.markers:
        pm = ET.SubElement(doc, "Placemark")
        ET.SubElement(pm, "name").text = marker.name
        point = ET.SubElement(pm, "Point")
        ET.SubElement(point, "coordinates").text = f"{marker.lon},{marker.lat},0"

    tour = ET.SubElement(doc, f"{{{GX}}}Tour")
    ET.SubElement(tour, "name").text = project.name
    playlist = ET.SubElement(tour, f"{{{GX}}}Playlist")

    samples = _sample_tour(scene, fps)
    for pose, duration in samples:
        fly_to = ET.SubElement(playlist, f"{{{GX}}}FlyTo")
        ET.SubElement(fly_to, f"{{{GX}}}duration").text = f"{duration:.4f}"
        ET.SubElement(fly_to, f"{{{GX}}}flyToMode").text = "smooth"

        camera = ET.SubElement(fly_to, "Camera")
        ET.SubElement(camera, "longitude").text = f"{pose.lon:.10f}"
        ET.SubElement(camera, "latitude").text = f"{pose.lat:.10f}"
        ET.SubElement(camera, "altitude").text = f"{pose.alt:.2f}"
        ET.SubElement(camera, "heading").text = f"{pose.heading:.4f}"
        ET.SubElement(camera, "tilt").text = f"{pitch_to_tilt(pose.pitch):.4f}"
        ET.SubElement(camera, "roll").text = "0"
        ET.SubElement(camera, "altitudeMode").text = "absolute"

    raw_xml = ET.tostring(kml, encoding="unicode", xml_declaration=False)
    pretty = minidom.parseString(raw_xml).toprettyxml(indent="  ", encoding="utf-8")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(pretty)
    return len(samples)
