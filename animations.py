from __future__ import annotations

from models import (
    AnimationProject,
    CameraPose,
    FlightConfig,
    FlightLine,
    FlightSegment,
    GlobeCamera,
    GlobeLineConfig,
    Location,
)

LOCATIONS: dict[str, Location] = {
    "london": Location(51.5214, -0.1448, "RIBA, 66 Portland Place", "英国皇家建筑师学会", "51.5214°N, 0.1448°W"),
    "shenzhen": Location(
        22.6815, 113.839, "Shenzhen World Exhibition Center", "深圳国际会展中心", "22.6815°N, 113.8390°E"
    ),
    "china": Location(35.8617, 104.1954, "China", "中国"),
    "hongkong": Location(22.3193, 114.1694, "Hong Kong", "香港"),
    "beijing": Location(39.9042, 116.4074, "Beijing", "北京"),
    "shanghai": Location(31.2304, 121.4737, "Shanghai", "上海"),
    "chengdu": Location(30.5728, 104.0668, "Chengdu", "成都"),
    "maryland": Location(39.0458, -76.6413, "Maryland, USA", "马里兰州"),
    "bangalore": Location(12.9716, 77.5946, "Bangalore", "班加罗尔"),
    "singapore": Location(1.3521, 103.8198, "Singapore", "新加坡"),
    "melbourne": Location(-37.8136, 144.9631, "Melbourne", "墨尔本"),
    "newyork": Location(40.7128, -74.0060, "New York", "纽约"),
    "tokyo": Location(35.6762, 139.6503, "Tokyo", "东京"),
    "bangkok": Location(13.7563, 100.5018, "Bangkok", "曼谷"),
    "rotterdam": Location(51.9244, 4.4777, "Rotterdam", "鹿特丹"),
    "madrid": Location(40.4168, -3.7038, "Madrid", "马德里"),
    "seattle": Location(47.6062, -122.3321, "Seattle", "西雅图"),
}


def _top_down(loc: Location, alt: float) -> CameraPose:
    return CameraPose(lon=loc.lon, lat=loc.lat, alt=alt, heading=0.0, pitch=-90.0)


def london_to_shenzhen() -> AnimationProject:
    london = LOCATIONS["london"]
    china = LOCATIONS["china"]
    shenzhen = LOCATIONS["shenzhen"]
    config = FlightConfig(
        fps=60,
        start_position=_top_down(london, 500),
        segments=(
            # Straight climb out of London
            FlightSegment("pullout-london", 4, _top_down(london, 2_000_000)),
            FlightSegment("rotate-to-china", 6, CameraPose(60, 40, 12_000_000, 0, -90)),
            FlightSegment("approach-china", 4, _top_down(china, 6_000_000)),
            FlightSegment("approach-shenzhen", 4, _top_down(shenzhen, 300_000)),
            # Land on the exhibition center
            FlightSegment("dive-shenzhen", 4, _top_down(shenzhen, 500)),
        ),
    )
    return AnimationProject(
        id="01-london-to-shenzhen",
        name="London → Shenzhen Flight",
        name_zh="伦敦飞深圳",
        description="Cinematic flight from RIBA London to Shenzhen World Exhibition Center",
        type="flight",
        config=config,
    )


def globe_flight_lines() -> AnimationProject:
    config = GlobeLineConfig(
        fps=60,
        camera=GlobeCamera(lon=50, lat=30, alt=20_000_000, rotation_speed=2),
        total_duration=15,
        lines=(
            FlightLine(
                start=LOCATIONS["shenzhen"],
                end=LOCATIONS["london"],
                duration=8,
                color="#fbbf24",
                arc_height=1.2,
                delay=2,
            ),
        ),
        markers=(LOCATIONS["london"], LOCATIONS["shenzhen"]),
    )
    return AnimationProject(
        id="02-globe-flight-lines",
        name="Globe: Shenzhen → London Line",
        name_zh="全景飞线：深圳到伦敦",
        description="Rotating globe view with animated flight line from Shenzhen to London",
        type="globe-lines",
        config=config,
    )


_BUILDERS = (london_to_shenzhen, globe_flight_lines)


def list_animations() -> list[AnimationProject]:
    return [build() for build in _BUILDERS]


def get_animation(animation_id: str) -> AnimationProject:
    for project in list_animations():
        if project.id == animation_id:
            return project
    raise ValueError(f"Unknown animation id: {animation_id}")


def get_default_animation() -> AnimationProject:
    return _BUILDERS[0]()
