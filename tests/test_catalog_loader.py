import json
import math

from drivestate.catalog.loader import (
    load_locations,
    load_poi_candidates,
    location_to_poi_candidate,
    locations_to_poi_candidates,
)
from drivestate.domain.models import Location, Pin


def test_load_poi_candidates_accepts_camel_case(tmp_path):
    path = tmp_path / "pois.json"
    path.write_text(
        json.dumps(
            [
                {"id": "p1", "name": "Pilot", "lat": 39.0, "lng": -93.9, "category": "fuel", "hoursOfOperation": "24/7"},
                {"id": "p2", "name": "Rest", "lat": 39.1, "lng": -94.2, "category": "rest area", "notes": None},
            ]
        ),
        encoding="utf-8",
    )
    pois = load_poi_candidates(path)
    assert [p.id for p in pois] == ["p1", "p2"]
    assert pois[0].hours_of_operation == "24/7"


def test_load_locations_coerces_string_pins(tmp_path):
    path = tmp_path / "locations.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "l1",
                    "name": "Love's",
                    "address": "1 Hwy, Joplin, MO, 64801",
                    "facilityKind": "truck stop",
                    "pins": [{"lat": "37.08", "lng": "-94.51"}],
                }
            ]
        ),
        encoding="utf-8",
    )
    (loc,) = load_locations(path)
    assert loc.pins[0].lat == 37.08
    candidate = location_to_poi_candidate(loc)
    assert candidate is not None
    assert candidate.category == "truck stop"
    assert candidate.address == "1 Hwy, Joplin, MO, 64801"


def test_locations_without_usable_pins_are_skipped():
    locations = [
        Location(id="none", name="No pin", facility_kind="warehouse"),
        Location(id="nan", name="Bad pin", pins=[Pin(lat=math.nan, lng=-94.0)]),
        Location(id="ok", name="Good", facility_kind="rest area", pins=[Pin(lat=39.0, lng=-94.0), Pin(lat=0, lng=0)]),
    ]
    candidates = locations_to_poi_candidates(locations)
    assert [c.id for c in candidates] == ["ok"]
    assert (candidates[0].lat, candidates[0].lng) == (39.0, -94.0)
