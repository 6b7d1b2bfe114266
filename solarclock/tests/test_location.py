import pytest

from solarclock.accessory.types import Location
from solarclock.utils.exceptions import InvalidLocationError


class TestLocation:
    @pytest.mark.parametrize(
        ("latitude", "longitude"),
        [(0, 0), (90, 180), (-90, -180), (51.4779, -0.0015), (-33.86, 151.21)],
    )
    def test_valid_coordinates(self, latitude: float, longitude: float) -> None:
        location = Location(latitude=latitude, longitude=longitude)
        assert location.latitude == latitude
        assert location.longitude == longitude

    @pytest.mark.parametrize(
        ("latitude", "longitude"),
        [(90.01, 0), (-91, 0), (0, 180.5), (0, -200), (float("nan"), 0), (0, float("nan"))],
    )
    def test_out_of_range_coordinates(self, latitude: float, longitude: float) -> None:
        with pytest.raises(InvalidLocationError):
            Location(latitude=latitude, longitude=longitude)

    def test_parse_pair(self) -> None:
        assert Location.parse([40.7, -74.0]) == Location(latitude=40.7, longitude=-74.0)

    def test_parse_mapping(self) -> None:
        location = Location.parse({"latitude": "40.7", "longitude": "-74.0"})
        assert location == Location(latitude=40.7, longitude=-74.0)

    def test_parse_missing_location_defaults_to_null_island(self) -> None:
        assert Location.parse(None) == Location(latitude=0, longitude=0)

    @pytest.mark.parametrize(
        "raw",
        [
            [1, 2, 3],
            [1],
            "40.7,-74.0",
            {"latitude": 40.7},
            {"latitude": "north", "longitude": 0},
            [True, 0],
            [100, 0],
        ],
    )
    def test_parse_invalid(self, raw: object) -> None:
        with pytest.raises(InvalidLocationError):
            Location.parse(raw)  # type:ignore[arg-type]
