"""
Region reference data for Japan.

Bounding boxes are rough rectangles and overlap along region borders
(e.g. Kanto/Chubu, Kansai/Chugoku). Lookups return the first box that
contains the point in ``REGION_BOUNDS`` order, so a border point is
classified approximately, never exclusively.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Bounds:
    north: float
    south: float
    east: float
    west: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.south <= lat <= self.north and self.west <= lng <= self.east


# Iteration order is part of the lookup contract
REGION_BOUNDS: dict[str, Bounds] = {
    "Hokkaido": Bounds(north=45.5, south=41.4, east=145.9, west=139.3),
    "Tohoku": Bounds(north=41.5, south=37.0, east=142.1, west=139.0),
    "Kanto": Bounds(north=37.0, south=34.5, east=140.9, west=138.2),
    "Chubu": Bounds(north=37.5, south=34.5, east=139.2, west=135.8),
    "Kansai": Bounds(north=36.0, south=33.4, east=136.8, west=134.0),
    "Chugoku": Bounds(north=36.0, south=33.5, east=134.5, west=130.8),
    "Shikoku": Bounds(north=34.5, south=32.7, east=134.8, west=132.0),
    "Kyushu": Bounds(north=34.3, south=31.0, east=132.1, west=129.5),
    "Okinawa": Bounds(north=27.5, south=24.0, east=131.5, west=122.9),
}

# Cities whose name alone pins down the region. The major ones are the
# consolidated cities whose wards share names with cities elsewhere.
CITY_TO_EXPECTED_REGION: dict[str, str] = {
    # Kanto
    "Tokyo": "Kanto",
    "Yokohama": "Kanto",
    "Kawasaki": "Kanto",
    "Chiba": "Kanto",
    "Saitama": "Kanto",
    # Kansai
    "Osaka": "Kansai",
    "Kyoto": "Kansai",
    "Kobe": "Kansai",
    "Nara": "Kansai",
    # Chubu
    "Nagoya": "Chubu",
    "Kanazawa": "Chubu",  # Ishikawa capital, not the Yokohama ward
    "Niigata": "Chubu",
    "Shizuoka": "Chubu",
    # Tohoku
    "Sendai": "Tohoku",
    "Aomori": "Tohoku",
    "Morioka": "Tohoku",
    # Hokkaido
    "Sapporo": "Hokkaido",
    "Hakodate": "Hokkaido",
    "Asahikawa": "Hokkaido",
    # Chugoku
    "Hiroshima": "Chugoku",
    "Okayama": "Chugoku",
    "Matsue": "Chugoku",
    # Shikoku
    "Matsuyama": "Shikoku",
    "Takamatsu": "Shikoku",
    "Kochi": "Shikoku",
    "Tokushima": "Shikoku",
    # Kyushu
    "Fukuoka": "Kyushu",
    "Nagasaki": "Kyushu",
    "Kumamoto": "Kyushu",
    "Kagoshima": "Kyushu",
    "Oita": "Kyushu",
    # Okinawa
    "Naha": "Okinawa",
    "Miyakojima": "Okinawa",  # the Okinawa city, not the Osaka ward
    "Ishigaki": "Okinawa",
}


def normalize_region(region: str | None) -> str | None:
    """'KANSAI' / 'kansai ' -> 'Kansai'."""
    if not region or not region.strip():
        return None
    region = region.strip()
    return region[0].upper() + region[1:].lower()


def expected_region_for_city(
    city: str | None,
    table: dict[str, str] = CITY_TO_EXPECTED_REGION,
) -> str | None:
    """Region a city name belongs to, if the city is in the reference table."""
    if not city:
        return None
    return table.get(city.strip())


def find_region_by_coordinates(
    lat: float,
    lng: float,
    bounds: dict[str, Bounds] = REGION_BOUNDS,
) -> str | None:
    """First region whose box contains the point, None when outside every box."""
    for region, box in bounds.items():
        if box.contains(lat, lng):
            return region
    return None

