"""Normalisation of raw activity input into stored units."""

MILES_TO_KM = 1.60934

MS_PER_SECOND = 1000
DISTANCE_UNITS = ("km", "mi")


def to_kilometers(distance: float, unit: str = "km") -> float:
    """Convert a distance to kilometers.

    Raises:
        ValueError: If the unit is not ``km`` or ``mi``.
    """
    unit = unit.lower()
    if unit == "km":
        return distance
    if unit == "mi":
        return distance * MILES_TO_KM
    raise ValueError(f"Unknown distance unit: {unit!r}")


def hms_to_milliseconds(hours: int = 0, minutes: int = 0, seconds: int = 0) -> int:
    """Convert an hour/minute/second split to milliseconds."""
    return ((hours * 60 + minutes) * 60 + seconds) * MS_PER_SECOND


def parse_duration(value: str) -> int:
    """Parse ``H:M:S`` or ``M:S`` into milliseconds.

    Raises:
        ValueError: If the string is not a colon separated duration.
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid duration: {value!r}")

    try:
        numbers = [int(part) for part in parts]
    except ValueError as exc:
        raise ValueError(f"Invalid duration: {value!r}") from exc

    if any(n < 0 for n in numbers):
        raise ValueError(f"Invalid duration: {value!r}")
    if len(numbers) == 2:
        numbers.insert(0, 0)
    return hms_to_milliseconds(*numbers)
