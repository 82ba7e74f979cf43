from __future__ import annotations

from typing import Any

import numpy as np

from src.normalize.constants import CITY_COORDINATES, LGU_PROVIDERS, RESIDENCY_MAX
from src.normalize.schema import coerce_optional_float, coerce_optional_int

EARTH_RADIUS_KM = 6371.0

_CITY_NAMES = [city[0] for city in CITY_COORDINATES]
_CITY_IDS = np.array([city[1] for city in CITY_COORDINATES], dtype=int)
_CITY_LATS = np.array([city[2] for city in CITY_COORDINATES], dtype=float)
_CITY_LNGS = np.array([city[3] for city in CITY_COORDINATES], dtype=float)
_CITY_RADII = np.array([city[4] for city in CITY_COORDINATES], dtype=float)


def haversine_km(lat1: Any, lng1: Any, lat2: Any, lng2: Any) -> Any:
    """Great-circle distance; accepts scalars or numpy arrays."""

    lat1_rad, lng1_rad, lat2_rad, lng2_rad = (np.radians(value) for value in (lat1, lng1, lat2, lng2))
    d_lat = lat2_rad - lat1_rad
    d_lng = lng2_rad - lng1_rad
    a = np.sin(d_lat / 2.0) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(d_lng / 2.0) ** 2
    return EARTH_RADIUS_KM * 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))


def reverse_geocode(latitude: Any, longitude: Any) -> dict[str, Any]:
    lat = coerce_optional_float(latitude)
    lng = coerce_optional_float(longitude)
    if lat is None or lng is None:
        raise ValueError("Latitude and longitude must be valid numbers.")

    distances = haversine_km(lat, lng, _CITY_LATS, _CITY_LNGS)
    nearest = int(np.argmin(distances))
    distance = float(distances[nearest])
    radius = float(_CITY_RADII[nearest])
    coordinates = {"latitude": lat, "longitude": lng}

    if distance > radius * 2.0:
        return {
            "success": False,
            "error": "LOCATION_NOT_FOUND",
            "message": (
                "Unable to determine city from the provided coordinates. "
                "Location may be outside covered areas."
            ),
            "coordinates": coordinates,
            "nearest_city": {"name": _CITY_NAMES[nearest], "distance": round(distance, 1)},
        }

    within_bounds = distance <= radius
    return {
        "success": True,
        "city": {
            "id": int(_CITY_IDS[nearest]),
            "name": _CITY_NAMES[nearest],
            "coordinates": {
                "latitude": float(_CITY_LATS[nearest]),
                "longitude": float(_CITY_LNGS[nearest]),
            },
        },
        "distance": round(distance, 2),
        "confidence": "high" if within_bounds else "medium",
        "is_within_city_bounds": within_bounds,
        "coordinates": coordinates,
    }


def check_lgu_provider(city_id: Any) -> dict[str, Any] | None:
    info = LGU_PROVIDERS.get(coerce_optional_int(city_id))
    return dict(info) if info else None


def get_lgu_cities() -> list[dict[str, Any]]:
    return [{"city_id": city_id, **info} for city_id, info in sorted(LGU_PROVIDERS.items())]


def process_location(latitude: Any, longitude: Any) -> dict[str, Any]:
    location = reverse_geocode(latitude, longitude)
    if not location["success"]:
        return location

    city_id = location["city"]["id"]
    lgu_info = check_lgu_provider(city_id)
    response: dict[str, Any] = {
        "success": True,
        "location": location,
        "has_lgu_scholarship": lgu_info is not None,
    }
    if lgu_info is None:
        return response

    response["lgu_scholarship"] = {**lgu_info, "city_id": city_id}
    response["required_action"] = {
        "type": "VERIFY_RESIDENCY",
        "title": "Residency Verification Required",
        "message": f"{lgu_info['name']} offers a scholarship program. Please verify your residency duration.",
        "fields": [
            {
                "name": "residency_years",
                "label": f"How many years have you lived in {lgu_info['name']}?",
                "type": "number",
                "required": True,
                "min": 0,
                "max": RESIDENCY_MAX,
                "hint": (
                    f"Minimum {lgu_info['min_residency_years']} years required "
                    f"for {lgu_info['scholarship_name']}"
                ),
            }
        ],
        "scholarship_info": {
            "name": lgu_info["scholarship_name"],
            "min_residency": lgu_info["min_residency_years"],
            "requires_proof_of_residency": lgu_info["requires_proof_of_residency"],
        },
    }
    return response


def validate_lgu_residency(city_id: Any, residency_years: Any) -> dict[str, Any]:
    lgu_info = check_lgu_provider(city_id)
    if lgu_info is None:
        return {
            "is_eligible": False,
            "reason": "NO_LGU_SCHOLARSHIP",
            "message": "This city does not have an LGU scholarship program in our database.",
        }

    years = coerce_optional_int(residency_years) or 0
    required = int(lgu_info["min_residency_years"])
    meets = years >= required
    scholarship_name = lgu_info["scholarship_name"]

    if meets:
        message = f"You meet the {required}-year residency requirement for {scholarship_name}!"
        next_steps = [
            "Prepare proof of residency (Barangay Certificate)",
            "Ensure your address is consistent across documents",
            f"Apply for {scholarship_name}",
        ]
    else:
        message = f"You need at least {required} years of residency. You currently have {years} year(s)."
        next_steps = [
            f"Continue residing in {lgu_info['name']} for {required - years} more year(s)",
            "Consider other national scholarship programs in the meantime",
        ]

    return {
        "is_eligible": meets,
        "lgu_info": {
            "city": lgu_info["name"],
            "scholarship_name": scholarship_name,
            "min_residency_required": required,
            "actual_residency": years,
        },
        "message": message,
        "years_needed": 0 if meets else required - years,
        "next_steps": next_steps,
    }
