"""
Static reference data for telegis.

Default bounding box, reference cities used in remediation
suggestions, zone groupings of administrative regions and the
polygon colour palette.
"""

from typing import Dict, List, NamedTuple


class ReferenceCity(NamedTuple):
    name: str
    lat: float
    lng: float
    region: str


# 국가 경계 상자 (빠른 거부 및 투영 기본값)
COUNTRY_BOUNDS = {
    "lat_min": 6.4,
    "lat_max": 37.6,
    "lng_min": 68.1,
    "lng_max": 97.25,
}

# 거부 시 안내할 주요 도시
MAJOR_CITIES: List[ReferenceCity] = [
    ReferenceCity("New Delhi", 28.6139, 77.2090, "Delhi"),
    ReferenceCity("Mumbai", 19.0760, 72.8777, "Maharashtra"),
    ReferenceCity("Bangalore", 12.9716, 77.5946, "Karnataka"),
    ReferenceCity("Chennai", 13.0827, 80.2707, "Tamil Nadu"),
    ReferenceCity("Kolkata", 22.5726, 88.3639, "West Bengal"),
    ReferenceCity("Hyderabad", 17.3850, 78.4867, "Telangana"),
    ReferenceCity("Pune", 18.5204, 73.8567, "Maharashtra"),
    ReferenceCity("Ahmedabad", 23.0225, 72.5714, "Gujarat"),
    ReferenceCity("Jaipur", 26.9124, 75.7873, "Rajasthan"),
    ReferenceCity("Lucknow", 26.8467, 80.9462, "Uttar Pradesh"),
]

# 영역 할당 화면용 권역 그룹
REGION_GROUPS: Dict[str, List[str]] = {
    "North": [
        "Delhi", "Haryana", "Himachal Pradesh", "Jammu and Kashmir",
        "Ladakh", "Punjab", "Uttarakhand", "Uttar Pradesh",
    ],
    "South": [
        "Andhra Pradesh", "Karnataka", "Kerala", "Tamil Nadu",
        "Telangana", "Puducherry",
    ],
    "East": ["West Bengal", "Jharkhand", "Odisha", "Bihar"],
    "West": [
        "Gujarat", "Maharashtra", "Rajasthan", "Goa",
        "Daman and Diu", "Dadra and Nagar Haveli",
    ],
    "Northeast": [
        "Assam", "Meghalaya", "Manipur", "Mizoram", "Nagaland",
        "Tripura", "Arunachal Pradesh", "Sikkim",
    ],
    "Central": ["Madhya Pradesh", "Chhattisgarh"],
    "Islands": ["Andaman and Nicobar Islands", "Lakshadweep"],
}

# 폴리곤 색상 팔레트 (이름 → 선 색상)
POLYGON_COLORS: Dict[str, str] = {
    "Red": "#ef4444",
    "Blue": "#3b82f6",
    "Green": "#10b981",
    "Purple": "#8b5cf6",
    "Orange": "#f97316",
    "Pink": "#ec4899",
}

DEFAULT_POLYGON_COLOR = POLYGON_COLORS["Red"]
