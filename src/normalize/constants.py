from __future__ import annotations

from typing import Any

DOCUMENT_TYPES: tuple[str, ...] = ("PSA", "Form138", "ITR", "GoodMoral")
DOCUMENT_STATUSES: tuple[str, ...] = ("pending", "uploaded", "verified", "rejected")
SUBMITTED_DOCUMENT_STATUSES: tuple[str, ...] = ("uploaded", "verified")
DOCUMENT_DISPLAY_NAMES: dict[str, str] = {
    "PSA": "PSA Birth Certificate",
    "Form138": "Form 138 (Report Card)",
    "ITR": "Income Tax Return (ITR)",
    "GoodMoral": "Certificate of Good Moral Character",
}

SHS_TYPES: tuple[str, ...] = ("Public", "Private")
STRAND_TYPES: tuple[str, ...] = ("STEM", "ABM", "HUMSS", "GAS", "TVL", "Sports", "Arts")
PROVIDER_TYPES: tuple[str, ...] = ("Government", "Private", "LGU", "International", "NGO")

DEGREE_PROGRAMS: tuple[str, ...] = (
    # Engineering
    "Civil Engineering",
    "Mechanical Engineering",
    "Electrical Engineering",
    "Electronics Engineering",
    "Chemical Engineering",
    "Computer Engineering",
    "Industrial Engineering",
    "Geodetic Engineering",
    "Mining Engineering",
    "Sanitary Engineering",
    "Agricultural Engineering",
    "Aerospace Engineering",
    # Information technology
    "Computer Science",
    "Information Technology",
    "Information Systems",
    "Data Science",
    "Cyber Security",
    "Software Engineering",
    # Business and accountancy
    "Accountancy",
    "Business Administration",
    "Business Management",
    "Entrepreneurship",
    "Marketing Management",
    "Financial Management",
    "Human Resource Management",
    "Operations Management",
    "Economics",
    "Banking and Finance",
    # Health sciences
    "Nursing",
    "Medicine",
    "Pharmacy",
    "Medical Technology",
    "Physical Therapy",
    "Occupational Therapy",
    "Radiologic Technology",
    "Dentistry",
    "Midwifery",
    "Public Health",
    "Nutrition and Dietetics",
    # Sciences
    "Biology",
    "Chemistry",
    "Physics",
    "Mathematics",
    "Statistics",
    "Environmental Science",
    "Marine Biology",
    "Geology",
    "Food Technology",
    "Agriculture",
    # Education
    "Elementary Education",
    "Secondary Education",
    "Special Education",
    "Early Childhood Education",
    "Physical Education",
    # Arts and humanities
    "Communication Arts",
    "Journalism",
    "Broadcasting",
    "Multimedia Arts",
    "Fine Arts",
    "Graphic Design",
    "Interior Design",
    "Architecture",
    "Music",
    "Theatre Arts",
    "Film",
    # Social sciences
    "Psychology",
    "Political Science",
    "Sociology",
    "Social Work",
    "Public Administration",
    "International Studies",
    "Philosophy",
    "History",
    # Law and criminology
    "Criminology",
    "Legal Management",
    "Law",
    # Hospitality and tourism
    "Hotel and Restaurant Management",
    "Tourism Management",
    "Culinary Arts",
    "Travel Management",
    # Agriculture and marine
    "Fisheries",
    "Forestry",
    "Veterinary Medicine",
    "Animal Science",
    # Others
    "Library Science",
    "Real Estate Management",
    "Customs Administration",
    "Foreign Service",
)

GWA_MIN = 70.0
GWA_MAX = 100.0
GWA_WARNING_BELOW = 75.0
INVERTED_GWA_MIN = 1.0
INVERTED_GWA_MAX = 5.0
INCOME_MIN = 0
INCOME_MAX = 50_000_000
RESIDENCY_MIN = 0
RESIDENCY_MAX = 50

# Inverted college scale -> percentage, interpolated linearly between points.
GWA_TRANSMUTATION: tuple[tuple[float, float], ...] = (
    (1.00, 97.0),
    (1.25, 94.0),
    (1.50, 91.0),
    (1.75, 88.0),
    (2.00, 85.0),
    (2.25, 82.0),
    (2.50, 79.0),
    (2.75, 76.0),
    (3.00, 75.0),
    (5.00, 70.0),
)

PH_BOUNDS = {"min_lat": 4.5, "max_lat": 21.5, "min_lng": 116.0, "max_lng": 127.0}

LGU_PROVIDERS: dict[int, dict[str, Any]] = {
    2: {
        "name": "Makati City",
        "scholarship_name": "Makati City College Scholarship",
        "min_residency_years": 3,
        "requires_proof_of_residency": True,
    },
    3: {
        "name": "Taguig City",
        "scholarship_name": "Taguig City University Scholarship",
        "min_residency_years": 5,
        "requires_proof_of_residency": True,
    },
    4: {
        "name": "Quezon City",
        "scholarship_name": "QC-CHED Expanded Scholarship Program",
        "min_residency_years": 3,
        "requires_proof_of_residency": True,
    },
    5: {
        "name": "Pasig City",
        "scholarship_name": "Pamantasan ng Lungsod ng Pasig Scholarship",
        "min_residency_years": 3,
        "requires_proof_of_residency": True,
    },
    6: {
        "name": "Mandaluyong City",
        "scholarship_name": "Mandaluyong City Scholarship",
        "min_residency_years": 2,
        "requires_proof_of_residency": True,
    },
    8: {
        "name": "Muntinlupa City",
        "scholarship_name": "Muntinlupa City Scholarship Program",
        "min_residency_years": 3,
        "requires_proof_of_residency": True,
    },
    11: {
        "name": "Caloocan City",
        "scholarship_name": "Caloocan City Scholarship",
        "min_residency_years": 2,
        "requires_proof_of_residency": True,
    },
    14: {
        "name": "Valenzuela City",
        "scholarship_name": "Valenzuela City Scholarship",
        "min_residency_years": 3,
        "requires_proof_of_residency": True,
    },
    15: {
        "name": "Marikina City",
        "scholarship_name": "Marikina City Scholarship",
        "min_residency_years": 2,
        "requires_proof_of_residency": True,
    },
}

# (name, city_id, lat, lng, radius_km)
CITY_COORDINATES: tuple[tuple[str, int, float, float, float], ...] = (
    # Metro Manila
    ("Manila", 1, 14.5995, 120.9842, 5.0),
    ("Makati", 2, 14.5547, 121.0244, 4.0),
    ("Taguig", 3, 14.5176, 121.0509, 5.0),
    ("Quezon City", 4, 14.6760, 121.0437, 8.0),
    ("Pasig", 5, 14.5764, 121.0851, 4.0),
    ("Mandaluyong", 6, 14.5794, 121.0359, 3.0),
    ("Pasay", 7, 14.5378, 121.0014, 3.0),
    ("Muntinlupa", 8, 14.4081, 121.0415, 5.0),
    ("Parañaque", 9, 14.4793, 121.0198, 4.0),
    ("Las Piñas", 10, 14.4445, 120.9939, 4.0),
    ("Caloocan", 11, 14.6488, 120.9840, 6.0),
    ("Malabon", 12, 14.6625, 120.9567, 3.0),
    ("Navotas", 13, 14.6667, 120.9417, 3.0),
    ("Valenzuela", 14, 14.6942, 120.9603, 4.0),
    ("Marikina", 15, 14.6507, 121.1029, 4.0),
    ("San Juan", 16, 14.6019, 121.0355, 2.0),
    # Cavite
    ("Bacoor", 17, 14.4624, 120.9645, 5.0),
    ("Imus", 18, 14.4297, 120.9367, 5.0),
    ("Dasmariñas", 19, 14.3294, 120.9367, 6.0),
    ("General Trias", 20, 14.3833, 120.8833, 6.0),
    ("Cavite City", 21, 14.4833, 120.9000, 4.0),
    # Laguna
    ("Santa Rosa", 22, 14.3122, 121.1114, 5.0),
    ("Biñan", 23, 14.3408, 121.0803, 4.0),
    ("San Pedro", 24, 14.3595, 121.0475, 4.0),
    ("Calamba", 25, 14.2117, 121.1653, 6.0),
    # Rizal
    ("Antipolo", 26, 14.5864, 121.1761, 7.0),
    ("Cainta", 27, 14.5667, 121.1167, 4.0),
    ("Taytay", 28, 14.5667, 121.1333, 4.0),
    # Bulacan
    ("Meycauayan", 29, 14.7333, 120.9500, 4.0),
    ("San Jose del Monte", 30, 14.8139, 121.0453, 6.0),
    ("Malolos", 31, 14.8433, 120.8114, 5.0),
)
