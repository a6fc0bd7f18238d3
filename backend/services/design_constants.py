"""
Design Constants — defaults and rate tables shared by drafts and gateways.

  - Form defaults (building types, colour palette, culture modes)
  - Per-sq-ft construction rates used by the rule-based budget
  - Budget category shares
  - Interior item catalogue per room type
"""

from typing import Dict, List, Tuple

# ===========================================================================
# FORM DEFAULTS
# ===========================================================================

BUILDING_TYPES: List[str] = [
    "Luxury Villa",
    "Sustainable Office",
    "Urban Apartment",
    "Retail Complex",
    "Modern School",
    "Healthcare Center",
    "Eco-Friendly Cottage",
    "Industrial Warehouse",
]

COLORS: List[Dict[str, str]] = [
    {"name": "Slate Grey", "value": "#475569"},
    {"name": "Ivory White", "value": "#f8fafc"},
    {"name": "Terracotta", "value": "#c2410c"},
    {"name": "Sage Green", "value": "#15803d"},
    {"name": "Ocean Blue", "value": "#0369a1"},
    {"name": "Midnight", "value": "#0f172a"},
    {"name": "Concrete", "value": "#94a3b8"},
]

CULTURE_MODES: List[str] = ["contemporary", "vastu", "european", "zen", "heritage"]

DEFAULT_FLOORS = 1
DEFAULT_ROOMS_PER_FLOOR = 2

# ===========================================================================
# RULE-BASED BUDGET (INR per sq ft of built-up area)
# ===========================================================================

RATE_PER_SQFT: Dict[str, int] = {
    "Luxury Villa": 4500,
    "Sustainable Office": 3200,
    "Urban Apartment": 2600,
    "Retail Complex": 3000,
    "Modern School": 2400,
    "Healthcare Center": 3800,
    "Eco-Friendly Cottage": 2200,
    "Industrial Warehouse": 1600,
}
DEFAULT_RATE_PER_SQFT = 2500

# (category, item, share of total)
BUDGET_SHARES: List[Tuple[str, str, float]] = [
    ("Site", "Excavation & foundation", 0.15),
    ("Structure", "RCC frame, slabs & masonry", 0.35),
    ("Finishes", "Plaster, flooring & paint", 0.20),
    ("MEP", "Electrical, plumbing & HVAC", 0.15),
    ("Exterior", "Facade, doors & windows", 0.10),
    ("Contingency", "Approvals & contingency", 0.05),
]

# ===========================================================================
# INTERIOR CATALOGUE (name, price in INR)
# ===========================================================================

INTERIOR_CATALOGUE: Dict[str, List[Tuple[str, int]]] = {
    "bedroom": [
        ("Queen bed with storage", 38000),
        ("Bedside tables (pair)", 9000),
        ("Sliding wardrobe", 45000),
        ("Blackout curtains", 6000),
    ],
    "living": [
        ("Three-seater sofa", 42000),
        ("Coffee table", 8500),
        ("TV unit", 18000),
        ("Area rug", 7000),
    ],
    "kitchen": [
        ("Modular base cabinets", 60000),
        ("Chimney", 14000),
        ("Quartz countertop", 30000),
    ],
    "bathroom": [
        ("Vanity with basin", 16000),
        ("Glass shower partition", 18000),
        ("Mirror cabinet", 6500),
    ],
    "study": [
        ("Work desk", 14000),
        ("Ergonomic chair", 12000),
        ("Bookshelf", 9000),
    ],
}
DEFAULT_INTERIOR_ITEMS: List[Tuple[str, int]] = [
    ("Accent chair", 11000),
    ("Pendant lighting", 5500),
    ("Wall shelving", 6000),
]


def rate_for(building_type: str) -> int:
    """Construction rate for a building type, INR per sq ft."""
    return RATE_PER_SQFT.get(building_type, DEFAULT_RATE_PER_SQFT)


def catalogue_for(room_type: str) -> List[Tuple[str, int]]:
    """Interior items for a free-text room type ("Master Bedroom" -> bedroom)."""
    key = room_type.lower()
    for name, items in INTERIOR_CATALOGUE.items():
        if name in key:
            return items
    return DEFAULT_INTERIOR_ITEMS
