"""
Specificity rules for research findings.

Research sources (and LLMs asked about a product) return a mix of hard
facts ("Weight: 2.5 lbs", "Model RX-100") and marketing fluff ("premium
quality", "amazing value"). Only findings with concrete evidence make it
into a listing:

    Specification: a technical term, measurement, model/part number or
        compatibility claim, backed by a digit or a model/part
        number, with no marketing adjective.
    Feature: a functional term, a number or an action/connectivity
        phrase, with no marketing adjective.

The rule tables are plain tuples so they can be audited and extended
without touching the predicates.
"""

import re

# ─── Specification Rules ─────────────────────────────────────

SPEC_INDICATORS = (
    "dimension", "size", "weight", "material", "model", "part", "number",
    "quantity", "pack", "count", "compatible", "inch", "cm", "gram", "pound",
    "volt", "watt", "amp", "mhz", "ghz", "gb", "mb", "capacity", "resolution",
    "length", "width", "height", "depth", "diameter", "thickness", "volume",
    "watts", "volts", "amps", "ohms", "hz", "khz", "rpm", "bpm", "dpi",
    "battery", "charging", "connector", "port", "socket", "cable", "cord",
    "frequency", "bandwidth", "speed", "rate", "range", "distance", "radius",
    "temperature", "pressure", "humidity", "ph", "conductivity", "resistance",
    "version", "revision", "edition", "generation", "series", "type", "class",
    "grade", "standard", "specification", "protocol", "format", "encoding",
    "compression", "ratio", "percentage", "coefficient", "factor", "index",
)

SPEC_GENERIC_TERMS = (
    "high quality", "excellent", "amazing", "great", "good", "best",
    "premium", "superior", "outstanding", "perfect", "ideal", "ultimate",
    "revolutionary", "innovative", "cutting-edge", "state-of-the-art",
    "world-class", "industry-leading", "top-rated", "award-winning",
    "professional-grade", "commercial-grade", "military-grade",
    "beautiful", "attractive", "stylish", "elegant", "sleek", "modern",
    "affordable", "budget-friendly", "value", "bargain", "deal",
)

_DIGIT_RE = re.compile(r"\d")
_MEASUREMENT_RE = re.compile(r"\d+\s*(mm|cm|inch|in|ft|m|kg|lb|oz|g|ml|l|gal|°|%)")
_MODEL_NUMBER_RE = re.compile(r"[a-z]\d+|[a-z]+-\d+|\d+[a-z]+", re.IGNORECASE)
_PART_NUMBER_RE = re.compile(r"part\s*#|model\s*#|sku\s*#|p/n|mpn", re.IGNORECASE)
_COMPATIBILITY_RE = re.compile(r"compatible|works with|fits|designed for", re.IGNORECASE)

# ─── Feature Rules ───────────────────────────────────────────

FEATURE_INDICATORS = (
    "includes", "contains", "features", "equipped", "compatible", "supports",
    "design", "technology", "system", "function", "capability", "edition",
    "collection", "series", "variant", "version", "type", "style",
    "wireless", "bluetooth", "wifi", "usb", "hdmi", "ethernet", "optical",
    "digital", "analog", "automatic", "manual", "programmable", "adjustable",
    "rechargeable", "battery", "powered", "cordless", "wired", "plug-in",
    "waterproof", "dustproof", "shockproof", "weatherproof", "outdoor",
    "indoor", "portable", "compact", "foldable", "stackable", "modular",
    "led", "lcd", "oled", "touchscreen", "display", "monitor", "screen",
    "memory", "storage", "processor", "cpu", "gpu", "ram", "hard drive",
    "solid state", "flash", "card", "slot", "expansion", "upgrade",
    "sensor", "detector", "alarm", "timer", "remote", "control", "voice",
    "smart", "app", "software", "firmware", "driver", "plugin", "extension",
)

FEATURE_GENERIC_TERMS = (
    "high quality", "excellent", "amazing", "great", "good", "best",
    "premium", "superior", "outstanding", "perfect", "ideal", "reliable",
    "durable", "sturdy", "strong", "professional", "heavy duty", "rugged",
    "beautiful", "attractive", "stylish", "elegant", "sleek", "modern",
    "innovative", "advanced", "cutting-edge", "state-of-the-art",
    "world-class", "industry-leading", "top-rated", "award-winning",
    "easy to use", "user-friendly", "simple", "convenient", "efficient",
    "powerful", "versatile", "flexible", "customizable", "personalized",
    "affordable", "budget-friendly", "value", "bargain", "deal", "cheap",
)

_FUNCTIONALITY_RE = re.compile(
    r"can\s+(be\s+)?(used|operated|configured|connected|controlled"
    r"|programmed|adjusted|set|activated|turned|switched)",
    re.IGNORECASE,
)
_ACTION_RE = re.compile(
    r"automatically|manually|wirelessly|remotely|digitally|electronically"
    r"|mechanically|hydraulically|pneumatically",
    re.IGNORECASE,
)
_CONNECTIVITY_RE = re.compile(
    r"via|through|using|with|by|connects to|pairs with|works with|compatible with",
    re.IGNORECASE,
)

# ─── Keyword & Category Tables ───────────────────────────────

MARKET_KEYWORD_VOCABULARY = (
    "professional", "premium", "quality", "durable", "lightweight", "compact",
    "wireless", "bluetooth", "rechargeable", "waterproof", "portable",
    "original", "authentic", "new", "sealed", "fast shipping",
)
MAX_MARKET_KEYWORDS = 8

CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Electronics", ("electronic", "digital", "battery", "charger", "wireless", "bluetooth")),
    ("Clothing & Accessories", ("clothing", "apparel", "shirt", "jacket", "shoes", "accessory")),
    ("Home & Garden", ("home", "kitchen", "garden", "furniture", "decor")),
    ("Sports & Outdoors", ("sport", "outdoor", "fitness", "exercise", "camping")),
    ("Toys & Games", ("toy", "game", "puzzle", "educational", "children")),
    ("Health & Beauty", ("health", "beauty", "skincare", "supplement", "cosmetic")),
    ("Automotive", ("car", "auto", "vehicle", "automotive", "parts")),
    ("Books & Media", ("book", "dvd", "cd", "media", "music")),
    ("Collectibles", ("collectible", "vintage", "rare", "limited", "antique")),
)
DEFAULT_CATEGORY = "General Merchandise"


def _contains_any(text: str, terms: tuple[str, ...]) -> bool:
    return any(term in text for term in terms)


def is_specific_specification(spec: str) -> bool:
    """True if ``spec`` states a concrete, verifiable technical fact."""
    lowered = spec.lower()

    has_model_number = bool(_MODEL_NUMBER_RE.search(spec))
    has_part_number = bool(_PART_NUMBER_RE.search(lowered))

    has_evidence = (
        _contains_any(lowered, SPEC_INDICATORS)
        or bool(_MEASUREMENT_RE.search(lowered))
        or has_model_number
        or has_part_number
        or bool(_COMPATIBILITY_RE.search(lowered))
    )
    has_hard_data = bool(_DIGIT_RE.search(spec)) or has_model_number or has_part_number

    return has_evidence and has_hard_data and not _contains_any(lowered, SPEC_GENERIC_TERMS)


def is_specific_feature(feature: str) -> bool:
    """True if ``feature`` describes actual functionality rather than marketing."""
    lowered = feature.lower()

    is_actionable = (
        bool(_FUNCTIONALITY_RE.search(feature))
        or bool(_ACTION_RE.search(lowered))
        or bool(_CONNECTIVITY_RE.search(lowered))
    )
    is_specific = (
        _contains_any(lowered, FEATURE_INDICATORS)
        or bool(_DIGIT_RE.search(feature))
        or is_actionable
    )

    return is_specific and not _contains_any(lowered, FEATURE_GENERIC_TERMS)


def generate_keywords(specifications: list[str], features: list[str], brand: str) -> list[str]:
    """
    Derive market keywords from merged findings.

    The lowercased brand comes first, followed by vocabulary terms that
    appear anywhere in the findings, capped at MAX_MARKET_KEYWORDS.
    """
    keywords: list[str] = []
    if brand:
        keywords.append(brand.lower())

    corpus = " ".join([*specifications, *features]).lower()
    for keyword in MARKET_KEYWORD_VOCABULARY:
        if keyword in corpus and keyword not in keywords:
            keywords.append(keyword)

    return keywords[:MAX_MARKET_KEYWORDS]


def categorize_product(specifications: list[str], features: list[str]) -> list[str]:
    """Map findings onto marketplace categories; General Merchandise if none match."""
    corpus = " ".join([*specifications, *features]).lower()
    categories = [
        category
        for category, keywords in CATEGORY_KEYWORDS
        if _contains_any(corpus, keywords)
    ]
    return categories or [DEFAULT_CATEGORY]
