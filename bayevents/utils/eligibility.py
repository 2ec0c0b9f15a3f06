import re
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

AGE_21_PHRASES = ("21+", "+ 21", "21 and over", "21 & over", "21 and up", "(21+)")

BAY_AREA_CITIES = frozenset({
    "san francisco", "sf", "s.f.", "san fransisco", "san francsico", "sanfrancisco",
    "oakland", "oakand", "berkeley", "berkley", "emeryville", "alameda",
    "richmond", "el cerrito", "albany", "san leandro", "hayward", "fremont",
    "daly city", "south san francisco", "s. san francisco", "brisbane", "pacifica",
    "san mateo", "burlingame", "redwood city", "palo alto", "menlo park",
    "mountain view", "sunnyvale", "santa clara", "san jose", "san josé",
    "sausalito", "mill valley", "san rafael", "vallejo", "petaluma",
})

STATE_SUFFIX_RE = re.compile(r",?\s*(ca|california)(\s+\d{5})?\.?$", re.IGNORECASE)


@dataclass(frozen=True)
class EligibilityRules:
    """
    Declarative exclusion policy for one source.
    reject_phrases are matched case-insensitively against whatever text the
    source uses to state age or content restrictions.
    """
    reject_phrases: Tuple[str, ...] = ()
    denied_cities: FrozenSet[str] = field(default_factory=frozenset)
    allowed_cities: FrozenSet[str] = field(default_factory=frozenset)
    require_city: bool = False


def normalize_city(city):
    if not city:
        return None
    city = " ".join(city.split())
    city = STATE_SUFFIX_RE.sub("", city).strip().lower()
    return city or None


def is_eligible(rules, text="", city=None):
    """Return False if the candidate is excluded by the source's rules."""
    text_lower = (text or "").lower()
    if any(phrase.lower() in text_lower for phrase in rules.reject_phrases):
        return False

    normalized = normalize_city(city)
    if normalized is None:
        return not rules.require_city

    if normalized in {c.lower() for c in rules.denied_cities}:
        return False

    if rules.allowed_cities and normalized not in {c.lower() for c in rules.allowed_cities}:
        return False

    return True
