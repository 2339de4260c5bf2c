"""Resolve a US state from a free-text mailing address.

Abbreviations are matched first as whole-word tokens, so ``CA`` matches
``Sacramento, CA 95814`` but not ``CANAL ST``.  Full state names are only
tried when no abbreviation matched.
"""

import re

from civic_lens.lib.errors import UnresolvableJurisdiction

STATE_ABBREVIATIONS: dict[str, str] = {
    "AL": "Alabama",
    "AK": "Alaska",
    "AZ": "Arizona",
    "AR": "Arkansas",
    "CA": "California",
    "CO": "Colorado",
    "CT": "Connecticut",
    "DE": "Delaware",
    "FL": "Florida",
    "GA": "Georgia",
    "HI": "Hawaii",
    "ID": "Idaho",
    "IL": "Illinois",
    "IN": "Indiana",
    "IA": "Iowa",
    "KS": "Kansas",
    "KY": "Kentucky",
    "LA": "Louisiana",
    "ME": "Maine",
    "MD": "Maryland",
    "MA": "Massachusetts",
    "MI": "Michigan",
    "MN": "Minnesota",
    "MS": "Mississippi",
    "MO": "Missouri",
    "MT": "Montana",
    "NE": "Nebraska",
    "NV": "Nevada",
    "NH": "New Hampshire",
    "NJ": "New Jersey",
    "NM": "New Mexico",
    "NY": "New York",
    "NC": "North Carolina",
    "ND": "North Dakota",
    "OH": "Ohio",
    "OK": "Oklahoma",
    "OR": "Oregon",
    "PA": "Pennsylvania",
    "RI": "Rhode Island",
    "SC": "South Carolina",
    "SD": "South Dakota",
    "TN": "Tennessee",
    "TX": "Texas",
    "UT": "Utah",
    "VT": "Vermont",
    "VA": "Virginia",
    "WA": "Washington",
    "WV": "West Virginia",
    "WI": "Wisconsin",
    "WY": "Wyoming",
}

# Reverse map for callers holding a full name
STATE_NAMES: dict[str, str] = {v: k for k, v in STATE_ABBREVIATIONS.items()}

_ABBREVIATION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(rf"\b{abbr}\b", re.IGNORECASE), name) for abbr, name in STATE_ABBREVIATIONS.items()
]


def resolve_state(address: str) -> str:
    """Derive the full US state name from an address.

    Args:
        address: Free-text mailing address.

    Returns:
        Full state name (e.g., "California").

    Raises:
        UnresolvableJurisdiction: If neither an abbreviation nor a full
            state name is found.
    """
    for pattern, name in _ABBREVIATION_PATTERNS:
        if pattern.search(address):
            return name

    lowered = address.lower()
    for name in STATE_ABBREVIATIONS.values():
        if name.lower() in lowered:
            return name

    raise UnresolvableJurisdiction(address)


def state_abbreviation(state_name: str) -> str | None:
    """Return the two-letter code for a full state name, or None."""
    return STATE_NAMES.get(state_name)
