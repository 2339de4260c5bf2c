"""Jurisdiction library — derive the governing US state from an address.

Public API:
    - resolve_state: Address string to full state name
    - state_abbreviation: Full state name to two-letter code
    - STATE_ABBREVIATIONS: Two-letter code to full name table
"""

from civic_lens.lib.jurisdiction.resolver import STATE_ABBREVIATIONS, resolve_state, state_abbreviation

__all__ = [
    "STATE_ABBREVIATIONS",
    "resolve_state",
    "state_abbreviation",
]
