"""Extractor library — tolerant recovery of JSON answers from model output.

Public API:
    - extract: Completed job to validated schema plus retrieval metadata
    - parse_payload: First JSON object the ordered strategy chain yields
    - iter_payloads: Every decoded candidate, in strategy order
    - find_output_text / collect_sources: Response output helpers
    - STRATEGIES: Ordered (name, strategy) pairs
"""

from civic_lens.lib.extractor.extractor import (
    collect_sources,
    extract,
    find_output_text,
    iter_payloads,
    parse_payload,
)
from civic_lens.lib.extractor.strategies import (
    STRATEGIES,
    from_any_fence,
    from_brace_span,
    from_json_fence,
    from_whole_text,
)

__all__ = [
    "STRATEGIES",
    "collect_sources",
    "extract",
    "find_output_text",
    "from_any_fence",
    "from_brace_span",
    "from_json_fence",
    "from_whole_text",
    "iter_payloads",
    "parse_payload",
]
