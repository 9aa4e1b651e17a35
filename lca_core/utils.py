# MIT License
from __future__ import annotations
import hashlib
import json
import math

from .params import ScenarioInput


def scenario_hash(scn: ScenarioInput) -> str:
    """Compute a stable hash for a scenario.

    Serialises the scenario to JSON (with sorted keys) and computes a
    SHA256 hash.  Used to key cached predictions per scenario.

    Parameters
    ----------
    scn:
        ScenarioInput instance.

    Returns
    -------
    str
        Hexadecimal string representation of the hash.
    """
    scn_json = scn.model_dump(mode="json", by_alias=True)
    # ensure deterministic key ordering
    payload = json.dumps(scn_json, sort_keys=True).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def content_hash(content: bytes) -> str:
    """SHA256 of uploaded file bytes, used to key cached predictions per upload."""
    return hashlib.sha256(content).hexdigest()


def round_half_up(value: float, ndigits: int = 0):
    """Round to ``ndigits`` decimals with exact halves going up.

    Python's :func:`round` sends halves to the even neighbour (60.5 -> 60);
    the dashboard scores round them up (60.5 -> 61).  Returns an ``int``
    when ``ndigits`` is 0.
    """
    if ndigits == 0:
        return math.floor(value + 0.5)
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor
