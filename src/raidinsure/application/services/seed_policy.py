from __future__ import annotations

import hashlib
import json
import math
import random
from typing import Any, Mapping


def _canonical(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Seed context values must be finite")
    if isinstance(value, Mapping):
        return {str(key): _canonical(val) for key, val in sorted(value.items(), key=lambda item: str(item[0]))}
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if isinstance(value, (set, frozenset)):
        members = [_canonical(item) for item in value]
        return sorted(members, key=lambda item: json.dumps(item, sort_keys=True, separators=(",", ":")))
    return value


def derive_seed(namespace: str, context: Mapping[str, Any]) -> int:
    payload = {"namespace": str(namespace), "context": _canonical(context)}
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(serialized.encode("utf-8")).hexdigest()
    return int(digest, 16) % (2**32)


def derive_rng(namespace: str, context: Mapping[str, Any]) -> random.Random:
    """Seeded PRNG for a namespace, e.g. ``insurance.return_time`` keyed by seed and session."""
    return random.Random(derive_seed(namespace, context))
