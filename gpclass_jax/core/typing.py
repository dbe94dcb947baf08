from __future__ import annotations

from typing import Any, Dict, Mapping

from jax import Array

# Named scalars and arrays handed to a model, e.g. {"n": 100, "x": ..., "y": ...}
Payload = Mapping[str, Any]
NamedArrays = Dict[str, Array]
