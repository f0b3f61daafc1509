"""Boundary decoders for loosely typed upstream payloads."""

import math
from typing import Annotated

from pydantic import BeforeValidator


def coerce_int(value: object) -> object:
    """Coerce ints, finite floats and numeric strings into an int.

    Upstream services report counts such as shelf life days or recipe yield
    as either JSON numbers or strings. Values that cannot be coerced are
    returned unchanged so pydantic reports its usual validation error.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not a numeric value")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return round(value) if math.isfinite(value) else value
    if isinstance(value, str):
        cleaned = value.strip()
        try:
            return int(cleaned)
        except ValueError:
            pass
        try:
            parsed = float(cleaned)
        except ValueError:
            return value
        return round(parsed) if math.isfinite(parsed) else value
    return value


FlexibleInt = Annotated[int, BeforeValidator(coerce_int)]
