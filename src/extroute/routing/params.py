"""Path parameter converters.

Each ``{name:type}`` segment names a converter. The router matches
segments with the converter's regex; the dispatcher converts captured
strings with the converter's Python type.
"""

import re
from functools import cache

from extroute.errors import ConfigurationError

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "float": (r"\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}


@cache
def param_regex(param_type: str) -> re.Pattern[str]:
    """Compiled, anchored regex for a converter.

    Raises ``ConfigurationError`` for an unknown converter name so bad
    patterns fail at registration rather than on the first request.
    """
    try:
        pattern, _ = CONVERTERS[param_type]
    except KeyError:
        known = ", ".join(sorted(CONVERTERS))
        msg = f"Unknown path converter {param_type!r}. Known converters: {known}"
        raise ConfigurationError(msg) from None
    return re.compile(f"^{pattern}$")


def convert_param(value: str, param_type: str) -> str | int | float:
    """Convert a captured path parameter string to the target type.

    Raises ``ValueError`` if the string cannot be converted.
    Raises ``KeyError`` if *param_type* is not a registered converter.
    """
    _, target_type = CONVERTERS[param_type]
    return target_type(value)
