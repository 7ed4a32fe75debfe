"""
envtracing - Tag Parser
JAEGER_TAGS parsing with ${VAR} / ${VAR:default} environment interpolation
"""

import os
from typing import List, Optional, Tuple

from ..errors import ParseError

def _interpolate(value: str) -> str:
    """Resolve ${NAME} or ${NAME:DEFAULT} against the environment"""

    if not (value.startswith("${") and value.endswith("}")):
        return value

    name, _, default = value[2:-1].partition(":")
    resolved = os.environ.get(name, "")
    if resolved == "" and default != "":
        resolved = default
    return resolved

def parse_tags(raw: str, env_var: Optional[str] = None) -> List[Tuple[str, str]]:
    """Parse a comma separated key=value list into ordered attributes.

    Example: ``key1=value1,key2=${ENV_NAME:fallback}``. Duplicate keys are
    kept in input order; empty entries are skipped. A ParseError names
    env_var when the list came from the environment.
    """

    tags: List[Tuple[str, str]] = []
    for entry in raw.split(","):
        key, sep, value = entry.partition("=")
        if not sep:
            if entry.strip():
                raise ParseError(entry, env_var)
            continue

        key, value = key.strip(), _interpolate(value.strip())
        if value == "":
            raise ParseError(entry, env_var)
        tags.append((key, value))

    return tags
