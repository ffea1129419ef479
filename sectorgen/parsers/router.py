"""Pattern-based endpoint extraction from sector router files."""

from __future__ import annotations

import re
from re import Pattern
from typing import Dict, List, Optional, Union

from ..logging import get_logger
from ..models import OPERATION_KINDS, EndpointInfo

PatternLike = Union[str, Pattern[str]]

logger = get_logger("parsers.router")


def parse_router_file(
    router_content: str,
    router_pattern: PatternLike,
    endpoint_pattern: PatternLike,
) -> List[EndpointInfo]:
    """Return the endpoints declared inside the router body of ``router_content``.

    ``router_pattern`` isolates the router-construction body (named group
    ``body`` or group 1). ``endpoint_pattern`` is applied repeatedly inside
    that body and must capture the endpoint name, the optional input schema
    and the operation kind (named groups ``name``/``input``/``kind`` or
    groups 1-3). A file whose body cannot be located yields no endpoints.

    Endpoints keep declaration order. When a name is declared twice the later
    descriptor replaces the earlier one in place.
    """
    body = extract_router_body(router_content, router_pattern)
    if body is None:
        return []

    compiled = _compile(endpoint_pattern)
    endpoints: Dict[str, EndpointInfo] = {}
    for match in compiled.finditer(body):
        name, input_schema, kind = _endpoint_groups(match)
        if not name or kind not in OPERATION_KINDS:
            continue
        if name in endpoints:
            logger.warning(
                "Endpoint '%s' declared more than once; keeping the last declaration", name
            )
        endpoints[name] = EndpointInfo(name=name, kind=kind, input_schema=input_schema or None)
    return list(endpoints.values())


def extract_router_body(router_content: str, router_pattern: PatternLike) -> Optional[str]:
    """Return the text captured by the router pattern, or None if it does not match."""
    compiled = _compile(router_pattern)
    match = compiled.search(router_content)
    if match is None:
        return None
    if "body" in compiled.groupindex:
        return match.group("body") or ""
    if compiled.groups:
        return match.group(1) or ""
    return match.group(0)


def _endpoint_groups(match: re.Match[str]) -> tuple[Optional[str], Optional[str], Optional[str]]:
    names = match.re.groupindex
    if all(key in names for key in ("name", "input", "kind")):
        return match.group("name"), match.group("input"), match.group("kind")
    return match.group(1), match.group(2), match.group(3)


def _compile(pattern: PatternLike) -> Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


__all__ = ["extract_router_body", "parse_router_file"]
