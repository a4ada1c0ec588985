"""Placeholder interpolation for translation templates.

Replaces {{name}} placeholders in one left-to-right pass. Substituted text
is never scanned again, and placeholders without a matching param are
left in the output unchanged.
"""

import re
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Set

from core.logging import get_module_logger
from infrastructure.i18n.models import ResolvedOutput

logger = get_module_logger()

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")

ValueFormatter = Callable[[str, Any], str]


def format_value(value: Any) -> str:
    """Render a param value as locale-agnostic text.

    Examples:
        >>> format_value(21)
        '21'
        >>> format_value(2.0)
        '2'
        >>> format_value(0.1)
        '0.1'
        >>> format_value(1e-07)
        '0.0000001'
        >>> format_value(None)
        ''
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def render(
    template: str,
    params: Optional[Mapping[str, Any]] = None,
    formatter: Optional[ValueFormatter] = None,
) -> ResolvedOutput:
    """Interpolate params into a template and report which were used.

    Args:
        template: Template text with {{name}} placeholders.
        params: Param name -> value.
        formatter: Optional callable (name, value) -> text replacing the
            default rendering.

    Returns:
        ResolvedOutput with the final text and the consumed param names.
    """
    params = params or {}
    consumed: Set[str] = set()
    unresolved: Set[str] = set()

    def _substitute(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name not in params:
            unresolved.add(name)
            return match.group(0)
        consumed.add(name)
        value = params[name]
        if formatter is not None:
            return formatter(name, value)
        return format_value(value)

    text = PLACEHOLDER_PATTERN.sub(_substitute, template)

    if unresolved:
        logger.debug(
            "unresolved_placeholders",
            placeholders=sorted(unresolved),
            available_variables=sorted(params.keys()),
        )

    return ResolvedOutput(text=text, consumed=frozenset(consumed))


def interpolate(
    template: str,
    params: Optional[Mapping[str, Any]] = None,
    formatter: Optional[ValueFormatter] = None,
) -> str:
    """Interpolate params into a template.

    Example:
        >>> interpolate("A Foobar named {{name}}", {"name": "Sue"})
        'A Foobar named Sue'
        >>> interpolate("Hello {{who}}", {})
        'Hello {{who}}'
    """
    return render(template, params, formatter).text


def placeholders(template: str) -> list:
    """List placeholder names in order of first appearance."""
    names = []
    for match in PLACEHOLDER_PATTERN.finditer(template):
        if match.group(1) not in names:
            names.append(match.group(1))
    return names
