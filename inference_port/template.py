"""Prompt template rendering (permissive placeholder substitution).

Placeholders look like ``{{name}}`` where the name is one or more characters
that are neither whitespace nor braces. Substitution is a single left-to-right
pass: values are inserted literally and never rescanned, unknown names are left
untouched, and anything that does not match the placeholder shape passes
through unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

PLACEHOLDER_RE = re.compile(r"\{\{([^\s{}]+)\}\}")


def render_template(template: str, parameters: Mapping[str, str]) -> str:
    """Render a prompt template.

    Args:
        template: Template containing ``{{name}}`` placeholders.
        parameters: Mapping of placeholder names to values.

    Returns:
        Rendered prompt. Unresolved placeholders are kept verbatim.
    """

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in parameters:
            return parameters[name]
        return match.group(0)

    return PLACEHOLDER_RE.sub(_substitute, template)


def find_placeholders(template: str) -> list[str]:
    """Return placeholder names in first-occurrence order, without duplicates."""
    seen: dict[str, None] = {}
    for match in PLACEHOLDER_RE.finditer(template):
        seen.setdefault(match.group(1), None)
    return list(seen)
