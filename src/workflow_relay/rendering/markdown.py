"""
workflow_relay.rendering.markdown

Deterministic JSON-to-mrkdwn renderer.

Responsibilities:
- Render objects as `**key:** value` lines, arrays as `• ` bullets.
- Indent two spaces per nesting level.
- Render text verbatim and every other scalar as a backticked JSON literal.

Example:

    **data:**
      **items:**
        • **name:** Item 1
          **value:** `100`
"""

from __future__ import annotations

from workflow_relay.domain.tree import JsonNumber, TreeValue

_INDENT = "  "
_BULLET = "• "


def render(value: TreeValue) -> str:
    """
    Render a tree value.

    Containers produce one line per leaf/label terminated by a single newline; empty
    containers produce "". A bare top-level scalar renders as its plain text.
    """

    if isinstance(value, dict):
        lines = _object_lines(value, 0)
    elif isinstance(value, list):
        lines = _array_lines(value, 0)
    else:
        return value if isinstance(value, str) else _literal(value)

    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def compose_reply(label: str, value: TreeValue) -> str:
    # One reply per service: header, blank line, rendered body.
    return f"**{label} Response:**\n\n{render(value)}"


def _object_lines(obj: dict[str, TreeValue], depth: int) -> list[str]:
    prefix = _INDENT * depth
    lines: list[str] = []
    for key, value in obj.items():
        label = f"**{key}:**"
        if isinstance(value, dict):
            lines.append(prefix + label)
            lines.extend(_object_lines(value, depth + 1))
        elif isinstance(value, list):
            lines.append(prefix + label)
            lines.extend(_array_lines(value, depth + 1))
        else:
            lines.append(f"{prefix}{label} {_leaf(value)}")
    return lines


def _array_lines(items: list[TreeValue], depth: int) -> list[str]:
    prefix = _INDENT * depth
    lines: list[str] = []
    for item in items:
        if isinstance(item, dict):
            fields = _object_lines(item, depth + 1)
            if not fields:
                lines.append(prefix + _BULLET)
                continue
            # The bullet occupies the first field's extra indent, so later fields align under it.
            lines.append(prefix + _BULLET + fields[0][len(prefix) + len(_INDENT) :])
            lines.extend(fields[1:])
        elif isinstance(item, list):
            lines.append(prefix + _BULLET)
            lines.extend(_array_lines(item, depth + 1))
        else:
            lines.append(prefix + _BULLET + _leaf(item))
    return lines


def _leaf(value: TreeValue) -> str:
    if isinstance(value, str):
        return value
    return f"`{_literal(value)}`"


def _literal(value: TreeValue) -> str:
    # bool is checked before the numeric types because bool subclasses int.
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, JsonNumber):
        return value.text
    if isinstance(value, float):
        return repr(value)
    return str(value)


# --- Module Notes -----------------------------------------------------------
# Synthesized fetch errors are plain objects ({"error": true, "message": ...}) and take
# the same `_object_lines` path as any payload; there is no error-specific branch here.
