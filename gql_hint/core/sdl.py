"""Compact SDL rendering of introspection data.

Turns a ``__type`` introspection payload into an SDL declaration such as::

    type Book {
      author: Author!
      id: ID!
      title: String!
    }

Fields are sorted by their rendered type and then by name so the output is
stable regardless of the order the server declares them in. Directives, union
members and deprecation markers are not rendered.
"""

from typing import Any

_SDL_KEYWORDS = {
    "OBJECT": "type",
    "INPUT_OBJECT": "input",
    "INTERFACE": "interface",
    "UNION": "union",
}


def format_type_ref(type_ref: Any) -> str:
    """Render a type reference, e.g. ``NON_NULL(LIST(Book))`` -> ``[Book]!``.

    References nested deeper than the introspection query unwraps end in a
    missing ``ofType`` and render as ``Unknown`` at that point.
    """
    if not isinstance(type_ref, dict):
        return "Unknown"
    kind = type_ref.get("kind")
    if kind == "NON_NULL":
        return format_type_ref(type_ref.get("ofType")) + "!"
    if kind == "LIST":
        return "[" + format_type_ref(type_ref.get("ofType")) + "]"
    name = type_ref.get("name")
    if isinstance(name, str) and name:
        return name
    return "Unknown"


def sdl_keyword(kind: str) -> str:
    """Return the SDL keyword that declares a type of the given kind."""
    return _SDL_KEYWORDS.get(kind, kind.lower())


def sort_fields_by_type(fields: list[Any]) -> list[dict[str, Any]]:
    """Sort field descriptors by (rendered type, name), dropping non-objects."""
    out = [f for f in fields if isinstance(f, dict)]
    out.sort(key=lambda f: (format_type_ref(f.get("type")), _str(f.get("name"))))
    return out


def format_sdl_field(field: dict[str, Any], show_args: bool = False) -> str:
    """Render one field line, including its argument list if requested."""
    name = _str(field.get("name"))
    field_type = format_type_ref(field.get("type"))

    args = field.get("args")
    if show_args and isinstance(args, list) and args:
        rendered = ", ".join(
            f"{_str(arg.get('name'))}: {format_type_ref(arg.get('type'))}"
            for arg in args
            if isinstance(arg, dict)
        )
        return f"  {name}({rendered}): {field_type}\n"
    return f"  {name}: {field_type}\n"


def format_type_sdl(
    type_data: dict[str, Any],
    show_args: bool = False,
    no_descriptions: bool = True,
) -> str:
    """Render a ``__type`` payload as an SDL declaration.

    Args:
        type_data: Introspection payload for one type
        show_args: Include field argument signatures
        no_descriptions: Suppress the leading ``# description`` comment

    Returns:
        Newline-terminated SDL text
    """
    name = _str(type_data.get("name"))
    kind = _str(type_data.get("kind"))
    description = _str(type_data.get("description"))

    lines: list[str] = []
    if not no_descriptions and description:
        lines.append(f"# {description}\n")

    if kind == "SCALAR":
        lines.append(f"scalar {name}\n")
        return "".join(lines)

    if kind == "ENUM":
        values = type_data.get("enumValues") or []
        names = [_str(v.get("name")) for v in values if isinstance(v, dict)]
        lines.append(f"enum {name} {{ {' '.join(n for n in names if n)} }}\n")
        return "".join(lines)

    lines.append(f"{sdl_keyword(kind)} {name} {{\n")
    for key in ("fields", "inputFields"):
        fields = type_data.get(key)
        if isinstance(fields, list) and fields:
            lines.extend(format_sdl_field(f, show_args) for f in sort_fields_by_type(fields))
    lines.append("}\n")
    return "".join(lines)


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""
