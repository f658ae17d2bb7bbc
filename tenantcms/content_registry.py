from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class FieldKind(str, Enum):
    text = "text"
    textarea = "textarea"
    richtext = "richtext"
    number = "number"
    select = "select"
    checkbox = "checkbox"
    toggle = "toggle"
    boolean = "boolean"
    media = "media"
    image = "image"
    color = "color"
    url = "url"
    repeater = "repeater"


@dataclass(frozen=True)
class KindMeta:
    label: str
    # JSON Schema fragment used for best-effort type checks of stored content
    json_schema: Dict[str, Any] = field(default_factory=dict)
    # enumerated kinds must declare the values they accept
    enumerated: bool = False


_STRING = {"type": "string"}
_BOOL = {"type": "boolean"}

KIND_REGISTRY: Dict[FieldKind, KindMeta] = {
    FieldKind.text: KindMeta("Text (single line)", _STRING),
    FieldKind.textarea: KindMeta("Textarea (multi line)", _STRING),
    FieldKind.richtext: KindMeta("Rich text editor", _STRING),
    FieldKind.number: KindMeta("Number", {"type": "number"}),
    # option values may be numeric-looking strings; the enum carries the real check
    FieldKind.select: KindMeta("Dropdown select", {}, enumerated=True),
    FieldKind.checkbox: KindMeta("Checkbox", _BOOL),
    FieldKind.toggle: KindMeta("Toggle switch", _BOOL),
    FieldKind.boolean: KindMeta("Boolean", _BOOL),
    # media references are a path/URL string or an object carrying one
    FieldKind.media: KindMeta("Media picker", {"type": ["string", "object"]}),
    FieldKind.image: KindMeta("Image", {"type": ["string", "object"]}),
    FieldKind.color: KindMeta("Color picker", _STRING),
    FieldKind.url: KindMeta("URL", _STRING),
    FieldKind.repeater: KindMeta("Repeater (multiple items)", {"type": "array", "items": {"type": "object"}}),
}

_missing = set(FieldKind) - set(KIND_REGISTRY)
if _missing:
    raise RuntimeError(f"FieldKind without registry entry: {sorted(k.value for k in _missing)}")


def kind_meta(kind: FieldKind | str) -> KindMeta:
    return KIND_REGISTRY[FieldKind(kind)]


def option_values(options: Any) -> Optional[list]:
    """Options come as a list of values or a mapping value -> label."""
    if options is None:
        return None
    if isinstance(options, dict):
        return list(options.keys())
    if isinstance(options, (list, tuple)):
        # list of {"value": ..., "label": ...} pairs is accepted too
        return [o.get("value") if isinstance(o, dict) else o for o in options]
    return None


def field_json_schema(spec: Dict[str, Any]) -> Dict[str, Any]:
    kind = FieldKind(spec["type"])
    meta = KIND_REGISTRY[kind]
    schema: Dict[str, Any] = dict(meta.json_schema)

    if kind == FieldKind.number:
        if spec.get("min") is not None:
            schema["minimum"] = spec["min"]
        if spec.get("max") is not None:
            schema["maximum"] = spec["max"]

    if meta.enumerated:
        values = option_values(spec.get("options"))
        if values:
            # form posts send strings; accept both "3" and 3 for declared "3"
            allowed = list(values)
            for v in values:
                if isinstance(v, str) and v.lstrip("-").isdigit():
                    allowed.append(int(v))
                elif isinstance(v, int) and not isinstance(v, bool):
                    allowed.append(str(v))
            schema["enum"] = allowed

    if kind == FieldKind.repeater and spec.get("fields"):
        schema["items"] = build_content_schema(spec["fields"], enforce_required=False)

    return schema


def build_content_schema(fields: list[Dict[str, Any]], *, enforce_required: bool = True) -> Dict[str, Any]:
    """
    JSON Schema (draft 2020-12) for a section's content object. Unknown keys are
    allowed so content written against older field lists keeps validating.
    """
    properties = {}
    required = []
    for spec in fields or []:
        properties[spec["name"]] = field_json_schema(spec)
        if enforce_required and spec.get("required"):
            required.append(spec["name"])
    schema: Dict[str, Any] = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": properties,
        "additionalProperties": True,
    }
    if required:
        schema["required"] = required
    return schema
