"""Application descriptions and their JSON metadata."""

from __future__ import annotations

import dataclasses
import enum
import json
import logging
import os
from collections.abc import Iterable, Mapping
from typing import Any

log = logging.getLogger(__name__)


class Attribute(enum.IntFlag):
    """Flags describing how an application is run."""

    NONE = 0x00
    SYSTEM_UI = 0x01
    AUTO_START = 0x02
    DAEMON = 0x04
    FULL_SCREEN = 0x08
    ROOT = 0x8000


_ATTRIBUTE_NAMES: dict[str, Attribute] = {
    "None": Attribute.NONE,
    "SystemUI": Attribute.SYSTEM_UI,
    "AutoStart": Attribute.AUTO_START,
    "Daemon": Attribute.DAEMON,
    "FullScreen": Attribute.FULL_SCREEN,
    "Root": Attribute.ROOT,
}

_STRING_FIELDS = ("key", "role", "theme", "icon", "splash", "area", "status")
_OBJECT_FIELDS = ("name", "uri_handlers", "organization")
_URL_FIELDS = ("icon", "splash")


def _attribute_names(attributes: Attribute) -> list[str]:
    return [name for name, flag in _ATTRIBUTE_NAMES.items() if flag and attributes & flag]


def _attributes_from_names(names: Iterable[Any]) -> Attribute:
    result = Attribute.NONE
    for name in names:
        if isinstance(name, str) and name in _ATTRIBUTE_NAMES:
            result |= _ATTRIBUTE_NAMES[name]
    return result


def _json_int(value: Any) -> int:
    number = float(value)
    return int(number) if number.is_integer() else 0


def _system_languages() -> list[str]:
    for variable in ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"):
        setting = os.environ.get(variable)
        if setting:
            break
    else:
        return []
    languages: list[str] = []
    for item in setting.split(":"):
        code = item.split(".")[0].split("@")[0]
        if not code or code in ("C", "POSIX"):
            continue
        tag = code.replace("_", "-")
        for candidate in (tag, tag.split("-")[0]):
            if candidate not in languages:
                languages.append(candidate)
    return languages


@dataclasses.dataclass(eq=False)
class Application:
    """One application of the system; two applications are equal when their keys are."""

    key: str | None = None
    role: str = ""
    name: dict[str, Any] = dataclasses.field(default_factory=dict)
    theme: str = ""
    icon: str = ""
    splash: str = ""
    area: str = ""
    uri_handlers: dict[str, Any] = dataclasses.field(default_factory=dict)
    attributes: Attribute = Attribute.NONE
    status: str = "none"
    organization: dict[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        self.attributes = Attribute(self.attributes)

    @property
    def valid(self) -> bool:
        return self.key is not None

    def i18n_name(self, languages: Iterable[str] | None = None) -> str:
        """Name in the first of ``languages`` that has one, else the default name."""
        if languages is None:
            languages = _system_languages()
        for language in languages:
            if language in self.name:
                value = self.name[language]
                return value if isinstance(value, str) else ""
        value = self.name.get("default", "")
        return value if isinstance(value, str) else ""

    def to_dict(self) -> dict[str, Any]:
        """All writable properties as a JSON-compatible dict."""
        return {
            "key": self.key,
            "role": self.role,
            "name": dict(self.name),
            "theme": self.theme,
            "icon": self.icon,
            "splash": self.splash,
            "area": self.area,
            "uri_handlers": dict(self.uri_handlers),
            "attributes": _attribute_names(self.attributes),
            "status": self.status,
            "organization": dict(self.organization),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Application):
            return NotImplemented
        return self is other or self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        parts = []
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if field.name in _OBJECT_FIELDS:
                text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
            elif field.name == "attributes":
                text = "|".join(_attribute_names(value)) or "None"
            elif field.name in _URL_FIELDS:
                url = value if len(value) <= 15 else value[:12] + "..."
                text = f'"{url}"'
            else:
                text = "null" if value is None else f'"{value}"'
            parts.append(f" {field.name}: {text}")
        return "Application {" + ";".join(parts) + " }"


def from_json(data: Mapping[str, Any] | str | bytes) -> list[Application]:
    """Build the application described by plugin metadata, followed by one copy per alias."""
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    if not isinstance(data, Mapping):
        raise TypeError("application metadata must be a JSON object")

    values: dict[str, Any] = {}
    for field in _STRING_FIELDS:
        if field in data:
            value = data[field]
            values[field] = value if isinstance(value, str) else ""
    for field in _OBJECT_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if isinstance(value, Mapping):
            values[field] = dict(value)
        elif isinstance(value, str):
            values[field] = {"default": value}
        else:
            log.warning("%s %r not supported", field, value)
    if "attributes" in data:
        value = data["attributes"]
        if isinstance(value, list):
            values["attributes"] = _attributes_from_names(value)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            values["attributes"] = Attribute(_json_int(value))
        else:
            log.warning("attributes %r not supported", value)

    app = Application(**values)
    if not app.role:
        app.role = app.key or ""
    result = [app]

    aliases = data.get("alias")
    if isinstance(aliases, list):
        result.extend(
            dataclasses.replace(app, key=alias) for alias in aliases if isinstance(alias, str)
        )
    return result


def from_dict(data: Mapping[str, Any]) -> Application:
    """Rebuild an application from the output of :meth:`Application.to_dict`."""
    attributes = data.get("attributes", Attribute.NONE)
    if isinstance(attributes, int):
        attributes = Attribute(attributes)
    elif isinstance(attributes, Iterable) and not isinstance(attributes, str):
        attributes = _attributes_from_names(attributes)
    else:
        raise TypeError(f"invalid attributes: {attributes!r}")
    return Application(
        key=data.get("key"),
        role=data.get("role", ""),
        name=dict(data.get("name", {})),
        theme=data.get("theme", ""),
        icon=data.get("icon", ""),
        splash=data.get("splash", ""),
        area=data.get("area", ""),
        uri_handlers=dict(data.get("uri_handlers", {})),
        attributes=attributes,
        status=data.get("status", "none"),
        organization=dict(data.get("organization", {})),
    )