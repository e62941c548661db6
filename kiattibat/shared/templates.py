from __future__ import annotations

import math
from copy import deepcopy
from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Any, Iterable, Mapping, NamedTuple, Sequence

from ..constants import (
    AREA_CONTEXT,
    AREA_DISPLAY_NAME,
    AREA_LEVELS,
    BUDDHIST_ERA_OFFSET,
    DEFAULT_FRAME_STYLE,
    DEFAULT_LOGO_URL,
    FRAME_STYLES,
    LEVEL_GROUP_ADMIN,
    ROOT_ONLY_FRAME_STYLES,
    SYSTEM_DEFAULT_FONT,
    THAI_MONTHS,
    UNKNOWN_CLUSTER_NAME,
)
from .serials import DEFAULT_SERIAL_FORMAT, serial_start


class Cluster(NamedTuple):
    cluster_id: str
    name: str


@dataclass
class Signatory:
    name: str = ""
    position: str = ""
    signature_url: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "position": self.position,
            "signatureUrl": self.signature_url,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "Signatory":
        if isinstance(raw, Signatory):
            return replace(raw)
        if not isinstance(raw, Mapping):
            return cls()
        return cls(
            name=_text(raw.get("name")),
            position=_text(raw.get("position")),
            signature_url=_text(raw.get("signatureUrl")),
        )


def _key(name: str, kind: str = "text"):
    return {"key": name, "kind": kind}


@dataclass
class CertificateTemplate:
    """One certificate configuration, keyed by its context (``id``)."""

    id: str = field(default="", metadata=_key("id"))
    name: str = field(default="Default", metadata=_key("name"))
    background_url: str = field(default="", metadata=_key("backgroundUrl"))
    header_text: str = field(default="", metadata=_key("headerText"))
    sub_header_text: str = field(default="", metadata=_key("subHeaderText"))
    event_name: str = field(default="", metadata=_key("eventName"))
    frame_style: str = field(default=DEFAULT_FRAME_STYLE, metadata=_key("frameStyle"))
    logo_left_url: str = field(default="", metadata=_key("logoLeftUrl"))
    logo_right_url: str = field(default="", metadata=_key("logoRightUrl"))
    signatories: list[Signatory] = field(
        default_factory=list, metadata=_key("signatories", "signatories")
    )
    show_signature_line: bool = field(
        default=True, metadata=_key("showSignatureLine", "bool")
    )
    date_text: str = field(default="", metadata=_key("dateText"))
    show_rank: bool = field(default=True, metadata=_key("showRank", "bool"))
    serial_format: str = field(
        default=DEFAULT_SERIAL_FORMAT, metadata=_key("serialFormat")
    )
    serial_start: int = field(default=1, metadata=_key("serialStart", "counter"))
    content_top: float | None = field(default=25, metadata=_key("contentTop", "mm"))
    footer_bottom: float | None = field(
        default=25, metadata=_key("footerBottom", "mm")
    )
    logo_height: float | None = field(default=35, metadata=_key("logoHeight", "mm"))
    signature_spacing: float | None = field(
        default=3, metadata=_key("signatureSpacing", "mm")
    )
    signature_img_height: float | None = field(
        default=20, metadata=_key("signatureImgHeight", "mm")
    )
    signature_img_width: float | None = field(
        default=None, metadata=_key("signatureImgWidth", "mm")
    )
    serial_top: float | None = field(default=10, metadata=_key("serialTop", "mm"))
    serial_right: float | None = field(default=10, metadata=_key("serialRight", "mm"))
    qr_bottom: float | None = field(default=10, metadata=_key("qrBottom", "mm"))
    qr_right: float | None = field(default=10, metadata=_key("qrRight", "mm"))
    font_family: str = field(default=SYSTEM_DEFAULT_FONT, metadata=_key("fontFamily"))
    enable_text_shadow: bool = field(
        default=True, metadata=_key("enableTextShadow", "bool")
    )
    font_header: str = field(default="", metadata=_key("fontHeader"))
    font_sub_header: str = field(default="", metadata=_key("fontSubHeader"))
    font_name: str = field(default="", metadata=_key("fontName"))
    font_desc: str = field(default="", metadata=_key("fontDesc"))
    font_date: str = field(default="", metadata=_key("fontDate"))
    font_signatures: str = field(default="", metadata=_key("fontSignatures"))

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.metadata["kind"] == "signatories":
                value = [sig.to_dict() for sig in value]
            data[f.metadata["key"]] = value
        return data

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "CertificateTemplate":
        """Build a template from its wire form, coercing every field.

        Missing keys keep the dataclass default; unknown keys are ignored.
        Layout values that are not numbers are stored as ``None`` so the
        layout compositor applies its own fallback.
        """

        values: dict[str, Any] = {}
        for f in fields(cls):
            key = f.metadata["key"]
            if key not in raw:
                continue
            values[f.name] = _coerce(f.metadata["kind"], raw[key])
        return cls(**values)

    def copy(self) -> "CertificateTemplate":
        return deepcopy(self)


WIRE_KEYS: tuple[str, ...] = tuple(
    f.metadata["key"] for f in fields(CertificateTemplate)
)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _coerce(kind: str, value: Any) -> Any:
    if kind == "bool":
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
    if kind == "counter":
        return serial_start(value)
    if kind == "mm":
        return _number(value)
    if kind == "signatories":
        if not isinstance(value, (list, tuple)):
            return []
        return [Signatory.from_dict(item) for item in value]
    return _text(value)


def thai_date_text(day: date) -> str:
    month = THAI_MONTHS[day.month - 1]
    return f"ให้ไว้ ณ วันที่ {day.day} {month} พ.ศ. {day.year + BUDDHIST_ERA_OFFSET}"


def default_template(today: date | None = None) -> CertificateTemplate:
    today = today or date.today()
    return CertificateTemplate(
        name="Default",
        header_text="สำนักงานคณะกรรมการการศึกษาขั้นพื้นฐาน",
        sub_header_text="เกียรติบัตรฉบับนี้ให้ไว้เพื่อแสดงว่า",
        logo_left_url=DEFAULT_LOGO_URL,
        signatories=[
            Signatory(
                name="นายสมชาย ใจดี",
                position="ผู้อำนวยการเขตพื้นที่การศึกษา",
            )
        ],
        date_text=thai_date_text(today),
    )


def merge_with_defaults(
    stored: Mapping[str, Any] | CertificateTemplate,
    today: date | None = None,
) -> CertificateTemplate:
    base = default_template(today).to_dict()
    if isinstance(stored, CertificateTemplate):
        stored = stored.to_dict()
    base.update({key: value for key, value in stored.items() if key in WIRE_KEYS})
    return CertificateTemplate.from_dict(base)


def context_display_name(context_key: str, clusters: Iterable[Cluster]) -> str:
    if context_key == AREA_CONTEXT:
        return AREA_DISPLAY_NAME
    for cluster in clusters:
        if cluster.cluster_id == context_key:
            return cluster.name or UNKNOWN_CLUSTER_NAME
    return UNKNOWN_CLUSTER_NAME


def allowed_frame_styles(context_key: str) -> list[str]:
    if context_key == AREA_CONTEXT:
        return list(FRAME_STYLES)
    return [style for style in FRAME_STYLES if style not in ROOT_ONLY_FRAME_STYLES]


def coerce_frame_style(context_key: str, style: str | None) -> str:
    if style in allowed_frame_styles(context_key):
        return style
    return DEFAULT_FRAME_STYLE


def selectable_contexts(
    level: str | None,
    cluster_id: str | None,
    clusters: Sequence[Cluster],
) -> list[Cluster]:
    """Contexts an editor with ``level`` may pick, in display order."""

    normalized = (level or "").lower()
    if normalized in AREA_LEVELS:
        return [Cluster(AREA_CONTEXT, AREA_DISPLAY_NAME), *clusters]
    if normalized == LEVEL_GROUP_ADMIN:
        return [c for c in clusters if c.cluster_id == cluster_id]
    return list(clusters)


def default_context(level: str | None, cluster_id: str | None) -> str:
    if (level or "").lower() in AREA_LEVELS:
        return AREA_CONTEXT
    return cluster_id or AREA_CONTEXT


class TemplateStore:
    """In-memory map of context key to template.

    Reads merge the stored record over the default template; writes replace
    the whole entry. Persisting an entry is the caller's job.
    """

    def __init__(
        self,
        stored: Mapping[str, Mapping[str, Any] | CertificateTemplate] | None = None,
        clusters: Sequence[Cluster] = (),
        today: date | None = None,
    ) -> None:
        self.clusters = list(clusters)
        self.today = today
        self._entries: dict[str, CertificateTemplate] = {}
        for key, record in (stored or {}).items():
            self._entries[key] = self._normalize(key, merge_with_defaults(record, today))

    def _normalize(self, key: str, template: CertificateTemplate) -> CertificateTemplate:
        template.id = key
        template.frame_style = coerce_frame_style(key, template.frame_style)
        return template

    def __contains__(self, context_key: str) -> bool:
        return context_key in self._entries

    def resolve(self, context_key: str) -> CertificateTemplate:
        existing = self._entries.get(context_key)
        if existing is not None:
            return existing.copy()
        template = default_template(self.today)
        template.name = context_display_name(context_key, self.clusters)
        return self._normalize(context_key, template)

    def upsert(self, template: CertificateTemplate) -> None:
        stored = self._normalize(template.id, template.copy())
        self._entries[template.id] = stored

    def snapshot(self) -> dict[str, dict]:
        return {key: entry.to_dict() for key, entry in self._entries.items()}
