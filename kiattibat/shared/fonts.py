from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Iterable
from urllib.parse import quote_plus

from ..constants import SYSTEM_DEFAULT_FONT

FONT_OPTIONS: list[tuple[str, str]] = [
    ("Sarabun", "Sarabun (สารบรรณ - มาตรฐาน)"),
    ("Kanit", "Kanit (คณิต - ทันสมัย)"),
    ("Noto Serif Thai", "Noto Serif Thai (มีหัว - ทางการ)"),
    ("Thasadith", "Thasadith (ทศดิส - หัวเรื่อง)"),
    ("Chakra Petch", "Chakra Petch (จักรเพชร - ดิจิทัล)"),
    ("Mali", "Mali (มะลิ - ลายมือเด็ก)"),
    ("Charmonman", "Charmonman (ชามน - อ่อนช้อย)"),
    ("Srisakdi", "Srisakdi (ศรีศักดิ์ - ไทยโบราณ)"),
    ("Bai Jamjuree", "Bai Jamjuree (ใบจามจุรี - กึ่งทางการ)"),
    ("Kodchasan", "Kodchasan (กฎชสาร - วัยรุ่น)"),
]

FONT_FAMILIES: set[str] = {family for family, _ in FONT_OPTIONS}

_FONT_WEIGHTS = {
    "Charmonman": "400;700",
    "Kanit": "300;400;600",
    "Srisakdi": "400;700",
    "Thasadith": "400;700",
}
_DEFAULT_WEIGHTS = "400;600"

GOOGLE_FONTS_CSS = "https://fonts.googleapis.com/css2"

# Template field holding the override for each text role
ROLE_FIELDS: dict[str, str] = {
    "header": "font_header",
    "sub_header": "font_sub_header",
    "name": "font_name",
    "body": "font_desc",
    "date": "font_date",
    "signatures": "font_signatures",
}


@dataclass(frozen=True)
class FontPlan:
    header: str
    sub_header: str
    name: str
    body: str
    date: str
    signatures: str

    def families(self) -> list[str]:
        return sorted(set(astuple(self)))


def _clean(value) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def document_font(template) -> str:
    return _clean(getattr(template, "font_family", "")) or SYSTEM_DEFAULT_FONT


def resolve_fonts(template) -> FontPlan:
    """Role override, then the document font, then the system default."""

    fallback = document_font(template)
    resolved = {
        role: _clean(getattr(template, attr, "")) or fallback
        for role, attr in ROLE_FIELDS.items()
    }
    return FontPlan(**resolved)


def font_stylesheet_url(families: Iterable[str]) -> str | None:
    known = sorted({family for family in families if family in FONT_FAMILIES})
    if not known:
        return None
    params = [
        f"family={quote_plus(family)}:wght@{_FONT_WEIGHTS.get(family, _DEFAULT_WEIGHTS)}"
        for family in known
    ]
    return f"{GOOGLE_FONTS_CSS}?{'&'.join(params)}&display=swap"
