from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from ..constants import PAGE_HEIGHT_MM, PAGE_SIZE_CSS, PAGE_WIDTH_MM
from ..shared.fonts import FontPlan, font_stylesheet_url, resolve_fonts
from ..shared.layout import FramePlan, LayoutPlan, compose_frame, compose_layout
from ..shared.recipients import CertificateRecipient, sample_recipient
from ..shared.serials import render_serial, serial_start
from ..shared.templates import CertificateTemplate, Signatory

logger = logging.getLogger("kiattibat.render")

DOCUMENT_TEMPLATE = "certificates/document.html"
VERIFY_CAPTION = "Scan for Verify"

_CSS_FONT_UNSAFE = re.compile(r"[^\w \-]")


def css_font(family: str) -> Markup:
    """Quoted font-family value with a generic fallback."""

    cleaned = _CSS_FONT_UNSAFE.sub("", family or "").strip()
    if not cleaned:
        return Markup("sans-serif")
    return Markup(f"'{cleaned}', sans-serif")


def css_value(value: str) -> Markup:
    # Frame declarations are module constants, never user input
    return Markup(value)


_env = Environment(
    loader=PackageLoader("kiattibat", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["css_font"] = css_font
_env.filters["css_value"] = css_value


@dataclass(frozen=True)
class RenderedDocument:
    html: str
    page_count: int = 1
    page_width_mm: float = PAGE_WIDTH_MM
    page_height_mm: float = PAGE_HEIGHT_MM
    page_size: str = PAGE_SIZE_CSS


@dataclass(frozen=True)
class CertificatePage:
    recipient: CertificateRecipient
    serial: str
    verification_image: str


def _logo_urls(template: CertificateTemplate) -> list[str]:
    return [
        url.strip()
        for url in (template.logo_left_url, template.logo_right_url)
        if url and url.strip()
    ]


def _page(
    template: CertificateTemplate,
    recipient: CertificateRecipient,
    counter: int,
    verification_image: str,
    year: int | None,
) -> CertificatePage:
    serial = render_serial(
        template.serial_format,
        counter,
        activity_id=recipient.activity_id,
        team_id=recipient.team_id,
        year=year,
    )
    return CertificatePage(
        recipient=recipient,
        serial=serial,
        verification_image=verification_image or recipient.verification_image,
    )


def _render(
    template: CertificateTemplate,
    signatories: Sequence[Signatory],
    pages: list[CertificatePage],
) -> RenderedDocument:
    fonts: FontPlan = resolve_fonts(template)
    layout: LayoutPlan = compose_layout(template)
    frame: FramePlan = compose_frame(template)
    logos = _logo_urls(template)
    html = _env.get_template(DOCUMENT_TEMPLATE).render(
        template=template,
        title=template.name or "Certificate",
        fonts=fonts,
        font_url=font_stylesheet_url(fonts.families()),
        layout=layout,
        frame=frame,
        logos=logos,
        logo_mode="split" if len(logos) > 1 else "single",
        signatories=list(signatories),
        shadow_class="text-shadow-white" if template.enable_text_shadow else "",
        pages=pages,
        page_width=f"{PAGE_WIDTH_MM:g}mm",
        page_height=f"{PAGE_HEIGHT_MM:g}mm",
        page_size=PAGE_SIZE_CSS,
        verify_caption=VERIFY_CAPTION,
    )
    logger.debug(
        "rendered context=%s pages=%d frame=%s background=%s",
        template.id,
        len(pages),
        frame.style,
        frame.has_background,
    )
    return RenderedDocument(html=html, page_count=len(pages))


def render_document(
    template: CertificateTemplate,
    signatories: Sequence[Signatory] | None = None,
    recipient: CertificateRecipient | None = None,
    serial_counter: int | None = None,
    *,
    year: int | None = None,
    verification_image: str = "",
) -> RenderedDocument:
    """Render one certificate page as a standalone printable document.

    ``signatories`` defaults to the template's own list, ``recipient`` to
    the editor sample and ``serial_counter`` to the template's serial start.
    The verification image is an opaque URL or data URL.
    """

    if signatories is None:
        signatories = template.signatories
    if recipient is None:
        recipient = sample_recipient(template)
    if serial_counter is None:
        serial_counter = serial_start(template.serial_start)
    page = _page(template, recipient, serial_counter, verification_image, year)
    return _render(template, signatories, [page])


def render_batch(
    template: CertificateTemplate,
    recipients: Sequence[CertificateRecipient],
    *,
    year: int | None = None,
    signatories: Sequence[Signatory] | None = None,
) -> RenderedDocument:
    """Render one page per recipient; page ``i`` uses serial start + ``i``."""

    start = serial_start(template.serial_start)
    pages = [
        _page(template, recipient, start + index, "", year)
        for index, recipient in enumerate(recipients)
    ]
    if signatories is None:
        signatories = template.signatories
    return _render(template, signatories, pages)
