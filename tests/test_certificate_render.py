import re

import pytest

from kiattibat.services.certificates_render import (
    css_font,
    render_batch,
    render_document,
)
from kiattibat.shared.recipients import build_recipient
from kiattibat.shared.templates import CertificateTemplate, Signatory


def _template(**overrides):
    base = dict(
        id="area",
        header_text="สำนักงานเขต",
        sub_header_text="ขอมอบเกียรติบัตรนี้",
        date_text="ให้ไว้ ณ วันที่ 1 มกราคม พ.ศ. 2568",
        signatories=[Signatory(name="นายหนึ่ง", position="ผู้อำนวยการ\nประธาน")],
    )
    base.update(overrides)
    return CertificateTemplate(**base)


def _recipient(name="ผู้รับ", team_id="T1"):
    return build_recipient(
        name,
        school_name="โรงเรียน ก",
        activity_name="คัดลายมือ",
        event_name="งานทดสอบ",
        award="รางวัลชนะเลิศ",
        team_id=team_id,
        activity_id="A1",
    )


@pytest.mark.smoke
def test_document_is_a4_landscape():
    document = render_document(_template(), year=2025)
    assert document.page_count == 1
    assert document.page_width_mm == 297
    assert document.page_height_mm == 210
    assert "size: A4 landscape" in document.html


def test_sample_serial_and_fields_rendered():
    document = render_document(_template(serial_start=3), year=2025)
    assert "No. ACT01-2025-0003" in document.html
    assert "เด็กชายตัวอย่าง รักเรียน" in document.html
    assert "สำนักงานเขต" in document.html
    assert "(นายหนึ่ง)" in document.html


def test_explicit_counter_and_recipient():
    document = render_document(_template(), recipient=_recipient(), serial_counter=77, year=2025)
    assert "No. A1-2025-0077" in document.html
    assert '<span class="highlight">โรงเรียน ก</span>' in document.html


def test_user_text_is_escaped():
    document = render_document(_template(header_text="<script>alert(1)</script>"))
    assert "<script>alert(1)</script>" not in document.html
    assert "&lt;script&gt;" in document.html


def test_background_replaces_frame():
    document = render_document(_template(background_url="/bg.png"))
    assert 'class="bg-img"' in document.html
    assert 'class="frame-simple-gold"' not in document.html


def test_frame_rendered_without_background():
    document = render_document(_template(frame_style="ornamental-corners"))
    assert 'class="frame-corner-top-left"' in document.html
    assert 'class="bg-img"' not in document.html


def test_signature_line_toggle():
    assert 'class="sig-line"' in render_document(_template()).html
    hidden = render_document(_template(show_signature_line=False))
    assert 'class="sig-line"' not in hidden.html


def test_signature_image_or_spacer():
    with_image = _template(signatories=[Signatory(name="A", signature_url="/sig.png")])
    assert 'src="/sig.png"' in render_document(with_image).html
    assert 'class="sig-spacer"' in render_document(_template()).html


def test_signatories_argument_overrides_template():
    document = render_document(_template(), signatories=[Signatory(name="คนอื่น")])
    assert "(คนอื่น)" in document.html
    assert "(นายหนึ่ง)" not in document.html


def test_text_shadow_class_toggle():
    assert "name text-shadow-white" in render_document(_template()).html
    plain = render_document(_template(enable_text_shadow=False))
    assert "name text-shadow-white" not in plain.html


def test_logo_modes():
    single = render_document(_template(logo_left_url="/l.png"))
    assert 'class="logos single"' in single.html
    split = render_document(_template(logo_left_url="/l.png", logo_right_url="/r.png"))
    assert 'class="logos split"' in split.html


def test_verification_block_only_with_image():
    assert "Scan for Verify" not in render_document(_template()).html
    document = render_document(_template(), verification_image="data:image/png;base64,AAAA")
    assert "Scan for Verify" in document.html
    assert "data:image/png;base64,AAAA" in document.html


def test_role_fonts_in_stylesheet():
    document = render_document(_template(font_family="Kanit", font_name="Mali"))
    assert "'Mali', sans-serif" in document.html
    assert "family=Kanit" in document.html
    assert "family=Mali" in document.html


def test_layout_values_reach_css():
    document = render_document(_template(content_top=40, signature_img_width=None))
    assert "padding-top: 40mm" in document.html
    assert "width: auto" in document.html


def test_batch_numbers_pages_from_serial_start():
    template = _template(serial_start=10, serial_format="{id}-{run:3}")
    document = render_batch(
        template, [_recipient("หนึ่ง", "T1"), _recipient("สอง", "T2")], year=2025
    )
    assert document.page_count == 2
    assert "No. T1-010" in document.html
    assert "No. T2-011" in document.html


def test_css_font_strips_quotes():
    assert css_font("Bad'; } body {") == "'Bad  body', sans-serif"
    assert css_font("") == "sans-serif"


def test_same_inputs_render_identical_bytes():
    template = _template(logo_left_url="/l.png", font_name="Kanit")
    first = render_document(template, recipient=_recipient(), year=2025)
    second = render_document(template.copy(), recipient=_recipient(), year=2025)
    assert first.html == second.html


def test_batch_render_is_deterministic():
    recipients = [_recipient("หนึ่ง", "T1"), _recipient("สอง", "T2")]
    first = render_batch(_template(), recipients, year=2025)
    second = render_batch(_template(), list(recipients), year=2025)
    assert first.html == second.html
    assert first.page_count == second.page_count == 2


def test_embedded_images_are_forced_transparent():
    template = _template(
        logo_left_url="/l.png",
        logo_right_url="/r.png",
        signatories=[Signatory(name="A", signature_url="/sig.png")],
    )
    html = render_document(template, verification_image="data:image/png;base64,QQ==").html
    images = re.findall(r"<img [^>]*>", html)
    assert len(images) == 4
    for tag in images:
        assert "transparent-img" in tag


def test_background_image_is_not_forced_transparent():
    html = render_document(_template(background_url="/bg.png")).html
    (tag,) = [t for t in re.findall(r"<img [^>]*>", html) if 'src="/bg.png"' in t]
    assert "transparent-img" not in tag
