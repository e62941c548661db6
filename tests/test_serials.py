from datetime import date

import pytest

from kiattibat.shared.serials import (
    DEFAULT_SERIAL_FORMAT,
    MAX_RUN_DIGITS,
    include_activity_id,
    include_team_id,
    render_serial,
    serial_preview,
    serial_start,
)
from kiattibat.shared.templates import CertificateTemplate


def test_default_format_pads_run_and_fills_ids():
    serial = render_serial(
        DEFAULT_SERIAL_FORMAT, 7, activity_id="ACT01", team_id="T001", year=2025
    )
    assert serial == "ACT01-2025-0007"


def test_empty_format_falls_back_to_default():
    assert render_serial("", 12, activity_id="A", year=2024) == "A-2024-0012"
    assert render_serial(None, 12, activity_id="A", year=2024) == "A-2024-0012"


def test_buddhist_year_and_team_id():
    serial = render_serial("CERT/{th_year}/{id}/{run:3}", 5, team_id="T9", year=2025)
    assert serial == "CERT/2568/T9/005"


def test_bare_run_token_is_unpadded():
    assert render_serial("No-{run}", 42) == "No-42"


def test_run_wider_than_padding_is_not_truncated():
    assert render_serial("{run:2}", 12345) == "12345"


def test_malformed_run_count_renders_unpadded():
    assert render_serial("X-{run:}", 3) == "X-3"
    assert render_serial("X-{run:abc}", 3) == "X-3"


def test_each_placeholder_replaced_once():
    serial = render_serial("{id}-{id}-{run}-{run}", 1, team_id="T1")
    assert serial == "T1-{id}-1-{run}"


def test_literal_text_untouched():
    assert render_serial("ABC-{run:2}-XYZ", 4) == "ABC-04-XYZ"


def test_year_defaults_to_today():
    assert render_serial("{year}", 1) == str(date.today().year)


def test_include_team_id_appends_once():
    fmt = include_team_id("{activityId}-{run:4}", True)
    assert fmt == "{activityId}-{run:4}-{id}"
    assert include_team_id(fmt, True) == fmt


def test_exclude_team_id_strips_segment():
    assert include_team_id("{activityId}-{run:4}-{id}", False) == "{activityId}-{run:4}"
    assert include_team_id("{id}", False) == ""


def test_include_activity_id_prepends_once():
    fmt = include_activity_id("{year}-{run:4}", True)
    assert fmt == "{activityId}-{year}-{run:4}"
    assert include_activity_id(fmt, True) == fmt


def test_exclude_activity_id_strips_segment():
    assert include_activity_id(DEFAULT_SERIAL_FORMAT, False) == "{year}-{run:4}"


@pytest.mark.parametrize(
    "value,expected",
    [(5, 5), ("12", 12), (0, 1), (-3, 1), ("abc", 1), (None, 1)],
)
def test_serial_start_is_at_least_one(value, expected):
    assert serial_start(value) == expected


def test_serial_preview_uses_sample_ids():
    template = CertificateTemplate(serial_format="{activityId}-{id}-{run:3}", serial_start=9)
    assert serial_preview(template, year=2025) == "ACT01-T001-009"


@pytest.mark.parametrize("digits", [1, 3, 6])
def test_padded_run_has_exact_width(digits):
    for counter in (0, 1, 9, 10 ** digits - 1):
        assert len(render_serial("{run:%d}" % digits, counter)) == digits


def test_team_id_toggle_round_trip():
    assert include_team_id(include_team_id(DEFAULT_SERIAL_FORMAT, True), False) == DEFAULT_SERIAL_FORMAT


@pytest.mark.parametrize(
    "fmt",
    ["X-{run:33}", "X-{run:999}", "X-{run:1000000000}", "X-{run:99999999999999999999}"],
)
def test_oversized_run_width_renders_bare_counter(fmt):
    assert render_serial(fmt, 7) == "X-7"


def test_run_width_at_limit_is_padded():
    assert render_serial("{run:%d}" % MAX_RUN_DIGITS, 7) == "7".zfill(MAX_RUN_DIGITS)
    assert render_serial("{run:04}", 7) == "0007"


def test_later_valid_run_used_after_oversized_one():
    assert render_serial("{run:500}/{run:3}", 7) == "{run:500}/007"
