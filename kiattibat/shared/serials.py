from __future__ import annotations

import re
from datetime import date
from typing import Any

from ..constants import BUDDHIST_ERA_OFFSET

DEFAULT_SERIAL_FORMAT = "{activityId}-{year}-{run:4}"

SAMPLE_ACTIVITY_ID = "ACT01"
SAMPLE_TEAM_ID = "T001"

# Widest zero padding honoured; wider counts render as a bare {run}
MAX_RUN_DIGITS = 32

_RUN_PADDED = re.compile(r"\{run:0*(\d{1,2})\}")
# Any run token, including malformed counts such as "{run:}" or "{run:x}"
_RUN_ANY = re.compile(r"\{run(?::[^{}]*)?\}")
_TEAM_ID_SEGMENT = re.compile(r"-?\{id\}")
_ACTIVITY_ID_SEGMENT = re.compile(r"\{activityId\}-?")


def _replace_first(text: str, token: str, value: str) -> str:
    return text.replace(token, value, 1)


def _replace_span(text: str, match: re.Match, value: str) -> str:
    return text[: match.start()] + value + text[match.end() :]


def _first_padded_run(text: str) -> re.Match | None:
    for match in _RUN_PADDED.finditer(text):
        if int(match.group(1)) <= MAX_RUN_DIGITS:
            return match
    return None


def render_serial(
    fmt: str | None,
    counter: int,
    *,
    activity_id: str = "",
    team_id: str = "",
    year: int | None = None,
) -> str:
    """Expand the serial-number placeholders of ``fmt``.

    Each placeholder is substituted once, in the order ``{year}``,
    ``{th_year}``, ``{id}``, ``{activityId}`` and finally the run counter.
    ``{run:N}`` pads the counter to ``N`` digits (at most ``MAX_RUN_DIGITS``);
    without one, the first ``{run}`` (or malformed or oversized ``{run:...}``)
    receives the bare counter.
    Text outside placeholders is left alone.
    """

    result = fmt or DEFAULT_SERIAL_FORMAT
    if "{year}" in result or "{th_year}" in result:
        if year is None:
            year = date.today().year
        result = _replace_first(result, "{year}", str(year))
        result = _replace_first(result, "{th_year}", str(year + BUDDHIST_ERA_OFFSET))
    result = _replace_first(result, "{id}", str(team_id or ""))
    result = _replace_first(result, "{activityId}", str(activity_id or ""))

    padded = _first_padded_run(result)
    if padded:
        digits = int(padded.group(1))
        return _replace_span(result, padded, str(counter).zfill(digits))
    bare = _RUN_ANY.search(result)
    if bare:
        return _replace_span(result, bare, str(counter))
    return result


def include_team_id(fmt: str | None, include: bool) -> str:
    current = fmt or DEFAULT_SERIAL_FORMAT
    if include:
        if "{id}" in current:
            return current
        return current + "-{id}"
    return _TEAM_ID_SEGMENT.sub("", current)


def include_activity_id(fmt: str | None, include: bool) -> str:
    current = fmt or DEFAULT_SERIAL_FORMAT
    if include:
        if "{activityId}" in current:
            return current
        return "{activityId}-" + current
    return _ACTIVITY_ID_SEGMENT.sub("", current)


def serial_start(value: Any) -> int:
    try:
        start = int(value)
    except (TypeError, ValueError):
        return 1
    return start if start >= 1 else 1


def serial_preview(template, year: int | None = None) -> str:
    """Sample serial shown next to the format field while editing."""

    return render_serial(
        template.serial_format,
        serial_start(template.serial_start),
        activity_id=SAMPLE_ACTIVITY_ID,
        team_id=SAMPLE_TEAM_ID,
        year=year,
    )
