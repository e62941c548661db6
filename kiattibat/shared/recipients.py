from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from ..constants import AREA_CONTEXT
from .serials import SAMPLE_ACTIVITY_ID, SAMPLE_TEAM_ID

MEDAL_LABELS = {
    "Gold": "เหรียญทอง",
    "Silver": "เหรียญเงิน",
    "Bronze": "เหรียญทองแดง",
    "Participant": "เข้าร่วม",
}

RANK_LABELS = {
    "1": "รางวัลชนะเลิศ",
    "2": "รางวัลรองชนะเลิศอันดับ 1",
    "3": "รางวัลรองชนะเลิศอันดับ 2",
}

PARTICIPATION_TEXT = "เข้าร่วมการแข่งขัน"

ROLE_LABELS = {
    "Teacher": "ครูผู้ฝึกสอน",
    "Student": "นักเรียน",
}

AREA_EVENT_NAME = "งานศิลปหัตถกรรมนักเรียน ระดับเขตพื้นที่การศึกษา"
EVENT_NAME_PREFIX = "งานศิลปหัตถกรรมนักเรียน"
SAMPLE_EVENT_NAME = "งานศิลปหัตถกรรมนักเรียน ครั้งที่ 72"
SAMPLE_NAME = "เด็กชายตัวอย่าง รักเรียน"


@dataclass(frozen=True)
class BodySegment:
    text: str
    highlight: bool = False


BodyLine = tuple[BodySegment, ...]


@dataclass(frozen=True)
class CertificateRecipient:
    """The person a single certificate page is issued to."""

    name: str
    body: tuple[BodyLine, ...] = ()
    team_id: str = ""
    activity_id: str = ""
    verification_image: str = ""


def highlight(text: str) -> BodySegment:
    return BodySegment(text, highlight=True)


def body_line(*parts: Union[str, BodySegment]) -> BodyLine:
    return tuple(
        part if isinstance(part, BodySegment) else BodySegment(str(part))
        for part in parts
        if part
    )


def award_text(rank: str | int | None, medal: str | None, show_rank: bool = True) -> str:
    """Award phrase printed for a team, e.g. first place with a gold medal."""

    if not show_rank:
        return PARTICIPATION_TEXT
    rank_key = str(rank).strip() if rank is not None else ""
    medal_label = MEDAL_LABELS.get(medal or "", "")
    if rank_key in RANK_LABELS:
        suffix = f" (ระดับ{medal_label})" if medal_label else ""
        return RANK_LABELS[rank_key] + suffix
    if medal_label and medal != "Participant":
        suffix = f" (ลำดับที่ {rank_key})" if rank_key else ""
        return f"รางวัลระดับ{medal_label}{suffix}"
    return PARTICIPATION_TEXT


def event_name_for(template, context_key: str, cluster_name: str = "") -> str:
    if template.event_name:
        return template.event_name
    if context_key == AREA_CONTEXT:
        return AREA_EVENT_NAME
    return f"{EVENT_NAME_PREFIX} {cluster_name}".strip()


def build_recipient(
    name: str,
    *,
    school_name: str,
    activity_name: str,
    event_name: str,
    award: str,
    role: str = "Student",
    team_id: str = "",
    activity_id: str = "",
    verification_image: str = "",
) -> CertificateRecipient:
    role_text = ROLE_LABELS.get(role, ROLE_LABELS["Student"])
    body = (
        body_line(f"{role_text}โรงเรียน ", highlight(school_name)),
        body_line("ได้รับ ", highlight(award)),
        body_line(f"กิจกรรม {activity_name}"),
        body_line(event_name),
    )
    return CertificateRecipient(
        name=name,
        body=tuple(line for line in body if line),
        team_id=team_id,
        activity_id=activity_id,
        verification_image=verification_image,
    )


def sample_recipient(template) -> CertificateRecipient:
    """Placeholder recipient used by the editor preview."""

    return build_recipient(
        SAMPLE_NAME,
        school_name="โรงเรียนสาธิตแห่งความรู้",
        activity_name="การแข่งขันหุ่นยนต์ระดับพื้นฐาน",
        event_name=template.event_name or SAMPLE_EVENT_NAME,
        award="รางวัลชนะเลิศ เหรียญทอง",
        team_id=SAMPLE_TEAM_ID,
        activity_id=SAMPLE_ACTIVITY_ID,
    )


def recipients_from_payload(
    rows: Iterable[dict],
    *,
    template,
    context_key: str,
    cluster_name: str = "",
) -> list[CertificateRecipient]:
    """Recipients for a batch print request, one per member row."""

    default_event = event_name_for(template, context_key, cluster_name)
    recipients: list[CertificateRecipient] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        name = str(row.get("name") or "").strip()
        if not name:
            continue
        award = award_text(row.get("rank"), row.get("medal"), template.show_rank)
        recipients.append(
            build_recipient(
                name,
                school_name=str(row.get("schoolName") or ""),
                activity_name=str(row.get("activityName") or row.get("activityId") or ""),
                event_name=default_event,
                award=award,
                role=str(row.get("role") or "Student"),
                team_id=str(row.get("teamId") or ""),
                activity_id=str(row.get("activityId") or ""),
                verification_image=str(row.get("verificationImage") or ""),
            )
        )
    return recipients
