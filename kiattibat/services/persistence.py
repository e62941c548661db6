from __future__ import annotations

from datetime import date

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..app import db
from ..models import CertificateConfig, SchoolCluster
from ..shared.templates import CertificateTemplate, Cluster, TemplateStore


def load_clusters() -> list[Cluster]:
    rows = (
        db.session.query(SchoolCluster)
        .order_by(SchoolCluster.position, SchoolCluster.cluster_id)
        .all()
    )
    return [Cluster(row.cluster_id, row.name) for row in rows]


def load_certificate_configs() -> dict[str, dict]:
    rows = db.session.query(CertificateConfig).all()
    return {
        row.context_key: dict(row.config)
        for row in rows
        if isinstance(row.config, dict)
    }


def build_template_store(today: date | None = None) -> TemplateStore:
    return TemplateStore(
        load_certificate_configs(),
        clusters=load_clusters(),
        today=today,
    )


def save_certificate_config(context_key: str, template: CertificateTemplate) -> bool:
    """Upsert the whole template under ``context_key``.

    The stored ``id`` always equals the row key. Returns False on database
    failure after rolling back, leaving the caller's template untouched.
    """

    payload = template.to_dict()
    payload["id"] = context_key
    try:
        row = db.session.get(CertificateConfig, context_key)
        if row:
            row.config = payload
        else:
            db.session.add(CertificateConfig(context_key=context_key, config=payload))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[CERT-CONFIG] save failed context=%s", context_key)
        return False
    current_app.logger.info(
        "[CERT-CONFIG] saved context=%s frame=%s signatories=%d",
        context_key,
        template.frame_style,
        len(template.signatories),
    )
    return True


def replace_clusters(clusters: list[Cluster]) -> int:
    db.session.query(SchoolCluster).delete()
    for position, cluster in enumerate(clusters):
        db.session.add(
            SchoolCluster(cluster_id=cluster.cluster_id, name=cluster.name, position=position)
        )
    db.session.commit()
    return len(clusters)
