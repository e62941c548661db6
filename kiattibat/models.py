from __future__ import annotations

from .app import db


class SchoolCluster(db.Model):
    __tablename__ = "school_clusters"

    cluster_id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)


class CertificateConfig(db.Model):
    """Whole-template upsert target, one row per context key."""

    __tablename__ = "certificate_configs"

    context_key = db.Column(db.String(64), primary_key=True)
    config = db.Column(db.JSON, nullable=False, default=dict)
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )
