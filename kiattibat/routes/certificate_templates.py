from __future__ import annotations

from dataclasses import replace

from flask import (
    Blueprint,
    Response,
    abort,
    current_app,
    jsonify,
    request,
    send_from_directory,
)

from ..constants import UPLOAD_ROOT
from ..services.certificates_render import render_batch, render_document
from ..services.persistence import build_template_store, save_certificate_config
from ..services.uploads import ingest_image
from ..services.verification import (
    PREVIEW_VERIFY_URL,
    qr_data_url,
    verification_url,
)
from ..shared.recipients import recipients_from_payload
from ..shared.serials import serial_preview
from ..shared.storage import upload_dir
from ..shared.templates import (
    CertificateTemplate,
    TemplateStore,
    allowed_frame_styles,
    context_display_name,
    default_context,
    merge_with_defaults,
    selectable_contexts,
)
from ..utils.rbac import Editor, editor_required

bp = Blueprint(
    "certificate_templates", __name__, url_prefix="/certificates/templates"
)


def _json_payload() -> dict | None:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None
    return payload


def _require_context(store: TemplateStore, editor: Editor, context_key: str) -> None:
    allowed = {
        c.cluster_id
        for c in selectable_contexts(editor.level, editor.cluster_id, store.clusters)
    }
    if context_key not in allowed:
        abort(403)


def _template_from_payload(
    store: TemplateStore, context_key: str, payload: dict
) -> CertificateTemplate:
    """Editor state for ``context_key``: the resolved template with the
    posted fields laid over it."""

    raw = payload.get("template") if isinstance(payload.get("template"), dict) else payload
    merged = merge_with_defaults({**store.resolve(context_key).to_dict(), **raw})
    merged.id = context_key
    store.upsert(merged)
    return store.resolve(context_key)


def _html(document) -> Response:
    return Response(document.html, mimetype="text/html")


@bp.get("/")
@editor_required
def list_contexts(editor: Editor):
    store = build_template_store()
    contexts = selectable_contexts(editor.level, editor.cluster_id, store.clusters)
    return jsonify(
        {
            "contexts": [{"key": c.cluster_id, "name": c.name} for c in contexts],
            "default": default_context(editor.level, editor.cluster_id),
        }
    )


@bp.get("/<context_key>")
@editor_required
def get_template(context_key: str, editor: Editor):
    store = build_template_store()
    _require_context(store, editor, context_key)
    template = store.resolve(context_key)
    return jsonify(
        {
            "template": template.to_dict(),
            "stored": context_key in store,
            "serialPreview": serial_preview(template),
            "frameStyles": allowed_frame_styles(context_key),
        }
    )


@bp.post("/<context_key>")
@editor_required
def save_template(context_key: str, editor: Editor):
    store = build_template_store()
    _require_context(store, editor, context_key)
    payload = _json_payload()
    if payload is None:
        return jsonify({"ok": False, "error": "Invalid request payload."}), 400
    template = _template_from_payload(store, context_key, payload)
    if not save_certificate_config(context_key, template):
        return (
            jsonify({"ok": False, "error": "Saving failed, please try again."}),
            500,
        )
    return jsonify({"ok": True, "template": template.to_dict()})


@bp.post("/<context_key>/preview")
@editor_required
def preview_template(context_key: str, editor: Editor):
    store = build_template_store()
    _require_context(store, editor, context_key)
    payload = _json_payload()
    if payload is None:
        return jsonify({"error": "Invalid request payload."}), 400
    template = _template_from_payload(store, context_key, payload)
    try:
        document = render_document(
            template, verification_image=qr_data_url(PREVIEW_VERIFY_URL)
        )
    except Exception:
        current_app.logger.exception("[CERT-PREVIEW] failed context=%s", context_key)
        return jsonify({"error": "Failed to generate preview."}), 500
    return _html(document)


@bp.post("/<context_key>/print")
@editor_required
def print_certificates(context_key: str, editor: Editor):
    store = build_template_store()
    _require_context(store, editor, context_key)
    payload = _json_payload()
    if payload is None or not isinstance(payload.get("recipients"), list):
        return jsonify({"error": "A recipients list is required."}), 400
    template = store.resolve(context_key)
    recipients = recipients_from_payload(
        payload["recipients"],
        template=template,
        context_key=context_key,
        cluster_name=context_display_name(context_key, store.clusters),
    )
    base_url = current_app.config.get("CERT_VERIFY_BASE_URL", "")
    recipients = [
        r
        if r.verification_image
        else replace(
            r, verification_image=qr_data_url(verification_url(base_url, r.team_id))
        )
        for r in recipients
    ]
    document = render_batch(template, recipients)
    current_app.logger.info(
        "[CERT-PRINT] context=%s pages=%d", context_key, document.page_count
    )
    return _html(document)


@bp.post("/serial-preview")
@editor_required
def preview_serial(editor: Editor):
    payload = _json_payload() or {}
    template = merge_with_defaults(
        {
            key: payload[key]
            for key in ("serialFormat", "serialStart")
            if key in payload
        }
    )
    return jsonify({"serial": serial_preview(template)})


@bp.post("/uploads")
@editor_required
def upload_image(editor: Editor):
    payload = _json_payload()
    if payload is None:
        return jsonify({"status": "error", "message": "Invalid request payload."}), 400
    result = ingest_image(str(payload.get("data") or ""), str(payload.get("filename") or ""))
    return jsonify(result.to_dict()), (200 if result.ok else 400)


@bp.get("/uploads/<path:filename>")
def uploaded_file(filename: str):
    directory = upload_dir(current_app.config.get("SITE_ROOT", "/srv"), UPLOAD_ROOT)
    return send_from_directory(directory, filename)
