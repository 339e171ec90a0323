from __future__ import annotations

from flask import Blueprint, abort, current_app, g, jsonify, request

from app.kitchenops.db import db_session
from app.kitchenops.models import User
from app.kitchenops.modules.upt.parsers.salesmix import parse_salesmix_xlsx, rollup_thawing_upts
from app.kitchenops.modules.upt.service import (
    bulk_upsert_upts,
    current_sales_mix,
    list_upts,
    save_sales_mix,
    validate_bulk_upts,
    validate_sales_mix_payload,
)
from app.kitchenops.rbac import require_login
from app.kitchenops.utils import json_object_body, parse_flag

bp = Blueprint("upt", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


def _uploaded_workbook() -> bytes:
    f = request.files.get("file")
    if not f or not f.filename:
        abort(400, description="An .xlsx file is required.")
    if not f.filename.lower().endswith(".xlsx"):
        abort(400, description="Only .xlsx sales mix reports are supported.")
    return f.read()


# ---------- UPT values ----------
@bp.get("/upt")
@require_login
def upt_list():
    s = db_session()
    return jsonify([u.to_dict() for u in list_upts(s)])


@bp.post("/upt/bulk")
@require_login
def upt_bulk():
    s = db_session()
    cleaned, errors = validate_bulk_upts(request.get_json(silent=True))
    if errors:
        return {"message": "Invalid UPT data.", "errors": errors}, 400

    rows = bulk_upsert_upts(s, cleaned, _current_user())
    s.commit()
    return {"message": "UPT values saved.", "data": [r.to_dict() for r in rows]}


@bp.post("/upt/import")
@require_login
def upt_import():
    """Roll a sales-mix workbook up into thawing UPTs; `?apply=1` also saves them."""
    try:
        summary = parse_salesmix_xlsx(_uploaded_workbook())
    except ValueError as e:
        abort(400, description=str(e))

    upts = rollup_thawing_upts(summary.items)
    current_app.logger.info(
        "UPT import: %d items read, %d rows skipped (request_id=%s)",
        len(summary.items),
        summary.rows_skipped,
        g.request_id,
    )

    applied = parse_flag(request.args.get("apply"))
    if applied:
        s = db_session()
        bulk_upsert_upts(s, upts, _current_user())
        s.commit()
    return {"upts": upts, "itemsRead": len(summary.items), "applied": applied}


# ---------- Sales mix ----------
@bp.post("/salesmix/upload")
@require_login
def salesmix_upload():
    s = db_session()
    if request.files:
        try:
            summary = parse_salesmix_xlsx(_uploaded_workbook())
        except ValueError as e:
            abort(400, description=str(e))
        payload = {
            "data": summary.items,
            "reportingPeriod": {
                "startDate": request.form.get("startDate"),
                "endDate": request.form.get("endDate"),
            },
        }
    else:
        payload = json_object_body()

    errors = validate_sales_mix_payload(payload)
    if errors:
        return {"message": "Missing required data.", "errors": errors}, 400

    mix = save_sales_mix(s, payload, _current_user())
    s.commit()
    current_app.logger.info("Sales mix uploaded with %d items (request_id=%s)", len(mix.data), g.request_id)
    body = mix.to_dict()
    body.pop("data")
    return {"message": "Sales mix data uploaded successfully.", **body}


@bp.get("/salesmix/current")
@require_login
def salesmix_current():
    s = db_session()
    mix = current_sales_mix(s)
    if mix is None:
        abort(404, description="No sales mix data found.")
    return mix.to_dict()
