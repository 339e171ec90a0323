from __future__ import annotations

from datetime import date, timedelta

from flask import Blueprint, abort, request

from app.kitchenops.db import db_session
from app.kitchenops.modules.adjustments.service import list_active_adjustments
from app.kitchenops.modules.allocations.calculator import (
    AdjustmentNote,
    BoardInputs,
    Closure,
    Note,
    prep_board,
    thawing_board,
)
from app.kitchenops.modules.buffers.service import buffer_lookup
from app.kitchenops.modules.closures.service import list_closure_plans
from app.kitchenops.modules.instructions.service import list_instructions
from app.kitchenops.modules.sales.service import get_projection_config, load_sales_lookup
from app.kitchenops.modules.upt.service import upt_map
from app.kitchenops.rbac import require_login
from app.kitchenops.utils import parse_date, parse_flag, week_start

bp = Blueprint("allocations", __name__)


def _board_params() -> tuple[date, bool]:
    try:
        as_of = parse_date(request.args.get("as_of")) or date.today()
    except ValueError:
        abort(400, description="as_of must be YYYY-MM-DD.")
    return as_of, parse_flag(request.args.get("next_week"))


def _load_inputs(as_of: date, next_week: bool) -> BoardInputs:
    s = db_session()
    start = week_start(as_of) + timedelta(days=7 if next_week else 0)
    # Thawing looks up to a week past the board's last day.
    end = start + timedelta(days=13)

    global_buffers, daily_buffers = buffer_lookup(s)
    return BoardInputs(
        sales=load_sales_lookup(s, start, end),
        upts=upt_map(s),
        global_buffers=global_buffers,
        daily_buffers=daily_buffers,
        adjustments=[AdjustmentNote(a.day, a.product, a.message) for a in list_active_adjustments(s)],
        closures=[Closure(p.date, p.end_date, p.reason) for p in list_closure_plans(s, active_on=start)],
        instructions=[Note(i.day, i.message, tuple(i.product_list())) for i in list_instructions(s)],
        projection_config=get_projection_config(s),
    )


@bp.get("/allocations/thawing")
@require_login
def allocations_thawing():
    as_of, next_week = _board_params()
    days = thawing_board(_load_inputs(as_of, next_week), as_of, next_week=next_week)
    return {"as_of": as_of.isoformat(), "next_week": next_week, "days": days}


@bp.get("/allocations/prep")
@require_login
def allocations_prep():
    as_of, next_week = _board_params()
    days = prep_board(_load_inputs(as_of, next_week), as_of, next_week=next_week)
    return {"as_of": as_of.isoformat(), "next_week": next_week, "days": days}
