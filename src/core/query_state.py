"""
Shareable calendar/timeline view state carried in URL query parameters.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping

from core.config import DEFAULT_VIEW, VIEW_MODES


@dataclass(frozen=True)
class ViewState:
    view: str
    anchor: date
    project_id: str | None = None
    lane: str | None = None


def parse_view_state(params: Mapping[str, str], today: date | None = None) -> ViewState:
    """
    Read view, date, projectId and lane from query parameters.

    Unknown views fall back to the default view and unparseable dates to today.
    """
    today = today or date.today()

    view = (params.get("view") or "").lower()
    if view not in VIEW_MODES:
        view = DEFAULT_VIEW

    anchor = today
    raw_date = params.get("date")
    if raw_date:
        try:
            anchor = datetime.strptime(raw_date, "%Y-%m-%d").date()
        except ValueError:
            anchor = today

    return ViewState(
        view=view,
        anchor=anchor,
        project_id=params.get("projectId") or None,
        lane=params.get("lane") or None,
    )


def to_query_params(state: ViewState, today: date | None = None) -> dict[str, str]:
    """Serialise state back to query parameters, omitting defaults."""
    today = today or date.today()
    params = {}
    if state.view != DEFAULT_VIEW:
        params["view"] = state.view
    if state.anchor != today:
        params["date"] = state.anchor.isoformat()
    if state.project_id:
        params["projectId"] = state.project_id
    if state.lane:
        params["lane"] = state.lane
    return params
