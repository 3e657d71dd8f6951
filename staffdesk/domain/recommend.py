"""
Staff recommendation by availability coverage.

A candidate's coverage is how many of the target dates appear in their
availability records. Records logged against the requested show earn a small
bonus; when a show constraint leaves nobody covered, the pass is repeated on
date overlap alone so duplicate show records do not hide available people.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date as calendar_date, timedelta

from ..constants import COLLECTION_AVAILABILITY, COLLECTION_SHOWS, COLLECTION_STAFF
from ..exceptions import NotFoundError, ValidationFailedError
from ..sanitize import iso_day
from ..shapes import availability_dates, show_span, staff_display_name, staff_skills
from ..store import DocumentStore
from .resolve import resolve_by_name

logger = logging.getLogger(__name__)

# Upper bound on the number of days a single request may target
MAX_TARGET_DAYS = 366


@dataclass
class Candidate:
    staff_id: str | None
    name: str
    role: str = ""
    skills: list[str] = field(default_factory=list)
    matched_dates: set[str] = field(default_factory=set)
    show_match: bool = False
    score: float = 0.0

    @property
    def coverage(self) -> int:
        return len(self.matched_dates)

    def to_dict(self) -> dict:
        return {
            "staffId": self.staff_id,
            "name": self.name,
            "role": self.role,
            "skills": list(self.skills),
            "coverage": self.coverage,
            "matchedDates": sorted(self.matched_dates),
            "showMatch": self.show_match,
            "score": self.score,
        }


def expand_date_range(start: str, end: str | None = None) -> list[str]:
    """Inclusive list of ISO days between *start* and *end*."""
    try:
        first = calendar_date.fromisoformat(start[:10])
        last = calendar_date.fromisoformat((end or start)[:10])
    except (TypeError, ValueError) as e:
        raise ValidationFailedError(f"Invalid date range: {start} to {end}") from e
    if last < first:
        raise ValidationFailedError(f"End date {last.isoformat()} is before start date {first.isoformat()}")
    span = (last - first).days + 1
    if span > MAX_TARGET_DAYS:
        raise ValidationFailedError(f"Date range too long ({span} days, max {MAX_TARGET_DAYS})")
    return [(first + timedelta(days=i)).isoformat() for i in range(span)]


async def _resolve_show(store: DocumentStore, show_id: str | None, show_name: str | None) -> dict | None:
    if show_id:
        show = await store.get_by_id(COLLECTION_SHOWS, show_id)
        if show:
            return show
    if show_name:
        return await resolve_by_name(store, COLLECTION_SHOWS, show_name)
    return None


def _target_dates(
    show: dict | None,
    day: str | None,
    dates: list[str] | None,
    start_date: str | None,
    end_date: str | None,
) -> list[str]:
    if day:
        return [iso_day(day) or day]
    if dates:
        return sorted({iso_day(d) or d for d in dates if d})
    if start_date:
        return expand_date_range(start_date, end_date)
    if show:
        start, end = show_span(show)
        if start:
            return expand_date_range(start, end)
    return []


def _collect(
    availability: list[dict],
    staff_by_id: dict[str, dict],
    staff_by_name: dict[str, dict],
    targets: set[str],
    show: dict | None,
    constrain_to_show: bool,
) -> dict[str, Candidate]:
    show_id = str(show["id"]) if show else None
    show_name = str(show.get("name") or "").lower() if show else ""
    candidates: dict[str, Candidate] = {}

    for record in availability:
        record_show_id = str(record.get("showId") or "")
        id_match = bool(show_id) and record_show_id == show_id
        if constrain_to_show and show_id and not id_match:
            # Legacy records may carry only the show name
            name_match = (
                not record_show_id
                and bool(show_name)
                and str(record.get("showName") or "").lower() == show_name
            )
            if not name_match:
                continue

        covered = targets.intersection(availability_dates(record))
        if not covered:
            continue

        staff = staff_by_id.get(str(record.get("staffId") or ""))
        if staff is None and record.get("staffName"):
            staff = staff_by_name.get(str(record["staffName"]).strip().lower())
        if staff is not None:
            key = str(staff["id"])
            candidate = candidates.get(key) or Candidate(
                staff_id=key,
                name=staff_display_name(staff) or str(record.get("staffName") or ""),
                role=str(staff.get("role") or ""),
                skills=staff_skills(staff),
            )
        elif record.get("staffName"):
            key = "name:" + str(record["staffName"]).strip().lower()
            candidate = candidates.get(key) or Candidate(staff_id=None, name=str(record["staffName"]).strip())
        else:
            continue

        candidate.matched_dates |= covered
        candidate.show_match = candidate.show_match or id_match
        candidates[key] = candidate

    return candidates


async def recommend_staff(
    store: DocumentStore,
    *,
    show_id: str | None = None,
    show_name: str | None = None,
    date: str | None = None,
    dates: list[str] | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    role: str | None = None,
    required_skills: list[str] | None = None,
    limit: int | None = None,
    show_bonus: float | None = None,
    role_bonus: float | None = None,
) -> dict:
    """
    Rank staff for a show and/or set of dates.

    Returns ``{show, dates, fallback, recommendations}`` where each
    recommendation carries its score breakdown inputs.
    """
    if show_bonus is None or role_bonus is None:
        from ..config import settings
        show_bonus = settings.recommend_show_bonus if show_bonus is None else show_bonus
        role_bonus = settings.recommend_role_bonus if role_bonus is None else role_bonus

    show = await _resolve_show(store, show_id, show_name)
    if show_id and show is None and not show_name and not (date or dates or start_date):
        raise NotFoundError("Show", show_id)

    targets = _target_dates(show, date, dates, start_date, end_date)
    if not targets:
        raise ValidationFailedError(
            "Provide a date, a date range, or a show with dates to recommend staff for."
        )

    availability, staff_docs = await asyncio.gather(
        store.get_all(COLLECTION_AVAILABILITY),
        store.get_all(COLLECTION_STAFF),
    )
    staff_by_id = {str(s["id"]): s for s in staff_docs}
    staff_by_name = {}
    for s in staff_docs:
        label = staff_display_name(s).lower()
        if label:
            staff_by_name.setdefault(label, s)

    target_set = set(targets)
    candidates = _collect(availability, staff_by_id, staff_by_name, target_set, show, True)
    fallback = False
    if not candidates and show is not None:
        logger.info(
            "No availability logged against show %s for %s; falling back to date overlap",
            show.get("id"), targets,
        )
        candidates = _collect(availability, staff_by_id, staff_by_name, target_set, show, False)
        fallback = True

    wanted_role = (role or "").strip().lower()
    wanted_skills = [s.strip().lower() for s in (required_skills or []) if s and s.strip()]
    for candidate in candidates.values():
        score = float(candidate.coverage)
        if candidate.show_match:
            score += show_bonus
        if wanted_role and candidate.role.strip().lower() == wanted_role:
            score += role_bonus
        have = {s.lower() for s in candidate.skills}
        score += sum(1 for s in wanted_skills if s in have)
        candidate.score = score

    ranked = sorted(candidates.values(), key=lambda c: (-c.score, c.name.lower()))
    if isinstance(limit, int) and not isinstance(limit, bool) and limit > 0:
        ranked = ranked[:limit]

    return {
        "show": show.get("name") if show else None,
        "dates": targets,
        "fallback": fallback,
        "recommendations": [c.to_dict() for c in ranked],
    }
