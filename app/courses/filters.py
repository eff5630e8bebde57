"""
Course search / period filters and status classification
"""

import re
from datetime import datetime
from typing import Iterable, Optional

from app.courses.config import SITE_COURSE_ID, EXCLUDED_COURSE_KEYWORD
from app.courses.models import CourseStatus, Period

DAY_SECONDS = 24 * 60 * 60


def course_status(startdate: int, enddate: int, now: int) -> CourseStatus:
    """future / current / past from course dates (epoch seconds, 0 = unset)"""
    if startdate > now:
        return CourseStatus.FUTURE
    if enddate == 0 or enddate >= now:
        return CourseStatus.CURRENT
    return CourseStatus.PAST


def year_start(now: int) -> int:
    """Local midnight on January 1st of the year containing `now`"""
    year = datetime.fromtimestamp(now).year
    return int(datetime(year, 1, 1).timestamp())


def period_clause(period: Optional[str], now: int) -> Optional[dict]:
    """Mongo clause for a period bucket, None when no bucket applies"""
    try:
        period = Period(period)
    except ValueError:
        return None

    if period == Period.CURRENT:
        return {
            "startdate": {"$lte": now},
            "$or": [{"enddate": 0}, {"enddate": {"$gte": now}}]
        }
    if period == Period.PAST:
        return {"enddate": {"$gt": 0, "$lt": now}}
    if period == Period.FUTURE:
        return {"startdate": {"$gt": now}}
    if period == Period.LAST30:
        return {"startdate": {"$gte": now - 30 * DAY_SECONDS}}
    if period == Period.LAST90:
        return {"startdate": {"$gte": now - 90 * DAY_SECONDS}}
    return {"startdate": {"$gte": year_start(now)}}


def search_clause(search: Optional[str]) -> Optional[dict]:
    """Case-insensitive substring match on full or short name, term used as given"""
    if not search:
        return None
    pattern = {"$regex": re.escape(search), "$options": "i"}
    return {"$or": [{"fullname": pattern}, {"shortname": pattern}]}


def build_course_query(
    course_ids: Iterable[int],
    search: Optional[str] = None,
    period: Optional[str] = None,
    now: int = 0
) -> dict:
    """
    Build the courses filter for a set of candidate course ids

    The site front page and courses named like EXCLUDED_COURSE_KEYWORD
    are never returned.
    """
    clauses = [{"id": {"$in": sorted(set(course_ids)), "$ne": SITE_COURSE_ID}}]

    if EXCLUDED_COURSE_KEYWORD:
        clauses.append({"$nor": [{"fullname": {"$regex": re.escape(EXCLUDED_COURSE_KEYWORD), "$options": "i"}}]})

    for clause in (search_clause(search), period_clause(period, now)):
        if clause:
            clauses.append(clause)

    return {"$and": clauses}
