"""
Course listing for the current user

Two views:
- courses where the user is an editing teacher, with participant counts
- courses where the user holds any role, with completion progress
"""

import logging
import time
from datetime import datetime
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.courses import database as repo
from app.courses.config import (
    DATE_FORMAT, SITE_URL, STUDENT_ROLE_SHORTNAME, TEACHER_ROLE_SHORTNAME, UNDEFINED_DATE_LABEL
)
from app.courses.filters import build_course_query, course_status
from app.courses.models import CourseRecord, ProgressCourseRecord
from app.courses.progress import course_progress

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """A required site definition (e.g. a role) is missing"""


def format_date(timestamp: int) -> str:
    if not timestamp or timestamp <= 0:
        return UNDEFINED_DATE_LABEL
    return datetime.fromtimestamp(timestamp).strftime(DATE_FORMAT)


def course_url(course_id: int) -> str:
    return f"{SITE_URL}/course/view.php?id={course_id}"


class CourseService:
    """
    Per-request course queries

    `now` is fixed when the service is built so every course in one
    response is classified against the same instant.
    """

    def __init__(self, db: AsyncIOMotorDatabase, now: Optional[int] = None):
        self.db = db
        self.now = int(time.time()) if now is None else now

    def _base_fields(self, course: dict) -> dict:
        startdate = course.get("startdate", 0) or 0
        enddate = course.get("enddate", 0) or 0
        return {
            "id": course["id"],
            "fullname": course.get("fullname", ""),
            "shortname": course.get("shortname", ""),
            "startdate": format_date(startdate),
            "enddate": format_date(enddate),
            "status": course_status(startdate, enddate, self.now),
            "url": course_url(course["id"]),
            "visible": bool(course.get("visible", 1))
        }

    async def _find_courses(self, course_ids, search: Optional[str], period: Optional[str]) -> List[dict]:
        if not course_ids:
            return []
        query = build_course_query(course_ids, search=search, period=period, now=self.now)
        return await repo.find_courses(self.db, query)

    # ==================== TEACHING COURSES ====================

    async def get_teaching_courses(
        self,
        user_id: int,
        search: Optional[str] = None,
        period: Optional[str] = None
    ) -> List[CourseRecord]:
        """Courses where the user is an editing teacher"""
        teacher_role = await repo.get_role_by_shortname(self.db, TEACHER_ROLE_SHORTNAME)
        if not teacher_role:
            raise ConfigurationError(f'Role "{TEACHER_ROLE_SHORTNAME}" not found')

        assignments = await repo.get_user_role_assignments(self.db, user_id, teacher_role["id"])
        courses = await self._find_courses({ra["courseid"] for ra in assignments}, search, period)

        student_role = await repo.get_role_by_shortname(self.db, STUDENT_ROLE_SHORTNAME)

        records = []
        for course in courses:
            participants = 0
            if student_role:
                participants = await repo.count_role_assignments(self.db, course["id"], student_role["id"])
            records.append(CourseRecord(participants=participants, **self._base_fields(course)))

        logger.info("User %s teaches %d course(s)", user_id, len(records))
        return records

    # ==================== COURSES WITH PROGRESS ====================

    async def get_courses_with_progress(
        self,
        user_id: int,
        search: Optional[str] = None,
        period: Optional[str] = None
    ) -> List[ProgressCourseRecord]:
        """Courses where the user holds any role, with completion progress"""
        assignments = await repo.get_user_role_assignments(self.db, user_id)

        role_ids_by_course: Dict[int, List[int]] = {}
        for ra in assignments:
            role_ids = role_ids_by_course.setdefault(ra["courseid"], [])
            if ra["roleid"] not in role_ids:
                role_ids.append(ra["roleid"])

        shortnames = await repo.get_role_shortnames(
            self.db, sorted({ra["roleid"] for ra in assignments})
        )
        courses = await self._find_courses(role_ids_by_course.keys(), search, period)

        records = []
        for course in courses:
            course_id = course["id"]
            roles = [shortnames[rid] for rid in role_ids_by_course[course_id] if rid in shortnames]

            user_groups = await repo.get_user_group_ids(self.db, course_id, user_id)
            activities = await repo.get_course_activities(self.db, course_id)
            completions = await repo.get_user_completions(
                self.db, user_id, [a.id for a in activities if a.is_tracked]
            )

            records.append(ProgressCourseRecord(
                roles=roles,
                enablecompletion=bool(course.get("enablecompletion", 0)),
                progress=course_progress(activities, user_groups, completions),
                **self._base_fields(course)
            ))

        logger.info("User %s has %d course(s) with progress", user_id, len(records))
        return records
