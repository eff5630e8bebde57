"""
COURSE LISTING ROUTER
File: app/courses/course_router.py

GET /courses/my-prestations  courses where the user is an editing teacher
GET /courses/my-courses      courses where the user holds any role, with progress

Both accept `search` and `period` and answer
{success, courses, count, userid}, or {success: false, error} with a 500.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from app.courses.course_service import CourseService
from app.courses.dependencies import get_db, get_current_user_id
from app.courses.models import CourseListResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Courses"])


def error_response(e: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": str(e)})


@router.get("/my-prestations", response_model=None)
async def get_my_prestations(
    search: Optional[str] = Query(None),
    period: Optional[str] = Query(None),
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """Courses where the current user is an editing teacher"""
    try:
        courses = await CourseService(db).get_teaching_courses(user_id, search=search, period=period)
        return CourseListResponse(courses=courses, count=len(courses), userid=user_id)
    except Exception as e:
        logger.exception("Failed to list teaching courses for user %s", user_id)
        return error_response(e)


@router.get("/my-courses", response_model=None)
async def get_my_courses(
    search: Optional[str] = Query(None),
    period: Optional[str] = Query(None),
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """Courses where the current user holds any role, with completion progress"""
    try:
        courses = await CourseService(db).get_courses_with_progress(user_id, search=search, period=period)
        return CourseListResponse(courses=courses, count=len(courses), userid=user_id)
    except Exception as e:
        logger.exception("Failed to list courses with progress for user %s", user_id)
        return error_response(e)
