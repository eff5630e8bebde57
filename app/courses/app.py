"""
Course listing system - router and startup wiring
"""

import logging
from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.courses.course_router import router as course_router
from app.courses.database import create_course_indexes

logger = logging.getLogger(__name__)

# ==================== ROUTER SETUP ====================

def setup_course_routes(app: FastAPI):
    """Register all course-related routers"""
    app.include_router(course_router, prefix="/courses")
    logger.info("Course routes registered")

# ==================== STARTUP ====================

async def startup_course_system(db: AsyncIOMotorDatabase):
    """Initialize course system on app startup"""
    await create_course_indexes(db)
    logger.info("Course system initialized")
