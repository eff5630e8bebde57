from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Dict, List, Optional, Set
import logging
from app.courses.models import Activity, CompletionMode, CompletionRecord, CompletionState

logger = logging.getLogger(__name__)

# ==================== ROLES ====================

async def get_role_by_shortname(db: AsyncIOMotorDatabase, shortname: str) -> Optional[dict]:
    """Get role definition by shortname"""
    return await db.roles.find_one({"shortname": shortname})

async def get_role_shortnames(db: AsyncIOMotorDatabase, role_ids: List[int]) -> Dict[int, str]:
    """Map role id -> shortname"""
    if not role_ids:
        return {}
    cursor = db.roles.find({"id": {"$in": list(role_ids)}})
    return {role["id"]: role["shortname"] for role in await cursor.to_list(length=None)}

# ==================== ROLE ASSIGNMENTS ====================

async def get_user_role_assignments(
    db: AsyncIOMotorDatabase,
    user_id: int,
    role_id: Optional[int] = None
) -> List[dict]:
    """Get the user's course role assignments, optionally for one role"""
    query = {"userid": user_id}
    if role_id is not None:
        query["roleid"] = role_id
    cursor = db.role_assignments.find(query)
    return await cursor.to_list(length=None)

async def count_role_assignments(db: AsyncIOMotorDatabase, course_id: int, role_id: int) -> int:
    """Number of users holding a role in a course"""
    return await db.role_assignments.count_documents({
        "courseid": course_id,
        "roleid": role_id
    })

# ==================== COURSES ====================

async def find_courses(db: AsyncIOMotorDatabase, query: dict) -> List[dict]:
    """Courses matching a filter, most recent start first"""
    cursor = db.courses.find(query).sort("startdate", -1)
    return await cursor.to_list(length=None)

# ==================== GROUPS ====================

async def get_user_group_ids(db: AsyncIOMotorDatabase, course_id: int, user_id: int) -> Set[int]:
    """Ids of the course groups the user is a member of"""
    cursor = db.groups.find({"courseid": course_id})
    course_group_ids = [group["id"] for group in await cursor.to_list(length=None)]
    if not course_group_ids:
        return set()

    cursor = db.groups_members.find({
        "userid": user_id,
        "groupid": {"$in": course_group_ids}
    })
    return {member["groupid"] for member in await cursor.to_list(length=None)}

# ==================== ACTIVITIES & COMPLETION ====================

def activity_from_doc(doc: dict) -> Activity:
    """Build an Activity from a course_modules document"""
    return Activity(
        id=doc["id"],
        completion=CompletionMode(doc.get("completion", 0)),
        visible=bool(doc.get("visible", 1)),
        deleted=bool(doc.get("deletioninprogress", 0)),
        availability=doc.get("availability")
    )

async def get_course_activities(db: AsyncIOMotorDatabase, course_id: int) -> List[Activity]:
    """
    Completion-tracked modules of a course

    `visible` and `deletioninprogress` are stored as 0/1 or booleans, so they
    are left to Activity.is_tracked rather than matched here.
    """
    cursor = db.course_modules.find({
        "course": course_id,
        "completion": {"$gt": CompletionMode.NONE.value}
    })
    return [activity_from_doc(doc) for doc in await cursor.to_list(length=None)]

async def get_user_completions(
    db: AsyncIOMotorDatabase,
    user_id: int,
    activity_ids: List[int]
) -> Dict[int, CompletionRecord]:
    """Map activity id -> the user's completion record"""
    if not activity_ids:
        return {}
    cursor = db.course_modules_completion.find({
        "userid": user_id,
        "coursemoduleid": {"$in": list(activity_ids)}
    })
    completions = {}
    for doc in await cursor.to_list(length=None):
        completions[doc["coursemoduleid"]] = CompletionRecord(
            activity_id=doc["coursemoduleid"],
            user_id=doc["userid"],
            state=CompletionState(doc.get("completionstate", 0))
        )
    return completions

# ==================== INDEXES ====================

async def create_course_indexes(db: AsyncIOMotorDatabase):
    """Create MongoDB indexes for the read paths above"""
    await db.courses.create_index("id", unique=True)
    await db.courses.create_index("startdate")

    await db.roles.create_index("id", unique=True)
    await db.roles.create_index("shortname", unique=True)

    await db.role_assignments.create_index([("userid", 1), ("roleid", 1)])
    await db.role_assignments.create_index([("courseid", 1), ("roleid", 1)])

    await db.groups.create_index("courseid")
    await db.groups_members.create_index([("userid", 1), ("groupid", 1)])

    await db.course_modules.create_index([("course", 1), ("completion", 1)])
    await db.course_modules_completion.create_index([("userid", 1), ("coursemoduleid", 1)], unique=True)

    logger.info("Course indexes created")
