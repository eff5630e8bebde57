from pydantic import BaseModel, model_validator
from typing import Any, List, Optional, Union
from enum import Enum, IntEnum

# ==================== ENUMS ====================

class CourseStatus(str, Enum):
    FUTURE = "future"
    CURRENT = "current"
    PAST = "past"

class Period(str, Enum):
    CURRENT = "current"
    PAST = "past"
    FUTURE = "future"
    LAST30 = "last30"
    LAST90 = "last90"
    THISYEAR = "thisyear"

class CompletionMode(IntEnum):
    NONE = 0
    MANUAL = 1
    AUTOMATIC = 2

class CompletionState(IntEnum):
    INCOMPLETE = 0
    COMPLETE = 1
    COMPLETE_PASS = 2
    COMPLETE_FAIL = 3

# ==================== ACTIVITY MODELS ====================

class Activity(BaseModel):
    """Course module snapshot, as read from course_modules"""
    id: int
    completion: CompletionMode = CompletionMode.NONE
    visible: bool = True
    deleted: bool = False
    availability: Optional[Any] = None  # raw restriction tree, checked by parse_availability

    @property
    def is_tracked(self) -> bool:
        return self.completion != CompletionMode.NONE and self.visible and not self.deleted

class CompletionRecord(BaseModel):
    activity_id: int
    user_id: int
    state: CompletionState = CompletionState.INCOMPLETE

    @property
    def is_done(self) -> bool:
        return self.state in (CompletionState.COMPLETE, CompletionState.COMPLETE_PASS)

# ==================== PROGRESS MODELS ====================

class ProgressResult(BaseModel):
    total: int = 0
    completed: int = 0
    percentage: int = 0
    has_completion: bool = False

    @model_validator(mode="after")
    def check_consistency(self):
        if self.total < 0 or not 0 <= self.completed <= self.total:
            raise ValueError("completed must be between 0 and total")
        if self.has_completion != (self.total > 0):
            raise ValueError("has_completion must reflect total > 0")
        if self.percentage != percentage_of(self.completed, self.total):
            raise ValueError("percentage does not match completed/total")
        return self


def percentage_of(completed: int, total: int) -> int:
    """Whole percentage of completed over total, halves rounded up"""
    if total <= 0:
        return 0
    return (completed * 200 + total) // (2 * total)

# ==================== COURSE RESPONSE MODELS ====================

class CourseRecord(BaseModel):
    """Course where the user teaches"""
    id: int
    fullname: str
    shortname: str
    startdate: str
    enddate: str
    status: CourseStatus
    participants: int
    url: str
    visible: bool

class ProgressCourseRecord(BaseModel):
    """Course the user holds any role in, with completion progress"""
    id: int
    fullname: str
    shortname: str
    startdate: str
    enddate: str
    status: CourseStatus
    roles: List[str] = []
    url: str
    visible: bool
    enablecompletion: bool
    progress: ProgressResult

class CourseListResponse(BaseModel):
    success: bool = True
    courses: List[Union[CourseRecord, ProgressCourseRecord]] = []
    count: int = 0
    userid: int
