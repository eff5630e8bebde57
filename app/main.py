import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

from app.courses.app import setup_course_routes, startup_course_system
from app.courses.config import LOG_LEVEL, MONGO_DB_NAME, MONGO_URL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Course Progress API")

# MongoDB Configuration
client = AsyncIOMotorClient(MONGO_URL)
db = client[MONGO_DB_NAME]


@app.on_event("startup")
async def startup_event():
    await startup_course_system(db)


@app.on_event("shutdown")
async def shutdown_event():
    client.close()


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"]
)

# ==================== ROUTER REGISTRATION ====================
setup_course_routes(app)
# ============================================================
