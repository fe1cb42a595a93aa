# doctor_directory/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .database import APPOINTMENTS_COLL, DOCTORS_COLL, db
from .errors import AppError, UnexpectedError
from .routes import appointments, doctors

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def init_database():
    """Indexes plus a doctor count in the log; no seeding, doctors come from the admin."""
    try:
        await db[DOCTORS_COLL].create_index("credentials.username", unique=True)
        await db[APPOINTMENTS_COLL].create_index([("doctorId", 1), ("date", 1)])
        count = await db[DOCTORS_COLL].count_documents({})
        logger.info("Connected to MongoDB at %s, %d doctor(s) on file", settings.MONGO_URI, count)
    except PyMongoError as e:
        logger.error("MongoDB initialisation failed (%s); check MONGO_URI", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_database()
    yield


app = FastAPI(title="Doctor Directory", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{loc}: {first.get('msg')}" if loc else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return await app_error_handler(request, UnexpectedError("Internal server error"))


@app.get("/")
async def root():
    return {"message": "Doctor Directory API is running"}


# Routers with prefixes + tags for Swagger
app.include_router(doctors.router, prefix="/api/doctors", tags=["Doctors"])
app.include_router(appointments.router, prefix="/api/appointments", tags=["Appointments"])
