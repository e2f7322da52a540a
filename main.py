import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, responses
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from fastapi import exceptions as exc
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, DBAPIError
from api.v1.router import auth, user, courses, enrolment, grades
from core.setup import Base, database
from controller.users import UserOp
import handler as hlp
from config.setting import settings
from error import ServerError, DatabaseConnectionError

# Register every table on the metadata before create_all
from model.users import User  # noqa: F401
from model.courses import Course, CoursePrerequisite  # noqa: F401
from model.enrolment import Enrolment  # noqa: F401
from model.grades import Grade  # noqa: F401

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("coursehub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables and indexes
    Base.metadata.create_all(bind=database.get_engine)
    UserOp.ensure_admin(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    logger.info("Startup complete.")
    yield


app = FastAPI(
    title="CourseHub API",
    version="1.0.0",
    description="Course enrolment management for students, teachers and administrators",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add GZip compression for better performance
app.add_middleware(GZipMiddleware, minimum_size=1000)


app.add_exception_handler(ValueError, hlp.value_error_handler)
app.add_exception_handler(ValidationError, hlp.validation_error_handler)
app.add_exception_handler(RequestValidationError, hlp.validation_error_handler)
app.add_exception_handler(exc.HTTPException, hlp.validation_http_exceptions_handler)
app.add_exception_handler(IntegrityError, hlp.db_error_handler)
app.add_exception_handler(DBAPIError, hlp.db_error_handler)
app.add_exception_handler(ServerError, hlp.server_error_handler)


app.include_router(auth, prefix=settings.API_PREFIX)
app.include_router(user, prefix=settings.API_PREFIX)
app.include_router(courses, prefix=settings.API_PREFIX)
app.include_router(enrolment, prefix=settings.API_PREFIX)
app.include_router(grades, prefix=settings.API_PREFIX)


@app.get("/", include_in_schema=False)
def redirect_to_docs():
    return responses.RedirectResponse("/docs")


@app.get("/health")
def health():
    try:
        with database.get_engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except DBAPIError as e:
        logger.error(f"Health check failed: {e}")
        raise DatabaseConnectionError(msg="Database unreachable")
    return {"status": "ok"}
