# backend/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db

# Import routerów
from routes.auth import router as auth_router
from routes.residents import router as residents_router
from routes.analytics import router as analytics_router
from routes.admin import router as admin_router
from routes.logs import router as logs_router
from utils.errors import DirectoryError, ValidationError, UnauthenticatedError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Inicjalizacja
init_db()

app = FastAPI(title="Village Directory API", version="1.0.0")

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error mapping: every directory error kind gets its own status code
@app.exception_handler(DirectoryError)
def directory_error_handler(request: Request, exc: DirectoryError):
    body = {"message": exc.message}
    headers = None
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    return directory_error_handler(request, ValidationError.from_pydantic(exc))


@app.exception_handler(SQLAlchemyError)
def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Database error"})


# Rejestracja routerów
app.include_router(auth_router)
app.include_router(residents_router)
app.include_router(analytics_router)
app.include_router(admin_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Village Directory API is running"}
