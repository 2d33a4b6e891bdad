import logging
from typing import Annotated
from fastapi import APIRouter, Depends, FastAPI, Path, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.orm import Session

from taskmanager.auth import AuthService, get_auth_service, get_current_user
from taskmanager.config import Settings, get_settings
from taskmanager.database import Base, get_db, make_engine, make_sessionmaker
from taskmanager.errors import AppError, InternalError, NotFoundError
from taskmanager.models import User
from taskmanager.schemas import (
    AuthResponse,
    MessageResponse,
    SigninRequest,
    SignupRequest,
    TaskCreate,
    TaskOut,
    TaskUpdate,
    UserOut,
)
from taskmanager.security import TokenCodec
from taskmanager.tasks import TaskService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# largest value a 64-bit INTEGER column can hold
MAX_TASK_ID = 2**63 - 1


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)


# -------------------------
# AUTH
# -------------------------
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(body: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    token, user = auth.signup(body.email, body.full_name, body.password)
    return AuthResponse(
        message="User created successfully",
        token=token,
        user=UserOut.model_validate(user),
    )


@auth_router.post("/signin", response_model=AuthResponse)
def signin(body: SigninRequest, auth: AuthService = Depends(get_auth_service)):
    token, user = auth.login(body.email, body.password)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserOut.model_validate(user),
    )


# -------------------------
# TASKS
# -------------------------
tasks_router = APIRouter(prefix="/tasks", tags=["tasks"])


@tasks_router.get("", response_model=list[TaskOut])
def list_tasks(
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    return service.list(user.id)


@tasks_router.post("", response_model=TaskOut, status_code=201)
def create_task(
    body: TaskCreate,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    return service.create(user.id, body)


@tasks_router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: Annotated[int, Path(ge=1, le=MAX_TASK_ID)],
    body: TaskUpdate,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    return service.update(user.id, task_id, body)


@tasks_router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: Annotated[int, Path(ge=1, le=MAX_TASK_ID)],
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    service.delete(user.id, task_id)
    return {"message": "Task deleted successfully"}


# -------------------------
# ERROR HANDLERS
# -------------------------
async def handle_app_error(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    # a task id that isn't a storable integer can't name an owned task
    if any(err.get("loc", ())[:1] == ("path",) for err in exc.errors()):
        error = NotFoundError()
        return JSONResponse(status_code=error.status_code, content={"message": error.message})
    return JSONResponse(status_code=400, content={"message": "Invalid request body"})


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    # unknown routes, wrong methods and other framework errors
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=exc.headers,
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content={"message": error.message})


# -------------------------
# APP
# -------------------------
def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(format=LOG_FORMAT, level=settings.log_level)

    engine = make_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    app = FastAPI(title="Task Manager API")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_sessionmaker(engine)
    app.state.tokens = TokenCodec(settings.secret_key, settings.token_expires_in)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(auth_router, prefix="/api")
    app.include_router(tasks_router, prefix="/api")

    @app.get("/")
    def root():
        return {
            "message": "Backend server is running!",
            "documentation": app.docs_url,
        }

    @app.get("/api/hello")
    def hello():
        logger.info("API /hello endpoint hit")
        return {"message": "Hello from backend!"}

    logger.info(f"Task Manager API ready ({settings.env}, database {engine.url.render_as_string(hide_password=True)})")
    return app
