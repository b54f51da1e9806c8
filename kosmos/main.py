from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kosmos.config import settings
from kosmos.logging import clear_request_context, configure_logging, get_logger
from kosmos.rbac.errors import ConfigurationError, InvariantViolation, PermissionDenied, RoleHierarchyViolation
from kosmos.routes.health import router as health_router
from kosmos.routes.members import router as members_router
from kosmos.routes.permissions import router as permissions_router
from kosmos.routes.projects import router as projects_router
from kosmos.routes.tasks import router as tasks_router
from kosmos.routes.users import router as users_router
from kosmos.services.errors import AlreadyMember, NotFound

logger = get_logger(__name__)

def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PermissionDenied)
    async def _permission_denied(request: Request, exc: PermissionDenied) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.reason})

    @app.exception_handler(RoleHierarchyViolation)
    async def _role_hierarchy(request: Request, exc: RoleHierarchyViolation) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.reason})

    @app.exception_handler(InvariantViolation)
    async def _invariant(request: Request, exc: InvariantViolation) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.reason})

    @app.exception_handler(AlreadyMember)
    async def _already_member(request: Request, exc: AlreadyMember) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(NotFound)
    async def _not_found(request: Request, exc: NotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ConfigurationError)
    async def _configuration(request: Request, exc: ConfigurationError) -> JSONResponse:
        # unknown role or permission identifier reached the evaluator
        logger.error("rbac configuration error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"detail": "rbac configuration error"})

def create_app() -> FastAPI:
    configure_logging(settings)

    app = FastAPI(title="kosmos", version="0.1.0")

    @app.middleware("http")
    async def _logging_context(request: Request, call_next):
        clear_request_context()
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    _register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(permissions_router)
    app.include_router(projects_router)
    app.include_router(members_router)
    app.include_router(tasks_router)
    return app

app = create_app()
