# app/main.py
from contextlib import asynccontextmanager
import logging
import sys
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.database.mongo_assignment import MongoAssignmentRepository
from app.database.mongo_submission import MongoSubmissionRepository
from app.database.mongo_user import MongoUserRepository
from app.routers.v1 import assignment
from app.routers.v1 import auth
from app.routers.v1 import health

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger("classroom")


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def storage_error_handler(request: Request, exc: PyMongoError):
    # nessun dettaglio al client su quale passo del batch e' fallito
    logger.exception("Errore storage su %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal error"},
    )


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = AsyncIOMotorClient(settings.mongo_uri, uuidRepresentation="standard")
        db = client[settings.mongo_db_name]

        assignments = MongoAssignmentRepository(db)
        submissions = MongoSubmissionRepository(db)
        users = MongoUserRepository(db)
        await assignments.ensure_indexes()
        await submissions.ensure_indexes()
        await users.ensure_indexes()

        app.state.assignment_repo = assignments
        app.state.submission_repo = submissions
        app.state.user_repo = users
        logger.info("Connesso a MongoDB, database %s", settings.mongo_db_name)

        try:
            yield
        finally:
            client.close()

    app = FastAPI(
        title="Classroom Assignment Service",
        description="Assignment dei tutor e submission degli studenti",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins.split(","), allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(PyMongoError, storage_error_handler)

    app.include_router(health.router,     prefix="/api/v1", tags=["health"])
    app.include_router(auth.router,       prefix="/api/v1", tags=["auth"])
    app.include_router(assignment.router, prefix="/api/v1", tags=["assignments"])
    return app

app = create_app()
