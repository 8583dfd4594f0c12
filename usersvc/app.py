from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from usersvc.modules.database import DatabaseOptions
from usersvc.modules.request_logger import RequestLoggerMiddleware, configure_access_logging
from usersvc.modules.users.api import user_router
from usersvc.modules.users.repositories import UserRepository


def create_app(
    repository: Optional[UserRepository] = None,
    database_options: Optional[DatabaseOptions] = None,
) -> FastAPI:
    repository = repository or UserRepository()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        if not repository.is_connected:
            await repository.connect_with_options(database_options or DatabaseOptions.from_env())
        yield
        # Shutdown
        await repository.disconnect()

    app = FastAPI(title="usersvc", version="0.1.0", lifespan=lifespan)
    app.state.user_repository = repository

    configure_access_logging()
    app.add_middleware(RequestLoggerMiddleware)

    app.include_router(user_router)

    @app.get("/")
    async def root():
        return {"status": "online", "system": "usersvc"}

    return app


app = create_app()
