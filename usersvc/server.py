"""
API Server

Owns the listen options and runs the application under uvicorn. Stopping is
cooperative: the listener closes and in-flight requests are allowed to finish.
"""
import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional

import uvicorn
from dotenv import load_dotenv

from usersvc.app import create_app
from usersvc.modules.database import DatabaseOptions
from usersvc.modules.users.repositories import UserRepository

load_dotenv()

logger = logging.getLogger("usersvc.server")


@dataclass
class ServerOptions:
    hostname: str = "localhost"
    port: int = 8080

    @classmethod
    def from_env(cls) -> "ServerOptions":
        return cls(
            hostname=os.getenv("API_HOST", cls.hostname),
            port=int(os.getenv("API_PORT", cls.port)),
        )


def configure_logging():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


class APIServer:

    def __init__(
        self,
        options: Optional[ServerOptions] = None,
        database_options: Optional[DatabaseOptions] = None,
        repository: Optional[UserRepository] = None,
    ):
        options = options or ServerOptions()
        self.hostname = options.hostname
        self.port = options.port
        self.is_running = False
        self.repository = repository or UserRepository()
        self.app = create_app(self.repository, database_options or DatabaseOptions())
        self._server: Optional[uvicorn.Server] = None

    def _build_server(self) -> uvicorn.Server:
        config = uvicorn.Config(
            self.app,
            host=self.hostname,
            port=self.port,
            access_log=False,
            log_level="warning",
        )
        return uvicorn.Server(config)

    async def start_server(self):
        if self.is_running:
            self.stop_server()

        self.is_running = True
        server = self._server = self._build_server()
        logger.info(f"Running server at {self.hostname}:{self.port}")
        try:
            await server.serve()
        finally:
            logger.info("Server stopped")
            # A restart may already have replaced this server.
            if self._server is server:
                self.is_running = False

    def stop_server(self):
        logger.info("Server will stop once in-flight requests complete...")
        if self._server is not None:
            self._server.should_exit = True

    def run(self):
        asyncio.run(self.start_server())


if __name__ == "__main__":
    configure_logging()
    APIServer(ServerOptions.from_env(), DatabaseOptions.from_env()).run()
