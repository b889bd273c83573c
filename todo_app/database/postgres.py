"""
Networked PostgreSQL store.

Connections go through SQLAlchemy's async engine on the ``asyncpg`` driver.
Because the database server often starts slower than the application, ``init``
first waits for the server port to accept TCP connections.
"""

from __future__ import annotations

import asyncio

from structlog import get_logger

from todo_app.config import PostgresConfig, get_settings
from todo_app.database.base import StoreConnectionError
from todo_app.database.engine import SqlAlchemyStore
from todo_app.database.models import TodoItemModel

logger = get_logger()

POLL_INTERVAL = 0.5


async def wait_for_port(
    host: str,
    port: int,
    timeout: float = 30.0,
    interval: float = POLL_INTERVAL,
) -> bool:
    """
    Poll ``host:port`` until it accepts a TCP connection.

    Returns True as soon as a connection succeeds and False once *timeout*
    seconds have elapsed. Refused connections and DNS failures are retried
    alike.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    while True:
        remaining = deadline - loop.time()
        if remaining <= 0:
            return False
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=remaining
            )
        except (OSError, asyncio.TimeoutError):
            remaining = deadline - loop.time()
            if remaining <= 0:
                return False
            await asyncio.sleep(min(interval, remaining))
            continue

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True


class PostgresStore(SqlAlchemyStore):
    """Store backed by a remote PostgreSQL server."""

    backend = "postgres"
    model = TodoItemModel

    def __init__(self, config: PostgresConfig | None = None) -> None:
        super().__init__()
        self.config = config if config is not None else get_settings().postgres

    async def init(self) -> None:
        """Wait for the server, connect and ensure the table exists."""
        credentials = self.config.resolve()
        host, port = credentials.host, credentials.port

        logger.info("Waiting for PostgreSQL", host=host, port=port)
        port_open = await wait_for_port(host, port, timeout=self.config.wait_timeout)
        if not port_open:
            raise StoreConnectionError(
                f"Unable to connect to PostgreSQL at {host}:{port}. "
                "Make sure the database is running."
            )
        logger.info("PostgreSQL is ready, connecting...")

        try:
            await self._open(
                credentials.url(),
                pool_size=self.config.pool_size,
                max_overflow=0,
                echo=self.config.echo,
            )
        except Exception as exc:
            logger.error("Unable to connect to the database", host=host, error=str(exc))
            raise

        logger.info(
            "Connected to db and created table todo_items if it did not exist",
            host=host,
            database=credentials.database,
        )
