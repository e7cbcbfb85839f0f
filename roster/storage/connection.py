"""
Database connection for the roster store.

One DatabaseConnectionPool is built per process (see roster.app.build_app) and
shared by the schema manager and the PostgreSQL repository. By default the
pool holds a single connection, so callers take turns on it. Every command
commits as soon as it has run; there are no multi-statement transactions.
"""
import time
from contextlib import contextmanager

from psycopg import OperationalError
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from roster.observability.logger import get_logger

logger = get_logger(__name__)


class DatabaseConnectionPool:
    """
    psycopg3 connection pool for the students database.

    Rows come back as dicts keyed by column name.
    """

    def __init__(
        self,
        password: str | None,
        host: str = "localhost",
        port: int = 5432,
        database: str = "roster",
        user: str = "roster",
        size: int = 1,
        timeout: float = 30.0,
    ) -> None:
        """
        Args:
            password: Database password; required
            host: Database host
            port: Database port
            database: Database name
            user: Database user
            size: Number of pooled connections
            timeout: Seconds to wait for a connection
        """
        if not password:
            raise ValueError(
                "A database password is required. "
                "Set ROSTER_DB_PASSWORD (or DB_PASSWORD), or use --in-memory."
            )

        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.size = size
        self.timeout = timeout

        self.conninfo = make_conninfo(
            host=host,
            port=port,
            dbname=database,
            user=user,
            password=password,
            connect_timeout=int(timeout),
        )
        self._pool: ConnectionPool | None = None

    @classmethod
    def from_settings(cls, settings) -> "DatabaseConnectionPool":
        return cls(
            password=settings.db_password,
            host=settings.db_host,
            port=settings.db_port,
            database=settings.db_name,
            user=settings.db_user,
        )

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    @property
    def target(self) -> str:
        """host:port/database, safe to log."""
        return f"{self.host}:{self.port}/{self.database}"

    def open(self, max_retries: int = 3, retry_delay: float = 2.0) -> None:
        """
        Connect, retrying while the server is unreachable.

        Each attempt uses a fresh pool so a failed attempt leaves nothing
        half-open. Calling open() on an open pool does nothing.

        Raises:
            OperationalError: If every attempt fails
        """
        if self._pool is not None:
            return

        for attempt in range(1, max_retries + 1):
            pool = ConnectionPool(
                conninfo=self.conninfo,
                min_size=self.size,
                max_size=self.size,
                timeout=self.timeout,
                kwargs={"row_factory": dict_row},
                open=False,
            )
            try:
                pool.open(wait=True, timeout=self.timeout)
            except OperationalError as e:
                pool.close()
                if attempt == max_retries:
                    raise OperationalError(
                        f"Could not connect to {self.target} after {max_retries} attempts: {e}"
                    ) from e
                logger.warning(f"Connection attempt {attempt}/{max_retries} to {self.target} failed")
                time.sleep(retry_delay)
            else:
                self._pool = pool
                logger.info(f"Connected to {self.target}")
                return

    def close(self) -> None:
        if self._pool is None:
            return
        self._pool.close()
        self._pool = None
        logger.info(f"Disconnected from {self.target}")

    @contextmanager
    def get_connection(self):
        """
        Borrow a connection; it is returned to the pool on exit.

        Raises:
            RuntimeError: If open() has not been called
        """
        if self._pool is None:
            raise RuntimeError("Database connection is not open; call open() first.")

        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def get_cursor(self):
        with self.get_connection() as conn, conn.cursor() as cur:
            yield cur

    def execute_query(self, query: str, params: tuple | None = None) -> list[dict]:
        """Run a SELECT and return every row."""
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()

    def execute_command(self, command: str, params: tuple | None = None) -> int:
        """
        Run a write or DDL statement and commit it.

        Returns:
            Number of rows affected
        """
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(command, params)
                affected = cur.rowcount
            conn.commit()
        return affected

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
