"""
Postgres access for the support desk.

Every workflow operation runs inside a single `with get_db_cursor()` block, so
the contact, client, analysis and notification rows it writes land in one
transaction. An exception anywhere in the block discards all of them.
"""

import psycopg2
from psycopg2.extras import RealDictCursor
from contextlib import contextmanager
from pathlib import Path
import logging

from supportdesk.config import config
from supportdesk.exceptions import SupportDeskError

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / 'schema.sql'


@contextmanager
def get_db_connection():
    """
    Open a connection to DATABASE_URL for one unit of work.
    Commits when the block exits cleanly, rolls back when it raises, closes
    the connection either way.

    Usage:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT id FROM supports WHERE available")
    """
    conn = None
    try:
        conn = psycopg2.connect(config.DATABASE_URL)
        logger.debug("Connected to support desk database")
        yield conn
        conn.commit()
        logger.debug("Workflow transaction committed")
    except Exception as e:
        if conn:
            conn.rollback()
            log = logger.warning if isinstance(e, SupportDeskError) else logger.error
            log(f"Workflow transaction rolled back: {type(e).__name__}: {e}")
        raise
    finally:
        if conn:
            conn.close()
            logger.debug("Support desk database connection closed")


@contextmanager
def get_db_cursor(dict_cursor=True):
    """
    Yield a cursor whose connection commits or rolls back as one transaction.
    Rows come back as dicts (RealDictCursor) unless dict_cursor is False;
    the stores in supportdesk.db.stores expect the dict form.

    Usage:
        with get_db_cursor() as cur:
            stores = Stores.from_cursor(cur)
            contact = stores.contacts.find_by_id(42)
    """
    with get_db_connection() as conn:
        cursor_factory = RealDictCursor if dict_cursor else None
        cur = conn.cursor(cursor_factory=cursor_factory)
        try:
            yield cur
        finally:
            cur.close()


def apply_schema(schema_path: Path = SCHEMA_PATH) -> None:
    """Create all tables (idempotent: the DDL uses IF NOT EXISTS)."""
    ddl = schema_path.read_text(encoding='utf-8')
    with get_db_cursor(dict_cursor=False) as cur:
        cur.execute(ddl)
    logger.info(f"Applied schema from {schema_path.name}")
