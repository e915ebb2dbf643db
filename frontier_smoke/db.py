import psycopg2
from psycopg2.extras import RealDictCursor
import logging

from . import config
from .exceptions import AuthFlowError

logger = logging.getLogger(__name__)

# Most recent mail OTP flow for the email; older flows may still linger
NONCE_QUERY = """
    SELECT nonce
    FROM flows
    WHERE email = %s
    ORDER BY created_at DESC
    LIMIT 1
"""

def get_db_connection(dsn=None):
    """Create a new database connection."""
    try:
        logger.debug("Creating database connection...")
        conn = psycopg2.connect(dsn or config.DATABASE_URL, cursor_factory=RealDictCursor)
        logger.debug("Database connection successful")
        return conn
    except psycopg2.Error as e:
        logger.error(f"Error connecting to database: {str(e)}")
        raise AuthFlowError(f"failed to connect to database: {str(e)}", step="Database") from e

def get_nonce_from_db(email: str, dsn=None) -> str:
    """Read the one-time code Frontier stored for the email's pending login flow."""
    conn = get_db_connection(dsn)
    try:
        with conn.cursor() as cur:
            cur.execute(NONCE_QUERY, (email,))
            row = cur.fetchone()
    except psycopg2.Error as e:
        raise AuthFlowError(f"failed to query nonce: {str(e)}", step="Database") from e
    finally:
        conn.close()

    if row is None or not row["nonce"]:
        raise AuthFlowError(f"no login flow found for {email}", step="Database")

    return row["nonce"].strip()
