import duckdb
import logging
import threading
from contextlib import contextmanager

from config import DB_FILE, LOG_FILE, LOG_LEVEL

# -----------------------------
# Logging
# -----------------------------
logging.basicConfig(
    filename=LOG_FILE,
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s"
)

logger = logging.getLogger("cashback")


def log_info(msg):
    logger.info(msg)


def log_error(msg):
    logger.error(msg)


# -----------------------------
# Store
# -----------------------------
class Store:
    """
    In-process holder of the transactions, rulesets and cashback tables.

    One DuckDB connection lives for the lifetime of the store. Every read or
    write goes through ``transaction()`` which serializes callers on a lock,
    so a whole cashback decision runs against a consistent snapshot.
    """

    def __init__(self, db_file=None):
        self.db_file = db_file or DB_FILE
        self.conn = duckdb.connect(self.db_file)
        self._lock = threading.Lock()
        init_db(self.conn)

    @contextmanager
    def transaction(self):
        with self._lock:
            self.conn.begin()
            try:
                yield self.conn
            except Exception:
                self.conn.rollback()
                raise
            else:
                self.conn.commit()

    def close(self):
        with self._lock:
            self.conn.close()
            log_info(f"Store {self.db_file} closed.")


# -----------------------------
# Initialize database schema
# -----------------------------
def init_db(conn):
    try:
        conn.execute("CREATE SEQUENCE IF NOT EXISTS transactions_seq START 1;")
        conn.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            seq BIGINT PRIMARY KEY DEFAULT nextval('transactions_seq'),
            id VARCHAR,
            customer_id VARCHAR NOT NULL,
            date TIMESTAMP NOT NULL,
            payload VARCHAR NOT NULL
        );
        """)
        log_info("Transactions table ensured.")

        conn.execute("CREATE SEQUENCE IF NOT EXISTS rulesets_seq START 1;")
        conn.execute("""
        CREATE TABLE IF NOT EXISTS rulesets (
            seq BIGINT PRIMARY KEY DEFAULT nextval('rulesets_seq'),
            id VARCHAR NOT NULL UNIQUE,
            start_date TIMESTAMP NOT NULL,
            end_date TIMESTAMP NOT NULL,
            budget BIGINT,
            pending_budget BIGINT,
            redemption_limit BIGINT,
            pending_redemption_limit BIGINT,
            min_transactions BIGINT NOT NULL,
            amount BIGINT NOT NULL,
            extra VARCHAR
        );
        """)
        log_info("Rulesets table ensured.")

        conn.execute("CREATE SEQUENCE IF NOT EXISTS cashbacks_seq START 1;")
        conn.execute("""
        CREATE TABLE IF NOT EXISTS cashbacks (
            seq BIGINT PRIMARY KEY DEFAULT nextval('cashbacks_seq'),
            id VARCHAR NOT NULL UNIQUE,
            ruleset_id VARCHAR NOT NULL,
            customer_id VARCHAR NOT NULL,
            transaction_id VARCHAR,
            amount BIGINT NOT NULL,
            UNIQUE(ruleset_id, customer_id)
        );
        """)
        log_info("Cashbacks table ensured.")

        conn.execute("CREATE INDEX IF NOT EXISTS idx_tx_customer ON transactions(customer_id);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_rs_window ON rulesets(start_date, end_date);")
        log_info("Indexes created/ensured.")
    except Exception as e:
        log_error(f"Error initializing DB: {e}")
        raise
