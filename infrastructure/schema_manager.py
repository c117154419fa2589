"""
Schema and migration management for SQLite database.
"""

import logging
import sqlite3

logger = logging.getLogger("tiesada.schema")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Call initialize() to ensure schema is present and migrations are applied.
    """

    def __init__(self, db_path: str, use_uri: bool = False):
        self.db_path = db_path
        self.use_uri = use_uri

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        conn = self._connect()
        try:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        if not self.use_uri:  # Skip WAL for in-memory databases
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        # Roster
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                player_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                position TEXT,
                photo_url TEXT,
                coins INTEGER NOT NULL DEFAULT 0 CHECK (coins >= 0),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

        # Matches: result/stats/attending/lineup are JSON documents
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS matches (
                match_id TEXT PRIMARY KEY,
                opponent TEXT NOT NULL,
                match_date TEXT NOT NULL,
                played INTEGER NOT NULL DEFAULT 0,
                result TEXT,
                stats TEXT,
                attending TEXT,
                lineup TEXT,
                emoji TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bets (
                bet_id TEXT PRIMARY KEY,
                match_id TEXT NOT NULL,
                bet_type TEXT NOT NULL,
                bet_mode TEXT NOT NULL,
                status TEXT NOT NULL,
                amount INTEGER NOT NULL CHECK (amount > 0),
                details TEXT NOT NULL,
                player_id TEXT,
                proposer_id TEXT,
                accepter_id TEXT,
                created_at INTEGER NOT NULL,
                FOREIGN KEY (match_id) REFERENCES matches(match_id)
            )
            """
        )

    # --- Migration helpers ---

    def _add_column_if_not_exists(self, cursor, table: str, column: str, column_type: str) -> None:
        try:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
        except sqlite3.OperationalError:
            pass

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("add_bet_accepter_stake", self._migration_add_bet_accepter_stake),
            ("add_bet_payout_columns", self._migration_add_bet_payout_columns),
            ("add_bet_indexes", self._migration_add_bet_indexes),
            ("add_match_video_url", self._migration_add_match_video_url),
        ]

    # --- Migrations ---

    def _migration_add_bet_accepter_stake(self, cursor) -> None:
        # Counter-stake frozen at acceptance so settlement never re-prices
        self._add_column_if_not_exists(cursor, "bets", "accepter_stake", "INTEGER")

    def _migration_add_bet_payout_columns(self, cursor) -> None:
        self._add_column_if_not_exists(cursor, "bets", "payout", "INTEGER")
        self._add_column_if_not_exists(cursor, "bets", "resolved_at", "INTEGER")

    def _migration_add_bet_indexes(self, cursor) -> None:
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_match_status ON bets(match_id, status)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_player ON bets(player_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_proposer ON bets(proposer_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_accepter ON bets(accepter_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_mode_status ON bets(bet_mode, status)")

    def _migration_add_match_video_url(self, cursor) -> None:
        self._add_column_if_not_exists(cursor, "matches", "video_url", "TEXT")
