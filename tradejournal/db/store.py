"""SQLite trade store for the trade journal."""

import json
import logging
import math
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from tradejournal.errors import TradeNotFoundError
from tradejournal.models import TradeRecord, TradeResult

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "date_time",
    "asset_pair",
    "direction",
    "result",
    "pnl_absolute",
    "r_multiple",
    "strategy_used",
}

_TRADE_COLUMNS = [
    "user_id",
    "date_time",
    "asset_pair",
    "direction",
    "entry_price",
    "exit_price",
    "stop_loss_price",
    "risk_per_trade",
    "result",
    "pnl_absolute",
    "r_multiple",
    "strategy_used",
    "setup_tags",
    "notes",
    "screenshot_url",
]


class TradeFilter(BaseModel):
    """Optional filters for listing trades."""

    asset_pair: Optional[str] = Field(default=None, description="Substring match, any case")
    strategy_used: Optional[str] = Field(default=None, description="Substring match, any case")
    result: Optional[TradeResult] = Field(default=None, description="Exact result")
    setup_tag: Optional[str] = Field(default=None, description="Trade must carry this tag")

    model_config = {"frozen": True}


class TradePage(BaseModel):
    """One page of a filtered trade listing."""

    trades: list[TradeRecord]
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0, description="Matching trades across all pages")
    pages: int = Field(..., ge=0)

    model_config = {"frozen": True}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DataStore:
    """SQLite-based trade store. Every operation is scoped to one user."""

    REQUIRED_TABLES = ["trades"]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    date_time TEXT NOT NULL,
                    asset_pair TEXT NOT NULL,
                    direction TEXT NOT NULL,
                    entry_price REAL NOT NULL DEFAULT 0,
                    exit_price REAL NOT NULL DEFAULT 0,
                    stop_loss_price REAL NOT NULL DEFAULT 0,
                    risk_per_trade REAL NOT NULL DEFAULT 0,
                    result TEXT NOT NULL,
                    pnl_absolute REAL NOT NULL DEFAULT 0,
                    r_multiple REAL NOT NULL DEFAULT 0,
                    strategy_used TEXT NOT NULL DEFAULT '',
                    setup_tags TEXT NOT NULL DEFAULT '[]',
                    notes TEXT NOT NULL DEFAULT '',
                    screenshot_url TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_trades_user_time ON trades(user_id, date_time)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_trades_user_strategy ON trades(user_id, strategy_used)"
            )

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    @staticmethod
    def _row_values(trade: TradeRecord) -> tuple:
        return (
            trade.user_id,
            trade.date_time.isoformat(),
            trade.asset_pair,
            trade.direction.value,
            trade.entry_price,
            trade.exit_price,
            trade.stop_loss_price,
            trade.risk_per_trade,
            trade.result.value,
            trade.pnl_absolute,
            trade.r_multiple,
            trade.strategy_used,
            json.dumps(trade.setup_tags),
            trade.notes,
            trade.screenshot_url,
        )

    @staticmethod
    def _row_to_trade(row: sqlite3.Row) -> TradeRecord:
        """Convert DB row -> TradeRecord."""
        return TradeRecord(
            id=row["id"],
            user_id=row["user_id"],
            date_time=datetime.fromisoformat(row["date_time"]),
            asset_pair=row["asset_pair"],
            direction=row["direction"],
            entry_price=row["entry_price"],
            exit_price=row["exit_price"],
            stop_loss_price=row["stop_loss_price"],
            risk_per_trade=row["risk_per_trade"],
            result=row["result"],
            pnl_absolute=row["pnl_absolute"],
            r_multiple=row["r_multiple"],
            strategy_used=row["strategy_used"],
            setup_tags=json.loads(row["setup_tags"] or "[]"),
            notes=row["notes"],
            screenshot_url=row["screenshot_url"],
        )

    # ==================== Trades ====================

    def add_trade(self, trade: TradeRecord) -> int:
        """Insert a trade for ``trade.user_id``.

        Args:
            trade: Trade to save. Its ``id`` is ignored.

        Returns:
            The ID of the saved trade.
        """
        now = datetime.now().isoformat()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                INSERT INTO trades ({", ".join(_TRADE_COLUMNS)}, created_at, updated_at)
                VALUES ({", ".join("?" for _ in _TRADE_COLUMNS)}, ?, ?)
                """,
                self._row_values(trade) + (now, now),
            )
            conn.commit()
            trade_id = cursor.lastrowid or 0
        finally:
            conn.close()

        logger.debug("Added trade %d for user %s", trade_id, trade.user_id)
        return trade_id

    def get_trade(self, user_id: str, trade_id: int) -> Optional[TradeRecord]:
        """Get one trade.

        Args:
            user_id: Owning user.
            trade_id: Trade ID.

        Returns:
            TradeRecord if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM trades WHERE id = ? AND user_id = ?",
                (trade_id, user_id),
            )
            row = cursor.fetchone()
            if row:
                return self._row_to_trade(row)
            return None
        finally:
            conn.close()

    def update_trade(self, user_id: str, trade_id: int, /, **changes: Any) -> TradeRecord:
        """Update fields of an existing trade.

        Args:
            user_id: Owning user.
            trade_id: Trade ID.
            **changes: TradeRecord field values to replace. ``id`` and
                ``user_id`` are ignored.

        Returns:
            The updated trade.

        Raises:
            TradeNotFoundError: If the trade does not exist for this user.
        """
        existing = self.get_trade(user_id, trade_id)
        if existing is None:
            raise TradeNotFoundError(trade_id)

        changes.pop("id", None)
        changes.pop("user_id", None)
        updated = TradeRecord.model_validate({**existing.model_dump(), **changes})

        assignments = ", ".join(f"{column} = ?" for column in _TRADE_COLUMNS)
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE trades SET {assignments}, updated_at = ? WHERE id = ? AND user_id = ?",
                self._row_values(updated) + (datetime.now().isoformat(), trade_id, user_id),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Updated trade %d for user %s: %s", trade_id, user_id, sorted(changes))
        return updated

    def delete_trade(self, user_id: str, trade_id: int) -> None:
        """Delete a trade.

        Raises:
            TradeNotFoundError: If the trade does not exist for this user.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM trades WHERE id = ? AND user_id = ?",
                (trade_id, user_id),
            )
            conn.commit()
            deleted = cursor.rowcount
        finally:
            conn.close()

        if deleted == 0:
            raise TradeNotFoundError(trade_id)
        logger.debug("Deleted trade %d for user %s", trade_id, user_id)

    def delete_all_trades(self, user_id: str) -> int:
        """Delete every trade belonging to a user.

        Returns:
            Number of trades deleted.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM trades WHERE user_id = ?", (user_id,))
            conn.commit()
            deleted = cursor.rowcount
        finally:
            conn.close()

        logger.debug("Deleted %d trades for user %s", deleted, user_id)
        return deleted

    def list_trades(self, user_id: str) -> list[TradeRecord]:
        """Get a user's full trade history, oldest first."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM trades WHERE user_id = ? ORDER BY date_time ASC, id ASC",
                (user_id,),
            )
            return [self._row_to_trade(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def filter_trades(
        self,
        user_id: str,
        filters: Optional[TradeFilter] = None,
        sort_by: str = "date_time",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 50,
    ) -> TradePage:
        """Get one page of a user's trades matching ``filters``.

        Args:
            user_id: Owning user.
            filters: Optional filters; None lists everything.
            sort_by: Column to sort by (see ``SORTABLE_COLUMNS``).
            sort_order: 'asc' or 'desc'.
            page: 1-based page number.
            limit: Page size.

        Returns:
            TradePage with the matching trades and pagination totals.

        Raises:
            ValueError: If sorting or paging arguments are invalid.
        """
        if sort_by not in SORTABLE_COLUMNS:
            raise ValueError(f"Cannot sort by '{sort_by}'")
        order = sort_order.lower()
        if order not in ("asc", "desc"):
            raise ValueError(f"Sort order must be 'asc' or 'desc', got '{sort_order}'")
        if page < 1 or limit < 1:
            raise ValueError("Page and limit must be positive")

        filters = filters or TradeFilter()
        clauses = ["user_id = ?"]
        params: list[Any] = [user_id]

        if filters.asset_pair:
            clauses.append("asset_pair LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(filters.asset_pair)}%")
        if filters.strategy_used:
            clauses.append("strategy_used LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(filters.strategy_used)}%")
        if filters.result:
            clauses.append("result = ?")
            params.append(filters.result.value)
        if filters.setup_tag:
            clauses.append(
                "EXISTS (SELECT 1 FROM json_each(trades.setup_tags) WHERE json_each.value = ?)"
            )
            params.append(filters.setup_tag)

        where = " AND ".join(clauses)
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(f"SELECT COUNT(*) AS count FROM trades WHERE {where}", params)
            total = cursor.fetchone()["count"]

            cursor.execute(
                f"""
                SELECT * FROM trades
                WHERE {where}
                ORDER BY {sort_by} {order.upper()}, id {order.upper()}
                LIMIT ? OFFSET ?
                """,
                params + [limit, (page - 1) * limit],
            )
            trades = [self._row_to_trade(row) for row in cursor.fetchall()]
        finally:
            conn.close()

        return TradePage(
            trades=trades,
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        )

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
