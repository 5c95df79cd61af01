"""sqlite3 store for the calculation history."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from inflation_backend.core.calculator import CalculationInput, CalculationResult
from inflation_backend.schemas.history import HistoryPage, QueryRecord, QueryStatistics

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, amount_nominal, inflation_rate, trea_rate, years, granularity,
    real_value, absolute_loss, loss_percent, future_value_with_interest,
    series, client_ip, user_agent, created_at
"""


def to_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with second precision, the format stored in `created_at`."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds")


def _row_to_record(row: sqlite3.Row) -> QueryRecord:
    data = dict(row)
    data["series"] = json.loads(data["series"]) if data["series"] else None
    return QueryRecord.model_validate(data)


class QueryStore:
    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                create table if not exists inflation_queries (
                    id integer primary key autoincrement,
                    amount_nominal real not null,
                    inflation_rate real not null,
                    trea_rate real,
                    years real not null,
                    granularity text not null default 'none',
                    real_value real not null,
                    absolute_loss real not null,
                    loss_percent real not null,
                    future_value_with_interest real not null,
                    series text,
                    client_ip text,
                    user_agent text,
                    created_at text not null
                )
                """
            )
            conn.execute(
                "create index if not exists idx_inflation_queries_created_at "
                "on inflation_queries (created_at)"
            )
            conn.commit()
        finally:
            conn.close()

    def ping(self) -> bool:
        try:
            conn = self._connect()
        except sqlite3.Error:
            logger.exception("could not open history database at %s", self.db_path)
            return False
        try:
            conn.execute("select 1").fetchone()
            return True
        except sqlite3.Error:
            logger.exception("history database did not answer")
            return False
        finally:
            conn.close()

    def save(
        self,
        calculation: CalculationInput,
        result: CalculationResult,
        client_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> QueryRecord:
        series = None
        if result.series is not None:
            series = json.dumps([point.model_dump() for point in result.series])
        stamp = to_timestamp(created_at or datetime.now(timezone.utc))

        conn = self._connect()
        try:
            cursor = conn.execute(
                """
                insert into inflation_queries (
                    amount_nominal, inflation_rate, trea_rate, years, granularity,
                    real_value, absolute_loss, loss_percent, future_value_with_interest,
                    series, client_ip, user_agent, created_at
                )
                values (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    calculation.nominal_amount,
                    calculation.inflation_rate_percent,
                    calculation.trea_rate_percent,
                    calculation.years,
                    calculation.granularity.value,
                    result.real_value,
                    result.absolute_loss,
                    result.loss_percent,
                    result.future_value_with_interest,
                    series,
                    client_ip,
                    user_agent,
                    stamp,
                ),
            )
            conn.commit()
            query_id = cursor.lastrowid
        finally:
            conn.close()

        logger.debug("saved inflation query %s", query_id)
        return QueryRecord(
            id=query_id,
            amount_nominal=calculation.nominal_amount,
            inflation_rate=calculation.inflation_rate_percent,
            trea_rate=calculation.trea_rate_percent,
            years=calculation.years,
            granularity=calculation.granularity,
            real_value=result.real_value,
            absolute_loss=result.absolute_loss,
            loss_percent=result.loss_percent,
            future_value_with_interest=result.future_value_with_interest,
            series=result.series,
            client_ip=client_ip,
            user_agent=user_agent,
            created_at=stamp,
        )

    def get(self, query_id: int) -> Optional[QueryRecord]:
        conn = self._connect()
        try:
            row = conn.execute(
                f"select {_COLUMNS} from inflation_queries where id = ?",
                (query_id,),
            ).fetchone()
            if row is None:
                return None
            return _row_to_record(row)
        finally:
            conn.close()

    def list_page(self, limit: int = 50, offset: int = 0) -> HistoryPage:
        conn = self._connect()
        try:
            rows = conn.execute(
                f"""
                select {_COLUMNS} from inflation_queries
                order by created_at desc, id desc
                limit ? offset ?
                """,
                (limit, offset),
            ).fetchall()
            total = conn.execute("select count(*) from inflation_queries").fetchone()[0]
        finally:
            conn.close()

        return HistoryPage(
            items=[_row_to_record(row) for row in rows],
            total=total,
            limit=limit,
            offset=offset,
        )

    def recent(self, limit: int = 10) -> List[QueryRecord]:
        return self.list_page(limit=limit, offset=0).items

    def by_date_range(self, start: datetime, end: datetime) -> List[QueryRecord]:
        conn = self._connect()
        try:
            rows = conn.execute(
                f"""
                select {_COLUMNS} from inflation_queries
                where created_at >= ? and created_at <= ?
                order by created_at desc, id desc
                """,
                (to_timestamp(start), to_timestamp(end)),
            ).fetchall()
        finally:
            conn.close()
        return [_row_to_record(row) for row in rows]

    def statistics(self) -> QueryStatistics:
        conn = self._connect()
        try:
            row = conn.execute(
                """
                select
                    count(*) as total_queries,
                    avg(amount_nominal) as avg_amount_nominal,
                    avg(inflation_rate) as avg_inflation_rate,
                    avg(loss_percent) as avg_loss_percent,
                    min(created_at) as first_query,
                    max(created_at) as last_query
                from inflation_queries
                """
            ).fetchone()
        finally:
            conn.close()

        data: dict[str, Any] = dict(row)
        for key in ("avg_amount_nominal", "avg_inflation_rate", "avg_loss_percent"):
            if data[key] is None:
                data[key] = 0.0
        return QueryStatistics.model_validate(data)

    def delete_older_than(self, days: int) -> int:
        """Delete records created more than `days` days ago; return how many went."""
        cutoff = to_timestamp(datetime.now(timezone.utc) - timedelta(days=days))
        conn = self._connect()
        try:
            cursor = conn.execute(
                "delete from inflation_queries where created_at < ?",
                (cutoff,),
            )
            conn.commit()
            deleted = cursor.rowcount
        finally:
            conn.close()

        logger.info("purged %d inflation queries older than %d days", deleted, days)
        return deleted
