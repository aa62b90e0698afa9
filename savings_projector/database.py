import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from savings_projector.core.projection import ScenarioInput
from savings_projector.logging import get_logger

logger = get_logger(__name__)


class StoreCorruptedError(ValueError):
    def __init__(self, position: int, reason: str):
        super().__init__(f"stored scenario at position {position} is unreadable: {reason}")
        self.position = position


class InMemoryScenarioStore:
    """Keeps the serialized records in a list; nothing survives the process."""

    def __init__(self) -> None:
        self._records: List[list] = []

    def load(self) -> List[ScenarioInput]:
        return [ScenarioInput.from_record(record) for record in self._records]

    def save(self, inputs: List[ScenarioInput]) -> None:
        self._records = [item.to_record() for item in inputs]


class SqliteScenarioStore:
    """One row per scenario input, ordered by position; save replaces every row."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                create table if not exists scenario_inputs (
                    position integer primary key,
                    record text not null,
                    saved_at text not null
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def save(self, inputs: List[ScenarioInput]) -> None:
        saved_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
        conn = self._connect()
        try:
            with conn:
                conn.execute("delete from scenario_inputs")
                conn.executemany(
                    """
                    insert into scenario_inputs (position, record, saved_at)
                    values (?, ?, ?)
                    """,
                    [
                        (position, json.dumps(item.to_record()), saved_at)
                        for position, item in enumerate(inputs)
                    ],
                )
        finally:
            conn.close()
        logger.debug("scenarios_saved", path=str(self.path), count=len(inputs))

    def load(self) -> List[ScenarioInput]:
        conn = self._connect()
        try:
            rows = conn.execute(
                """
                select position, record
                from scenario_inputs
                order by position
                """
            ).fetchall()
        finally:
            conn.close()

        inputs: List[ScenarioInput] = []
        for row in rows:
            try:
                inputs.append(ScenarioInput.from_record(json.loads(row["record"])))
            except (TypeError, ValueError) as exc:
                raise StoreCorruptedError(row["position"], str(exc)) from exc
        logger.info("scenarios_loaded", path=str(self.path), count=len(inputs))
        return inputs
