from __future__ import annotations

import json
import sqlite3

import pytest

from savings_projector.core.projection import CompoundAnnualPercent, FlatAnnualIncrement, ScenarioInput
from savings_projector.database import SqliteScenarioStore, StoreCorruptedError


def saved_inputs() -> list:
    return [
        ScenarioInput(principal=100000, monthly_contribution=10000, annual_rate_percent=3, horizon_years=1),
        ScenarioInput(
            principal=50000,
            monthly_contribution=30000,
            annual_rate_percent=5.5,
            horizon_years=20,
            growth_rule=FlatAnnualIncrement(amount=5000),
        ),
        ScenarioInput(
            principal=1,
            monthly_contribution=1,
            annual_rate_percent=0,
            horizon_years=40,
            growth_rule=CompoundAnnualPercent(percent=2),
        ),
    ]


def test_empty_database_loads_nothing(tmp_path):
    store = SqliteScenarioStore(tmp_path / "scenarios.db")
    assert store.load() == []


def test_save_then_load_preserves_order_and_rules(tmp_path):
    path = tmp_path / "scenarios.db"
    SqliteScenarioStore(path).save(saved_inputs())

    # a fresh store on the same file sees what the first one wrote
    assert SqliteScenarioStore(path).load() == saved_inputs()


def test_save_replaces_previous_rows(tmp_path):
    store = SqliteScenarioStore(tmp_path / "scenarios.db")
    store.save(saved_inputs())
    store.save(saved_inputs()[2:])

    assert store.load() == saved_inputs()[2:]


def test_records_are_stored_as_plain_lists(tmp_path):
    path = tmp_path / "scenarios.db"
    SqliteScenarioStore(path).save(saved_inputs()[1:2])

    conn = sqlite3.connect(path)
    try:
        (record,) = conn.execute("select record from scenario_inputs").fetchone()
    finally:
        conn.close()

    assert json.loads(record) == [50000.0, 30000.0, 5.5, 20, ["fixed", 5000.0]]


def test_unreadable_record_raises_store_corrupted(tmp_path):
    path = tmp_path / "scenarios.db"
    store = SqliteScenarioStore(path)
    conn = sqlite3.connect(path)
    try:
        conn.execute(
            "insert into scenario_inputs (position, record, saved_at) values (0, ?, ?)",
            ('{"principal": 1}', "2024-01-01T00:00:00+00:00"),
        )
        conn.commit()
    finally:
        conn.close()

    with pytest.raises(StoreCorruptedError) as excinfo:
        store.load()
    assert excinfo.value.position == 0
