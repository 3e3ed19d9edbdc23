"""Unit tests for the account sync pipeline."""
import asyncio
import json
from datetime import date, datetime

from app.db.models.account import SyncState
from app.db.models.job_run import JobRun, JobStatus
from app.services.adapters.base import WarehouseAdapter, WarehouseError
from app.services.accounts import create_account
from app.services.metrics import DeliveryStatus
from app.services.pipelines.account_sync import (
    SyncOutcome,
    run_account_sync_pipeline,
    summarize_outcomes,
    sync_account,
    sync_accounts,
)

NOW = datetime(2024, 6, 1)


class DelayedWarehouseAdapter(WarehouseAdapter):
    """Warehouse adapter that answers each folder after its own delay."""

    def __init__(self, replies):
        self.replies = replies
        self.finished = []

    def test_connection(self) -> bool:
        return True

    async def fetch_external_record(self, folder_id, list_id):
        delay, record = self.replies[folder_id]
        await asyncio.sleep(delay)
        self.finished.append(folder_id)
        if isinstance(record, Exception):
            raise record
        return self.normalize(record)

    def normalize(self, raw_data):
        return dict(raw_data)


def make_account(db, name, folder_id=None, list_id=None, **fields):
    values = {
        "account_name": name,
        "points_purchased": 1000,
        "points_delivered": 750,
        "recurring_points_allotment": 100,
        "mrr": 10000,
        "growth_in_mrr": 1000,
        "relationship_start_date": date(2023, 1, 1),
        "client_folder_id": folder_id,
        "client_list_task_id": list_id,
    }
    values.update(fields)
    return create_account(db, values)


class TestSyncAccount:
    """Tests for syncing a single account."""

    def test_merges_external_fields(self, db_session, warehouse):
        account = make_account(db_session, "Acme", "folder-a", "list-a", industry="Retail")
        warehouse.records["folder-a"] = {
            "mrr": "5,000",
            "points_delivered": "1,000",
            "priority": "TIER_1",
            "goals": [{"description": "Launch ABM pilot", "progress": "40%"}],
        }

        outcome = asyncio.run(sync_account(db_session, account, warehouse, NOW))

        assert outcome.state == SyncState.MERGED
        assert outcome.stale is False
        assert warehouse.calls == [("folder-a", "list-a")]

        db_session.refresh(account)
        assert float(account.mrr) == 5000
        assert account.points_delivered == 1000
        assert float(account.potential_mrr) == 6000
        assert account.delivery == DeliveryStatus.ON_TRACK
        assert account.industry == "Retail"
        assert [goal.description for goal in account.goals] == ["Launch ABM pilot"]
        assert account.goals[0].progress == 40
        assert account.last_sync_state == SyncState.MERGED
        assert account.last_synced_at == NOW

    def test_missing_ids_are_skipped(self, db_session, warehouse):
        account = make_account(db_session, "No Ids", folder_id="folder-only")

        outcome = asyncio.run(sync_account(db_session, account, warehouse, NOW))

        assert outcome.state == SyncState.SKIPPED_NO_IDS
        assert outcome.stale is True
        assert warehouse.calls == []
        db_session.refresh(account)
        assert float(account.mrr) == 10000
        assert account.last_sync_state == SyncState.SKIPPED_NO_IDS

    def test_warehouse_failure_preserves_stored_values(self, db_session, warehouse, warehouse_error):
        account = make_account(db_session, "Flaky", "folder-f", "list-f")
        warehouse.records["folder-f"] = warehouse_error

        outcome = asyncio.run(sync_account(db_session, account, warehouse, NOW))

        assert outcome.state == SyncState.FAILED_PRESERVED
        assert "503" in outcome.error
        db_session.refresh(account)
        assert float(account.mrr) == 10000
        assert account.points_delivered == 750
        assert account.delivery == DeliveryStatus.OFF_TRACK
        assert account.last_sync_state == SyncState.FAILED_PRESERVED
        assert account.last_synced_at is None

    def test_empty_record_changes_nothing(self, db_session, warehouse):
        account = make_account(db_session, "Quiet", "folder-q", "list-q")

        outcome = asyncio.run(sync_account(db_session, account, warehouse, NOW))

        assert outcome.state == SyncState.MERGED
        db_session.refresh(account)
        assert account.account_name == "Quiet"
        assert float(account.mrr) == 10000


class TestRunAccountSyncPipeline:
    """Tests for the batch sync pipeline."""

    def test_one_failure_does_not_abort_the_batch(self, db_session, warehouse, warehouse_error):
        make_account(db_session, "Alpha", "folder-a", "list-a")
        make_account(db_session, "Bravo", "folder-b", "list-b")
        make_account(db_session, "Charlie")
        warehouse.records["folder-a"] = {"mrr": "5,000"}
        warehouse.records["folder-b"] = warehouse_error

        result = asyncio.run(run_account_sync_pipeline(db_session, warehouse, triggered_by="test", now=NOW))

        states = {outcome.account_name: outcome.state for outcome in result["outcomes"]}
        assert states == {
            "Alpha": SyncState.MERGED,
            "Bravo": SyncState.FAILED_PRESERVED,
            "Charlie": SyncState.SKIPPED_NO_IDS,
        }
        assert result["counters"] == {"total": 3, "merged": 1, "skipped": 1, "failed": 1}
        assert result["all_failed"] is False

        job_run = db_session.query(JobRun).filter(JobRun.run_id == result["run_id"]).first()
        assert job_run.pipeline_name == "account_sync"
        assert job_run.status == JobStatus.COMPLETED
        assert job_run.triggered_by == "test"
        assert json.loads(job_run.counters_json) == result["counters"]

    def test_failing_fetch_leaves_siblings_merged(self, db_session, warehouse, warehouse_error):
        make_account(db_session, "Alpha", "folder-a", "list-a")
        bravo = make_account(db_session, "Bravo", "folder-b", "list-b")
        make_account(db_session, "Delta", "folder-d", "list-d")
        warehouse.records["folder-a"] = {"mrr": "5,000"}
        warehouse.records["folder-b"] = warehouse_error
        warehouse.records["folder-d"] = {"points_delivered": "900"}

        result = asyncio.run(run_account_sync_pipeline(db_session, warehouse, now=NOW))

        assert [outcome.state for outcome in result["outcomes"]] == [
            SyncState.MERGED, SyncState.FAILED_PRESERVED, SyncState.MERGED,
        ]
        db_session.refresh(bravo)
        assert float(bravo.mrr) == 10000
        assert bravo.points_delivered == 750

    def test_every_attempt_failing_fails_the_run(self, db_session, warehouse, warehouse_error):
        make_account(db_session, "Bravo", "folder-b", "list-b")
        make_account(db_session, "Charlie")
        warehouse.records["folder-b"] = warehouse_error

        result = asyncio.run(run_account_sync_pipeline(db_session, warehouse, now=NOW))

        assert result["all_failed"] is True
        job_run = db_session.query(JobRun).filter(JobRun.run_id == result["run_id"]).first()
        assert job_run.status == JobStatus.FAILED
        assert job_run.error_message

    def test_only_skipped_accounts_is_not_a_failure(self, db_session, warehouse):
        make_account(db_session, "Charlie")

        result = asyncio.run(run_account_sync_pipeline(db_session, warehouse, now=NOW))

        assert result["all_failed"] is False
        assert result["counters"]["skipped"] == 1

    def test_limits_to_requested_accounts(self, db_session, warehouse):
        alpha = make_account(db_session, "Alpha", "folder-a", "list-a")
        make_account(db_session, "Bravo", "folder-b", "list-b")

        result = asyncio.run(run_account_sync_pipeline(
            db_session, warehouse, account_ids=[alpha.account_id], now=NOW
        ))

        assert [outcome.account_id for outcome in result["outcomes"]] == [alpha.account_id]
        assert warehouse.calls == [("folder-a", "list-a")]


def test_summarize_outcomes():
    outcomes = [
        SyncOutcome("a", "A", SyncState.MERGED),
        SyncOutcome("b", "B", SyncState.FAILED_PRESERVED, error="boom"),
        SyncOutcome("c", "C", SyncState.FAILED_PRESERVED, error="boom"),
        SyncOutcome("d", "D", SyncState.SKIPPED_NO_IDS),
    ]
    assert summarize_outcomes(outcomes) == {"total": 4, "merged": 1, "skipped": 1, "failed": 2}


def test_interleaved_failure_keeps_sibling_writes(db_session):
    alpha = make_account(db_session, "Alpha", "folder-a", "list-a")
    bravo = make_account(db_session, "Bravo", "folder-b", "list-b")
    charlie = make_account(db_session, "Charlie", "folder-c", "list-c")
    adapter = DelayedWarehouseAdapter({
        "folder-a": (0.05, {"mrr": "5,000", "goals": [{"description": "Expand to EMEA"}]}),
        "folder-b": (0.01, WarehouseError("Warehouse returned 503 for folder-b")),
        "folder-c": (0.03, {"points_delivered": "1,000"}),
    })

    outcomes = asyncio.run(sync_accounts(db_session, [alpha, bravo, charlie], adapter, NOW))

    assert adapter.finished == ["folder-b", "folder-c", "folder-a"]
    assert [outcome.state for outcome in outcomes] == [
        SyncState.MERGED, SyncState.FAILED_PRESERVED, SyncState.MERGED,
    ]

    db_session.expire_all()
    assert float(alpha.mrr) == 5000
    assert [goal.description for goal in alpha.goals] == ["Expand to EMEA"]
    assert alpha.last_sync_state == SyncState.MERGED

    assert float(bravo.mrr) == 10000
    assert bravo.points_delivered == 750
    assert bravo.last_sync_state == SyncState.FAILED_PRESERVED
    assert bravo.last_synced_at is None

    assert charlie.points_delivered == 1000
    assert charlie.delivery == DeliveryStatus.ON_TRACK
    assert charlie.last_sync_state == SyncState.MERGED
