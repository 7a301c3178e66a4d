"""Unit tests for dgp/models/grading_logs.py

Tests GradingLogEntry, GradingLogStore (add/filter/trim/clear/stats),
the get_grading_log_store singleton, and thread-safety.
"""

import threading

from dgp.models.grading_logs import GradingLogEntry, GradingLogStore, get_grading_log_store


def _entry(
    session_id: str = "dgp_1",
    agent_name: str = "grader",
    event_type: str = "graded",
    **kwargs,
) -> GradingLogEntry:
    return GradingLogEntry(
        session_id=session_id,
        agent_name=agent_name,
        event_type=event_type,
        **kwargs,
    )


class TestGradingLogEntry:
    def test_defaults(self):
        entry = _entry()
        assert entry.stage is None
        assert entry.metadata == {}
        assert entry.timestamp is not None


class TestGradingLogStore:
    def test_add_and_get(self):
        store = GradingLogStore()
        store.add_log(_entry(stage="Monday"))
        store.add_log(_entry(session_id="dgp_2"))
        assert len(store.get_logs("dgp_1")) == 1
        assert store.get_logs("dgp_missing") == []

    def test_filters(self):
        store = GradingLogStore()
        store.add_log(_entry(stage="Monday"))
        store.add_log(_entry(stage="Tuesday"))
        store.add_log(_entry(agent_name="orchestrator", event_type="sentence_started", stage="Monday"))
        assert len(store.get_logs("dgp_1", stage="Monday")) == 2
        assert len(store.get_logs("dgp_1", agent_name="grader")) == 2
        assert len(store.get_logs("dgp_1", stage="Monday", agent_name="orchestrator")) == 1

    def test_trims_to_max(self):
        store = GradingLogStore(max_logs_per_session=3)
        for i in range(5):
            store.add_log(_entry(duration_ms=i))
        logs = store.get_logs("dgp_1")
        assert [log.duration_ms for log in logs] == [2, 3, 4]

    def test_clear_session(self):
        store = GradingLogStore(max_logs_per_session=10)
        store.add_log(_entry())
        store.add_log(_entry(session_id="dgp_2"))
        store.clear_session("dgp_1")
        store.clear_session("dgp_unknown")
        assert store.get_logs("dgp_1") == []
        assert len(store.get_logs("dgp_2")) == 1

    def test_thread_safety(self):
        store = GradingLogStore(max_logs_per_session=1000)

        def worker():
            for _ in range(100):
                store.add_log(_entry())

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store.get_logs("dgp_1")) == 500


class TestSingleton:
    def test_same_instance(self):
        assert get_grading_log_store() is get_grading_log_store()
