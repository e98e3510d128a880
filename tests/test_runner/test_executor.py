"""Tests for the runner executor."""

import io
import json

import pytest

from principal_store.backends import InMemoryBackend
from principal_store.runner.__main__ import main
from principal_store.runner.executor import Executor
from principal_store.runner.schema import (
    BackendConfigSchema,
    OperationSchema,
    RunnerInput,
)


def op(operation, principal="u1", **kwargs):
    return OperationSchema(operation=operation, principal=principal, **kwargs)


class TestExecute:
    """Tests for Executor.execute()."""

    @pytest.fixture
    def executor(self):
        return Executor()

    async def test_record_round_trip(self, executor):
        output = await executor.execute(
            RunnerInput(
                operations=[
                    op("save_record", value={"name": "Ann"}),
                    op("save_record", value={"age": 30}),
                    op("load_record"),
                ]
            )
        )
        assert output.success
        assert output.results[-1].result == {"name": "Ann", "age": 30}

    async def test_entry_round_trip(self, executor):
        output = await executor.execute(
            RunnerInput(
                operations=[
                    op("save_entry", key="score", value=10),
                    op("save_entry", key="score", value=20),
                    op("load_entry", key="score"),
                    op("delete_entry", key="score"),
                ]
            )
        )
        assert output.success
        assert [r.result for r in output.results] == [None, None, 20, None]

    async def test_not_found_reported_with_code(self, executor):
        output = await executor.execute(
            RunnerInput(operations=[op("load_record", principal="u2"), op("delete_entry", key="k")])
        )
        assert not output.success
        first, second = output.results
        assert first.error_type == "PrincipalNotFoundError"
        assert first.code == "ERR_PRINCIPAL_NOT_FOUND"
        assert second.code == "ERR_DATA_KEY_NOT_FOUND"

    async def test_failure_does_not_stop_later_operations(self, executor):
        output = await executor.execute(
            RunnerInput(
                operations=[
                    op("load_entry", key="missing"),
                    op("save_entry", key="score", value=1),
                ]
            )
        )
        assert [r.success for r in output.results] == [False, True]

    async def test_missing_key(self, executor):
        output = await executor.execute(RunnerInput(operations=[op("load_entry")]))
        assert output.results[0].error_type == "ExecutionError"
        assert "requires 'key'" in output.results[0].error

    async def test_record_must_be_mapping(self, executor):
        output = await executor.execute(RunnerInput(operations=[op("save_record", value=5)]))
        assert output.results[0].error_type == "TypeError"

    async def test_delete_record_field(self, executor):
        output = await executor.execute(
            RunnerInput(
                operations=[
                    op("save_record", value={"a": 1, "b": 2}),
                    op("delete_record_field", field="a"),
                    op("load_record"),
                ]
            )
        )
        assert output.results[-1].result == {"b": 2}

    async def test_unknown_backend_type(self, executor):
        output = await executor.execute(
            RunnerInput(backend=BackendConfigSchema(type="mongo"), operations=[])
        )
        assert not output.success
        assert output.error_type == "BackendFactoryError"

    async def test_sqlite_backend(self, executor, tmp_path):
        config = BackendConfigSchema(type="sqlite", path=str(tmp_path / "state.db"))
        await executor.execute(
            RunnerInput(backend=config, operations=[op("save_entry", key="k", value=[1, 2])])
        )
        output = await executor.execute(
            RunnerInput(backend=config, operations=[op("load_entry", key="k")])
        )
        assert output.results[0].result == [1, 2]


async def test_injected_backend_is_shared_between_runs():
    backend = InMemoryBackend()
    executor = Executor(backend=backend)
    await executor.execute(RunnerInput(operations=[op("save_entry", key="k", value=1)]))
    output = await executor.execute(RunnerInput(operations=[op("load_entry", key="k")]))
    assert output.results[0].result == 1


def test_invalid_operation_name():
    with pytest.raises(ValueError):
        OperationSchema(operation="drop_everything", principal="u1")


class TestMain:
    """Tests for the stdin/stdout entry point."""

    def run(self, monkeypatch, capsys, payload):
        monkeypatch.setattr("sys.stdin", io.StringIO(payload))
        code = main()
        return code, json.loads(capsys.readouterr().out)

    def test_success(self, monkeypatch, capsys):
        payload = json.dumps(
            {
                "operations": [
                    {"operation": "save_entry", "principal": "u1", "key": "k", "value": 1},
                    {"operation": "load_entry", "principal": "u1", "key": "k"},
                ]
            }
        )
        code, out = self.run(monkeypatch, capsys, payload)
        assert code == 0
        assert out["results"][1]["result"] == 1

    def test_failure_exit_code(self, monkeypatch, capsys):
        payload = json.dumps({"operations": [{"operation": "load_record", "principal": "u1"}]})
        code, out = self.run(monkeypatch, capsys, payload)
        assert code == 1
        assert out["results"][0]["code"] == "ERR_PRINCIPAL_NOT_FOUND"

    def test_invalid_json(self, monkeypatch, capsys):
        code, out = self.run(monkeypatch, capsys, "not json")
        assert code == 1
        assert out["success"] is False
        assert out["error_type"] == "ValidationError"
