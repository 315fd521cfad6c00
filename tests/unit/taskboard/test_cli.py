from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from click.testing import CliRunner

from taskboard.cli import cli
from taskboard.core.settings import reset_taskboard_config


@pytest.fixture(autouse=True)
def fresh_config():
    reset_taskboard_config()
    yield
    reset_taskboard_config()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _mock_transport(ready_status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/health":
            return httpx.Response(200, json={"status": "healthy"})
        if ready_status == 200:
            return httpx.Response(200, json={"status": "ready", "database": "connected", "uptime": 1.0})
        return httpx.Response(503, json={"status": "not ready", "database": "disconnected"})

    return httpx.MockTransport(handler)


def _patched_client(transport):
    real_client = httpx.Client

    def factory(*args, **kwargs):
        return real_client(*args, transport=transport, **kwargs)

    return patch("taskboard.cli.httpx.Client", side_effect=factory)


class TestServe:
    def test_serve_runs_uvicorn_factory(self, runner):
        with patch("taskboard.cli.uvicorn.run") as run:
            result = runner.invoke(cli, ["serve", "--port", "9000"])

        assert result.exit_code == 0, result.output
        args, kwargs = run.call_args
        assert args == ("taskboard.app:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 9000
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["reload"] is False


class TestInitDb:
    def test_init_db_reports_created_admin(self, runner):
        admin = MagicMock(username="admin", email="admin@taskboard.local")
        db = MagicMock()
        db.__aenter__ = AsyncMock(return_value=db)
        db.__aexit__ = AsyncMock(return_value=None)
        db.ping = AsyncMock(return_value=True)

        with (
            patch("taskboard.cli.TaskboardDB", return_value=db),
            patch("taskboard.cli.init_database", new_callable=AsyncMock, return_value=admin) as init,
        ):
            result = runner.invoke(cli, ["init-db"])

        assert result.exit_code == 0, result.output
        init.assert_awaited_once()
        assert "Created admin user 'admin'" in result.output

    def test_init_db_when_admin_exists(self, runner):
        db = MagicMock()
        db.__aenter__ = AsyncMock(return_value=db)
        db.__aexit__ = AsyncMock(return_value=None)
        db.ping = AsyncMock(return_value=True)

        with (
            patch("taskboard.cli.TaskboardDB", return_value=db),
            patch("taskboard.cli.init_database", new_callable=AsyncMock, return_value=None),
        ):
            result = runner.invoke(cli, ["init-db"])

        assert result.exit_code == 0
        assert "already present" in result.output


class TestStatus:
    def test_status_ready(self, runner):
        with _patched_client(_mock_transport(200)):
            result = runner.invoke(cli, ["status", "--url", "http://api.test"])

        assert result.exit_code == 0, result.output
        assert "health: 200 healthy" in result.output
        assert "ready" in result.output

    def test_status_not_ready_exits_non_zero(self, runner):
        with _patched_client(_mock_transport(503)):
            result = runner.invoke(cli, ["status", "--url", "http://api.test"])

        assert result.exit_code == 1
        assert "not ready" in result.output

    def test_status_unreachable(self, runner):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _patched_client(httpx.MockTransport(refuse)):
            result = runner.invoke(cli, ["status", "--url", "http://api.test"])

        assert result.exit_code == 1
