import errno

from aiohttp import web

from mes_backend import __main__ as cli
from mes_backend import app as app_mod
from mes_backend.config import load_settings


def test_parser_maps_flags_to_settings_names():
    args = cli.build_parser().parse_args(
        ["--port", "8081", "--env", "production", "--shutdown-timeout", "2.5", "--static-root", "public"]
    )

    assert args.port == 8081
    assert args.environment == "production"
    assert args.shutdown_timeout_s == 2.5
    assert args.static_root == "public"
    assert args.host is None


def test_main_runs_with_cli_overrides(monkeypatch, tmp_path):
    captured = {}

    def _fake_run(settings):
        captured["settings"] = settings
        return 0

    monkeypatch.setattr(cli, "run", _fake_run)

    assert cli.main(["--port", "4321", "--static-root", str(tmp_path)]) == 0
    assert captured["settings"].port == 4321
    assert captured["settings"].static_root == tmp_path.resolve()


def test_run_reports_port_in_use(monkeypatch, tmp_path):
    def _busy(*_args, **_kwargs):
        raise OSError(errno.EADDRINUSE, "Address already in use")

    monkeypatch.setattr(web, "run_app", _busy)

    assert app_mod.run(load_settings(static_root=tmp_path, port=3999)) == 1


def test_run_passes_shutdown_timeout(monkeypatch, tmp_path):
    seen = {}

    def _fake_run_app(app, **kwargs):
        seen.update(kwargs)

    monkeypatch.setattr(web, "run_app", _fake_run_app)

    assert app_mod.run(load_settings(static_root=tmp_path, port=3998, shutdown_timeout_s=1.5)) == 0
    assert seen["port"] == 3998
    assert seen["shutdown_timeout"] == 1.5
