"""
Tests for the ``shortlink`` console entry point.
"""

import shortlink.main as main_module
from shortlink import server
from shortlink.core.setting import settings


class TestServer:

    def test_runs_the_app_factory(self, monkeypatch):
        calls = {}

        def fake_run(target, **kwargs):
            calls.update(kwargs, target=target)

        monkeypatch.setattr(server.uvicorn, "run", fake_run)

        server.main()

        assert calls["target"] == "shortlink.main:create_app"
        assert calls["factory"] is True
        assert calls["host"] == settings.HOST
        assert calls["port"] == settings.PORT

    def test_importing_main_builds_no_app(self):
        assert not hasattr(main_module, "app")
