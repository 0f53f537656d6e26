import uvicorn

from barbershop.__main__ import main


def test_main_serves_the_app(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    main(["--port", "9000"])

    assert calls == [("barbershop.main:app", {"host": "127.0.0.1", "port": 9000, "reload": False})]
