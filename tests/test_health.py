def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
    assert client.get("/health").status_code == 200


def test_unknown_route_uses_error_payload(client):
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_run_serves_app_with_uvicorn(monkeypatch):
    from kanban import main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **options: calls.append((app, options)))
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9000")
    main.run()
    assert calls == [("kanban.main:app", {"host": "0.0.0.0", "port": 9000})]
