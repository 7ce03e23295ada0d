import json

from main import main


def test_main_runs_offline_and_prints_report(workspace, monkeypatch, capsys):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    # Every gap code already has a cached lookup, so no request is made
    for code in ("XXX", "QQQ", "WWW"):
        (workspace / "data" / f"{code}.json").write_text('{"airports": []}', encoding="utf-8")

    exit_code = main(
        [
            "--data-dir", str(workspace / "data"),
            "--extra-airports", str(workspace / "extra_airports.csv"),
            "--extra-routes", str(workspace / "extra_routes.csv"),
            "--output-airports", str(workspace / "airports.csv"),
            "--output-routes", str(workspace / "earthroutes.csv"),
            "--offline",
            "--interval", "0",
        ]
    )

    report = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert report["pending_fetches"] == 0
    assert report["still_unknown"] == 2
    assert (workspace / "earthroutes.csv").exists()


def test_main_reports_missing_inputs(tmp_path):
    exit_code = main(["--data-dir", str(tmp_path / "data"), "--offline"])

    assert exit_code == 1
