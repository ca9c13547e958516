import cli


class _Resp:
    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    @property
    def ok(self):
        return self.status_code < 400


def test_check_prints_roster_and_overlap(tmp_path, capsys):
    path = tmp_path / "config.toml"
    path.write_text('up_services = ["a", "b"]\ndown_services = ["b"]\n', encoding="utf-8")
    assert cli.main(["check", str(path)]) == 0
    out = capsys.readouterr().out
    assert "UP SERVICES (2):" in out
    assert "warning: listed as both up and down (reported down): b" in out


def test_check_reports_errors(tmp_path, capsys):
    assert cli.main(["check", str(tmp_path / "missing.toml")]) == 1
    assert "error:" in capsys.readouterr().err


def test_metrics_filter(monkeypatch, capsys):
    body = 'service_monitor_up{service="a"} 1.0\nservice_monitor_error_rate 0.0\n'
    monkeypatch.setattr(cli.requests, "get", lambda url, timeout: _Resp(body))
    assert cli.main(["metrics", "--filter", "service_monitor_up"]) == 0
    assert capsys.readouterr().out == 'service_monitor_up{service="a"} 1.0\n'


def test_probe_tallies_status_codes(monkeypatch, capsys):
    codes = iter([200, 500, 200, 200])
    monkeypatch.setattr(cli.requests, "get", lambda url, timeout: _Resp(status_code=next(codes)))
    assert cli.main(["--api", "http://monitor:8080/", "probe", "--count", "4"]) == 0
    assert capsys.readouterr().out == "200: 3\n500: 1\n"


def test_config_returns_nonzero_on_server_error(monkeypatch, capsys):
    seen = []

    def fake_get(url, timeout):
        seen.append(url)
        return _Resp("Error loading config: boom", status_code=500)

    monkeypatch.setattr(cli.requests, "get", fake_get)
    assert cli.main(["config"]) == 1
    assert seen == ["http://localhost:8080/config"]
    assert "boom" in capsys.readouterr().out
