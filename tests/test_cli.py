import json
import re
import signal

import pytest

from totpcli import main as cli
from totpcli.security.account_store import AccountStore

from conftest import DEMO_SECRET, RFC_SECRET_BASE32


def run(store_path, *args):
    return cli.main(["--store", store_path, *args])


def test_add_list_delete(store_path, capsys):
    assert run(store_path, "add", "github", "--secret", DEMO_SECRET) == 0
    assert run(store_path, "add", "aws", "--secret", RFC_SECRET_BASE32, "--digits", "8", "--algorithm", "sha256") == 0
    capsys.readouterr()

    assert run(store_path, "list", "--once") == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0].startswith("github")
    assert re.search(r"\b\d{6}\b", lines[0])
    assert lines[1].startswith("aws")
    assert re.search(r"\b\d{8}\b", lines[1])

    assert run(store_path, "delete", "github") == 0
    assert AccountStore.open(store_path).names() == ["aws"]


def test_duplicate_add_fails(store_path, capsys):
    assert run(store_path, "add", "github", "--secret", DEMO_SECRET) == 0
    assert run(store_path, "add", "github", "--secret", RFC_SECRET_BASE32) == 1
    assert "already exists" in capsys.readouterr().err
    assert len(AccountStore.open(store_path)) == 1


def test_invalid_secret_fails(store_path, capsys):
    assert run(store_path, "add", "github", "--secret", "NOT*BASE32") == 1
    err = capsys.readouterr().err
    assert "Invalid secret encoding" in err
    assert "NOT*BASE32" not in err


def test_invalid_period_fails(store_path):
    assert run(store_path, "add", "github", "--secret", DEMO_SECRET, "--period", "0") == 1


def test_delete_missing_fails(store_path, capsys):
    assert run(store_path, "delete", "nobody") == 1
    assert "No account named 'nobody'" in capsys.readouterr().err


def test_add_prompts_for_secret(store_path, monkeypatch):
    prompts = []

    def fake_getpass(prompt):
        prompts.append(prompt)
        return DEMO_SECRET

    monkeypatch.setattr(cli.getpass, "getpass", fake_getpass)
    assert run(store_path, "add", "github") == 0
    assert prompts == ["Enter Base32 secret: "]
    assert AccountStore.open(store_path).names() == ["github"]


def test_add_generate_shows_secret_once(store_path, capsys):
    assert run(store_path, "add", "new", "--generate") == 0
    out = capsys.readouterr().out
    stored = AccountStore.open(store_path).get("new")
    assert len(stored.secret) == 20

    with open(store_path, encoding="utf-8") as f:
        secret_text = json.load(f)["accounts"][0]["secret"]
    assert " ".join(secret_text[i:i + 4] for i in range(0, 32, 4)) in out


def test_weak_secret_warning(store_path, capsys):
    assert run(store_path, "add", "short", "--secret", "MFRGGZDFMY") == 0
    assert "recommended" in capsys.readouterr().err


def test_corrupt_store(store_path, capsys):
    with open(store_path, "w", encoding="utf-8") as f:
        f.write("{ definitely not json")
    assert run(store_path, "list", "--once") == 1
    assert "corrupt" in capsys.readouterr().err


def test_skip_invalid_records(store_path, capsys):
    document = {
        "version": 1,
        "accounts": [
            {"name": "good", "secret": DEMO_SECRET, "digits": 6, "period": 30, "algorithm": "SHA1"},
            {"name": "bad", "secret": DEMO_SECRET, "digits": 6, "period": 30, "algorithm": "MD5"},
        ],
    }
    with open(store_path, "w", encoding="utf-8") as f:
        json.dump(document, f)

    assert run(store_path, "list", "--once") == 1
    capsys.readouterr()

    assert run(store_path, "list", "--once", "--skip-invalid") == 0
    captured = capsys.readouterr()
    assert "Skipped record 1" in captured.err
    assert captured.out.startswith("good")


def test_live_list_exits_cleanly_on_interrupt(store_path, monkeypatch, capsys):
    run(store_path, "add", "github", "--secret", DEMO_SECRET)
    calls = []

    def interrupted_run(self, renderer):
        calls.append(len(self.accounts))
        raise KeyboardInterrupt

    # An interrupt that escapes the loop is reported as 130, a handled one as 0
    monkeypatch.setattr(cli.RefreshLoop, "run", interrupted_run)
    assert run(store_path, "list") == 130

    monkeypatch.setattr(cli.RefreshLoop, "run", lambda self, renderer: 0)
    assert run(store_path, "list") == 0
    assert calls == [1]


def test_live_list_stops_on_sigterm(store_path, monkeypatch, capsys):
    run(store_path, "add", "github", "--secret", DEMO_SECRET)
    capsys.readouterr()
    before = signal.getsignal(signal.SIGTERM)
    stop_calls = []

    def wait_then_terminate(self, seconds):
        handler = signal.getsignal(signal.SIGTERM)
        handler(signal.SIGTERM, None)
        return False

    monkeypatch.setattr(cli.RefreshLoop, "wait", wait_then_terminate)
    monkeypatch.setattr(cli.RefreshLoop, "stop", lambda self: stop_calls.append("stop"))
    assert run(store_path, "list") == 0

    # Only the loop's own interrupt handling stops it, not the signal handler
    assert stop_calls == ["stop"]
    assert capsys.readouterr().out.startswith("github")
    assert signal.getsignal(signal.SIGTERM) is before


def test_export(store_path, capsys, tmp_path):
    run(store_path, "add", "aws", "--secret", RFC_SECRET_BASE32)
    capsys.readouterr()

    png = str(tmp_path / "aws.png")
    assert run(store_path, "export", "aws", "--issuer", "Amazon", "--qr", "--png", png) == 0
    out = capsys.readouterr().out
    assert "otpauth://totp/Amazon:aws?secret=" + RFC_SECRET_BASE32 in out
    assert "GEZD GNBV" in out
    with open(png, "rb") as f:
        assert f.read(4) == b"\x89PNG"


def test_export_missing(store_path):
    assert run(store_path, "export", "nobody") == 1


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])
    assert excinfo.value.code == 0
    assert "totpcli" in capsys.readouterr().out


def test_command_required(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2
