import sys
import json
import pytest
from unittest.mock import patch

from cf_ddns import __main__ as cli
from cf_ddns.config import Config
from cf_ddns.logger import setup_logging
from cf_ddns.ddns_controller import DDNSController


# ========
# FIXTURES
# ========
@pytest.fixture(autouse=True)
def isolated_files(tmp_path, monkeypatch):
    """Keep the log file out of the user's home directory"""
    monkeypatch.setattr(Config, "LOG_FILE", tmp_path / "cf_ddns.log")
    yield
    setup_logging()

@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"domains": [
        {"domain": "a.example.com", "cf_token": "t", "zoneid": "z"},
        {"domain": "b.example.com", "cf_token": "t", "zoneid": "z"},
    ]}))
    return path

@pytest.fixture
def controller_run():
    with patch.object(DDNSController, "run", return_value=True) as mock_run:
        yield mock_run


# =========================
# TEST GROUP: Sync Command
# =========================
def test_missing_config_exits_nonzero(tmp_path, controller_run):
    assert cli.main(["-c", str(tmp_path / "missing.json")]) == 1
    controller_run.assert_not_called()

def test_malformed_config_exits_nonzero(tmp_path, controller_run):
    path = tmp_path / "config.json"
    path.write_text("{oops")

    assert cli.main(["-c", str(path)]) == 1
    controller_run.assert_not_called()

def test_sync_all_domains_both_families(config_file, controller_run):
    assert cli.main(["-c", str(config_file)]) == 0

    domains, versions = controller_run.call_args.args
    assert [d.domain for d in domains] == ["a.example.com", "b.example.com"]
    assert versions == ("ipv4", "ipv6")

def test_sync_single_domain_ipv6_only(config_file, controller_run):
    assert cli.main(["-c", str(config_file), "-d", "b.example.com", "-6"]) == 0

    domains, versions = controller_run.call_args.args
    assert [d.domain for d in domains] == ["b.example.com"]
    assert versions == ("ipv6",)

def test_unknown_domain_exits_nonzero(config_file, controller_run):
    assert cli.main(["-c", str(config_file), "-d", "zzz.example.com"]) == 1
    controller_run.assert_not_called()

def test_update_failure_exits_nonzero(config_file, controller_run):
    controller_run.return_value = False

    assert cli.main(["-c", str(config_file)]) == 1

def test_missing_dependency_exits_nonzero(config_file, controller_run, monkeypatch, capsys):
    monkeypatch.setitem(sys.modules, "requests", None)   # import now fails

    assert cli.main(["-c", str(config_file)]) == 1
    assert "Missing dependency: requests" in capsys.readouterr().out
    controller_run.assert_not_called()

def test_missing_dotenv_reported_before_any_import(run_python):
    """A fresh interpreter without python-dotenv logs the gap instead of crashing"""
    result = run_python(
        "import sys\n"
        "sys.modules['dotenv'] = None\n"
        "from cf_ddns.__main__ import main\n"
        "sys.exit(main(['-c', 'missing.json']))\n"
    )

    assert result.returncode == 1
    assert "Missing dependency: dotenv" in result.stdout
    assert "Traceback" not in result.stderr

def test_verbose_and_quiet_are_exclusive(config_file):
    with pytest.raises(SystemExit) as exc:
        cli.main(["-c", str(config_file), "-v", "-q"])
    assert exc.value.code == 2


# =============================
# TEST GROUP: Add-domain Command
# =============================
def test_add_domain(config_file, controller_run):
    assert cli.main([
        "-c", str(config_file), "-a", "c.example.com",
        "--token", "tok", "--zone-id", "zone", "--proxied", "--ttl", "300",
    ]) == 0

    entries = json.loads(config_file.read_text())["domains"]
    assert entries[-1] == {
        "domain": "c.example.com", "cf_token": "tok", "zoneid": "zone",
        "proxied": True, "ttl": 300,
    }
    controller_run.assert_not_called()

def test_add_existing_domain_rejected(config_file):
    before = config_file.read_bytes()

    assert cli.main(["-c", str(config_file), "-a", "a.example.com"]) == 1
    assert config_file.read_bytes() == before

def test_add_domain_bad_ttl(config_file):
    assert cli.main(["-c", str(config_file), "-a", "c.example.com", "--ttl", "5"]) == 1
