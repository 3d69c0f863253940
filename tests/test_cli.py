"""Tests for the command-line entry point."""

import json

from quoting.cli import main


def test_decide(capsys):
    code = main(["decide", "Need colorbond fencing, 20m, 1.8m height, easy access"])
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["action"] == "range"
    assert "$1440–$1920" in data["message"]


def test_decide_pass(capsys):
    assert main(["decide", "hello"]) == 0
    assert json.loads(capsys.readouterr().out) == {"action": "pass"}


def test_quote(capsys):
    assert main(["quote", "retaining wall 12m, budget $9,000, rocky and steep"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["lead"]["service"] == "retaining_walls"
    assert data["lead"]["access"] == "restricted"
    assert data["decision"] == {"allowed": True}
    # 12 * 350 * 1.0 * 1.15 = 4830 (ground is never extracted)
    assert data["quote"]["raw"] == 4830


def test_custom_config(tmp_path, core_doc, capsys):
    core_doc["pricing_engine"]["base_rates"]["colorbond_fencing"] = 100
    path = tmp_path / "core.json"
    path.write_text(json.dumps(core_doc))

    assert main(["--config", str(path), "decide", "colorbond fence 20m"]) == 0
    assert "$1800–$2400" in json.loads(capsys.readouterr().out)["message"]


def test_bad_config(tmp_path):
    path = tmp_path / "core.json"
    path.write_text(json.dumps({"business_rules": {"supported_services": []}}))
    assert main(["--config", str(path), "decide", "colorbond fence 20m"]) == 1


def test_send_test_without_token():
    assert main(["send-test", "--recipient", "psid-1"]) == 1
