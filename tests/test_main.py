import asyncio
import json

import pytest

import main
from conftest import FakeEngine


@pytest.fixture
def oracle(monkeypatch):
    """Route the CLI's engine through a FakeEngine keyed on the claim."""
    replies = {}

    class ScriptedEngine(FakeEngine):
        def __init__(self, model=None, base_url=None, timeout=None):
            super().__init__(timeout=timeout or 5.0)

        def request_adversarial_review(self, claim):
            self.content = replies.get(claim, "not json")
            return super().request_adversarial_review(claim)

    monkeypatch.setattr(main, "LLMEngine", ScriptedEngine)
    monkeypatch.setattr("configs.config.Config.PLACEHOLDER_DELAY", 0.0)
    return replies


def test_single_claim_proceeds(oracle, capsys):
    oracle["The sky is blue."] = '{"adversarial_verdict": "PASS"}'
    code = asyncio.run(main.main(["The sky is blue."]))
    out = capsys.readouterr().out
    assert code == main.EXIT_PROCEED
    assert "VERDICT: PROCEED" in out


def test_single_claim_halts_with_reason(oracle, capsys):
    oracle["trust me"] = '{"adversarial_verdict": "FAIL", "failure_reason": "Manipulative"}'
    code = asyncio.run(main.main(["trust me"]))
    out = capsys.readouterr().out
    assert code == main.EXIT_HALT
    assert "Failure Reason: Manipulative" in out
    assert "VERDICT: HALT" in out


def test_json_output(oracle, capsys):
    oracle["x"] = '{"adversarial_verdict": "PASS"}'
    asyncio.run(main.main(["x", "--json"]))
    payload = json.loads(capsys.readouterr().out)
    assert payload["verdict"] == "PROCEED"
    assert [s["status"] for s in payload["steps"]] == ["completed"] * 5


def test_claims_file(oracle, tmp_path, capsys):
    oracle["safe"] = '{"adversarial_verdict": "PASS"}'
    path = tmp_path / "claims.json"
    path.write_text(json.dumps(["safe", "garbled", "  "]), encoding="utf-8")

    code = asyncio.run(main.main(["--claims-file", str(path)]))
    out = capsys.readouterr().out

    assert code == main.EXIT_REJECTED
    assert "PROCEED    | safe" in out
    assert "HALT       | garbled" in out
    assert "REJECTED   |" in out


def test_load_claims_requires_list_of_strings(tmp_path):
    path = tmp_path / "claims.json"
    path.write_text(json.dumps({"claim": "x"}), encoding="utf-8")
    with pytest.raises(ValueError):
        main.load_claims(str(path))
    with pytest.raises(FileNotFoundError):
        main.load_claims(str(tmp_path / "missing.json"))
