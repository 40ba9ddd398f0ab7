import pytest

import run_scenarios as cli
from storefront_e2e.models import ScenarioResult
from storefront_e2e.scenarios import SCENARIOS


async def test_list_prints_every_scenario(capsys):
    assert await cli.main(["--list"]) == 0
    out = capsys.readouterr().out
    for name in SCENARIOS:
        assert name in out


async def test_exit_code_reflects_failures(monkeypatch, capsys):
    seen = {}

    async def fake_run(names, config):
        seen["names"] = names
        seen["config"] = config
        return [
            ScenarioResult(name="empty_cart_state", passed=True, elapsed_s=1.0),
            ScenarioResult(name="full_cart_flow", passed=False, elapsed_s=2.0, error="PollTimeoutError: boom"),
        ]

    monkeypatch.setattr(cli, "run_scenarios", fake_run)
    code = await cli.main(["--scenario", "empty_cart_state", "--scenario", "full_cart_flow",
                           "--base-url", "http://localhost:3000/", "--headed"])

    assert code == 1
    assert seen["names"] == ["empty_cart_state", "full_cart_flow"]
    assert seen["config"].base_url == "http://localhost:3000/"
    assert seen["config"].headless is False
    out = capsys.readouterr().out
    assert "FAIL full_cart_flow" in out
    assert "1/2 passed" in out


def test_rejects_unknown_scenario():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--scenario", "nope"])
