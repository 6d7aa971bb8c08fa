"""Smoke test for the end-to-end demo in mock mode."""

from transit_wallet import demo


def test_demo_runs_against_mocks(capsys) -> None:
    """Given mock mode, when running the demo, then every section completes."""
    demo.main(use_mock=True)

    out = capsys.readouterr().out
    assert "already exists!" in out
    assert "does-not-exist not found!" in out
    assert "https://pay.google.com/gp/v/save/" in out
    assert "Batch insert response" in out
    assert "DEMO COMPLETE" in out
