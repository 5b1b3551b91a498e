"""
tests/test_run.py - Tests for the run.py command line
"""

import json

import run


class TestCommandLine:
    def test_overrides(self):
        args = run.parse_args(["--width", "3", "--threshold", "2", "--no-liars", "--high-willingness", "0.9"])
        params = run.overrides_from(args)
        assert params == {
            "width": 3,
            "liar_detection_threshold": 2,
            "include_liars": False,
            "high_willingness_percentage": 0.9,
        }

    def test_no_overrides_by_default(self):
        assert run.overrides_from(run.parse_args([])) == {}

    def test_single_run_prints_summary(self, capsys):
        summary = run.run_cli(["--preset", "high_willingness_many_liars", "--cycles", "8", "--seed", "2"])
        printed = json.loads(capsys.readouterr().out)
        assert printed == summary
        assert "total_liar_cost" in summary

    def test_sweep_runs_every_preset(self, capsys):
        results = run.run_cli(["--sweep", "--cycles", "4", "--seed", "2"])
        assert set(results) == set(run.PRESETS)

    def test_extended_report(self, capsys):
        summary = run.run_cli(["--extended", "--cycles", "8", "--seed", "2"])
        printed = json.loads(capsys.readouterr().out)
        assert printed == summary
        for key in ("total_evictions", "total_left_without_parking", "total_cars_flagged"):
            assert key in summary

    def test_console_entry_returns_none(self, capsys):
        """The console script exits with status 0 only when main returns None."""
        assert run.main(["--cycles", "4", "--seed", "2"]) is None
        assert "total_refusals" in json.loads(capsys.readouterr().out)
