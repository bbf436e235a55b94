"""
Tests for the command-line entry point.
"""
import pytest
import sys
import os
import yaml

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import main as main_module
from main import load_tournament_file


def _write(tmp_path, data):
    path = tmp_path / "tournament.yaml"
    path.write_text(yaml.dump(data, default_flow_style=False))
    return str(path)


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, 'argv', ['main.py', *args])
    return main_module.main()


class TestLoadTournamentFile:

    def test_defaults_filled(self, tmp_path):
        path = _write(tmp_path, {'players': ['Ann', ' Bob ', '', 'Cid']})
        settings, players, scores = load_tournament_file(path)
        assert players == ['Ann', 'Bob', 'Cid']
        assert settings['courts'] == 2
        assert scores == []

    def test_unknown_keys_ignored(self, tmp_path):
        path = _write(tmp_path, {'players': ['A'], 'courts': 3, 'colour': 'blue'})
        settings, _, _ = load_tournament_file(path)
        assert settings['courts'] == 3
        assert 'colour' not in settings


class TestMain:

    def test_doubles_rounds_printed(self, tmp_path, monkeypatch, capsys):
        path = _write(tmp_path, {
            'mode': 'americano',
            'courts': 2,
            'seed': 5,
            'players': [f"P{i}" for i in range(1, 10)],
            'scores': [{'round': 1, 'court': 1, 'score_a': 11, 'score_b': 7}],
        })
        assert _run(monkeypatch, path, '--rounds', '3') == 0

        out = capsys.readouterr().out
        assert '# Round 1' in out
        assert '# Round 3' in out
        assert '(11-7)' in out
        assert '--- Ranking ---' in out

    def test_fixed_team_csv(self, tmp_path, monkeypatch, capsys):
        path = _write(tmp_path, {'mode': 'teams', 'courts': 2, 'players': ['A', 'B', 'C', 'D']})
        csv_path = tmp_path / "out.csv"
        assert _run(monkeypatch, path, '--csv', str(csv_path)) == 0

        out = capsys.readouterr().out
        assert '--- Standings ---' in out
        assert 'SCOREBOARD' in csv_path.read_text(encoding='utf-8')

    def test_error_reported(self, tmp_path, monkeypatch, capsys):
        path = _write(tmp_path, {'players': ['A', 'B']})
        assert _run(monkeypatch, path) == 1
        assert 'Not enough players' in capsys.readouterr().err

    def test_scores_beyond_rounds_noted(self, tmp_path, monkeypatch, capsys):
        path = _write(tmp_path, {
            'mode': 'americano',
            'courts': 2,
            'seed': 5,
            'players': [f"P{i}" for i in range(1, 10)],
            'scores': [
                {'round': 1, 'court': 1, 'score_a': 11, 'score_b': 7},
                {'round': 2, 'court': 1, 'score_a': 9, 'score_b': 11},
            ],
        })
        assert _run(monkeypatch, path, '--rounds', '1') == 0

        captured = capsys.readouterr()
        assert 'ignored 1 score entries for rounds after round 1' in captured.err
        assert '# Round 2' not in captured.out
