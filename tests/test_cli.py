"""
Tests for the command line interface (replay mode and pass parsing).
"""

import json

import pytest

from proteinscore.cli import load_passes, parse_pass, run
from proteinscore.pipeline import TextFragment


def test_parse_pass_lines():
    assert parse_pass(["Nutrition Facts", "Calories 140"]) == (
        None,
        "lines",
        ["Nutrition Facts", "Calories 140"],
    )


def test_parse_pass_fragment_objects():
    entry = {
        "t": 1.5,
        "fragments": [
            {"text": "Calories", "vertical_center": 0.7, "horizontal_start": 0.1},
            ["140", 0.69, 0.8],
        ],
    }

    timestamp, kind, payload = parse_pass(entry)

    assert timestamp == 1.5
    assert kind == "fragments"
    assert payload == [
        TextFragment("Calories", 0.7, 0.1),
        TextFragment("140", 0.69, 0.8),
    ]


def test_parse_pass_rejects_malformed_fragment():
    with pytest.raises(ValueError):
        parse_pass([{"text": "Calories"}])


@pytest.mark.parametrize("timestamp", ["soon", True, [1], 10**400, float("inf")])
def test_parse_pass_rejects_bad_timestamp(timestamp):
    with pytest.raises(ValueError):
        parse_pass({"t": timestamp, "lines": ["Nutrition Facts"]})


def test_parse_pass_integer_timestamp():
    assert parse_pass({"t": 2, "lines": ["x"]}) == (2.0, "lines", ["x"])


def test_load_passes_wrapped_object(tmp_path):
    path = tmp_path / "passes.json"
    path.write_text(json.dumps({"passes": [{"lines": ["Nutrition Facts"]}]}))

    assert load_passes(path) == [(None, "lines", ["Nutrition Facts"])]


def test_replay_prints_smoothed_results(tmp_path, capsys):
    """
    Test the replay command end to end.

    Verifies:
    - Every pass is reported
    - The final result is printed as JSON
    """
    passes = [
        ["Nutrition Facts", "Calories 140", "Protein 20g"],
        ["Nutrition Facts", "Calories"],
        {
            "fragments": [
                {"text": "Nutrition Facts", "vertical_center": 0.9, "horizontal_start": 0.1},
                {"text": "Protein", "vertical_center": 0.4, "horizontal_start": 0.1},
                {"text": "Calories 140", "vertical_center": 0.7, "horizontal_start": 0.1},
                {"text": "20g", "vertical_center": 0.405, "horizontal_start": 0.6},
            ]
        },
    ]
    path = tmp_path / "passes.json"
    path.write_text(json.dumps(passes))

    assert run(["replay", str(path)]) == 0

    out = capsys.readouterr().out
    assert "Replaying 3 passes" in out
    assert out.count("14.3 g protein / 100 cal") >= 2
    assert '"tier": "good"' in out


def test_replay_missing_file(tmp_path, capsys):
    assert run(["replay", str(tmp_path / "missing.json")]) == 1
    assert "File not found" in capsys.readouterr().out


def test_replay_invalid_json(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text("{not json")

    assert run(["replay", str(path)]) == 1
    assert "Could not load passes" in capsys.readouterr().out


def test_replay_bad_timestamp(tmp_path, capsys):
    path = tmp_path / "passes.json"
    path.write_text(json.dumps([{"t": "soon", "lines": ["Nutrition Facts"]}]))

    assert run(["replay", str(path)]) == 1
    assert "Could not load passes" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert run([]) == 1
    assert "usage" in capsys.readouterr().out
