"""
Tests for the command-line entry point.
"""

import json

import pytest

import main


def test_parser_defaults():
    args = main.build_parser().parse_args([])

    assert args.reviews is None
    assert args.businesses is None
    assert args.on_malformed in ("fail", "skip")
    assert args.workers >= 1


def test_cli_success(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    reviews = tmp_path / "reviews.json"
    reviews.write_text(json.dumps({
        "business_id": "b1", "user_id": "u1", "date": "2024-01-01", "stars": 5,
        "text": "Fantastic!"
    }) + "\n", encoding="utf-8")
    businesses = tmp_path / "business.json"
    businesses.write_text(json.dumps({
        "business_id": "b1", "name": "Cafe", "city": "Reno", "state": "NV",
        "stars": 4.0, "review_count": 1, "categories": "Cafes"
    }) + "\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main.main([
            "--reviews", str(reviews),
            "--businesses", str(businesses),
            "--data-root", str(tmp_path / "data"),
            "--output-dir", str(tmp_path / "output"),
        ])

    assert exc.value.code == 0
    assert (tmp_path / "output" / "run_metadata.json").exists()


def test_cli_failure_exit_code(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as exc:
        main.main([
            "--reviews", str(tmp_path / "missing.json"),
            "--businesses", str(tmp_path / "missing.json"),
            "--data-root", str(tmp_path / "data"),
            "--output-dir", str(tmp_path / "output"),
        ])

    assert exc.value.code == 1
