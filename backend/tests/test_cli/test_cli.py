"""Tests for the markforge command line."""

import json

from markforge.cli import build_parser, main
from markforge.engine.parameters import derive_parameters
from markforge.models.records import HashRecord
from tests.conftest import ABC_DIGEST, ACME_DIGEST, ACME_MESSAGE, CIRCLE_PATH_SVG, ZERO_DIGEST


def test_digest_command(capsys):
    assert main(["digest", "abc"]) == 0
    assert capsys.readouterr().out.strip() == ABC_DIGEST


def test_digest_command_pure_backend(capsys):
    assert main(["digest", "abc", "--backend", "pure"]) == 0
    assert capsys.readouterr().out.strip() == ABC_DIGEST


def test_params_json(capsys):
    code = main(
        ["params", "Acme", "--category", "technology", "--salt", "abc123", "--timestamp", "1700000000000", "--json"]
    )
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["input"] == ACME_MESSAGE
    assert payload["digest"] == ACME_DIGEST
    assert payload["params"] == derive_parameters(ACME_DIGEST).to_dict()


def test_params_text(capsys):
    main(["params", "acme", "--salt", "abc123", "--timestamp", "5"])
    out = capsys.readouterr().out
    assert out.startswith("input   acme|general|5|abc123\n")
    assert "element_count" in out
    assert "symmetry_type" in out


def test_params_accepts_any_category(capsys):
    assert build_parser().parse_args(["params", "acme", "--category", "space"]).category == "space"
    main(["params", "acme", "--category", "space", "--salt", "s", "--timestamp", "1"])
    assert capsys.readouterr().out.startswith("input   acme|space|1|s\n")


def test_score_command(tmp_path, capsys):
    svg = tmp_path / "logo.svg"
    svg.write_text(CIRCLE_PATH_SVG, encoding="utf-8")
    assert main(["score", str(svg), "--digest", ZERO_DIGEST]) == 0
    out = capsys.readouterr().out
    assert out.startswith("score  85\n")
    assert "below 85: complexity = 78" in out
    assert "path_smoothness" in out


def test_score_command_bad_input(tmp_path, capsys):
    assert main(["score", str(tmp_path / "missing.svg"), "--digest", ZERO_DIGEST]) == 2
    assert main(["score", str(tmp_path / "missing.svg"), "--digest", "xyz"]) == 2
    assert "error:" in capsys.readouterr().err


def test_registry_list_and_clear(registry, capsys):
    registry.record(
        HashRecord(
            digest=ABC_DIGEST,
            brand_name="acme",
            algorithm_id="rings",
            variant_index=2,
            created_at=0,
            quality_score=91,
        )
    )

    assert main(["registry", "list", "ACME"], registry=registry) == 0
    out = capsys.readouterr().out
    assert ABC_DIGEST[:16] in out
    assert "v2" in out
    assert "q=91" in out
    assert out.rstrip().endswith("1 record(s)")

    assert main(["registry", "list", "globex"], registry=registry) == 0
    assert capsys.readouterr().out.strip() == "0 record(s)"

    assert main(["registry", "clear"], registry=registry) == 0
    assert len(registry) == 0
