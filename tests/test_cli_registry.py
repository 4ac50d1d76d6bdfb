"""CLI tests for the verify and registry commands."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from agent_registry_zk import __version__, cli
from agent_registry_zk.zk_core.test_vectors.groth16_vectors import build_instance, to_snarkjs

AGENT_A = "01" * 32
AGENT_B = "02" * 32


@pytest.fixture(scope="module")
def artifacts():
    return to_snarkjs(build_instance([5, 6, 1]))


def _write_artifacts(tmp_path, artifacts, public=None):
    paths = []
    for name, content in (
        ("verification_key.json", artifacts["vk"]),
        ("proof.json", artifacts["proof"]),
        ("public.json", public if public is not None else artifacts["public"]),
    ):
        path = tmp_path / name
        path.write_text(json.dumps(content))
        paths.append(str(path))
    return paths


def test_version() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_verify_valid_proof(tmp_path, artifacts) -> None:
    runner = CliRunner()
    result = runner.invoke(cli.main, ["verify", *_write_artifacts(tmp_path, artifacts)])
    assert result.exit_code == 0, result.output
    assert "PROOF IS VALID" in result.output
    assert "Non-Member Status: True" in result.output


def test_verify_wrong_flag(tmp_path, artifacts) -> None:
    runner = CliRunner()
    paths = _write_artifacts(tmp_path, artifacts, public=["5", "6", "0"])
    result = runner.invoke(cli.main, ["verify", *paths])
    assert result.exit_code == 1
    assert "PROOF IS INVALID" in result.output


def test_verify_malformed_public(tmp_path, artifacts) -> None:
    runner = CliRunner()
    paths = _write_artifacts(tmp_path, artifacts, public=["5", "not-a-number", "1"])
    result = runner.invoke(cli.main, ["verify", *paths])
    assert result.exit_code == 1
    assert "Malformed input" in result.output


def test_verify_generic_wrong_arity(tmp_path, artifacts) -> None:
    runner = CliRunner()
    paths = _write_artifacts(tmp_path, artifacts, public=["5", "6"])
    result = runner.invoke(cli.main, ["verify", "--generic", *paths])
    assert result.exit_code == 1
    assert "PROOF IS MALFORMED" in result.output


def test_verify_missing_file(tmp_path) -> None:
    runner = CliRunner()
    missing = str(tmp_path / "missing.json")
    result = runner.invoke(cli.main, ["verify", missing, missing, missing])
    assert result.exit_code != 0


def test_registry_root() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.main, ["registry", "root", "--agent", AGENT_A, "--agent", AGENT_B, "--depth", "4"]
    )
    assert result.exit_code == 0, result.output
    assert "Agents: 2 / 16" in result.output
    assert "Root: 0x" in result.output


def test_registry_check_registered() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.main, ["registry", "check", AGENT_A, "--agent", AGENT_A])
    assert result.exit_code == 1
    assert "already registered" in result.output


def test_registry_check_unregistered_description() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.main,
        ["registry", "check", "Code Review Bot", "--agent", AGENT_A, "--depth", "3"],
    )
    assert result.exit_code == 0, result.output
    assert "Agent not registered" in result.output
    assert "Empty slot: 1" in result.output
    assert "Path indices: [1, 0, 0]" in result.output


def test_registry_rejects_bad_agent_hash() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.main, ["registry", "root", "--agent", "zz"])
    assert result.exit_code != 0


def test_registry_rejects_bad_depth() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.main, ["registry", "root", "--depth", "0"])
    assert result.exit_code != 0


def test_registry_register_reports_slots() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.main, ["registry", "register", AGENT_B, AGENT_B, "--agent", AGENT_A, "--depth", "2"]
    )
    assert result.exit_code == 0, result.output
    assert "(slot 1)" in result.output
    assert "(unchanged)" in result.output
    assert "Agents: 2 / 4" in result.output


def test_registry_register_full_tree() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.main, ["registry", "register", AGENT_A, AGENT_B, "03" * 32, "--depth", "1"]
    )
    assert result.exit_code == 1
    assert "full" in result.output


def test_disclaimer() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.main, ["disclaimer"])
    assert result.exit_code == 0
    assert "cryptographic review" in result.output
