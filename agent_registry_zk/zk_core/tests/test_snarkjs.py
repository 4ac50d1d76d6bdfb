"""
Tests for the snarkjs JSON loaders.
"""

import copy
import json

import pytest

from agent_registry_zk.zk_core.config import CURVE_ORDER
from agent_registry_zk.zk_core.curve import G1Point, G2Point
from agent_registry_zk.zk_core.exceptions import MalformedInputError
from agent_registry_zk.zk_core.snarkjs import (
    load_proof,
    load_public_signals,
    load_verification_key,
    parse_g1,
    parse_g2,
)
from agent_registry_zk.zk_core.test_vectors.groth16_vectors import build_instance, to_snarkjs


@pytest.fixture(scope="module")
def instance():
    return build_instance([11, 22, 1])


@pytest.fixture(scope="module")
def artifacts(instance):
    return to_snarkjs(instance)


def test_load_verification_key_from_object(instance, artifacts):
    assert load_verification_key(artifacts["vk"]) == instance.vk


def test_load_from_files(tmp_path, instance, artifacts):
    vk_path = tmp_path / "verification_key.json"
    proof_path = tmp_path / "proof.json"
    public_path = tmp_path / "public.json"
    vk_path.write_text(json.dumps(artifacts["vk"]))
    proof_path.write_text(json.dumps(artifacts["proof"]))
    public_path.write_text(json.dumps(artifacts["public"]))

    assert load_verification_key(str(vk_path)) == instance.vk
    assert load_proof(proof_path) == instance.proof
    assert load_public_signals(public_path) == [11, 22, 1]


def test_load_proof_accepts_nested_object(instance, artifacts):
    assert load_proof({"proof": artifacts["proof"]}) == instance.proof


def test_missing_file_is_malformed(tmp_path):
    with pytest.raises(MalformedInputError):
        load_proof(tmp_path / "missing.json")


def test_invalid_json_is_malformed(tmp_path):
    path = tmp_path / "proof.json"
    path.write_text("{not json")
    with pytest.raises(MalformedInputError):
        load_proof(path)


def test_unsupported_protocol(artifacts):
    vk = copy.deepcopy(artifacts["vk"])
    vk["protocol"] = "plonk"
    with pytest.raises(MalformedInputError, match="protocol"):
        load_verification_key(vk)


def test_unsupported_curve(artifacts):
    vk = copy.deepcopy(artifacts["vk"])
    vk["curve"] = "bls12381"
    with pytest.raises(MalformedInputError, match="curve"):
        load_verification_key(vk)


def test_n_public_mismatch(artifacts):
    vk = copy.deepcopy(artifacts["vk"])
    vk["nPublic"] = 2
    with pytest.raises(MalformedInputError, match="nPublic"):
        load_verification_key(vk)


def test_missing_field(artifacts):
    vk = copy.deepcopy(artifacts["vk"])
    del vk["vk_delta_2"]
    with pytest.raises(MalformedInputError, match="vk_delta_2"):
        load_verification_key(vk)


def test_off_curve_point_is_malformed(artifacts):
    proof = copy.deepcopy(artifacts["proof"])
    proof["pi_a"][1] = str(int(proof["pi_a"][1]) + 1)
    with pytest.raises(MalformedInputError):
        load_proof(proof)


class TestPointParsing:
    def test_g1_affine_and_hex(self):
        assert parse_g1(["1", "2", "1"]) == G1Point.generator()
        assert parse_g1(["0x1", "0x2"]) == G1Point.generator()
        assert parse_g1([1, 2]) == G1Point.generator()

    def test_g1_infinity(self):
        assert parse_g1(["0", "1", "0"]).is_identity()
        assert parse_g1(["0", "0"]).is_identity()

    def test_g1_projective_z_rejected(self):
        with pytest.raises(MalformedInputError, match="affine"):
            parse_g1(["1", "2", "2"])

    def test_g1_bad_number(self):
        with pytest.raises(MalformedInputError):
            parse_g1(["one", "2"])
        with pytest.raises(MalformedInputError):
            parse_g1([True, 2])

    def test_g2_generator(self):
        g = G2Point.generator()
        value = [[str(g.x[0]), str(g.x[1])], [str(g.y[0]), str(g.y[1])], ["1", "0"]]
        assert parse_g2(value) == g

    def test_g2_infinity(self):
        assert parse_g2([["0", "0"], ["1", "0"], ["0", "0"]]).is_identity()

    def test_g2_bad_shape(self):
        with pytest.raises(MalformedInputError):
            parse_g2([["1"], ["2", "3"]])


class TestPublicSignals:
    def test_accepts_wrapped_object(self):
        assert load_public_signals({"publicSignals": ["1", "2"]}) == [1, 2]

    def test_rejects_out_of_field(self):
        with pytest.raises(MalformedInputError, match="not in Fr"):
            load_public_signals([str(CURVE_ORDER)])

    def test_rejects_non_list(self):
        with pytest.raises(MalformedInputError):
            load_public_signals("42")
