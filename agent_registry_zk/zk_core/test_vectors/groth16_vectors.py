# -*- coding: utf-8 -*-
"""
Toy Groth16 instances for tests.

A real prover is out of scope, so proofs are built directly from known
trapdoor scalars: with A = a*G1, B = b*G2 and C = c*G1 where

    c = (a*b - alpha*beta - s*gamma) / delta   (mod r)
    s = u_0 + sum_i x_i * u_{i+1}              (IC[i] = u_i * G1)

the Groth16 equation e(A, B) = e(alpha, beta) e(acc, gamma) e(C, delta)
holds. These keys are insecure by construction; use them only in tests.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..config import CURVE_ORDER
from ..curve import G1Point, G2Point
from ..groth16 import Groth16Proof, VerificationKey

ALPHA = 0x1D1A
BETA = 0x2B7F
GAMMA = 0x3C61
DELTA = 0x4E07
IC_SCALARS_BASE = 0x51F3
PROOF_A = 0x6A09E667
PROOF_B = 0xBB67AE85


@dataclass(frozen=True)
class ToyInstance:
    vk: VerificationKey
    proof: Groth16Proof
    public_inputs: List[int]


def _ic_scalars(count: int) -> List[int]:
    return [IC_SCALARS_BASE + 97 * i for i in range(count)]


def build_verification_key(num_public_inputs: int) -> VerificationKey:
    g1 = G1Point.generator()
    g2 = G2Point.generator()
    return VerificationKey(
        alpha=g1 * ALPHA,
        beta=g2 * BETA,
        gamma=g2 * GAMMA,
        delta=g2 * DELTA,
        ic=tuple(g1 * u for u in _ic_scalars(num_public_inputs + 1)),
    )


def build_proof(public_inputs: Sequence[int]) -> Groth16Proof:
    """Proof for `public_inputs` against build_verification_key(len(public_inputs))."""
    u = _ic_scalars(len(public_inputs) + 1)
    s = (u[0] + sum(x * ui for x, ui in zip(public_inputs, u[1:]))) % CURVE_ORDER
    numerator = (PROOF_A * PROOF_B - ALPHA * BETA - s * GAMMA) % CURVE_ORDER
    c = numerator * pow(DELTA, -1, CURVE_ORDER) % CURVE_ORDER
    return Groth16Proof(
        pi_a=G1Point.generator() * PROOF_A,
        pi_b=G2Point.generator() * PROOF_B,
        pi_c=G1Point.generator() * c,
    )


def build_instance(public_inputs: Sequence[int]) -> ToyInstance:
    inputs = list(public_inputs)
    return ToyInstance(
        vk=build_verification_key(len(inputs)),
        proof=build_proof(inputs),
        public_inputs=inputs,
    )


def _g1_json(point: G1Point) -> List[str]:
    if point.is_identity():
        return ["0", "1", "0"]
    return [str(point.x), str(point.y), "1"]


def _g2_json(point: G2Point) -> List[List[str]]:
    if point.is_identity():
        return [["0", "0"], ["1", "0"], ["0", "0"]]
    return [
        [str(point.x[0]), str(point.x[1])],
        [str(point.y[0]), str(point.y[1])],
        ["1", "0"],
    ]


def to_snarkjs(instance: ToyInstance) -> Dict[str, Any]:
    """snarkjs-shaped JSON objects: {"vk": ..., "proof": ..., "public": ...}."""
    vk = instance.vk
    proof = instance.proof
    return {
        "vk": {
            "protocol": "groth16",
            "curve": "bn128",
            "nPublic": vk.num_public_inputs,
            "vk_alpha_1": _g1_json(vk.alpha),
            "vk_beta_2": _g2_json(vk.beta),
            "vk_gamma_2": _g2_json(vk.gamma),
            "vk_delta_2": _g2_json(vk.delta),
            "IC": [_g1_json(point) for point in vk.ic],
        },
        "proof": {
            "pi_a": _g1_json(proof.pi_a),
            "pi_b": _g2_json(proof.pi_b),
            "pi_c": _g1_json(proof.pi_c),
            "protocol": "groth16",
            "curve": "bn128",
        },
        "public": [str(x) for x in instance.public_inputs],
    }
