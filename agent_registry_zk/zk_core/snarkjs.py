"""
Loaders for snarkjs Groth16 JSON artifacts.

    verification_key.json  {"vk_alpha_1": [x, y, "1"], "vk_beta_2": [[x0, x1], [y0, y1], ["1", "0"]],
                            "vk_gamma_2": ..., "vk_delta_2": ..., "IC": [[x, y, "1"], ...]}
    proof.json             {"pi_a": [x, y, "1"], "pi_b": [[x0, x1], [y0, y1], ["1", "0"]], "pi_c": [...]}
    public.json            ["root", "agent_hash", "1"]

Numbers are decimal strings (hex with 0x prefix and plain ints are also
accepted). Points may carry a projective z coordinate; z == 0 is the point
at infinity and z == 1 the affine point. Other z values are rejected.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, Sequence, Union

from .config import CURVE_ORDER
from .curve import G1Point, G2Point
from .exceptions import MalformedInputError
from .groth16 import Groth16Proof, VerificationKey

JsonSource = Union[str, Path, Mapping[str, Any], Sequence[Any]]

_VK_ALIASES = {
    "alpha": ("vk_alpha_1", "alpha_1", "alpha1"),
    "beta": ("vk_beta_2", "beta_2", "beta2"),
    "gamma": ("vk_gamma_2", "gamma_2", "gamma2"),
    "delta": ("vk_delta_2", "delta_2", "delta2"),
    "ic": ("IC", "vk_ic", "ic"),
}


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise MalformedInputError(f"expected number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        try:
            if text.startswith("0x"):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            raise MalformedInputError(f"invalid number {value!r}") from None
    raise MalformedInputError(f"expected number, got {type(value).__name__}")


def _load_json(source: JsonSource) -> Any:
    if isinstance(source, (str, Path)):
        try:
            return json.loads(Path(source).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise MalformedInputError(f"cannot read JSON from {source}") from exc
    return source


def _pick(obj: Mapping[str, Any], names: Sequence[str]) -> Any:
    for name in names:
        if name in obj:
            return obj[name]
    raise MalformedInputError(f"missing field {names[0]!r}")


def parse_g1(value: Any) -> G1Point:
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        raise MalformedInputError("G1 point must be [x, y] or [x, y, z]")
    x, y = _to_int(value[0]), _to_int(value[1])
    if len(value) == 3:
        z = _to_int(value[2])
        if z == 0:
            return G1Point.identity()
        if z != 1:
            raise MalformedInputError("G1 point must be affine (z == 1)")
    if x == 0 and y == 0:
        return G1Point.identity()
    return G1Point.from_coordinates(x, y)


def parse_g2(value: Any) -> G2Point:
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        raise MalformedInputError("G2 point must be [[x0, x1], [y0, y1]] (+ z)")

    def pair(item: Any) -> tuple:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise MalformedInputError("Fp2 element must be [c0, c1]")
        return (_to_int(item[0]), _to_int(item[1]))

    x, y = pair(value[0]), pair(value[1])
    if len(value) == 3:
        z = pair(value[2])
        if z == (0, 0):
            return G2Point.identity()
        if z != (1, 0):
            raise MalformedInputError("G2 point must be affine (z == 1)")
    if x == (0, 0) and y == (0, 0):
        return G2Point.identity()
    return G2Point.from_coordinates(x, y)


def load_verification_key(source: JsonSource) -> VerificationKey:
    """
    Load a snarkjs verification_key.json (path or parsed object).

    Raises:
        MalformedInputError: Missing fields, bad numbers or invalid points
    """
    obj = _load_json(source)
    if not isinstance(obj, Mapping):
        raise MalformedInputError("verification key must be a JSON object")
    protocol = obj.get("protocol", "groth16")
    if protocol != "groth16":
        raise MalformedInputError(f"unsupported protocol {protocol!r}")
    curve = str(obj.get("curve", "bn128")).lower()
    if curve not in ("bn128", "bn254", "alt_bn128"):
        raise MalformedInputError(f"unsupported curve {curve!r}")

    ic_raw = _pick(obj, _VK_ALIASES["ic"])
    if not isinstance(ic_raw, (list, tuple)) or not ic_raw:
        raise MalformedInputError("IC must be a non-empty list")
    vk = VerificationKey(
        alpha=parse_g1(_pick(obj, _VK_ALIASES["alpha"])),
        beta=parse_g2(_pick(obj, _VK_ALIASES["beta"])),
        gamma=parse_g2(_pick(obj, _VK_ALIASES["gamma"])),
        delta=parse_g2(_pick(obj, _VK_ALIASES["delta"])),
        ic=tuple(parse_g1(point) for point in ic_raw),
    )
    n_public = obj.get("nPublic")
    if n_public is not None and _to_int(n_public) != vk.num_public_inputs:
        raise MalformedInputError("nPublic does not match IC length")
    return vk


def load_proof(source: JsonSource) -> Groth16Proof:
    """Load a snarkjs proof.json (path or parsed object)."""
    obj = _load_json(source)
    if not isinstance(obj, Mapping):
        raise MalformedInputError("proof must be a JSON object")
    if "proof" in obj and isinstance(obj["proof"], Mapping):
        obj = obj["proof"]
    return Groth16Proof(
        pi_a=parse_g1(_pick(obj, ("pi_a", "A"))),
        pi_b=parse_g2(_pick(obj, ("pi_b", "B"))),
        pi_c=parse_g1(_pick(obj, ("pi_c", "C"))),
    )


def load_public_signals(source: JsonSource) -> List[int]:
    """
    Load a snarkjs public.json (path or parsed list).

    Values must already be canonical Fr scalars; no reduction is applied.
    """
    obj = _load_json(source)
    if isinstance(obj, Mapping):
        obj = obj.get("publicSignals", obj.get("inputs"))
    if not isinstance(obj, (list, tuple)):
        raise MalformedInputError("public signals must be a JSON list")
    signals = [_to_int(value) for value in obj]
    for index, value in enumerate(signals):
        if not 0 <= value < CURVE_ORDER:
            raise MalformedInputError(f"public signal {index} is not in Fr")
    return signals
