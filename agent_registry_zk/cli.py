"""
Command-Line Interface for the agent registry verifier.

Verifies snarkjs Groth16 artifacts locally and operates a throwaway
in-memory registry for inspecting roots and witnesses.
"""

import logging
import sys

import click

from agent_registry_zk import __version__, print_disclaimer
from agent_registry_zk.service import hash_agent_description
from agent_registry_zk.zk_core.accumulator import MerkleAccumulator
from agent_registry_zk.zk_core.config import NON_MEMBERSHIP_PUBLIC_INPUTS
from agent_registry_zk.zk_core.exceptions import MalformedInputError, RegistryProtocolError
from agent_registry_zk.zk_core.groth16 import VerifyResult, verify, verify_non_membership
from agent_registry_zk.zk_core.merkle import path_indices
from agent_registry_zk.zk_core.snarkjs import (
    load_proof,
    load_public_signals,
    load_verification_key,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _parse_hash(value: str) -> bytes:
    text = value[2:] if value.lower().startswith("0x") else value
    try:
        data = bytes.fromhex(text)
    except ValueError:
        raise click.BadParameter(f"not a hex string: {value!r}") from None
    if len(data) != 32:
        raise click.BadParameter(f"agent hash must be 32 bytes: {value!r}")
    return data


def _build_registry(agents, descriptions, depth):
    registry = MerkleAccumulator(depth=depth)
    for agent in agents:
        registry.register(_parse_hash(agent))
    for description in descriptions:
        registry.register(hash_agent_description(description))
    return registry


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', is_flag=True, help='Enable debug logging')
def main(verbose):
    """
    Agent Registry - Groth16 non-membership verifier

    ⚠️  DRAFT - requires cryptographic review before production use
    """
    _configure_logging(verbose)


@main.command('verify')
@click.argument('vk_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('proof_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('public_path', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--generic',
    is_flag=True,
    help='Plain Groth16 check without the non-membership flag rule'
)
def verify_cmd(vk_path, proof_path, public_path, generic):
    """
    Verify snarkjs verification_key.json, proof.json and public.json.

    Exits with status 1 unless the proof is valid.

    Examples:

        agent-registry verify build/verification_key.json build/proof.json build/public.json
    """
    try:
        vk = load_verification_key(vk_path)
        proof = load_proof(proof_path)
        signals = load_public_signals(public_path)
    except MalformedInputError as e:
        click.echo(click.style(f"✗ Malformed input: {e}", fg="red"), err=True)
        sys.exit(1)

    if not generic and len(signals) == len(NON_MEMBERSHIP_PUBLIC_INPUTS):
        root, agent_hash, flag = signals
        click.echo(f"  Root: {root:#066x}")
        click.echo(f"  Agent Hash: {agent_hash:#066x}")
        click.echo(f"  Non-Member Status: {flag == 1}")
        result = verify_non_membership(proof, vk, signals)
    else:
        result = verify(proof, vk, signals)

    if result is VerifyResult.VALID:
        click.echo(click.style("✓ PROOF IS VALID", fg="green"))
        return

    click.echo(click.style(f"✗ PROOF IS {result.value.upper()}", fg="red"), err=True)
    sys.exit(1)


@main.group()
def registry():
    """Inspect an in-memory agent registry."""


_registry_options = [
    click.option('--agent', 'agents', multiple=True,
                 help='Registered agent hash (32-byte hex), repeatable'),
    click.option('--description', 'descriptions', multiple=True,
                 help='Registered agent description, hashed before insertion'),
    click.option('--depth', type=int, default=None,
                 help='Tree depth (default: AGENT_REGISTRY_TREE_DEPTH or 8)'),
]


def _with_registry_options(func):
    for option in reversed(_registry_options):
        func = option(func)
    return func


@registry.command('root')
@_with_registry_options
def registry_root(agents, descriptions, depth):
    """Print the Merkle root of the given agents."""
    try:
        reg = _build_registry(agents, descriptions, depth)
    except (RegistryProtocolError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Agents: {len(reg)} / {reg.capacity}")
    click.echo(f"Root: 0x{reg.current_root().hex()}")


@registry.command('register')
@click.argument('hashes', nargs=-1, required=True)
@_with_registry_options
def registry_register(hashes, agents, descriptions, depth):
    """
    Register HASHES (32-byte hex) on top of the seeded agents.

    Prints the root after every insertion; duplicates leave it unchanged.
    """
    try:
        reg = _build_registry(agents, descriptions, depth)
        click.echo(f"Initial root: 0x{reg.current_root().hex()}")
        for value in hashes:
            agent_hash = _parse_hash(value)
            already = reg.is_registered(agent_hash)
            root = reg.register(agent_hash)
            status = "unchanged" if already else f"slot {len(reg) - 1}"
            click.echo(f"  0x{agent_hash.hex()} ({status}) -> 0x{root.hex()}")
    except (RegistryProtocolError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Agents: {len(reg)} / {reg.capacity}")


@registry.command('check')
@click.argument('candidate')
@_with_registry_options
def registry_check(candidate, agents, descriptions, depth):
    """
    Check whether CANDIDATE (32-byte hex hash or a description) is registered.

    For an unregistered candidate, prints the empty-slot witness a prover
    would use for the non-membership circuit.
    """
    try:
        reg = _build_registry(agents, descriptions, depth)
    except (RegistryProtocolError, ValueError) as e:
        raise click.ClickException(str(e))

    try:
        candidate_hash = _parse_hash(candidate)
    except click.BadParameter:
        candidate_hash = hash_agent_description(candidate)

    click.echo(f"Candidate: 0x{candidate_hash.hex()}")
    if reg.is_registered(candidate_hash):
        click.echo(click.style("⚠️  Agent already registered", fg="yellow"))
        sys.exit(1)

    try:
        witness = reg.non_membership_witness(candidate_hash)
    except RegistryProtocolError as e:
        raise click.ClickException(str(e))

    click.echo(click.style("✓ Agent not registered", fg="green"))
    click.echo(f"  Root: 0x{witness.root.hex()}")
    click.echo(f"  Empty slot: {witness.index}")
    click.echo(f"  Path indices: {path_indices(witness.path)}")
    for height, (sibling, _) in enumerate(witness.path):
        click.echo(f"  Sibling[{height}]: 0x{sibling.hex()}")


@main.command()
def disclaimer():
    """Show version and disclaimer information."""
    click.echo(f"\nAgent Registry verifier v{__version__}")
    click.echo("Draft - Not Production Ready\n")
    print_disclaimer()


if __name__ == '__main__':
    main()
