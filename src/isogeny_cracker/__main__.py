"""Main entry point: python -m isogeny_cracker"""

from __future__ import annotations

import argparse
import logging
import sys

import numpy as np

from isogeny_cracker import __version__
from isogeny_cracker.analysis.validation import AttackValidator, CampaignValidator
from isogeny_cracker.attack.orchestrator import AttackOrchestrator
from isogeny_cracker.attack.params import find_attack_parameters
from isogeny_cracker.attack.protocol import find_prime, keygen, random_secret, setup
from isogeny_cracker.errors import AttackError
from isogeny_cracker.utils.constants import MODULAR_POLYNOMIALS, PRESETS
from isogeny_cracker.utils.math_helpers import parse_exponents
from isogeny_cracker.utils.types import AttackConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="isogeny-cracker",
        description="Endomorphism-action key recovery against SIDH-style isogeny key exchange",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for stage summaries, -vv for per-step detail")

    sub = parser.add_subparsers(dest="command")

    def add_instance_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--preset", choices=sorted(PRESETS), default="toy", help="Parameter preset")
        p.add_argument("--exponents", type=str, help="Torsion override, e.g. 2:3,3:1,5:1,13:1")
        p.add_argument("--secret-ell", type=int, help="Prime of the attacked party")
        p.add_argument("--middle-ell", type=int, choices=sorted(MODULAR_POLYNOMIALS),
                       help="Prime bridged by graph search")
        p.add_argument("--min-middle", type=int, default=0, help="Smallest middle exponent")
        p.add_argument("--max-middle", type=int, default=10, help="Largest middle exponent")
        p.add_argument("--max-candidates", type=int, default=8, help="Endomorphisms to try")

    # attack
    atk = sub.add_parser("attack", help="Generate public keys and recover their secrets")
    add_instance_args(atk)
    atk.add_argument("--secret", type=int, help="Secret scalar (default: random)")
    atk.add_argument("--trials", type=int, default=1, help="Number of keys to attack")
    atk.add_argument("--seed", type=int, help="Seed for random secrets")

    # params
    prm = sub.add_parser("params", help="List attack endomorphisms for an instance")
    add_instance_args(prm)

    # prime
    pr = sub.add_parser("prime", help="Search p = f * prod(l^e) - 1")
    pr.add_argument("--exponents", type=str, required=True, help="e.g. 2:3,3:1,5:1")

    return parser


def resolve_instance(args: argparse.Namespace) -> tuple[dict[int, int], int]:
    """Torsion exponents and secret prime from a preset plus overrides."""
    exponents, secret_ell = PRESETS[args.preset]
    if args.exponents:
        exponents = parse_exponents(args.exponents)
    if args.secret_ell:
        secret_ell = args.secret_ell
    return dict(exponents), secret_ell


def config_from_args(args: argparse.Namespace) -> AttackConfig:
    return AttackConfig(
        middle_ell=args.middle_ell,
        min_middle_exponent=args.min_middle,
        max_middle_exponent=args.max_middle,
        max_candidates=args.max_candidates,
    )


def run_attack(args: argparse.Namespace) -> None:
    """Full pipeline: prime -> setup -> keygen -> attack -> validate -> report."""
    exponents, secret_ell = resolve_instance(args)
    config = config_from_args(args)

    p = find_prime(exponents)
    print(f"Prime: p = {p}")
    print(f"Torsion: {exponents} | Secret prime: {secret_ell}")
    print()

    print("Generating torsion bases...")
    ctx = setup(p, exponents, secret_ell)
    orchestrator = AttackOrchestrator(ctx, config)
    rng = np.random.default_rng(args.seed)

    matches: list[bool] = []
    result = None
    for trial in range(args.trials):
        secret = args.secret if args.secret is not None else random_secret(ctx, rng)
        public_key = keygen(ctx, secret)
        print(f"Attacking key {trial + 1}/{args.trials}...")
        result = orchestrator.attack(public_key)
        summary = AttackValidator(ctx, secret, public_key, result).summary()
        matches.append(summary["secret_match"] and summary["curve_match"])
        print(f"  secret={secret} recovered={summary['secret']} "
              f"curve-match={summary['curve_match']} secret-match={summary['secret_match']}")

    campaign = CampaignValidator(matches).summary()
    params = result.parameters if result is not None else None

    print()
    print("=" * 50)
    print(" RESULTS")
    print("=" * 50)
    print(f"  Keys attacked:       {campaign['runs']}")
    print(f"  Success rate:        {campaign['success_rate']:.4f}")
    print(f"  Confidence interval: ({campaign['confidence_interval'][0]:.3f}, {campaign['confidence_interval'][1]:.3f})")
    if params is not None:
        endo = params.endomorphism
        print(f"  Endomorphism:        theta=({endo.x},{endo.y},{endo.z}) d={endo.shift}")
        print(f"  Degree:              {params.degree}")
        print(f"  Middle:              {params.middle_ell}^{params.middle_exponent}")
    print("=" * 50)


def run_params(args: argparse.Namespace) -> None:
    exponents, secret_ell = resolve_instance(args)
    p = find_prime(exponents)
    print(f"Prime: p = {p}")
    candidates = find_attack_parameters(p, exponents, secret_ell, config_from_args(args))
    for c in candidates:
        e = c.endomorphism
        print(f"  theta=({e.x},{e.y},{e.z}) d={e.shift} deg={c.degree} "
              f"fwd={list(c.forward)} bwd={list(c.backward)} mid={c.middle_ell}^{c.middle_exponent}")
    if not candidates:
        print("  no candidates")


def run_prime(args: argparse.Namespace) -> None:
    exponents = parse_exponents(args.exponents)
    p = find_prime(exponents)
    print(f"p = {p}")
    print(f"p + 1 = {p + 1}")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    try:
        if args.command == "attack":
            run_attack(args)
        elif args.command == "params":
            run_params(args)
        elif args.command == "prime":
            run_prime(args)
        else:
            parser.print_help()
    except AttackError as exc:
        print(f"Attack failed at stage '{exc.stage}': {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
