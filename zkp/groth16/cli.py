"""
Fixed-constant proof CLI
========================

    zkp-groth16 setup
    zkp-groth16 generate <witness1> <witness2> ...
    zkp-groth16 verify <witness1> <witness2> ...

Exit code 0 on success, 1 on a missing file, malformed input or failed
verification (argparse usage errors exit with 2).
"""

import argparse
import logging
import sys

from zkp.groth16.artifacts import (
    DEFAULT_PROOF_FILE,
    DEFAULT_SETUP_FILE,
    load_proof,
    load_setup,
    save_proof,
    save_setup,
)
from zkp.groth16.proving import FixedConstantProver
from zkp.groth16.setup import generate_trusted_setup
from zkp.groth16.verifying import FixedConstantVerifier
from zkp.snark.errors import ArtifactError, InvalidInput


def build_parser():
    parser = argparse.ArgumentParser(prog="zkp-groth16", description="Fixed-constant proof generator")
    parser.add_argument("--setup-file", default=DEFAULT_SETUP_FILE, help="Trusted setup JSON path")
    parser.add_argument("--proof-file", default=DEFAULT_PROOF_FILE, help="Proof JSON path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("setup", help="Generate the trusted setup")
    gen = sub.add_parser("generate", help="Generate a proof for the witnesses")
    gen.add_argument("witnesses", nargs="+", type=int)
    ver = sub.add_parser("verify", help="Verify the saved proof against the witnesses")
    ver.add_argument("witnesses", nargs="+", type=int)
    return parser


def cmd_setup(args):
    save_setup(generate_trusted_setup(), args.setup_file)
    print(f"Trusted setup generated: {args.setup_file}")
    return 0


def cmd_generate(args):
    setup = load_setup(args.setup_file)
    proof = FixedConstantProver(setup).generate(args.witnesses)
    save_proof(proof, args.proof_file)
    print(f"Proof saved to {args.proof_file}")
    return 0


def cmd_verify(args):
    setup = load_setup(args.setup_file)
    proof = load_proof(args.proof_file)
    if FixedConstantVerifier(setup).verify(proof, args.witnesses):
        print("Proof is valid")
        return 0
    print("Proof verification failed", file=sys.stderr)
    return 1


COMMANDS = {
    "setup": cmd_setup,
    "generate": cmd_generate,
    "verify": cmd_verify,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_usage(sys.stderr)
        return 1

    try:
        return COMMANDS[args.command](args)
    except (ArtifactError, InvalidInput) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
