"""
setup / proof 파일 입출력
=========================

  trusted_setup.json : {"A": "...", "B": "...", "C": "..."}
  proof.json         : {"A": "...", "B": "...", "C": "...", "witnesses": ["...", ...]}

정수는 정밀도 손실을 막기 위해 10진수 문자열로 저장한다.
"""

import json
import logging
import os

from zkp.groth16.proving import FixedConstantProof
from zkp.groth16.setup import TrustedSetup
from zkp.snark.errors import ArtifactError, InvalidInput

logger = logging.getLogger(__name__)

DEFAULT_SETUP_FILE = "trusted_setup.json"
DEFAULT_PROOF_FILE = "proof.json"


def _write_json(path, data):
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    logger.debug("Saved %s", path)


def _read_json(path, what):
    if not os.path.exists(path):
        raise ArtifactError(f"{what} file not found: {path}")
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise ArtifactError(f"Failed to parse {path}. It may be corrupted.") from exc
    if not isinstance(data, dict):
        raise ArtifactError(f"{path} must contain a JSON object")
    return data


def save_setup(setup, path=DEFAULT_SETUP_FILE):
    _write_json(path, setup.to_dict())


def load_setup(path=DEFAULT_SETUP_FILE):
    data = _read_json(path, "Trusted setup")
    try:
        return TrustedSetup.from_dict(data)
    except InvalidInput as exc:
        raise ArtifactError(f"{path}: {exc}") from exc


def save_proof(proof, path=DEFAULT_PROOF_FILE):
    _write_json(path, proof.to_dict())


def load_proof(path=DEFAULT_PROOF_FILE):
    data = _read_json(path, "Proof")
    try:
        return FixedConstantProof.from_dict(data)
    except InvalidInput as exc:
        raise ArtifactError(f"{path}: {exc}") from exc
