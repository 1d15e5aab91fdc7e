"""
zkp-groth16 CLI 테스트 (setup → generate → verify)
"""

import pytest

from zkp.groth16.cli import main


@pytest.fixture
def run(tmp_path):
    setup_file = str(tmp_path / "trusted_setup.json")
    proof_file = str(tmp_path / "proof.json")

    def _run(*args):
        return main(["--setup-file", setup_file, "--proof-file", proof_file, *args])

    return _run


class TestCli:
    def test_full_flow(self, run, capsys):
        assert run("setup") == 0
        assert run("generate", "3", "5") == 0
        assert run("verify", "3", "5") == 0
        assert "Proof is valid" in capsys.readouterr().out

    def test_verify_wrong_witnesses(self, run, capsys):
        run("setup")
        run("generate", "3", "5")
        assert run("verify", "3", "6") == 1
        assert "verification failed" in capsys.readouterr().err

    def test_generate_without_setup(self, run, capsys):
        assert run("generate", "3") == 1
        assert "ERROR" in capsys.readouterr().err

    def test_verify_without_proof(self, run):
        run("setup")
        assert run("verify", "3") == 1

    def test_no_command(self, run):
        assert run() == 1

    def test_non_integer_witness(self, run):
        with pytest.raises(SystemExit) as excinfo:
            run("generate", "abc")
        assert excinfo.value.code == 2
