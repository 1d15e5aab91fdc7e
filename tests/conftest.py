import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkp.snark.field import FieldProvider
from zkp.snark.hashing import HashProvider
from zkp.snark.r1cs import ConstraintSystem
from zkp.snark.system import ZKProofSystem


# ── 테스트 상수 ──
TEST_INPUTS = [1, 2, 3]
TEST_SECRET = 424242


@pytest.fixture
def field():
    return FieldProvider()


@pytest.fixture
def hasher(field):
    return HashProvider(field)


@pytest.fixture
def cs(field, hasher):
    """빈 ConstraintSystem."""
    return ConstraintSystem(field, hasher)


@pytest.fixture
def hash_cs(cs):
    """x1=1, x2=2, x3=3 와 해시 제약 H(x1, x2, x3) = y 를 가진 ConstraintSystem."""
    names = [cs.add_variable(f"x{i}", v) for i, v in enumerate(TEST_INPUTS, start=1)]
    cs.add_hash_constraint(names, "y")
    return cs


@pytest.fixture
def zk_system():
    return ZKProofSystem()


@pytest.fixture(scope="module")
def snark_data():
    """[1, 2, 3] 에 대한 전체 파이프라인 데이터 (setup → proving)."""
    system = ZKProofSystem()
    bundle = system.generate_proof(TEST_INPUTS, secret=TEST_SECRET)
    plain = system.generate_proof(TEST_INPUTS)
    chained = system.generate_proof(TEST_INPUTS, previous_proof=plain)
    return {
        "system": system,
        "bundle": bundle,
        "plain": plain,
        "chained": chained,
    }
