"""Guards on the shape of the test tree itself."""

from collections import Counter
from pathlib import Path

TESTS_ROOT = Path(__file__).parent


def test_test_module_names_are_unique():
    names = Counter(path.name for path in TESTS_ROOT.rglob("test_*.py"))
    assert [name for name, count in names.items() if count > 1] == []
