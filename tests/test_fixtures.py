"""Run every fixture under tests/programs/ through the pytest collector."""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

import run_all_tests


def test_fixtures_found():
    assert len(run_all_tests.TEST_FILES) >= 15


@pytest.mark.parametrize(
    "path", run_all_tests.TEST_FILES,
    ids=[os.path.relpath(p, os.path.dirname(os.path.dirname(os.path.abspath(__file__)))) for p in run_all_tests.TEST_FILES],
)
def test_fixture(path):
    assert run_all_tests.run_test(path)
