import sys
from pathlib import Path
from typing import Iterable

import pytest

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))


class SequenceRng:
    """Random source that replays a fixed list of draws."""

    def __init__(self, draws: Iterable[float]):
        self._draws = list(draws)
        self._position = 0

    @property
    def remaining(self) -> int:
        return len(self._draws) - self._position

    def next_float(self) -> float:
        assert self._position < len(self._draws), "random source exhausted"
        value = self._draws[self._position]
        self._position += 1
        return value

    def next_int(self, max_value: int) -> int:
        return min(int(self.next_float() * max_value), max_value - 1)


@pytest.fixture
def scripted_rng():
    return SequenceRng


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-config-tests",
        action="store_true",
        default=False,
        help="run tests that are intended only for configuration changes",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "config_change: marks tests that should only run when configuration files change",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-config-tests"):
        return

    skip_marker = pytest.mark.skip(
        reason="Run only when configuration is modified (use --run-config-tests)",
    )

    for item in items:
        if "config_change" in item.keywords:
            item.add_marker(skip_marker)
