import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _is_e2e_test(request: pytest.FixtureRequest) -> bool:
    return "tests/e2e/" in str(request.node.fspath).replace("\\", "/")


@pytest.fixture(autouse=True)
def disable_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("time.sleep", lambda *_args, **_kwargs: None)


@pytest.fixture(autouse=True)
def isolated_runtime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "RAIDINS_CONFIG_PATH",
        "RAIDINS_DATABASE_URL",
        "RAIDINS_MAIL_BASE_URL",
        "RAIDINS_INSURANCE_RETURN_OVERRIDE_S",
        "RAIDINS_RNG_SEED",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def e2e_seeded_rng(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if not _is_e2e_test(request):
        return
    monkeypatch.setenv("RAIDINS_RNG_SEED", "e2e")
