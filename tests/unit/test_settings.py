import pytest

from config.settings import Settings


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.AMOUNT_DECIMALS == 18
        assert s.MIN_LIQUIDITY == "0.001"
        assert s.SEARCH_TOLERANCE == "0.000001"
        assert s.SEARCH_MAX_ITERATIONS == 100
        assert s.SEARCH_UPPER_BOUND_MULTIPLIER == 10

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLMSR_SEARCH_MAX_ITERATIONS", "7")
        monkeypatch.setenv("CLMSR_MIN_LIQUIDITY", "0.5")
        s = Settings(_env_file=None)
        assert s.SEARCH_MAX_ITERATIONS == 7
        assert s.MIN_LIQUIDITY == "0.5"

    def test_unprefixed_env_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCH_MAX_ITERATIONS", "7")
        assert Settings(_env_file=None).SEARCH_MAX_ITERATIONS == 100
