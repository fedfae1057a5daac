"""Tests for wfc_core.config."""

from types import SimpleNamespace

import pytest

from wfc_core import Tuning
from wfc_core.config import DEFAULT_HISTORY_SIZE, DEFAULT_STEPS_PER_TICK


class TestTuning:
    """Tests for the solver knobs."""

    def test_defaults(self):
        tuning = Tuning()
        assert tuning.steps_per_tick == DEFAULT_STEPS_PER_TICK
        assert tuning.history_size == DEFAULT_HISTORY_SIZE
        assert tuning.backtrack is False
        assert tuning.show_rulemap is True

    @pytest.mark.parametrize("kwargs", [{"steps_per_tick": 0}, {"history_size": -1}])
    def test_invalid(self, kwargs):
        """Test out-of-range knobs raise ValueError."""
        with pytest.raises(ValueError):
            Tuning(**kwargs)

    def test_from_settings(self):
        """Test reading from a settings object, missing attributes keep their default."""
        tuning = Tuning.from_settings(SimpleNamespace(steps_per_tick=5, backtrack=1))
        assert tuning.steps_per_tick == 5
        assert tuning.backtrack is True
        assert tuning.history_size == DEFAULT_HISTORY_SIZE

    def test_repr_identifies_the_knobs(self):
        """Test two equal tunings print the same."""
        assert repr(Tuning(3, 4)) == repr(Tuning(steps_per_tick=3, history_size=4))
        assert repr(Tuning(3, 4)) != repr(Tuning(3, 4, backtrack=True))
