# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import pytest

from evampp.test_helpers import FakeClock


@pytest.fixture
def fake_clock() -> FakeClock:
	"""Clock whose sleeps advance time instantly; programs using sleep finish without waiting."""
	return FakeClock()
