from __future__ import annotations

import preemptive


def test_version() -> None:
    assert isinstance(preemptive.__version__, str)
    assert preemptive.__version__


def test_public_api() -> None:
    for name in preemptive.__all__:
        assert hasattr(preemptive, name)
