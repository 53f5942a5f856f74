import signal
import time

from ackgen.cancel import CancelToken, background, cancel_on_signals


def test_background_is_not_cancelled() -> None:
    token = background()
    assert token.cancelled() is False
    assert token.remaining() is None


def test_cancel_propagates_to_children_only() -> None:
    parent = CancelToken()
    child = parent.with_timeout(60)
    grandchild = child.with_timeout(60)
    child.cancel()
    assert child.cancelled() is True
    assert grandchild.cancelled() is True
    assert parent.cancelled() is False


def test_parent_cancel_reaches_child() -> None:
    parent = CancelToken()
    child = parent.with_timeout(60)
    parent.cancel()
    assert child.cancelled() is True
    assert child.deadline_exceeded() is False


def test_deadline_expires() -> None:
    token = CancelToken().with_timeout(0.01)
    time.sleep(0.02)
    assert token.cancelled() is True
    assert token.deadline_exceeded() is True
    assert token.remaining() == 0.0


def test_child_deadline_never_extends_parent() -> None:
    parent = CancelToken().with_timeout(1)
    child = parent.with_timeout(600)
    remaining = child.remaining()
    assert remaining is not None
    assert remaining <= 1


def test_cancel_on_signals_restores_handlers() -> None:
    before = signal.getsignal(signal.SIGTERM)
    with cancel_on_signals() as token:
        assert signal.getsignal(signal.SIGTERM) is not before
        handler = signal.getsignal(signal.SIGTERM)
        assert callable(handler)
        handler(signal.SIGTERM, None)
        assert token.cancelled() is True
    assert signal.getsignal(signal.SIGTERM) is before


def test_cancel_on_signals_uses_given_token() -> None:
    root = CancelToken()
    with cancel_on_signals(root) as token:
        assert token is root
