# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import time
from datetime import datetime, timedelta, timezone

import pytest

from fluentreq.context import RequestContext, background, get_request_context, request_context
from fluentreq.errors import DeadlineExceeded, RequestCancelled


def test_background_has_no_deadline():
    ctx = background()
    assert ctx.deadline is None
    assert ctx.remaining() is None
    assert ctx.cancelled is False
    ctx.check()


def test_cancelling_parent_cancels_children():
    parent = RequestContext()
    child = parent.child()
    grandchild = child.with_timeout(60)
    parent.cancel()
    assert child.cancelled is True
    assert grandchild.cancelled is True
    with pytest.raises(RequestCancelled):
        grandchild.check()


def test_cancelling_child_leaves_parent_alone():
    parent = RequestContext()
    child = parent.child()
    child.cancel()
    assert child.cancelled is True
    assert parent.cancelled is False


def test_child_inherits_earliest_deadline():
    parent = background().with_timeout(5)
    looser = parent.with_timeout(60)
    tighter = parent.with_timeout(1)
    assert looser.deadline == parent.deadline
    assert tighter.deadline < parent.deadline


def test_expired_context_raises_deadline_exceeded():
    ctx = background().with_timeout(-1)
    assert ctx.expired() is True
    with pytest.raises(DeadlineExceeded):
        ctx.check()


def test_with_deadline_accepts_naive_and_aware_datetimes():
    naive = background().with_deadline(datetime.now() + timedelta(seconds=30))
    aware = background().with_deadline(datetime.now(timezone.utc) + timedelta(seconds=30))
    for ctx in (naive, aware):
        remaining = ctx.remaining()
        assert 25 < remaining <= 30


def test_request_context_scopes_ambient_context():
    assert get_request_context() is background()
    with request_context(timeout=10) as outer:
        assert get_request_context() is outer
        assert 0 < outer.remaining() <= 10
        with request_context() as inner:
            assert inner.parent is outer
            assert get_request_context() is inner
        assert inner.cancelled is True
        assert outer.cancelled is False
        assert get_request_context() is outer
    assert outer.cancelled is True
    assert get_request_context() is background()


def test_request_context_with_deadline():
    when = datetime.now() + timedelta(seconds=20)
    with request_context(deadline=when) as ctx:
        assert 15 < ctx.remaining() <= 20


def test_remaining_counts_down():
    ctx = background().with_timeout(0.5)
    first = ctx.remaining()
    time.sleep(0.01)
    assert ctx.remaining() < first


def test_background_ignores_cancel():
    background().cancel()
    assert background().cancelled is False
    assert get_request_context().child().cancelled is False
    background().check()
