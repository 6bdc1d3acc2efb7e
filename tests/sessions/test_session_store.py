from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import GROUP_ID, OTHER_FACULTY_ID, OWNER_ID, STUDENT_A
from qr_attendance.core.enums import TokenCheck
from qr_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from qr_attendance.sessions.service import SessionStore


def test_issue_sets_validity_window_and_random_token(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)

    s = store.issue(GROUP_ID, OWNER_ID, 15, now=fixed_now)

    assert s.active is True
    assert s.valid_from == fixed_now
    assert s.valid_until == fixed_now + timedelta(minutes=15)
    assert len(s.token) == 64
    int(s.token, 16)
    assert s.redemptions == ()


def test_issue_generates_distinct_tokens(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)

    tokens = {store.issue(GROUP_ID, OWNER_ID, 5, now=fixed_now).token for _ in range(20)}

    assert len(tokens) == 20


def test_issue_requires_group_owner(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)

    with pytest.raises(AuthorizationError):
        store.issue(GROUP_ID, OTHER_FACULTY_ID, 15, now=fixed_now)


def test_issue_unknown_group(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)

    with pytest.raises(NotFoundError):
        store.issue(404, OWNER_ID, 15, now=fixed_now)


@pytest.mark.parametrize("lifetime", [0, -5, 100000, "abc", None, 15.9, "15.9"])
def test_issue_rejects_bad_lifetime(sessions_repo, roster, fixed_now, lifetime):
    store = SessionStore(sessions_repo, roster)

    with pytest.raises(ValidationError):
        store.issue(GROUP_ID, OWNER_ID, lifetime, now=fixed_now)


def test_lookup_missing_session(sessions_repo, roster):
    with pytest.raises(NotFoundError):
        SessionStore(sessions_repo, roster).lookup(123)


def test_redeem_check_outcomes(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)
    s = store.issue(GROUP_ID, OWNER_ID, 15, now=fixed_now)

    assert store.redeem_check(s.session_id, s.token, fixed_now + timedelta(minutes=5)) == TokenCheck.VALID
    assert store.redeem_check(s.session_id, "0" * 64, fixed_now) == TokenCheck.TOKEN_MISMATCH
    assert store.redeem_check(s.session_id, s.token, fixed_now + timedelta(minutes=16)) == TokenCheck.EXPIRED
    assert store.redeem_check(999, s.token, fixed_now) == TokenCheck.NOT_FOUND


def test_wrong_token_past_expiry_is_a_mismatch(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)
    s = store.issue(GROUP_ID, OWNER_ID, 15, now=fixed_now)

    assert store.redeem_check(s.session_id, "0" * 64, fixed_now + timedelta(minutes=30)) == TokenCheck.TOKEN_MISMATCH


def test_redeem_check_is_pure(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)
    s = store.issue(GROUP_ID, OWNER_ID, 15, now=fixed_now)

    store.redeem_check(s.session_id, s.token, fixed_now + timedelta(hours=1))

    assert store.lookup(s.session_id).active is True


def test_inactive_session_reports_expired_without_time_check(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)
    s = store.issue(GROUP_ID, OWNER_ID, 15, now=fixed_now)

    store.expire(s.session_id)

    assert store.redeem_check(s.session_id, s.token, fixed_now) == TokenCheck.EXPIRED


def test_record_redemption_appends(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)
    s = store.issue(GROUP_ID, OWNER_ID, 15, now=fixed_now)

    store.record_redemption(s.session_id, STUDENT_A, fixed_now)

    redemptions = store.lookup(s.session_id).redemptions
    assert [r.person_id for r in redemptions] == [STUDENT_A]


def test_describe_issue_payload(sessions_repo, roster, fixed_now):
    store = SessionStore(sessions_repo, roster)
    s = store.issue(GROUP_ID, OWNER_ID, 15, now=fixed_now)

    payload = store.describe_issue(s)

    assert payload["sessionId"] == s.session_id
    assert payload["lifetimeMinutes"] == 15
    assert payload["validUntil"] == "2026-03-02T09:15:00Z"
    assert payload["qrImage"].startswith("data:image/png;base64,")
