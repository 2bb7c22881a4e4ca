"""Service-level tests for the credential store, verification gate and entry ledger."""
import random
from datetime import datetime, timedelta

import pytest
import pytz

from journal.exceptions import (
    DuplicateEmail,
    EditWindowClosed,
    Forbidden,
    InvalidCredentials,
    NotFound,
    NotifierError,
    Unauthorized,
    ValidationError,
)
from journal.models.entry import Entry
from journal.models.user import Role
from journal.models.verification_code import VerificationCode
from journal.services import credential_service, entry_service, prompt_service, session_service, verification_service
from tests.conftest import RecordingNotifier

NOW = datetime(2026, 3, 14, 15, 9, 26, 535897, tzinfo=pytz.utc)


class TestCredentialStore:

    def test_verify(self, db):
        for i in range(3):
            credential_service.register(db, f"user{i}@example.com", f"secret{i}")
        for i in range(3):
            user = credential_service.verify(db, f"user{i}@example.com", f"secret{i}")
            assert user.email == f"user{i}@example.com"
            with pytest.raises(InvalidCredentials):
                credential_service.verify(db, f"user{i}@example.com", f"secret{i}x")

    def test_duplicate(self, db):
        credential_service.register(db, "a@example.com", "pw")
        with pytest.raises(DuplicateEmail):
            credential_service.register(db, "a@example.com", "pw")

    def test_empty_fields(self, db):
        with pytest.raises(ValidationError):
            credential_service.register(db, "", "pw")
        with pytest.raises(ValidationError):
            credential_service.register(db, "a@example.com", "")

    def test_long_passwords_still_verify(self, db):
        password = "x" * 100
        credential_service.register(db, "a@example.com", password)
        assert credential_service.verify(db, "a@example.com", password)


class TestVerificationGate:

    def _user(self, db):
        return credential_service.register(db, "a@example.com", "pw")

    def test_code_range_and_expiry(self, db):
        user = self._user(db)
        notifier = RecordingNotifier()
        code = verification_service.issue(db, user, notifier, random.Random(3), NOW)
        assert 100000 <= int(code) <= 999999
        assert notifier.sent == [("a@example.com", code)]

        record = db.query(VerificationCode).one()
        assert record.code == code

    def test_expires_exactly_at_expires_at(self, db):
        user = self._user(db)
        code = verification_service.issue(db, user, RecordingNotifier(), random.Random(3), NOW)
        expires_at = NOW + timedelta(minutes=10)
        assert verification_service.verify(db, user.id, code, expires_at - timedelta(microseconds=1))
        assert not verification_service.verify(db, user.id, code, expires_at)
        assert not verification_service.verify(db, user.id, code, expires_at + timedelta(seconds=1))

    def test_earlier_codes_stay_valid(self, db):
        user = self._user(db)
        rng = random.Random(5)
        first = verification_service.issue(db, user, RecordingNotifier(), rng, NOW)
        second = verification_service.issue(db, user, RecordingNotifier(), rng, NOW + timedelta(minutes=1))
        assert db.query(VerificationCode).count() == 2
        assert verification_service.verify(db, user.id, first, NOW + timedelta(minutes=2))
        assert verification_service.verify(db, user.id, second, NOW + timedelta(minutes=2))

    def test_code_belongs_to_its_user(self, db):
        user = self._user(db)
        other = credential_service.register(db, "b@example.com", "pw")
        code = verification_service.issue(db, user, RecordingNotifier(), random.Random(3), NOW)
        assert not verification_service.verify(db, other.id, code, NOW)

    def test_failed_delivery_keeps_code(self, db):
        user = self._user(db)
        notifier = RecordingNotifier()
        notifier.fail = True
        with pytest.raises(NotifierError):
            verification_service.enable_two_factor(db, user, notifier, random.Random(3), NOW)
        db.refresh(user)
        assert user.two_factor_enabled is False
        assert db.query(VerificationCode).count() == 1

    def test_unexpected_notifier_error_is_wrapped(self, db):
        class BrokenNotifier(RecordingNotifier):
            def send_verification_code(self, email, code):
                raise RuntimeError("connection reset")

        user = self._user(db)
        with pytest.raises(NotifierError):
            verification_service.issue(db, user, BrokenNotifier(), random.Random(3), NOW)


class TestSessionIssuer:

    def test_round_trip(self, db):
        user = credential_service.register(db, "a@example.com", "pw", role=Role.admin)
        claims = session_service.authenticate(session_service.issue(user))
        assert claims.id == user.id
        assert claims.email == "a@example.com"
        assert claims.role == Role.admin

    def test_missing_token(self):
        with pytest.raises(Unauthorized):
            session_service.authenticate(None)

    def test_expires_after_an_hour(self, db):
        user = credential_service.register(db, "a@example.com", "pw")
        token = session_service.issue(user, datetime.now(pytz.utc) - timedelta(minutes=61))
        with pytest.raises(Forbidden):
            session_service.authenticate(token)


class TestEntryLedger:

    def _setup(self, db):
        prompt_service.seed_prompts(db)
        user = credential_service.register(db, "a@example.com", "pw")
        prompt = prompt_service.pick(db, user.id, random.Random(1))
        return user, prompt

    def test_update_same_day(self, db):
        user, prompt = self._setup(db)
        entry = entry_service.submit(db, user.id, prompt.id, "draft", NOW)
        entry_service.update(db, entry.id, user.id, "final", NOW.replace(hour=23, minute=59))
        db.refresh(entry)
        assert entry.text == "final"
        assert entry.created_at == "2026-03-14T15:09:26.535897+00:00"

    def test_update_next_day(self, db):
        user, prompt = self._setup(db)
        entry = entry_service.submit(db, user.id, prompt.id, "draft", NOW)
        midnight = datetime(2026, 3, 15, tzinfo=pytz.utc)
        assert not entry_service.editable_now(db, entry.id, user.id, midnight)
        with pytest.raises(EditWindowClosed):
            entry_service.update(db, entry.id, user.id, "late", midnight)

    def test_edit_window_uses_utc_date(self, db):
        user, prompt = self._setup(db)
        # 23:30 in New York on the 14th is already the 15th in UTC
        local = pytz.timezone("America/New_York").localize(datetime(2026, 3, 14, 23, 30))
        entry = entry_service.submit(db, user.id, prompt.id, "late night", local)
        assert entry.created_at.startswith("2026-03-15")
        assert entry_service.editable_now(db, entry.id, user.id, datetime(2026, 3, 15, 1, tzinfo=pytz.utc))

    def test_not_found_for_foreign_or_missing(self, db):
        user, prompt = self._setup(db)
        other = credential_service.register(db, "b@example.com", "pw")
        entry = entry_service.submit(db, user.id, prompt.id, "mine", NOW)
        for entry_id, user_id in ((entry.id, other.id), (9999, user.id)):
            with pytest.raises(NotFound):
                entry_service.editable_now(db, entry_id, user_id, NOW)
            with pytest.raises(NotFound):
                entry_service.update(db, entry_id, user_id, "x", NOW)

    def test_update_rechecks_window_at_write_time(self, db):
        user, prompt = self._setup(db)
        entry = entry_service.submit(db, user.id, prompt.id, "draft", NOW)
        assert entry_service.editable_now(db, entry.id, user.id, NOW)
        with pytest.raises(EditWindowClosed):
            entry_service.update(db, entry.id, user.id, "later", NOW + timedelta(days=1))
        db.expire_all()
        assert db.query(Entry).one().text == "draft"

    def test_page_window(self):
        assert entry_service.page_window(1) == (0, 6)
        assert entry_service.page_window(2) == (6, 3)
        assert entry_service.page_window(3) == (9, 3)
        assert entry_service.page_window(3, 4) == (8, 4)
        with pytest.raises(ValidationError):
            entry_service.page_window(0)

    def test_total_matches_filter(self, db):
        user, prompt = self._setup(db)
        for i in range(4):
            entry_service.submit(db, user.id, prompt.id, f"apple {i}" if i % 2 else f"pear {i}", NOW)
        result = entry_service.list_entries(db, user.id, search="apple", search_type="keyword")
        assert result["total"] == 2
        assert result["has_more"] is False
        assert {e["text"] for e in result["entries"]} == {"apple 1", "apple 3"}
