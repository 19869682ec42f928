"""Tests for the access gate: grant, replay, deny, concurrent grants."""

import asyncio

import pytest

from quota_gate.access.gate import AccessGate, Denied, Granted
from quota_gate.common.exceptions import UsageConflictError
from quota_gate.membership import policy
from quota_gate.membership.policy import UNLIMITED, ContentType, MembershipTier
from quota_gate.usage.store import UsageStore


async def _check(db, gate, user, content_type, content_id):
    async with db.get_session() as session:
        return await gate.check_and_grant(session, user, content_type, content_id)


class TestTierA:
    async def test_grants_until_limit_then_denies(self, db, gate, add_user):
        user = await add_user(db, "a@example.com", "A")
        for i, article_id in enumerate(["a1", "a2", "a3"], start=1):
            decision = await _check(db, gate, user, "article", article_id)
            assert isinstance(decision, Granted)
            assert decision.replay is False
            assert decision.usage.count("article") == i

        denied = await _check(db, gate, user, "article", "a4")
        assert denied == Denied(current_usage=3, limit=3, membership_type="A")

    async def test_replay_after_exhaustion_is_free(self, db, gate, store, add_user):
        user = await add_user(db, "replay@example.com", "A")
        for article_id in ("a1", "a2", "a3"):
            await _check(db, gate, user, "article", article_id)
        await _check(db, gate, user, "article", "a4")

        decision = await _check(db, gate, user, "article", "a2")
        assert isinstance(decision, Granted)
        assert decision.replay is True

        async with db.get_session() as session:
            usage = await store.get_usage(session, user.id)
        assert usage.accessed_ids("article") == ["a1", "a2", "a3"]

    async def test_denial_does_not_record(self, db, gate, store, add_user):
        user = await add_user(db, "deny@example.com", "A")
        for video_id in ("v1", "v2", "v3"):
            await _check(db, gate, user, ContentType.VIDEO, video_id)
        await _check(db, gate, user, ContentType.VIDEO, "v4")
        async with db.get_session() as session:
            usage = await store.get_usage(session, user.id)
        assert not usage.has_accessed("video", "v4")

    async def test_article_quota_does_not_spend_videos(self, db, gate, add_user):
        user = await add_user(db, "split@example.com", "A")
        for article_id in ("a1", "a2", "a3"):
            await _check(db, gate, user, "article", article_id)
        decision = await _check(db, gate, user, "video", "v1")
        assert isinstance(decision, Granted)
        assert decision.usage.count("video") == 1


class TestOtherTiers:
    async def test_tier_b_allows_ten(self, db, gate, add_user):
        user = await add_user(db, "b@example.com", "B")
        for i in range(10):
            assert isinstance(await _check(db, gate, user, "video", f"v{i}"), Granted)
        denied = await _check(db, gate, user, "video", "v10")
        assert isinstance(denied, Denied)
        assert denied.limit == 10

    async def test_tier_c_never_denies(self, db, gate, add_user):
        user = await add_user(db, "c@example.com", "C")
        for i in range(25):
            decision = await _check(db, gate, user, "article", f"a{i}")
            assert isinstance(decision, Granted)
            assert decision.limit is UNLIMITED

    async def test_zero_limit_denies_fresh_ids(self, db, gate, add_user, monkeypatch):
        monkeypatch.setitem(
            policy.MEMBERSHIP_LIMITS,
            MembershipTier.A,
            {ContentType.ARTICLE: 0, ContentType.VIDEO: 0},
        )
        user = await add_user(db, "zero@example.com", "A")
        decision = await _check(db, gate, user, "article", "a1")
        assert decision == Denied(current_usage=0, limit=0, membership_type="A")

    async def test_unknown_tier_propagates(self, db, gate, add_user):
        user = await add_user(db, "skew@example.com", "A")
        user.membership_type = "Z"
        with pytest.raises(ValueError):
            await _check(db, gate, user, "article", "a1")


class TestConflicts:
    async def test_gives_up_after_max_attempts(self, db, settings, add_user):
        class AlwaysStale(UsageStore):
            async def record_access(self, session, snapshot, content_type, content_id):
                return None

        gate = AccessGate(settings.model_copy(update={"grant_max_attempts": 3}), AlwaysStale())
        user = await add_user(db, "busy@example.com", "A")
        with pytest.raises(UsageConflictError):
            await _check(db, gate, user, "article", "a1")

    async def test_retries_after_a_lost_race(self, db, settings, add_user):
        class StaleOnce(UsageStore):
            calls = 0

            async def record_access(self, session, snapshot, content_type, content_id):
                StaleOnce.calls += 1
                if StaleOnce.calls == 1:
                    return None
                return await super().record_access(session, snapshot, content_type, content_id)

        gate = AccessGate(settings, StaleOnce())
        user = await add_user(db, "race@example.com", "A")
        decision = await _check(db, gate, user, "article", "a1")
        assert isinstance(decision, Granted)
        assert StaleOnce.calls == 2


class TestConcurrency:
    async def test_concurrent_fresh_ids_respect_limit(self, file_db, settings, add_user):
        gate = AccessGate(settings.model_copy(update={"grant_max_attempts": 20}), UsageStore())
        user = await add_user(file_db, "burst@example.com", "A")

        results = await asyncio.gather(*[
            _check(file_db, gate, user, "article", f"a{i}") for i in range(8)
        ])

        granted = [r for r in results if isinstance(r, Granted)]
        denied = [r for r in results if isinstance(r, Denied)]
        assert len(granted) == 3
        assert len(denied) == 5

        async with file_db.get_session() as session:
            usage = await UsageStore().get_usage(session, user.id)
        assert usage.count("article") == 3

    async def test_concurrent_same_id_counts_once(self, file_db, settings, add_user):
        gate = AccessGate(settings.model_copy(update={"grant_max_attempts": 20}), UsageStore())
        user = await add_user(file_db, "same@example.com", "A")

        results = await asyncio.gather(*[
            _check(file_db, gate, user, "video", "v1") for _ in range(5)
        ])

        assert all(isinstance(r, Granted) for r in results)
        async with file_db.get_session() as session:
            usage = await UsageStore().get_usage(session, user.id)
        assert usage.accessed_ids("video") == ["v1"]
