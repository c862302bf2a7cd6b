"""
Integration Tests for the Coordination Store Adapters

Runs the Redis repositories against fakeredis:
- Queue list/hash layout and uid lookups
- Now-playing commit replacing the state and re-arming the skip schedule
- Schedule claim semantics under concurrent claimers
- Presence pings, reactions and invite tokens
- Event and command publishing
"""

import asyncio
import json
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import WatchError

from synced_playback.domain.playback.commands import PlayIndexCommand, SkipForwardCommand
from synced_playback.domain.playback.entities import NowPlayingState, QueueItem
from synced_playback.domain.playback.value_objects import ClaimResult
from synced_playback.domain.shared.constants import RedisKeys
from synced_playback.domain.shared.datetime_utils import to_epoch_ms
from synced_playback.domain.shared.events import SessionUpdated
from synced_playback.infrastructure.redis.command_channel import (
    RedisCommandListener,
    RedisCommandPublisher,
)
from synced_playback.infrastructure.redis.event_publisher import RedisEventPublisher
from synced_playback.infrastructure.redis.schedule_repository import RedisSortedSetSchedule

# =============================================================================
# Queue
# =============================================================================


class TestRedisQueueRepository:
    @pytest.mark.asyncio
    async def test_push_assigns_uids_and_returns_length(self, queue_repository):
        length = await queue_repository.push(
            "s1",
            [
                QueueItem(track_id="t1", creator_id="alice"),
                QueueItem(track_id="t2", creator_id="bob"),
            ],
        )

        assert length == 2
        items = await queue_repository.range("s1")
        assert [item.track_id for item in items] == ["t1", "t2"]
        assert all(item.uid for item in items)

    @pytest.mark.asyncio
    async def test_push_appends(self, queue_repository, queued_session):
        await queued_session()

        length = await queue_repository.push("sess-1", [QueueItem(track_id="t1", creator_id="bob")])

        assert length == 4
        assert (await queue_repository.item_at("sess-1", 3)).creator_id == "bob"

    @pytest.mark.asyncio
    async def test_push_nothing_keeps_length(self, queue_repository, queued_session):
        await queued_session()
        assert await queue_repository.push("sess-1", []) == 3

    @pytest.mark.asyncio
    async def test_uid_and_index_lookups(self, queue_repository, queued_session):
        uids = await queued_session()

        assert await queue_repository.length("sess-1") == 3
        assert await queue_repository.uid_at("sess-1", 1) == uids[1]
        assert await queue_repository.index_of("sess-1", uids[2]) == 2
        assert await queue_repository.uid_at("sess-1", 3) is None
        assert await queue_repository.uid_at("sess-1", -1) is None
        assert await queue_repository.index_of("sess-1", "uid-missing") is None

    @pytest.mark.asyncio
    async def test_get_item_by_uid(self, queue_repository, queued_session):
        uids = await queued_session()

        item = await queue_repository.get_item("sess-1", uids[0])

        assert item is not None
        assert item.track_id == "t1"
        assert await queue_repository.get_item("sess-1", "uid-missing") is None

    @pytest.mark.asyncio
    async def test_range_is_inclusive(self, queue_repository, queued_session):
        await queued_session()

        items = await queue_repository.range("sess-1", 1, 2)

        assert [item.track_id for item in items] == ["t2", "t3"]

    @pytest.mark.asyncio
    async def test_range_skips_uids_without_data(
        self, queue_repository, queued_session, redis_client
    ):
        uids = await queued_session()
        await redis_client.hdel(RedisKeys.queue_data("sess-1"), uids[1])

        items = await queue_repository.range("sess-1")

        assert [item.track_id for item in items] == ["t1", "t3"]

    @pytest.mark.asyncio
    async def test_delete(self, queue_repository, queued_session, redis_client):
        await queued_session()

        await queue_repository.delete("sess-1")

        assert await queue_repository.length("sess-1") == 0
        assert not await redis_client.exists(RedisKeys.queue_data("sess-1"))

    @pytest.mark.asyncio
    async def test_queues_are_isolated_per_session(self, queue_repository, queued_session):
        await queued_session("sess-1")
        assert await queue_repository.length("sess-2") == 0


# =============================================================================
# Now Playing
# =============================================================================


class TestRedisNowPlayingRepository:
    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, now_playing_repository):
        assert await now_playing_repository.get("s1") is None

    @pytest.mark.asyncio
    async def test_commit_roundtrip_keeps_microseconds(self, now_playing_repository, clock):
        clock.advance(microseconds=123_456)
        state = NowPlayingState.start(index=1, uid="uid-two", duration_ms=240_000, now=clock())

        await now_playing_repository.commit("s1", state)

        assert await now_playing_repository.get("s1") == state

    @pytest.mark.asyncio
    async def test_commit_arms_skip_schedule_at_ended_at(
        self, now_playing_repository, skip_schedule, redis_client, clock
    ):
        state = NowPlayingState.start(index=0, uid="uid-one", duration_ms=180_000, now=clock())

        await now_playing_repository.commit("s1", state)

        score = await redis_client.zscore(RedisKeys.SKIP_SCHEDULE, "s1")
        assert int(score) == to_epoch_ms(state.ended_at)
        assert await skip_schedule.deadline("s1") == state.ended_at

    @pytest.mark.asyncio
    async def test_commit_replaces_whole_state(self, now_playing_repository, redis_client, clock):
        first = NowPlayingState.start(index=0, uid="uid-one", duration_ms=180_000, now=clock())
        await now_playing_repository.commit("s1", first)
        await redis_client.hset(RedisKeys.now_playing_state("s1"), "stray", "field")

        second = NowPlayingState.start(index=1, uid="uid-two", duration_ms=1000, now=clock())
        await now_playing_repository.commit("s1", second)

        raw = await redis_client.hgetall(RedisKeys.now_playing_state("s1"))
        assert set(raw) == {"playing_index", "playing_uid", "played_at", "ended_at"}
        assert await now_playing_repository.get("s1") == second

    @pytest.mark.asyncio
    async def test_remove(self, now_playing_repository, clock):
        state = NowPlayingState.start(index=0, uid="uid-one", duration_ms=1000, now=clock())
        await now_playing_repository.commit("s1", state)

        await now_playing_repository.remove("s1")

        assert await now_playing_repository.get("s1") is None


# =============================================================================
# Schedules
# =============================================================================


class TestRedisSortedSetSchedule:
    @pytest.mark.asyncio
    async def test_due_is_inclusive_of_now(self, skip_schedule, clock):
        now = clock()
        await skip_schedule.arm("past", now - timedelta(seconds=1))
        await skip_schedule.arm("exact", now)
        await skip_schedule.arm("future", now + timedelta(milliseconds=1))

        assert set(await skip_schedule.due(now)) == {"past", "exact"}

    @pytest.mark.asyncio
    async def test_arm_moves_existing_deadline(self, skip_schedule, clock):
        await skip_schedule.arm("s1", clock())
        later = clock() + timedelta(minutes=5)

        await skip_schedule.arm("s1", later)

        assert await skip_schedule.deadline("s1") == later
        assert await skip_schedule.due(clock()) == []

    @pytest.mark.asyncio
    async def test_claim_once(self, skip_schedule, clock):
        await skip_schedule.arm("s1", clock())

        assert await skip_schedule.claim("s1") is ClaimResult.CLAIMED
        assert await skip_schedule.claim("s1") is ClaimResult.ALREADY_HANDLED
        assert await skip_schedule.deadline("s1") is None

    @pytest.mark.asyncio
    async def test_concurrent_claims_have_one_winner(self, skip_schedule, clock):
        await skip_schedule.arm("s1", clock())

        results = await asyncio.gather(*(skip_schedule.claim("s1") for _ in range(10)))

        assert results.count(ClaimResult.CLAIMED) == 1

    @pytest.mark.asyncio
    async def test_claim_due_ignores_rearmed_entry(self, skip_schedule, clock):
        stale_now = clock()
        await skip_schedule.arm("s1", stale_now + timedelta(minutes=3))

        assert await skip_schedule.claim_due("s1", stale_now) is ClaimResult.ALREADY_HANDLED
        assert await skip_schedule.deadline("s1") is not None

    @pytest.mark.asyncio
    async def test_claim_due_takes_due_entry(self, skip_schedule, clock):
        await skip_schedule.arm("s1", clock())

        assert await skip_schedule.claim_due("s1", clock()) is ClaimResult.CLAIMED
        assert await skip_schedule.claim_due("s1", clock()) is ClaimResult.ALREADY_HANDLED

    @pytest.mark.asyncio
    async def test_concurrent_due_claims_have_one_winner(self, skip_schedule, clock):
        await skip_schedule.arm("s1", clock())
        await skip_schedule.arm("s2", clock())

        results = await asyncio.gather(
            *(skip_schedule.claim_due("s1", clock()) for _ in range(5)),
            skip_schedule.claim_due("s2", clock()),
        )

        assert results[:5].count(ClaimResult.CLAIMED) == 1
        assert results[5] is ClaimResult.CLAIMED

    @pytest.mark.asyncio
    async def test_contended_claim_gives_up_after_bounded_attempts(self, clock):
        pipe = MagicMock()
        pipe.__aenter__.return_value = pipe
        pipe.watch = AsyncMock(side_effect=WatchError("set changed"))
        client = MagicMock()
        client.pipeline.return_value = pipe
        schedule = RedisSortedSetSchedule(client, RedisKeys.SKIP_SCHEDULE, claim_attempts=3)

        assert await schedule.claim_due("s1", clock()) is ClaimResult.ALREADY_HANDLED
        assert pipe.watch.await_count == 3
        pipe.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_arm_if_absent_keeps_existing_deadline(self, skip_schedule, clock):
        later = clock() + timedelta(minutes=5)
        await skip_schedule.arm("s1", later)

        assert await skip_schedule.arm_if_absent("s1", clock()) is False
        assert await skip_schedule.deadline("s1") == later
        assert await skip_schedule.arm_if_absent("s2", clock()) is True
        assert await skip_schedule.deadline("s2") == clock()

    @pytest.mark.asyncio
    async def test_cancel_is_a_claim(self, skip_schedule, clock):
        await skip_schedule.arm("s1", clock())

        assert await skip_schedule.cancel("s1") is ClaimResult.CLAIMED
        assert await skip_schedule.cancel("s1") is ClaimResult.ALREADY_HANDLED

    @pytest.mark.asyncio
    async def test_schedules_use_separate_keys(self, skip_schedule, session_end_schedule, clock):
        await skip_schedule.arm("s1", clock())

        assert await session_end_schedule.due(clock()) == []
        assert skip_schedule.key != session_end_schedule.key


# =============================================================================
# Presence, Reactions, Invite Tokens
# =============================================================================


class TestRedisPresenceRepository:
    @pytest.mark.asyncio
    async def test_ping_returns_previous_ping(self, presence_repository, clock):
        first = clock()
        assert await presence_repository.ping("s1", "bob", first) is None

        second = clock.advance(seconds=30)
        assert await presence_repository.ping("s1", "bob", second) == first

    @pytest.mark.asyncio
    async def test_active_since_is_exclusive_and_most_recent_first(
        self, presence_repository, clock
    ):
        start = clock()
        await presence_repository.ping("s1", "old", start)
        await presence_repository.ping("s1", "bob", clock.advance(seconds=10))
        await presence_repository.ping("s1", "carol", clock.advance(seconds=10))

        assert await presence_repository.active_since("s1", start) == ["carol", "bob"]

    @pytest.mark.asyncio
    async def test_clear(self, presence_repository, clock):
        await presence_repository.ping("s1", "bob", clock())

        await presence_repository.clear("s1")

        assert await presence_repository.active_since("s1", clock() - timedelta(hours=1)) == []


class TestRedisReactionRepository:
    @pytest.mark.asyncio
    async def test_set_replace_remove(self, reaction_repository):
        await reaction_repository.set("s1", "uid-one", "bob", "🔥")
        await reaction_repository.set("s1", "uid-one", "bob", "✨")
        await reaction_repository.set("s1", "uid-one", "carol", "🔥")

        assert await reaction_repository.all("s1", "uid-one") == {"bob": "✨", "carol": "🔥"}

        await reaction_repository.remove("s1", "uid-one", "bob")
        assert await reaction_repository.all("s1", "uid-one") == {"carol": "🔥"}

    @pytest.mark.asyncio
    async def test_reactions_are_per_uid(self, reaction_repository):
        await reaction_repository.set("s1", "uid-one", "bob", "🔥")
        assert await reaction_repository.all("s1", "uid-two") == {}


class TestRedisInviteTokenRepository:
    @pytest.mark.asyncio
    async def test_create_is_idempotent(self, invite_token_repository):
        token = await invite_token_repository.create("s1")

        assert token
        assert await invite_token_repository.create("s1") == token
        assert await invite_token_repository.get("s1") == token

    @pytest.mark.asyncio
    async def test_delete(self, invite_token_repository):
        await invite_token_repository.create("s1")

        await invite_token_repository.delete("s1")

        assert await invite_token_repository.get("s1") is None


# =============================================================================
# Pub/Sub
# =============================================================================


class TestRedisEventPublisher:
    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self, redis_client):
        publisher = RedisEventPublisher(redis_client)
        assert await publisher.publish(SessionUpdated(session_id="s1", is_live=False)) == 0

    @pytest.mark.asyncio
    async def test_subscriber_receives_json(self, redis_client):
        publisher = RedisEventPublisher(redis_client)
        pubsub = redis_client.pubsub()
        await pubsub.subscribe("SESSION_UPDATED:s1")
        confirmation = await pubsub.get_message(timeout=1.0)
        assert confirmation is not None
        assert confirmation["type"] == "subscribe"

        receivers = await publisher.publish(SessionUpdated(session_id="s1", is_live=False))
        message = None
        for _ in range(20):
            message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=0.1)
            if message is not None:
                break

        await pubsub.unsubscribe()
        await pubsub.aclose()

        assert receivers == 1
        assert message is not None
        payload = json.loads(message["data"])
        assert payload["event_type"] == "SessionUpdated"
        assert payload["is_live"] is False


class TestRedisCommandChannel:
    def test_parse_valid(self):
        command = RedisCommandListener.parse(
            '{"action": "playIndex", "session_id": "s1", "index": 0}'
        )
        assert command == PlayIndexCommand(session_id="s1", index=0)

    def test_parse_malformed_returns_none(self, caplog):
        assert RedisCommandListener.parse("s1|1714564800000") is None
        assert "Dropping malformed playback command" in caplog.text

    @pytest.mark.asyncio
    async def test_listener_yields_published_commands(self, redis_client):
        publisher = RedisCommandPublisher(redis_client, channel="TEST_WORKER")
        listener = RedisCommandListener(redis_client, channel="TEST_WORKER")
        received = []
        subscribed = asyncio.Event()

        async def consume():
            stream = listener.listen()
            first = asyncio.ensure_future(stream.__anext__())
            subscribed.set()
            received.append(await first)
            await stream.aclose()

        task = asyncio.create_task(consume())
        await subscribed.wait()
        # Publish until the subscription is in place.
        for _ in range(50):
            await publisher.publish(SkipForwardCommand(session_id="s1"))
            await asyncio.sleep(0.01)
            if received:
                break
        await asyncio.wait_for(task, timeout=2)

        assert received == [SkipForwardCommand(session_id="s1")]
