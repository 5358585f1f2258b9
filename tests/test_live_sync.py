"""Tests for the background Realtime change feed."""

import threading
import time

import pytest

from utils.live_sync import ChangeFeed


class FakeChannel:
    def __init__(self, name):
        self.name = name
        self.handlers = []
        self.subscribed = False

    def on_postgres_changes(self, event, callback, table="*", schema="public", filter=None):
        self.handlers.append((event, schema, table, callback))
        return self

    async def subscribe(self, callback=None):
        self.subscribed = True
        return self

    def emit(self, payload=None):
        for _, _, _, cb in self.handlers:
            cb(payload or {"eventType": "INSERT"})


class FakeAsyncClient:
    def __init__(self):
        self.channels = []
        self.removed = []

    def channel(self, name):
        ch = FakeChannel(name)
        self.channels.append(ch)
        return ch

    async def remove_channel(self, channel):
        self.removed.append(channel)


@pytest.fixture
def client():
    return FakeAsyncClient()


@pytest.fixture
def feed(client):
    async def factory(url, key):
        return client

    f = ChangeFeed("https://x.supabase.co", "anon", "santa_letters", client_factory=factory)
    yield f
    f.stop()


def test_subscribes_to_all_events_on_the_table(feed, client):
    feed.start()
    assert feed.running
    assert feed.subscribed
    (channel,) = client.channels
    assert channel.subscribed
    event, schema, table, _ = channel.handlers[0]
    assert (event, schema, table) == ("*", "public", "santa_letters")


def test_each_change_bumps_version(feed, client):
    feed.start()
    assert feed.version == 0
    channel = client.channels[0]
    channel.emit()
    channel.emit({"eventType": "DELETE"})
    assert feed.version == 2


def test_stop_removes_channel_and_joins_thread(feed, client):
    feed.start()
    channel = client.channels[0]
    feed.stop()
    assert client.removed == [channel]
    assert not feed.running
    assert not feed.subscribed
    feed.stop()  # second stop is a no-op
    assert client.removed == [channel]


def test_start_is_idempotent(feed, client):
    feed.start()
    feed.start()
    assert len(client.channels) == 1


def test_connection_failure_is_reported_not_raised():
    async def factory(url, key):
        raise ConnectionError("realtime down")

    f = ChangeFeed("https://x.supabase.co", "anon", "santa_letters", client_factory=factory)
    f.start()
    assert "realtime down" in f.error
    assert not f.subscribed
    f.stop()
    assert not f.running
    assert not any(t.name == "live-santa_letters" for t in threading.enumerate())


# ──── Heartbeat watchdog ────

class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def wait_until(cond, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not cond():
        if time.monotonic() > deadline:
            return False
        time.sleep(0.01)
    return True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def watched_feed(client, clock):
    async def factory(url, key):
        return client

    f = ChangeFeed(
        "https://x.supabase.co",
        "anon",
        "santa_letters",
        client_factory=factory,
        idle_timeout=20.0,
        watchdog_interval=0.01,
        clock=clock,
    )
    yield f
    f.stop()


def test_untouched_feed_closes_itself(watched_feed, client, clock):
    watched_feed.start()
    channel = client.channels[0]
    clock.advance(21)
    assert wait_until(lambda: not watched_feed.running)
    assert client.removed == [channel]
    assert watched_feed.abandoned
    assert not watched_feed.subscribed
    assert not any(t.name == "live-santa_letters" for t in threading.enumerate())


def test_touched_feed_stays_open(watched_feed, client, clock):
    watched_feed.start()
    clock.advance(15)
    watched_feed.touch()
    clock.advance(15)
    time.sleep(0.1)
    assert watched_feed.running
    assert watched_feed.subscribed
    assert client.removed == []


def test_stop_after_self_close_is_a_no_op(watched_feed, client, clock):
    watched_feed.start()
    clock.advance(21)
    assert wait_until(lambda: not watched_feed.running)
    watched_feed.stop()
    assert len(client.removed) == 1


def test_abandoned_feed_can_be_restarted(watched_feed, client, clock):
    watched_feed.start()
    clock.advance(21)
    assert wait_until(lambda: not watched_feed.running)
    watched_feed.start()
    assert watched_feed.running
    assert not watched_feed.abandoned
    assert len(client.channels) == 2
