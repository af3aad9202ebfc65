"""Tests for the in-process loopback channel."""

from __future__ import annotations

import pytest

from rb_bridge.channel import LoopbackChannel


pytestmark = pytest.mark.unit_bridge


def test_post_is_deferred_until_pump():
    channel = LoopbackChannel()
    received: list = []
    channel.host.on_message(received.append)

    channel.view.post({"command": "ready"})

    assert received == []
    assert channel.pending == 1
    assert channel.pump() == 1
    assert received == [{"command": "ready"}]


def test_messages_are_delivered_in_post_order():
    channel = LoopbackChannel()
    received: list = []
    channel.view.on_message(lambda msg: received.append(msg["n"]))

    for n in range(5):
        channel.host.post({"n": n})
    channel.pump()

    assert received == [0, 1, 2, 3, 4]


def test_replies_posted_by_handlers_are_delivered_in_same_pump():
    channel = LoopbackChannel()
    seen: list = []
    channel.host.on_message(lambda msg: channel.host.post({"echo": msg["n"]}))
    channel.view.on_message(seen.append)

    channel.view.post({"n": 1})
    delivered = channel.pump()

    assert delivered == 2
    assert seen == [{"echo": 1}]


def test_payload_is_serialized_on_post():
    channel = LoopbackChannel()
    received: list = []
    channel.host.on_message(received.append)
    payload = {"rows": [[1]]}

    channel.view.post(payload)
    payload["rows"].append([2])
    channel.pump()

    assert received == [{"rows": [[1]]}]


def test_pump_limit_leaves_rest_queued():
    channel = LoopbackChannel()
    channel.host.on_message(lambda msg: None)
    for n in range(3):
        channel.view.post({"n": n})

    assert channel.pump(limit=2) == 2
    assert channel.pending == 1


def test_undecodable_message_is_dropped():
    channel = LoopbackChannel()
    received: list = []
    channel.view.on_message(received.append)

    channel.enqueue(channel.view, "{not json")
    channel.pump()

    assert received == []
