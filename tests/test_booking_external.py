"""Tests for the policy manager, resource locks and completion scheduler."""

import asyncio
from datetime import time

import pytest
from watchdog.events import FileMovedEvent

from campus_booking.bookings.domain import BookingPolicy
from campus_booking.bookings.infrastructure import (
    BookingCompletionScheduler,
    BookingPolicyManager,
    ResourceLockRegistry,
)
from campus_booking.bookings.infrastructure.external import PolicyFileHandler
from campus_booking.core import ConfigurationException

POLICY_YAML = """
opening_time: "09:00"
closing_time: "17:00"
max_duration_minutes: 120
resource_type_overrides:
  Equipment:
    min_minutes: 30
    max_minutes: 480
"""


class TestBookingPolicyManager:
    def test_missing_file_uses_defaults(self, tmp_path):
        manager = BookingPolicyManager()
        policy = manager.load(tmp_path / "absent.yaml")

        assert policy == BookingPolicy()
        assert manager.source == "defaults"

    def test_load_file(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text(POLICY_YAML)

        manager = BookingPolicyManager()
        manager.load(path)
        policy = manager.get_policy()

        assert policy.opening_time == time(9, 0)
        assert policy.closing_time == time(17, 0)
        assert policy.limits_for("Equipment").max_minutes == 480
        assert policy.limits_for("Room").max_minutes == 120
        assert manager.source == str(path)

    def test_invalid_file_fails_initial_load(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text("opening_time: '18:00'\nclosing_time: '08:00'\n")

        with pytest.raises(ConfigurationException):
            BookingPolicyManager().load(path)

    def test_reload_picks_up_changes(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text(POLICY_YAML)
        manager = BookingPolicyManager()
        manager.load(path)

        path.write_text("max_days_in_advance: 14\n")
        assert manager.reload() is True
        assert manager.get_policy().max_days_in_advance == 14

    def test_reload_keeps_previous_policy_on_error(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text(POLICY_YAML)
        manager = BookingPolicyManager()
        manager.load(path)

        path.write_text("min_duration_minutes: [not, a, number]\n")
        assert manager.reload() is False
        assert manager.get_policy().closing_time == time(17, 0)

        path.write_text("opening_time: '09:00\n")
        assert manager.reload() is False
        assert manager.get_policy().closing_time == time(17, 0)

    def test_unreadable_file_fails_initial_load(self, tmp_path):
        policy_dir = tmp_path / "booking_policy.yaml"
        policy_dir.mkdir()

        with pytest.raises(ConfigurationException) as exc_info:
            BookingPolicyManager().load(policy_dir)
        assert exc_info.value.details["error"]

    def test_file_replaced_by_rename_is_reloaded(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text(POLICY_YAML)
        manager = BookingPolicyManager()
        manager.load(path)
        handler = PolicyFileHandler(manager, path)

        staged = tmp_path / ".policy.yaml.tmp"
        staged.write_text("max_days_in_advance: 14\n")
        staged.replace(path)
        handler.dispatch(FileMovedEvent(str(staged), str(path)))

        assert manager.get_policy().max_days_in_advance == 14

    def test_rename_of_other_file_is_ignored(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text(POLICY_YAML)
        manager = BookingPolicyManager()
        manager.load(path)
        handler = PolicyFileHandler(manager, path)

        path.write_text("max_days_in_advance: 14\n")
        handler.dispatch(FileMovedEvent(str(path), str(tmp_path / "policy.yaml.bak")))

        assert manager.get_policy().max_days_in_advance == 90

    def test_get_policy_before_load(self):
        with pytest.raises(RuntimeError):
            BookingPolicyManager().get_policy()

    def test_watching_lifecycle(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text(POLICY_YAML)
        manager = BookingPolicyManager()
        manager.load(path)

        manager.start_watching()
        try:
            assert manager.is_watching
        finally:
            manager.stop_watching()
        assert not manager.is_watching

    def test_no_watch_without_file(self, tmp_path):
        manager = BookingPolicyManager()
        manager.load(tmp_path / "absent.yaml")
        manager.start_watching()
        assert not manager.is_watching


class TestResourceLockRegistry:
    async def test_same_resource_is_serialized(self):
        locks = ResourceLockRegistry()
        events = []

        async def worker(name: str):
            async with locks.hold(1):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))

        assert events in (
            ["a-in", "a-out", "b-in", "b-out"],
            ["b-in", "b-out", "a-in", "a-out"],
        )

    async def test_different_resources_run_concurrently(self):
        locks = ResourceLockRegistry()
        inside = asyncio.Event()

        async def holder():
            async with locks.hold(1):
                inside.set()
                await asyncio.sleep(0.05)

        async def other():
            await inside.wait()
            async with locks.hold(2):
                return "acquired"

        _, result = await asyncio.wait_for(asyncio.gather(holder(), other()), timeout=1)
        assert result == "acquired"
        assert len(locks) == 0

    async def test_lock_dropped_after_last_holder(self):
        locks = ResourceLockRegistry()

        for resource_id in range(100):
            async with locks.hold(resource_id):
                assert len(locks) == 1

        assert len(locks) == 0

    async def test_lock_kept_while_waiters_remain(self):
        locks = ResourceLockRegistry()
        released = asyncio.Event()
        order = []

        async def first():
            async with locks.hold(1):
                await released.wait()
                order.append("first")

        async def second():
            async with locks.hold(1):
                order.append("second")

        tasks = [asyncio.create_task(first()), asyncio.create_task(second())]
        await asyncio.sleep(0.01)
        assert len(locks) == 1

        released.set()
        await asyncio.gather(*tasks)
        assert order == ["first", "second"]
        assert len(locks) == 0

    async def test_cancelled_waiter_does_not_leak(self):
        locks = ResourceLockRegistry()

        async def waiter_body():
            async with locks.hold(1):
                pass

        async with locks.hold(1):
            waiter = asyncio.create_task(waiter_body())
            await asyncio.sleep(0.01)
            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter

        assert len(locks) == 0


class TestBookingCompletionScheduler:
    async def test_disabled_interval_does_not_start(self):
        scheduler = BookingCompletionScheduler(interval_seconds=0)

        async def job():
            pass

        await scheduler.start(job)
        assert not scheduler.is_running

    async def test_start_and_stop(self):
        scheduler = BookingCompletionScheduler(interval_seconds=3600)

        async def job():
            pass

        await scheduler.start(job)
        assert scheduler.is_running
        await scheduler.stop()
        assert not scheduler.is_running
