"""Unit tests for the BridgeComponent lifecycle."""

from typing import Any, Dict

import pytest

from agentic_ui.bridge.capabilities import CapabilityKind, CapabilityRegistry, ParameterSpec, ParameterType
from agentic_ui.bridge.components import BridgeComponent
from agentic_ui.bridge.dispatch import DispatchExecutor
from agentic_ui.bridge.readable import ReadableAggregator


class Counter(BridgeComponent):
    component_name = "counter"

    def __init__(self) -> None:
        super().__init__({"count": 0})

    def setup(self) -> None:
        self.use_readable("count", "The current count", lambda: {"count": self.state["count"]})
        self.use_action(
            "setCount",
            "Set the counter to a value",
            self.set_count,
            [ParameterSpec(name="value", type=ParameterType.NUMBER)],
        )

    def set_count(self, params: Dict[str, Any]) -> str:
        self.set_state(count=params["value"])
        return f"Count is now {params['value']}"


class Broken(BridgeComponent):
    component_name = "broken"

    def setup(self) -> None:
        self.use_action("halfway", "Registered before the failure", lambda params: None)
        raise RuntimeError("setup failed")


class TestMountLifecycle:
    """Test mount and unmount."""

    def test_mount_registers_capabilities(self, registry: CapabilityRegistry):
        counter = Counter().mount(registry)

        assert counter.mounted
        assert registry.get_action("setCount") is not None
        assert registry.owner_of(CapabilityKind.ACTION, "setCount") == counter.owner_id
        assert len(registry.list(CapabilityKind.READABLE)) == 1

    def test_owner_id_uses_component_name(self):
        assert Counter().owner_id.startswith("counter-")

    def test_unmount_removes_everything(self, registry: CapabilityRegistry):
        counter = Counter().mount(registry)
        counter.unmount()

        assert not counter.mounted
        assert len(registry) == 0

    def test_unmount_twice_is_safe(self, registry: CapabilityRegistry):
        counter = Counter().mount(registry)
        counter.unmount()
        counter.unmount()

    def test_mount_twice_raises(self, registry: CapabilityRegistry):
        counter = Counter().mount(registry)
        with pytest.raises(RuntimeError, match="already mounted"):
            counter.mount(registry)

    def test_remount_after_unmount(self, registry: CapabilityRegistry):
        counter = Counter().mount(registry)
        counter.unmount()
        counter.mount(registry)

        assert registry.get_action("setCount") is not None

    def test_failed_setup_rolls_back(self, registry: CapabilityRegistry):
        broken = Broken()
        with pytest.raises(RuntimeError, match="setup failed"):
            broken.mount(registry)

        assert not broken.mounted
        assert len(registry) == 0

    def test_mounted_in_context(self, registry: CapabilityRegistry):
        with Counter().mounted_in(registry) as counter:
            assert counter.mounted
        assert len(registry) == 0

    def test_use_action_requires_mount(self):
        with pytest.raises(RuntimeError, match="not mounted"):
            Counter().use_action("x", "x", lambda params: None)


class TestStatePublishing:
    """Test that readables follow component state."""

    @pytest.mark.asyncio
    async def test_action_updates_are_visible_to_next_snapshot(self, registry: CapabilityRegistry):
        Counter().mount(registry)
        aggregator = ReadableAggregator(registry)
        assert aggregator.snapshot()[0].value == {"count": 0}

        result = await DispatchExecutor(registry).invoke("setCount", {"value": 7})

        assert result.result_text == "Count is now 7"
        assert aggregator.snapshot()[0].value == {"count": 7}

    def test_set_state_while_unmounted_does_not_publish(self, registry: CapabilityRegistry):
        counter = Counter()
        counter.set_state(count=3)

        assert counter.state["count"] == 3
        assert len(registry) == 0

    def test_two_instances_keep_separate_readables(self, registry: CapabilityRegistry):
        first, second = Counter().mount(registry), Counter().mount(registry)
        first.set_state(count=1)
        second.set_state(count=2)

        values = [item.value for item in ReadableAggregator(registry).snapshot()]
        assert values == [{"count": 1}, {"count": 2}]

    def test_unmounting_old_instance_keeps_newer_action(self, registry: CapabilityRegistry):
        first, second = Counter().mount(registry), Counter().mount(registry)
        first.unmount()

        assert registry.owner_of(CapabilityKind.ACTION, "setCount") == second.owner_id
        assert len(registry.list(CapabilityKind.READABLE)) == 1
