"""State of systems made of redundant A and B devices."""

from __future__ import annotations

from enum import Enum

from .params import RepairableSystemParams, SystemParams

REPAIR_STATES = 3


class Device(Enum):
    """Kind of device in a system."""

    A = "A"
    B = "B"


class System:
    """Non-repairable system: devices only fail."""

    def __init__(self, params: SystemParams) -> None:
        self.params = params
        self.working_a = params.na + params.ra
        self.working_b = params.nb + params.rb

    def is_operational(self) -> bool:
        return self.working_a >= 1 and self.working_b >= self.params.nb

    def device_failure(self, device: Device) -> None:
        """Take one working device of the given kind out of service."""
        if device is Device.A and self.working_a > 0:
            self.working_a -= 1
        elif device is Device.B and self.working_b > 0:
            self.working_b -= 1

    def current_state(self) -> tuple[int, int]:
        return self.working_a, self.working_b

    def _sizes(self) -> tuple[int, int]:
        return self.params.na + self.params.ra + 1, self.params.nb + self.params.rb + 1

    def state_to_index(self, a: int, b: int) -> int:
        """Index of state ``(a, b)``; the fully working state has index 0."""
        size_a, size_b = self._sizes()
        return (size_a - a - 1) * size_b + (size_b - b - 1)

    def index_to_state(self, index: int) -> tuple[int, int]:
        size_a, size_b = self._sizes()
        row, col = divmod(index, size_b)
        return size_a - 1 - row, size_b - 1 - col

    def total_states(self) -> int:
        size_a, size_b = self._sizes()
        return size_a * size_b


class RepairableSystem:
    """System with a single repair unit restoring failed devices."""

    def __init__(self, params: RepairableSystemParams) -> None:
        self.params = params
        self.working_a = params.na + params.ra
        self.working_b = params.nb + params.rb
        self.repairing_a = 0
        self.repairing_b = 0

    def is_operational(self) -> bool:
        return self.working_a >= 1 and self.working_b >= self.params.nb

    def device_failure(self, device: Device) -> None:
        """Move one working device of the given kind to the repair queue."""
        if device is Device.A and self.working_a > 0:
            self.working_a -= 1
            self.repairing_a += 1
        elif device is Device.B and self.working_b > 0:
            self.working_b -= 1
            self.repairing_b += 1

    def device_repair(self) -> None:
        """Finish repairing the device chosen by :meth:`device_to_repair`."""
        device = self.device_to_repair()
        if device is Device.A:
            self.repairing_a -= 1
            self.working_a += 1
        elif device is Device.B:
            self.repairing_b -= 1
            self.working_b += 1

    def device_to_repair(self) -> Device | None:
        """Kind with the longer queue; ties go to the faster-failing kind."""
        if not self.has_devices_to_repair():
            return None
        if self.repairing_a > self.repairing_b:
            return Device.A
        if self.repairing_b > self.repairing_a:
            return Device.B
        return Device.A if self.params.lambda_a >= self.params.lambda_b else Device.B

    def has_devices_to_repair(self) -> bool:
        return self.repairing_a > 0 or self.repairing_b > 0

    def current_state(self) -> tuple[int, int, int]:
        """``(working A, working B, repair status)``; status 0 idle, 1 A, 2 B."""
        status = 0
        if self.has_devices_to_repair():
            status = 1 if self.device_to_repair() is Device.A else 2
        return self.working_a, self.working_b, status

    def _sizes(self) -> tuple[int, int]:
        return self.params.na + self.params.ra + 1, self.params.nb + self.params.rb + 1

    def state_to_index(self, a: int, b: int, r: int) -> int:
        size_a, size_b = self._sizes()
        return size_a * size_b * r + size_b * a + b

    def state_to_graph_index(self, a: int, b: int) -> int:
        """Index of ``(a, b)`` in the state graph; the full state is 0."""
        size_a, size_b = self._sizes()
        return (size_a - a - 1) * size_b + (size_b - b - 1)

    def index_to_state(self, index: int) -> tuple[int, int, int]:
        size_a, size_b = self._sizes()
        r, remainder = divmod(index, size_a * size_b)
        a, b = divmod(remainder, size_b)
        return a, b, r

    def total_states(self) -> int:
        size_a, size_b = self._sizes()
        return size_a * size_b * REPAIR_STATES

    def aggregated_states(self) -> int:
        """Number of ``(a, b)`` states, ignoring the repair status."""
        size_a, size_b = self._sizes()
        return size_a * size_b

    def max_devices(self) -> tuple[int, int]:
        return self.params.na + self.params.ra, self.params.nb + self.params.rb