"""
rbac_gate.services.health

Custom service health indicator backed by an explicitly owned flag.

Responsibilities:
- `ServiceFlag`: thread-safe boolean shared by the toggle endpoint and the reader.
- Report UP/DOWN with a detail message for the simulated custom service.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Literal


class ServiceFlag:
    def __init__(self, initial: bool = False) -> None:
        self._lock = threading.Lock()
        self._value = initial

    def toggle(self) -> bool:
        with self._lock:
            self._value = not self._value
            return self._value

    def set(self, value: bool) -> None:
        with self._lock:
            self._value = value

    def is_set(self) -> bool:
        with self._lock:
            return self._value


@dataclass(frozen=True, slots=True)
class HealthReport:
    status: Literal["UP", "DOWN"]
    details: dict[str, str] = field(default_factory=dict)


def custom_service_health(flag: ServiceFlag) -> HealthReport:
    if flag.is_set():
        return HealthReport(status="UP", details={"customService": "Running Smoothly"})
    return HealthReport(status="DOWN", details={"customService": "Not Responding"})
