"""Lock-guarded psutil samplers backing the ``/stats`` endpoint."""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, NamedTuple, Optional, Tuple

import psutil

from .errors import SamplerPoisonedError
from .formatting import format_bytes, format_percentage, usage_percentage, used_percentage_from_available
from .models import ServerStats, UsageInfo

logger = logging.getLogger(__name__)


class MemorySample(NamedTuple):
    cpu_percent: float
    used_bytes: int
    total_bytes: int


class DiskSample(NamedTuple):
    used_bytes: int
    total_bytes: int
    available_bytes: int


class DiskInfo(NamedTuple):
    mountpoint: str
    total_bytes: int
    available_bytes: int


class _GuardedSampler:
    """Serializes refresh+read on one sampler.

    An exception escaping the critical section poisons the sampler: its cached
    state may be half-updated, so every later acquisition fails instead.
    """

    name = "sampler"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @contextmanager
    def _guard(self) -> Iterator[None]:
        with self._lock:
            if self._poisoned:
                raise SamplerPoisonedError(self.name)
            try:
                yield
            except Exception as exc:
                self._poisoned = True
                logger.exception("%s sampler failed during refresh", self.name)
                raise SamplerPoisonedError(self.name) from exc


class CpuMemorySampler(_GuardedSampler):
    name = "cpu/memory"

    def __init__(self) -> None:
        super().__init__()
        self._cpu_percent = 0.0
        self._used_memory = 0
        self._total_memory = 0
        # The first cpu_percent() call only primes psutil's counters.
        self.refresh()

    def refresh(self) -> None:
        self._cpu_percent = float(psutil.cpu_percent(interval=None))
        memory = psutil.virtual_memory()
        self._total_memory = int(memory.total)
        self._used_memory = max(0, int(memory.total) - int(memory.available))

    def read(self) -> MemorySample:
        with self._guard():
            self.refresh()
            return MemorySample(self._cpu_percent, self._used_memory, self._total_memory)


class DiskSampler(_GuardedSampler):
    name = "disk"

    def __init__(self) -> None:
        super().__init__()
        self._disks: List[DiskInfo] = []
        self.refresh_list()

    @property
    def mounted(self) -> List[DiskInfo]:
        return list(self._disks)

    def refresh_list(self) -> None:
        disks = []
        for partition in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(partition.mountpoint)
            except OSError as exc:
                logger.debug("Skipping %s: %s", partition.mountpoint, exc)
                continue
            disks.append(DiskInfo(partition.mountpoint, int(usage.total), int(usage.free)))
        self._disks = disks

    def read(self) -> DiskSample:
        with self._guard():
            self.refresh_list()
            total = sum(disk.total_bytes for disk in self._disks)
            available = sum(disk.available_bytes for disk in self._disks)
            return DiskSample(max(0, total - available), total, available)


class StatsSampler:
    """Produces point-in-time CPU, memory and disk snapshots."""

    def __init__(
        self,
        cpu_memory: Optional[CpuMemorySampler] = None,
        disks: Optional[DiskSampler] = None,
    ) -> None:
        self.cpu_memory = cpu_memory if cpu_memory is not None else CpuMemorySampler()
        self.disks = disks if disks is not None else DiskSampler()

    def sample_cpu(self) -> float:
        return self.cpu_memory.read().cpu_percent

    def sample_memory(self) -> Tuple[int, int]:
        sample = self.cpu_memory.read()
        return sample.used_bytes, sample.total_bytes

    def sample_disks(self) -> Tuple[int, int]:
        sample = self.disks.read()
        return sample.used_bytes, sample.total_bytes

    def snapshot(self) -> ServerStats:
        memory = self.cpu_memory.read()
        disk = self.disks.read()

        ram = UsageInfo(
            used=format_bytes(memory.used_bytes),
            total=format_bytes(memory.total_bytes),
            percentage=format_percentage(usage_percentage(memory.used_bytes, memory.total_bytes)),
        )
        storage = UsageInfo(
            used=format_bytes(disk.used_bytes),
            total=format_bytes(disk.total_bytes),
            percentage=format_percentage(
                used_percentage_from_available(disk.available_bytes, disk.total_bytes)
            ),
        )
        return ServerStats(
            cpu_usage=format_percentage(memory.cpu_percent),
            ram=ram,
            storage=storage,
        )
