from collections import namedtuple

import psutil
import pytest

GIB = 1024 ** 3

FakeMemory = namedtuple("FakeMemory", ["total", "available", "percent", "used", "free"])
FakePartition = namedtuple("FakePartition", ["device", "mountpoint", "fstype", "opts"])
FakeUsage = namedtuple("FakeUsage", ["total", "used", "free", "percent"])


class FakeHost:
    """Stands in for the psutil calls the samplers make."""

    def __init__(self):
        self.cpu = 12.5
        self.memory_total = 16 * GIB
        self.memory_available = 8 * GIB
        # mountpoint -> (total, free); None marks an unreadable mount
        self.disks = {
            "/": (100 * GIB, 25 * GIB),
            "/data": (400 * GIB, 175 * GIB),
        }

    def cpu_percent(self, interval=None):
        return self.cpu

    def virtual_memory(self):
        used = self.memory_total - self.memory_available
        return FakeMemory(self.memory_total, self.memory_available, 0.0, used, self.memory_available)

    def disk_partitions(self, all=False):
        return [FakePartition(f"/dev/fake{i}", mount, "ext4", "rw") for i, mount in enumerate(self.disks)]

    def disk_usage(self, path):
        entry = self.disks[path]
        if entry is None:
            raise PermissionError(13, "Permission denied", path)
        total, free = entry
        return FakeUsage(total, total - free, free, 0.0)


@pytest.fixture
def fake_host(monkeypatch):
    host = FakeHost()
    monkeypatch.setattr(psutil, "cpu_percent", host.cpu_percent)
    monkeypatch.setattr(psutil, "virtual_memory", host.virtual_memory)
    monkeypatch.setattr(psutil, "disk_partitions", host.disk_partitions)
    monkeypatch.setattr(psutil, "disk_usage", host.disk_usage)
    return host
