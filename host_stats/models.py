"""Response models for the stats endpoint."""
from pydantic import BaseModel, ConfigDict


class UsageInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    used: str
    total: str
    percentage: str


class ServerStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    cpu_usage: str
    ram: UsageInfo
    storage: UsageInfo
