import time
from dataclasses import dataclass, field
from typing import Optional
from redis.asyncio import Redis

@dataclass
class RuntimeState:
    """Centralized runtime state"""
    redis: Optional[Redis] = None
    start_time: float = field(default_factory=time.time)

state = RuntimeState()
