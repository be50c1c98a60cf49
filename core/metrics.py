from datetime import datetime
from typing import Dict, Optional


class ContainerMetrics:
    def __init__(self):
        self.lookups = 0
        self.hits = 0
        self.misses = 0
        self.joins = 0
        self.initializations = 0
        self.initialization_failures = 0
        self.invalidations = 0
        self.last_initialized_at: Optional[datetime] = None

    @property
    def hit_rate(self) -> float:
        if self.lookups == 0:
            return 0.0
        return (self.hits / self.lookups) * 100.0

    def reset(self):
        self.lookups = 0
        self.hits = 0
        self.misses = 0
        self.joins = 0
        self.initializations = 0
        self.initialization_failures = 0
        self.invalidations = 0
        self.last_initialized_at = None

    def to_dict(self) -> Dict:
        return {
            "lookups": self.lookups,
            "hits": self.hits,
            "misses": self.misses,
            "joins": self.joins,
            "hit_rate_percent": round(self.hit_rate, 2),
            "initializations": self.initializations,
            "initialization_failures": self.initialization_failures,
            "invalidations": self.invalidations,
            "last_initialized_at": self.last_initialized_at.isoformat() if self.last_initialized_at else None,
        }
