# klubok/services/stats.py
"""
In-process call statistics: running counters plus the most recent calls.
Lost on restart.
"""
from __future__ import annotations

import asyncio
from collections import deque
import datetime as dt
from dataclasses import dataclass, field

from klubok.core.errors import ValidationError
from klubok.services.auth import generate_id

CALL_TYPES = ("video", "audio")
RECENT_CALLS = 10


@dataclass
class CallRecord:
    id: str
    type: str
    participants: list[str]
    duration: int  # minutes
    timestamp: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "participants": list(self.participants),
            "duration": self.duration,
            "timestamp": self.timestamp.isoformat(),
        }


class CallStatsRecorder:
    def __init__(self):
        self._recent: deque[CallRecord] = deque(maxlen=RECENT_CALLS)
        self._total_calls = 0
        self._video_calls = 0
        self._audio_calls = 0
        self._total_duration = 0
        self._lock = asyncio.Lock()

    async def record(self, call_type: str, participants: list[str] | None, duration: int | None) -> CallRecord:
        if call_type not in CALL_TYPES:
            raise ValidationError(f"Call type must be one of: {', '.join(CALL_TYPES)}")
        duration = duration or 0
        if duration < 0:
            raise ValidationError("Duration must not be negative")
        call = CallRecord(
            id=generate_id(),
            type=call_type,
            participants=list(participants or []),
            duration=duration,
        )
        async with self._lock:
            self._recent.append(call)
            self._total_calls += 1
            if call_type == "video":
                self._video_calls += 1
            else:
                self._audio_calls += 1
            self._total_duration += duration
        return call

    def summary(self) -> dict:
        total = self._total_calls
        return {
            "stats": {
                "totalCalls": total,
                "videoCalls": self._video_calls,
                "audioCalls": self._audio_calls,
                "totalDuration": self._total_duration,
                # halves round up
                "averageDuration": int(self._total_duration / total + 0.5) if total else 0,
            },
            "recentCalls": [c.to_dict() for c in reversed(self._recent)],
        }
