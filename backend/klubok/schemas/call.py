# klubok/schemas/call.py
"""
Pydantic schemas for room credentials and call statistics.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class TokenRequest(BaseModel):
    """
    Request for a LiveKit room credential.
    `identity` and `name` are accepted for older clients but the server always
    uses the authenticated user's username.
    """
    room: str = ""  # Room name, e.g. call-video-abcd12
    identity: Optional[str] = None
    name: Optional[str] = None


class TokenResponse(BaseModel):
    token: str  # LiveKit access token scoped to one room
    wsUrl: str  # LiveKit WebSocket endpoint


class CallIn(BaseModel):
    type: str  # "video" or "audio"
    participants: List[str] = Field(default_factory=list)  # Usernames
    duration: Optional[int] = 0  # Minutes


class CallOut(BaseModel):
    id: str
    type: str
    participants: List[str]
    duration: int
    timestamp: str


class RecordCallOut(BaseModel):
    success: bool
    call: CallOut


class StatsSummary(BaseModel):
    totalCalls: int
    videoCalls: int
    audioCalls: int
    totalDuration: int
    averageDuration: int


class StatsOut(BaseModel):
    stats: StatsSummary
    recentCalls: List[CallOut]
