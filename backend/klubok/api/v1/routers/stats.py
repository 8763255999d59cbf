# klubok/api/v1/routers/stats.py
from fastapi import APIRouter, Depends

from klubok.api.v1.deps import get_session_user_id, get_stats_recorder
from klubok.schemas.call import CallIn, RecordCallOut, StatsOut
from klubok.services.stats import CallStatsRecorder

router = APIRouter(prefix="/stats", tags=["stats"], dependencies=[Depends(get_session_user_id)])


@router.get("", response_model=StatsOut)
async def get_stats(stats: CallStatsRecorder = Depends(get_stats_recorder)):
    """Call counters plus the ten most recent calls (newest first)."""
    return stats.summary()


@router.post("", response_model=RecordCallOut)
async def record_call(body: CallIn, stats: CallStatsRecorder = Depends(get_stats_recorder)):
    """Record a finished call and echo it back."""
    call = await stats.record(body.type, body.participants, body.duration)
    return {"success": True, "call": call.to_dict()}
