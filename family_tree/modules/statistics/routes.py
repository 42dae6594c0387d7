from fastapi import APIRouter, Depends
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.statistics.schemas import FamilyStatistics
from family_tree.modules.statistics.service import StatisticsService

router = APIRouter(prefix="/statistics", tags=["statistics"])


def get_statistics_service(backend: Backend = Depends(get_backend)) -> StatisticsService:
    return StatisticsService(backend)


@router.get("", response_model=FamilyStatistics)
async def get_family_statistics(
    profile: UserProfile = Depends(require_permission("read")),
    service: StatisticsService = Depends(get_statistics_service)
):
    """Totals of men, women, branches and locations plus per-generation counts"""
    return service.get_family_statistics()
