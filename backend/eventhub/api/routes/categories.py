"""
Category reference data.
"""

from fastapi import APIRouter, Depends

from eventhub.api.deps import get_query_facade
from eventhub.schemas.event import CategoryResponse
from eventhub.services.query_service import SqlQueryFacade

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("/", response_model=list[CategoryResponse])
async def list_categories_endpoint(facade: SqlQueryFacade = Depends(get_query_facade)):
    return await facade.list_categories()
