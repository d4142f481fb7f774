# backend/slotbook/routers/catalog.py

from typing import Literal, Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_store
from ..errors import BusinessNotFound
from ..schemas.resources import CatalogResponse, ResourceListResponse
from ..services.store import Store

router = APIRouter(tags=["catalog"])


def _get_business(store: Store, business_id: int):
    business = store.get_business(business_id)
    if not business:
        raise BusinessNotFound("Business not found")
    return business


@router.get("/{business_id}/catalog", response_model=CatalogResponse)
def get_catalog(business_id: int, store: Store = Depends(get_store)):
    """Policies, weekly hours and what can be booked: services and staff, or tables."""
    business = _get_business(store, business_id)
    catalog = {
        "business": business,
        "hours": store.list_business_hours(business_id),
    }

    if business.type == "spa":
        catalog["services"] = store.list_active_services(business_id)
        catalog["staff"] = store.list_active_staff(business_id)
    else:
        catalog["tables"] = store.list_active_tables(business_id)
        catalog["restaurant_config"] = store.get_restaurant_config(business_id)

    return catalog


@router.get("/{business_id}/resources", response_model=ResourceListResponse)
def list_resources(
    business_id: int,
    type: Optional[Literal["table", "staff", "room"]] = None,
    store: Store = Depends(get_store),
):
    """Active tables, staff or rooms; defaults to the business's main resource."""
    business = _get_business(store, business_id)

    resource_type = type or ("table" if business.type == "restaurant" else "staff")
    if resource_type == "table":
        resources = store.list_active_tables(business_id)
    elif resource_type == "staff":
        resources = store.list_active_staff(business_id)
    else:
        resources = store.list_active_rooms(business_id)

    return {"type": resource_type, "resources": resources}
