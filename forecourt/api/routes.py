# forecourt/api/routes.py
import json
from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.concurrency import run_in_threadpool
from typing import List
from .. import schemas
from ..errors import Forbidden, InvalidInput
from ..garages import GarageLookup
from ..services import ListingService

router = APIRouter()


def get_service(request: Request) -> ListingService:
    return request.app.state.service


def get_garages(request: Request) -> GarageLookup:
    return request.app.state.garages


def admin_key(x_garage_key: str = Header("", alias="X-Garage-Key")) -> str:
    return x_garage_key


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/cars", response_model=List[schemas.Listing])
def list_cars(service: ListingService = Depends(get_service)):
    return service.list_public()


@router.get("/car-data", response_model=schemas.Listing)
def car_data(name: str = Query(""), service: ListingService = Depends(get_service)):
    return service.get_by_name(name)


@router.get("/garages-data")
def garages_data(garages: GarageLookup = Depends(get_garages)):
    return garages.list_all()


# Admin: every car, including sold ones past the hide window
@router.get("/cars-admin", response_model=List[schemas.Listing])
def list_cars_admin(key: str = Depends(admin_key), service: ListingService = Depends(get_service)):
    return service.list_admin(key)


@router.post("/cars", response_model=schemas.ActionResult)
async def create_car(
    request: Request,
    key: str = Depends(admin_key),
    service: ListingService = Depends(get_service),
):
    # key is checked before the body is read
    if not service.is_admin(key):
        raise Forbidden()
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw.strip() else {}
    except ValueError:
        raise InvalidInput("body")
    await run_in_threadpool(service.create, key, payload)
    return schemas.ActionResult()


@router.delete("/cars", response_model=schemas.ActionResult)
def delete_car(
    name: str = Query(""),
    key: str = Depends(admin_key),
    service: ListingService = Depends(get_service),
):
    service.delete(key, name)
    return schemas.ActionResult()


@router.post("/cars-sold", response_model=schemas.SoldResult)
def mark_car_sold(
    name: str = Query(""),
    key: str = Depends(admin_key),
    service: ListingService = Depends(get_service),
):
    sold_date = service.mark_sold(key, name)
    return schemas.SoldResult(sold_date=sold_date)
