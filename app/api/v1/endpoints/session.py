from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.deps import get_weather_session
from app.core.errors import SelectionError
from app.schemas.weather import (
    Coordinates,
    LocateRequest,
    SearchRequest,
    SelectDayRequest,
    SelectHourRequest,
    SessionView,
)
from app.services.location import ReportedLocationService
from app.services.weather.session import WeatherSession


router = APIRouter()


@router.get("", response_model=SessionView)
async def session_view(session: WeatherSession = Depends(get_weather_session)):
    return session.view()


@router.post("/locate", response_model=SessionView)
async def locate(payload: LocateRequest, session: WeatherSession = Depends(get_weather_session)):
    coordinates = None
    if payload.latitude is not None and payload.longitude is not None:
        coordinates = Coordinates(latitude=payload.latitude, longitude=payload.longitude)
    service = ReportedLocationService(permission_granted=payload.permission_granted, coordinates=coordinates)
    return await session.load_device_location(service)


@router.post("/search", response_model=SessionView)
async def search(payload: SearchRequest, session: WeatherSession = Depends(get_weather_session)):
    try:
        return await session.search(payload.city)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.put("/selection/day", response_model=SessionView)
async def select_day(payload: SelectDayRequest, session: WeatherSession = Depends(get_weather_session)):
    try:
        return session.select_day(payload.day)
    except SelectionError as exc:
        raise HTTPException(status_code=409, detail=exc.message)


@router.put("/selection/hour", response_model=SessionView)
async def select_hour(payload: SelectHourRequest, session: WeatherSession = Depends(get_weather_session)):
    try:
        return session.select_hour(payload.index)
    except SelectionError as exc:
        raise HTTPException(status_code=409, detail=exc.message)
