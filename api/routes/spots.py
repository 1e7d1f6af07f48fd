"""Spot rolling and saved-spot endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from pydantic import BaseModel, Field

from api.dependencies import get_land_checks, limiter
from services.sampler import (
    COUNTRY_BOUNDS,
    DEFAULT_COUNTRY_CODE,
    Spot,
    SpotMode,
    Tile,
    default_max_attempts,
    make_tile,
    mode_label,
    sample_until_accepted,
)
from services.sampler.checks import SpotChecker
from services.spot_store import clear_spot, load_spot, save_spot

router = APIRouter(prefix="/spots", tags=["spots"])

TOKEN_PATH = Path(..., min_length=8, max_length=64, pattern=r"^[A-Za-z0-9_-]+$")


class CountryResponse(BaseModel):
    code: str
    name: str
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float


class ModeResponse(BaseModel):
    value: str
    label: str


class CatalogResponse(BaseModel):
    """Countries and modes offered by the roll endpoint"""
    default_country: str
    countries: List[CountryResponse]
    modes: List[ModeResponse]


class RollRequest(BaseModel):
    """Request to roll a spot"""
    country_code: str = Field(DEFAULT_COUNTRY_CODE, max_length=8)
    mode: str = Field(SpotMode.PUBLICISH.value, max_length=40)
    tile_meters: float = Field(1, ge=0.1, le=100, description="Tile side in meters")
    user_seed: Optional[str] = Field(None, max_length=120, description="Replay a previous roll")


class TileRequest(BaseModel):
    """Request to compute a tile around a point"""
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    tile_meters: float = Field(1, gt=0, le=1000)


class SavedSpotResponse(BaseModel):
    token: str
    saved: bool
    spot: Spot


@router.get("/countries", response_model=CatalogResponse)
async def list_countries():
    """Country boxes and modes available for rolling"""
    return CatalogResponse(
        default_country=DEFAULT_COUNTRY_CODE,
        countries=[
            CountryResponse(code=code, **bounds.model_dump())
            for code, bounds in COUNTRY_BOUNDS.items()
        ],
        modes=[ModeResponse(value=m.value, label=mode_label(m.value)) for m in SpotMode],
    )


@router.post("/roll", response_model=Spot)
@limiter.limit("20/minute")
async def roll_spot(
    request: Request,
    body: RollRequest,
    checks: SpotChecker = Depends(get_land_checks)
):
    """
    Roll a random spot.

    In "publicish" mode candidates are re-rolled until one passes the land
    checks or the attempt budget runs out (then `check.confidence` is
    "exhausted" and the client should offer a reroll).

    Example: {"country_code": "NZ", "mode": "publicish", "tile_meters": 1}
    """
    return await sample_until_accepted(
        country_code=body.country_code,
        mode=body.mode,
        tile_meters=body.tile_meters,
        max_attempts=default_max_attempts(body.mode),
        user_seed=body.user_seed,
        checks=checks,
    )


@router.post("/tile", response_model=Tile)
async def compute_tile(body: TileRequest):
    """Tile corners and area around a point"""
    return make_tile(body.lat, body.lon, body.tile_meters)


@router.put("/saved/{token}", response_model=SavedSpotResponse)
async def put_saved_spot(spot: Spot, token: str = TOKEN_PATH):
    """Lock in a spot for checkout"""
    saved = await save_spot(token, spot)
    if not saved:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not save spot right now."
        )
    return SavedSpotResponse(token=token, saved=True, spot=spot)


@router.get("/saved/{token}", response_model=SavedSpotResponse)
async def get_saved_spot(token: str = TOKEN_PATH):
    """Read back a locked-in spot (404 when nothing usable is stored)"""
    spot = await load_spot(token)
    if spot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No spot saved.")
    return SavedSpotResponse(token=token, saved=True, spot=spot)


@router.delete("/saved/{token}")
async def delete_saved_spot(token: str = TOKEN_PATH):
    await clear_spot(token)
    return {"token": token, "saved": False}
