"""FastAPI server exposing the wardrobe planner."""

from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from planner_app.app import WardrobePlannerApp

app = FastAPI(title="Wardrobe Planner", version="0.1.0")

MAX_TOKEN_LIFETIME_SECONDS = 365 * 24 * 60 * 60


@lru_cache(maxsize=1)
def get_planner_app() -> WardrobePlannerApp:
    """Build the application once per process; tests override this dependency."""

    return WardrobePlannerApp()


class ItemCreate(BaseModel):
    image_url: str = Field(..., min_length=1, description="Public URL of the uploaded photo")
    category: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)
    occasion: str = Field(..., min_length=1)
    name: str | None = None
    brand: str | None = None


class ItemUpdate(BaseModel):
    name: str | None = None
    brand: str | None = None
    category: str | None = None
    color: str | None = None
    occasion: str | None = None


class OutfitCreate(BaseModel):
    name: str
    item_ids: List[str]
    occasion: str | None = None


class OutfitSelection(BaseModel):
    selected_ids: List[str] = Field(default_factory=list)
    item_id: str


class ScheduleCreate(BaseModel):
    outfit_id: str
    date: str = Field(..., description="Calendar day as YYYY-MM-DD")


class CalendarConnection(BaseModel):
    access_token: str = Field(..., min_length=1)
    expires_in: int | None = Field(
        None, ge=0, le=MAX_TOKEN_LIFETIME_SECONDS, description="Token lifetime in seconds"
    )


def _unwrap(response: dict) -> dict:
    """Map agent statuses onto HTTP errors."""

    status = response.get("status")
    if status == "not_found":
        raise HTTPException(status_code=404, detail=response.get("message", "not found"))
    if status != "ok":
        raise HTTPException(status_code=400, detail=response.get("message", "request failed"))
    return response


@app.get("/healthz")
async def healthcheck(planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    """Lightweight liveness probe."""

    return planner.healthcheck()


@app.get("/users/{user_id}/items")
def list_items(
    user_id: str,
    category: str | None = Query(None),
    color: str | None = Query(None),
    occasion: str | None = Query(None),
    planner: WardrobePlannerApp = Depends(get_planner_app),
) -> dict:
    filters = {"category": category, "color": color, "occasion": occasion}
    response = _unwrap(planner.wardrobe.list_items(user_id, filters))
    return {"items": [item.to_dict() for item in response["items"]], "categories": response["categories"]}


@app.post("/users/{user_id}/items", status_code=201)
def add_item(user_id: str, request: ItemCreate, planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    response = _unwrap(planner.wardrobe.add_item(user_id, request.model_dump()))
    return response["item"].to_dict()


@app.patch("/users/{user_id}/items/{item_id}")
def update_item(
    user_id: str, item_id: str, request: ItemUpdate, planner: WardrobePlannerApp = Depends(get_planner_app)
) -> dict:
    updates = request.model_dump(exclude_unset=True)
    response = _unwrap(planner.wardrobe.update_item(user_id, item_id, updates))
    return response["item"].to_dict()


@app.delete("/users/{user_id}/items/{item_id}", status_code=204)
def delete_item(user_id: str, item_id: str, planner: WardrobePlannerApp = Depends(get_planner_app)) -> None:
    _unwrap(planner.wardrobe.delete_item(user_id, item_id))


@app.get("/users/{user_id}/outfits")
def list_outfits(user_id: str, planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    response = _unwrap(planner.wardrobe.list_outfits(user_id))
    return {"outfits": [outfit.to_dict() for outfit in response["outfits"]]}


@app.post("/users/{user_id}/outfits", status_code=201)
def save_outfit(user_id: str, request: OutfitCreate, planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    response = _unwrap(
        planner.wardrobe.save_outfit(user_id, name=request.name, item_ids=request.item_ids, occasion=request.occasion)
    )
    return response["outfit"].to_dict()


@app.post("/users/{user_id}/outfits/random")
def random_outfit(user_id: str, planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    """One random item per category, for the outfit builder."""

    response = _unwrap(planner.wardrobe.random_outfit(user_id))
    return {"items": [item.to_dict() for item in response["items"]]}


@app.post("/users/{user_id}/outfits/selection")
def toggle_outfit_item(
    user_id: str, request: OutfitSelection, planner: WardrobePlannerApp = Depends(get_planner_app)
) -> dict:
    response = _unwrap(planner.wardrobe.toggle_item(user_id, request.selected_ids, request.item_id))
    return {"items": [item.to_dict() for item in response["items"]]}


@app.delete("/users/{user_id}/outfits/{outfit_id}", status_code=204)
def delete_outfit(user_id: str, outfit_id: str, planner: WardrobePlannerApp = Depends(get_planner_app)) -> None:
    _unwrap(planner.wardrobe.delete_outfit(user_id, outfit_id))


@app.get("/users/{user_id}/schedules")
def list_schedules(user_id: str, planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    response = _unwrap(planner.wardrobe.list_schedules(user_id))
    return {"schedules": [schedule.to_dict() for schedule in response["schedules"]]}


@app.post("/users/{user_id}/schedules", status_code=201)
def schedule_outfit(
    user_id: str, request: ScheduleCreate, planner: WardrobePlannerApp = Depends(get_planner_app)
) -> dict:
    response = _unwrap(planner.wardrobe.schedule_outfit(user_id, request.outfit_id, request.date))
    return response["schedule"].to_dict()


@app.delete("/users/{user_id}/schedules/{schedule_id}", status_code=204)
def delete_schedule(user_id: str, schedule_id: str, planner: WardrobePlannerApp = Depends(get_planner_app)) -> None:
    _unwrap(planner.wardrobe.delete_schedule(user_id, schedule_id))


@app.put("/users/{user_id}/calendar")
def connect_calendar(
    user_id: str, request: CalendarConnection, planner: WardrobePlannerApp = Depends(get_planner_app)
) -> dict:
    response = _unwrap(planner.calendar.connect_calendar(user_id, request.access_token, request.expires_in))
    return {"connected": response["connected"], "expires_at": response["expires_at"]}


@app.delete("/users/{user_id}/calendar")
def disconnect_calendar(user_id: str, planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    return {"connected": _unwrap(planner.calendar.disconnect_calendar(user_id))["connected"]}


@app.get("/users/{user_id}/board")
def board(user_id: str, planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    """Five day columns from today with outfit, events and weather."""

    response = _unwrap(planner.planner.build_board(user_id))
    return {
        "today": response["today"],
        "columns": [column.to_dict() for column in response["columns"]],
        "calendar": response["calendar"],
        "weather": response["weather"],
    }


@app.get("/weather/current")
def current_weather(city: str | None = None, planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    response = _unwrap(planner.weather.get_current_conditions(city))
    return {**response["current"].to_dict(), "icon": response["icon"].value}


@app.get("/weather/forecast")
def forecast(city: str | None = None, planner: WardrobePlannerApp = Depends(get_planner_app)) -> dict:
    response = _unwrap(planner.weather.get_daily_forecast(city))
    return {"forecast": [sample.to_dict() for sample in response["forecast"]]}


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=8080, reload=False)
