from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse
import logging

from planner.api.dependencies import get_session, open_date
from planner.api.routes import habits, session as session_routes
from planner.events.web_observers import start as start_event_observers
from planner.logic.reporting.day_summary import summarize_day
from planner.logic.session import PlannerSession
from planner.utilities.validators import TextInput, TodoInput, TodoMove, TodoUpdate, TopThreeUpdate, WaterInput

# Logging
logger = logging.getLogger("planner_app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start sync-status observers; flush pending debounced saves on shutdown."""
    start_event_observers()
    logger.info("Web observers for sync events started")
    yield
    session = app.dependency_overrides.get(get_session, get_session)()
    await session.close()
    logger.info("Pending planner saves flushed on shutdown")


# Initialize FastAPI app
app = FastAPI(title="Daily Planner API", lifespan=lifespan)

# Include routers
app.include_router(habits.router)
app.include_router(session_routes.router)


# -------------------- Error mapping --------------------
@app.exception_handler(ValueError)
async def _value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(KeyError)
async def _key_error_handler(request: Request, exc: KeyError):
    detail = exc.args[0] if exc.args else "Not found"
    return JSONResponse(status_code=404, content={"detail": detail})


# -------------------- Helpers --------------------
def plan_response(session: PlannerSession):
    return {"date": session.date_key, "mode": session.mode, "plan": session.plan.to_dict()}


# -------------------- Plan --------------------
@app.get("/api/plan/{date_key}")
async def get_plan(date_key: str, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    return plan_response(session)


@app.get("/api/plan/{date_key}/summary")
async def get_summary(date_key: str, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    return {"date": date_key, "summary": summarize_day(session.plan, session.day)}


@app.post("/api/plan/{date_key}/clear")
async def clear_plan(date_key: str, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    await session.clear_all()
    return plan_response(session)


@app.post("/api/plan/flush")
async def flush_plan(session: PlannerSession = Depends(get_session)):
    results = await session.flush()
    return {"flushed": {key: getattr(result, "value", result) for key, result in results.items()}}


# -------------------- Top three --------------------
@app.put("/api/plan/{date_key}/top-three/{index}")
async def update_top_three(date_key: str, index: int, payload: TopThreeUpdate,
                           session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    item = session.set_top_three(index, text=payload.text, done=payload.done)
    return item.to_dict()


# -------------------- Todos --------------------
@app.post("/api/plan/{date_key}/todos", status_code=201)
async def add_todo(date_key: str, payload: TodoInput, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    return session.add_todo(payload.text).to_dict()


@app.patch("/api/plan/{date_key}/todos/{todo_id}")
async def update_todo(date_key: str, todo_id: str, payload: TodoUpdate,
                      session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    return session.update_todo(todo_id, text=payload.text, done=payload.done).to_dict()


@app.delete("/api/plan/{date_key}/todos/{todo_id}")
async def delete_todo(date_key: str, todo_id: str, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    removed = session.delete_todo(todo_id)
    return {"deleted": removed.id, "todos": [t.to_dict() for t in session.plan.sorted_todos()]}


@app.post("/api/plan/{date_key}/todos/reorder")
async def reorder_todos(date_key: str, payload: TodoMove, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    todos = session.move_todo(payload.from_index, payload.to_index)
    return {"todos": [t.to_dict() for t in todos]}


# -------------------- Schedule / notes / meals --------------------
@app.put("/api/plan/{date_key}/schedule/{hour}")
async def update_schedule(date_key: str, hour: str, payload: TextInput,
                          session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    session.set_schedule(hour, payload.text)
    return {"schedule": session.plan.schedule}


@app.put("/api/plan/{date_key}/notes")
async def update_notes(date_key: str, payload: TextInput, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    session.set_notes(payload.text)
    return {"notes": session.plan.notes}


@app.put("/api/plan/{date_key}/meals/{slot}")
async def update_meal(date_key: str, slot: str, payload: TextInput, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    session.set_meal(slot, payload.text)
    return {"meals": session.plan.meals}


# -------------------- Water --------------------
@app.post("/api/plan/{date_key}/water/{index}")
async def tap_water(date_key: str, index: int, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    return {"water": session.tap_water(index)}


@app.put("/api/plan/{date_key}/water")
async def set_water(date_key: str, payload: WaterInput, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    return {"water": session.set_water(payload.count)}
