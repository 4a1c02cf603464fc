from fastapi import APIRouter, Depends

from planner.api.dependencies import get_session, open_date
from planner.logic.habits import completed_count, scheduled_habits
from planner.logic.session import PlannerSession
from planner.utilities.validators import HabitInput

router = APIRouter(prefix="/api/plan/{date_key}/habits", tags=["habits"])


@router.post("", status_code=201)
async def create_habit(date_key: str, payload: HabitInput, session: PlannerSession = Depends(get_session)):
    await open_date(session, date_key)
    habit = session.create_habit(
        payload.title,
        description=payload.description,
        color=payload.color,
        repeat=payload.repeat,
        reminder=payload.reminder,
        goal=payload.goal,
        frequency=payload.frequency,
        days=payload.days,
    )
    return habit.to_dict()


@router.get("/today")
async def habits_today(date_key: str, session: PlannerSession = Depends(get_session)):
    """Habits scheduled on the date, with their status for that date."""
    await open_date(session, date_key)
    day = session.day
    todays = scheduled_habits(session.plan.habits, day)
    return {
        "date": date_key,
        "habits": [dict(h.to_dict(), status=h.status_on(day)) for h in todays],
        "completed": completed_count(session.plan.habits, day),
        "total": len(session.plan.habits),
    }


@router.post("/{habit_id}/{action}")
async def mark_habit(date_key: str, habit_id: str, action: str, session: PlannerSession = Depends(get_session)):
    """action is one of yes / no / skip."""
    await open_date(session, date_key)
    habit = session.mark_habit(habit_id, action)
    return {"id": habit.id, "status": habit.status_on(session.day),
            "completed": completed_count(session.plan.habits, session.day)}
