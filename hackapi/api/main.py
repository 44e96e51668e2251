import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from hackapi.api.deps import get_container, get_settings
from hackapi.api.routes.challenges import router as challenges_router
from hackapi.api.routes.hack_challenges import router as hack_challenges_router
from hackapi.api.routes.hacks import router as hacks_router
from hackapi.api.routes.health import router as health_router
from hackapi.api.routes.team_entries import router as team_entries_router
from hackapi.api.routes.team_members import router as team_members_router
from hackapi.api.routes.teams import router as teams_router
from hackapi.api.routes.users import router as users_router
from hackapi.infrastructure.database import create_schema

load_dotenv()

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = get_container()
    if container.engine is not None:
        await create_schema(container.engine)
    yield
    await container.notifier.aclose()
    if container.engine is not None:
        await container.engine.dispose()


app = FastAPI(title="Hackathon API", lifespan=lifespan)

app.include_router(health_router, tags=["health"])
app.include_router(teams_router)
app.include_router(team_members_router)
app.include_router(team_entries_router)
app.include_router(hacks_router)
app.include_router(hack_challenges_router)
app.include_router(challenges_router)
app.include_router(users_router)
