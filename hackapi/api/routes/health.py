from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root():
    return {"name": "hackapi", "status": "ok"}


@router.get("/api/healthcheck")
async def healthcheck():
    return {"status": "ok"}
