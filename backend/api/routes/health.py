from fastapi import APIRouter


router = APIRouter()


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "Nowruz GitHub Wrapped"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Report that the process is up."""

    return {"status": "ok"}
