"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from recipe_discovery.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/owners/{owner_id}/cache", dependencies=[Depends(require_admin)])
async def owner_cache(owner_id: UUID, request: Request) -> dict[str, object]:
    """Return the generation cache state of an owner's engine."""
    container: AppContainer = request.app.state.container
    engine = container.recipe_engines.engine_for(owner_id)
    state = engine.cache_state()
    return {
        "initialized": state.initialized,
        "last_generated_set": sorted(state.last_generated_set),
        "recipe_count": len(engine.recipes),
    }


@router.get("/owners", dependencies=[Depends(require_admin)])
async def list_owners(request: Request) -> dict[str, object]:
    """Return owners with a live engine and their recipe counts."""
    container: AppContainer = request.app.state.container
    engines = container.recipe_engines.engines
    return {
        "owners": [
            {
                "owner_id": str(owner_id) if owner_id else None,
                "initialized": engine.state.initialized,
                "recipe_count": len(engine.recipes),
            }
            for owner_id, engine in engines.items()
        ]
    }
