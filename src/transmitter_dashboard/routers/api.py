from fastapi import APIRouter

from transmitter_dashboard.routers import charts, deployment_map, feed, transmitters, viewport

router = APIRouter()

# include sub-routers
router.include_router(feed.router)
router.include_router(transmitters.router)
router.include_router(viewport.router)
router.include_router(deployment_map.router)
router.include_router(charts.router)
