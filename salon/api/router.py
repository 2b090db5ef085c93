from fastapi import APIRouter
from salon.modules.availability.router import router as availability_router
from salon.modules.appointments.router import router as appointments_router
from salon.modules.catalog.router import router as catalog_router
from salon.modules.clients.router import router as clients_router

api_router = APIRouter()
api_router.include_router(availability_router, prefix="/availability", tags=["availability"])
api_router.include_router(appointments_router, prefix="/appointments", tags=["appointments"])
api_router.include_router(catalog_router, prefix="/services", tags=["services"])
api_router.include_router(clients_router, prefix="/clients", tags=["clients"])

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
