import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import health, tickets, subtickets
from .models import Base
from .db import engine, SessionLocal
from .core.seed import seed_ticket_priorities, seed_ticket_statuses
from .core.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL.upper())

app = FastAPI(title="Ticket API Extensions")


@app.on_event("startup")
def on_startup():
    if settings.AUTO_DB_BOOTSTRAP:
        # Create tables in dev if missing.
        Base.metadata.create_all(bind=engine)

        with SessionLocal() as session:
            seed_ticket_statuses(session)
            seed_ticket_priorities(session)


app.include_router(health.router)
app.include_router(tickets.router)
app.include_router(subtickets.router)

allow_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
