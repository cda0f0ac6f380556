"""Demo data: two technicians and four tickets, one already in progress."""

from __future__ import annotations

import logging
from datetime import date, time

from fieldtech.db import crud
from fieldtech.db.engine import Database
from fieldtech.services.auth import hash_password
from fieldtech.tickets.state import TicketStatus

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_TECHNICIANS = [
    {
        "name": "John Mitchell",
        "username": "john.tech",
        "email": "john.mitchell@fieldtech.com",
        "phone": "(555) 123-4567",
        "photo_url": "/images/john-photo.jpg",
        "role": "Senior Technician",
    },
    {
        "name": "Sarah Johnson",
        "username": "sarah.field",
        "email": "sarah.johnson@fieldtech.com",
        "phone": "(555) 987-6543",
        "photo_url": "/images/sarah-photo.jpg",
        "role": "Field Specialist",
    },
]

# (ticket fields, index into DEMO_TECHNICIANS)
DEMO_TICKETS = [
    ({
        "ticket_number": "FT-2024-001",
        "customer_name": "Acme Corporation",
        "customer_address": "123 Business Ave, Suite 100, San Francisco, CA 94105",
        "customer_phone": "(415) 555-0123",
        "job_location": "123 Business Ave, Suite 100, San Francisco, CA 94105",
        "work_to_do": "Install new fiber optic network infrastructure in main server room. "
                      "Configure switches and test all connections.",
        "scheduled_date": date(2024, 11, 25),
        "scheduled_time": time(9, 0),
        "status": TicketStatus.ASSIGNED,
    }, 0),
    ({
        "ticket_number": "FT-2024-002",
        "customer_name": "Tech Startup Inc.",
        "customer_address": "456 Innovation Blvd, Palo Alto, CA 94301",
        "customer_phone": "(650) 555-0456",
        "job_location": "456 Innovation Blvd, Palo Alto, CA 94301",
        "work_to_do": "Troubleshoot WiFi connectivity issues. Replace access points if necessary. "
                      "Optimize network performance.",
        "scheduled_date": date(2024, 11, 25),
        "scheduled_time": time(14, 30),
        "status": TicketStatus.ASSIGNED,
    }, 0),
    ({
        "ticket_number": "FT-2024-003",
        "customer_name": "Downtown Retail Store",
        "customer_address": "789 Market Street, San Francisco, CA 94103",
        "customer_phone": "(415) 555-0789",
        "job_location": "789 Market Street, San Francisco, CA 94103",
        "work_to_do": "Install point-of-sale system network connections. "
                      "Configure POS terminals and test credit card processing.",
        "scheduled_date": date(2024, 11, 26),
        "scheduled_time": time(10, 0),
        "status": TicketStatus.ASSIGNED,
    }, 1),
    ({
        "ticket_number": "FT-2024-004",
        "customer_name": "Medical Office Building",
        "customer_address": "321 Health Plaza, Oakland, CA 94612",
        "customer_phone": "(510) 555-0321",
        "job_location": "321 Health Plaza, Oakland, CA 94612",
        "work_to_do": "Upgrade security camera system. Install new DVR and configure "
                      "remote access for building management.",
        "scheduled_date": date(2024, 11, 26),
        "scheduled_time": time(13, 0),
        "status": TicketStatus.IN_PROGRESS,
    }, 1),
]

DEMO_WORK_LOG = (
    "Arrived on site at 1:00 PM. Conducted initial assessment of existing camera system. "
    "Identified 3 malfunctioning cameras that need replacement. "
    "Ordered new equipment for delivery tomorrow."
)


async def seed_demo_data(database: Database) -> dict[str, int]:
    """Drop every table, recreate the schema and load the demo set.

    Returns how many technicians, tickets and work logs were created.
    """
    await database.drop_all()
    await database.create_all()

    password_hash = hash_password(DEMO_PASSWORD)
    counts = {"technicians": 0, "tickets": 0, "work_logs": 0}

    async with database.transaction() as db:
        techs = []
        for fields in DEMO_TECHNICIANS:
            techs.append(await crud.create_technician(db, password_hash=password_hash, **fields))
        counts["technicians"] = len(techs)

        for fields, owner in DEMO_TICKETS:
            ticket = await crud.create_ticket(db, technician_id=techs[owner].id, **fields)
            counts["tickets"] += 1
            if ticket.status == TicketStatus.IN_PROGRESS.value:
                await crud.upsert_work_log(db, ticket.id, DEMO_WORK_LOG)
                counts["work_logs"] += 1

    logger.info(
        "Seeded %d technicians, %d tickets, %d work logs",
        counts["technicians"], counts["tickets"], counts["work_logs"],
    )
    return counts
