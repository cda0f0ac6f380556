"""CLI for FieldTech: create the schema, seed demo data, manage records."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

from fieldtech.config import get_settings
from fieldtech.db.engine import Database
from fieldtech.log import configure_logging


def _database() -> Database:
    settings = get_settings()
    configure_logging(settings)
    return Database(settings.database_url)


async def cmd_init_db(args):
    """Create all tables."""
    database = _database()
    try:
        await database.create_all()
    finally:
        await database.dispose()
    print(f"Database ready: {database.url}")


async def cmd_seed(args):
    """Reset the database and load the demo data set."""
    from fieldtech.db.seed import DEMO_PASSWORD, DEMO_TECHNICIANS, seed_demo_data

    database = _database()
    try:
        counts = await seed_demo_data(database)
    finally:
        await database.dispose()

    print(
        f"Seeded {counts['technicians']} technicians, {counts['tickets']} tickets, "
        f"{counts['work_logs']} work log(s)"
    )
    for tech in DEMO_TECHNICIANS:
        print(f"  {tech['username']} / {DEMO_PASSWORD}")


async def cmd_create_technician(args):
    """Provision one technician account."""
    from fieldtech.db import crud
    from fieldtech.services.auth import hash_password

    # Get password interactively if not provided
    password = args.password
    if not password:
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match")
            sys.exit(1)

    if len(password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)

    database = _database()
    try:
        await database.create_all()
        async with database.transaction() as db:
            if await crud.get_technician_by_username(db, args.username):
                print(f"Username {args.username} is already taken")
                sys.exit(1)
            tech = await crud.create_technician(
                db,
                name=args.name,
                username=args.username,
                password_hash=hash_password(password),
                email=args.email,
                phone=args.phone or None,
                role=args.role,
            )
    finally:
        await database.dispose()

    print(f"Technician created: {tech.name} (id={tech.id}, username={tech.username})")


async def cmd_list_technicians(args):
    """Print every technician account."""
    from fieldtech.db import crud

    database = _database()
    try:
        async with database.session() as db:
            techs = await crud.list_technicians(db)
    finally:
        await database.dispose()

    if not techs:
        print("No technicians")
        return
    for tech in techs:
        print(f"{tech.id}  {tech.username:<20} {tech.name} <{tech.email}> ({tech.role})")


async def cmd_delete_ticket(args):
    """Delete a ticket by number, along with its work log, media and signatures."""
    from fieldtech.db import crud
    from fieldtech.services.media_store import MediaStore
    from fieldtech.tickets.service import TicketNotFoundError, TicketService

    settings = get_settings()
    database = _database()
    service = TicketService(database, MediaStore(settings.media.upload_dir, settings.media.url_prefix))
    try:
        async with database.session() as db:
            ticket = await crud.get_ticket_by_number(db, args.ticket_number)
            counts = await crud.count_child_rows(db, ticket.id) if ticket else {}
        if ticket is None:
            print(f"Ticket {args.ticket_number} not found")
            sys.exit(1)
        try:
            await service.delete_ticket(ticket.id)
        except TicketNotFoundError:
            print(f"Ticket {args.ticket_number} not found")
            sys.exit(1)
    finally:
        await database.dispose()

    print(f"Deleted ticket {args.ticket_number} (id={ticket.id})")
    for table, n in counts.items():
        print(f"  {table}: {n} row(s) removed")


def main():
    parser = argparse.ArgumentParser(description="FieldTech CLI")
    subparsers = parser.add_subparsers(dest="command")

    # init-db
    subparsers.add_parser("init-db", help="Create database tables")

    # seed
    subparsers.add_parser("seed", help="Reset the database and load demo data")

    # create-technician
    ct = subparsers.add_parser("create-technician", help="Create a technician account")
    ct.add_argument("--name", required=True, help="Full name")
    ct.add_argument("--username", required=True, help="Login username")
    ct.add_argument("--email", required=True, help="Email address")
    ct.add_argument("--phone", default="", help="Phone number")
    ct.add_argument("--role", default="technician", help="Role / job title")
    ct.add_argument("--password", default="", help="Password (prompted if not given)")

    # list-technicians
    subparsers.add_parser("list-technicians", help="List technician accounts")

    # delete-ticket
    dt = subparsers.add_parser("delete-ticket", help="Delete a ticket and all its records")
    dt.add_argument("ticket_number", help="Ticket number, e.g. FT-2024-001")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "seed":
        asyncio.run(cmd_seed(args))
    elif args.command == "create-technician":
        asyncio.run(cmd_create_technician(args))
    elif args.command == "list-technicians":
        asyncio.run(cmd_list_technicians(args))
    elif args.command == "delete-ticket":
        asyncio.run(cmd_delete_ticket(args))


if __name__ == "__main__":
    main()
