"""CLI for the comparison service: bootstrap the DB, manage users and jobs."""

from __future__ import annotations

import argparse
import asyncio
import sys

from app.config import STRICTNESS_LEVELS, configure_logging


async def cmd_init_db(args):
    """Create all tables."""
    from app.db.engine import create_all

    await create_all()
    print("Database tables created")


async def cmd_create_user(args):
    """Create a user with an initial credit balance."""
    from app.db import crud
    from app.db.engine import async_session_factory, create_all

    await create_all()
    async with async_session_factory() as db:
        if await crud.get_user_by_email(db, args.email):
            print(f"User {args.email} already exists")
            sys.exit(1)
        user = await crud.create_user(
            db, args.email, credits=args.credits,
            display_name=args.display_name, strictness=args.strictness,
        )
    print(f"User created: {user.email} (id={user.id}, credits={user.credits})")


async def cmd_add_credits(args):
    """Add (or with a negative amount, remove) credits from a user's balance."""
    from app.db import crud
    from app.db.engine import async_session_factory

    async with async_session_factory() as db:
        user = await crud.get_user_by_email(db, args.email)
        if not user:
            print(f"User {args.email} not found")
            sys.exit(1)
        before = user.credits
        if before + args.amount < 0:
            print(f"Balance cannot go below zero (current: {before})")
            sys.exit(1)
        user.credits = before + args.amount
        await db.commit()
    print(f"{args.email}: {before} -> {before + args.amount} credits")


async def cmd_list_comparisons(args):
    """Print a user's comparisons."""
    from app.db import crud
    from app.db.engine import async_session_factory

    async with async_session_factory() as db:
        user = await crud.get_user_by_email(db, args.email)
        if not user:
            print(f"User {args.email} not found")
            sys.exit(1)
        comps = await crud.list_comparisons(db, user.id, property_id=args.property_id, status=args.status)

    if not comps:
        print("No comparisons")
        return
    for c in comps:
        print(f"{c.id}  {c.status:<10}  diffs={c.differences_detected:<3} "
              f"new={c.new_damages:<3} cost={c.estimated_repair_cost}  {c.created_at:%Y-%m-%d %H:%M}")


async def cmd_recover_jobs(args):
    """Fail interrupted jobs and run the queued ones to completion."""
    from app.services.job_queue import job_queue

    await job_queue.start()
    result = await job_queue.recover()
    print(f"Requeued {len(result['requeued'])}, failed {len(result['interrupted'])} interrupted job(s)")
    await job_queue.join()
    await job_queue.stop()


def cmd_serve(args):
    """Run the API server; the job queue starts with the app."""
    import uvicorn

    uvicorn.run("app.main:app", host=args.host, port=args.port)


def main():
    parser = argparse.ArgumentParser(description="Inspection comparison CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Create database tables")

    cu = subparsers.add_parser("create-user", help="Create a user")
    cu.add_argument("--email", required=True)
    cu.add_argument("--credits", type=int, default=0)
    cu.add_argument("--display-name", default="")
    cu.add_argument("--strictness", choices=STRICTNESS_LEVELS, default=None,
                    help="Default AI strictness for this user")

    ac = subparsers.add_parser("add-credits", help="Adjust a user's credit balance")
    ac.add_argument("--email", required=True)
    ac.add_argument("--amount", type=int, required=True)

    lc = subparsers.add_parser("list-comparisons", help="List a user's comparisons")
    lc.add_argument("--email", required=True)
    lc.add_argument("--property-id", default=None)
    lc.add_argument("--status", choices=("all", "processing", "completed", "failed"), default=None)

    subparsers.add_parser("recover-jobs", help="Recover jobs left by a stopped server")

    sv = subparsers.add_parser("serve", help="Run the HTTP API")
    sv.add_argument("--host", default="127.0.0.1")
    sv.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging()
    if args.command == "serve":
        cmd_serve(args)
        return

    commands = {
        "init-db": cmd_init_db,
        "create-user": cmd_create_user,
        "add-credits": cmd_add_credits,
        "list-comparisons": cmd_list_comparisons,
        "recover-jobs": cmd_recover_jobs,
    }
    asyncio.run(commands[args.command](args))


if __name__ == "__main__":
    main()
