"""Seed the database with a demo user, property and an inspection pair with photos."""

import asyncio

from app.db import crud
from app.db.engine import async_session_factory, create_all

DEMO_EMAIL = "demo@example.com"

MOVE_IN_ROOMS = ["Living Room", "Kitchen", "Bedroom", "Bathroom"]
# Different spellings on purpose: matched after trimming and lowercasing
MOVE_OUT_ROOMS = ["living room", "Kitchen ", "Bedroom", "Balcony"]


async def seed():
    await create_all()

    async with async_session_factory() as db:
        if await crud.get_user_by_email(db, DEMO_EMAIL):
            print("Demo user already exists, skipping seed.")
            return

        user = await crud.create_user(db, DEMO_EMAIL, credits=10, display_name="Demo Owner")
        prop = await crud.create_property(db, user.id, "Demo Apartment 4B", "12 Oak Street")
        move_in = await crud.create_inspection(db, user.id, prop.id, "move_in")
        move_out = await crud.create_inspection(db, user.id, prop.id, "move_out")

        for insp, rooms in ((move_in, MOVE_IN_ROOMS), (move_out, MOVE_OUT_ROOMS)):
            for i, room in enumerate(rooms):
                await crud.create_inspection_photo(db, insp.id, room, f"{insp.id}/{i:02d}.jpg")

    print(f"Created user: {user.email} (id: {user.id}, credits: {user.credits})")
    print(f"Created property: {prop.name} (id: {prop.id})")
    print(f"Move-in inspection:  {move_in.id}")
    print(f"Move-out inspection: {move_out.id}")
    print("\nSubmit a comparison with:")
    print(f'  curl -X POST localhost:8000/api/comparisons -H "X-User-Id: {user.id}" \\')
    print('       -H "Content-Type: application/json" \\')
    print(f'       -d \'{{"property_id": "{prop.id}", "move_in_inspection_id": "{move_in.id}", '
          f'"move_out_inspection_id": "{move_out.id}"}}\'')


if __name__ == "__main__":
    asyncio.run(seed())
