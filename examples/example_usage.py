"""Example: drive the message router directly (no Flask).

Controllers stay thin; everything a chat message triggers lives in the services.
Run after scripts/init_db.py and scripts/seed_db.py.
"""

import importlib

from dotenv import load_dotenv

from config import get_settings_module

from chat_attendance.container import build_container
from chat_attendance.messaging.model import InboundEvent


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    for text in ("Hi", "Congé 24/12", "Moi"):
        for out in container.message_router.handle(InboundEvent(sender="33600000002", text=text)):
            print(f"-> {out.to}: {out.text}\n")


if __name__ == "__main__":
    main()
