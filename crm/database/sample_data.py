"""
Sample data for first launch and demos.
"""

from datetime import datetime, timedelta
from typing import Optional

from loguru import logger

from .crm_store import CRMStore
from .models import create_communication, create_customer, create_task


def load_sample_data(store: CRMStore, now: Optional[datetime] = None):
    """Seed the store with two customers, their communications and tasks."""
    logger.info("Loading sample data...")
    now = now or datetime.now()

    john = create_customer(
        "John Smith",
        "john.smith@example.com",
        "555-123-4567",
        "Client",
        "Key decision maker for enterprise project. Prefers email communication."
    )
    store.add_customer(john)

    jane = create_customer(
        "Jane Doe",
        "jane.doe@example.com",
        "555-987-6543",
        "Prospect",
        "Met at tech conference. Interested in premium offering. Follow up quarterly."
    )
    store.add_customer(jane)

    store.add_communication(create_communication(
        john.id, "phone", "Discussed new project requirements", ["project", "requirements"]
    ))
    store.add_communication(create_communication(
        jane.id, "email", "Sent product information brochure", ["marketing"]
    ))

    store.add_task(create_task(john.id, "Follow up on project proposal", now + timedelta(days=3)))
    store.add_task(create_task(jane.id, "Schedule product demo", now + timedelta(days=7)))

    logger.info("Sample data loaded successfully.")
