"""Load demo contacts, conversations, messages and templates.

Usage:
    DATABASE_URL=... python -m gharpey.operations.seed_demo

Does nothing when the contacts table already has rows, so it is safe to
run against a database that has been used.
"""

from __future__ import annotations

from typing import Any

from gharpey.infra.db import fetchone, txn
from gharpey.infra.repositories import (
    contacts_repository,
    conversations_repository,
    messages_repository,
    templates_repository,
)
from gharpey.observability.logging import get_logger
from gharpey.observability.redaction import safe_log_context

logger = get_logger(__name__)

DEMO_CONTACTS: list[dict[str, Any]] = [
    {
        "name": "Priya Sharma",
        "phone": "+91 98765 43210",
        "email": "priya.sharma@example.com",
        "type": "employer",
        "language": "en",
        "location": "Bangalore, Koramangala",
        "notes": "Looking for full-time domestic help",
    },
    {
        "name": "Lakshmi Devi",
        "phone": "+91 98765 43211",
        "type": "maid",
        "language": "kn",
        "location": "Bangalore, BTM Layout",
        "notes": "Experienced in cooking and cleaning",
    },
    {
        "name": "Rajesh Kumar",
        "phone": "+91 98765 43212",
        "email": "rajesh.kumar@example.com",
        "type": "employer",
        "language": "hi",
        "location": "Bangalore, Indiranagar",
    },
    {
        "name": "Anita Rao",
        "phone": "+91 98765 43213",
        "type": "maid",
        "language": "kn",
        "location": "Bangalore, Whitefield",
        "notes": "Part-time availability",
    },
]

# (contact index, channel, subject)
DEMO_CONVERSATIONS: list[tuple[int, str, str]] = [
    (0, "whatsapp", "Initial Inquiry"),
    (1, "whatsapp", "Job Application"),
    (2, "email", "Service Inquiry"),
]

# (conversation index, message fields)
DEMO_MESSAGES: list[tuple[int, dict[str, Any]]] = [
    (
        0,
        {
            "direction": "inbound",
            "content": "Hi, I'm looking for a reliable maid for my home in Koramangala.",
            "language": "en",
            "sentiment": "neutral",
            "intent": "inquiry",
        },
    ),
    (
        0,
        {
            "direction": "outbound",
            "content": (
                "Hello Priya! Thank you for reaching out. We can help you find the "
                "perfect domestic help. What are your specific requirements?"
            ),
            "language": "en",
        },
    ),
    (
        1,
        {
            "direction": "inbound",
            "content": "ನಮಸ್ಕಾರ, ನನಗೆ ಮನೆಕೆಲಸ ಬೇಕು. ನಾನು ಅಡುಗೆ ಮತ್ತು ಸ್ವಚ್ಛತೆ ಮಾಡುತ್ತೇನೆ.",
            "language": "kn",
            "translated_content": "Hello, I need house work. I do cooking and cleaning.",
            "sentiment": "positive",
            "intent": "job_application",
        },
    ),
    (
        2,
        {
            "direction": "inbound",
            "content": "मुझे एक विश्वसनीय घरेलू सहायक चाहिए जो सप्ताह में तीन दिन आ सके।",
            "language": "hi",
            "translated_content": (
                "I need a reliable domestic help who can come three days a week."
            ),
            "sentiment": "neutral",
            "intent": "inquiry",
        },
    ),
]

DEMO_TEMPLATES: list[dict[str, Any]] = [
    {
        "name": "Welcome Message",
        "category": "onboarding",
        "channel": "whatsapp",
        "content": {
            "text": (
                "Welcome to GharPey! We're here to help you find the perfect "
                "domestic help. How can we assist you today?"
            )
        },
        "language": "en",
    },
    {
        "name": "Salary Reminder",
        "category": "reminder",
        "channel": "whatsapp",
        "content": {
            "text": (
                "Reminder: It's time to process salary payments for your domestic "
                "help. Please ensure timely payment."
            )
        },
        "language": "en",
        "variables": ["{name}", "{amount}", "{date}"],
    },
    {
        "name": "Interview Schedule",
        "category": "notification",
        "channel": "email",
        "content": {
            "text": (
                "Your interview has been scheduled with {name} on {date} at {time}. "
                "Location: {location}"
            )
        },
        "language": "en",
        "variables": ["{name}", "{date}", "{time}", "{location}"],
    },
    {
        "name": "ಕನ್ನಡ ಸ್ವಾಗತ ಸಂದೇಶ",
        "category": "onboarding",
        "channel": "whatsapp",
        "content": {
            "text": "ಘರ್‌ಪೇಗೆ ಸ್ವಾಗತ! ನಿಮಗೆ ಸೂಕ್ತವಾದ ಮನೆಕೆಲಸದವರನ್ನು ಹುಡುಕಲು ನಾವು ಇಲ್ಲಿದ್ದೇವೆ."
        },
        "language": "kn",
    },
]


def seed(cur) -> dict[str, int]:
    """Insert the demo rows through ``cur``. Returns counts per table."""
    contacts = [contacts_repository.create_contact(cur, data) for data in DEMO_CONTACTS]

    conversations = [
        conversations_repository.create_conversation(
            cur,
            {
                "contact_id": contacts[contact_index]["id"],
                "channel": channel,
                "subject": subject,
                "status": "active",
            },
        )
        for contact_index, channel, subject in DEMO_CONVERSATIONS
    ]

    for conversation_index, fields in DEMO_MESSAGES:
        conversation = conversations[conversation_index]
        messages_repository.create_message(
            cur,
            {
                "conversation_id": conversation["id"],
                "contact_id": conversation["contactId"],
                "channel": conversation["channel"],
                "status": "delivered",
                **fields,
            },
        )

    for data in DEMO_TEMPLATES:
        templates_repository.create_template(cur, data)

    return {
        "contacts": len(contacts),
        "conversations": len(conversations),
        "messages": len(DEMO_MESSAGES),
        "templates": len(DEMO_TEMPLATES),
    }


def main() -> int:
    with txn() as cur:
        (has_contacts,) = fetchone(cur, "SELECT EXISTS (SELECT 1 FROM contacts)")
        if has_contacts:
            logger.info("seed skipped: contacts table is not empty")
            return 0

        counts = seed(cur)

    logger.info("seed ok", extra={"extra_fields": safe_log_context(**counts)})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
