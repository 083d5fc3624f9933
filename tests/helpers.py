"""Sample API objects for route tests.

Plain functions, not fixtures, so tests can build variations inline.
"""

from __future__ import annotations

from typing import Any

CONTACT_ID = "c0ffee00-0000-4000-8000-000000000001"
CONVERSATION_ID = "c0ffee00-0000-4000-8000-000000000002"
MESSAGE_ID = "c0ffee00-0000-4000-8000-000000000003"
TEMPLATE_ID = "c0ffee00-0000-4000-8000-000000000004"

CREATED_AT = "2026-10-19T09:30:00+00:00"


def make_contact(**overrides: Any) -> dict[str, Any]:
    contact = {
        "id": CONTACT_ID,
        "name": "Priya Sharma",
        "phone": "+91 98765 43210",
        "email": "priya.sharma@example.com",
        "type": "employer",
        "language": "en",
        "location": "Bangalore, Koramangala",
        "notes": None,
        "metadata": None,
        "createdAt": CREATED_AT,
        "updatedAt": CREATED_AT,
    }
    contact.update(overrides)
    return contact


def make_conversation(**overrides: Any) -> dict[str, Any]:
    conversation = {
        "id": CONVERSATION_ID,
        "contactId": CONTACT_ID,
        "channel": "whatsapp",
        "subject": "Initial Inquiry",
        "lastMessageAt": CREATED_AT,
        "unreadCount": 0,
        "status": "active",
        "createdAt": CREATED_AT,
    }
    conversation.update(overrides)
    return conversation


def make_message(**overrides: Any) -> dict[str, Any]:
    message = {
        "id": MESSAGE_ID,
        "conversationId": CONVERSATION_ID,
        "contactId": CONTACT_ID,
        "direction": "inbound",
        "channel": "whatsapp",
        "content": "Hi, I'm looking for a reliable maid.",
        "language": "en",
        "translatedContent": None,
        "status": "delivered",
        "sentiment": "neutral",
        "intent": "Message received",
        "metadata": None,
        "isVoice": False,
        "voiceUrl": None,
        "transcription": None,
        "createdAt": CREATED_AT,
        "readAt": None,
    }
    message.update(overrides)
    return message


def make_template(**overrides: Any) -> dict[str, Any]:
    template = {
        "id": TEMPLATE_ID,
        "name": "Welcome Message",
        "category": "onboarding",
        "channel": "whatsapp",
        "content": {"text": "Welcome to GharPey!"},
        "variables": None,
        "language": "en",
        "isActive": True,
        "usageCount": 0,
        "createdAt": CREATED_AT,
        "updatedAt": CREATED_AT,
    }
    template.update(overrides)
    return template
