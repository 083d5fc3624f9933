"""Enumerated column values.

Each alias mirrors a PostgreSQL enum type created by the initial migration;
request models use the Literal aliases, the enrichment client and the stats
queries use the value tuples.
"""

from typing import Literal, get_args

ContactType = Literal["employer", "maid"]
Channel = Literal["whatsapp", "email"]
MessageStatus = Literal["pending", "sent", "delivered", "read", "failed"]
Direction = Literal["inbound", "outbound"]
Language = Literal["en", "hi", "kn", "ne"]
Sentiment = Literal["positive", "neutral", "negative", "urgent"]

CHANNELS: tuple[str, ...] = get_args(Channel)
LANGUAGES: tuple[str, ...] = get_args(Language)
SENTIMENTS: tuple[str, ...] = get_args(Sentiment)

DEFAULT_LANGUAGE: Language = "en"
DEFAULT_SENTIMENT: Sentiment = "neutral"
