"""Prompt text sent to the chat-completions endpoint."""

from gharpey.domain.enums import LANGUAGES, SENTIMENTS

BUSINESS_NAME = "GharPey"


def analysis_system_prompt(target_language: str | None) -> str:
    target = target_language or "en"
    return (
        "You are an AI assistant that analyzes messages and provides structured information.\n"
        "Analyze the message and provide:\n"
        f"1. language: detected language code ({', '.join(LANGUAGES)})\n"
        f"2. sentiment: one of {', '.join(SENTIMENTS)}\n"
        "3. intent: brief description of the message intent\n"
        f"4. translatedContent: translation to {target} if different from original language\n"
        "5. suggestedResponse: a brief appropriate response in the original language\n\n"
        'Respond with JSON in this format: { "language": "en", "sentiment": "neutral", '
        '"intent": "...", "translatedContent": "...", "suggestedResponse": "..." }'
    )


def reply_system_prompt(language: str) -> str:
    return (
        f"You are a helpful assistant for {BUSINESS_NAME}, a platform connecting employers "
        "with domestic help (maids).\n"
        f"Generate professional, helpful responses in {language}. Be warm, clear, and concise."
    )


def translation_system_prompt(target_language: str) -> str:
    return f"Translate the following text to {target_language}. Maintain the tone and meaning."
