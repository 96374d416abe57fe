"""Translation prompt template.

Single user message asking for the bare translated string.

Dependencies: langchain_core.prompts
System role: Prompt template for translation jobs
"""

from langchain_core.prompts import ChatPromptTemplate

TRANSLATION_PROMPT = ChatPromptTemplate.from_messages([
    (
        "human",
        """You are a professional translator. Translate the following text from {source_locale} to {target_locale}.

Source text: "{text}"

Provide ONLY the translated text, without any explanation, quotes, or additional text.""",
    ),
])


def get_translation_prompt() -> ChatPromptTemplate:
    """Get the translation prompt template."""
    return TRANSLATION_PROMPT
