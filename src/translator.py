"""
Machine translation of articles.

Translator is the collaborator interface; OpenRouterTranslator implements
it on top of the OpenRouter chat API. translate_article fills in missing
translations without ever replacing one a human has edited.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from openrouter import OpenRouter

from src.file_utils import get_utc_timestamp
from src.models import TRANSLATED_LANGUAGES, Article, Translation

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {"es": "Spanish", "uk": "Ukrainian"}

MAX_INPUT_CHARS = 8000

TRANSLATION_PROMPT = (
    "Translate the following text to {{LANGUAGE}}. Maintain the original formatting "
    "and structure. Only provide the translation, no explanations:\n\n{{TEXT}}"
)


class Translator(ABC):
    """Abstract base class for translation backends."""

    @abstractmethod
    def translate(self, text: str, target_lang: str) -> str:
        """
        Translate text into a target language.

        Args:
            text: Source (English) text
            target_lang: Language code, e.g. "es"

        Returns:
            Translated text
        """


class OpenRouterTranslator(Translator):
    """Translator backed by an OpenRouter-hosted LLM."""

    def __init__(
        self,
        api_key: str,
        model_name: str,
        max_tokens: int = 4000,
        temperature: float = 0.2,
    ):
        """
        Initialize the translator.

        Args:
            api_key: OpenRouter API key
            model_name: Model identifier (e.g., "google/gemini-flash-2.0")
            max_tokens: Maximum tokens for the translated text
            temperature: Sampling temperature
        """
        self.api_key = api_key
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.client = OpenRouter(api_key=api_key)

    def fill_template(self, template: str, variables: Dict[str, Any]) -> str:
        """
        Fill template with variables.

        Args:
            template: Template string with {{VARIABLE}} placeholders
            variables: Dictionary of variable names to values

        Returns:
            Filled template string
        """
        result = template
        for key, value in variables.items():
            placeholder = f"{{{{{key}}}}}"
            result = result.replace(placeholder, str(value))
        return result

    def translate(self, text: str, target_lang: str) -> str:
        if not text:
            return text
        prompt = self.fill_template(TRANSLATION_PROMPT, {
            "LANGUAGE": LANGUAGE_NAMES.get(target_lang, target_lang),
            "TEXT": text[:MAX_INPUT_CHARS],
        })
        response = self.client.chat.send(
            model=self.model_name,
            messages=[
                {"role": "system", "content": "You are a professional news translator."},
                {"role": "user", "content": prompt}
            ],
            max_tokens=self.max_tokens,
            temperature=self.temperature
        )
        return response.choices[0].message.content.strip()


def translate_article(
    article: Article,
    translator: Translator,
    languages: Optional[List[str]] = None,
) -> List[str]:
    """
    Machine-translate an article's title and body.

    Translations marked edited are left untouched.

    Args:
        article: Article to translate (modified in place)
        translator: Translation backend
        languages: Language codes to fill (defaults to es and uk)

    Returns:
        Language codes that were (re)translated
    """
    updated = []
    for lang in languages or TRANSLATED_LANGUAGES:
        existing = article.translations.get(lang)
        if existing is not None and existing.edited:
            logger.info("Keeping edited %s translation of %s", lang, article.id)
            continue
        article.translations[lang] = Translation(
            title=translator.translate(article.title, lang),
            content=translator.translate(article.content.text, lang),
        )
        updated.append(lang)
    return updated


def update_translation(article: Article, lang: str, title: str, content: str) -> Translation:
    """
    Store a human-edited translation.

    Args:
        article: Article to update (modified in place)
        lang: Language code (es or uk)
        title: Edited title
        content: Edited body

    Returns:
        The stored Translation

    Raises:
        ValueError: If lang is not a translated language
    """
    if lang not in TRANSLATED_LANGUAGES:
        raise ValueError(f"Unsupported translation language: {lang}")
    translation = Translation(
        title=title,
        content=content,
        edited=True,
        edited_at=get_utc_timestamp(),
    )
    article.translations[lang] = translation
    return translation
