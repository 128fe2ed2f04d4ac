"""Prompt templates for the enrichment calls. Output is requested as JSON objects."""

from democrat.drucksache.models import Category

SUMMARY_PROMPT = """Du bist ein Experte für deutsche Gesetzgebung. Erstelle eine Zusammenfassung des folgenden Gesetzentwurfs.

Titel: {title}

Volltext (Auszug):
{text}

Erstelle eine Zusammenfassung mit maximal 3 Sätzen, die wichtigsten Punkte und betroffene Bereiche.

Antworte im JSON-Format:
{{
  "summary": "Prägnante Zusammenfassung in 2-3 Sätzen",
  "keyPoints": ["Punkt 1", "Punkt 2", ...],
  "affectedAreas": ["Bereich 1", "Bereich 2", ...]
}}"""

CATEGORY_PROMPT = """Du bist ein Experte für deutsche Gesetzgebung. Kategorisiere das folgende Gesetzesdokument.

Titel: {title}

Abstract: {abstract}

Textauszug: {text}

Verfügbare Kategorien:
{categories}

Antworte im JSON-Format:
{{
  "category": "Name der passendsten Kategorie",
  "confidence": 0.0-1.0,
  "reasoning": "Kurze Begründung"
}}"""


def format_categories() -> str:
    return "\n".join(f"{i}. {category.value}" for i, category in enumerate(Category, 1))


def build_summary_prompt(title: str, text: str) -> str:
    return SUMMARY_PROMPT.format(title=title, text=text)


def build_category_prompt(title: str, abstract: str, text: str) -> str:
    return CATEGORY_PROMPT.format(
        title=title,
        abstract=abstract or "Nicht verfügbar",
        text=text,
        categories=format_categories(),
    )
