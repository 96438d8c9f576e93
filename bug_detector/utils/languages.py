"""
Language Catalogue
==================
Languages offered to the UI, plus a byte-size formatter for log lines.
"""
from typing import List, Optional

from pydantic import BaseModel


class LanguageOption(BaseModel):
    value: str
    label: str
    group: Optional[str] = None


DEFAULT_LANGUAGES: List[LanguageOption] = [
    LanguageOption(value="javascript", label="JavaScript", group="Web"),
    LanguageOption(value="typescript", label="TypeScript", group="Web"),
    LanguageOption(value="python", label="Python", group="General"),
    LanguageOption(value="java", label="Java", group="General"),
    LanguageOption(value="csharp", label="C#", group="General"),
    LanguageOption(value="cpp", label="C/C++", group="Systems"),
    LanguageOption(value="go", label="Go", group="Systems"),
    LanguageOption(value="rust", label="Rust", group="Systems"),
    LanguageOption(value="ruby", label="Ruby", group="General"),
    LanguageOption(value="php", label="PHP", group="Web"),
    LanguageOption(value="kotlin", label="Kotlin", group="General"),
    LanguageOption(value="swift", label="Swift", group="General"),
    LanguageOption(value="shell", label="Shell", group="Systems"),
]


def format_bytes(size: int) -> str:
    """Human-readable size: B below 1 KB, one decimal for KB, two for MB."""
    if size < 1024:
        return f"{size} B"
    kb = size / 1024
    if kb < 1024:
        return f"{kb:.1f} KB"
    return f"{kb / 1024:.2f} MB"
