"""
Numbering package — document codes and the sequence generator.

    from app.numbering import SequenceGenerator, parse_code

    generator = SequenceGenerator(async_session)
    code = await generator.next_code("NOTE", sub_type="DN")   # DN/2025/000001
"""

from app.numbering.codes import (
    TEMPLATES,
    CodeTemplate,
    GeneratedCode,
    SequenceKey,
    normalize_client_type,
    normalize_sub_type,
    parse_code,
    render_code,
    resolve_entity_type,
)
from app.numbering.generator import SequenceGenerator

__all__ = [
    "TEMPLATES",
    "CodeTemplate",
    "GeneratedCode",
    "SequenceGenerator",
    "SequenceKey",
    "normalize_client_type",
    "normalize_sub_type",
    "parse_code",
    "render_code",
    "resolve_entity_type",
]
