"""
Code templates — render and parse human-readable document numbers.

A code is always derived from (entity_type, year, sub_type, seq); it is
never the source of truth.  Every template below is bit-exact:

    CLIENT        MEIBL/CL/{YYYY}/{SEQ:5}
    POLICY        POL/{YYYY}/{SEQ:6}
    ENDORSEMENT   END/{YYYY}/{SEQ:6}
    NOTE          {DN|CN}/{YYYY}/{SEQ:6}
    CLAIM         CLM/{YYYY}/{SEQ:6}
    IMPORT_BATCH  IMP/{YYYY}/{SEQ:6}
    AGENT         MEIBL/AG/{YYYY}/{IND|CORP}/{SEQ:5}
    INSURER       MEIBL/IN/{YYYY}/{SEQ:5}
    BANK          MEIBL/BK/{YYYY}/{SEQ:5}
    SLIP          SLIP/{YYYY}/{SEQ:6}

Sequences that outgrow the pad width are written in full
(POL/2025/1000000), so parse(render(x)) == x always holds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from app.core.config import settings
from app.core.constants import NO_SUB_TYPE, ClientType, EntityType, NoteType
from app.core.errors import (
    InvalidSubTypeError,
    InvalidYearError,
    MalformedCodeError,
    UnknownEntityTypeError,
)

_PLACEHOLDER = re.compile(r"(\{\w+\})")

_PARTY_ALIASES = {
    "ind": ClientType.INDIVIDUAL.value,
    "individual": ClientType.INDIVIDUAL.value,
    "corp": ClientType.CORPORATE.value,
    "corporate": ClientType.CORPORATE.value,
}

_NOTE_ALIASES = {
    "dn": NoteType.DEBIT.value,
    "debit": NoteType.DEBIT.value,
    "cn": NoteType.CREDIT.value,
    "credit": NoteType.CREDIT.value,
}

_NONE_VALUES = {"", "none", "null"}


@dataclass(frozen=True)
class CodeTemplate:
    """Rendering rules for one numbering series."""

    entity_type: EntityType
    pattern: str
    width: int
    sub_types: frozenset[str] = frozenset()
    sub_type_required: bool = False
    aliases: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    def render(self, year: int, seq: int, sub_type: str | None = None, *, org: str | None = None) -> str:
        """Format a code.  Inputs are assumed to be normalised already."""
        if seq < 1:
            raise ValueError(f"Sequence must be >= 1, got {seq}")
        return self.pattern.format(
            org=org or settings.CODE_PREFIX,
            year=f"{year:04d}",
            sub=sub_type or "",
            seq=str(seq).zfill(self.width),
        )

    def regex(self, *, org: str | None = None) -> re.Pattern[str]:
        parts = []
        for token in _PLACEHOLDER.split(self.pattern):
            if token == "{org}":
                parts.append(re.escape(org or settings.CODE_PREFIX))
            elif token == "{year}":
                parts.append(r"(?P<year>\d{4})")
            elif token == "{sub}":
                options = "|".join(re.escape(s) for s in sorted(self.sub_types))
                parts.append(f"(?P<sub>{options})")
            elif token == "{seq}":
                # Exactly `width` digits, or a wider number with no leading zero.
                parts.append(rf"(?P<seq>\d{{{self.width}}}|[1-9]\d{{{self.width},}})")
            else:
                parts.append(re.escape(token))
        return re.compile("".join(parts))


_PARTY_SUB_TYPES = frozenset(t.value for t in ClientType)
_NOTE_SUB_TYPES = frozenset(t.value for t in NoteType)

TEMPLATES: dict[EntityType, CodeTemplate] = {
    EntityType.CLIENT: CodeTemplate(EntityType.CLIENT, "{org}/CL/{year}/{seq}", width=5),
    EntityType.POLICY: CodeTemplate(EntityType.POLICY, "POL/{year}/{seq}", width=6),
    EntityType.ENDORSEMENT: CodeTemplate(EntityType.ENDORSEMENT, "END/{year}/{seq}", width=6),
    EntityType.NOTE: CodeTemplate(
        EntityType.NOTE,
        "{sub}/{year}/{seq}",
        width=6,
        sub_types=_NOTE_SUB_TYPES,
        sub_type_required=True,
        aliases=_NOTE_ALIASES,
    ),
    EntityType.CLAIM: CodeTemplate(EntityType.CLAIM, "CLM/{year}/{seq}", width=6),
    EntityType.IMPORT_BATCH: CodeTemplate(EntityType.IMPORT_BATCH, "IMP/{year}/{seq}", width=6),
    EntityType.AGENT: CodeTemplate(
        EntityType.AGENT,
        "{org}/AG/{year}/{sub}/{seq}",
        width=5,
        sub_types=_PARTY_SUB_TYPES,
        sub_type_required=True,
        aliases=_PARTY_ALIASES,
    ),
    EntityType.INSURER: CodeTemplate(EntityType.INSURER, "{org}/IN/{year}/{seq}", width=5),
    EntityType.BANK: CodeTemplate(EntityType.BANK, "{org}/BK/{year}/{seq}", width=5),
    EntityType.SLIP: CodeTemplate(EntityType.SLIP, "SLIP/{year}/{seq}", width=6),
}


def resolve_entity_type(value: EntityType | str) -> EntityType:
    """Coerce a string tag to EntityType (case-insensitive)."""
    if isinstance(value, EntityType):
        return value
    try:
        return EntityType(str(value).strip().upper())
    except ValueError:
        raise UnknownEntityTypeError(
            f"Unknown entity type: {value!r}",
            details={"allowed": [e.value for e in EntityType]},
        ) from None


def template_for(entity_type: EntityType | str) -> CodeTemplate:
    return TEMPLATES[resolve_entity_type(entity_type)]


def normalize_sub_type(entity_type: EntityType | str, raw: str | None) -> str | None:
    """
    Map a caller-supplied sub-type to its canonical partition value.

    "Individual", "individual" and "IND" all become "IND" for an agent.
    None, "" and "none" mean "no sub-type", which is a partition of its own.
    """
    template = template_for(entity_type)

    value = None if raw is None else str(raw).strip()
    if value is None or value.lower() in _NONE_VALUES:
        if template.sub_type_required:
            raise InvalidSubTypeError(
                f"Sub-type is required for {template.entity_type.value}",
                details={"allowed": sorted(template.sub_types)},
            )
        return None

    if not template.sub_types:
        raise InvalidSubTypeError(
            f"{template.entity_type.value} does not take a sub-type (got {raw!r})"
        )

    canonical = template.aliases.get(value.lower(), value.upper())
    if canonical not in template.sub_types:
        raise InvalidSubTypeError(
            f"Invalid sub-type {raw!r} for {template.entity_type.value}",
            details={"allowed": sorted(template.sub_types)},
        )
    return canonical


def normalize_client_type(raw: str | None) -> str | None:
    """
    Canonical IND / CORP for a client record, or None when not given.

    The client type is stored on the record only; client codes share one
    counter per year regardless of type.
    """
    value = None if raw is None else str(raw).strip()
    if value is None or value.lower() in _NONE_VALUES:
        return None
    canonical = _PARTY_ALIASES.get(value.lower(), value.upper())
    if canonical not in _PARTY_SUB_TYPES:
        raise InvalidSubTypeError(
            f"Invalid client type {raw!r}",
            details={"allowed": sorted(_PARTY_SUB_TYPES)},
        )
    return canonical


def validate_year(year: int) -> int:
    if isinstance(year, bool) or not isinstance(year, int) or not 1000 <= year <= 9999:
        raise InvalidYearError(f"Year must be a 4-digit calendar year, got {year!r}")
    return year


# ═══════════════════════════════════════════════════════════
#  Value types
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SequenceKey:
    """Tagged partition key: (entity_type, year, sub_type)."""

    entity_type: EntityType
    year: int
    sub_type: str | None = None

    @classmethod
    def build(
        cls,
        entity_type: EntityType | str,
        year: int,
        sub_type: str | None = None,
    ) -> SequenceKey:
        entity = resolve_entity_type(entity_type)
        return cls(
            entity_type=entity,
            year=validate_year(year),
            sub_type=normalize_sub_type(entity, sub_type),
        )

    @property
    def storage_sub_type(self) -> str:
        """Value stored in the counter row's sub_type column."""
        return self.sub_type or NO_SUB_TYPE

    def __str__(self) -> str:
        sub = f"/{self.sub_type}" if self.sub_type else ""
        return f"{self.entity_type.value}{sub}@{self.year}"


@dataclass(frozen=True)
class GeneratedCode:
    """A rendered document number together with the counter value behind it."""

    code: str
    entity_type: EntityType
    year: int
    seq: int
    sub_type: str | None = None

    @property
    def key(self) -> SequenceKey:
        return SequenceKey(self.entity_type, self.year, self.sub_type)

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "entity_type": self.entity_type.value,
            "year": self.year,
            "seq": self.seq,
            "sub_type": self.sub_type,
        }

    def __str__(self) -> str:
        return self.code


def render_code(key: SequenceKey, seq: int, *, org: str | None = None) -> GeneratedCode:
    """Render the code for `seq` in partition `key`."""
    template = TEMPLATES[key.entity_type]
    return GeneratedCode(
        code=template.render(key.year, seq, key.sub_type, org=org),
        entity_type=key.entity_type,
        year=key.year,
        seq=seq,
        sub_type=key.sub_type,
    )


def parse_code(
    code: str,
    entity_type: EntityType | str | None = None,
    *,
    org: str | None = None,
) -> GeneratedCode:
    """
    Recover (entity_type, year, sub_type, seq) from a rendered code.

    Raises MalformedCodeError when nothing matches.
    """
    if entity_type is not None:
        candidates = [template_for(entity_type)]
    else:
        candidates = list(TEMPLATES.values())

    for template in candidates:
        match = template.regex(org=org).fullmatch(code.strip())
        if match is None:
            continue
        seq = int(match.group("seq"))
        if seq < 1:
            continue
        groups = match.groupdict()
        return GeneratedCode(
            code=code.strip(),
            entity_type=template.entity_type,
            year=int(groups["year"]),
            seq=seq,
            sub_type=groups.get("sub"),
        )

    raise MalformedCodeError(f"Unrecognised document code: {code!r}")
