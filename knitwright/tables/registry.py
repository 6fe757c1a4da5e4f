"""
Table registry: loads all lookup tables from YAML at startup, validates
cross-references, and exposes a read-only query API.

The registry is a module-level singleton; call get_registry() to obtain it.
All tables are loaded and validated once at import time. Nothing writes to
the registry after startup.

──────────────────────────────────────────────────────────────────────────────
Template contract
──────────────────────────────────────────────────────────────────────────────
Every craft must define every instruction kind listed in
ALLOWED_PLACEHOLDERS and every shaping phrase listed in
REQUIRED_SHAPING_KEYS, in both its plain and its in-pattern shaping
table. A template may use any subset of the placeholders
allowed for its kind, never a placeholder outside that set. The format
functions in knitwright.writer.templates always supply the full set, so a
table that loads cleanly can never raise TemplateMismatchError at render
time.
──────────────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import string
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

import yaml

from knitwright.schemas.instructions import Craft
from knitwright.schemas.shaping import FabricSide, Placement, ShapingKind, ShapingSide
from knitwright.utilities.conversion import CM_PER_INCH
from knitwright.utilities.types import LengthUnit

from .types import CraftTemplates, EaseMultipliers, PlausibleRange

_DATA_DIR = Path(__file__).parent / "data"

ALLOWED_PLACEHOLDERS: MappingProxyType[str, frozenset[str]] = MappingProxyType(
    {
        "cast_on": frozenset({"count", "chain"}),
        "row": frozenset({"row", "side", "body", "count"}),
        "shaping_row": frozenset({"row", "side", "label", "body", "count"}),
        "rows": frozenset({"start", "end", "body", "count"}),
        "plain": frozenset(),
        "pattern_across": frozenset({"pattern_row", "pattern_text"}),
        "pattern_trailing": frozenset({"pattern_row", "pattern_text", "repeats", "after"}),
        "pattern_framed": frozenset(
            {"pattern_row", "pattern_text", "repeats", "before", "after"}
        ),
        "pattern_edge_decrease": frozenset({"pattern_row", "pattern_text", "edge", "tail"}),
        "pattern_edge_decrease_ws": frozenset({"pattern_row", "pattern_text", "edge", "tail"}),
        "pattern_edge_increase": frozenset({"pattern_row", "pattern_text", "edge"}),
        "pattern_edge_increase_ws": frozenset({"pattern_row", "pattern_text", "edge"}),
        "pattern_shaped": frozenset({"pattern_row", "pattern_text", "shaping"}),
        "divide": frozenset({"count"}),
        "rejoin": frozenset({"count"}),
        "finish": frozenset({"count"}),
    }
)

SHAPING_PLACEHOLDERS: frozenset[str] = frozenset({"stitches", "before", "after"})

REQUIRED_SHAPING_KEYS: tuple[str, ...] = tuple(
    f"{kind}.{placement}.{side}"
    for kind, placement in (
        ("bind_off", "center"),
        ("bind_off", "row_start"),
        ("decrease", "both_ends"),
        ("decrease", "row_start"),
        ("decrease", "neck_edge.left"),
        ("decrease", "neck_edge.right"),
        ("decrease", "evenly"),
        ("increase", "both_ends"),
        ("increase", "row_start"),
        ("increase", "center_and_ends"),
        ("increase", "evenly"),
    )
    for side in ("rs", "ws")
)


def shaping_key(
    kind: ShapingKind,
    placement: Placement,
    fabric_side: FabricSide,
    piece_side: ShapingSide = ShapingSide.BOTH,
) -> str:
    """Build the templates.yaml key for a shaping phrase."""
    parts = [kind.value, placement.value]
    if placement == Placement.NECK_EDGE:
        parts.append(piece_side.value)
    parts.append(fabric_side.value.lower())
    return ".".join(parts)


def _placeholders(template: str) -> set[str]:
    """Return the top-level field names referenced by a str.format template."""
    names: set[str] = set()
    for _, field_name, _, _ in string.Formatter().parse(template):
        if field_name is not None:
            names.add(field_name.split(".")[0].split("[")[0])
    return names


class TableRegistry:
    """
    Read-only registry of all engine lookup tables.

    All public dict attributes are wrapped in MappingProxyType after loading
    and are immutable for the lifetime of the registry instance.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_registry() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        # Type annotations only; actual assignment happens in _load_*
        self.ease_multipliers: MappingProxyType[str, EaseMultipliers]
        self.ease_fallback: str
        self.plausibility_unit: LengthUnit
        self.plausible_ranges: MappingProxyType[str, PlausibleRange]
        self.plausible_ratios: MappingProxyType[str, PlausibleRange]
        self.templates: MappingProxyType[Craft, CraftTemplates]
        self.terminology: MappingProxyType[tuple[Craft, str], MappingProxyType[str, str]]

        self._load_all()
        self._validate_cross_references()

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path) as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Table data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse table data file {path}: {exc}") from exc

    def _load_all(self) -> None:
        self._load_ease_multipliers()
        self._load_plausibility()
        self._load_templates()
        self._load_terminology()

    def _load_ease_multipliers(self) -> None:
        data = self._load_yaml("ease_multipliers.yaml")
        result: dict[str, EaseMultipliers] = {}
        for entry in data["entries"]:
            garment_type = entry["garment_type"]
            m = entry["multipliers"]
            result[garment_type] = EaseMultipliers(
                garment_type=garment_type,
                waist=float(m["waist"]),
                hip=float(m["hip"]),
                length=float(m["length"]),
                arm_length=float(m["arm_length"]),
                upper_arm=float(m["upper_arm"]),
                shoulder=float(m["shoulder"]),
                neck=float(m["neck"]),
            )
        self.ease_multipliers = MappingProxyType(result)
        self.ease_fallback = data["fallback"]

    def _load_plausibility(self) -> None:
        data = self._load_yaml("plausibility.yaml")
        self.plausibility_unit = LengthUnit(data["unit"])
        self.plausible_ranges = MappingProxyType(
            {name: PlausibleRange(**bounds) for name, bounds in data.get("ranges", {}).items()}
        )
        self.plausible_ratios = MappingProxyType(
            {name: PlausibleRange(**bounds) for name, bounds in data.get("ratios", {}).items()}
        )

    def _load_templates(self) -> None:
        data = self._load_yaml("templates.yaml")
        result: dict[Craft, CraftTemplates] = {}
        for craft_name, entry in data.items():
            craft = Craft(craft_name)
            kinds = {
                key: value
                for key, value in entry.items()
                if key not in ("labels", "shaping", "pattern_shaping")
            }
            result[craft] = CraftTemplates(
                craft=craft,
                kinds=kinds,
                labels=dict(entry.get("labels", {})),
                shaping=dict(entry.get("shaping", {})),
                pattern_shaping=dict(entry.get("pattern_shaping", {})),
            )
        self.templates = MappingProxyType(result)

    def _load_terminology(self) -> None:
        data = self._load_yaml("terminology.yaml")
        result: dict[tuple[Craft, str], MappingProxyType[str, str]] = {}
        for craft_name, languages in data.items():
            craft = Craft(craft_name)
            for language, terms in languages.items():
                result[(craft, language)] = MappingProxyType(
                    {str(term).lower(): str(abbr) for term, abbr in terms.items()}
                )
        self.terminology = MappingProxyType(result)

    # ── Cross-reference validation ─────────────────────────────────────────────

    def _validate_cross_references(self) -> None:
        """
        Run at startup. Raises ValueError listing all problems found if any
        table entry references something undefined or breaks the template
        contract.
        """
        errors: list[str] = []
        self._check_ease_multipliers(errors)
        self._check_templates(errors)
        self._check_terminology(errors)
        if errors:
            raise ValueError(
                "Table registry cross-reference validation failed:\n"
                + "\n".join(f"  • {e}" for e in errors)
            )

    def _check_ease_multipliers(self, errors: list[str]) -> None:
        if self.ease_fallback not in self.ease_multipliers:
            errors.append(
                f"ease_multipliers fallback {self.ease_fallback!r} has no entry in entries"
            )

    def _check_templates(self, errors: list[str]) -> None:
        """Every craft defines every kind and phrase, using only allowed placeholders."""
        for craft in Craft:
            if craft not in self.templates:
                errors.append(f"templates: craft {craft.value!r} is not defined")
        for craft, templates in self.templates.items():
            prefix = f"templates[{craft.value}]"
            for kind, allowed in ALLOWED_PLACEHOLDERS.items():
                template = templates.kinds.get(kind)
                if template is None:
                    errors.append(f"{prefix}: kind {kind!r} is not defined")
                    continue
                unknown = _placeholders(template) - allowed
                if unknown:
                    errors.append(
                        f"{prefix}.{kind}: unknown placeholder(s) {sorted(unknown)}"
                    )
            for kind in templates.kinds:
                if kind not in ALLOWED_PLACEHOLDERS:
                    errors.append(f"{prefix}: kind {kind!r} is not a known instruction kind")
            for shaping_kind in ShapingKind:
                if shaping_kind.value not in templates.labels:
                    errors.append(f"{prefix}.labels: no label for {shaping_kind.value!r}")
            for table_name in ("shaping", "pattern_shaping"):
                table = getattr(templates, table_name)
                for key in REQUIRED_SHAPING_KEYS:
                    if key not in table:
                        errors.append(f"{prefix}.{table_name}: phrase {key!r} is not defined")
                for key, template in table.items():
                    unknown = _placeholders(template) - SHAPING_PLACEHOLDERS
                    if unknown:
                        errors.append(
                            f"{prefix}.{table_name}.{key}: unknown placeholder(s) {sorted(unknown)}"
                        )

    def _check_terminology(self, errors: list[str]) -> None:
        for craft in Craft:
            if not any(c == craft for c, _ in self.terminology):
                errors.append(f"terminology: craft {craft.value!r} has no language entries")
        for (craft, language), terms in self.terminology.items():
            for term, abbreviation in terms.items():
                if not term.strip() or not abbreviation.strip():
                    errors.append(
                        f"terminology[{craft.value}/{language}]: empty term or abbreviation "
                        f"({term!r} -> {abbreviation!r})"
                    )

    # ── Query API ──────────────────────────────────────────────────────────────

    def get_ease_multipliers(self, garment_type: str) -> EaseMultipliers:
        """Return multipliers for the garment type, or the fallback entry."""
        entry = self.ease_multipliers.get(garment_type)
        return entry if entry is not None else self.ease_multipliers[self.ease_fallback]

    def get_plausible_range(self, name: str, unit: LengthUnit) -> PlausibleRange | None:
        """Return the advisory range for a measurement, expressed in ``unit``."""
        entry = self.plausible_ranges.get(name)
        if entry is None or unit == self.plausibility_unit:
            return entry
        if self.plausibility_unit == LengthUnit.CM:
            return entry.scaled(1 / CM_PER_INCH)
        return entry.scaled(CM_PER_INCH)

    def get_plausible_ratio(self, name: str) -> PlausibleRange | None:
        return self.plausible_ratios.get(name)

    def get_templates(self, craft: Craft) -> CraftTemplates:
        """Return the template set for a craft.

        Raises KeyError if the craft has no templates. The cross-reference
        validation guarantees every Craft value has an entry after
        construction.
        """
        try:
            return self.templates[craft]
        except KeyError:
            raise KeyError(f"No templates for craft {craft!r}") from None

    def get_terminology(self, craft: Craft, language: str) -> MappingProxyType[str, str]:
        """Return the abbreviation dictionary for (craft, language).

        Raises ValueError if no dictionary exists for the pair, since the
        language is caller input rather than a table contract.
        """
        try:
            return self.terminology[(craft, language)]
        except KeyError:
            raise ValueError(
                f"No terminology for craft {craft.value!r} in language {language!r}"
            ) from None


# ── Module-level singleton ─────────────────────────────────────────────────────
#
# Initialized eagerly at import time so there is no lazy-init race condition
# in concurrent contexts. The registry is read-only after construction, so
# sharing it across threads is safe.

_registry: TableRegistry = TableRegistry()


def get_registry() -> TableRegistry:
    """Return the module-level registry singleton."""
    return _registry
