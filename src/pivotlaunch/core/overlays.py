"""Enhanced overlay table and registry.

Overlays enrich a template record with pivot/launch phase detail. They are
associated with templates by stable template id; the display-name keys of
the built-in table are kept as a compatibility lookup only.

Additional overlays can be declared in data/config/overlays_v1.yaml:

    overlays:
      - template_id: 12
        name: "Blockchain Applications"
        pivotPhase: {...}
        launchPhase: {...}

Usage:
    from pivotlaunch.core.overlays import load_overlays

    registry = load_overlays()
    overlay = registry.lookup(record)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import structlog
import yaml
from pydantic import ValidationError

from pivotlaunch.core.models import EnhancedOverlay, TemplateRecord

logger = structlog.get_logger(__name__)

# Overlay file path (relative to project root)
OVERLAYS_FILE = Path("data/config/overlays_v1.yaml")


class OverlayConfigError(Exception):
    """Raised when the overlay file cannot be parsed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid overlay file {path}: {reason}")


# =============================================================================
# BUILT-IN OVERLAYS
# =============================================================================

BUILTIN_OVERLAYS: dict[str, dict[str, Any]] = {
    "Blockchain Applications": {
        "pivotPhase": {
            "learningObjectives": [
                "Define blockchain technology and explain its core principles of decentralization, immutability, and consensus",
                "Analyze the components of a smart contract and identify appropriate use cases",
                "Evaluate the trade-offs between different blockchain platforms and consensus mechanisms",
            ],
            "coreConceptDefinition": "A blockchain is a distributed, immutable ledger that maintains a continuously growing list of records (blocks) linked and secured using cryptography, enabling trustless transactions without central authority.",
            "constraintsAndBoundaries": "Blockchain solutions are appropriate for scenarios requiring decentralization, transparency, and immutability, but may not be suitable for applications requiring high transaction throughput, privacy, or frequent data updates.",
            "minimalWorkingExample": "A simple smart contract that stores and retrieves a single value, demonstrating state management and function calls on the blockchain.",
            "commonMisconceptions": [
                "Blockchain is only for cryptocurrency",
                "All blockchains are public and open",
                "Smart contracts are automatically legally binding",
                "Blockchain eliminates the need for all intermediaries",
            ],
            "cognitiveLoadConsiderations": "Introduce blockchain concepts progressively: start with digital ledgers, then add decentralization, followed by cryptographic security, before combining all elements.",
            "assessmentCriteria": [
                {
                    "criterion": "Conceptual Understanding",
                    "description": "Student demonstrates understanding of blockchain principles",
                    "exemplar": "Clearly explains decentralization, consensus, and immutability with real-world analogies",
                    "lowPerformance": "Confuses blockchain with database or provides inaccurate definitions",
                    "highPerformance": "Connects principles to implementation details and can explain trade-offs",
                },
            ],
        },
        "launchPhase": {
            "transferActivities": {
                "nearTransfer": {
                    "title": "Supply Chain Transparency",
                    "description": "Adapt the core smart contract concepts to track product provenance in a supply chain",
                    "scaffolding": [
                        "Use the same Solidity syntax learned in pivot phase",
                        "Apply similar state management patterns",
                        "Extend the basic contract structure with supply chain events",
                    ],
                    "deliverables": ["Smart contract code", "Test cases", "Documentation"],
                    "timeEstimate": "2-3 weeks",
                },
                "moderateTransfer": {
                    "title": "Decentralized Voting System",
                    "description": "Apply blockchain principles to create a transparent, tamper-proof voting mechanism",
                    "challengeLevel": "Requires integration of multiple smart contracts and user interface considerations",
                    "deliverables": ["Multi-contract system", "Security analysis", "User interface prototype"],
                    "timeEstimate": "3-4 weeks",
                },
                "farTransfer": {
                    "title": "Novel Industry Application",
                    "description": "Identify and solve a blockchain-appropriate problem in an unfamiliar domain",
                    "novelContext": "Students must research a new industry and justify blockchain appropriateness",
                    "deliverables": ["Industry analysis", "Technical solution", "Implementation plan", "Presentation"],
                    "timeEstimate": "4-5 weeks",
                },
            },
            "finalProjectRequirements": {
                "description": "Develop a complete blockchain solution that demonstrates mastery of core concepts in a novel application domain",
                "constraints": [
                    "Must include both smart contract and user interface components",
                    "Solution should address a real-world problem",
                    "Must include security considerations and testing strategy",
                ],
                "evaluationCriteria": [
                    "Technical implementation quality",
                    "Appropriate use of blockchain technology",
                    "Innovation and creativity",
                    "Presentation and documentation quality",
                ],
                "presentationFormat": "15-minute presentation with 5-minute Q&A, including live demonstration",
            },
        },
    },
    "Data Science": {
        "pivotPhase": {
            "learningObjectives": [
                "Apply the data science methodology to structure problem-solving approaches",
                "Distinguish between descriptive, predictive, and prescriptive analytics",
                "Evaluate data quality and identify appropriate preprocessing techniques",
            ],
            "coreConceptDefinition": "Data science is the systematic extraction of actionable insights from data using computational and statistical methods, combining domain expertise with technical skills to solve complex problems.",
            "constraintsAndBoundaries": "Data science approaches are most effective when sufficient quality data is available, the problem can be quantified, and stakeholders can act on the insights generated.",
            "minimalWorkingExample": "A complete data analysis pipeline that loads, cleans, analyzes, and visualizes a simple dataset to answer a specific question.",
            "commonMisconceptions": [
                "Data science is just running machine learning algorithms",
                "More data always leads to better insights",
                "Correlation implies causation",
                "Complex models are always better than simple ones",
            ],
            "cognitiveLoadConsiderations": "Scaffold the data science process by starting with familiar datasets and clear questions before introducing complex algorithms or large datasets.",
            "assessmentCriteria": [
                {
                    "criterion": "Methodology Application",
                    "description": "Student demonstrates systematic approach to data analysis",
                    "exemplar": "Follows structured methodology from problem definition through insight communication",
                    "lowPerformance": "Jumps directly to analysis without problem framing or skips validation steps",
                    "highPerformance": "Adapts methodology appropriately to problem context and explains reasoning",
                },
            ],
        },
    },
}


# =============================================================================
# REGISTRY
# =============================================================================


@dataclass(frozen=True)
class OverlayRegistry:
    """Immutable association of templates to overlays.

    Lookup order: template id, then exact display name.
    """

    by_id: Mapping[int, EnhancedOverlay] = field(default_factory=lambda: MappingProxyType({}))
    by_name: Mapping[str, EnhancedOverlay] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "by_id", MappingProxyType(dict(self.by_id)))
        object.__setattr__(self, "by_name", MappingProxyType(dict(self.by_name)))

    @classmethod
    def from_name_map(cls, overlays: Mapping[str, EnhancedOverlay | Mapping[str, Any]]) -> OverlayRegistry:
        """Build a registry from a display-name keyed table."""
        return cls(by_name={name: _as_overlay(o) for name, o in overlays.items()})

    def lookup(self, record: TemplateRecord) -> EnhancedOverlay | None:
        """Overlay for a record, or None if the template has none."""
        overlay = self.by_id.get(record.id)
        if overlay is not None:
            return overlay
        return self.by_name.get(record.name)

    def merged(self, other: OverlayRegistry) -> OverlayRegistry:
        """New registry where entries of `other` take precedence."""
        return OverlayRegistry(
            by_id={**self.by_id, **other.by_id},
            by_name={**self.by_name, **other.by_name},
        )

    def __len__(self) -> int:
        return len(self.by_id) + len(self.by_name)


def _as_overlay(value: EnhancedOverlay | Mapping[str, Any]) -> EnhancedOverlay:
    if isinstance(value, EnhancedOverlay):
        return value
    return EnhancedOverlay.from_mapping(value)


def builtin_registry() -> OverlayRegistry:
    """Registry with the built-in overlays."""
    return OverlayRegistry.from_name_map(BUILTIN_OVERLAYS)


def parse_overlay_file(path: Path) -> OverlayRegistry:
    """Parse an overlays YAML file into a registry.

    Raises:
        OverlayConfigError: If the file is not valid YAML or an entry
            does not match the overlay schema.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise OverlayConfigError(path, str(e)) from e

    entries = data.get("overlays", [])
    if not isinstance(entries, list):
        raise OverlayConfigError(path, "'overlays' must be a list")

    by_id: dict[int, EnhancedOverlay] = {}
    by_name: dict[str, EnhancedOverlay] = {}
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise OverlayConfigError(path, f"entry {i} is not a mapping")
        body = {k: v for k, v in entry.items() if k not in ("template_id", "name")}
        try:
            overlay = EnhancedOverlay.from_mapping(body)
        except ValidationError as e:
            raise OverlayConfigError(path, f"entry {i}: {e}") from e

        template_id = entry.get("template_id")
        name = entry.get("name")
        if template_id is None and not name:
            raise OverlayConfigError(path, f"entry {i} needs template_id or name")
        if template_id is not None:
            by_id[int(template_id)] = overlay
        if name:
            by_name[str(name)] = overlay

    logger.debug("overlays_file_parsed", path=str(path), by_id=len(by_id), by_name=len(by_name))
    return OverlayRegistry(by_id=by_id, by_name=by_name)


# Module-level cache
_cached_registry: OverlayRegistry | None = None


def load_overlays(path: Path | None = None, force_reload: bool = False) -> OverlayRegistry:
    """Load built-in overlays merged with the overlays file, if present.

    Args:
        path: Overlay file (default: data/config/overlays_v1.yaml)
        force_reload: If True, ignore cache and reload from file.

    Returns:
        OverlayRegistry
    """
    global _cached_registry

    if _cached_registry is not None and not force_reload and path is None:
        return _cached_registry

    overlay_path = path or OVERLAYS_FILE
    registry = builtin_registry()

    if overlay_path.exists():
        registry = registry.merged(parse_overlay_file(overlay_path))
        logger.info("overlays_loaded", source=str(overlay_path), entries=len(registry))
    else:
        logger.debug("overlays_file_not_found", path=str(overlay_path))

    if path is None:
        _cached_registry = registry
    return registry


def clear_overlay_cache() -> None:
    """Clear the overlay registry cache."""
    global _cached_registry
    _cached_registry = None
