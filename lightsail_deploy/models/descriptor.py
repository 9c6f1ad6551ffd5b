"""Deployment descriptor models"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from ..constants import DESCRIPTOR_SECTIONS


@dataclass
class DependencyBlock:
    """One installable component on the instance"""

    name: str
    enabled: bool = True
    config: Dict[str, Any] = field(default_factory=dict)
    external: Optional[bool] = None
    rds: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data: Dict[str, Any] = {"enabled": self.enabled}

        if self.external is not None:
            data["external"] = self.external

        data["config"] = copy.deepcopy(self.config)

        if self.rds is not None:
            data["rds"] = copy.deepcopy(self.rds)

        return data

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> 'DependencyBlock':
        """Create from dictionary"""
        return cls(
            name=name,
            enabled=data.get("enabled", False),
            config=dict(data.get("config") or {}),
            external=data.get("external"),
            rds=data.get("rds"),
        )


class DependencySet:
    """Dependency blocks keyed by name, always iterated in sorted key order"""

    def __init__(self, blocks: Optional[List[DependencyBlock]] = None):
        self._blocks: Dict[str, DependencyBlock] = {}
        for block in blocks or []:
            self.add(block)

    def add(self, block: DependencyBlock) -> None:
        """Add or replace a block"""
        self._blocks[block.name] = block

    def get(self, name: str) -> Optional[DependencyBlock]:
        return self._blocks.get(name)

    def names(self) -> List[str]:
        return sorted(self._blocks)

    def enabled_names(self) -> List[str]:
        return [name for name in self.names() if self._blocks[name].enabled]

    def __contains__(self, name: str) -> bool:
        return name in self._blocks

    def __iter__(self) -> Iterator[DependencyBlock]:
        for name in self.names():
            yield self._blocks[name]

    def __len__(self) -> int:
        return len(self._blocks)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DependencySet):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"DependencySet({self.names()!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {block.name: block.to_dict() for block in self}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DependencySet':
        """Create from dictionary"""
        return cls([DependencyBlock.from_dict(name, block or {})
                    for name, block in (data or {}).items()])


@dataclass
class DeploymentDescriptor:
    """Complete deployment configuration for one application

    ``generated_at`` is the only time-dependent value. It is rendered as a
    header comment by the emitter, never as part of the document tree, and
    is ignored when comparing descriptors.
    """

    title: str
    config_filename: str
    aws: Dict[str, Any]
    lightsail: Dict[str, Any]
    application: Dict[str, Any]
    dependencies: DependencySet
    deployment: Dict[str, Any]
    github_actions: Dict[str, Any]
    monitoring: Dict[str, Any]
    security: Dict[str, Any]
    backup: Dict[str, Any]
    generated_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def app_type(self) -> str:
        return self.application["type"]

    def section(self, name: str) -> Any:
        """Get a section by its document key"""
        if name not in DESCRIPTOR_SECTIONS:
            raise KeyError(name)
        value = getattr(self, name)
        if isinstance(value, DependencySet):
            return value.to_dict()
        return value

    def to_dict(self) -> Dict[str, Any]:
        """Document tree in emission order"""
        return {name: copy.deepcopy(self.section(name)) for name in DESCRIPTOR_SECTIONS}
