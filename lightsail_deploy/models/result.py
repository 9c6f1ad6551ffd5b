"""Operation result models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class SetupResult:
    """Result of generating deployment files for one request"""

    success: bool
    app_type: str
    config_path: Optional[Path] = None
    workflow_path: Optional[Path] = None
    trust_policy_path: Optional[Path] = None
    app_dir: Optional[Path] = None
    app_files: List[Path] = field(default_factory=list)
    role_arn: Optional[str] = None
    role_variable_set: bool = False
    warnings: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def files(self) -> List[Path]:
        """Files written by the operation"""
        generated = [path for path in (self.config_path, self.workflow_path, self.trust_policy_path)
                     if path is not None]
        return generated + list(self.app_files)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "app_type": self.app_type,
            "config_path": str(self.config_path) if self.config_path else None,
            "workflow_path": str(self.workflow_path) if self.workflow_path else None,
            "trust_policy_path": str(self.trust_policy_path) if self.trust_policy_path else None,
            "app_dir": str(self.app_dir) if self.app_dir else None,
            "app_files": [str(path) for path in self.app_files],
            "role_arn": self.role_arn,
            "role_variable_set": self.role_variable_set,
            "warnings": list(self.warnings),
            "next_steps": list(self.next_steps),
            "duration": self.duration,
        }
