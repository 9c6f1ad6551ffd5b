# lightsail_deploy/core/emitter.py
"""YAML emitter for deployment descriptors"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..api.exceptions import FileExistsError, SerializationError
from ..constants import APP_NAME, DESCRIPTOR_SECTIONS, SECTION_LABELS
from ..models.descriptor import DeploymentDescriptor
from ..utils.file_utils import atomic_write

logger = logging.getLogger(__name__)

# Characters YAML treats as line breaks
LINE_BREAKS = re.compile("[\r\n\x85\u2028\u2029]+")


def _comment_text(text: str) -> str:
    return LINE_BREAKS.sub(" ", text).strip()


class DescriptorEmitter:
    """Serialize descriptors to the YAML file consumed by the deploy workflow"""

    def render(self, descriptor: DeploymentDescriptor) -> str:
        """Render a descriptor as commented YAML text"""
        return self.render_document(
            descriptor.to_dict(),
            title=descriptor.title,
            generated_at=descriptor.generated_at,
        )

    def render_document(self,
                        document: Dict[str, Any],
                        title: Optional[str] = None,
                        generated_at: Optional[datetime] = None) -> str:
        """
        Render a descriptor tree as commented YAML text

        Known sections come first in their fixed order, each preceded by a
        comment label; unknown sections follow unlabelled.

        Args:
            document: Descriptor tree
            title: First header line
            generated_at: Timestamp for the header

        Returns:
            YAML text
        """
        lines = [f"# {_comment_text(title or '') or 'Deployment Configuration'}"]
        if generated_at is not None:
            lines.append(f"# Generated by {APP_NAME} at: {generated_at.isoformat(timespec='seconds')}")
        lines.append("# Replace every CHANGE_ME placeholder before deploying.")
        lines.append("")

        ordered = [name for name in DESCRIPTOR_SECTIONS if name in document]
        ordered += [name for name in document if name not in DESCRIPTOR_SECTIONS]

        for name in ordered:
            label = SECTION_LABELS.get(name)
            if label:
                lines.append(f"# {label}")
            lines.append(self._dump({name: document[name]}).rstrip("\n"))
            lines.append("")

        return "\n".join(lines)

    def emit(self, descriptor: DeploymentDescriptor) -> bytes:
        """
        Serialize a descriptor

        Args:
            descriptor: Descriptor to serialize

        Returns:
            UTF-8 encoded YAML

        Raises:
            SerializationError: If the output does not parse back to the
                same document tree
        """
        text = self.render(descriptor)
        self.check_round_trip(descriptor.to_dict(), text)
        return text.encode("utf-8")

    def check_round_trip(self, document: Dict[str, Any], text: str) -> None:
        """Raise SerializationError unless text parses back to document"""
        parsed = self.parse(text)
        if parsed != document:
            changed = sorted(
                key for key in set(parsed) | set(document)
                if parsed.get(key) != document.get(key)
            )
            raise SerializationError(
                f"Serialized descriptor does not round-trip; sections differ: {', '.join(changed)}"
            )

    def parse(self, data: Union[str, bytes]) -> Dict[str, Any]:
        """
        Parse an emitted descriptor

        Raises:
            SerializationError: If data is not a YAML mapping
        """
        if isinstance(data, bytes):
            data = data.decode("utf-8")

        try:
            document = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise SerializationError(f"Invalid YAML: {e}") from e

        if not isinstance(document, dict):
            raise SerializationError("Descriptor must be a YAML mapping")

        return document

    def load(self, path: Path) -> Dict[str, Any]:
        """Parse a descriptor file"""
        return self.parse(Path(path).read_bytes())

    def write(self,
              descriptor: DeploymentDescriptor,
              output_dir: Path,
              force: bool = True) -> Path:
        """
        Emit and write the descriptor to output_dir

        The file is replaced atomically, so re-running with the same request
        overwrites the previous output in place.

        Raises:
            FileExistsError: If the file exists and force is False
        """
        path = Path(output_dir) / descriptor.config_filename
        if path.exists() and not force:
            raise FileExistsError(str(path))

        atomic_write(path, self.emit(descriptor))
        logger.info("Wrote %s", path)
        return path

    @staticmethod
    def _dump(data: Dict[str, Any]) -> str:
        return yaml.safe_dump(
            data,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            width=1000,
        )


def emit(descriptor: DeploymentDescriptor) -> bytes:
    """Serialize a descriptor to YAML bytes"""
    return DescriptorEmitter().emit(descriptor)


def parse(data: Union[str, bytes]) -> Dict[str, Any]:
    """Parse YAML produced by emit()"""
    return DescriptorEmitter().parse(data)


def write_descriptor(descriptor: DeploymentDescriptor,
                     output_dir: Path,
                     force: bool = True) -> Path:
    """Emit a descriptor and write it atomically into output_dir"""
    return DescriptorEmitter().write(descriptor, output_dir, force)
