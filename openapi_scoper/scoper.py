"""
File-based SDK for OpenAPI Scoper.
Loads an OpenAPI specification from disk and writes group-scoped specifications.
"""

import os
import json
import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .core import OpenAPIScoperError, filter_document, list_groups

# Configure logger
logger = logging.getLogger(__name__)


class OpenAPIScoper:
    """
    Main class for scoping OpenAPI specification files.

    This class loads a full OpenAPI spec and produces one self-contained spec
    per group (tag), keeping only the group's operations and the schemas they
    depend on.
    """

    def __init__(
        self,
        input_file: Union[str, Path],
        output_dir: Union[str, Path] = "scoped_specs",
        output_format: str = "json"
    ):
        """
        Initialize the OpenAPIScoper.

        Args:
            input_file: Path to the OpenAPI specification file
            output_dir: Directory for output files
            output_format: Output format ('json' or 'yaml')

        Raises:
            OpenAPIScoperError: If input file doesn't exist or format is invalid
        """
        self.input_file = Path(input_file)
        self.output_dir = Path(output_dir)
        self.output_format = output_format.lower()
        self.spec: Optional[Dict[str, Any]] = None

        if not self.input_file.exists():
            raise OpenAPIScoperError(f"Input file not found: {self.input_file}")

        if self.output_format not in ['json', 'yaml']:
            raise OpenAPIScoperError(f"Invalid output format: {self.output_format}")

    def load_spec(self) -> Dict[str, Any]:
        """
        Load the OpenAPI specification from file.

        Returns:
            Loaded OpenAPI specification

        Raises:
            OpenAPIScoperError: If loading fails or the document is not a mapping
        """
        try:
            with open(self.input_file, 'r', encoding='utf-8') as f:
                if self.input_file.suffix.lower() in ['.yaml', '.yml']:
                    spec = yaml.safe_load(f)
                elif self.input_file.suffix.lower() == '.json':
                    spec = json.load(f)
                else:
                    # Try YAML first, then JSON
                    content = f.read()
                    try:
                        spec = yaml.safe_load(content)
                    except yaml.YAMLError:
                        try:
                            spec = json.loads(content)
                        except json.JSONDecodeError:
                            raise OpenAPIScoperError("Unable to parse file as YAML or JSON")
        except OpenAPIScoperError:
            raise
        except Exception as e:
            raise OpenAPIScoperError(f"Error loading spec: {e}") from e

        if spec is None:
            spec = {}
        if not isinstance(spec, dict):
            raise OpenAPIScoperError(
                f"Expected a mapping at the top of {self.input_file}, got {type(spec).__name__}"
            )

        self.spec = spec
        logger.info(f"Loaded OpenAPI spec from {self.input_file}")
        return self.spec

    def _ensure_loaded(self) -> Dict[str, Any]:
        if self.spec is None:
            self.load_spec()
        return self.spec

    def list_groups(self) -> List[str]:
        """Return the groups (tags) of the loaded spec."""
        return list_groups(self._ensure_loaded())

    def scoped_spec(self, group_id: str) -> Dict[str, Any]:
        """Return the spec scoped to ``group_id``."""
        return filter_document(self._ensure_loaded(), group_id)

    @staticmethod
    def safe_filename(group_id: str) -> str:
        return group_id.lower().replace(' ', '_').replace('/', '_')

    def write_spec(self, spec: Dict[str, Any], filename: str) -> Path:
        """
        Write specification to file.

        Args:
            spec: Specification to write
            filename: Output filename

        Returns:
            Path to written file
        """
        os.makedirs(self.output_dir, exist_ok=True)

        if self.output_format == "json":
            filename = filename.replace('.yaml', '.json').replace('.yml', '.json')
            if not filename.endswith('.json'):
                filename += '.json'
        else:
            if not filename.endswith(('.yaml', '.yml')):
                filename += '.yaml'

        filepath = self.output_dir / filename

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                if self.output_format == "json":
                    json.dump(spec, f, indent=2, ensure_ascii=False)
                else:
                    yaml.safe_dump(spec, f, default_flow_style=False, sort_keys=False,
                                   allow_unicode=True, indent=2, width=1000)

            logger.info(f"Created: {filepath}")
            return filepath

        except Exception as e:
            raise OpenAPIScoperError(f"Error writing {filepath}: {e}") from e

    def write_group(self, group_id: str, filename: Optional[str] = None) -> Path:
        """
        Write the spec scoped to a single group.

        Args:
            group_id: Group (tag) to write
            filename: Output filename; derived from the group id when omitted

        Returns:
            Path to written file
        """
        if filename is None:
            filename = self.safe_filename(group_id)
        return self.write_spec(self.scoped_spec(group_id), filename)

    def split(self, groups: Optional[Iterable[str]] = None) -> List[Path]:
        """
        Write one scoped spec per group.

        Args:
            groups: Groups to write; every group of the spec when omitted

        Returns:
            List of created file paths
        """
        self.load_spec()

        if groups is None:
            groups = self.list_groups()

        logger.info(f"Scoping {self.input_file} by group")

        created_files = []
        used_names: Dict[str, str] = {}
        for group_id in dict.fromkeys(groups):
            base_name = self.safe_filename(group_id)
            filename = base_name
            suffix = 2
            while filename in used_names:
                filename = f"{base_name}_{suffix}"
                suffix += 1
            if filename != base_name:
                logger.warning(
                    f"Group '{group_id}' maps to the same file name as "
                    f"'{used_names[base_name]}'; writing it as {filename}"
                )
            used_names[filename] = group_id
            created_files.append(self.write_group(group_id, filename))

        logger.info(f"Scoping complete. Created {len(created_files)} files in: {self.output_dir}")
        return created_files
