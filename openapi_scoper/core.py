"""
Core logic for OpenAPI Scoper.
This module carves group-scoped sub-documents out of a full OpenAPI specification
and enumerates the groups (tags) a specification declares or uses.
"""

import logging
from typing import Any, Dict, Iterable, List, Set

# Configure logger
logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = '#/components/schemas/'

# Path item keys that are shared by every operation of the path
PATH_ITEM_SHARED_FIELDS = ('summary', 'description', 'parameters', 'servers')


class OpenAPIScoperError(Exception):
    """Custom exception for OpenAPI Scoper errors."""
    pass


class SchemaReferenceResolver:
    """Helper class for computing the schema reference closure of a document part."""

    def __init__(self, spec: Dict[str, Any]):
        self.spec = spec
        components = spec.get('components')
        self.components = components if isinstance(components, dict) else {}
        schemas = self.components.get('schemas')
        self.schemas = schemas if isinstance(schemas, dict) else {}

    def find_schema_references(self, obj: Any, found: Set[str]) -> Set[str]:
        """
        Recursively find all schema references in an object.

        An object carrying a string ``$ref`` is treated as a leaf: its sibling
        keys are not searched. Only ``#/components/schemas/`` pointers are
        recorded; any other value is skipped.

        Args:
            obj: The object to search for references
            found: Set receiving the referenced schema names

        Returns:
            The ``found`` set
        """
        if isinstance(obj, dict):
            ref = obj.get('$ref')
            if isinstance(ref, str):
                if ref.startswith(SCHEMA_REF_PREFIX):
                    found.add(ref[len(SCHEMA_REF_PREFIX):])
                return found
            for value in obj.values():
                self.find_schema_references(value, found)
        elif isinstance(obj, list):
            for item in obj:
                self.find_schema_references(item, found)
        return found

    def find_passthrough_references(self, found: Set[str]) -> Set[str]:
        """
        Find the schema references of every part copied unfiltered into a scoped spec.

        These are the document-level fields other than ``paths``,
        ``components`` and ``tags``, and every ``components`` map other than
        ``schemas`` (responses, parameters, requestBodies, headers ...).

        Args:
            found: Set receiving the referenced schema names

        Returns:
            The ``found`` set
        """
        for section, value in self.spec.items():
            if section not in ('paths', 'components', 'tags'):
                self.find_schema_references(value, found)

        for component_type, entries in self.components.items():
            if component_type != 'schemas':
                self.find_schema_references(entries, found)

        return found

    def resolve_closure(self, initial_refs: Iterable[str]) -> Set[str]:
        """
        Resolve all transitive schema references.

        Each schema body is walked at most once, so reference cycles terminate.
        Names missing from ``components.schemas`` stay in the result but are
        not walked.

        Args:
            initial_refs: Schema names referenced directly

        Returns:
            Complete set of used schema names
        """
        included: Set[str] = set()
        to_process = list(initial_refs)

        while to_process:
            name = to_process.pop()
            if name in included:
                continue
            included.add(name)

            schema = self.schemas.get(name)
            if schema is None:
                logger.debug(f"Ignoring reference to undefined schema: {name}")
                continue

            for nested in self.find_schema_references(schema, set()):
                if nested not in included:
                    to_process.append(nested)

        return included

    def filter_schemas(self, used_refs: Set[str]) -> Dict[str, Any]:
        """
        Filter schemas to include only those referenced, in declaration order.

        Args:
            used_refs: Schema names to include

        Returns:
            Filtered schemas dictionary
        """
        return {name: schema for name, schema in self.schemas.items() if name in used_refs}


def _operation_tags(operation: Any) -> List[Any]:
    if isinstance(operation, dict):
        tags = operation.get('tags')
        if isinstance(tags, list):
            return tags
    return []


def _is_shared_field(key: Any) -> bool:
    return isinstance(key, str) and (key in PATH_ITEM_SHARED_FIELDS or key.startswith('x-'))


def _iter_operations(spec: Dict[str, Any]):
    paths = spec.get('paths')
    if not isinstance(paths, dict):
        return
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if _is_shared_field(method) or not isinstance(operation, dict):
                continue
            yield path, method, operation


def list_groups(spec: Dict[str, Any]) -> List[str]:
    """
    List every group (tag) of a specification.

    Declared document-level tags come first, in declared order, followed by
    operation tags in the order they are first encountered. Duplicates are
    dropped.

    Args:
        spec: OpenAPI specification dictionary

    Returns:
        Ordered list of unique group identifiers
    """
    groups: Dict[str, None] = {}

    declared = spec.get('tags')
    if isinstance(declared, list):
        for tag in declared:
            if isinstance(tag, dict) and isinstance(tag.get('name'), str):
                groups.setdefault(tag['name'], None)

    for _, _, operation in _iter_operations(spec):
        for tag in _operation_tags(operation):
            if isinstance(tag, str):
                groups.setdefault(tag, None)

    return list(groups)


def select_paths(spec: Dict[str, Any], group_id: str) -> Dict[str, Any]:
    """
    Select the operations tagged with a group.

    Paths without any matching operation are left out entirely. Shared path
    item fields (summary, description, parameters, servers, extensions) travel
    with the surviving operations.

    Args:
        spec: OpenAPI specification dictionary
        group_id: Group (tag) to select

    Returns:
        Filtered paths dictionary
    """
    selected: Dict[str, Any] = {}
    paths = spec.get('paths')
    if not isinstance(paths, dict):
        return selected

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        methods = {
            method: operation for method, operation in path_item.items()
            if not _is_shared_field(method) and group_id in _operation_tags(operation)
        }
        if not methods:
            continue

        selected[path] = {
            key: value for key, value in path_item.items()
            if key in methods or _is_shared_field(key)
        }

    return selected


def filter_document(spec: Dict[str, Any], group_id: str) -> Dict[str, Any]:
    """
    Build the self-contained sub-document of a single group.

    The result keeps every document-level field except ``paths``,
    ``components`` and ``tags``, which are replaced by the group's operations,
    the schemas they transitively reference and the group's declared tag.
    Other component maps are copied unfiltered, so the schemas they reference
    are kept as well. The input specification is not modified.

    Args:
        spec: OpenAPI specification dictionary
        group_id: Group (tag) to scope the document to

    Returns:
        Scoped specification dictionary
    """
    paths = select_paths(spec, group_id)

    resolver = SchemaReferenceResolver(spec)
    direct_refs = resolver.find_schema_references(paths, set())
    # Sections copied unfiltered keep the schemas they reference
    resolver.find_passthrough_references(direct_refs)
    used_schemas = resolver.resolve_closure(direct_refs)

    scoped_components = dict(resolver.components)
    scoped_components['schemas'] = resolver.filter_schemas(used_schemas)

    declared = spec.get('tags')
    tags = [
        tag for tag in declared
        if isinstance(tag, dict) and tag.get('name') == group_id
    ] if isinstance(declared, list) else []

    scoped = dict(spec)
    scoped['paths'] = paths
    scoped['components'] = scoped_components
    scoped['tags'] = tags

    logger.debug(
        f"Scoped document for '{group_id}': {len(paths)} paths, "
        f"{len(scoped_components['schemas'])} schemas"
    )
    return scoped
