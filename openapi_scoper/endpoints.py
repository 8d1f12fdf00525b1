"""
JSON payloads for serving full and group-scoped OpenAPI documents.

A host application wires these handlers to its own routes:

    GET <base>/json              -> full_document_json()
    GET <base>/json/{groupId}    -> group_document_json(group_id)
    GET <base>/controllers       -> controllers_json()
"""

import json
import logging
import threading
from typing import Any, Dict, List, Optional

from .core import filter_document, list_groups

logger = logging.getLogger(__name__)


class ScopedDocumentEndpoints:
    """Serve a document generated once for the process lifetime."""

    def __init__(self, spec: Dict[str, Any], base_path: str = "/api-docs", cache: bool = True):
        self.spec = spec
        self.base_path = '/' + base_path.strip('/') if base_path.strip('/') else ''
        self.cache_enabled = cache
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def routes(self) -> List[str]:
        return [
            f"{self.base_path}/json",
            f"{self.base_path}/json/{{groupId}}",
            f"{self.base_path}/controllers",
        ]

    def group_document(self, group_id: str) -> Dict[str, Any]:
        """
        Return the document scoped to ``group_id``.

        Results are cached per group; the source document never changes, so
        entries are never invalidated. Each call gets its own top-level dict;
        nested objects are shared with the cache and the source document and
        must be treated as read-only.
        """
        if not self.cache_enabled:
            return filter_document(self.spec, group_id)

        with self._lock:
            cached = self._cache.get(group_id)

        if cached is None:
            scoped = filter_document(self.spec, group_id)
            with self._lock:
                # A concurrent request may have stored an equal document first
                cached = self._cache.setdefault(group_id, scoped)

        return dict(cached)

    def controllers(self) -> Dict[str, List[str]]:
        return {'controllers': list_groups(self.spec)}

    def full_document_json(self) -> str:
        return json.dumps(self.spec, ensure_ascii=False)

    def group_document_json(self, group_id: str) -> str:
        return json.dumps(self.group_document(group_id), ensure_ascii=False)

    def controllers_json(self) -> str:
        return json.dumps(self.controllers(), ensure_ascii=False)

    def dispatch(self, request_path: str) -> Optional[str]:
        """
        Resolve a request path to its JSON payload.

        Args:
            request_path: Decoded request path, e.g. ``/api-docs/json/pets``

        Returns:
            JSON body, or None when the path is not one of the served routes
        """
        prefix = self.base_path + '/'
        if not request_path.startswith(prefix):
            return None

        route = request_path[len(prefix):]
        if route.endswith('/'):
            route = route[:-1]

        if route == 'json':
            return self.full_document_json()
        if route == 'controllers':
            return self.controllers_json()
        if route.startswith('json/'):
            group_id = route[len('json/'):]
            # Group ids are a single path segment, passed through verbatim
            if group_id and '/' not in group_id:
                logger.debug(f"Serving scoped document for '{group_id}'")
                return self.group_document_json(group_id)
        return None
