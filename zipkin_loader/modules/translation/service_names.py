"""Service name inference for annotation endpoints."""

from typing import Any, Dict, Optional

from zipkin_loader.config import TranslationConfig
from zipkin_loader.modules.ingestion.schemas import RawTraceRecord


class ServiceNameResolver:
    """
    Infers the Zipkin service name for a trace record.

    Tried in order:
    1. outbound client tag on an HTTP request -> "<name> -> <client>"
    2. ``server`` response header through the server alias table -> "<name> -> <server>"
    3. record name through the component alias table
    4. record name as is
    """

    def __init__(self, config: Optional[TranslationConfig] = None):
        self.config = config or TranslationConfig()

    def client_service(self, tags: Dict[str, Any]) -> Optional[str]:
        """Remote service named by the outbound client tag, without its namespace."""
        if not (tags.get("http.method") and tags.get("http.url")):
            return None

        client = tags.get(self.config.client_name_tag)
        prefix = self.config.client_name_prefix
        if isinstance(client, str) and client.startswith(prefix):
            return client[len(prefix):]
        return None

    def server_service(self, tags: Dict[str, Any]) -> Optional[str]:
        headers = tags.get("http.headers")
        if not isinstance(headers, dict):
            return None

        server = headers.get("server")
        if not server or not isinstance(server, str):
            return None
        return self.config.server_aliases.get(server, server)

    def resolve(self, record: RawTraceRecord) -> str:
        remote = self.client_service(record.tags) or self.server_service(record.tags)
        if remote:
            return f"{record.name} -> {remote}"
        return self.config.component_aliases.get(record.name, record.name)
