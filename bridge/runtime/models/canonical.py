"""
Canonical HTTP models.

Framework-agnostic request/response values exchanged with the handler. Headers
and query parameters are ordered (name, value) pairs so that casing, order and
duplicates survive; lookups are case-insensitive.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

HeaderList = List[Tuple[str, str]]


def get_all(pairs: HeaderList, name: str) -> List[str]:
    """Return every value for `name`, compared case-insensitively, in arrival order."""
    key = name.lower()
    return [value for k, value in pairs if k.lower() == key]


class RequestSource(BaseModel):
    """
    Source and context metadata, passed through without interpretation.
    """

    source_ip: Optional[str] = None
    user_agent: Optional[str] = None
    stage: Optional[str] = None
    request_id: Optional[str] = None
    domain_name: Optional[str] = None
    path_parameters: Dict[str, str] = Field(default_factory=dict)
    stage_variables: Dict[str, str] = Field(default_factory=dict)
    request_context: Dict[str, Any] = Field(default_factory=dict)


class CanonicalRequest(BaseModel):
    method: str
    path: str
    query: HeaderList = Field(default_factory=list)
    headers: HeaderList = Field(default_factory=list)
    body: bytes = b""
    # True when `path` still carries percent-encoding (HTTP API rawPath).
    path_encoded: bool = False
    # Query string exactly as received (HTTP API rawQueryString); None when the
    # gateway only delivered parsed parameters.
    raw_query: Optional[str] = None
    source: RequestSource = Field(default_factory=RequestSource)

    def header_values(self, name: str) -> List[str]:
        return get_all(self.headers, name)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self.header_values(name)
        return values[0] if values else default

    def query_values(self, name: str) -> List[str]:
        """Query keys are case-sensitive."""
        return [value for k, value in self.query if k == name]


class CanonicalResponse(BaseModel):
    status_code: int = 200
    headers: HeaderList = Field(default_factory=list)
    body: bytes = b""

    def header_values(self, name: str) -> List[str]:
        return get_all(self.headers, name)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self.header_values(name)
        return values[-1] if values else default
