"""
X-Ray trace header handling.

The Runtime API hands each invocation its trace header in
Lambda-Runtime-Trace-Id. The same string is exported as _X_AMZN_TRACE_ID and
attached to log records, so it is normalized once here.
"""

from typing import Dict, Optional


class TraceId:
    """
    Root=1-<epoch hex>-<24 hex>;Parent=<16 hex>;Sampled=<0|1>[;Lineage=...]

    Keys other than Root, Parent and Sampled are kept, in arrival order.
    """

    def __init__(
        self,
        root: str,
        parent: Optional[str] = None,
        sampled: Optional[str] = None,
        extra: Optional[Dict[str, str]] = None,
    ):
        self.root = root
        self.parent = parent
        self.sampled = sampled
        self.extra = extra or {}

    @classmethod
    def parse(cls, header: str) -> "TraceId":
        fields: Dict[str, str] = {}
        for part in header.split(";"):
            key, sep, value = part.partition("=")
            if sep and key.strip():
                fields[key.strip()] = value.strip()

        root = fields.pop("Root", "")
        # Bare root id without any key=value pairs.
        if not root and "=" not in header:
            root = header.strip()

        return cls(
            root=root,
            parent=fields.pop("Parent", None),
            sampled=fields.pop("Sampled", None),
            extra=fields,
        )

    @property
    def is_sampled(self) -> bool:
        return self.sampled == "1"

    def __str__(self) -> str:
        parts = [f"Root={self.root}"]
        if self.parent:
            parts.append(f"Parent={self.parent}")
        if self.sampled:
            parts.append(f"Sampled={self.sampled}")
        parts.extend(f"{key}={value}" for key, value in self.extra.items())
        return ";".join(parts)
