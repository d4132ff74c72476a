"""
Data models for extracted Unity graph nodes.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any


@dataclass
class GraphNode:
    """Identity, name and properties recovered from one raw document.

    Attributes:
        name: Value of the document's ``m_Name`` field
        file_id: Signed id from the ``!u!<class> &<id>`` header, or None
        script_type: GUID from the ``m_Script`` reference, or None
        properties: Catalog property name -> raw text value; a missing key
            means the document lacked the field
        payload: Raw ``serializedData`` string, never decoded
    """

    name: str
    file_id: Optional[int] = None
    script_type: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)
    payload: Optional[str] = None

    @property
    def label(self) -> str:
        """Display key ``"<name> (<file_id>)"``; the id part is empty when unknown."""
        file_id = "" if self.file_id is None else str(self.file_id)
        return f"{self.name} ({file_id})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert the node to a dictionary suitable for JSON serialization."""
        return asdict(self)
