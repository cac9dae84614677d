"""
Association model: a directed, typed edge between two cases.

A record with associated_case=None is the "no known associations" marker
for its main case and never contributes a graph edge.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


ASSOCIATION_COLUMNS = ['main_case', 'associated_case', 'association_type', 'date_start']


class Association(BaseModel):
    """
    Case association extracted from a docket.

    Attributes:
        main_case: Case whose docket lists the association
        associated_case: Member case number (None for the marker record)
        association_type: Relation label, e.g. 'consolidated', 'related', 'lead'
        date_start: Start date as written in the docket (may be absent)

    Example:
        >>> a = Association(main_case="20-1234", associated_case="20-5678",
        ...                 association_type="related", date_start="2020-01-01")
        >>> a.is_edge
        True
    """

    main_case: str = Field(..., examples=["20-1234"])
    associated_case: Optional[str] = Field(default=None, examples=["20-5678"])
    association_type: Optional[str] = Field(default=None, examples=["consolidated"])
    date_start: Optional[str] = Field(default=None, examples=["2020-01-01"])

    model_config = ConfigDict(frozen=True)

    @property
    def is_edge(self) -> bool:
        return self.associated_case is not None

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump()
