"""Pydantic models for Function Point Analysis data."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LogicalFileType(str, Enum):
    """Kinds of Logical File."""
    ILF = "ILF"  # Internal Logical File
    EIF = "EIF"  # External Interface File
    RET = "RET"  # Record Element Type, owned by a parent file


class ProcessType(str, Enum):
    """Kinds of Elementary Process."""
    EI = "EI"
    EO = "EO"
    EQ = "EQ"

    @property
    def label(self) -> str:
        return {
            ProcessType.EI: "External Input",
            ProcessType.EO: "External Output",
            ProcessType.EQ: "External Inquiry",
        }[self]


class ComplexityTier(str, Enum):
    LOW = "Low"
    AVERAGE = "Average"
    HIGH = "High"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DataElement(_CamelModel):
    """A single field of a Logical File."""
    name: str
    dtype: str = ""


class ProcessDataElement(_CamelModel):
    """Reference from an Elementary Process to a Logical File field."""
    name: str
    logical_file_name: str = Field(alias="logicalFileName")


class LogicalFile(_CamelModel):
    """A data entity tracked for sizing."""
    name: str
    type: LogicalFileType = LogicalFileType.ILF
    parent_name: Optional[str] = Field(default=None, alias="parentName")
    data_elements: List[DataElement] = Field(default_factory=list, alias="dataElements")
    description: str = ""
    function_points: Optional[int] = Field(default=None, alias="functionPoints")

    def has_data_element(self, name: str) -> bool:
        return any(de.name == name for de in self.data_elements)


class ElementaryProcess(_CamelModel):
    """A unit of user-visible functionality."""
    id: str
    description: str = ""
    type: ProcessType
    data_elements: List[ProcessDataElement] = Field(default_factory=list, alias="dataElements")
    function_points: Optional[int] = Field(default=None, alias="functionPoints")

    def references(self, logical_file_name: str, name: str) -> bool:
        return any(
            ref.logical_file_name == logical_file_name and ref.name == name
            for ref in self.data_elements
        )


class FunctionPointModel(_CamelModel):
    """The persisted document: both collections of the store."""
    logical_files: List[LogicalFile] = Field(default_factory=list, alias="logicalFiles")
    elementary_processes: List[ElementaryProcess] = Field(default_factory=list, alias="elementaryProcesses")


class EntityScore(BaseModel):
    """Scoring breakdown for one Logical File or Elementary Process."""
    key: str  # file name or process id
    kind: str  # ILF, EIF, EI, EO or EQ
    tier: ComplexityTier
    references: int  # nRETs for files, nLFs for processes
    det_count: int
    points: int


class FunctionPointSummary(BaseModel):
    """Result of a full evaluation pass."""
    logical_files: List[EntityScore] = Field(default_factory=list)
    elementary_processes: List[EntityScore] = Field(default_factory=list)

    @property
    def data_function_points(self) -> int:
        return sum(s.points for s in self.logical_files)

    @property
    def transaction_function_points(self) -> int:
        return sum(s.points for s in self.elementary_processes)

    @property
    def total(self) -> int:
        return self.data_function_points + self.transaction_function_points
