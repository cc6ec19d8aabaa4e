"""
Scenarios package for layoutbench.

Re-exports the scenario interfaces and the concrete scenario classes so
downstream code can import from `layoutbench.scenarios` directly.
"""

from layoutbench.scenarios.abstract import AbstractScenario, Layout, Operation, Scenario
from layoutbench.scenarios.insert import InsertColumnsScenario, InsertDocumentScenario
from layoutbench.scenarios.read import (
    SelectColumnsScenario,
    SelectDocumentScenario,
    SelectExtractedFieldsScenario,
    SelectExtractedIdScenario,
    SelectIdColumnScenario,
)
from layoutbench.scenarios.update import UpdateColumnsScenario, UpdateDocumentFieldsScenario

__all__ = [
    # Abstracts
    "AbstractScenario",
    "Layout",
    "Operation",
    "Scenario",
    # Concrete scenarios
    "InsertColumnsScenario",
    "InsertDocumentScenario",
    "SelectColumnsScenario",
    "SelectDocumentScenario",
    "SelectExtractedFieldsScenario",
    "SelectExtractedIdScenario",
    "SelectIdColumnScenario",
    "UpdateColumnsScenario",
    "UpdateDocumentFieldsScenario",
]
