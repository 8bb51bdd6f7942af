"""
Base Pass System

Rust Pattern: rustc_mir::transform::MirPass
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from ..shared.errors import ErrorReporter
from ..shared.nodes import RootItems
from ..utils.config import DEFAULT_FIELD_TYPE, DEFAULT_TARGET_PATH

logger = logging.getLogger("quickchain.passes")


class ExpansionContext:
    """
    State shared by the passes of one expansion (Rust naming: TyCtxt).

    Holds the settings the passes read and the results they publish; created
    fresh for every call so nothing leaks between invocations.
    """

    def __init__(
        self,
        field_type: str = DEFAULT_FIELD_TYPE,
        target_path: str = DEFAULT_TARGET_PATH,
        source_files: Optional[Dict[str, str]] = None,
    ):
        self.field_type = field_type
        self.target_path = target_path
        self.source_files: Dict[str, str] = source_files if source_files is not None else {}
        self.reporter: ErrorReporter = ErrorReporter(self.source_files)
        self._analysis_results: Dict[Type['BasePass'], Any] = {}

    def get_analysis(self, pass_class: Type['BasePass']) -> Any:
        """Get results published by a pass"""
        if pass_class not in self._analysis_results:
            raise RuntimeError(f"Analysis {pass_class.__name__} not available")
        return self._analysis_results[pass_class]

    def set_analysis(self, pass_class: Type['BasePass'], results: Any) -> None:
        self._analysis_results[pass_class] = results


class BasePass(ABC):
    """
    Base class for all passes over the parsed root items.

    - Explicit dependencies via `requires`
    - Results stored in the ExpansionContext (not in the pass)
    - Immutable trees (passes return new trees)
    """
    requires: List[Type['BasePass']] = []

    @abstractmethod
    def run(self, items: RootItems, ctx: ExpansionContext) -> RootItems:
        raise NotImplementedError


class PassManager:
    """
    Pass manager with dependency resolution.

    Passes run in dependency order; a fresh pass instance is created for every
    run so the manager itself is stateless between expansions.
    """

    def __init__(self):
        self.passes: List[Type[BasePass]] = []
        self._dependency_graph: Dict[Type[BasePass], set] = {}

    def register_pass(self, pass_class: Type[BasePass]) -> None:
        self.passes.append(pass_class)
        self._dependency_graph[pass_class] = set(pass_class.requires)

    def run_all(self, items: RootItems, ctx: ExpansionContext) -> RootItems:
        for pass_class in self._topological_sort():
            logger.debug("Running %s", pass_class.__name__)
            items = pass_class().run(items, ctx)
        return items

    def _topological_sort(self) -> List[Type[BasePass]]:
        """Topological sort of passes by dependencies"""
        in_degree = {p: len(self._dependency_graph[p]) for p in self.passes}
        queue = [p for p, degree in in_degree.items() if degree == 0]
        result = []

        while queue:
            pass_class = queue.pop(0)
            result.append(pass_class)
            for other_pass in self.passes:
                if pass_class in self._dependency_graph[other_pass]:
                    in_degree[other_pass] -= 1
                    if in_degree[other_pass] == 0:
                        queue.append(other_pass)

        if len(result) != len(self.passes):
            raise RuntimeError("Circular or unregistered dependency detected in passes")

        return result
