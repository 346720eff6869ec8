"""Block plumbing for the package optimizer.

The optimizer is a small DAG of computation blocks:
- Block declares the context keys it reads and writes
- BlockContext carries values between blocks for one run
- topological_sort orders blocks so producers run before consumers
- BlockExecutor runs the sorted blocks and checks their declared keys
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional


# =============================================================================
# Block Context
# =============================================================================

@dataclass
class BlockContext:
    """Per-run key/value store shared by the blocks.

    Example:
        context = BlockContext()
        context.set("scenario", inputs)
        context.set("resolver", resolver)

        BenchmarkBlock().execute(context)
        benchmark = context.get("benchmark")
    """

    _data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Any:
        """Value stored under ``key``.

        Raises:
            KeyError: If nothing has been stored under ``key``
        """
        if key not in self._data:
            raise KeyError(f"Key '{key}' not found in context. Available keys: {self.keys()}")
        return self._data[key]

    def get_optional(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def has(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> List[str]:
        return list(self._data.keys())


# =============================================================================
# Block Base Class
# =============================================================================

class Block(ABC):
    """A computation step with declared inputs and outputs.

    Subclass example:
        class BenchmarkBlock(Block):
            def inputs(self) -> List[str]:
                return ["scenario", "resolver"]

            def outputs(self) -> List[str]:
                return ["benchmark"]

            def execute(self, context: BlockContext) -> None:
                scenario = context.get("scenario")
                resolver = context.get("resolver")
                context.set("benchmark", resolver.resolve_or_raise(...))
    """

    @abstractmethod
    def inputs(self) -> List[str]:
        """Context keys this block reads."""
        pass

    @abstractmethod
    def outputs(self) -> List[str]:
        """Context keys this block writes."""
        pass

    @abstractmethod
    def execute(self, context: BlockContext) -> None:
        """Read inputs from context, compute, write outputs back.

        Raises:
            KeyError: If a required input is missing from context
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(inputs={self.inputs()}, outputs={self.outputs()})"


# =============================================================================
# Dependency Resolution
# =============================================================================

class CircularDependencyError(Exception):
    """Raised when blocks depend on each other in a cycle."""
    pass


def topological_sort(blocks: List[Block]) -> List[Block]:
    """Order blocks so every input is produced before it is read (Kahn's algorithm).

    Inputs no block produces are expected in the initial context. Blocks
    with no ordering constraint between them keep their given order.

    Raises:
        ValueError: If two blocks declare the same output
        CircularDependencyError: If the dependency graph has a cycle

    Example:
        BenchmarkBlock: outputs ["benchmark"]
        PackageBuildBlock: inputs ["benchmark", ...], outputs ["packages_unscored"]
        PackageScoringBlock: inputs ["packages_unscored", ...]

        topological_sort([scoring, build, benchmark]) -> [benchmark, build, scoring]
    """
    producers: Dict[str, Block] = {}
    for block in blocks:
        for key in block.outputs():
            if key in producers:
                raise ValueError(f"Multiple blocks produce '{key}': {producers[key]} and {block}")
            producers[key] = block

    in_degree: Dict[Block, int] = {block: 0 for block in blocks}
    dependents: Dict[Block, List[Block]] = {block: [] for block in blocks}
    for block in blocks:
        for key in block.inputs():
            producer = producers.get(key)
            if producer is not None:
                dependents[producer].append(block)
                in_degree[block] += 1

    ready: Deque[Block] = deque(block for block in blocks if in_degree[block] == 0)
    ordered: List[Block] = []
    while ready:
        current = ready.popleft()
        ordered.append(current)
        for dependent in dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                ready.append(dependent)

    if len(ordered) != len(blocks):
        stuck = [block for block in blocks if in_degree[block] > 0]
        raise CircularDependencyError(f"Circular dependency detected among blocks: {stuck}")

    return ordered


# =============================================================================
# Block Executor
# =============================================================================

class BlockExecutor:
    """Runs blocks in dependency order against one context.

    Example:
        executor = BlockExecutor([RiskFlagBlock(), BenchmarkBlock(), ...])
        context = BlockContext()
        context.set("scenario", inputs)
        context.set("resolver", resolver)
        context.set("engine_settings", settings)
        executor.execute(context)

        best = context.get("best_fit_package")
        table = context.get("package_comparison")
    """

    def __init__(self, blocks: List[Block]):
        self.blocks = blocks
        self._sorted_blocks: Optional[List[Block]] = None

    @property
    def execution_order(self) -> List[Block]:
        # Sorted once per executor
        if self._sorted_blocks is None:
            self._sorted_blocks = topological_sort(self.blocks)
        return self._sorted_blocks

    def execute(self, context: BlockContext) -> BlockContext:
        """Execute every block, validating declared inputs and outputs.

        Raises:
            CircularDependencyError: If blocks have circular dependencies
            KeyError: If a block's input is missing when it is about to run
            ValueError: If a block did not write one of its declared outputs
        """
        for block in self.execution_order:
            self._validate_inputs(block, context)
            block.execute(context)
            self._validate_outputs(block, context)
        return context

    def _validate_inputs(self, block: Block, context: BlockContext) -> None:
        missing = [key for key in block.inputs() if not context.has(key)]
        if missing:
            raise KeyError(
                f"Block {block} requires input '{missing[0]}' but it's not in context. "
                f"Available keys: {context.keys()}"
            )

    def _validate_outputs(self, block: Block, context: BlockContext) -> None:
        for key in block.outputs():
            if not context.has(key):
                raise ValueError(f"Block {block} declared output '{key}' but didn't write it to context")
