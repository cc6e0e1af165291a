"""Module dependency graph analysis.

Multi-file analysis runs in three phases:

    1. Resolve: relative import specifiers become canonical paths; paths
       outside the analyzed set are dropped.
    2. Order: an iterative three-color DFS produces a topological order.
       An edge back to a module still in progress closes a cycle and is
       pruned instead of failing the sort.
    3. Aggregate: each module's score is its own file score plus a damped
       share of its dependencies' aggregate scores, memoized and guarded
       against cycles and excessive depth.

Traversal state lives in side maps keyed by path. ``ModuleDependency``
records are never mutated; pruning an edge builds a new record.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional, Sequence

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..scanning import SyntaxTree, language_for_path, parse_source
from .file import calculate_file_complexity
from .models import ComplexityResult

logger = logging.getLogger(__name__)

KNOWN_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mts", ".mjs")


class VisitState(Enum):
    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass(frozen=True)
class ModuleDependency:
    """One file in a multi-file analysis.

    ``dependencies`` point from this module to the modules it imports.
    """

    path: str
    dependencies: tuple[str, ...] = ()
    file_complexity: Optional[ComplexityResult] = None


@dataclass(frozen=True)
class ModuleComplexityResult:
    """Read-only view of one module after aggregation."""

    path: str
    file_complexity: float
    module_complexity: float
    dependencies: tuple[str, ...]
    details: Optional[ComplexityResult] = None


@dataclass(frozen=True)
class ImportCounts:
    library_imports: int = 0
    local_imports: int = 0


# ── Phase 1: resolve ───────────────────────────────────────────────


def normalize_path(path: str) -> str:
    """Collapse ``.``, ``..`` and empty segments. A leading ``/`` is kept."""
    absolute = path.startswith("/")
    parts: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not absolute:
                parts.append("..")
            continue
        parts.append(part)

    joined = "/".join(parts)
    return "/" + joined if absolute else joined


def resolve_import_path(base_path: str, import_path: str, config: AnalysisConfig = DEFAULT_CONFIG) -> str:
    """Resolve a relative import specifier against the importing file.

    Examples:
        >>> resolve_import_path("src/a.ts", "./b")
        'src/b.ts'
        >>> resolve_import_path("src/a.ts", "../lib/")
        'lib/mod.ts'
    """
    base_dir = base_path[: base_path.rfind("/") + 1]
    joined = base_dir + import_path
    last_segment = import_path.rstrip("/").rsplit("/", 1)[-1]
    directory = import_path.endswith("/") or last_segment in (".", "..")

    resolved = normalize_path(joined)
    if directory:
        if resolved in ("", "/"):
            return resolved + config.default_module_file
        return f"{resolved}/{config.default_module_file}"

    if not resolved.endswith(KNOWN_EXTENSIONS):
        resolved += ".ts"
    return resolved


def _string_value(node) -> str:
    text = node.text
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def _import_sources(tree: SyntaxTree) -> list[tuple[str, object]]:
    """(specifier, statement) pairs for imports and ``export ... from``."""
    sources = []
    for statement in tree.root.children():
        if statement.kind not in ("import_statement", "export_statement"):
            continue
        source = statement.field("source")
        if source is None:
            continue
        sources.append((_string_value(source), statement))
    return sources


def analyze_dependencies(
    tree: SyntaxTree, file_path: str, config: AnalysisConfig = DEFAULT_CONFIG
) -> tuple[str, ...]:
    """Resolved paths of every relative import in a file, in source order."""
    dependencies: list[str] = []
    for specifier, _ in _import_sources(tree):
        if not specifier.startswith("."):
            continue
        resolved = resolve_import_path(file_path, specifier, config)
        if resolved not in dependencies:
            dependencies.append(resolved)
    return tuple(dependencies)


def _imported_symbols(statement) -> int:
    clause = statement.child_of_kind("import_clause")
    if clause is None:
        return 0
    count = 0
    for part in clause.children():
        if part.kind in ("identifier", "namespace_import"):
            count += 1
        elif part.kind == "named_imports":
            count += len([s for s in part.children() if s.kind == "import_specifier"])
    return count


def analyze_imports(tree: SyntaxTree) -> ImportCounts:
    """Count imported symbols, split by package vs. relative source."""
    library = 0
    local = 0
    for specifier, statement in _import_sources(tree):
        if statement.kind != "import_statement":
            continue
        symbols = _imported_symbols(statement)
        if specifier.startswith("."):
            local += symbols
        else:
            library += symbols
    return ImportCounts(library_imports=library, local_imports=local)


def count_let_declarators(tree: SyntaxTree) -> int:
    """Number of ``let`` declarators anywhere in the file."""
    count = 0
    for node in tree.root.walk():
        if node.kind == "lexical_declaration" and node.token("kind") == "let":
            count += len([c for c in node.children() if c.kind == "variable_declarator"])
    return count


def calculate_module_file_complexity(
    file_path: str,
    code: str,
    config: AnalysisConfig = DEFAULT_CONFIG,
    tree: Optional[SyntaxTree] = None,
) -> ComplexityResult:
    """File score with import pressure and a file-wide ``let`` multiplier.

    Raises:
        ParsingError: If the source is malformed
    """
    if tree is None:
        tree = parse_source(code, language_for_path(file_path), file_path)

    imports = analyze_imports(tree)
    result = calculate_file_complexity(tree, config)

    import_complexity = (
        config.library_import_weight * imports.library_imports
        + config.local_import_weight * imports.local_imports
    )
    score = result.score + import_complexity
    metadata = dict(result.metadata)
    metadata.update(
        library_imports=imports.library_imports,
        local_imports=imports.local_imports,
        import_complexity=import_complexity,
    )

    let_count = count_let_declarators(tree)
    if let_count > 0:
        multiplier = 1 + config.mutability_factor * let_count
        score *= multiplier
        metadata.update(let_declaration_count=let_count, let_multiplier=multiplier)

    return replace(result, score=score, metadata=metadata)


# ── Phase 2: order ─────────────────────────────────────────────────


def topological_sort(modules: Sequence[ModuleDependency]) -> list[ModuleDependency]:
    """Cycle-safe topological sort (iterative three-color DFS).

    Each module is emitted after its remaining dependencies; the emitted
    list is returned reversed. Edges that close a cycle are pruned and the
    affected modules come back as new records without those edges.
    """
    by_path = {m.path: m for m in modules}
    state = {m.path: VisitState.UNVISITED for m in modules}
    kept: dict[str, list[str]] = {m.path: [] for m in modules}
    post_order: list[str] = []

    for root in modules:
        if state[root.path] is not VisitState.UNVISITED:
            continue

        state[root.path] = VisitState.IN_PROGRESS
        call_stack = [(root.path, iter(root.dependencies))]

        while call_stack:
            path, it = call_stack[-1]
            pushed = False
            for dep in it:
                dep_state = state.get(dep)
                if dep_state is VisitState.IN_PROGRESS:
                    logger.debug("Pruning cyclic edge %s -> %s", path, dep)
                    continue
                kept[path].append(dep)
                if dep_state is VisitState.UNVISITED:
                    state[dep] = VisitState.IN_PROGRESS
                    call_stack.append((dep, iter(by_path[dep].dependencies)))
                    pushed = True
                    break

            if not pushed:
                call_stack.pop()
                state[path] = VisitState.DONE
                post_order.append(path)

    ordered = []
    for path in reversed(post_order):
        module = by_path[path]
        deps = tuple(kept[path])
        ordered.append(module if deps == module.dependencies else replace(module, dependencies=deps))
    return ordered


# ── Phase 3: aggregate ─────────────────────────────────────────────


def calculate_module_complexity(
    modules: Sequence[ModuleDependency], config: AnalysisConfig = DEFAULT_CONFIG
) -> dict[str, float]:
    """Aggregate complexity per module path.

    ``modules`` is expected in ``topological_sort`` order; aggregation walks
    it backwards so leaves are computed first.
    """
    by_path = {m.path: m for m in modules}
    partial = {
        m.path: (m.file_complexity.score if m.file_complexity is not None else 0.0)
        for m in modules
    }
    memo: dict[str, float] = {}
    in_progress: set[str] = set()

    def aggregate(module: ModuleDependency, depth: int) -> float:
        path = module.path
        if depth > config.module_max_depth:
            logger.debug("Module depth limit reached at %s", path)
            return memo.get(path, partial[path])
        if module.file_complexity is None:
            return 0.0
        if path in memo:
            return memo[path]
        if path in in_progress:
            return partial[path]

        in_progress.add(path)
        try:
            own = module.file_complexity.score
            own += sum(child.score for child in module.file_complexity.children)

            dependency_total = 0.0
            for dep in module.dependencies:
                dep_module = by_path.get(dep)
                if dep_module is None or dep in in_progress:
                    continue
                dependency_total += aggregate(dep_module, depth + 1)
        finally:
            in_progress.discard(path)

        if module.dependencies:
            own += config.dependency_damping * dependency_total / math.sqrt(len(module.dependencies))

        memo[path] = own
        partial[path] = own
        logger.debug("Module %s: aggregate complexity %.2f", path, own)
        return own

    for module in reversed(modules):
        if module.path not in memo:
            aggregate(module, 0)

    return {m.path: memo.get(m.path, 0.0) for m in modules}


def calculate_modules_complexity(
    file_paths: Sequence[str],
    file_contents: Mapping[str, str],
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> list[ModuleComplexityResult]:
    """Analyze a set of files as one module graph.

    Args:
        file_paths: Paths to analyze; ``./`` and ``..`` segments are normalized
        file_contents: Source text keyed by the same paths
        config: Analysis configuration

    Returns:
        One result per analyzed file, in topological order

    Raises:
        ParsingError: If any file is malformed
    """
    modules: list[ModuleDependency] = []
    seen: set[str] = set()
    for file_path in file_paths:
        content = file_contents.get(file_path)
        if not content:
            logger.debug("Skipping %s: no content", file_path)
            continue

        path = normalize_path(file_path)
        if path in seen:
            continue
        seen.add(path)
        tree = parse_source(content, language_for_path(path), path)
        modules.append(
            ModuleDependency(
                path=path,
                dependencies=analyze_dependencies(tree, path, config),
                file_complexity=calculate_module_file_complexity(path, content, config, tree),
            )
        )

    known = {m.path for m in modules}
    resolved = []
    for module in modules:
        deps = tuple(d for d in module.dependencies if d in known)
        for dropped in set(module.dependencies) - known:
            logger.debug("Dropping unresolved import %s from %s", dropped, module.path)
        resolved.append(replace(module, dependencies=deps))

    ordered = topological_sort(resolved)
    aggregates = calculate_module_complexity(ordered, config)

    return [
        ModuleComplexityResult(
            path=m.path,
            file_complexity=m.file_complexity.score if m.file_complexity is not None else 0.0,
            module_complexity=aggregates[m.path],
            dependencies=m.dependencies,
            details=m.file_complexity,
        )
        for m in ordered
    ]
