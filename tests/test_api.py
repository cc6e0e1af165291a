"""Tests for the public entry points."""

from dataclasses import asdict

import pytest

import complexity_insight
from complexity_insight import (
    AnalysisConfig,
    ComplexityWeights,
    Verdict,
    analyze,
    analyze_modules,
    compare,
    report,
)
from complexity_insight.exceptions import ParsingError


class TestPackage:
    def test_version(self):
        assert complexity_insight.__version__ == "0.1.0"

    def test_exports(self):
        for name in complexity_insight.__all__:
            assert hasattr(complexity_insight, name)


class TestApi:
    def test_analyze(self):
        metrics = analyze("function add(a, b) { return a + b; }")
        assert metrics.total_score == pytest.approx(20.8)

    def test_compare(self):
        result = compare("if (a > 0) { f(); }", "if (a > 0 && b > 0) { f(); }")
        assert result.verdict is Verdict.A

    def test_compare_with_weights(self):
        zero = ComplexityWeights(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        assert compare("f();", "if (a) { f(); }", zero).verdict is Verdict.NEITHER

    def test_report(self):
        detailed = report("let n = 0;\nn++;\n")
        assert detailed.breakdown["variable_mutability_score"].value == 1.0
        assert detailed.scalar == pytest.approx(sum(e.weighted_score for e in detailed.breakdown.values()))

    def test_analyze_modules(self, module_sources):
        results = analyze_modules(list(module_sources), module_sources)
        assert [r.path for r in results] == ["module_test/a.ts", "module_test/b.ts", "module_test/c.ts"]

    def test_import_cycle_terminates(self):
        contents = {
            "a.ts": 'import { b } from "./b";\nexport const a = () => b() + 1;\n',
            "b.ts": 'import { a } from "./a";\nexport const b = () => a() * 2;\n',
        }
        results = analyze_modules(["a.ts", "b.ts"], contents)
        assert len(results) == 2
        for result in results:
            assert result.module_complexity >= result.file_complexity > 0

    def test_analyze_modules_options(self, module_sources):
        damped = analyze_modules(list(module_sources), module_sources, AnalysisConfig(dependency_damping=0.0))
        for result in damped:
            assert result.module_complexity == pytest.approx(
                result.file_complexity + sum(child.score for child in result.details.children)
            )

    def test_results_serialize(self, module_sources):
        result = analyze_modules(list(module_sources), module_sources)[0]
        data = asdict(result)
        assert data["path"] == "module_test/a.ts"
        assert data["details"]["metadata"]["library_imports"] == result.details.metadata["library_imports"]
        assert asdict(analyze("const a = 1;"))["total_score"] > 0

    def test_errors_propagate(self):
        with pytest.raises(ParsingError):
            analyze("const = ;")
