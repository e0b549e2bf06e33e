"""
Complexity enforcement test.
Keeps every function at cyclomatic complexity <= 15 and nesting depth <= 4.
"""
import ast
import pytest
from pathlib import Path
from radon.complexity import cc_visit

MAX_COMPLEXITY = 15
MAX_NESTING = 4

SOURCE_DIRS = ['avrpwm', 'pwmconsole', 'tests']
NESTING_NODES = (ast.If, ast.For, ast.While, ast.With, ast.Try)


def get_python_files():
    project_root = Path(__file__).parent.parent
    files = []
    for dir_name in SOURCE_DIRS:
        files.extend((project_root / dir_name).glob('*.py'))
    return [f for f in files if f.name not in ('test_complexity.py', '__init__.py')]


def _nesting_depth(node, depth=0):
    deepest = depth
    for child in ast.iter_child_nodes(node):
        child_depth = depth + 1 if isinstance(child, NESTING_NODES) else depth
        deepest = max(deepest, _nesting_depth(child, child_depth))
    return deepest


def test_cyclomatic_complexity():
    """
    Tests that no function exceeds MAX_COMPLEXITY.

    Why: The solver and command handler stay readable as flat dispatch.
    """
    violations = []
    for py_file in get_python_files():
        for item in cc_visit(py_file.read_text(encoding='utf-8')):
            if item.complexity > MAX_COMPLEXITY:
                violations.append(f"  {py_file.name}:{item.lineno} - {item.name}() "
                                  f"has complexity {item.complexity}")
    if violations:
        pytest.fail("Complexity violations (max {}):\n{}".format(MAX_COMPLEXITY, "\n".join(violations)))


def test_no_deeply_nested_code():
    violations = []
    for py_file in get_python_files():
        tree = ast.parse(py_file.read_text(encoding='utf-8'))
        for node in ast.walk(tree):
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and _nesting_depth(node) > MAX_NESTING:
                violations.append(f"  {py_file.name}:{node.lineno} - {node.name}()")
    if violations:
        pytest.fail(f"Nesting depth violations (max {MAX_NESTING}):\n" + "\n".join(violations))
