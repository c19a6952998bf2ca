#!/usr/bin/env python3
"""
Pipeline Demo: files -> LineSets -> expression -> output

Shows the full workflow on throw-away files:
1. Write two small inventory lists
2. Evaluate 'or', 'and' and 'not' expressions over them
3. Compare on columns and merge a column from the second file
4. Render the result as YAML
"""

import sys
import tempfile
from pathlib import Path

from setdiff.config import Configuration
from setdiff.emitter import emit, result_to_yaml
from setdiff.evaluator import evaluate_expression


def main():
    workdir = Path(tempfile.mkdtemp(prefix="setdiff-demo-"))
    (workdir / "a.txt").write_text("x\ny\n")
    (workdir / "b.txt").write_text("y\nz\n")
    (workdir / "m1").write_text("12345|DVD|3\n11111|CD|5\n")
    (workdir / "m2").write_text("11111|CD|24\n")

    print("=" * 60)
    print("SETDIFF DEMO")
    print("=" * 60)

    # =========================================================================
    # STEP 1: Whole-line set algebra
    # =========================================================================
    for expression in ("a.txt or b.txt", "a.txt and b.txt", "a.txt not b.txt"):
        print(f"\n$ echo '{expression}' | setdiff")
        emit(evaluate_expression(expression, base_dir=str(workdir)), sys.stdout)

    # =========================================================================
    # STEP 2: Column keys with merge
    # =========================================================================
    config = Configuration(columns_lhs=(0, 1), columns_rhs=(0, 1), merge_columns=(2,))
    print("\n$ echo 'm1 and m2' | setdiff -l c0,c1 -f c0,c1 -m c2")
    result = evaluate_expression("m1 and m2", config=config, base_dir=str(workdir))
    emit(result, sys.stdout)

    # =========================================================================
    # STEP 3: Structured output
    # =========================================================================
    print("\n$ ... --format yaml")
    print(result_to_yaml(result, "m1 and m2"))


if __name__ == "__main__":
    main()
