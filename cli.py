"""Command-line interface for solving linear programs exactly."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from config import load_config
from plots.metrics import generate_plots
from runner.pipeline import SolveReport, solve_problem
from simplex import SolveStatus
from solver.lp_solver import agrees_with, solve_reference
from telemetry.writer import write_history


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Exact two-phase simplex solver")
    parser.add_argument(
        "--config",
        required=True,
        help="Path to YAML problem file.",
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output directory for the solve history and plots.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    cfg = load_config(args.config)
    report = solve_problem(cfg.problem, cfg.chooser)

    for line in summarize(report):
        print(line)

    out_dir = Path(args.out)
    if cfg.run.logging:
        write_history(out_dir / "history.jsonl", (record.to_dict() for record in report.history))
    if cfg.run.plots:
        generate_plots(report.history, out_dir / "plots")
    if cfg.run.check:
        reference = solve_reference(cfg.problem)
        ok = agrees_with(reference, report.status.value, report.value)
        print(f"reference check ({reference.status}): {'ok' if ok else 'MISMATCH'}")


def summarize(report: SolveReport) -> List[str]:
    lines = [f"problem: {report.problem.objective}"]
    for constraint in report.problem.constraints:
        lines.append(f"  {constraint}")
    for split in report.splits:
        lines.append(
            f"  x{split.original + 1} = x{split.positive + 1} - x{split.negative + 1}"
        )
    lines.append(f"pivots: {report.solution.iterations}")
    lines.append(f"status: {report.status.value}")
    if report.status is SolveStatus.OPTIMAL:
        plan = ", ".join(str(value) for value in report.plan)
        lines.append(f"plan: ({plan})")
        lines.append(f"value: {report.value}")
    return lines


if __name__ == "__main__":
    main()
