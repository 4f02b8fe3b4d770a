"""Plotting utilities for following a solve pivot by pivot."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import matplotlib.pyplot as plt
import numpy as np

from runner.pipeline import StepRecord


def generate_plots(history: Iterable[StepRecord], out_dir: str | Path) -> List[Path]:
    records = list(history)
    if not records:
        return []
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    plt.figure(figsize=(6, 4))
    for phase, label in ((1, "phase 1 (auxiliary)"), (2, "phase 2")):
        steps = [rec for rec in records if rec.phase == phase]
        if not steps:
            continue
        t = np.array([rec.iteration for rec in steps], dtype=float)
        values = np.array([float(rec.value) for rec in steps], dtype=float)
        plt.plot(t, values, marker="o", label=label)
    plt.xlabel("iteration")
    plt.ylabel("tableau objective value")
    plt.legend()
    plt.tight_layout()
    target = out_path / "objective.png"
    plt.savefig(target, dpi=150)
    plt.close()
    written.append(target)

    pivoting = [rec for rec in records if rec.pivot is not None]
    if pivoting:
        steps = np.arange(1, len(pivoting) + 1, dtype=float)
        counts = np.array([rec.candidates for rec in pivoting], dtype=float)
        plt.figure(figsize=(6, 4))
        plt.step(steps, counts, where="mid")
        plt.xlabel("pivot")
        plt.ylabel("valid pivot candidates")
        plt.tight_layout()
        target = out_path / "pivot_candidates.png"
        plt.savefig(target, dpi=150)
        plt.close()
        written.append(target)

    return written
