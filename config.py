"""Configuration loading for the exact simplex runner."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Literal, Optional

import yaml

from linear import Relation
from problem import LinearProgrammingProblem, ProblemError
from rational import FractionParseError, MalformedArgument, to_fraction
from simplex import PivotChooser, RandomPivotChooser, first_pivot


@dataclass
class SolverConfig:
    pivot_rule: Literal["random", "first"] = "random"
    seed: Optional[int] = None


@dataclass
class RunConfig:
    logging: bool = True
    plots: bool = False
    check: bool = False


@dataclass
class Config:
    problem: LinearProgrammingProblem
    solver: SolverConfig
    run: RunConfig
    base_path: Path

    @property
    def chooser(self) -> PivotChooser:
        if self.solver.pivot_rule == "first":
            return first_pivot
        if self.solver.pivot_rule == "random":
            return RandomPivotChooser(self.solver.seed)
        raise ValueError(f"unsupported pivot rule: {self.solver.pivot_rule}")


def _coefficient(value: Any, where: str):
    try:
        return to_fraction(value)
    except (FractionParseError, MalformedArgument) as exc:
        raise ValueError(f"wrong coefficient {where}: {value!r}") from exc


def _coefficients(values: Any, size: Optional[int], where: str) -> list:
    if not isinstance(values, (list, tuple)) or not values:
        raise ValueError(f"{where} must be a nonempty list of coefficients")
    if size is not None and len(values) != size:
        raise ValueError(f"{where} has {len(values)} coefficients, expected {size}")
    return [_coefficient(value, f"{where}[{i + 1}]") for i, value in enumerate(values)]


def _indices(raw: Any, size: int, name: str) -> List[int]:
    """Turn 1-based user indices (or ``"all"``) into sorted 0-based indices."""
    if raw is None:
        return []
    if isinstance(raw, int) and not isinstance(raw, bool):
        raw = [raw]
    elif isinstance(raw, str):
        if raw.strip().lower() == "all":
            return list(range(size))
        raw = raw.replace(",", " ").split()
    elif not isinstance(raw, (list, tuple)):
        raise ValueError(f"{name} must be a list of indices or \"all\", got {raw!r}")
    result = set()
    for item in raw:
        try:
            if isinstance(item, bool) or not isinstance(item, (int, str)):
                raise TypeError(item)
            index = int(item)
        except (TypeError, ValueError):
            raise ValueError(f"error in the {name} list: {item!r} is not an integer") from None
        if index < 1:
            raise ValueError(f"{name} index {index} is less than 1")
        if index > size:
            raise ValueError(f"{name} index {index} is bigger than the number of variables ({size})")
        result.add(index - 1)
    return sorted(result)


def _section(raw: dict, key: str) -> dict:
    section = raw.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{key} must be a mapping, got {type(section).__name__}")
    return section


def parse_problem(raw: dict) -> LinearProgrammingProblem:
    objective_raw = _section(raw, "objective")
    sense = str(objective_raw.get("sense", "max")).strip().lower()
    if sense not in {"max", "min"}:
        raise ValueError(f"objective sense must be 'max' or 'min', got {sense!r}")
    objective = _coefficients(objective_raw.get("coefficients"), None, "objective")
    n = len(objective)

    constraints_raw = raw.get("constraints") or []
    if not isinstance(constraints_raw, list):
        raise ValueError(f"constraints must be a list, got {type(constraints_raw).__name__}")
    if not constraints_raw:
        raise ValueError("at least one constraint is required")
    rows = []
    for i, item in enumerate(constraints_raw, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"constraint {i} must be a mapping")
        coefficients = _coefficients(item.get("coefficients"), n, f"constraint {i}")
        relation = Relation.parse(item.get("relation", "<="))
        if "rhs" not in item:
            raise ValueError(f"constraint {i} has no rhs")
        rhs = _coefficient(item["rhs"], f"constant of constraint {i}")
        rows.append((coefficients, relation, rhs))

    nonnegative = _indices(raw.get("nonnegative", "all"), n, "nonnegative")
    integers = _indices(raw.get("integer"), n, "integer")
    try:
        return LinearProgrammingProblem.from_coefficients(
            objective,
            rows,
            nonnegative,
            maximize=(sense == "max"),
            integer_variables=integers,
        )
    except ProblemError as exc:
        raise ValueError(str(exc)) from exc


def load_config(path: str | Path) -> Config:
    cfg_path = Path(path).expanduser().resolve()
    with cfg_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle)
    if not isinstance(raw, dict):
        raise ValueError(f"configuration must be a mapping: {cfg_path}")

    solver_raw = _section(raw, "solver")
    run_raw = _section(raw, "run")

    solver = SolverConfig(
        pivot_rule=str(solver_raw.get("pivot_rule", "random")),
        seed=solver_raw.get("seed"),
    )
    if solver.pivot_rule not in {"random", "first"}:
        raise ValueError(f"unsupported pivot rule: {solver.pivot_rule}")
    if solver.seed is not None and (isinstance(solver.seed, bool) or not isinstance(solver.seed, int)):
        raise ValueError(f"solver seed must be an integer, got {solver.seed!r}")

    run = RunConfig(
        logging=bool(run_raw.get("logging", True)),
        plots=bool(run_raw.get("plots", False)),
        check=bool(run_raw.get("check", False)),
    )

    return Config(
        problem=parse_problem(raw),
        solver=solver,
        run=run,
        base_path=cfg_path.parent,
    )
