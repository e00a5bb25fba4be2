from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Optional

from ..config import AppConfig, validate_parameters
from ..sim.core.run import SimulationRun
from ..sim.types.record import GenerationRecord

logger = logging.getLogger(__name__)

_HEADER = ["generation", "altruist_fraction", "group_variance"]


def _format_row(record: GenerationRecord) -> list[object]:
    return [
        record.generation,
        f"{record.altruist_fraction:.6f}",
        f"{record.group_variance:.6f}",
    ]


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "mean": 0.0}
    return {
        "min": float(min(values)),
        "max": float(max(values)),
        "mean": float(sum(values) / len(values)),
    }


def run_headless(
    config: Optional[AppConfig] = None,
    seed: Optional[int] = None,
    log_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
) -> SimulationRun:
    config = config or AppConfig()
    if seed is not None:
        config.seed = seed
    params = validate_parameters(config.parameters)
    run = SimulationRun(params, seed=config.seed)
    run.start()
    history = run.run_to_completion()

    if log_path:
        with Path(log_path).open("w", newline="") as csv_file:
            writer = csv.writer(csv_file)
            writer.writerow(_HEADER)
            for record in history:
                writer.writerow(_format_row(record))
        logger.info("wrote %d generation records to %s", len(history), log_path)

    if summary_path:
        fractions = [record.altruist_fraction for record in history]
        variances = [record.group_variance for record in history]
        summary = {
            "seed": config.seed,
            "generations": run.generation,
            "initial_altruist_fraction": fractions[0],
            "final_altruist_fraction": fractions[-1],
            "altruist_fraction": _summary_stats(fractions),
            "group_variance": _summary_stats(variances),
            "conclusion": run.conclusion,
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    return run


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless multilevel selection simulation")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with seed and parameters")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-generation records")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file to write run summary.")
    parser.add_argument("--quiet", action="store_true", help="Do not print the conclusion.")
    parser.add_argument("--verbose", action="store_true", help="Log every generation.")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = AppConfig.from_yaml(args.config) if args.config else AppConfig()
    run = run_headless(config, args.seed, args.log, summary_path=args.summary)
    if not args.quiet:
        print(run.conclusion)


if __name__ == "__main__":
    main()
