#!/usr/bin/env python3
"""
Demo Script: Induction optimization over a mock 25-trainset fleet
Prints the schedule, fleet metrics, conflicts and one full explanation
"""
import argparse
import json

from fleet_induction.services.mock_data_generator import KMRLMockDataGenerator
from fleet_induction.services.optimizer import InductionOptimizer
from fleet_induction.utils.explainability import render_explanation_text
from fleet_induction.utils.randomness import SeededRandomSource


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--count", type=int, default=25, help="Number of trainsets to generate")
    parser.add_argument("--seed", type=int, default=42, help="Seed for fleet generation and jitter")
    parser.add_argument("--json", action="store_true", help="Dump the raw result as JSON")
    args = parser.parse_args()

    fleet = KMRLMockDataGenerator(seed=args.seed).generate_trainsets(args.count)
    optimizer = InductionOptimizer()
    result = optimizer.optimize(fleet, random_source=SeededRandomSource(args.seed))

    if args.json:
        print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
        return

    print(f"Induction plan @ {result.timestamp.isoformat()}")
    for entry in result.schedule:
        print(
            f"  {entry.trainset_id:<10} {entry.assignment.value:<12} "
            f"conf={entry.confidence:.2f} ready={entry.service_readiness:5.1f} "
            f"overall={entry.overall_score:5.1f}  {entry.reasoning[0]}"
        )

    print("\nFleet metrics:")
    for name, value in result.metrics.model_dump().items():
        print(f"  {name:<24} {value:6.1f}%")

    print(f"\nStatus counts: {result.status_counts()}")
    print(f"Conflicts ({result.critical_issue_count()} critical):")
    for conflict in result.conflicts:
        print(f"  {conflict.trainset_id}: {conflict.issue} -> {conflict.resolution}")

    # Re-run the first trainset for a full explanation with the same jitter
    _, evaluations = optimizer.evaluate_fleet(fleet[:1], random_source=SeededRandomSource(args.seed), now=result.timestamp)
    print("\n" + render_explanation_text(evaluations[0]))


if __name__ == "__main__":
    main()
