"""Eval runner - replays scripted completion scenarios through the orchestrator."""

import asyncio
import sys
from pathlib import Path
from typing import Any

import yaml

from tripsmith.config import Settings
from tripsmith.llm.client import ScriptedCompletionClient
from tripsmith.models import Itinerary, TripInput
from tripsmith.orchestration.orchestrator import ItineraryOrchestrator

SCENARIOS_PATH = Path(__file__).parent / "scenarios.yaml"


def load_scenarios(path: Path = SCENARIOS_PATH) -> dict[str, Any]:
    """Load scenarios from YAML."""
    with open(path) as f:
        result: dict[str, Any] = yaml.safe_load(f)
        return result


def _current(env: dict[str, Any]) -> Itinerary:
    itinerary = env.get("itinerary")
    if itinerary is None:
        raise ValueError("Step requires a generated itinerary")
    return itinerary


async def run_steps(trip: TripInput, steps: list[dict[str, Any]]) -> dict[str, Any]:
    """Run scenario steps; return the predicate environment.

    Environment names: ``trip``, ``generated`` (first generated itinerary),
    ``previous`` (itinerary before the last refine), ``itinerary`` (latest),
    ``wishlist_item`` and ``error`` (type name of the last raised error).
    """
    client = ScriptedCompletionClient()
    orchestrator = ItineraryOrchestrator(client, settings=Settings(_env_file=None))
    env: dict[str, Any] = {"trip": trip, "itinerary": None, "error": None}

    for step in steps:
        op = step["op"]
        if "response" in step:
            client.push(step["response"])

        try:
            if op == "generate":
                env["itinerary"] = await orchestrator.generate(trip)
                env.setdefault("generated", env["itinerary"])
            elif op == "edit":
                env["itinerary"] = await orchestrator.update_activity(
                    _current(env), step["day_index"], step["activity_id"], step["updates"]
                )
            elif op == "refine":
                env["previous"] = _current(env)
                env["itinerary"] = await orchestrator.refine(env["previous"], step["request"])
            elif op == "reorder":
                current = _current(env)
                day = current.days[step["day_index"]]
                by_id = {a.id: a for a in day.activities}
                ordered = [by_id[activity_id] for activity_id in step["order"]]
                env["itinerary"] = await orchestrator.reorder_day(
                    current, step["day_index"], ordered
                )
            elif op == "analyze":
                env["wishlist_item"] = await orchestrator.analyze_external_content(step["content"])
            else:
                raise ValueError(f"Unknown step op: {op}")
        except Exception as e:
            env["error"] = type(e).__name__
            print(f"  step {op} raised {type(e).__name__}: {e}")

    return env


def evaluate_predicates(env: dict[str, Any], predicates: list[dict[str, str]]) -> tuple[int, int]:
    """Evaluate predicates; return (passed, total)."""
    passed = 0
    total = len(predicates)
    # Names go into globals so generator expressions in predicates can see them
    scope = {"__builtins__": {}, "len": len, "all": all, "any": any, "set": set, **env}

    for pred_data in predicates:
        predicate = pred_data["predicate"]
        description = pred_data.get("description", predicate)
        try:
            result = eval(predicate, scope)
            if result:
                passed += 1
                print(f"  ✓ PASS: {description}")
            else:
                print(f"  ✗ FAIL: {description}")
        except Exception as e:
            print(f"  ✗ ERROR: {description} - {e}")

    return passed, total


def main() -> int:
    """Run eval scenarios."""
    scenarios_data = load_scenarios()
    scenarios = scenarios_data["scenarios"]

    total_passed = 0
    total_predicates = 0

    for scenario in scenarios:
        scenario_id = scenario["scenario_id"]
        description = scenario["description"]
        print(f"\n=== Scenario: {scenario_id} ===")
        print(f"Description: {description}")

        trip = TripInput.model_validate(scenario["trip"])
        env = asyncio.run(run_steps(trip, scenario["steps"]))

        predicates = scenario["must_satisfy"]
        passed, total = evaluate_predicates(env, predicates)
        total_passed += passed
        total_predicates += total

        print(f"Result: {passed}/{total} predicates passed")

    print("\n=== Summary ===")
    print(f"Total: {total_passed}/{total_predicates} predicates passed")

    if total_passed < total_predicates:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
