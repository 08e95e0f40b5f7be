#!/usr/bin/env python3
"""
Volume Governor CLI.

Deterministic governance operations over JSON files:
- normalize: Map raw muscle labels to canonical keys
- evaluate: Landmark status per muscle for a volume snapshot
- resolve: ConstraintSet for a methodology + volume + fatigue context
- validate-addition: Verdict for adding an exercise to a workout
- validate-split-change: Verdict and impact analysis for a split change

Usage:
    volume-governor normalize "rear delts" quadriceps --exercise "Face Pull"
    volume-governor evaluate -m approach.json --volume volume.json
    volume-governor resolve -m approach.json --volume volume.json --context ctx.json
    volume-governor validate-addition -m approach.json -p proposal.json --volume volume.json
    volume-governor validate-split-change -m approach.json -p split.json --context ctx.json
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Optional

import click

from volume_governor.constraints.resolver import resolve_from_volume
from volume_governor.errors import GovernorError
from volume_governor.fatigue.models import FatigueContext
from volume_governor.methodology.models import MethodologyConfig
from volume_governor.methodology.provider import InMemoryMethodologyProvider
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.taxonomy.normalizer import Unmatched, normalize
from volume_governor.validators.models import AdditionProposal, SplitChangeProposal
from volume_governor.validators.service import ValidationService
from volume_governor.volume.landmarks import evaluate_all
from volume_governor.volume.ledger import VolumeLedger
from volume_governor.volume.store import InMemoryLedgerStore

CLI_CYCLE_ID = "cli"


def _load_json(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_methodology(path: str) -> MethodologyConfig:
    data = _load_json(path)
    return MethodologyConfig.from_dict(data, methodology_id=data.get("id") or "cli")


def _load_volume(path: Optional[str]) -> Dict[MuscleKey, int]:
    volume: Dict[MuscleKey, int] = {}
    for raw, sets in _load_json(path).items():
        key = normalize(raw)
        if isinstance(key, Unmatched):
            click.echo(click.style(f"⚠ Ignoring unknown muscle '{raw}'", fg="yellow"), err=True)
            continue
        volume[key] = volume.get(key, 0) + int(sets)
    return volume


def _load_context(path: Optional[str]) -> FatigueContext:
    return FatigueContext.from_dict(_load_json(path))


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _fail(e: Exception) -> None:
    click.echo(click.style(f"✗ {e}", fg="red"), err=True)
    sys.exit(1)


def _service_for(methodology: MethodologyConfig, user_id: str, volume: Dict[MuscleKey, int]) -> ValidationService:
    store = InMemoryLedgerStore()
    if volume:
        VolumeLedger(user_id, store).record_batch(CLI_CYCLE_ID, volume)
    provider = InMemoryMethodologyProvider({methodology.methodology_id: methodology})
    return ValidationService(provider, store)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Volume Governor CLI - Deterministic training volume governance."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# NORMALIZE
# =============================================================================

@cli.command("normalize")
@click.argument("labels", nargs=-1, required=True)
@click.option("--exercise", "-e", help="Exercise name used to refine generic labels")
def normalize_cmd(labels: tuple, exercise: Optional[str]):
    """
    Normalize raw muscle labels.

    Examples:
        volume-governor normalize "rear delts" quadricipiti lowerback
        volume-governor normalize shoulders --exercise "Cable Lateral Raise"
    """
    results = []
    for label in labels:
        result = normalize(label, exercise)
        results.append({
            "raw": label,
            "key": None if isinstance(result, Unmatched) else result.value,
        })
    _echo_json(results)


# =============================================================================
# EVALUATE
# =============================================================================

@cli.command("evaluate")
@click.option("--methodology", "-m", "methodology_path", required=True, type=click.Path(exists=True),
              help="Approach document (JSON)")
@click.option("--volume", "volume_path", required=True, type=click.Path(exists=True),
              help="Current sets per muscle (JSON object)")
def evaluate_cmd(methodology_path: str, volume_path: str):
    """Landmark status per muscle."""
    methodology = _load_methodology(methodology_path)
    volume = _load_volume(volume_path)
    statuses = evaluate_all(volume, methodology.landmarks)
    _echo_json({
        muscle.value: {"sets": volume.get(muscle, 0), "status": status.value}
        for muscle, status in statuses.items()
    })


# =============================================================================
# RESOLVE
# =============================================================================

@cli.command("resolve")
@click.option("--methodology", "-m", "methodology_path", required=True, type=click.Path(exists=True),
              help="Approach document (JSON)")
@click.option("--volume", "volume_path", type=click.Path(exists=True), help="Current sets per muscle")
@click.option("--context", "context_path", type=click.Path(exists=True), help="Fatigue context (JSON)")
def resolve_cmd(methodology_path: str, volume_path: Optional[str], context_path: Optional[str]):
    """Resolve the ConstraintSet for the next decision."""
    try:
        methodology = _load_methodology(methodology_path)
        constraints = resolve_from_volume(
            methodology, _load_volume(volume_path), _load_context(context_path),
        )
    except (GovernorError, ValueError) as e:
        _fail(e)
        return
    _echo_json(constraints.to_dict())


# =============================================================================
# VALIDATORS
# =============================================================================

@cli.command("validate-addition")
@click.option("--methodology", "-m", "methodology_path", required=True, type=click.Path(exists=True),
              help="Approach document (JSON)")
@click.option("--proposal", "-p", "proposal_path", required=True, type=click.Path(exists=True),
              help="Addition proposal (JSON)")
@click.option("--volume", "volume_path", type=click.Path(exists=True), help="Current sets per muscle")
@click.option("--context", "context_path", type=click.Path(exists=True), help="Fatigue context (JSON)")
def validate_addition(
    methodology_path: str,
    proposal_path: str,
    volume_path: Optional[str],
    context_path: Optional[str],
):
    """
    Validate adding an exercise to a workout.

    Proposal shape:
        {"user_id": "...", "workout": {"workout_id": "...", "exercises": [...]},
         "exercise_name": "Leg Extension", "target_muscles": ["quads"], "sets": 3}
    """
    try:
        methodology = _load_methodology(methodology_path)
        proposal = AdditionProposal.from_dict(_load_json(proposal_path))
        service = _service_for(methodology, proposal.user_id or "cli", _load_volume(volume_path))
        verdict = service.validate(
            "addition", proposal, CLI_CYCLE_ID, methodology.methodology_id, _load_context(context_path),
        )
    except (GovernorError, ValueError) as e:
        _fail(e)
        return
    _echo_json(verdict.to_dict())


@cli.command("validate-split-change")
@click.option("--methodology", "-m", "methodology_path", required=True, type=click.Path(exists=True),
              help="Approach document (JSON)")
@click.option("--proposal", "-p", "proposal_path", required=True, type=click.Path(exists=True),
              help="Split change proposal (JSON)")
@click.option("--context", "context_path", type=click.Path(exists=True), help="Fatigue context (JSON)")
def validate_split_change(methodology_path: str, proposal_path: str, context_path: Optional[str]):
    """
    Validate changing the split type of the current cycle.

    Proposal shape:
        {"user_id": "...", "current_split": "upper_lower",
         "target_split": "push_pull_legs", "current_volume": {"quads": 12}}
    """
    try:
        methodology = _load_methodology(methodology_path)
        proposal = SplitChangeProposal.from_dict(_load_json(proposal_path))
        service = _service_for(methodology, proposal.user_id or "cli", {})
        verdict = service.validate(
            "split_change", proposal, CLI_CYCLE_ID, methodology.methodology_id,
            _load_context(context_path),
        )
    except (GovernorError, ValueError) as e:
        _fail(e)
        return
    _echo_json(verdict.to_dict())


if __name__ == "__main__":
    cli()
