"""Replay a scripted conversation against a fresh entity."""

from pathlib import Path
from typing import TYPE_CHECKING, List

from pydantic import ValidationError

from anima.cli.commands.helpers import entity_summary, format_outcome, print_entity_summary, print_json
from anima.models import InteractionInput

if TYPE_CHECKING:
    from anima.engine import EvolutionEngine


def load_script(path: Path) -> List[InteractionInput]:
    """Read a JSON-lines script, one InteractionInput per line.

    Blank lines and lines starting with ``#`` are skipped.
    """
    interactions = []
    with open(path, encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                interactions.append(InteractionInput.model_validate_json(line))
            except ValidationError as e:
                raise ValueError(f"{path}:{lineno}: invalid interaction: {e}") from e
    return interactions


def cmd_simulate(args, engine: "EvolutionEngine"):
    """Run every scripted interaction and report the outcomes."""
    interactions = load_script(Path(args.script))
    entity = engine.create_entity(args.entity)

    outcomes = [engine.handle(entity.id, interaction) for interaction in interactions]

    if args.json:
        data = entity_summary(entity)
        data["outcomes"] = [o.to_dict() for o in outcomes]
        if args.dump:
            data["state"] = entity.to_dict()
        print_json(data)
        return

    for index, outcome in enumerate(outcomes, start=1):
        print(format_outcome(index, outcome))
    if not outcomes:
        print("Script contained no interactions.")
    print()
    print_entity_summary(entity)
    if args.dump:
        print()
        print_json(entity.to_dict())
