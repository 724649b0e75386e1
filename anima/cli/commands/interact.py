"""Run a single interaction from command-line flags."""

from typing import TYPE_CHECKING

from anima.cli.commands.helpers import entity_summary, format_outcome, print_entity_summary, print_json
from anima.models import EmotionalAnalysis, InteractionInput

if TYPE_CHECKING:
    from anima.engine import EvolutionEngine


def build_interaction(args) -> InteractionInput:
    analysis = EmotionalAnalysis(
        primary_emotion=args.emotion,
        intensity=args.intensity,
        valence=args.valence,
        arousal=args.arousal,
        dominance=args.dominance,
    )
    return InteractionInput(message=args.message, response_text=args.response or "", analysis=analysis)


def cmd_interact(args, engine: "EvolutionEngine"):
    """Process one message against a fresh entity."""
    interaction = build_interaction(args)
    entity = engine.create_entity(getattr(args, "entity", None))
    outcome = engine.handle(entity.id, interaction)

    if args.json:
        data = entity_summary(entity)
        data["outcome"] = outcome.to_dict()
        print_json(data)
        return

    print(format_outcome(1, outcome))
    print()
    print_entity_summary(entity)
