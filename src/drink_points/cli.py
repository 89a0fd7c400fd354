"""Command-line interface for drink-points."""

import argparse
import json
import sys

from drink_points import __version__
from drink_points.core import CaptureResult, classify, score_capture
from drink_points.exceptions import DrinkPointsError
from drink_points.intake import IntakeError


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="drink-points",
        description="Classify a drink photo and show the points it earns",
    )
    parser.add_argument("image", help="Path to drink photo")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--api-key",
        help="Gemini API key (default: GEMINI_API_KEY env var)",
    )
    parser.add_argument(
        "--provider",
        help="Classifier provider (default: DRINK_POINTS_PROVIDER env var, then gemini)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"drink-points {__version__}",
    )

    args = parser.parse_args(argv)

    try:
        classification = classify(args.image, api_key=args.api_key, provider=args.provider)
    except DrinkPointsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    outcome = score_capture(classification)
    if isinstance(outcome, IntakeError):
        print("Error: drink could not be classified, select the product manually", file=sys.stderr)
        return 1

    if args.json:
        payload = {
            "classification": classification.model_dump(exclude_none=True),
            **outcome.model_dump(),
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        _print_formatted(outcome)

    return 0


def _print_formatted(result: CaptureResult) -> None:
    """Print result in human-readable format."""
    observation = result.observation
    award = result.award
    print()
    print("  drink-points")
    print()

    fields = [
        ("Brand", observation.brand_name),
        ("Category", observation.category),
        ("Volume", f"{observation.volume_ml} ml"),
        ("Quantity", str(observation.quantity)),
        ("Confidence", f"{observation.confidence:.2f}"),
        ("Target Brand", "yes" if observation.is_target_brand else "no"),
        ("Points", _format_award(award)),
        ("Character", result.character_id),
        ("Warnings", ", ".join(observation.warnings) or None),
    ]

    for label, value in fields:
        display = value if value else "-"
        print(f"  {label + ':':<14} {display}")

    print()


def _format_award(award) -> str:
    """Format the award with its multiplier breakdown."""
    if award.final_points == 0:
        return "0"
    return (
        f"{award.final_points} "
        f"({award.base_points} x {award.category_multiplier} x {award.volume_bonus} "
        f"x {award.confidence_bonus} x {award.quantity})"
    )


if __name__ == "__main__":
    sys.exit(main())
