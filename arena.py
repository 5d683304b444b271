"""
Model Arena - headless run

Runs one arena pass with synthetic scoring and prints the report.

Usage:
  python arena.py                                   # Default roster and prompt
  python arena.py --models gpt4o,claude3-opus,gemini-1.5,qwen2-vl
  python arena.py --mode image --image greenhouse_layout.png
  python arena.py --prompt-file prompt.txt --run 3  # Different peer-review seed
  python arena.py --choice gemini-1.5               # Compare your pick with the arbiter
  python arena.py --json                            # Raw result as JSON
  python arena.py --list-models
"""

import argparse
import contextlib
import sys
from pathlib import Path

from modelarena.config import DEFAULT_PROMPT, DEFAULT_SELECTION, DEFAULT_MODE, MODE_VALUES
from modelarena.media import describe_image
from modelarena.models import ALL_MODELS, roster
from modelarena.report import build_markdown_report, result_to_json
from modelarena.runner import ArenaError, run_evaluation


def list_models():
    """Print the roster with selection defaults marked."""
    print("\n  Available models:")
    for model in roster():
        marker = "[x]" if model["id"] in DEFAULT_SELECTION else "[ ]"
        print(f"    {marker} {model['id']:<14} {model['name']} ({model['provider']}) - {' / '.join(model['modality'])}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Model Arena - synthetic prompt testing and model ranking",
        epilog=f"Available models: {', '.join(m['id'] for m in ALL_MODELS)}"
    )
    parser.add_argument("--models", type=str, help="Models to compare (comma-separated ids)")
    parser.add_argument("--prompt", type=str, help="Prompt text")
    parser.add_argument("--prompt-file", type=Path, help="Read prompt text from a file")
    parser.add_argument("--mode", type=str, choices=MODE_VALUES, default=DEFAULT_MODE, help="Prompt modality")
    parser.add_argument("--image", type=str, help="Reference image file name (used for its descriptor)")
    parser.add_argument("--run", type=int, default=0, help="Run counter (changes the peer-review seed)")
    parser.add_argument("--choice", type=str, help="Your pick, compared with the arbiter verdict")
    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    parser.add_argument("--list-models", action="store_true", help="List available models and exit")
    args = parser.parse_args(argv)

    if args.list_models:
        list_models()
        return 0

    selected = [m.strip() for m in args.models.split(",") if m.strip()] if args.models else list(DEFAULT_SELECTION)
    if args.prompt_file:
        try:
            prompt = args.prompt_file.read_text(encoding="utf-8")
        except OSError as e:
            print(f"[ERROR] Cannot read prompt file: {e}", file=sys.stderr)
            return 2
    else:
        prompt = args.prompt if args.prompt is not None else DEFAULT_PROMPT
    descriptor = describe_image(args.image) if args.mode != "text" else None

    try:
        # Progress lines go to stderr so stdout stays a clean report
        with contextlib.redirect_stdout(sys.stderr):
            result = run_evaluation(selected, prompt, args.mode, descriptor, args.run)
    except ArenaError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    if args.json:
        print(result_to_json(result))
    else:
        print(build_markdown_report(result, prompt, args.mode, user_choice=args.choice))
    return 0


if __name__ == "__main__":
    sys.exit(main())
