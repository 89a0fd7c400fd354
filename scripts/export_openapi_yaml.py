"""Write the drink-points HTTP API's OpenAPI schema as YAML.

Usage:
  python scripts/export_openapi_yaml.py --output openapi/drink-points-api.yaml
"""

from __future__ import annotations

import argparse
import importlib.util
import json
import re
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parent.parent
API_INDEX = ROOT / "api" / "index.py"
DEFAULT_OUTPUT = "openapi/drink-points-api.yaml"

PLAIN_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export the drink-points OpenAPI schema as YAML")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help=f"Output YAML path (default: {DEFAULT_OUTPUT})")
    return parser.parse_args(argv)


def load_app(path: Path = API_INDEX):
    spec = importlib.util.spec_from_file_location("drink_points_api_index", path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Failed to load API module from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.app


def scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    # JSON strings are valid double-quoted YAML scalars.
    return json.dumps(value, ensure_ascii=False)


def key(name: str) -> str:
    return name if PLAIN_KEY.match(name) else json.dumps(name, ensure_ascii=False)


def to_yaml_lines(value: Any, depth: int = 0) -> list[str]:
    pad = "  " * depth

    if isinstance(value, dict):
        if not value:
            return [f"{pad}{{}}"]
        lines: list[str] = []
        for name, item in value.items():
            if isinstance(item, (dict, list)) and item:
                lines.append(f"{pad}{key(str(name))}:")
                lines.extend(to_yaml_lines(item, depth + 1))
            else:
                lines.append(f"{pad}{key(str(name))}: {_inline(item)}")
        return lines

    if isinstance(value, list):
        if not value:
            return [f"{pad}[]"]
        lines = []
        for item in value:
            if isinstance(item, (dict, list)) and item:
                lines.append(f"{pad}-")
                lines.extend(to_yaml_lines(item, depth + 1))
            else:
                lines.append(f"{pad}- {_inline(item)}")
        return lines

    return [f"{pad}{scalar(value)}"]


def _inline(value: Any) -> str:
    if value == {}:
        return "{}"
    if value == []:
        return "[]"
    return scalar(value)


def render(schema: dict[str, Any]) -> str:
    return "\n".join(to_yaml_lines(schema)) + "\n"


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)

    output.write_text(render(load_app().openapi()), encoding="utf-8")
    print(f"written: {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
