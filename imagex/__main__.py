"""Command line entry point for the ImageX project."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from . import SceneAnalyzer, SettingsStore
from .config import AppConfig, ResizeMode
from .models.registry import ModelRegistry


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="ImageX scene classifier")
    parser.add_argument(
        "--input",
        "-i",
        type=Path,
        help="Image file or directory to classify in headless mode.",
    )
    parser.add_argument(
        "--model",
        help="Override the configured model identifier.",
    )
    parser.add_argument(
        "--model-path",
        type=Path,
        help="Local directory holding the model to load.",
    )
    parser.add_argument(
        "--resize-mode",
        choices=[mode.value for mode in ResizeMode],
        help="Override how images are fitted to the model input size.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Settings file to use instead of the per-user one.",
    )
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="Print available models and exit.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without launching the GUI.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log pipeline diagnostics to stderr.",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if args.list_models:
        payload = [asdict(info) for info in ModelRegistry.list_model_infos()]
        for data in payload:
            data["tags"] = list(data["tags"])
        json.dump(payload, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    store = SettingsStore(args.config) if args.config else SettingsStore()

    if not args.headless and args.input is None:
        from .gui import run_app

        run_app(store)
        return

    if args.input is None:
        parser.error("--input is required when running in headless mode.")

    config = store.load()
    overrides: dict[str, object] = {}
    if args.model:
        overrides["model_name"] = args.model
    if args.model_path:
        overrides["model_path"] = args.model_path
    if args.resize_mode:
        overrides["resize_mode"] = ResizeMode(args.resize_mode)
    if overrides:
        config = AppConfig.model_validate({**config.as_dict(), **overrides})

    with SceneAnalyzer(config) as analyzer:
        results = analyzer.analyze_target(args.input)

    json.dump([result.as_dict() for result in results], sys.stdout, indent=2)
    sys.stdout.write("\n")
    if results and all(result.failed for result in results):
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
