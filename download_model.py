"""Fetch a faster-whisper model into the default model directory."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from config import DEFAULT_MODEL_NAME, default_model_dir

try:
    import faster_whisper
except Exception:  # pragma: no cover
    faster_whisper = None  # type: ignore

LOGGER = logging.getLogger("voice_to_text.download")


def fetch_model(name: str = DEFAULT_MODEL_NAME, model_dir: Path | None = None) -> Path:
    """Download ``name`` into ``model_dir/name`` unless it is already there."""
    target = (model_dir or default_model_dir()) / name
    if (target / "model.bin").exists():
        LOGGER.info("Model already exists at %s", target)
        return target
    if faster_whisper is None:
        raise RuntimeError("faster-whisper is not installed")

    target.mkdir(parents=True, exist_ok=True)
    LOGGER.info("Downloading whisper %s model to %s", name, target)
    faster_whisper.download_model(name, output_dir=str(target))
    LOGGER.info("Done. Model saved to %s", target)
    return target


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download a speech model for voice-to-text")
    parser.add_argument(
        "name",
        nargs="?",
        default=DEFAULT_MODEL_NAME,
        help=f"Model size or Hugging Face repo id (default: {DEFAULT_MODEL_NAME}).",
    )
    parser.add_argument(
        "--model-dir",
        type=Path,
        default=None,
        help="Destination directory (default: the app's model directory).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    try:
        fetch_model(args.name, args.model_dir)
    except Exception as exc:
        LOGGER.error("Download failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
