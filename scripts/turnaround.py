#!/usr/bin/env python3
"""Turn a single reference image into a 360-degree turntable sequence.

Usage:
  python scripts/turnaround.py --image reference.png --style Cartoon \
    --background Transparent --frames 8 --interpolate --gif
  python scripts/turnaround.py --image sketch.png --background Custom \
    --custom-background "a misty forest clearing" --out outputs/forest

Notes:
- Loads .env from the repo root (GEMINI_API_KEY, TURNAROUND_* settings).
- Writes frame_XXX images, receipt.json and optionally turntable.gif.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from turnaround_api import analyze_and_generate, interpolate, save_turntable
from turnaround_api.core.config import API_KEY_VARS, Settings
from turnaround_api.core.contracts import (
    DEFAULT_FRAME_COUNT,
    DEFAULT_SUBJECT,
    FRAME_COUNT_MAX,
    FRAME_COUNT_MIN,
    BackgroundMode,
    ProgressEvent,
    SceneSpec,
    StylePreset,
)
from turnaround_api.core.data_url import read_image_payload
from turnaround_api.core.errors import TurnaroundError
from turnaround_api.providers import get_adapter


logger = logging.getLogger("turnaround")

STYLE_CHOICES = [style.value for style in StylePreset]
BACKGROUND_CHOICES = [mode.value for mode in BackgroundMode]


def _find_repo_dotenv() -> Path | None:
    current = Path(__file__).resolve()
    for parent in (current.parent, *current.parents):
        dotenv_path = parent / ".env"
        if dotenv_path.exists():
            return dotenv_path
    return None


def _load_repo_dotenv() -> Path | None:
    dotenv_path = _find_repo_dotenv()
    if dotenv_path is not None:
        load_dotenv(dotenv_path=dotenv_path, override=False)
        return dotenv_path
    load_dotenv(override=False)
    return None


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _write_env_key(dotenv_path: Path, key: str, value: str) -> None:
    if not dotenv_path.parent.exists():
        dotenv_path.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = []
    if dotenv_path.exists():
        lines = dotenv_path.read_text(encoding="utf-8").splitlines()
    escaped = value.replace("\\", "\\\\").replace("\"", "\\\"")
    new_line = f'{key}="{escaped}"'
    for idx, line in enumerate(lines):
        if line.strip().startswith(f"{key}="):
            lines[idx] = new_line
            break
    else:
        lines.append(new_line)
    dotenv_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    try:
        os.chmod(dotenv_path, 0o600)
    except OSError:
        logger.debug("could not restrict permissions on %s", dotenv_path)


def _prompt_for_key(key: str, dotenv_path: Path | None) -> bool:
    choice = input(f"Set {key} now? [y/N]: ").strip().lower()
    if choice not in {"y", "yes"}:
        return False
    value = getpass.getpass(f"Enter {key}: ").strip()
    if not value:
        return False
    if dotenv_path is None:
        dotenv_path = _repo_root() / ".env"
    save = input(f"Save to {dotenv_path}? [Y/n]: ").strip().lower()
    if save in {"", "y", "yes"}:
        _write_env_key(dotenv_path, key, value)
        print(f"Saved {key} to {dotenv_path}.")
    os.environ[key] = value
    return True


def _ensure_api_key(dotenv_path: Path | None) -> None:
    if any(os.getenv(name) for name in API_KEY_VARS):
        return
    if sys.stdin.isatty():
        _prompt_for_key(API_KEY_VARS[0], dotenv_path)
    # Anything still missing is reported as a ConfigurationError by the adapter.


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, os.getenv("TURNAROUND_LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _print_progress(label: str):
    def _callback(event: ProgressEvent) -> None:
        print(f"[{label} {event.current}/{event.total}] {event.message}", flush=True)

    return _callback


def _scene_from_args(args: argparse.Namespace) -> SceneSpec:
    return SceneSpec(
        subject_description=args.prompt,
        style=args.style,
        background_mode=args.background,
        custom_background=args.custom_background or "",
        frame_count=args.frames,
    )


def _settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings.from_env().with_overrides(
        image_model=args.image_model,
        text_model=args.text_model,
        request_timeout=args.timeout,
    )


async def _run(args: argparse.Namespace) -> int:
    scene = _scene_from_args(args)
    settings = _settings_from_args(args)
    adapter = get_adapter("gemini", settings=settings)
    reference_path = Path(args.image).expanduser().resolve()
    reference = await read_image_payload(reference_path)

    frames = await analyze_and_generate(
        reference,
        scene,
        _print_progress("generate"),
        adapter=adapter,
    )
    interpolation = None
    if args.interpolate:
        interpolation = await interpolate(frames, _print_progress("interpolate"), adapter=adapter)
        frames = interpolation.frames
        if interpolation.ignored_failure_count:
            print(f"Skipped {interpolation.ignored_failure_count} interpolated frame(s).")

    artifacts = save_turntable(
        frames,
        scene=scene,
        settings=settings,
        out_dir=args.out,
        reference_path=reference_path,
        interpolation=interpolation,
        gif=args.gif,
        gif_duration_ms=args.gif_duration,
    )
    for path in artifacts.frame_paths:
        print(path)
    if artifacts.gif_path is not None:
        print(artifacts.gif_path)
    print(artifacts.receipt_path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Turnaround: generate a 360-degree turntable from one image.")
    parser.add_argument("--image", required=True, help="Reference image (png, jpeg, webp)")
    parser.add_argument("--prompt", default=DEFAULT_SUBJECT, help="Subject description")
    parser.add_argument("--style", default=StylePreset.PHOTOREALISTIC.value, choices=STYLE_CHOICES)
    parser.add_argument("--background", default=BackgroundMode.ORIGINAL.value, choices=BACKGROUND_CHOICES)
    parser.add_argument("--custom-background", default=None, help="Scene text used with --background Custom")
    parser.add_argument(
        "--frames",
        type=int,
        default=DEFAULT_FRAME_COUNT,
        help=f"Number of rotated frames ({FRAME_COUNT_MIN}-{FRAME_COUNT_MAX})",
    )
    parser.add_argument("--interpolate", action="store_true", help="Add in-between frames after generation")
    parser.add_argument("--gif", action="store_true", help="Also write turntable.gif")
    parser.add_argument("--gif-duration", type=int, default=120, help="GIF frame duration in ms")
    parser.add_argument("--out", default=None, help="Output directory (default: outputs/turnaround/<timestamp>)")
    parser.add_argument("--image-model", default=None, help="Image model override")
    parser.add_argument("--text-model", default=None, help="Analysis model override")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds (0 disables)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeatable)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    dotenv_path = _load_repo_dotenv()
    _configure_logging(args.verbose)
    _ensure_api_key(dotenv_path)
    try:
        _scene_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))
    try:
        return asyncio.run(_run(args))
    except TurnaroundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
