import contextlib
import io
import json
import logging
import os
import pathlib
import sys
import tempfile
import unittest
from unittest import mock

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "scripts"))
sys.path.insert(0, str(ROOT / "tests"))

import turnaround  # noqa: E402
from fakes import FakeAdapter, png_bytes  # noqa: E402


class TestParser(unittest.TestCase):
    def test_defaults(self) -> None:
        args = turnaround.build_parser().parse_args(["--image", "ref.png"])
        self.assertEqual(args.frames, 4)
        self.assertEqual(args.style, "Photorealistic")
        self.assertEqual(args.background, "Original")
        self.assertFalse(args.interpolate)
        self.assertFalse(args.gif)

    def test_rejects_unknown_style(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                turnaround.build_parser().parse_args(["--image", "ref.png", "--style", "Baroque"])

    def test_scene_validation_exits(self) -> None:
        with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "test-key"}):
            with contextlib.redirect_stderr(io.StringIO()):
                with self.assertRaises(SystemExit) as ctx:
                    turnaround.main(["--image", "ref.png", "--frames", "20"])
        self.assertEqual(ctx.exception.code, 2)


class TestWriteEnvKey(unittest.TestCase):
    def test_replaces_existing_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            dotenv_path = pathlib.Path(tmpdir) / ".env"
            dotenv_path.write_text('OTHER=1\nGEMINI_API_KEY="old"\n', encoding="utf-8")
            turnaround._write_env_key(dotenv_path, "GEMINI_API_KEY", 'new"key')
            lines = dotenv_path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(lines, ["OTHER=1", 'GEMINI_API_KEY="new\\"key"'])

    def test_appends_missing_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            dotenv_path = pathlib.Path(tmpdir) / ".env"
            turnaround._write_env_key(dotenv_path, "GEMINI_API_KEY", "abc")
            self.assertEqual(dotenv_path.read_text(encoding="utf-8"), 'GEMINI_API_KEY="abc"\n')


class TestMain(unittest.TestCase):
    def test_full_run_writes_artifacts(self) -> None:
        adapter = FakeAdapter(real_images=True)
        with tempfile.TemporaryDirectory() as tmpdir:
            reference = pathlib.Path(tmpdir) / "ref.png"
            reference.write_bytes(png_bytes())
            out_dir = pathlib.Path(tmpdir) / "out"
            stdout = io.StringIO()
            with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "test-key"}):
                with mock.patch.object(turnaround, "get_adapter", return_value=adapter):
                    with contextlib.redirect_stdout(stdout):
                        code = turnaround.main(
                            [
                                "--image", str(reference),
                                "--style", "Cartoon",
                                "--background", "Transparent",
                                "--frames", "4",
                                "--interpolate",
                                "--gif",
                                "--out", str(out_dir),
                            ]
                        )
            self.assertEqual(code, 0)
            self.assertEqual(len(list(out_dir.glob("frame_*.png"))), 8)
            self.assertTrue((out_dir / "turntable.gif").exists())
            receipt = json.loads((out_dir / "receipt.json").read_text(encoding="utf-8"))
        self.assertEqual(receipt["scene"]["frame_count"], 4)
        self.assertEqual(receipt["reference"], str(reference.resolve()))
        self.assertIn("[generate 5/5] Frame 4 complete.", stdout.getvalue())
        self.assertIn("[interpolate 4/4] Interpolation complete!", stdout.getvalue())

    def test_pipeline_error_returns_one(self) -> None:
        adapter = FakeAdapter(describe_error=RuntimeError("quota exceeded"))
        with tempfile.TemporaryDirectory() as tmpdir:
            reference = pathlib.Path(tmpdir) / "ref.png"
            reference.write_bytes(png_bytes())
            stderr = io.StringIO()
            with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "test-key"}):
                with mock.patch.object(turnaround, "get_adapter", return_value=adapter):
                    with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(stderr):
                        code = turnaround.main(["--image", str(reference), "--out", str(pathlib.Path(tmpdir) / "out")])
        self.assertEqual(code, 1)
        self.assertEqual(stderr.getvalue(), "Image analysis failed: quota exceeded\n")

    def test_undecodable_frames_with_gif_return_one(self) -> None:
        adapter = FakeAdapter()
        with tempfile.TemporaryDirectory() as tmpdir:
            reference = pathlib.Path(tmpdir) / "ref.png"
            reference.write_bytes(png_bytes())
            out_dir = pathlib.Path(tmpdir) / "out"
            stderr = io.StringIO()
            with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "test-key"}):
                with mock.patch.object(turnaround, "get_adapter", return_value=adapter):
                    with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(stderr):
                        code = turnaround.main(["--image", str(reference), "--gif", "--out", str(out_dir)])
            self.assertFalse((out_dir / "turntable.gif").exists())
            receipt = json.loads((out_dir / "receipt.json").read_text(encoding="utf-8"))
        self.assertEqual(code, 1)
        self.assertIn("not a decodable image", stderr.getvalue())
        self.assertEqual(len(receipt["frames"]), 4)
        self.assertIsNone(receipt["artifacts"]["gif_path"])

    def test_log_level_read_from_dotenv(self) -> None:
        def _skip_run(coro):
            coro.close()
            return 0

        with tempfile.TemporaryDirectory() as tmpdir:
            dotenv_path = pathlib.Path(tmpdir) / ".env"
            dotenv_path.write_text("TURNAROUND_LOG_LEVEL=DEBUG\n", encoding="utf-8")
            with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "test-key"}):
                os.environ.pop("TURNAROUND_LOG_LEVEL", None)
                with mock.patch.object(turnaround, "_find_repo_dotenv", return_value=dotenv_path), \
                        mock.patch.object(turnaround.logging, "basicConfig") as basic_config, \
                        mock.patch.object(turnaround.asyncio, "run", side_effect=_skip_run):
                    code = turnaround.main(["--image", "ref.png"])
        self.assertEqual(code, 0)
        self.assertEqual(basic_config.call_args.kwargs["level"], logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
