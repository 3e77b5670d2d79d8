"""Tests for the analysis, reporting, rendering and configuration layers."""

import csv
import io
import json
import os
from pathlib import Path
import sys
import tempfile
import unittest
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config_manager import ConfigManager
from nqtrace.analysis import cli, settings
from nqtrace.analysis.experiments import (
    benchmark_rows,
    run_count_benchmark,
    run_count_benchmark_parallel,
    run_trace_survey,
)
from nqtrace.analysis.plots import cell_frequencies, plot_benchmark, plot_cell_heatmap, plot_trace_composition
from nqtrace.analysis.render import describe_event, play_trace, render_board, render_solutions
from nqtrace.analysis.reporting import (
    save_benchmark_to_csv,
    save_raw_runs_to_csv,
    save_trace_summary_to_csv,
    trace_summary_frame,
    trace_to_frame,
)
from nqtrace.analysis.stats import ProgressPrinter, compute_detailed_statistics, summarize_trace
from nqtrace.search import iter_search, search
from nqtrace.trace import ATTEMPT, BACKTRACK, PLACED, SOLUTION, TraceEvent
from nqtrace.utils import UNSET

# Module-level settings that configuration loading may overwrite
SAVED_SETTINGS = (
    "DEFAULT_N", "DEFAULT_STRATEGY", "EMIT_ATTEMPTS", "PLAYBACK_DELAY",
    "SOLUTION_PAUSE_FACTOR", "MAX_TRACE_N", "N_VALUES", "STRATEGIES",
    "RUNS_PER_SIZE", "OUT_DIR", "NUM_PROCESSES",
)


class StatsTests(unittest.TestCase):

    def test_detailed_statistics(self):
        summary = compute_detailed_statistics([4.0, 1.0, 3.0, 2.0])
        self.assertEqual(summary["count"], 4)
        self.assertEqual(summary["mean"], 2.5)
        self.assertEqual(summary["min"], 1.0)
        self.assertEqual(summary["max"], 4.0)
        self.assertEqual(summary["range"], 3.0)
        self.assertEqual(summary["q25"], 2.0)
        self.assertEqual(summary["q75"], 4.0)

    def test_empty_statistics(self):
        summary = compute_detailed_statistics([])
        self.assertEqual(summary["count"], 0)
        self.assertIsNone(summary["mean"])

    def test_summarize_trace(self):
        summary = summarize_trace(search(4, "array"), 4, "array", True)
        self.assertEqual(summary["solutions"], 2)
        self.assertEqual(summary["placements"], summary["backtracks"])
        self.assertEqual(summary["max_depth"], 4)
        self.assertEqual(
            summary["events"],
            summary["attempts"] + summary["placements"] + summary["backtracks"] + summary["solutions"],
        )

    def test_progress_printer(self):
        buffer = io.StringIO()
        with mock.patch("sys.stdout", buffer):
            ProgressPrinter(4, "Bench").update(1, "N=4")
        self.assertEqual(buffer.getvalue().strip(), "[Bench] 1/4 (25%) - N=4")


class ExperimentTests(unittest.TestCase):

    def test_sequential_benchmark(self):
        results = run_count_benchmark([2, 4, 6], ["array", "bitmask"], runs=2, validate=True)
        self.assertEqual(set(results), {"array", "bitmask"})
        self.assertEqual(results["array"][6]["solutions"], 4)
        self.assertTrue(results["bitmask"][4]["matches_expected"])
        self.assertEqual(results["array"][2]["time"]["count"], 2)
        rows = benchmark_rows(results)
        self.assertEqual(len(rows), 6)
        self.assertEqual(rows[0]["strategy"], "array")

    def test_parallel_benchmark_matches_sequential(self):
        parallel = run_count_benchmark_parallel([4, 5], ["array", "bitmask"], runs=1, num_processes=2)
        sequential = run_count_benchmark([4, 5], ["array", "bitmask"], runs=1)
        for label in ("array", "bitmask"):
            for n in (4, 5):
                self.assertEqual(parallel[label][n]["solutions"], sequential[label][n]["solutions"])
                self.assertEqual(parallel[label][n]["nodes"], sequential[label][n]["nodes"])

    def test_trace_survey_respects_limit(self):
        buffer = io.StringIO()
        with mock.patch("sys.stdout", buffer):
            summaries = run_trace_survey([4, 5, 9], "bitmask", emit_attempts=False, max_n=6)
        self.assertEqual([s["n"] for s in summaries], [4, 5])
        self.assertEqual(summaries[1]["solutions"], 10)
        self.assertEqual(summaries[0]["attempts"], 0)
        self.assertIn("Skipping", buffer.getvalue())


class ReportingTests(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.out_dir = self.tmpdir.name
        self.stdout = mock.patch("sys.stdout", io.StringIO())
        self.stdout.start()

    def tearDown(self):
        self.stdout.stop()
        self.tmpdir.cleanup()

    def test_benchmark_csv_files(self):
        results = run_count_benchmark([4, 5], runs=3)
        summary_path = save_benchmark_to_csv(results, self.out_dir)
        raw_path = save_raw_runs_to_csv(results, self.out_dir)
        with open(summary_path, newline="") as f:
            rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 4)
        self.assertEqual({row["solutions"] for row in rows if row["n"] == "5"}, {"10"})
        with open(raw_path, newline="") as f:
            raw_rows = list(csv.reader(f))
        self.assertEqual(len(raw_rows), 1 + 2 * 2 * 3)

    def test_trace_summary_csv(self):
        summaries = run_trace_survey([4, 6], "array", emit_attempts=True)
        frame = trace_summary_frame(summaries)
        self.assertIn("placement_ratio", frame.columns)
        self.assertTrue((frame["placement_ratio"] <= 1).all())
        path = save_trace_summary_to_csv(summaries, self.out_dir)
        self.assertTrue(os.path.getsize(path) > 0)

    def test_trace_to_frame(self):
        frame = trace_to_frame(search(1, "array"))
        self.assertEqual(list(frame["kind"]), [ATTEMPT, PLACED, SOLUTION, BACKTRACK])
        self.assertEqual(list(frame["queens"]), [0, 1, 1, 0])
        self.assertTrue(frame["row"].isna().iloc[2])


class PlotTests(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.stdout = mock.patch("sys.stdout", io.StringIO())
        self.stdout.start()

    def tearDown(self):
        self.stdout.stop()
        self.tmpdir.cleanup()

    def test_cell_frequencies(self):
        attempts, placements = cell_frequencies(search(4, "array"), 4)
        self.assertEqual(attempts.shape, (4, 4))
        self.assertEqual(int(attempts[0].sum()), 4)
        self.assertEqual(int(placements.sum()), sum(1 for e in search(4, "array") if e.kind == PLACED))
        self.assertTrue((placements <= attempts).all())

    def test_charts_are_written(self):
        results = run_count_benchmark([4, 5, 6], runs=1)
        summaries = run_trace_survey([4, 5], "array")
        written = plot_benchmark(results, self.tmpdir.name)
        written += plot_trace_composition(summaries, self.tmpdir.name)
        written += plot_cell_heatmap(iter_search(5, "bitmask"), 5, self.tmpdir.name)
        self.assertEqual(len(written), 5)
        for path in written:
            self.assertTrue(os.path.exists(path), path)


class RenderTests(unittest.TestCase):

    def test_render_board_marks_queens_and_candidate(self):
        event = TraceEvent(ATTEMPT, (1, UNSET, UNSET, UNSET), 1, 3)
        drawing = render_board(event.board, event)
        lines = drawing.splitlines()
        self.assertEqual(len(lines), 2 * 4 + 1)
        self.assertEqual(drawing.count("♛"), 1)
        self.assertIn("?", lines[3])

    def test_describe_event(self):
        self.assertEqual(describe_event(TraceEvent(SOLUTION, (1, 3, 0, 2))), "solution: 1 3 0 2")
        self.assertIn("backtrack", describe_event(TraceEvent(BACKTRACK, (UNSET,), 0, 0)))

    def test_play_trace_paces_frames(self):
        out = io.StringIO()
        pauses = []
        shown = play_trace(search(1, "array"), delay=0.1, stream=out, sleep=pauses.append)
        self.assertEqual(shown, 4)
        self.assertEqual(len(pauses), 4)
        self.assertAlmostEqual(pauses[1], 0.1)
        self.assertAlmostEqual(pauses[2], 0.1 * (1 + settings.SOLUTION_PAUSE_FACTOR))
        self.assertIn("solutions so far: 1", out.getvalue())

    def test_play_trace_limit(self):
        out = io.StringIO()
        shown = play_trace(iter_search(8, "bitmask"), delay=0, stream=out, limit=10)
        self.assertEqual(shown, 10)

    def test_render_solutions(self):
        out = io.StringIO()
        self.assertEqual(render_solutions([(1, 3, 0, 2), (2, 0, 3, 1)], stream=out), 2)
        with self.assertRaises(ValueError):
            render_solutions([(1, UNSET)], stream=out)


class ConfigTests(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "config.json"
        self.saved = {name: getattr(settings, name) for name in SAVED_SETTINGS}
        self.stdout = mock.patch("sys.stdout", io.StringIO())
        self.stdout.start()

    def tearDown(self):
        self.stdout.stop()
        for name, value in self.saved.items():
            setattr(settings, name, value)
        self.tmpdir.cleanup()

    def _write(self, data):
        self.path.write_text(json.dumps(data))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            ConfigManager(self.path)

    def test_update_setting_persists(self):
        self._write({})
        manager = ConfigManager(self.path)
        manager.update_setting("visualizer_settings", "default_n", 6)
        self.assertEqual(ConfigManager(self.path).get_visualizer_settings(), {"default_n": 6})

    def test_apply_configuration(self):
        self._write({
            "visualizer_settings": {"default_n": 6, "strategy": "Bitmask", "emit_attempts": False, "playback_delay": 5},
            "benchmark_settings": {"N_values": [6, 4, 4], "strategies": ["bitmask"], "runs_per_size": 2},
        })
        cli.apply_configuration(str(self.path))
        self.assertEqual(settings.DEFAULT_N, 6)
        self.assertEqual(settings.DEFAULT_STRATEGY, "bitmask")
        self.assertFalse(settings.EMIT_ATTEMPTS)
        self.assertEqual(settings.PLAYBACK_DELAY, settings.MAX_PLAYBACK_DELAY)
        self.assertEqual(settings.N_VALUES, [4, 6])
        self.assertEqual(settings.STRATEGIES, ["bitmask"])
        self.assertEqual(settings.RUNS_PER_SIZE, 2)

    def test_apply_configuration_rejects_bad_values(self):
        self._write({"visualizer_settings": {"default_n": 0}})
        with self.assertRaises(ValueError):
            cli.apply_configuration(str(self.path))
        self._write({"benchmark_settings": {"strategies": ["dlx"]}})
        with self.assertRaises(ValueError):
            cli.apply_configuration(str(self.path))


class CliTests(unittest.TestCase):

    def setUp(self):
        self.saved = {name: getattr(settings, name) for name in SAVED_SETTINGS}

    def tearDown(self):
        for name, value in self.saved.items():
            setattr(settings, name, value)

    def _run(self, argv):
        buffer = io.StringIO()
        with mock.patch("sys.stdout", buffer):
            cli.main(argv)
        return buffer.getvalue()

    def test_parse_filters(self):
        self.assertEqual(cli.parse_strategy_filters(["array,BITMASK", "array"]), ["array", "bitmask"])
        self.assertIsNone(cli.parse_strategy_filters(None))
        self.assertEqual(cli.parse_sizes(["8,4", "4"]), [4, 8])
        with self.assertRaises(ValueError):
            cli.parse_strategy_filters(["dlx"])

    def test_count_only(self):
        output = self._run(["--n", "8", "--strategy", "bitmask", "--count-only", "--config", str(ROOT / "config.json")])
        self.assertIn("92 solution(s)", output)

    def test_trace_summary_with_validation(self):
        output = self._run(["-n", "5", "--no-attempts", "--validate", "--config", str(ROOT / "config.json")])
        self.assertIn("attempt=0", output)
        self.assertIn("solution=10", output)
        self.assertIn("Trace validated.", output)

    def test_playback_starts_without_counting_the_board(self):
        with mock.patch.object(cli, "timed_count") as counter, mock.patch("sys.stdout", io.StringIO()) as out:
            seen = cli.run_single(20, "bitmask", True, play=True, delay=0, limit=3)
        counter.assert_not_called()
        self.assertEqual(seen, 0)
        self.assertIn("Played 3 step(s), 0 solution(s) shown.", out.getvalue())

    def test_playback_reports_solutions_it_showed(self):
        with mock.patch.object(cli, "timed_count") as counter, mock.patch("sys.stdout", io.StringIO()):
            seen = cli.run_single(4, "array", False, play=True, delay=0)
        counter.assert_not_called()
        self.assertEqual(seen, 2)

    def test_trace_mode_counts_from_events(self):
        with mock.patch.object(cli, "timed_count") as counter, mock.patch("sys.stdout", io.StringIO()) as out:
            solutions = cli.run_single(6, "bitmask", False)
        counter.assert_not_called()
        self.assertEqual(solutions, 4)
        self.assertIn("solution=4", out.getvalue())

    def test_mode_flags(self):
        parser = cli.build_arg_parser()
        args = parser.parse_args([
            "-n", "6", "--trace", "--attempts", "--show-solutions", "--sizes", "4,5", "--runs", "2",
            "--out-dir", "out", "--limit", "7",
        ])
        self.assertTrue(args.trace)
        self.assertTrue(args.emit_attempts)
        self.assertEqual((args.sizes, args.runs, args.out_dir, args.limit), (["4,5"], 2, "out", 7))
        self.assertIsNone(parser.parse_args([]).emit_attempts)
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                parser.parse_args(["--trace", "--play"])
            with self.assertRaises(SystemExit):
                parser.parse_args(["--count-only", "--trace"])

    def test_explicit_trace_flag(self):
        output = self._run(["-n", "4", "--trace", "--attempts", "--config", str(ROOT / "config.json")])
        self.assertIn("solution=2", output)
        self.assertNotIn("attempt=0", output)

    def test_invalid_size_exits_with_status_one(self):
        with self.assertRaises(SystemExit) as ctx:
            self._run(["--n", "0", "--config", str(ROOT / "config.json")])
        self.assertEqual(ctx.exception.code, 1)

    def test_missing_config_exits_with_status_one(self):
        with self.assertRaises(SystemExit) as ctx:
            self._run(["--config", str(ROOT / "does-not-exist.json")])
        self.assertEqual(ctx.exception.code, 1)

    def test_benchmark_pipeline(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output = self._run([
                "--benchmark", "--sizes", "4,5", "--runs", "1", "--out-dir", tmpdir,
                "--validate", "--config", str(ROOT / "config.json"),
            ])
            self.assertIn("Benchmark completed", output)
            self.assertTrue(any(name.startswith("benchmark_counts") for name in os.listdir(tmpdir)))


if __name__ == "__main__":
    unittest.main()
