from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from debug_graphs.errors import DebugGraphError, GraphConfigError
from debug_graphs.options import GraphSettings, create_options, load_config, merge_settings, parse_color


class GraphOptionsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        opts = create_options()
        self.assertEqual((opts.graph_width, opts.graph_height), (75, 25))
        self.assertEqual(opts.mode, "buffered")
        self.assertEqual(opts.header_height, 7)

    def test_pixel_ratio_scales_canvas(self) -> None:
        opts = create_options({"pixel_ratio": 2})
        self.assertEqual((opts.canvas_width, opts.canvas_height), (150, 50))
        self.assertEqual(opts.padding, 2)

    def test_none_values_keep_defaults(self) -> None:
        opts = create_options({"mode": None, "pixel_ratio": None})
        self.assertEqual(opts.mode, "buffered")
        self.assertEqual(opts.pixel_ratio, 1)

    def test_unknown_option_is_rejected(self) -> None:
        with self.assertRaisesRegex(GraphConfigError, "graph_widht"):
            create_options({"graph_widht": 10})

    def test_unknown_mode_is_rejected(self) -> None:
        with self.assertRaises(GraphConfigError):
            create_options({"mode": "gpu"})

    def test_config_errors_are_value_errors(self) -> None:
        with self.assertRaises(ValueError):
            create_options({"mode": "gpu"})
        self.assertTrue(issubclass(GraphConfigError, DebugGraphError))


class GraphSettingsTests(unittest.TestCase):
    def test_caller_fields_override_mode_defaults(self) -> None:
        settings = merge_settings({"title": "Heap", "foreground": "#00FF00"}, mode="incremental")
        self.assertEqual(settings.title, "Heap")
        self.assertEqual(settings.foreground_rgba, (0, 255, 0, 255))
        self.assertEqual(settings.background_rgba, (255, 0, 0, 255))

    def test_accepts_settings_instance(self) -> None:
        settings = merge_settings(GraphSettings(title="x", style="fill"))
        self.assertEqual(settings.style, "fill")

    def test_settings_instance_keeps_mode_defaults_for_untouched_fields(self) -> None:
        settings = merge_settings(GraphSettings(title="A"), mode="incremental")
        self.assertEqual(settings.title, "A")
        self.assertEqual(settings.background_rgba, (255, 0, 0, 255))
        self.assertEqual(settings.foreground_rgba, (0, 0, 255, 255))
        self.assertFalse(settings.show_range)

    def test_unknown_setting_is_rejected(self) -> None:
        with self.assertRaisesRegex(GraphConfigError, "colour"):
            merge_settings({"colour": "#FFFFFF"})

    def test_bad_style_is_rejected(self) -> None:
        with self.assertRaises(GraphConfigError):
            merge_settings({"style": "bars"})

    def test_colors(self) -> None:
        self.assertEqual(parse_color("#11223344"), (0x11, 0x22, 0x33, 0x44))
        self.assertEqual(parse_color((1, 2, 3)), (1, 2, 3, 255))
        for bad in ("red", "#12345", (1, 2), (0, 0, 300)):
            with self.subTest(bad=bad), self.assertRaises(GraphConfigError):
                parse_color(bad)


class LoadConfigTests(unittest.TestCase):
    def _write(self, text: str) -> Path:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        path = Path(tmp.name) / "graphs.toml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_loads_options_and_graphs(self) -> None:
        path = self._write('[options]\npixel_ratio = 2\n\n[graphs.fps]\ntitle = "FPS"\nstyle = "fill"\n')
        config = load_config(path)
        self.assertEqual(config.options.pixel_ratio, 2)
        self.assertEqual(config.graphs, {"fps": {"title": "FPS", "style": "fill"}})

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config(Path(tempfile.gettempdir()) / "no-such-debug-graphs.toml")

    def test_invalid_toml(self) -> None:
        path = self._write("[options\n")
        with self.assertRaisesRegex(GraphConfigError, "invalid graph config"):
            load_config(path)

    def test_unknown_table(self) -> None:
        path = self._write("[plots.fps]\ntitle = 'x'\n")
        with self.assertRaisesRegex(GraphConfigError, "plots"):
            load_config(path)

    def test_graph_tables_are_validated_eagerly(self) -> None:
        path = self._write("[graphs.fps]\nforeground = 'magenta'\n")
        with self.assertRaises(GraphConfigError):
            load_config(path)

    def test_graph_entry_must_be_a_table(self) -> None:
        path = self._write("[graphs]\nfps = 3\n")
        with self.assertRaisesRegex(GraphConfigError, "graphs.fps"):
            load_config(path)


if __name__ == "__main__":
    unittest.main()
