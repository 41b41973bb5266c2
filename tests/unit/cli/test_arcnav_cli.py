"""CLI entrypoint tests.

Verifies option/config merging, the non-interactive walk, and how failures
surface as process exits. Adapters are replaced with the in-memory double.
"""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from arcnav import cli, config
from arcnav.errors import ArcgisRequestError

from navigation_fakes import FakeAdapters, server_tree

SERVER_URL = "https://gis.example.com/arcgis"


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.config_path = Path(tmp.name) / "config.json"
        patcher = mock.patch("arcnav.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.adapters = FakeAdapters()

    def run_main(self, argv: list[str]) -> tuple[str, mock.MagicMock]:
        stdout = io.StringIO()
        with mock.patch("arcnav.cli.build_adapters", return_value=self.adapters) as build, mock.patch(
            "sys.stdout", stdout
        ):
            cli.main(argv)
        return stdout.getvalue(), build


class CliBrowseTests(CliTestCase):
    def test_root_listing_is_printed(self) -> None:
        output, build = self.run_main(["--server-url", SERVER_URL])

        lines = output.splitlines()
        self.assertEqual(lines[0], "scope: server")
        self.assertIn("*[0] server root", lines)
        self.assertIn("  > Hydro  [folder]", lines)
        self.assertIn("    Parcels  [service]", lines)
        self.assertTrue(self.adapters.closed)
        self.assertEqual(build.call_args.kwargs["server_url"], SERVER_URL)
        self.assertEqual(build.call_args.kwargs["timeout"], 30.0)

    def test_path_walk_enters_named_entries(self) -> None:
        output, _build = self.run_main(["--server-url", SERVER_URL, "--path", "parcels"])

        lines = output.splitlines()
        self.assertIn("path: Parcels", lines)
        self.assertIn(" [0] server root", lines)
        self.assertIn("*[1] Parcels", lines)
        self.assertIn("  > Parcels  [layer]", lines)
        self.assertIn("    Owners  [table]", lines)

    def test_unknown_path_name_stops_at_root(self) -> None:
        with self.assertLogs("arcnav.notices", level="WARNING") as captured:
            output, _build = self.run_main(["--server-url", SERVER_URL, "--path", "Nope"])

        self.assertNotIn("path:", output)
        self.assertIn("No entry named 'Nope' at depth 0", captured.output[0])

    def test_filter_applies_to_active_column(self) -> None:
        output, _build = self.run_main(["--server-url", SERVER_URL, "--path", "Parcels", "--filter", "table"])

        self.assertIn("*[1] Parcels  filter='table'", output)
        self.assertIn("  > Owners  [table]", output)
        self.assertNotIn("Lots", output)

    def test_inspect_prints_selected_node_json(self) -> None:
        output, _build = self.run_main(["--server-url", SERVER_URL, "--path", "Parcels", "--inspect", "--no-color"])

        payload = json.loads(output[output.index("{"):])
        self.assertEqual(payload["kind"], "layer")
        self.assertEqual(payload["name"], "Parcels")


class CliKeyReplayTests(CliTestCase):
    def test_keys_drive_navigation_after_path(self) -> None:
        output, _build = self.run_main(["--server-url", SERVER_URL, "--keys", "j,l,G"])

        lines = output.splitlines()
        self.assertIn("path: Parcels", lines)
        self.assertIn("*[1] Parcels", lines)
        self.assertIn("  > Owners  [table]", lines)

    def test_inspector_key_prints_detail_block(self) -> None:
        output, _build = self.run_main(["--server-url", SERVER_URL, "--path", "Parcels", "--keys", "i", "--no-color"])

        payload = json.loads(output[output.index("{"):])
        self.assertEqual(payload["name"], "Parcels")
        self.assertEqual(payload["kind"], "layer")

    def test_unbound_key_is_reported_and_replay_continues(self) -> None:
        with self.assertLogs("arcnav.notices", level="WARNING"):
            output, _build = self.run_main(["--server-url", SERVER_URL, "--keys", "z,j"])

        self.assertIn("[warn] Key 'z' did nothing here", output)
        self.assertIn("    Hydro  [folder]", output)
        self.assertIn("  > Parcels  [service]", output)

    def test_help_keys_lists_bindings(self) -> None:
        output, _build = self.run_main(["--server-url", SERVER_URL, "--help-keys"])

        help_block = output[output.index("keys:\n"):]
        self.assertIn("Move selection down", help_block)
        self.assertIn("j, down", help_block)
        self.assertIn("Toggle inspector", help_block)

    def test_empty_keys_value_is_rejected(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit):
            cli.main(["--server-url", SERVER_URL, "--keys", " , "])


class CliConfigTests(CliTestCase):
    def test_missing_host_exits_with_hint(self) -> None:
        with self.assertRaises(SystemExit) as caught:
            self.run_main([])
        self.assertEqual(str(caught.exception), "No server host configured; pass --server-url.")

    def test_saved_config_supplies_scope_and_host(self) -> None:
        config.save_config({"scope": "portal", "portal_url": "https://gis.example.com/portal", "timeout_seconds": 7})

        output, build = self.run_main([])

        self.assertTrue(output.startswith("scope: portal\n"))
        self.assertIn("  > Users  [users]", output)
        self.assertEqual(build.call_args.kwargs["portal_url"], "https://gis.example.com/portal")
        self.assertEqual(build.call_args.kwargs["timeout"], 7.0)

    def test_save_flag_persists_options(self) -> None:
        self.run_main(["--server-url", SERVER_URL, "--scope", "server", "--save"])

        saved = config.load_config()
        self.assertEqual(saved["server_url"], SERVER_URL)
        self.assertEqual(saved["scope"], "server")

    def test_without_save_nothing_is_written(self) -> None:
        self.run_main(["--server-url", SERVER_URL])
        self.assertFalse(self.config_path.exists())

    def test_invalid_timeout_is_rejected(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit):
            cli.main(["--server-url", SERVER_URL, "--timeout", "0"])


class CliFailureTests(CliTestCase):
    def setUp(self) -> None:
        super().setUp()
        levels = server_tree()
        levels["server-root"] = ArcgisRequestError("Invalid token.", code=498)
        self.adapters = FakeAdapters(levels)

    def test_root_failure_exits_with_message(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit) as caught:
            self.run_main(["--server-url", SERVER_URL])

        self.assertEqual(str(caught.exception), "Failed to load server root: Invalid token.")
        self.assertTrue(self.adapters.closed)


if __name__ == "__main__":
    unittest.main()
