# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import os
import tempfile
import unittest
import unittest.mock
from pathlib import Path

from tagbuild.lib.core.config import find_workspace_root, global_config_path, load_global_config
from tagbuild.lib.core.errors import MissingProjectConfig, WorkspaceConfigError
from tagbuild.lib.core.options import load_options, options_from_mapping, options_stack
from tagbuild.lib.core.projects import load_workspace
from test_utils import workspace_env


class WorkspaceTests(unittest.TestCase):
    def test_load_workspace_projects_and_targets(self) -> None:
        yaml = """\
projects:
  web:
    root: apps/web
    targets:
      build:
        command: [npm, run, build]
        env:
          NODE_ENV: production
      lint: npm run lint
"""
        with workspace_env(yaml) as env:
            ws = load_workspace()
            self.assertEqual(ws.root, env.root)
            web = ws.project("web")
            self.assertEqual(web.root, env.root / "apps" / "web")
            self.assertEqual(web.targets["build"].command, ["npm", "run", "build"])
            self.assertEqual(web.targets["build"].env, {"NODE_ENV": "production"})
            self.assertEqual(web.targets["lint"].command, ["npm", "run", "lint"])

    def test_project_root_defaults_to_id(self) -> None:
        with workspace_env("projects:\n  api: {}\n") as env:
            self.assertEqual(load_workspace().project("api").root, env.root / "api")

    def test_unknown_project(self) -> None:
        with workspace_env():
            with self.assertRaises(MissingProjectConfig) as ctx:
                load_workspace().project("non-existent-app")
            self.assertIn("non-existent-app", str(ctx.exception))
            self.assertIn("test-app", str(ctx.exception))

    def test_malformed_yaml(self) -> None:
        with workspace_env("projects:\n  web: [unclosed\n"):
            with self.assertRaises(WorkspaceConfigError) as ctx:
                load_workspace()
            self.assertIn("Failed to parse", str(ctx.exception))

    def test_invalid_target_command(self) -> None:
        with workspace_env("projects:\n  web:\n    targets:\n      build: {command: ''}\n"):
            with self.assertRaises(WorkspaceConfigError):
                load_workspace()

    def test_invalid_project_id(self) -> None:
        with workspace_env("projects:\n  ../evil: {}\n"):
            with self.assertRaises(WorkspaceConfigError):
                load_workspace()

    def test_find_workspace_root_searches_upward(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td).resolve()
            (root / "workspace.yml").write_text("projects: {}\n", encoding="utf-8")
            nested = root / "apps" / "web" / "src"
            nested.mkdir(parents=True)
            env = {k: v for k, v in os.environ.items() if k != "TAGBUILD_WORKSPACE"}
            with unittest.mock.patch.dict(os.environ, env, clear=True):
                self.assertEqual(find_workspace_root(nested), root)

    def test_find_workspace_root_env_without_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with unittest.mock.patch.dict(os.environ, {"TAGBUILD_WORKSPACE": td}):
                with self.assertRaises(WorkspaceConfigError):
                    find_workspace_root()


class GlobalConfigTests(unittest.TestCase):
    def test_explicit_config_file_returned_even_if_missing(self) -> None:
        with workspace_env() as env:
            self.assertEqual(global_config_path(), env.config_file.resolve())
            self.assertEqual(load_global_config(), {})

    def test_non_mapping_global_config(self) -> None:
        with workspace_env(global_config="- just\n- a list\n"):
            with self.assertRaises(WorkspaceConfigError):
                load_global_config()


class OptionsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        with workspace_env():
            options = load_options(load_workspace().project("test-app"))
            self.assertEqual(options.app_name, "test-app")
            self.assertEqual(options.docker_repository, "test-repo")
            self.assertEqual(options.build_target, "build")
            self.assertEqual(options.dockerfile, "Dockerfile")
            self.assertEqual(options.context, ".")
            self.assertFalse(options.push)
            self.assertFalse(options.generate_major_minor)
            self.assertEqual(options.additional_tags, ())
            self.assertEqual(options.tag_prefix, "v")
            self.assertEqual(options.manifest, "package.json")
            self.assertEqual(options.builder, ("docker", "buildx", "build"))

    def test_camel_case_keys_are_accepted(self) -> None:
        options = options_from_mapping(
            {
                "appName": "web",
                "dockerRepository": "ghcr.io/acme",
                "buildTarget": "build",
                "generateMajorMinor": True,
                "additionalTags": ["latest"],
                "tagPrefix": "release-",
            }
        )
        self.assertEqual(options.docker_repository, "ghcr.io/acme")
        self.assertTrue(options.generate_major_minor)
        self.assertEqual(options.additional_tags, ("latest",))
        self.assertEqual(options.resolution_config().tag_prefix, "release-")

    def test_missing_required(self) -> None:
        with self.assertRaises(WorkspaceConfigError) as ctx:
            options_from_mapping({"app_name": "web", "build_target": "build"})
        self.assertIn("docker_repository", str(ctx.exception))

    def test_unknown_option(self) -> None:
        with self.assertRaises(WorkspaceConfigError) as ctx:
            options_from_mapping(
                {"app_name": "a", "docker_repository": "r", "build_target": "b", "pushh": True}
            )
        self.assertIn("pushh", str(ctx.exception))

    def test_bad_types(self) -> None:
        base = {"app_name": "a", "docker_repository": "r", "build_target": "b"}
        for key, value in (
            ("push", "maybe"),
            ("additional_tags", "latest"),
            ("builder", []),
            ("dockerfile", {"x": 1}),
        ):
            with self.subTest(key=key):
                with self.assertRaises(WorkspaceConfigError):
                    options_from_mapping({**base, key: value})

    def test_builder_string_is_split(self) -> None:
        options = options_from_mapping(
            {"app_name": "a", "docker_repository": "r", "build_target": "b", "builder": "podman build"}
        )
        self.assertEqual(options.builder, ("podman", "build"))

    def test_layering_global_project_cli(self) -> None:
        yaml = """\
projects:
  web:
    tag-and-build:
      build_target: build
      additionalTags: [edge]
"""
        global_cfg = """\
tag_and_build:
  docker_repository: registry.example.com/team
  push: true
  additional_tags: [latest]
"""
        with workspace_env(yaml, global_config=global_cfg):
            project = load_workspace().project("web")
            options = load_options(
                project, {"push": False, "additional_tags": ["_inherit", "nightly"]}
            )
            self.assertEqual(options.docker_repository, "registry.example.com/team")
            self.assertFalse(options.push)
            self.assertEqual(options.additional_tags, ("edge", "nightly"))

            origin = options_stack(project, {"push": False}).provenance()
            self.assertEqual(origin["docker_repository"], "global")
            self.assertEqual(origin["build_target"], "project")
            self.assertEqual(origin["push"], "cli")
            self.assertEqual(origin["app_name"], "default")

    def test_app_name_rejected_in_project_block(self) -> None:
        yaml = """\
projects:
  web:
    tag-and-build:
      appName: frontend
      docker_repository: r
      build_target: build
"""
        with workspace_env(yaml):
            project = load_workspace().project("web")
            with self.assertRaises(WorkspaceConfigError) as ctx:
                load_options(project)
            self.assertIn("app_name", str(ctx.exception))
            self.assertIn("'web'", str(ctx.exception))

    def test_app_name_rejected_in_global_section(self) -> None:
        with workspace_env(global_config="tag_and_build:\n  app_name: other\n"):
            project = load_workspace().project("test-app")
            with self.assertRaises(WorkspaceConfigError):
                options_stack(project)
