# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for the layered option merge."""

import unittest

from tagbuild.lib._util.config_stack import ConfigScope, ConfigStack, deep_merge


class DeepMergeTests(unittest.TestCase):
    def test_scalar_override_keeps_other_keys(self) -> None:
        base = {"docker_repository": "a", "push": False}
        self.assertEqual(
            deep_merge(base, {"push": True}), {"docker_repository": "a", "push": True}
        )

    def test_none_deletes_key(self) -> None:
        merged = deep_merge({"tag_prefix": "v", "push": True}, {"push": None})
        self.assertEqual(merged, {"tag_prefix": "v"})

    def test_list_replacement(self) -> None:
        merged = deep_merge({"additional_tags": ["latest"]}, {"additional_tags": ["edge"]})
        self.assertEqual(merged, {"additional_tags": ["edge"]})

    def test_list_inherit_splices_base(self) -> None:
        merged = deep_merge(
            {"additional_tags": ["latest"]}, {"additional_tags": ["stable", "_inherit", "edge"]}
        )
        self.assertEqual(merged, {"additional_tags": ["stable", "latest", "edge"]})

    def test_list_inherit_without_base_list(self) -> None:
        merged = deep_merge({}, {"additional_tags": ["_inherit", "edge"]})
        self.assertEqual(merged, {"additional_tags": ["edge"]})

    def test_nested_dicts_merge(self) -> None:
        merged = deep_merge({"x": {"a": 1, "b": 2}}, {"x": {"_inherit": True, "b": 3}})
        self.assertEqual(merged, {"x": {"a": 1, "b": 3}})

    def test_inputs_are_not_mutated(self) -> None:
        base = {"additional_tags": ["latest"]}
        deep_merge(base, {"additional_tags": ["_inherit", "edge"]})
        self.assertEqual(base, {"additional_tags": ["latest"]})


class ConfigStackTests(unittest.TestCase):
    def test_resolve_and_provenance(self) -> None:
        stack = ConfigStack()
        stack.push(ConfigScope("global", None, {"push": True, "tag_prefix": "v"}))
        stack.push(ConfigScope("project", None, {"tag_prefix": "rel-"}))
        stack.push(ConfigScope("cli", None, {"push": None}))
        self.assertEqual(stack.resolve(), {"tag_prefix": "rel-"})
        self.assertEqual(stack.provenance(), {"tag_prefix": "project"})
        self.assertEqual([s.level for s in stack.scopes], ["global", "project", "cli"])

