"""Tests for template loading and positional substitution."""

from __future__ import annotations

import pytest

from fleetcmd.exceptions import TemplateError
from fleetcmd.services.template import (
    check_template,
    join_commands,
    load_template,
    placeholder_count,
    render_command,
    split_command,
)

VLAN_TEMPLATE = [
    "configure",
    "set vlans {0} vlan-id {1}",
    "set interfaces ge-0/0/10 unit 0 family ethernet-switching vlan members {0}",
    "commit and-quit",
]


class TestPlaceholders:
    def test_no_placeholders(self):
        assert placeholder_count(["show version", "show chassis alarms"]) == 0

    def test_highest_index_wins(self):
        assert placeholder_count(["set a {0}", "set b {2}"]) == 3

    def test_repeated_index_counted_once(self):
        assert placeholder_count(["{0} {0} {1}"]) == 2

    def test_junos_braces_are_not_placeholders(self):
        assert placeholder_count(["interfaces { ge-0/0/0 { disable; } }"]) == 0


class TestCheckTemplate:
    def test_static_template_fits_any_inventory(self):
        check_template(["show version"], 0)
        check_template(["show version"], 3)

    def test_exact_match(self):
        check_template(VLAN_TEMPLATE, 2)

    def test_more_placeholders_than_columns(self):
        with pytest.raises(TemplateError, match="2 positional"):
            check_template(VLAN_TEMPLATE, 1)

    def test_fewer_placeholders_than_columns(self):
        with pytest.raises(TemplateError):
            check_template(VLAN_TEMPLATE, 3)

    def test_placeholders_without_columns(self):
        with pytest.raises(TemplateError):
            check_template(["set vlans {0}"], 0)


class TestRender:
    def test_verbatim_join_without_params(self):
        cmd = render_command(["show version", "show chassis alarms"], [])
        assert cmd == "show version;show chassis alarms"

    def test_substitution_preserves_order(self):
        cmd = render_command(["set {0} then {1}"], ["a", "b"])
        assert cmd == "set a then b"
        assert cmd.index("a") < cmd.index("b")

    def test_reversed_placeholders(self):
        assert render_command(["{1}-{0}"], ["a", "b"]) == "b-a"

    def test_full_template(self):
        cmd = render_command(VLAN_TEMPLATE, ["users", "100"])
        assert cmd.split(";") == [
            "configure",
            "set vlans users vlan-id 100",
            "set interfaces ge-0/0/10 unit 0 family ethernet-switching vlan members users",
            "commit and-quit",
        ]

    def test_idempotent(self):
        assert render_command(VLAN_TEMPLATE, ["v", "1"]) == render_command(VLAN_TEMPLATE, ["v", "1"])

    def test_substitution_is_textual(self):
        cmd = render_command(["set system host-name {0}"], ["x; request system reboot"])
        assert cmd == "set system host-name x; request system reboot"

    def test_literal_braces_untouched(self):
        assert render_command(["set {0} { }"], ["x"]) == "set x { }"

    def test_missing_value_raises(self):
        with pytest.raises(TemplateError, match=r"\{2\}"):
            render_command(["{2}"], ["a"])

    def test_custom_separator(self):
        assert join_commands(["a", "b"], separator=" | ") == "a | b"

    def test_split_inverts_join(self):
        assert split_command(join_commands(["show a", "show b"])) == ["show a", "show b"]

    def test_split_keeps_separator_inside_statement(self):
        cmd = render_command(["set system host-name {0}", "commit"], ["x; request system reboot"])
        assert split_command(cmd) == ["set system host-name x; request system reboot", "commit"]

    def test_split_plain_string(self):
        assert split_command("show a;show b") == ["show a", "show b"]


class TestLoadTemplate:
    def test_blank_lines_dropped(self, write_file):
        path = write_file("t.txt", "configure\n\nset vlans {0}\n   \ncommit\n")
        assert load_template(path) == ["configure", "set vlans {0}", "commit"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(TemplateError, match="Cannot read"):
            load_template(tmp_path / "missing.txt")

    def test_empty_file(self, write_file):
        with pytest.raises(TemplateError, match="empty"):
            load_template(write_file("t.txt", "\n\n"))
