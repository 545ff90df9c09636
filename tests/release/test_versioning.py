# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for version arithmetic and publish plans.
"""

import pytest

from binship.errors import InvalidVersionError
from binship.release.versioning import PublishPlan, compute_version, make_plan, parse_version


class TestComputeVersion:
    @pytest.mark.parametrize(
        ("bump", "expected"),
        [("patch", "1.2.4"), ("minor", "1.3.0"), ("major", "2.0.0")],
    )
    def test_bump_classes(self, bump: str, expected: str) -> None:
        """patch, minor and major bump the right component."""
        assert compute_version(bump, "1.2.3") == expected

    def test_explicit_version_wins(self) -> None:
        """An explicit version is used as-is."""
        assert compute_version("9.9.9", "1.0.0") == "9.9.9"

    def test_explicit_version_may_go_backwards(self) -> None:
        """Explicit versions are not required to increase."""
        assert compute_version("0.1.0", "1.0.0") == "0.1.0"

    def test_multi_digit_components(self) -> None:
        """Test that components are compared as numbers, not digits."""
        assert compute_version("patch", "10.20.99") == "10.20.100"

    @pytest.mark.parametrize(
        "bad",
        ["1.2", "1.2.3.4", "v1.2.3", "1.2.3-beta", "1.x.3", "", "1.2.3\n", "\u0661.\u0662.\u0663"],
    )
    def test_malformed_explicit_version(self, bad: str) -> None:
        """Anything but ASCII major.minor.patch is rejected."""
        with pytest.raises(InvalidVersionError):
            compute_version(bad, "1.0.0")

    def test_unknown_bump_class(self) -> None:
        """An unknown bump class is named in the error."""
        with pytest.raises(InvalidVersionError, match="prerelease"):
            compute_version("prerelease", "1.0.0")

    def test_unbumpable_current_version(self) -> None:
        """A malformed current version cannot be bumped."""
        with pytest.raises(InvalidVersionError, match="1.0"):
            compute_version("patch", "1.0")

    def test_non_ascii_current_version_is_not_bumped(self) -> None:
        """Non-ASCII digits in the current version are rejected."""
        with pytest.raises(InvalidVersionError):
            compute_version("patch", "\u0661.\u0662.\u0663")


class TestParseVersion:
    def test_parses_components(self) -> None:
        """Test that parse_version returns three ints."""
        assert parse_version("3.14.15") == (3, 14, 15)


class TestMakePlan:
    def test_defaults(self) -> None:
        """A plan defaults to a real publish under latest with a build."""
        assert make_plan("minor", "1.2.3") == PublishPlan(version="1.3.0")

    def test_carries_flags(self) -> None:
        """Flags are carried into the plan."""
        plan = make_plan("2.0.0", "1.2.3", dry_run=True, tag="beta", skip_build=True)
        assert plan == PublishPlan(version="2.0.0", dry_run=True, tag="beta", skip_build=True)

    def test_invalid_version_fails_before_plan_exists(self) -> None:
        """make_plan raises instead of returning a bad plan."""
        with pytest.raises(InvalidVersionError):
            make_plan("1.2", "1.2.3")
