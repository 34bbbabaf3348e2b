"""Tests for version parsing, ordering, matching and release filters."""
import itertools

import pytest

from common.errors import InvalidVersion
from versioning import FilterMode, ReleaseFilter, compare, has_prefix, matches, parse, parse_filter


SAMPLES = [
    "1.0.0.dev1",
    "1.0.0a1",
    "1.0.0b2",
    "1.0.0rc1",
    "1.0.0",
    "1.0.0+local.1",
    "1.0.0.post1",
    "1.0.1",
    "1.1.0",
    "1!0.5",
]


class TestParse:
    """parse() accepts PEP 440 versions and rejects everything else."""

    @pytest.mark.parametrize("text", SAMPLES + ["2.30", "v1.2", "1.0-rc.1"])
    def test_reparse_canonical_form_is_equal(self, text):
        version = parse(text)
        assert parse(str(version)) == version

    def test_canonical_form_is_normalized(self):
        assert str(parse("1.0-RC.1")) == "1.0rc1"

    @pytest.mark.parametrize("text", ["", "   ", "not a version", "1.0.0-", None])
    def test_invalid_input_raises(self, text):
        with pytest.raises(InvalidVersion):
            parse(text)

    def test_invalid_version_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse("banana")

    def test_components(self):
        version = parse("1!2.3.4rc1.post2.dev3+ubuntu.1")
        assert version.epoch == 1
        assert version.release == (2, 3, 4)
        assert version.pre == ("rc", 1)
        assert version.post == 2
        assert version.dev == 3
        assert version.local == "ubuntu.1"
        assert version.public == "1!2.3.4rc1.post2.dev3"
        assert version.is_prerelease


class TestOrdering:
    """Versions follow standard public precedence."""

    def test_release_segments(self):
        assert parse("1.0.0") < parse("1.0.1") < parse("1.1.0")

    def test_pre_and_post_releases(self):
        assert parse("1.0.0a1") < parse("1.0.0") < parse("1.0.0.post1")

    def test_dev_before_pre(self):
        assert parse("1.0.0.dev1") < parse("1.0.0a1")

    def test_missing_trailing_components_are_zero(self):
        assert compare(parse("1.0"), parse("1.0.0")) == 0

    def test_epoch_wins(self):
        assert parse("1!0.5") > parse("99.0")

    def test_compare_is_a_strict_total_order(self):
        versions = [parse(v) for v in SAMPLES]
        for a, b in itertools.product(versions, repeat=2):
            assert compare(a, b) == -compare(b, a)
            assert compare(a, b) in (-1, 0, 1)
        for a, b, c in itertools.product(versions, repeat=3):
            if compare(a, b) <= 0 and compare(b, c) <= 0:
                assert compare(a, c) <= 0

    def test_sorting_matches_compare(self):
        versions = sorted(parse(v) for v in reversed(SAMPLES))
        for earlier, later in zip(versions, versions[1:]):
            assert compare(earlier, later) <= 0


class TestLocalLabels:
    """Local labels keep versions distinct but do not affect public precedence."""

    def test_local_variants_are_distinct(self):
        plain, local = parse("1.0.0"), parse("1.0.0+cpu")
        assert plain != local
        assert len({plain, local}) == 2

    def test_local_variants_compare_equal_publicly(self):
        assert compare(parse("1.0.0+cpu"), parse("1.0.0+gpu")) == 0

    def test_local_variant_sorts_after_public(self):
        assert parse("1.0.0") < parse("1.0.0+cpu") < parse("1.0.1")


class TestMatches:
    """Constraint evaluation without side effects."""

    def test_conjunction(self):
        assert matches(parse("2.6"), "<4,>=2.5")
        assert not matches(parse("4.0"), "<4,>=2.5")

    def test_empty_constraint_matches_everything(self):
        assert matches(parse("0.1"), "")
        assert matches(parse("0.1"), None)

    def test_prereleases_are_eligible(self):
        assert matches(parse("3.0rc1"), ">=2")

    def test_local_label_ignored_for_matching(self):
        assert matches(parse("1.0.0+cpu"), "==1.0.0")

    def test_bad_constraint_raises(self):
        with pytest.raises(InvalidVersion):
            matches(parse("1.0"), ">>1")


class TestPrefixAndFilters:
    """Prefix matching and user filters."""

    def test_has_prefix(self):
        assert has_prefix(parse("2.30.1"), (2, 30))
        assert not has_prefix(parse("2.3.1"), (2, 30))
        assert has_prefix(parse("2"), (2, 0))

    def test_parse_filter_defaults_to_latest(self):
        assert parse_filter(None).mode is FilterMode.LATEST
        assert parse_filter("").mode is FilterMode.LATEST
        assert parse_filter("latest").mode is FilterMode.LATEST

    def test_parse_filter_exact(self):
        release_filter = parse_filter("2.30")
        assert release_filter.mode is FilterMode.EXACT
        assert release_filter.version == parse("2.30")

    def test_parse_filter_rejects_garbage(self):
        with pytest.raises(InvalidVersion):
            parse_filter("two.thirty")

    def test_plain_numeric_filter_widens_to_prefix(self):
        prefix = parse_filter("2.30").as_prefix()
        assert prefix.mode is FilterMode.PREFIX
        assert prefix.prefix == (2, 30)
        assert prefix.describe() == "2.30.*"

    def test_qualified_filter_cannot_widen(self):
        release_filter = parse_filter("2.30rc1")
        assert not release_filter.can_widen_to_prefix
        with pytest.raises(ValueError):
            release_filter.as_prefix()

    def test_latest_filter_describes_itself(self):
        assert ReleaseFilter.latest().describe() == "latest"
