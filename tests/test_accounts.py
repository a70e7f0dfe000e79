"""Tests for build account lookup."""

import grp

from nixtop.accounts import list_build_accounts


def make_lookup(groups: dict[str, list[str]]):
    def lookup(name: str) -> grp.struct_group:
        if name not in groups:
            raise KeyError(name)
        return grp.struct_group((name, "x", 30000, groups[name]))

    return lookup


class TestListBuildAccounts:
    """Tests for list_build_accounts."""

    def test_returns_members(self):
        """Test every member of the group is returned."""
        lookup = make_lookup({"nixbld": ["nixbld1", "nixbld2", "nixbld3"]})

        assert list_build_accounts("nixbld", lookup) == {"nixbld1", "nixbld2", "nixbld3"}

    def test_deduplicates_members(self):
        """Test duplicated member entries collapse to one name."""
        lookup = make_lookup({"nixbld": ["nixbld1", "nixbld1", "nixbld2"]})

        accounts = list_build_accounts("nixbld", lookup)
        assert accounts == {"nixbld1", "nixbld2"}
        assert len(accounts) == 2

    def test_missing_group_is_empty(self):
        """Test a nonexistent group yields no accounts instead of an error."""
        lookup = make_lookup({})

        assert list_build_accounts("nixbld", lookup) == set()

    def test_group_without_members_is_empty(self):
        """Test a group with no members yields no accounts."""
        lookup = make_lookup({"nixbld": []})

        assert list_build_accounts("nixbld", lookup) == set()

    def test_default_lookup_uses_group_database(self):
        """Test the real group database is consulted by default."""
        assert list_build_accounts("nixtop-no-such-group") == set()
