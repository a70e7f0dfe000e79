"""Build account lookup."""

import grp
import logging
from typing import Callable

logger = logging.getLogger(__name__)

GroupLookup = Callable[[str], grp.struct_group]


def list_build_accounts(group_name: str, lookup: GroupLookup = grp.getgrnam) -> set[str]:
    """
    Return the user names that are members of the build group.

    A missing group is not an error; it just means no builds can run.
    """
    try:
        group = lookup(group_name)
    except KeyError:
        logger.debug("group %s does not exist", group_name)
        return set()
    return set(group.gr_mem)
