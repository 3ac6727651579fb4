"""Hypothesis strategies for property testing.

Provides reusable composite strategies for generating session user records
and permission tables that match the access control data contracts.
"""

from hypothesis import strategies as st

from src.access.auth.enums import LEGACY_FLAG_ROLES, Permission, Role

roles = st.sampled_from(list(Role))
permissions = st.sampled_from(list(Permission))
role_lists = st.lists(roles, max_size=8)


@st.composite
def legacy_flags(draw, include_unknown=True):
    """Generate a legacy flag mapping.

    Args:
        draw: Hypothesis draw function
        include_unknown: Also generate flags outside the catalog

    Returns:
        dict: camelCase flag name -> bool, each flag possibly missing
    """
    flags = {}
    for flag in LEGACY_FLAG_ROLES:
        if draw(st.booleans()):
            flags[flag] = draw(st.booleans())

    if include_unknown and draw(st.booleans()):
        flags[draw(st.sampled_from(["isGuest", "isRoot", "isOwner"]))] = True

    return flags


@st.composite
def canonical_user(draw):
    """Generate a raw record with a roles list and arbitrary legacy flags.

    Returns:
        dict: Session record where the roles list must win
    """
    record = draw(legacy_flags())
    record["roles"] = [role.value for role in draw(role_lists)]
    return record


@st.composite
def any_user(draw):
    """Generate an absent, legacy-only or canonical session record."""
    return draw(
        st.one_of(
            st.none(),
            legacy_flags(),
            canonical_user(),
        )
    )


@st.composite
def permission_table_data(draw):
    """Generate configuration data for a permission table.

    Returns:
        dict: role value -> list of permission values (duplicates allowed,
        some roles possibly missing)
    """
    data = {}
    for role in Role:
        if draw(st.booleans()):
            data[role.value] = [
                perm.value for perm in draw(st.lists(permissions, max_size=6))
            ]
    return data
