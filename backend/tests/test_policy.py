import pytest

from access import session
from access.exceptions import PolicyPreconditionError
from access.policy import (ALLOW, DENY_FORBIDDEN, DENY_UNAUTHENTICATED, GUEST,
                           HOME_ROUTE, LOGIN_ROUTE, Allow, Deny, Reason,
                           Resource, Role, Subject, authorize_recipe_change,
                           authorize_recipe_create, can_access_protected,
                           can_access_role, can_delete_recipe,
                           can_edit_recipe, can_manage_recipes)

RECIPES = [
    Resource(id='r1', owner_id='u1'),
    Resource(id='r2', owner_id='u2'),
    Resource(id='r3', owner_id='u9'),
]


def test_chef_edits_only_own_recipe():
    chef = Subject(id='u1', role='chef')

    assert can_edit_recipe(chef, Resource(id='r1', owner_id='u1')) is True
    assert can_edit_recipe(chef, Resource(id='r2', owner_id='u2')) is False


def test_admin_edits_anyone_recipe():
    admin = Subject(id='u9', role='admin')

    assert can_edit_recipe(admin, Resource(id='r2', owner_id='u2')) is True


@pytest.mark.parametrize('recipe', RECIPES)
def test_admin_can_edit_and_delete_every_recipe(recipe):
    admin = Subject(id='u9', role=Role.ADMIN)

    assert can_edit_recipe(admin, recipe)
    assert can_delete_recipe(admin, recipe)


@pytest.mark.parametrize('recipe', RECIPES)
def test_plain_user_never_edits_even_own_recipe(recipe):
    user = Subject(id='u1', role='user')

    assert can_manage_recipes(user) is False
    assert can_edit_recipe(user, recipe) is False
    assert can_delete_recipe(user, recipe) is False


def test_delete_shares_edit_predicate():
    assert can_delete_recipe is can_edit_recipe


@pytest.mark.parametrize('role, expected', [
    ('user', False),
    ('chef', True),
    ('admin', True),
])
def test_can_manage_recipes_by_role(role, expected):
    assert can_manage_recipes(Subject(id='u1', role=role)) is expected


def test_absent_subject_is_denied_everywhere():
    assert can_access_protected(None) == DENY_UNAUTHENTICATED
    assert can_access_role(None, {'admin'}) == Deny(
        Reason.UNAUTHENTICATED, LOGIN_ROUTE
    )
    assert can_manage_recipes(None) is False
    assert can_edit_recipe(None, RECIPES[0]) is False
    assert can_delete_recipe(None, RECIPES[0]) is False
    assert authorize_recipe_create(None) == DENY_UNAUTHENTICATED
    assert authorize_recipe_change(None, RECIPES[0]) == DENY_UNAUTHENTICATED


def test_any_role_may_access_protected_pages():
    for role in Role:
        assert can_access_protected(Subject(id='u1', role=role)) is ALLOW


def test_role_outside_allowed_set_is_forbidden():
    user = Subject(id='u1', role='user')

    decision = can_access_role(user, {'admin'})

    assert decision == Deny(Reason.FORBIDDEN, HOME_ROUTE)
    assert decision.redirect == '/'


def test_roles_have_no_hierarchy():
    admin = Subject(id='u9', role='admin')

    assert can_access_role(admin, {'chef'}) == DENY_FORBIDDEN
    assert isinstance(can_access_role(admin, {'chef', 'admin'}), Allow)


def test_decisions_are_truthy_and_falsy():
    assert ALLOW
    assert not DENY_FORBIDDEN
    assert not DENY_UNAUTHENTICATED


def test_denial_messages_differ_by_reason():
    assert DENY_UNAUTHENTICATED.message != DENY_FORBIDDEN.message


def test_same_inputs_same_decision():
    chef = Subject(id='u1', role='chef')
    recipe = Resource(id='r2', owner_id='u2')

    assert can_access_role(chef, {'admin'}) == can_access_role(
        chef, {'admin'}
    )
    assert can_edit_recipe(chef, recipe) == can_edit_recipe(chef, recipe)
    assert authorize_recipe_change(chef, recipe) == DENY_FORBIDDEN


def test_user_cannot_create_recipes():
    assert authorize_recipe_create(Subject(id='u1', role='user')) == (
        DENY_FORBIDDEN
    )
    assert authorize_recipe_create(Subject(id='u1', role='chef')) is ALLOW


def test_ids_compared_after_normalization():
    chef = Subject(id=7, role='chef')

    assert can_edit_recipe(chef, Resource(id=1, owner_id='7'))


def test_unknown_role_rejected():
    with pytest.raises(ValueError):
        Subject(id='u1', role='guest')


def test_resource_scoped_check_requires_recipe():
    chef = Subject(id='u1', role='chef')

    with pytest.raises(PolicyPreconditionError):
        can_edit_recipe(chef, None)
    with pytest.raises(PolicyPreconditionError):
        authorize_recipe_change(chef, None)


def test_unresolved_state_cannot_be_evaluated():
    with pytest.raises(PolicyPreconditionError):
        can_access_protected(session.UNRESOLVED)
    with pytest.raises(PolicyPreconditionError):
        can_manage_recipes(session.UNRESOLVED)


def test_auth_states_are_accepted_as_subjects():
    chef = Subject(id='u1', role='chef')
    recipe = Resource(id='r1', owner_id='u1')

    assert can_edit_recipe(session.Authenticated(chef), recipe)
    assert can_access_protected(session.ANONYMOUS) == DENY_UNAUTHENTICATED


def test_guest_in_allowed_roles_never_matches():
    assert can_access_role(Subject(id='u1', role='user'), {GUEST}) == (
        DENY_FORBIDDEN
    )
    assert can_access_role(None, {GUEST}) == DENY_UNAUTHENTICATED
    assert can_access_role(Subject(id='u1', role='chef'), {GUEST, 'chef'})
