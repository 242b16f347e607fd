import pytest

from access import session
from access.exceptions import PolicyPreconditionError
from access.policy import Subject

CHEF = Subject(id='u1', role='chef')


def test_missing_reference_is_anonymous():
    assert session.resolve(None, lambda ref: CHEF) is session.ANONYMOUS
    assert session.resolve('', lambda ref: CHEF) is session.ANONYMOUS


def test_resolved_reference_is_authenticated():
    state = session.resolve('token', lambda ref: CHEF)

    assert state == session.Authenticated(CHEF)
    assert session.subject_of(state) == CHEF
    assert session.is_resolved(state)


def test_unknown_record_is_anonymous():
    assert session.resolve('token', lambda ref: None) is session.ANONYMOUS


def test_lookup_failure_is_anonymous():
    def broken(ref):
        raise LookupError('нет такой записи')

    assert session.resolve('token', broken) is session.ANONYMOUS


def test_custom_resolution_errors():
    class FetchError(Exception):
        pass

    def broken(ref):
        raise FetchError('сеть недоступна')

    state = session.resolve(
        'token', broken, errors=session.RESOLUTION_ERRORS + (FetchError,)
    )

    assert state is session.ANONYMOUS


def test_unexpected_errors_propagate():
    def broken(ref):
        raise RuntimeError('ошибка в коде')

    with pytest.raises(RuntimeError):
        session.resolve('token', broken)


def test_unresolved_state():
    assert not session.is_resolved(session.UNRESOLVED)
    with pytest.raises(PolicyPreconditionError):
        session.subject_of(session.UNRESOLVED)


def test_logout():
    state = session.Authenticated(CHEF)

    assert session.logout(state) is session.ANONYMOUS
    assert session.logout(session.ANONYMOUS) is session.ANONYMOUS
    with pytest.raises(PolicyPreconditionError):
        session.logout(session.UNRESOLVED)
