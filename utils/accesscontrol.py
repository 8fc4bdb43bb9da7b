"""
Access Control Module - Static role/resource/action grant table

Every mutation asks ``can(session).<action>_<possession>(resource).granted``
before touching storage. Roles, actions and possession are closed enums and
anything missing from GRANTS is denied.
"""

import enum
import unicodedata


class Role(str, enum.Enum):
    VIEWER = 'viewer'
    ADMIN = 'admin'


class Action(str, enum.Enum):
    CREATE = 'create'
    READ = 'read'
    UPDATE = 'update'
    DELETE = 'delete'


class Possession(str, enum.Enum):
    ANY = 'any'
    OWN = 'own'


GLOBAL_ROLES = [role.value for role in Role]

_CRUD_ANY = frozenset((action, Possession.ANY) for action in Action)

GRANTS = {
    Role.VIEWER: {
        'public': frozenset({(Action.READ, Possession.ANY)}),
        'cv': frozenset({(Action.READ, Possession.ANY), (Action.CREATE, Possession.OWN)}),
        'education': frozenset({(Action.READ, Possession.ANY)}),
        'experience': frozenset({(Action.READ, Possession.ANY)}),
        'project': frozenset({(Action.READ, Possession.ANY)}),
        'skill': frozenset({(Action.READ, Possession.ANY)}),
        'profile': frozenset({(Action.READ, Possession.ANY)}),
        'link': frozenset({(Action.READ, Possession.ANY)}),
    },
    Role.ADMIN: {
        'public': frozenset({(Action.READ, Possession.ANY)}),
        'user': _CRUD_ANY,
        'education': _CRUD_ANY,
        'project': _CRUD_ANY,
        'skill': _CRUD_ANY,
        'experience': _CRUD_ANY,
        'profile': _CRUD_ANY,
        'cv': _CRUD_ANY,
        'link': _CRUD_ANY,
    },
}


class Permission:
    """Outcome of a single policy lookup"""

    __slots__ = ('role', 'resource', 'action', 'possession', 'granted')

    def __init__(self, role, resource, action, possession, granted):
        self.role = role
        self.resource = resource
        self.action = action
        self.possession = possession
        self.granted = granted

    def __bool__(self):
        return self.granted

    def __repr__(self):
        return (f"Permission({self.role.value}:{self.action.value}:{self.possession.value}"
                f":{self.resource} granted={self.granted})")


def is_granted(role, resource, action, possession):
    """Pure lookup in GRANTS; an ANY grant also covers OWN."""
    try:
        role = Role(role)
    except ValueError:
        return False
    allowed = GRANTS.get(role, {}).get(resource)
    if not allowed:
        return False
    if (action, possession) in allowed:
        return True
    return possession == Possession.OWN and (action, Possession.ANY) in allowed


class Query:
    """Permission checks for one resolved role"""

    def __init__(self, role):
        self.role = role

    def _check(self, resource, action, possession):
        return Permission(self.role, resource, action, possession,
                          is_granted(self.role, resource, action, possession))

    def create_any(self, resource):
        return self._check(resource, Action.CREATE, Possession.ANY)

    def read_any(self, resource):
        return self._check(resource, Action.READ, Possession.ANY)

    def update_any(self, resource):
        return self._check(resource, Action.UPDATE, Possession.ANY)

    def delete_any(self, resource):
        return self._check(resource, Action.DELETE, Possession.ANY)

    def create_own(self, resource):
        return self._check(resource, Action.CREATE, Possession.OWN)

    def read_own(self, resource):
        return self._check(resource, Action.READ, Possession.OWN)

    def update_own(self, resource):
        return self._check(resource, Action.UPDATE, Possession.OWN)

    def delete_own(self, resource):
        return self._check(resource, Action.DELETE, Possession.OWN)


def resolve_role(session):
    """Viewer unless the session carries a role containing 'admin'"""
    if session is None:
        return Role.VIEWER
    role = getattr(session, 'role', None) or ''
    if 'admin' in role:
        return Role.ADMIN
    return Role.VIEWER


def can(session):
    """
    Build the permission query for a session

    Args:
        session: current Session or None when unauthenticated

    Returns:
        Query: exposes create_any/read_any/... returning Permission objects
    """
    return Query(resolve_role(session))


def format_role(role):
    """'aidant-particulier' -> 'Aidant Particulier'"""
    return ' '.join(word[:1].upper() + word[1:] for word in role.split('-'))


def normalize_role(role):
    """Lowercase and strip diacritics: 'Aidant-Particulièr' -> 'aidant-particulier'"""
    decomposed = unicodedata.normalize('NFD', role)
    stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower()


__all__ = [
    'Role', 'Action', 'Possession', 'GRANTS', 'GLOBAL_ROLES',
    'Permission', 'Query', 'can', 'is_granted', 'resolve_role',
    'format_role', 'normalize_role',
]
