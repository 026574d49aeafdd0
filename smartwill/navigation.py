"""
Navigation Registry

Catalog of application sections ("tabs") and the mapping from role to the
tabs that role may open.

Resolution Rules:
=================

1. The catalog order is canonical. Resolved tabs always follow it, whatever
   order ids were declared in a role's allow-list.
2. A role only ever sees tabs whose id is on its allow-list.
3. No tab appears twice in a resolved list.
4. An unknown role is a programming error (ConfigurationError). Roles are
   validated by the authentication gateway before they reach this module.

Configuration Checks:
=====================
- Duplicate catalog ids and roles missing from the role map always fail.
- Strict mode (default): allow-list ids missing from the catalog, or listed
  twice, fail at construction.
- Lenient mode: the same problems are logged once and silently filtered
  during resolution.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Navigation catalog or role map is internally inconsistent."""


class Role(str, Enum):
    """Authorization class of the current user."""
    OWNER = 'owner'
    HEIR = 'heir'
    VERIFIER = 'verifier'

    @classmethod
    def parse(cls, value: str) -> 'Role':
        """Convert boundary input to a Role. Raises ValueError if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f'Unknown role: {value!r}')
        return cls(value.strip().lower())


@dataclass(frozen=True)
class NavigationTab:
    """A navigable section of the application."""
    id: str
    label: str
    href: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        data = {'id': self.id, 'label': self.label}
        if self.href is not None:
            data['href'] = self.href
        return data


# Canonical catalog order - resolution never reorders this
TAB_CATALOG: Tuple[NavigationTab, ...] = (
    NavigationTab('dashboard', 'Dashboard'),
    NavigationTab('create', 'Create Will'),
    NavigationTab('drafts-versions', 'Drafts & Versions'),
    NavigationTab('review-preview', 'Review & Preview'),
    NavigationTab('deploy', 'Deploy'),
    NavigationTab('assets', 'Assets'),
    NavigationTab('legacy', 'Legacy Vault'),
    NavigationTab('ai-advisor', 'AI Advisor'),
    NavigationTab('security', 'Security'),
    NavigationTab('heir-view', 'Heir View'),
    NavigationTab('verifier-dashboard', 'Verifier Dashboard'),
)

ROLE_NAVIGATION: Dict[Role, Tuple[str, ...]] = {
    Role.OWNER: (
        'dashboard',
        'create',
        'drafts-versions',
        'review-preview',
        'deploy',
        'assets',
        'legacy',
        'ai-advisor',
        'security',
        'heir-view',
        'verifier-dashboard',
    ),
    Role.HEIR: ('dashboard', 'heir-view', 'assets', 'legacy'),
    Role.VERIFIER: ('dashboard', 'verifier-dashboard'),
}


def _coerce_role(role: Union[Role, str]) -> Role:
    try:
        return Role.parse(role)
    except ValueError:
        raise ConfigurationError(f'Unknown role requested from navigation registry: {role!r}')


@dataclass(frozen=True)
class NavigationConfig:
    """
    Immutable navigation configuration.

    Built once during process initialization. Construction runs the
    configuration self-check and raises ConfigurationError on failure.
    """
    catalog: Tuple[NavigationTab, ...]
    role_map: Mapping[Role, Tuple[str, ...]]
    strict: bool = True
    _allowed: Mapping[Role, frozenset] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        catalog = tuple(self.catalog)
        role_map = {}
        for role, tab_ids in dict(self.role_map).items():
            role_map[_coerce_role(role)] = tuple(tab_ids)

        object.__setattr__(self, 'catalog', catalog)
        object.__setattr__(self, 'role_map', MappingProxyType(role_map))
        object.__setattr__(self, '_allowed', MappingProxyType(
            {role: frozenset(tab_ids) for role, tab_ids in role_map.items()}
        ))

        self._check_structure()

        problems = self.problems()
        if problems:
            if self.strict:
                raise ConfigurationError(
                    'Navigation configuration failed self-check: ' + '; '.join(problems)
                )
            for problem in problems:
                logger.warning(f'Navigation configuration (lenient mode): {problem}')

    def _check_structure(self):
        """Checks that fail in every mode."""
        seen = set()
        for tab in self.catalog:
            if tab.id in seen:
                raise ConfigurationError(f'Duplicate tab id in catalog: {tab.id!r}')
            seen.add(tab.id)

        missing = [role.value for role in Role if role not in self.role_map]
        if missing:
            raise ConfigurationError(f'Role map has no entry for: {", ".join(missing)}')

    def problems(self) -> List[str]:
        """Referential-integrity problems in the role allow-lists."""
        catalog_ids = {tab.id for tab in self.catalog}
        problems = []
        for role in Role:
            declared = self.role_map[role]
            seen = set()
            for tab_id in declared:
                if tab_id in seen:
                    problems.append(f'{role.value}: tab {tab_id!r} listed more than once')
                    continue
                seen.add(tab_id)
                if tab_id not in catalog_ids:
                    problems.append(f'{role.value}: tab {tab_id!r} is not in the catalog')
        return problems

    def allowed_ids(self, role: Role) -> frozenset:
        return self._allowed[role]


class NavigationRegistry:
    """Resolves the tabs a role is authorized to see."""

    def __init__(self, config: NavigationConfig):
        self._config = config
        self._by_id = {tab.id: tab for tab in config.catalog}

    @property
    def config(self) -> NavigationConfig:
        return self._config

    def catalog(self) -> Tuple[NavigationTab, ...]:
        return self._config.catalog

    def get_tab(self, tab_id: str) -> Optional[NavigationTab]:
        return self._by_id.get(tab_id)

    def resolve_tabs_for_role(self, role: Union[Role, str]) -> Tuple[NavigationTab, ...]:
        """
        Return the tabs a role may see, in catalog order.

        Iterates the catalog (not the allow-list), so declaration order in
        the role map never leaks into the result and ids absent from the
        catalog drop out.
        """
        allowed = self._config.allowed_ids(_coerce_role(role))
        return tuple(tab for tab in self._config.catalog if tab.id in allowed)

    def default_tabs(self) -> Tuple[NavigationTab, ...]:
        """Single global tab list for callers that predate per-role navigation."""
        return self.resolve_tabs_for_role(Role.OWNER)

    def is_tab_allowed(self, role: Union[Role, str], tab_id: str) -> bool:
        return any(tab.id == tab_id for tab in self.resolve_tabs_for_role(role))

    def select_tab(self, role: Union[Role, str],
                   requested_tab_id: Optional[str] = None) -> Optional[NavigationTab]:
        """
        Pick the tab the shell should display.

        Returns the requested tab if the role may see it, otherwise the first
        tab the role may see. None only when the role sees nothing.
        """
        tabs = self.resolve_tabs_for_role(role)
        if requested_tab_id:
            for tab in tabs:
                if tab.id == requested_tab_id:
                    return tab
        return tabs[0] if tabs else None


def build_config(strict: bool = True,
                 catalog: Optional[Iterable[NavigationTab]] = None,
                 role_map: Optional[Mapping[Union[Role, str], Iterable[str]]] = None) -> NavigationConfig:
    """Build a NavigationConfig, defaulting to the shipped catalog and role map."""
    return NavigationConfig(
        catalog=tuple(catalog) if catalog is not None else TAB_CATALOG,
        role_map=role_map if role_map is not None else ROLE_NAVIGATION,
        strict=strict,
    )


def build_registry(strict: bool = True) -> NavigationRegistry:
    """Build a registry over the shipped configuration."""
    return NavigationRegistry(build_config(strict=strict))


@lru_cache(maxsize=None)
def get_default_registry() -> NavigationRegistry:
    """Process-wide registry over the shipped configuration, built on first use."""
    return build_registry(strict=True)


def resolve_tabs_for_role(role: Union[Role, str]) -> Tuple[NavigationTab, ...]:
    return get_default_registry().resolve_tabs_for_role(role)


def default_tabs() -> Tuple[NavigationTab, ...]:
    return get_default_registry().default_tabs()


def tabs_to_dicts(tabs: Iterable[NavigationTab]) -> List[Dict[str, Optional[str]]]:
    return [tab.to_dict() for tab in tabs]
