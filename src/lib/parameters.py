"""
Parameter initialization

Turns the parameter triples supplied by a host into a frozen FilterConfig.
This is a pure function of its inputs: it builds a fresh SettingsStore and
SearchPath, applies every parameter in order and materializes the result.
"""

from typing import Any, Iterable, Optional

from ..models.filter import FilterConfig
from ..models.parameters import Parameter, ParameterKind, SEARCHDIR_KEY
from .settings_store import SettingsStore
from .search_path import SearchPath
from .properties import properties_load
from .log import LOG


def parameter_apply(parameter: Parameter, store: SettingsStore, search_path: SearchPath) -> None:
    """
    Apply one parameter to the settings store or search path

    Parameters of an unknown kind are ignored.

    Raises:
        ConfigurationError: If the parameter carries an empty key or directory,
                            or names an unreadable properties file
    """
    kind = parameter.kind_resolve()
    if kind is ParameterKind.SETTING:
        store.set(parameter.name, parameter.value)
    elif kind is ParameterKind.SEARCHDIR:
        search_path.add(parameter.value)
    elif kind is ParameterKind.PROPERTIESFILE:
        for name, value in properties_load(parameter.value or "").items():
            if name.strip() == SEARCHDIR_KEY:
                search_path.add(value)
            else:
                store.set(name, value)
    else:
        LOG(f"Ignoring parameter of unknown kind {parameter.kind!r}", level=2)


def config_build(parameters: Iterable[Optional[Parameter]], appsettings: Any = None) -> FilterConfig:
    """
    Build the frozen filter configuration from host parameters

    Args:
        parameters: Parameters in the order the host supplied them; None
                    entries are skipped
        appsettings: AppSettings supplying reserved-key defaults, include
                     encoding and line separator (package singleton if None)

    Returns:
        FilterConfig ready for IncludeResolver

    Raises:
        ConfigurationError: If any parameter or the resulting settings are
                            invalid
    """
    if appsettings is None:
        from ..config import appsettings

    store = SettingsStore(defaults=appsettings.defaults_asSettings())
    search_path = SearchPath()

    for parameter in parameters:
        if parameter is not None:
            parameter_apply(parameter, store, search_path)

    config = FilterConfig(
        settings=store.materialize(),
        search_dirs=search_path.freeze(),
        encoding=appsettings.include_encoding,
        line_separator=appsettings.line_separator,
    )
    LOG(f"Search path: {list(config.search_dirs)}", level=2)
    return config
