"""
Host adapter

Wires an UpdaterEngine into a filter-style host. Filters are named
callbacks that receive a value, may replace it, and pass it on.

Example:
    hooks = HookRegistry()
    register(engine, hooks)

    transient = UpdateTransient(checked={"widget/widget.php": "2.5.1"})
    transient = hooks.apply_filters(UPDATE_CHECK_FILTER, transient)
"""

import logging
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable

from plugin_updater.update.engine import UpdaterEngine
from plugin_updater.update.models import CheckRequest

logger = logging.getLogger(__name__)

UPDATE_CHECK_FILTER = "pre_set_site_transient_update_plugins"
REQUEST_ARGS_FILTER = "http_request_args"
PLUGINS_API_FILTER = "plugins_api"
SOURCE_SELECTION_FILTER = "upgrader_source_selection"


class HookRegistry:
    """
    Minimal filter registry

    Callbacks run in ascending priority, then in registration order.
    """

    def __init__(self):
        self._filters: dict[str, list[tuple[int, int, Callable[..., Any]]]] = {}
        self._sequence = count()

    def add_filter(self, name: str, callback: Callable[..., Any], priority: int = 10) -> None:
        self._filters.setdefault(name, []).append((priority, next(self._sequence), callback))
        self._filters[name].sort(key=lambda item: (item[0], item[1]))

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """Pass value through every callback registered for name"""
        for _, _, callback in self._filters.get(name, []):
            value = callback(value, *args)
        return value


@dataclass
class UpdateTransient:
    """
    The host's mutable update state

    Attributes:
        checked: basename -> installed version (None when not a check run)
        response: basename -> update record for plugins with updates
        no_update: basename -> plugin metadata for plugins without updates
    """

    checked: dict[str, str] | None = None
    response: dict[str, dict] = field(default_factory=dict)
    no_update: dict[str, dict] = field(default_factory=dict)


@dataclass
class RequestArgs:
    """Outbound request arguments passed through http_request_args"""

    headers: dict[str, str] = field(default_factory=dict)
    timeout: float = 10.0
    sslverify: bool = True


def register(engine: UpdaterEngine, hooks: HookRegistry) -> None:
    """Attach the engine's capabilities to the host filters"""

    def update_check(transient: UpdateTransient) -> UpdateTransient:
        if not isinstance(transient, UpdateTransient) or transient.checked is None:
            return transient

        basename = engine.identity.basename
        installed = transient.checked.get(basename, "")
        request = CheckRequest(engine.identity.with_installed_version(installed))
        result = engine.on_update_check(request)

        if result.descriptor is not None:
            transient.response[basename] = result.descriptor.to_dict()
            transient.no_update.pop(basename, None)
        elif result.no_update is not None:
            transient.response.pop(basename, None)
            if not result.no_update.plugin_data.is_empty:
                transient.no_update[basename] = result.no_update.plugin_data.to_dict()
        return transient

    def request_args(args: RequestArgs, url: str) -> RequestArgs:
        args.headers = engine.on_authorize_request(url, args.headers)
        return args

    def plugins_api(result: Any, action: str, args: dict) -> Any:
        info = engine.on_plugin_information(action, (args or {}).get("slug"))
        return info if info is not None else result

    def source_selection(source: str, remote_source: str, upgrader: Any, hook_extra: dict) -> str:
        return engine.on_post_extract(source, remote_source, hook_extra)

    hooks.add_filter(UPDATE_CHECK_FILTER, update_check)
    hooks.add_filter(REQUEST_ARGS_FILTER, request_args, priority=10)
    hooks.add_filter(PLUGINS_API_FILTER, plugins_api, priority=10)
    hooks.add_filter(SOURCE_SELECTION_FILTER, source_selection, priority=20)

    logger.debug(f"Registered update hooks for {engine.identity.basename}")
