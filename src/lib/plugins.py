"""
Render hooks for compiled documents

A plugin is a named pair of optional callbacks: on_register() runs once
when hooks are registered, on_render(bytes) -> bytes post-processes the
finished HTML. Render hooks run in the order plugins were added, each
receiving the previous hook's output as UTF-8 bytes.

Example:
    >>> manager = PluginManager()
    >>> manager.plugin_add(Plugin(name="upper", on_render=bytes.upper))
    >>> manager.hooks_apply("<p>hi</p>")
    '<P>HI</P>'
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .log import LOG


RenderHook = Callable[[bytes], bytes]
RegisterHook = Callable[[], None]


class PluginError(Exception):
    """Raised when a render hook returns something other than bytes"""
    pass


@dataclass
class Plugin:
    """
    A named set of hooks

    Attributes:
        name: Plugin name, used in log messages
        on_register: Called once by hooks_register()
        on_render: Transforms the rendered HTML bytes
    """
    name: str
    on_register: Optional[RegisterHook] = None
    on_render: Optional[RenderHook] = None


@dataclass
class PluginManager:
    """Ordered list of plugins"""
    plugins: List[Plugin] = field(default_factory=list)

    def plugin_add(self, plugin: Plugin) -> None:
        """Append a plugin; hooks run in insertion order"""
        self.plugins.append(plugin)

    def hook_add(self, name: str, on_render: RenderHook) -> None:
        """Append a plugin that only has a render hook"""
        self.plugin_add(Plugin(name=name, on_render=on_render))

    def hooks_register(self) -> None:
        """Run every on_register hook"""
        for plugin in self.plugins:
            if plugin.on_register is not None:
                LOG(f"Registering plugin '{plugin.name}'", level=3)
                plugin.on_register()

    def renderHooks_apply(self, data: bytes) -> bytes:
        """
        Thread bytes through every on_render hook

        Args:
            data: Rendered HTML as UTF-8 bytes

        Returns:
            Output of the last hook (data unchanged when there are none)

        Raises:
            PluginError: If a hook returns a non-bytes value
        """
        result = data
        for plugin in self.plugins:
            if plugin.on_render is None:
                continue
            result = plugin.on_render(result)
            if not isinstance(result, (bytes, bytearray)):
                raise PluginError(
                    f"Render hook of plugin '{plugin.name}' returned "
                    f"{type(result).__name__}, expected bytes"
                )
            result = bytes(result)
            LOG(f"Applied render hook '{plugin.name}'", level=3)
        return result

    def hooks_apply(self, html: str) -> str:
        """Apply render hooks to an HTML string"""
        return self.renderHooks_apply(html.encode('utf-8')).decode('utf-8', errors='replace')
