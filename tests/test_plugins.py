"""
Plugin hook tests

Hooks are exercised with explicit spy objects that record their calls.
"""

import pytest

from docz.lib.plugins import Plugin, PluginError, PluginManager


class RenderSpy:
    """Render hook that records its input and applies a transform"""

    def __init__(self, transform=lambda data: data):
        self.calls = []
        self.transform = transform

    def __call__(self, data):
        self.calls.append(data)
        return self.transform(data)


class RegisterSpy:
    """Register hook that counts invocations"""

    def __init__(self):
        self.count = 0

    def __call__(self):
        self.count += 1


class TestPluginManager:
    """Test hook registration and application"""

    def test_no_plugins_is_identity(self):
        """Without hooks the html is returned unchanged"""
        assert PluginManager().hooks_apply("<p>x</p>") == "<p>x</p>"

    def test_render_hook_receives_bytes(self):
        """Hooks receive the UTF-8 bytes of the html"""
        spy = RenderSpy()
        manager = PluginManager()
        manager.hook_add("spy", spy)
        assert manager.hooks_apply("<p>é</p>") == "<p>é</p>"
        assert spy.calls == ["<p>é</p>".encode("utf-8")]

    def test_hooks_chain_in_order(self):
        """Each hook sees the previous hook's output"""
        first = RenderSpy(lambda data: data.replace(b"a", b"b"))
        second = RenderSpy(lambda data: data + b"!")
        manager = PluginManager()
        manager.hook_add("first", first)
        manager.hook_add("second", second)
        assert manager.hooks_apply("aa") == "bb!"
        assert second.calls == [b"bb"]

    def test_register_hooks(self):
        """on_register runs once per hooks_register() call"""
        register = RegisterSpy()
        render = RenderSpy()
        manager = PluginManager()
        manager.plugin_add(Plugin(name="both", on_register=register, on_render=render))
        manager.plugin_add(Plugin(name="none"))
        manager.hooks_register()
        assert register.count == 1
        assert render.calls == []

    def test_plugin_without_render_hook_skipped(self):
        """Plugins lacking on_render leave the html alone"""
        manager = PluginManager()
        manager.plugin_add(Plugin(name="quiet"))
        assert manager.renderHooks_apply(b"data") == b"data"

    def test_non_bytes_result_rejected(self):
        """A hook returning str raises PluginError"""
        manager = PluginManager()
        manager.hook_add("bad", lambda data: data.decode("utf-8"))
        with pytest.raises(PluginError, match="bad"):
            manager.hooks_apply("<p>x</p>")
