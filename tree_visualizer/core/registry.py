"""
Plugin registry for layout strategies.

Layout modules register themselves on import:

    @register_layout("radial")
    class RadialLayout(LayoutStrategy):
        ...

and callers resolve them by name with LayoutRegistry.create("radial", config).
Names are case-insensitive.
"""

from typing import Dict, Type, Optional, List, Any, Callable
import logging

logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    Name -> class table shared by one plugin family.

    Each subclass must declare its own _plugins dict so families stay apart.
    """

    _plugins: Dict[str, Type] = {}
    _plugin_type: str = "plugin"

    @classmethod
    def register(cls, name: str) -> Callable[[Type], Type]:
        """Class decorator adding the class under name."""
        key = name.lower()

        def decorator(plugin_class: Type) -> Type:
            previous = cls._plugins.get(key)
            if previous is not None and previous is not plugin_class:
                logger.warning(
                    f"[Registry] {cls._plugin_type} '{key}' re-registered: "
                    f"{previous.__name__} -> {plugin_class.__name__}"
                )
            cls._plugins[key] = plugin_class
            plugin_class._registry_name = key
            return plugin_class
        return decorator

    @classmethod
    def get(cls, name: str) -> Optional[Type]:
        return cls._plugins.get(name.lower())

    @classmethod
    def list_names(cls) -> List[str]:
        return list(cls._plugins)

    @classmethod
    def has(cls, name: str) -> bool:
        return name.lower() in cls._plugins

    @classmethod
    def create(cls, name: str, *args, **kwargs) -> Any:
        """
        Instantiate the plugin registered under name.

        Raises:
            KeyError: If nothing is registered under name
        """
        plugin_class = cls.get(name)
        if plugin_class is None:
            raise KeyError(
                f"Unknown {cls._plugin_type} '{name}'. "
                f"Available: {', '.join(cls.list_names())}"
            )
        return plugin_class(*args, **kwargs)


class LayoutRegistry(PluginRegistry):
    """Registry for layout strategy plugins."""
    _plugins: Dict[str, Type] = {}
    _plugin_type: str = "layout"


def register_layout(name: str) -> Callable[[Type], Type]:
    """Decorator registering a LayoutStrategy subclass."""
    return LayoutRegistry.register(name)
